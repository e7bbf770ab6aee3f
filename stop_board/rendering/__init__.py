"""Board formatting and frame rendering."""

from stop_board.rendering.board import DisplayRow, format_board, format_time_label
from stop_board.rendering.composer import compose_board
from stop_board.rendering.emulator import save_frame

__all__ = ["DisplayRow", "compose_board", "format_board", "format_time_label", "save_frame"]
