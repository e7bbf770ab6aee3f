"""Frame composer for the stop departure board."""

from __future__ import annotations

from PIL import Image, ImageDraw, ImageFont

from stop_board.data.refresh import BoardState
from stop_board.rendering.board import DEFAULT_STACK_SIZE, DisplayRow, format_board

DISPLAY_WIDTH = 480
ROW_HEIGHT = 28
HEADER_HEIGHT = 32
FOOTER_HEIGHT = 20
ROW_PADDING = 4
BADGE_WIDTH = 56
STACK_SLOT_WIDTH = 44
PRIMARY_SLOT_WIDTH = 56
TEXT_INSET = 4

COLOR_BACKGROUND = (0, 0, 0)
COLOR_HEADER = (2, 6, 23)
COLOR_TEXT = (249, 250, 251)
COLOR_DIM_TEXT = (148, 163, 184)
COLOR_BADGE = (226, 232, 240)
COLOR_BADGE_TEXT = (17, 24, 39)
COLOR_DUE = (0, 200, 0)
COLOR_ERROR = (127, 29, 29)
COLOR_ROW_LINE = (15, 23, 42)

LOADING_TEXT = "Loading..."
NO_DATA_TEXT = "No data available."
NO_DEPARTURES_TEXT = "No upcoming departures"

FONT = ImageFont.load_default()


def board_height(row_count: int, row_height: int = ROW_HEIGHT) -> int:
    """Image height for a board with ``row_count`` rows (at least one row tall)."""
    return HEADER_HEIGHT + max(row_count, 1) * row_height + FOOTER_HEIGHT


def _text_size(draw: ImageDraw.ImageDraw, text: str) -> tuple[int, int]:
    bbox = draw.textbbox((0, 0), text, font=FONT)
    return bbox[2] - bbox[0], bbox[3] - bbox[1]


def _fit_text(draw: ImageDraw.ImageDraw, text: str, max_width: int) -> str:
    if _text_size(draw, text)[0] <= max_width:
        return text
    while text and _text_size(draw, f"{text}...")[0] > max_width:
        text = text[:-1]
    return f"{text}..."


def _draw_centered_message(
    draw: ImageDraw.ImageDraw, text: str, top: int, width: int, height: int, fill: tuple[int, int, int]
) -> None:
    draw.rectangle((ROW_PADDING, top + 2, width - ROW_PADDING - 1, top + height - 3), fill=fill)
    text = _fit_text(draw, text, width - 4 * ROW_PADDING)
    text_width, text_height = _text_size(draw, text)
    x = max((width - text_width) // 2, ROW_PADDING + TEXT_INSET)
    y = top + (height - text_height) // 2
    draw.text((x, y), text, font=FONT, fill=COLOR_TEXT)


def _draw_row(
    draw: ImageDraw.ImageDraw, row: DisplayRow, top: int, width: int, row_height: int, stack_size: int
) -> None:
    badge_right = ROW_PADDING + BADGE_WIDTH - 1
    draw.rectangle((ROW_PADDING, top + 2, badge_right, top + row_height - 3), fill=COLOR_BADGE)

    _, text_height = _text_size(draw, row.route_key or "?")
    text_y = top + (row_height - text_height) // 2
    draw.text(
        (ROW_PADDING + TEXT_INSET, text_y),
        _fit_text(draw, row.route_key, BADGE_WIDTH - 2 * TEXT_INSET),
        font=FONT,
        fill=COLOR_BADGE_TEXT,
    )

    stack_left = width - ROW_PADDING - stack_size * STACK_SLOT_WIDTH
    primary_left = stack_left - PRIMARY_SLOT_WIDTH
    label_left = badge_right + 1 + 2 * TEXT_INSET
    label = _fit_text(draw, row.label, primary_left - label_left - TEXT_INSET)
    draw.text((label_left, text_y), label, font=FONT, fill=COLOR_TEXT)

    primary_color = COLOR_DUE if row.primary_minutes is not None and row.primary_minutes <= 0 else COLOR_TEXT
    draw.text((primary_left, text_y), row.primary_label, font=FONT, fill=primary_color)
    for idx, stacked in enumerate(row.stack_labels[:stack_size]):
        draw.text((stack_left + idx * STACK_SLOT_WIDTH, text_y), stacked, font=FONT, fill=COLOR_DIM_TEXT)

    draw.line((0, top + row_height - 1, width - 1, top + row_height - 1), fill=COLOR_ROW_LINE)


def compose_board(
    state: BoardState | None,
    width: int = DISPLAY_WIDTH,
    row_height: int = ROW_HEIGHT,
    stack_size: int = DEFAULT_STACK_SIZE,
) -> Image.Image:
    """Compose an RGB frame for the board.

    ``None`` renders the loading screen. A state carrying an error, or with no
    schedule yet, renders the error box instead of the rows.
    """
    rows = format_board(state.schedule, stack_size) if state and state.schedule else []
    height = board_height(len(rows), row_height)
    image = Image.new("RGB", (width, height), COLOR_BACKGROUND)
    draw = ImageDraw.Draw(image)

    draw.rectangle((0, 0, width - 1, HEADER_HEIGHT - 1), fill=COLOR_HEADER)
    body_top = HEADER_HEIGHT

    if state is None:
        _draw_centered_message(draw, LOADING_TEXT, body_top, width, row_height, COLOR_HEADER)
        return image

    if state.error or state.schedule is None:
        _draw_centered_message(draw, state.error or NO_DATA_TEXT, body_top, width, row_height, COLOR_ERROR)
        return image

    if state.stop is not None:
        stop_code = f"Stop {state.stop.stop_code}"
        code_width, code_height = _text_size(draw, stop_code)
        header_y = (HEADER_HEIGHT - code_height) // 2
        draw.text((width - ROW_PADDING - code_width, header_y), stop_code, font=FONT, fill=COLOR_DIM_TEXT)
        title = _fit_text(
            draw,
            f"Next services at {state.stop.stop_name}",
            width - code_width - 4 * ROW_PADDING,
        )
        draw.text((ROW_PADDING + TEXT_INSET, header_y), title, font=FONT, fill=COLOR_TEXT)

        footer = f"ID {state.stop.global_stop_id}"
        _, footer_height = _text_size(draw, footer)
        footer_top = height - FOOTER_HEIGHT
        draw.text(
            (ROW_PADDING + TEXT_INSET, footer_top + (FOOTER_HEIGHT - footer_height) // 2),
            _fit_text(draw, footer, width - 4 * ROW_PADDING),
            font=FONT,
            fill=COLOR_DIM_TEXT,
        )

    if not rows:
        _draw_centered_message(draw, NO_DEPARTURES_TEXT, body_top, width, row_height, COLOR_HEADER)
    for idx, row in enumerate(rows):
        _draw_row(draw, row, body_top + idx * row_height, width, row_height, stack_size)

    return image


__all__ = ["board_height", "compose_board"]
