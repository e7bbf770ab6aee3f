"""Live stop board: poll a stop and re-render the emulator frame on every update."""

from __future__ import annotations

import argparse
import logging
import time

from stop_board.config import load_config
from stop_board.data.refresh import BoardState, RefreshController
from stop_board.log import configure_logging
from stop_board.rendering import compose_board, format_board, save_frame
from stop_board.service import StopBoardService

logger = logging.getLogger("live_board")


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("stop_number", help="Stop number as printed on the stop sign")
    parser.add_argument("--config", default="config/config.yaml", help="Path to the YAML config")
    parser.add_argument("--output", default="emulator_output/board.png", help="Frame output path")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.log)

    def render(state: BoardState) -> None:
        image = compose_board(
            state,
            width=config.board.width,
            row_height=config.board.row_height,
            stack_size=config.board.stack_size,
        )
        save_frame(image, args.output)
        if state.error:
            logger.warning("board_error generation=%d error=%s", state.generation, state.error)
            return
        rows = format_board(state.schedule or {}, config.board.stack_size)
        logger.info(
            "board_update generation=%d stop=%s rows=%s",
            state.generation,
            state.stop.stop_code if state.stop else "?",
            [f"{row.route_key}:{row.primary_label}" for row in rows],
        )

    save_frame(compose_board(None, width=config.board.width, row_height=config.board.row_height), args.output)
    controller = RefreshController(
        StopBoardService.from_config(config.transit),
        args.stop_number,
        poll_interval_seconds=config.transit.poll_interval_seconds,
        on_update=render,
    )
    controller.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        controller.stop()
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
