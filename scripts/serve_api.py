"""Run the stop board HTTP service with uvicorn."""

from __future__ import annotations

import argparse
import os

import uvicorn

from stop_board.config import load_config
from stop_board.log import configure_logging


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="config/config.yaml", help="Path to the YAML config")
    args = parser.parse_args()

    os.environ["STOP_BOARD_CONFIG"] = args.config
    config = load_config(args.config)
    configure_logging(config.log)
    uvicorn.run("stop_board.api.app:app", host=config.api.host, port=config.api.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
