"""Logging setup for the board scripts and HTTP service."""

from __future__ import annotations

import logging
from pathlib import Path

from stop_board.config import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILENAME = "stop_board.log"


def configure_logging(config: LoggingConfig) -> None:
    """Send records to stderr and to a file under ``config.log_dir``."""
    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=config.level.upper(),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8"),
        ],
    )


__all__ = ["configure_logging"]
