"""Configuration loader for the stop departure board."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

from dotenv import load_dotenv
import yaml

DEFAULT_CONFIG_PATH = "config/config.yaml"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class TransitConfig:
    """Transit API configuration."""

    api_key: str
    base_url: str
    agency_marker: str
    bias_lat: float
    bias_lon: float
    max_search_results: int
    window_minutes: int
    poll_interval_seconds: int
    request_timeout_seconds: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS


@dataclass(frozen=True)
class BoardConfig:
    """Board layout configuration for the rendered display."""

    stack_size: int
    width: int
    row_height: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class ApiConfig:
    """Bind address for the HTTP service."""

    host: str
    port: int


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    transit: TransitConfig
    board: BoardConfig
    log: LoggingConfig
    api: ApiConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = _require_key(data, name, name)
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' config must be a mapping")
    return section


def load_config(path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load application configuration from a YAML file.

    The Transit API key is read from ``TRANSIT_API_KEY`` (a ``.env`` file is
    honoured). A missing key is not a load error: lookups fail with
    ``ConfigError`` instead, so the HTTP service can still start and answer.
    """
    load_dotenv()
    api_key = os.environ.get("TRANSIT_API_KEY", "")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    transit_section = _require_section(data, "transit")
    board_section = _require_section(data, "board")
    logging_section = _require_section(data, "logging")
    api_section = _require_section(data, "api")

    timeout = transit_section.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT_SECONDS)
    transit = TransitConfig(
        api_key=api_key,
        base_url=_require_key(transit_section, "base_url", "transit"),
        agency_marker=_require_key(transit_section, "agency_marker", "transit"),
        bias_lat=float(_require_key(transit_section, "bias_lat", "transit")),
        bias_lon=float(_require_key(transit_section, "bias_lon", "transit")),
        max_search_results=_require_key(transit_section, "max_search_results", "transit"),
        window_minutes=_require_key(transit_section, "window_minutes", "transit"),
        poll_interval_seconds=_require_key(transit_section, "poll_interval_seconds", "transit"),
        request_timeout_seconds=float(timeout) if timeout is not None else None,
    )

    board = BoardConfig(
        stack_size=_require_key(board_section, "stack_size", "board"),
        width=_require_key(board_section, "width", "board"),
        row_height=_require_key(board_section, "row_height", "board"),
    )

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    api = ApiConfig(
        host=_require_key(api_section, "host", "api"),
        port=_require_key(api_section, "port", "api"),
    )

    return AppConfig(transit=transit, board=board, log=logging, api=api)


__all__ = [
    "AppConfig",
    "ApiConfig",
    "BoardConfig",
    "LoggingConfig",
    "TransitConfig",
    "DEFAULT_CONFIG_PATH",
    "load_config",
]
