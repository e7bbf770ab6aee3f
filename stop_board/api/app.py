"""
FastAPI application for the stop departure board.

Endpoints:
  GET /api/stop?stopNumber=<string>    resolved stop + schedule keyed by route
  GET /api/board?stopNumber=<string>   the same stop as ordered board rows
  GET /healthz

Every lookup resolves the stop and fetches departures again; nothing is
cached, and responses are marked ``Cache-Control: no-store`` so polling
displays always get fresh times.
"""

from __future__ import annotations

from functools import lru_cache
import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query, Response

from stop_board import __version__
from stop_board.api.schemas import (
    BoardResponse,
    BoardRowOut,
    HealthResponse,
    RouteScheduleOut,
    StopOut,
    StopResponse,
)
from stop_board.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from stop_board.errors import ConfigError, StopNotFound
from stop_board.rendering.board import format_board
from stop_board.service import StopBoardService, StopLookup

logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store"}
NOT_FOUND_DETAIL = "Stop could not be found or has no departures"
NOT_CONFIGURED_DETAIL = "No schedule available: Transit API is not configured"


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_config(os.environ.get("STOP_BOARD_CONFIG", DEFAULT_CONFIG_PATH))


def get_service(config: AppConfig = Depends(get_config)) -> StopBoardService:
    return StopBoardService.from_config(config.transit)


def get_stack_size(config: AppConfig = Depends(get_config)) -> int:
    return config.board.stack_size


app = FastAPI(
    title="Stop Departure Board",
    description="Upcoming departures per route for a single transit stop.",
    version=__version__,
)


def _lookup(service: StopBoardService, stop_number: str | None) -> StopLookup:
    """Map lookup failures onto the HTTP surface: 400 for bad input, 404 otherwise."""
    if stop_number is None or not stop_number.strip():
        raise HTTPException(status_code=400, detail="stopNumber query parameter is required", headers=NO_STORE)
    try:
        return service.lookup(stop_number)
    except ConfigError as exc:
        logger.error("Lookup for stop %s skipped: %s", stop_number, exc)
        raise HTTPException(status_code=404, detail=NOT_CONFIGURED_DETAIL, headers=NO_STORE) from exc
    except StopNotFound as exc:
        logger.info("Lookup for stop %s failed: %s", stop_number, exc)
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL, headers=NO_STORE) from exc


@app.get("/healthz", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/api/stop", response_model=StopResponse)
def get_stop(
    response: Response,
    stop_number: str | None = Query(None, alias="stopNumber"),
    service: StopBoardService = Depends(get_service),
) -> StopResponse:
    lookup = _lookup(service, stop_number)
    response.headers["Cache-Control"] = "no-store"
    return StopResponse(
        stop=StopOut(**lookup.stop.to_dict()),
        schedule={
            key: RouteScheduleOut(**entry.to_dict()) for key, entry in lookup.schedule.items()
        },
    )


@app.get("/api/board", response_model=BoardResponse)
def get_board(
    response: Response,
    stop_number: str | None = Query(None, alias="stopNumber"),
    service: StopBoardService = Depends(get_service),
    stack_size: int = Depends(get_stack_size),
) -> BoardResponse:
    lookup = _lookup(service, stop_number)
    response.headers["Cache-Control"] = "no-store"
    rows = [
        BoardRowOut(
            route_key=row.route_key,
            label=row.label,
            primary=row.primary_label,
            stack=row.stack_labels,
            minutes=([row.primary_minutes] if row.primary_minutes is not None else []) + row.stack_minutes,
            route_long_name=row.route_long_name,
            mode_name=row.mode_name,
        )
        for row in format_board(lookup.schedule, stack_size)
    ]
    return BoardResponse(stop=StopOut(**lookup.stop.to_dict()), rows=rows)
