from __future__ import annotations

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# GET /api/stop
# ---------------------------------------------------------------------------

class StopOut(BaseModel):
    global_stop_id: str
    stop_name: str
    stop_code: str
    stop_lat: float | None = None
    stop_lon: float | None = None
    wheelchair_boarding: bool | None = None


class RouteScheduleOut(BaseModel):
    minutes: list[int]
    route_long_name: str | None = None
    mode_name: str | None = None


class StopResponse(BaseModel):
    stop: StopOut
    schedule: dict[str, RouteScheduleOut]   # keyed by route short name + branch code


# ---------------------------------------------------------------------------
# GET /api/board
# ---------------------------------------------------------------------------

class BoardRowOut(BaseModel):
    route_key: str
    label: str
    primary: str
    stack: list[str]
    minutes: list[int]
    route_long_name: str | None = None
    mode_name: str | None = None


class BoardResponse(BaseModel):
    stop: StopOut
    rows: list[BoardRowOut]


# ---------------------------------------------------------------------------
# GET /healthz
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str
