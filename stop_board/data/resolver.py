"""Resolve a rider-entered stop number to the agency's stop record."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
import math
from typing import Any

from stop_board.data.transit_client import TransitClient
from stop_board.errors import ConfigError, NoMatch

DEFAULT_AGENCY_MARKER = "TTC"
DEFAULT_BIAS_LAT = 43.690730
DEFAULT_BIAS_LON = -79.418124
DEFAULT_MAX_RESULTS = 10

logger = logging.getLogger(__name__)


def _coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        coordinate = float(value)
    except ValueError:
        return None
    return coordinate if math.isfinite(coordinate) else None


@dataclass(frozen=True)
class StopRecord:
    """A stop as returned by the Transit search."""

    global_stop_id: str
    stop_name: str
    stop_code: str
    stop_lat: float | None = None
    stop_lon: float | None = None
    wheelchair_boarding: bool | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> StopRecord:
        wheelchair = payload.get("wheelchair_boarding")
        if not isinstance(wheelchair, bool):
            # GTFS codes: 0 unknown, 1 accessible, 2 not accessible
            wheelchair = {1: True, 2: False}.get(wheelchair) if isinstance(wheelchair, int) else None
        return cls(
            global_stop_id=payload["global_stop_id"],
            stop_name=str(payload.get("stop_name") or ""),
            stop_code=str(payload.get("stop_code") or ""),
            stop_lat=_coordinate(payload.get("stop_lat")),
            stop_lon=_coordinate(payload.get("stop_lon")),
            wheelchair_boarding=wheelchair,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def select_agency_stop(candidates: list[dict], agency_marker: str) -> dict | None:
    """Return the first candidate whose global_stop_id carries the agency marker."""
    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        global_stop_id = candidate.get("global_stop_id")
        if isinstance(global_stop_id, str) and agency_marker in global_stop_id:
            return candidate
    return None


class StopResolver:
    """Look up stop numbers through the Transit stop search."""

    def __init__(
        self,
        client: TransitClient,
        agency_marker: str = DEFAULT_AGENCY_MARKER,
        bias_lat: float = DEFAULT_BIAS_LAT,
        bias_lon: float = DEFAULT_BIAS_LON,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self._client = client
        self._agency_marker = agency_marker
        self._bias_lat = bias_lat
        self._bias_lon = bias_lon
        self._max_results = min(max_results, DEFAULT_MAX_RESULTS)

    def resolve(self, stop_number: str) -> StopRecord:
        """Resolve ``stop_number``; raises ``StopNotFound`` or ``ConfigError``."""
        stop_number = stop_number.strip()
        if not stop_number:
            raise ValueError("stop_number must not be empty")
        if not self._client.has_credentials:
            raise ConfigError("TRANSIT_API_KEY not set")

        candidates = self._client.search_stops(
            stop_number,
            lat=self._bias_lat,
            lon=self._bias_lon,
            max_num_results=self._max_results,
        )
        match = select_agency_stop(candidates, self._agency_marker)
        if match is None:
            logger.info(
                "No %s stop among %d results for %r", self._agency_marker, len(candidates), stop_number
            )
            raise NoMatch(f"No {self._agency_marker} stop found for {stop_number!r}")
        return StopRecord.from_api(match)


__all__ = ["StopRecord", "StopResolver", "select_agency_stop"]
