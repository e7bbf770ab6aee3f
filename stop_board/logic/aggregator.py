"""Group upcoming departures at a stop by route and branch."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import math
from typing import Any, Iterable

from stop_board.data.resolver import StopRecord
from stop_board.data.transit_client import TransitClient

DEFAULT_WINDOW_MINUTES = 60

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepartureEvent:
    """One scheduled or real-time departure of a route branch."""

    route_short_name: str
    departure_time: datetime
    branch_code: str | None = None
    route_long_name: str | None = None
    mode_name: str | None = None
    is_real_time: bool = False

    @property
    def route_key(self) -> str:
        return route_key(self.route_short_name, self.branch_code)


@dataclass
class ScheduleEntry:
    """Upcoming minutes for one route key, soonest first."""

    minutes: list[int] = field(default_factory=list)
    route_long_name: str | None = None
    mode_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "minutes": list(self.minutes),
            "route_long_name": self.route_long_name,
            "mode_name": self.mode_name,
        }


Schedule = dict[str, ScheduleEntry]


def route_key(route_short_name: str, branch_code: str | None) -> str:
    """Display grouping key: short name followed by the branch code, if any."""
    return f"{route_short_name}{branch_code or ''}"


def minutes_until(departure_time: datetime, now: datetime) -> int:
    """Whole minutes from ``now`` to ``departure_time``, halves rounded away from zero."""
    minutes = (departure_time - now).total_seconds() / 60.0
    return int(math.copysign(math.floor(abs(minutes) + 0.5), minutes))


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value) or None


def _departure_instant(value: Any) -> datetime | None:
    """Unix seconds (number or numeric string) as an aware UTC datetime."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_departure_events(route_departures: Iterable[dict]) -> list[DepartureEvent]:
    """Flatten a stop_departures payload into departure events.

    The long name falls back from the route's long name to the itinerary
    destination and then its headsign. Items without a departure time are
    skipped, as are entries of the wrong shape.
    """
    events: list[DepartureEvent] = []
    for route in route_departures:
        if not isinstance(route, dict):
            continue
        short_name = str(route.get("route_short_name") or "")
        itineraries = route.get("itineraries")
        if not isinstance(itineraries, list):
            continue
        for itinerary in itineraries:
            if not isinstance(itinerary, dict):
                continue
            long_name = (
                _text(route.get("route_long_name"))
                or _text(itinerary.get("destination"))
                or _text(itinerary.get("headsign"))
            )
            branch_code = _text(itinerary.get("branch_code"))
            schedule_items = itinerary.get("schedule_items")
            if not isinstance(schedule_items, list):
                continue
            for item in schedule_items:
                if not isinstance(item, dict):
                    continue
                departure_time = _departure_instant(item.get("departure_time"))
                if departure_time is None:
                    continue
                events.append(
                    DepartureEvent(
                        route_short_name=short_name,
                        departure_time=departure_time,
                        branch_code=branch_code,
                        route_long_name=long_name,
                        mode_name=_text(route.get("mode_name")),
                        is_real_time=bool(item.get("is_real_time", False)),
                    )
                )
    return events


def build_schedule(
    events: Iterable[DepartureEvent],
    now: datetime,
    window_minutes: int = DEFAULT_WINDOW_MINUTES,
) -> Schedule:
    """Window, group and sort departure events.

    An event is kept iff ``0 <= minutes_until < window_minutes``. Each route
    key takes the first non-empty long name and mode it sees.
    """
    schedule: Schedule = {}
    for event in events:
        minutes = minutes_until(event.departure_time, now)
        if not 0 <= minutes < window_minutes:
            continue
        entry = schedule.setdefault(event.route_key, ScheduleEntry())
        entry.minutes.append(minutes)
        if not entry.route_long_name and event.route_long_name:
            entry.route_long_name = event.route_long_name
        if not entry.mode_name and event.mode_name:
            entry.mode_name = event.mode_name

    for entry in schedule.values():
        entry.minutes.sort()
    return schedule


class DepartureAggregator:
    """Fetch a stop's departures and build its schedule."""

    def __init__(self, client: TransitClient, window_minutes: int = DEFAULT_WINDOW_MINUTES) -> None:
        self._client = client
        self._window_minutes = window_minutes

    def aggregate(
        self,
        stop: StopRecord,
        now: datetime | None = None,
        window_minutes: int | None = None,
    ) -> Schedule:
        """Raises ``UpstreamUnavailable`` if the departures call fails."""
        if now is None:
            now = datetime.now(timezone.utc)
        if window_minutes is None:
            window_minutes = self._window_minutes
        route_departures = self._client.stop_departures(stop.global_stop_id)
        events = parse_departure_events(route_departures)
        schedule = build_schedule(events, now, window_minutes)
        logger.debug(
            "%s: %d events, %d routes within %d min",
            stop.global_stop_id,
            len(events),
            len(schedule),
            window_minutes,
        )
        return schedule


__all__ = [
    "DEFAULT_WINDOW_MINUTES",
    "DepartureAggregator",
    "DepartureEvent",
    "Schedule",
    "ScheduleEntry",
    "build_schedule",
    "minutes_until",
    "parse_departure_events",
    "route_key",
]
