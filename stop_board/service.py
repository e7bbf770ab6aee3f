"""Stop lookup: resolve a stop number, then aggregate its departures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from stop_board.config import TransitConfig
from stop_board.data.resolver import StopRecord, StopResolver
from stop_board.data.transit_client import TransitClient
from stop_board.logic.aggregator import DepartureAggregator, Schedule


@dataclass(frozen=True)
class StopLookup:
    """A resolved stop with its schedule at lookup time."""

    stop: StopRecord
    schedule: Schedule

    def to_dict(self) -> dict[str, Any]:
        return {
            "stop": self.stop.to_dict(),
            "schedule": {key: entry.to_dict() for key, entry in self.schedule.items()},
        }


class StopBoardService:
    """Runs one resolve + aggregate cycle per call; nothing is cached."""

    def __init__(self, resolver: StopResolver, aggregator: DepartureAggregator) -> None:
        self._resolver = resolver
        self._aggregator = aggregator

    @classmethod
    def from_config(cls, config: TransitConfig) -> StopBoardService:
        client = TransitClient(
            config.api_key,
            base_url=config.base_url,
            timeout_seconds=config.request_timeout_seconds,
        )
        resolver = StopResolver(
            client,
            agency_marker=config.agency_marker,
            bias_lat=config.bias_lat,
            bias_lon=config.bias_lon,
            max_results=config.max_search_results,
        )
        aggregator = DepartureAggregator(client, window_minutes=config.window_minutes)
        return cls(resolver, aggregator)

    def lookup(self, stop_number: str, now: datetime | None = None) -> StopLookup:
        """Raises ``ConfigError`` or ``StopNotFound`` when no schedule is available."""
        stop = self._resolver.resolve(stop_number)
        schedule = self._aggregator.aggregate(stop, now=now)
        return StopLookup(stop=stop, schedule=schedule)


__all__ = ["StopBoardService", "StopLookup"]
