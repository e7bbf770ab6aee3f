"""Turn a stop schedule into ordered board rows."""

from __future__ import annotations

from dataclasses import dataclass

from stop_board.logic.aggregator import Schedule

DEFAULT_STACK_SIZE = 3
NO_DEPARTURE_SENTINEL = 9999
PLACEHOLDER_LABEL = "--"
DUE_LABEL = "Due"


@dataclass(frozen=True)
class DisplayRow:
    """One route on the board: the soonest time plus a few that follow."""

    route_key: str
    primary_minutes: int | None
    stack_minutes: list[int]
    route_long_name: str | None = None
    mode_name: str | None = None

    @property
    def label(self) -> str:
        return self.route_long_name or self.route_key

    @property
    def primary_label(self) -> str:
        return format_time_label(self.primary_minutes)

    @property
    def stack_labels(self) -> list[str]:
        return [format_time_label(minutes) for minutes in self.stack_minutes]


def format_time_label(minutes: int | None) -> str:
    if minutes is None:
        return PLACEHOLDER_LABEL
    if minutes <= 0:
        return DUE_LABEL
    return f"{minutes} min"


def format_board(schedule: Schedule, stack_size: int = DEFAULT_STACK_SIZE) -> list[DisplayRow]:
    """Order routes soonest first and split their times into primary and stack.

    Routes with no minutes sort last. ``stack_size`` is capped at three, and
    times beyond ``1 + stack_size`` are left off the row; the schedule itself
    is not modified.
    """
    stack_size = max(0, min(stack_size, DEFAULT_STACK_SIZE))
    ordered = sorted(
        schedule.items(),
        key=lambda item: item[1].minutes[0] if item[1].minutes else NO_DEPARTURE_SENTINEL,
    )
    rows: list[DisplayRow] = []
    for key, entry in ordered:
        minutes = entry.minutes
        rows.append(
            DisplayRow(
                route_key=key,
                primary_minutes=minutes[0] if minutes else None,
                stack_minutes=list(minutes[1 : 1 + stack_size]),
                route_long_name=entry.route_long_name,
                mode_name=entry.mode_name,
            )
        )
    return rows


__all__ = [
    "DEFAULT_STACK_SIZE",
    "DUE_LABEL",
    "DisplayRow",
    "PLACEHOLDER_LABEL",
    "format_board",
    "format_time_label",
]
