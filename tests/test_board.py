from __future__ import annotations

import copy

import pytest

from stop_board.logic.aggregator import ScheduleEntry
from stop_board.rendering.board import DisplayRow, format_board, format_time_label


@pytest.mark.parametrize(
    ("minutes", "label"),
    [(None, "--"), (0, "Due"), (-1, "Due"), (1, "1 min"), (59, "59 min")],
)
def test_format_time_label(minutes, label) -> None:
    assert format_time_label(minutes) == label


def test_rows_sorted_soonest_first() -> None:
    schedule = {
        "29": ScheduleEntry(minutes=[14, 30]),
        "504A": ScheduleEntry(minutes=[0, 12, 45]),
        "510": ScheduleEntry(minutes=[6]),
    }

    rows = format_board(schedule)

    assert [row.route_key for row in rows] == ["504A", "510", "29"]
    assert rows[0].primary_label == "Due"
    assert rows[0].stack_labels == ["12 min", "45 min"]


def test_empty_minutes_sort_last() -> None:
    schedule = {
        "1": ScheduleEntry(minutes=[]),
        "2": ScheduleEntry(minutes=[58]),
    }

    rows = format_board(schedule)

    assert [row.route_key for row in rows] == ["2", "1"]
    assert rows[1].primary_minutes is None
    assert rows[1].primary_label == "--"
    assert rows[1].stack_minutes == []


def test_at_most_four_slots_per_row() -> None:
    schedule = {"504A": ScheduleEntry(minutes=[1, 3, 5, 8, 13, 21])}

    row = format_board(schedule)[0]

    assert row.primary_minutes == 1
    assert row.stack_minutes == [3, 5, 8]
    assert 1 + len(row.stack_labels) <= 4


def test_custom_stack_size() -> None:
    schedule = {"504A": ScheduleEntry(minutes=[1, 3, 5, 8])}

    assert format_board(schedule, stack_size=1)[0].stack_minutes == [3]


def test_format_board_does_not_mutate_schedule() -> None:
    schedule = {
        "504A": ScheduleEntry(minutes=[2, 4, 6, 8, 10], route_long_name="King"),
        "505": ScheduleEntry(minutes=[1]),
    }
    before = copy.deepcopy(schedule)

    format_board(schedule)

    assert schedule == before


def test_row_keeps_metadata_and_label_falls_back_to_key() -> None:
    schedule = {
        "504A": ScheduleEntry(minutes=[3], route_long_name="King", mode_name="Streetcar"),
        "29": ScheduleEntry(minutes=[4]),
    }

    rows = format_board(schedule)

    assert rows[0] == DisplayRow(
        route_key="504A",
        primary_minutes=3,
        stack_minutes=[],
        route_long_name="King",
        mode_name="Streetcar",
    )
    assert rows[0].label == "King"
    assert rows[1].label == "29"


def test_oversized_stack_size_still_caps_at_four_slots() -> None:
    schedule = {"504A": ScheduleEntry(minutes=[1, 3, 5, 8, 13, 21])}

    row = format_board(schedule, stack_size=10)[0]

    assert row.stack_minutes == [3, 5, 8]
