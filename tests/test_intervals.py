"""Tests for date parsing and interval arithmetic."""

from datetime import date, datetime

import pytest

from revpilot.modules.intervals.dates import (
    merge_intervals,
    nights_between,
    overlap_days,
    parse_date,
    union_occupied_days,
)


def test_parse_date_variants():
    assert parse_date("2024-03-05") == date(2024, 3, 5)
    assert parse_date("2024-03-05T14:00:00") == date(2024, 3, 5)
    assert parse_date("2024-03-05T14:00:00Z") == date(2024, 3, 5)
    assert parse_date(datetime(2024, 3, 5, 23, 59)) == date(2024, 3, 5)
    assert parse_date(date(2024, 3, 5)) == date(2024, 3, 5)


@pytest.mark.parametrize("value", ["not a date", "", None, 20240305])
def test_parse_date_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_nights_between():
    assert nights_between(date(2024, 1, 1), date(2024, 1, 5)) == 4
    assert nights_between(date(2024, 2, 28), date(2024, 3, 1)) == 2  # leap year


def test_overlap_days_shared_nights():
    # Jan 5..9 are shared; checkout day is not a night
    assert overlap_days(date(2024, 1, 1), date(2024, 1, 10), date(2024, 1, 5), date(2024, 1, 15)) == 5


def test_overlap_days_disjoint_and_touching():
    assert overlap_days(date(2024, 1, 1), date(2024, 1, 5), date(2024, 1, 7), date(2024, 1, 9)) == 0
    # Checkout on the 5th, next check-in on the 5th: no shared night
    assert overlap_days(date(2024, 1, 1), date(2024, 1, 5), date(2024, 1, 5), date(2024, 1, 8)) == 0


def test_merge_intervals_joins_overlapping_and_adjacent():
    merged = merge_intervals([
        (date(2024, 1, 10), date(2024, 1, 12)),
        (date(2024, 1, 1), date(2024, 1, 5)),
        (date(2024, 1, 5), date(2024, 1, 7)),
        (date(2024, 1, 3), date(2024, 1, 4)),
    ])
    assert merged == [
        (date(2024, 1, 1), date(2024, 1, 7)),
        (date(2024, 1, 10), date(2024, 1, 12)),
    ]


def test_merge_intervals_drops_empty():
    assert merge_intervals([(date(2024, 1, 3), date(2024, 1, 3))]) == []


def test_union_does_not_double_count_overlaps():
    intervals = [
        (date(2024, 1, 1), date(2024, 1, 10)),
        (date(2024, 1, 5), date(2024, 1, 15)),
    ]
    # Naive sum would be 9 + 10 = 19
    assert union_occupied_days(intervals, date(2024, 1, 1), date(2024, 1, 15)) == 14


def test_union_clips_to_window():
    intervals = [(date(2024, 1, 1), date(2024, 1, 10))]
    assert union_occupied_days(intervals, date(2024, 1, 3), date(2024, 1, 7)) == 5


def test_union_counts_last_window_day():
    # Window is inclusive: a stay covering the 31st counts that night
    intervals = [(date(2024, 1, 30), date(2024, 2, 3))]
    assert union_occupied_days(intervals, date(2024, 1, 1), date(2024, 1, 31)) == 2


def test_union_empty_and_outside():
    assert union_occupied_days([], date(2024, 1, 1), date(2024, 1, 31)) == 0
    outside = [(date(2024, 2, 1), date(2024, 2, 5))]
    assert union_occupied_days(outside, date(2024, 1, 1), date(2024, 1, 31)) == 0
