"""Date parsing and half-open interval arithmetic over calendar days.

Stays are modelled as half-open intervals ``[check_in, check_out)``: the
checkout day is never an occupied night. Windows are inclusive on both ends
and are converted to ``[start, end + 1 day)`` before any interval math.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

ONE_DAY = timedelta(days=1)

Interval = tuple[date, date]


def parse_date(value) -> date:
    """Coerce a date, datetime or ISO string into a calendar date.

    Time components are dropped; recognition works on whole days only.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValueError(f"Unparseable date: {value!r}") from None
    raise ValueError(f"Unparseable date: {value!r}")


def parse_optional_date(value) -> date | None:
    if value is None or value == "":
        return None
    return parse_date(value)


def nights_between(check_in: date, check_out: date) -> int:
    """Number of nights between two dates (negative if reversed)."""
    return (check_out - check_in).days


def overlap_days(a_start: date, a_end: date, b_start: date, b_end: date) -> int:
    """Whole days shared by the half-open intervals [a_start, a_end) and [b_start, b_end)."""
    start = max(a_start, b_start)
    end = min(a_end, b_end)
    if end <= start:
        return 0
    return (end - start).days


def clip_interval(interval: Interval, start: date, end: date) -> Interval | None:
    """Clip a half-open interval to [start, end). Returns None when nothing remains."""
    lo = max(interval[0], start)
    hi = min(interval[1], end)
    if hi <= lo:
        return None
    return lo, hi


def merge_intervals(intervals: Iterable[Interval]) -> list[Interval]:
    """Merge overlapping or touching half-open intervals into a sorted disjoint list."""
    merged: list[Interval] = []
    for start, end in sorted(i for i in intervals if i[1] > i[0]):
        if merged and start <= merged[-1][1]:
            last_start, last_end = merged[-1]
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))
    return merged


def union_occupied_days(intervals: Iterable[Interval], window_start: date, window_end: date) -> int:
    """Count distinct days in the inclusive window covered by at least one interval.

    Overlapping stays are merged before summing, so a day booked twice counts once.
    """
    window_stop = window_end + ONE_DAY
    clipped = []
    for interval in intervals:
        piece = clip_interval(interval, window_start, window_stop)
        if piece is not None:
            clipped.append(piece)
    return sum((end - start).days for start, end in merge_intervals(clipped))
