from revpilot.modules.intervals.dates import (
    merge_intervals,
    nights_between,
    overlap_days,
    parse_date,
    union_occupied_days,
)

__all__ = [
    "merge_intervals",
    "nights_between",
    "overlap_days",
    "parse_date",
    "union_occupied_days",
]
