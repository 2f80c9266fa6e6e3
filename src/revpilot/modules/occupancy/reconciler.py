"""Occupancy per property over a window, counting each booked day once."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from revpilot.modules.intervals.dates import overlap_days, union_occupied_days
from revpilot.modules.waterfall.calculator import from_cents, to_cents
from revpilot.snapshots import BookingSnapshot, Window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OccupancyResult:
    property_id: Any
    occupied_days: int
    total_days: int
    occupancy_rate: float
    reservation_count: int = 0
    total_revenue: float = 0.0
    average_daily_rate: float = 0.0


@dataclass(frozen=True)
class OccupancySummary:
    """Portfolio-level occupancy across several properties."""

    property_count: int
    occupied_days: int
    total_days: int
    occupancy_rate: float
    results: list[OccupancyResult] = field(default_factory=list)


def _rate(occupied: int, available: int) -> float:
    if available <= 0:
        return 0.0
    return min(100.0, occupied / available * 100)


def compute_occupancy(
    property_ids: Iterable[Any],
    bookings: Sequence[BookingSnapshot],
    window: Window,
) -> list[OccupancyResult]:
    """Compute occupancy for each property, in the order the ids are given.

    Cancelled bookings never occupy a day. Overlapping stays in the same
    property are unioned, so a double-booked night is counted once.
    """
    if not isinstance(window, Window):
        window = Window(*window)

    by_property: dict[Any, list[BookingSnapshot]] = {}
    for booking in bookings:
        if booking.is_cancelled:
            continue
        by_property.setdefault(booking.property_id, []).append(booking)

    results = []
    for property_id in property_ids:
        stays = by_property.get(property_id, [])
        in_window = [
            b for b in stays
            if overlap_days(b.check_in, b.check_out, window.start, window.stop) > 0
        ]
        occupied = union_occupied_days((b.interval for b in stays), window.start, window.end)
        revenue_cents = sum(to_cents(b.gross_revenue) for b in in_window)
        results.append(OccupancyResult(
            property_id=property_id,
            occupied_days=occupied,
            total_days=window.days,
            occupancy_rate=_rate(occupied, window.days),
            reservation_count=len(in_window),
            total_revenue=from_cents(revenue_cents),
            average_daily_rate=from_cents(revenue_cents) / occupied if occupied else 0.0,
        ))
    logger.debug("Computed occupancy for %d properties over %s", len(results), window)
    return results


def aggregate_occupancy(results: Sequence[OccupancyResult], window: Window) -> OccupancySummary:
    """Combine per-property results: sum(occupied) / (window days * property count)."""
    occupied = sum(r.occupied_days for r in results)
    available = window.days * len(results)
    return OccupancySummary(
        property_count=len(results),
        occupied_days=occupied,
        total_days=window.days,
        occupancy_rate=_rate(occupied, available),
        results=list(results),
    )
