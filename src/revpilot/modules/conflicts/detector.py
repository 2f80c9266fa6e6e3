"""Double-booking and cleaning-turnover checks on a property's timeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Sequence

from revpilot.config import settings
from revpilot.snapshots import BookingSnapshot

logger = logging.getLogger(__name__)


class ConflictKind(str, Enum):
    OVERLAP = "overlap"
    SHORT_GAP = "short_gap"


@dataclass(frozen=True)
class Conflict:
    property_id: Any
    kind: ConflictKind
    booking_a: BookingSnapshot
    booking_b: BookingSnapshot
    detail: str
    gap_hours: float | None = None  # None for overlaps


class ConflictDetector:
    """Flags overlapping stays and turnovers too short to clean in between.

    Bookings are sorted by check-in and only neighbours are compared: any
    overlapping cluster always contains at least one overlapping adjacent pair.
    """

    def __init__(self, min_turnover_hours: float | None = None) -> None:
        config = settings.get("conflicts", {})
        self.min_turnover_hours = (
            min_turnover_hours if min_turnover_hours is not None
            else config.get("min_turnover_hours", 24)
        )

    def detect(self, bookings: Iterable[BookingSnapshot], property_id: Any) -> list[Conflict]:
        """Check one property's non-cancelled bookings."""
        timeline = sorted(
            (b for b in bookings if b.property_id == property_id and not b.is_cancelled),
            key=lambda b: (b.check_in, b.check_out, str(b.id)),
        )

        conflicts = []
        for current, following in zip(timeline, timeline[1:]):
            if current.check_out > following.check_in:
                conflicts.append(Conflict(
                    property_id=property_id,
                    kind=ConflictKind.OVERLAP,
                    booking_a=current,
                    booking_b=following,
                    detail=f"Overlap between {current.label} and {following.label}",
                ))
                continue

            gap_hours = (following.check_in - current.check_out).total_seconds() / 3600
            if gap_hours < self.min_turnover_hours:
                conflicts.append(Conflict(
                    property_id=property_id,
                    kind=ConflictKind.SHORT_GAP,
                    booking_a=current,
                    booking_b=following,
                    detail=f"Gap of only {gap_hours:.0f}h between {current.label} and {following.label}",
                    gap_hours=gap_hours,
                ))

        if conflicts:
            logger.info("Property %s has %d scheduling conflicts", property_id, len(conflicts))
        return conflicts

    def detect_all(
        self, bookings: Sequence[BookingSnapshot], property_ids: Iterable[Any] | None = None
    ) -> list[Conflict]:
        """Check every property, in the given order or sorted by id when none is given."""
        if property_ids is None:
            property_ids = sorted({b.property_id for b in bookings}, key=str)
        conflicts = []
        for property_id in property_ids:
            conflicts.extend(self.detect(bookings, property_id))
        return conflicts
