"""Wires the booking store to the engine modules for one dashboard period."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Collection

from revpilot.modules.conflicts import Conflict, ConflictDetector
from revpilot.modules.financial import FinancialTracker, PeriodReport
from revpilot.modules.occupancy import OccupancySummary, aggregate_occupancy, compute_occupancy
from revpilot.modules.recognition import BucketReport, RecognitionReport, RevenueRecognitionEngine
from revpilot.modules.store import BookingStore
from revpilot.snapshots import Window

logger = logging.getLogger(__name__)


@dataclass
class PeriodSummary:
    """Everything the presentation layer needs for one window, as plain data."""

    window: Window
    property_ids: list[Any]
    platform: str | None
    recognition: RecognitionReport
    composed: BucketReport
    occupancy: OccupancySummary
    profit: PeriodReport
    conflicts: list[Conflict] = field(default_factory=list)


class ReportingService:
    def __init__(
        self,
        store: BookingStore | None = None,
        engine: RevenueRecognitionEngine | None = None,
        detector: ConflictDetector | None = None,
        tracker: FinancialTracker | None = None,
    ) -> None:
        self._store = store or BookingStore()
        self._engine = engine or RevenueRecognitionEngine()
        self._detector = detector or ConflictDetector()
        self._tracker = tracker or FinancialTracker(self._engine)

    def build_period_summary(
        self,
        window: Window,
        property_ids: Collection[Any] | None = None,
        platform: str | None = None,
    ) -> PeriodSummary:
        """Load a snapshot for the window and run every computation over it."""
        properties = self._store.load_properties(property_ids)
        scope = list(property_ids) if property_ids else [p.id for p in properties]
        bookings = self._store.load_bookings(window, scope, platform)
        expenses = self._store.load_expenses(window, scope)

        known = {p.id for p in properties}
        for missing in sorted({b.property_id for b in bookings} - known, key=str):
            logger.warning("Bookings reference property %s, which is missing from the catalog", missing)

        recognition = self._engine.recognize(bookings, properties, window, platform)
        # Occupancy and the schedule cover every platform, not just the filtered one
        schedule = bookings if platform is None else self._store.load_bookings(window, scope)
        occupancy = aggregate_occupancy(compute_occupancy(scope, schedule, window), window)

        summary = PeriodSummary(
            window=window,
            property_ids=scope,
            platform=recognition.platform,
            recognition=recognition,
            composed=self._engine.operational_with_deferred(recognition),
            occupancy=occupancy,
            profit=self._tracker.report_from_recognition(recognition, expenses, scope),
            conflicts=self._detector.detect_all(schedule, scope),
        )
        logger.info(
            "Built summary for %s: %d properties, occupancy %.1f%%, %d conflicts",
            window, len(scope), occupancy.occupancy_rate, len(summary.conflicts),
        )
        return summary
