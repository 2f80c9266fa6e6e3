"""Revenue recognition: which bookings count toward a window, and how much.

Three views of the same booking list are kept apart:

* operational: non-cancelled bookings whose platform anchor date (check-in or
  check-out, see ``platforms.rules``) falls in the window and whose payout is
  collectible within it;
* financial (cash): bookings whose payment date falls in the window, whenever
  the stay happened;
* deferred: bookings anchored in the window on a deferring platform whose
  payment date is unknown or after the window ends.

Operational and deferred are mutually exclusive for a given window. The
"with future" view composes them on demand via ``operational_with_deferred``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from revpilot.config import settings
from revpilot.modules.platforms.rules import (
    allows_prepayment,
    anchor_date,
    canonical_platform,
    deferral_rule,
    known_platforms,
    resolve_rule,
)
from revpilot.modules.waterfall.calculator import (
    RevenueBreakdown,
    RevenueTotals,
    compute_breakdown,
    sum_breakdowns,
    totals_by_platform,
)
from revpilot.snapshots import BookingSnapshot, PropertySnapshot, Window

logger = logging.getLogger(__name__)


class RecognitionBucket(str, Enum):
    OPERATIONAL = "operational"
    DEFERRED = "deferred"
    EXCLUDED = "excluded"


class FlagKind(str, Enum):
    MISSING_PROPERTY = "missing_property"
    SUSPICIOUS_PREPAYMENT = "suspicious_prepayment"
    UNSCHEDULED_PAYMENT = "unscheduled_payment"


@dataclass(frozen=True)
class RecognitionFlag:
    booking_id: Any
    kind: FlagKind
    detail: str


@dataclass
class BucketReport:
    view: str
    breakdowns: list[RevenueBreakdown]
    totals: RevenueTotals
    by_platform: dict[str, RevenueTotals]
    flags: list[RecognitionFlag] = field(default_factory=list)

    @property
    def booking_ids(self) -> list[Any]:
        return [b.booking_id for b in self.breakdowns]

    def platform_breakdown(self) -> list[tuple[str, RevenueTotals]]:
        """Platforms ordered by commission, largest first."""
        return sorted(self.by_platform.items(), key=lambda item: (-item[1].commission_cents, item[0]))


@dataclass
class DeferredReport(BucketReport):
    next_payment_date: date | None = None
    next_payment_period: str = ""
    unscheduled: list[Any] = field(default_factory=list)


def merge_flags(*groups: Iterable[RecognitionFlag]) -> list[RecognitionFlag]:
    """Concatenate flag lists, keeping the first flag of each kind per booking."""
    seen: set[tuple[str, FlagKind]] = set()
    merged = []
    for group in groups:
        for flag in group:
            key = (str(flag.booking_id), flag.kind)
            if key not in seen:
                seen.add(key)
                merged.append(flag)
    return merged


@dataclass
class RecognitionReport:
    window: Window
    platform: str | None
    operational: BucketReport
    financial: BucketReport
    deferred: DeferredReport

    @property
    def flags(self) -> list[RecognitionFlag]:
        return merge_flags(self.operational.flags, self.deferred.flags, self.financial.flags)

    def bucket_of(self, booking_id: Any) -> RecognitionBucket:
        if booking_id in self.operational.booking_ids:
            return RecognitionBucket.OPERATIONAL
        if booking_id in self.deferred.booking_ids:
            return RecognitionBucket.DEFERRED
        return RecognitionBucket.EXCLUDED


def _sort_key(booking: BookingSnapshot) -> tuple[date, str]:
    return booking.check_in, str(booking.id)


def index_properties(
    properties: Iterable[PropertySnapshot] | Mapping[Any, PropertySnapshot] | None,
) -> dict[Any, PropertySnapshot]:
    if properties is None:
        return {}
    if isinstance(properties, Mapping):
        return dict(properties)
    return {p.id: p for p in properties}


def _as_window(window: Window | tuple) -> Window:
    return window if isinstance(window, Window) else Window(*window)


class RevenueRecognitionEngine:
    """Buckets bookings into recognition views and totals each view."""

    def __init__(
        self,
        include_cancelled: bool | None = None,
        compose_single_platform_deferred: bool | None = None,
        payment_period_format: str | None = None,
    ) -> None:
        config = settings.get("recognition", {})
        self.include_cancelled = (
            include_cancelled if include_cancelled is not None
            else config.get("include_cancelled", False)
        )
        self.compose_single_platform_deferred = (
            compose_single_platform_deferred if compose_single_platform_deferred is not None
            else config.get("compose_single_platform_deferred", False)
        )
        self.payment_period_format = payment_period_format or config.get("payment_period_format", "%B %Y")

    # --- Classification ---

    def classify(self, booking: BookingSnapshot, window: Window) -> RecognitionBucket:
        """Assign a booking to exactly one bucket for this window."""
        window = _as_window(window)
        if booking.is_cancelled:
            return RecognitionBucket.EXCLUDED
        if not window.contains(anchor_date(booking)):
            return RecognitionBucket.EXCLUDED
        if deferral_rule(booking.platform) and (
            booking.payment_date is None or booking.payment_date > window.end
        ):
            return RecognitionBucket.DEFERRED
        return RecognitionBucket.OPERATIONAL

    def _platform_groups(
        self, bookings: Iterable[BookingSnapshot], platform: str | None
    ) -> list[tuple[str, list[BookingSnapshot]]]:
        """Split bookings per platform so each group is selected with its own anchor.

        With a platform filter only that platform's group is returned. Without
        one every platform is selected separately and the groups concatenated.
        """
        groups: dict[str, list[BookingSnapshot]] = {}
        for booking in bookings:
            groups.setdefault(canonical_platform(booking.platform), []).append(booking)

        if platform is not None:
            name = canonical_platform(platform)
            return [(name, groups.get(name, []))]

        table = known_platforms()
        order = table + sorted(name for name in groups if name not in table)
        return [(name, groups.get(name, [])) for name in order]

    def _select(
        self,
        bookings: Iterable[BookingSnapshot],
        window: Window,
        platform: str | None,
        bucket: RecognitionBucket,
    ) -> list[BookingSnapshot]:
        selected: list[BookingSnapshot] = []
        for _, group in self._platform_groups(bookings, platform):
            matches = [b for b in group if self.classify(b, window) is bucket]
            selected.extend(sorted(matches, key=_sort_key))
        return selected

    def _select_cash(
        self,
        bookings: Iterable[BookingSnapshot],
        window: Window,
        platform: str | None,
        include_cancelled: bool,
    ) -> list[BookingSnapshot]:
        selected: list[BookingSnapshot] = []
        for _, group in self._platform_groups(bookings, platform):
            matches = [
                b for b in group
                if window.contains(b.payment_date) and (include_cancelled or not b.is_cancelled)
            ]
            selected.extend(sorted(matches, key=_sort_key))
        return selected

    # --- Totals ---

    def _breakdowns(
        self, bookings: Sequence[BookingSnapshot], props: dict[Any, PropertySnapshot]
    ) -> tuple[list[RevenueBreakdown], list[RecognitionFlag]]:
        breakdowns = []
        flags = []
        for booking in bookings:
            breakdown = compute_breakdown(booking, props.get(booking.property_id))
            breakdowns.append(breakdown)
            if breakdown.property_missing:
                logger.warning(
                    "Booking %s references unknown property %s; using zero cleaning fee and commission",
                    booking.id, booking.property_id,
                )
                flags.append(RecognitionFlag(
                    booking_id=booking.id,
                    kind=FlagKind.MISSING_PROPERTY,
                    detail=f"property {booking.property_id!r} not in catalog",
                ))
            if (
                booking.payment_date is not None
                and booking.payment_date < booking.check_in
                and not allows_prepayment(booking.platform)
            ):
                logger.warning(
                    "Booking %s on %s was paid on %s, before check-in %s",
                    booking.id, booking.platform, booking.payment_date, booking.check_in,
                )
                flags.append(RecognitionFlag(
                    booking_id=booking.id,
                    kind=FlagKind.SUSPICIOUS_PREPAYMENT,
                    detail=f"paid {booking.payment_date} before check-in {booking.check_in}",
                ))
        return breakdowns, flags

    @staticmethod
    def _bucket(
        view: str, breakdowns: list[RevenueBreakdown], flags: list[RecognitionFlag]
    ) -> BucketReport:
        return BucketReport(
            view=view,
            breakdowns=breakdowns,
            totals=sum_breakdowns(breakdowns),
            by_platform=totals_by_platform(breakdowns),
            flags=flags,
        )

    # --- Views ---

    def operational_view(
        self,
        bookings: Sequence[BookingSnapshot],
        properties: Iterable[PropertySnapshot] | Mapping[Any, PropertySnapshot] | None,
        window: Window,
        platform: str | None = None,
    ) -> BucketReport:
        """Bookings operated in the window: anchor date inside, payout collectible."""
        window = _as_window(window)
        selected = self._select(bookings, window, platform, RecognitionBucket.OPERATIONAL)
        breakdowns, flags = self._breakdowns(selected, index_properties(properties))
        return self._bucket(RecognitionBucket.OPERATIONAL.value, breakdowns, flags)

    def financial_view(
        self,
        bookings: Sequence[BookingSnapshot],
        properties: Iterable[PropertySnapshot] | Mapping[Any, PropertySnapshot] | None,
        window: Window,
        platform: str | None = None,
        include_cancelled: bool | None = None,
    ) -> BucketReport:
        """Cash view: bookings whose payment date falls in the window."""
        window = _as_window(window)
        if include_cancelled is None:
            include_cancelled = self.include_cancelled
        selected = self._select_cash(bookings, window, platform, include_cancelled)
        breakdowns, flags = self._breakdowns(selected, index_properties(properties))
        return self._bucket("financial", breakdowns, flags)

    def deferred_view(
        self,
        bookings: Sequence[BookingSnapshot],
        properties: Iterable[PropertySnapshot] | Mapping[Any, PropertySnapshot] | None,
        window: Window,
        platform: str | None = None,
    ) -> DeferredReport:
        """Revenue earned in the window whose payout lands after it."""
        window = _as_window(window)
        selected = self._select(bookings, window, platform, RecognitionBucket.DEFERRED)
        breakdowns, flags = self._breakdowns(selected, index_properties(properties))

        unscheduled = [b for b in selected if b.payment_date is None]
        for booking in unscheduled:
            logger.info("Deferred booking %s has no payment date yet", booking.id)
            flags.append(RecognitionFlag(
                booking_id=booking.id,
                kind=FlagKind.UNSCHEDULED_PAYMENT,
                detail=f"payout date not yet known, expected {resolve_rule(booking.platform).payout_terms}",
            ))

        scheduled = [b.payment_date for b in selected if b.payment_date is not None]
        next_payment = min(scheduled) if scheduled else None
        bucket = self._bucket(RecognitionBucket.DEFERRED.value, breakdowns, flags)
        return DeferredReport(
            view=bucket.view,
            breakdowns=bucket.breakdowns,
            totals=bucket.totals,
            by_platform=bucket.by_platform,
            flags=bucket.flags,
            next_payment_date=next_payment,
            next_payment_period=next_payment.strftime(self.payment_period_format) if next_payment else "",
            unscheduled=[b.id for b in unscheduled],
        )

    def recognize(
        self,
        bookings: Sequence[BookingSnapshot],
        properties: Iterable[PropertySnapshot] | Mapping[Any, PropertySnapshot] | None,
        window: Window,
        platform: str | None = None,
        include_cancelled: bool | None = None,
    ) -> RecognitionReport:
        """Build all three views for one window."""
        window = _as_window(window)
        props = index_properties(properties)
        report = RecognitionReport(
            window=window,
            platform=canonical_platform(platform) if platform is not None else None,
            operational=self.operational_view(bookings, props, window, platform),
            financial=self.financial_view(bookings, props, window, platform, include_cancelled),
            deferred=self.deferred_view(bookings, props, window, platform),
        )
        logger.info(
            "Recognized %s (platform=%s): %d operational, %d deferred, %d cash",
            window,
            report.platform or "all",
            report.operational.totals.reservation_count,
            report.deferred.totals.reservation_count,
            report.financial.totals.reservation_count,
        )
        return report

    def operational_with_deferred(self, report: RecognitionReport) -> BucketReport:
        """Operational totals plus deferred revenue of deferring platforms.

        When the report is already narrowed to a deferring platform the deferred
        bucket is not added unless ``compose_single_platform_deferred`` is set.
        The two buckets never share a booking, so this does not guard against
        double counting: it leaves that platform's deferred revenue out of the
        composed total, which then equals the plain operational view.
        """
        if (
            report.platform is not None
            and deferral_rule(report.platform)
            and not self.compose_single_platform_deferred
        ):
            logger.debug("Single-platform view on %s: deferred revenue not composed", report.platform)
            return report.operational

        extra = [b for b in report.deferred.breakdowns if deferral_rule(b.platform)]
        return self._bucket(
            "operational_with_deferred",
            report.operational.breakdowns + extra,
            merge_flags(report.operational.flags, report.deferred.flags),
        )

    def monthly_series(
        self,
        bookings: Sequence[BookingSnapshot],
        properties: Iterable[PropertySnapshot] | Mapping[Any, PropertySnapshot] | None,
        year: int,
        platform: str | None = None,
    ) -> list[RecognitionReport]:
        """One report per calendar month of the year, January first."""
        props = index_properties(properties)
        year_window = Window(date(year, 1, 1), date(year, 12, 31))
        return [self.recognize(bookings, props, month, platform) for month in year_window.iter_months()]
