"""Revenue waterfall: gross -> base -> commission -> net, per booking and in aggregate."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from revpilot.modules.platforms.rules import canonical_platform
from revpilot.snapshots import BookingSnapshot, PropertySnapshot

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def to_cents(amount: float) -> int:
    """Convert a currency amount to integer cents, rounding half up."""
    return int(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP) * 100)


def from_cents(cents: int) -> float:
    return cents / 100


def _apply_rate(cents: int, rate: float) -> int:
    return int((Decimal(cents) * Decimal(str(rate))).quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class RevenueBreakdown:
    """Monetary decomposition of one booking, held in integer cents.

    ``gross == base + cleaning_fee`` and ``base == commission + net`` hold exactly.
    """

    booking_id: Any
    property_id: Any
    platform: str
    gross_cents: int
    cleaning_fee_cents: int
    base_cents: int
    commission_cents: int
    net_cents: int
    property_missing: bool = False

    @property
    def gross_revenue(self) -> float:
        return from_cents(self.gross_cents)

    @property
    def cleaning_fee(self) -> float:
        return from_cents(self.cleaning_fee_cents)

    @property
    def base_revenue(self) -> float:
        return from_cents(self.base_cents)

    @property
    def commission_amount(self) -> float:
        return from_cents(self.commission_cents)

    @property
    def net_revenue(self) -> float:
        """Raw owner payout; negative when the cleaning fee exceeds the gross."""
        return from_cents(self.net_cents)

    @property
    def display_net_revenue(self) -> float:
        return from_cents(max(0, self.net_cents))

    @property
    def is_negative(self) -> bool:
        return self.net_cents < 0

    def reconciles(self) -> bool:
        return (
            self.gross_cents == self.base_cents + self.cleaning_fee_cents
            and self.base_cents == self.commission_cents + self.net_cents
        )


def compute_breakdown(booking: BookingSnapshot, prop: PropertySnapshot | None) -> RevenueBreakdown:
    """Split a booking's gross revenue using its property's cleaning fee and commission rate.

    A missing property is treated as zero cleaning fee and zero commission and is
    marked on the result so callers can surface it.
    """
    cleaning_fee = prop.cleaning_fee if prop is not None else 0.0
    commission_rate = prop.commission_rate if prop is not None else 0.0

    gross = to_cents(booking.gross_revenue)
    cleaning = to_cents(cleaning_fee)
    base = gross - cleaning
    commission = _apply_rate(base, commission_rate)
    net = base - commission

    if net < 0:
        logger.debug("Booking %s has negative net revenue (%d cents)", booking.id, net)

    return RevenueBreakdown(
        booking_id=booking.id,
        property_id=booking.property_id,
        platform=canonical_platform(booking.platform),
        gross_cents=gross,
        cleaning_fee_cents=cleaning,
        base_cents=base,
        commission_cents=commission,
        net_cents=net,
        property_missing=prop is None,
    )


@dataclass
class RevenueTotals:
    """Running sums of breakdowns. Integer cents, so order never changes a total."""

    gross_cents: int = 0
    cleaning_fee_cents: int = 0
    base_cents: int = 0
    commission_cents: int = 0
    net_cents: int = 0
    reservation_count: int = 0

    def add(self, breakdown: RevenueBreakdown) -> None:
        self.gross_cents += breakdown.gross_cents
        self.cleaning_fee_cents += breakdown.cleaning_fee_cents
        self.base_cents += breakdown.base_cents
        self.commission_cents += breakdown.commission_cents
        self.net_cents += breakdown.net_cents
        self.reservation_count += 1

    def __add__(self, other: RevenueTotals) -> RevenueTotals:
        return RevenueTotals(
            gross_cents=self.gross_cents + other.gross_cents,
            cleaning_fee_cents=self.cleaning_fee_cents + other.cleaning_fee_cents,
            base_cents=self.base_cents + other.base_cents,
            commission_cents=self.commission_cents + other.commission_cents,
            net_cents=self.net_cents + other.net_cents,
            reservation_count=self.reservation_count + other.reservation_count,
        )

    @property
    def gross_revenue(self) -> float:
        return from_cents(self.gross_cents)

    @property
    def cleaning_fees(self) -> float:
        return from_cents(self.cleaning_fee_cents)

    @property
    def base_revenue(self) -> float:
        return from_cents(self.base_cents)

    @property
    def commission_amount(self) -> float:
        return from_cents(self.commission_cents)

    @property
    def net_revenue(self) -> float:
        return from_cents(self.net_cents)


def sum_breakdowns(breakdowns: Iterable[RevenueBreakdown]) -> RevenueTotals:
    totals = RevenueTotals()
    for breakdown in breakdowns:
        totals.add(breakdown)
    return totals


def totals_by_platform(breakdowns: Iterable[RevenueBreakdown]) -> dict[str, RevenueTotals]:
    """Group totals by platform name, keys in sorted order."""
    grouped: dict[str, RevenueTotals] = {}
    for breakdown in breakdowns:
        grouped.setdefault(breakdown.platform, RevenueTotals()).add(breakdown)
    return dict(sorted(grouped.items()))
