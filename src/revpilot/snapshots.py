"""Read-only input records handed to the engine, and the date window type.

Records validate themselves on construction; a malformed booking, property or
window never reaches a computation.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterator

from revpilot.errors import (
    InvalidBookingError,
    InvalidExpenseError,
    InvalidPropertyError,
    InvalidWindowError,
)
from revpilot.modules.intervals.dates import ONE_DAY, nights_between, parse_date, parse_optional_date

GENERAL_START = date(1900, 1, 1)
GENERAL_END = date(2999, 12, 31)


def _valid_amount(value) -> bool:
    """A finite, non-negative money amount."""
    return value is not None and math.isfinite(value) and value >= 0


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Window:
    """Inclusive date range ``[start, end]``."""

    start: date
    end: date

    def __post_init__(self) -> None:
        try:
            start = parse_date(self.start)
            end = parse_date(self.end)
        except ValueError as exc:
            raise InvalidWindowError(str(exc)) from None
        if end < start:
            raise InvalidWindowError(f"Window end {end} precedes start {start}")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def month(cls, year: int, month: int) -> Window:
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def general(cls) -> Window:
        """A window wide enough to stand in for "all time"."""
        return cls(GENERAL_START, GENERAL_END)

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def stop(self) -> date:
        """Exclusive upper bound, for half-open interval math."""
        return self.end + ONE_DAY

    def contains(self, day: date | None) -> bool:
        return day is not None and self.start <= day <= self.end

    def iter_months(self) -> Iterator[Window]:
        """Yield one window per calendar month touched, clipped to this window."""
        year, month = self.start.year, self.start.month
        while date(year, month, 1) <= self.end:
            full = Window.month(year, month)
            yield Window(max(full.start, self.start), min(full.end, self.end))
            year, month = (year + 1, 1) if month == 12 else (year, month + 1)

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class BookingSnapshot:
    id: Any
    property_id: Any
    platform: str
    check_in: date
    check_out: date
    gross_revenue: float = 0.0
    payment_date: date | None = None
    status: BookingStatus = BookingStatus.CONFIRMED
    reservation_code: str | None = None

    def __post_init__(self) -> None:
        try:
            check_in = parse_date(self.check_in)
            check_out = parse_date(self.check_out)
            payment_date = parse_optional_date(self.payment_date)
        except ValueError as exc:
            raise InvalidBookingError(self.id, str(exc)) from None
        if check_out <= check_in:
            raise InvalidBookingError(
                self.id, f"check-out {check_out} must be after check-in {check_in}"
            )
        if not _valid_amount(self.gross_revenue):
            raise InvalidBookingError(self.id, f"gross revenue must be a finite amount >= 0, got {self.gross_revenue!r}")
        try:
            status = BookingStatus(self.status)
        except ValueError:
            raise InvalidBookingError(self.id, f"unknown status {self.status!r}") from None

        object.__setattr__(self, "check_in", check_in)
        object.__setattr__(self, "check_out", check_out)
        object.__setattr__(self, "payment_date", payment_date)
        object.__setattr__(self, "status", status)

    @property
    def nights(self) -> int:
        return nights_between(self.check_in, self.check_out)

    @property
    def is_cancelled(self) -> bool:
        return self.status is BookingStatus.CANCELLED

    @property
    def label(self) -> str:
        return self.reservation_code or str(self.id)

    @property
    def interval(self) -> tuple[date, date]:
        return self.check_in, self.check_out


@dataclass(frozen=True)
class PropertySnapshot:
    id: Any
    cleaning_fee: float = 0.0
    commission_rate: float = 0.0
    name: str | None = None

    def __post_init__(self) -> None:
        if not _valid_amount(self.cleaning_fee):
            raise InvalidPropertyError(self.id, f"cleaning fee must be a finite amount >= 0, got {self.cleaning_fee!r}")
        if self.commission_rate is None or not 0 <= self.commission_rate <= 1:
            raise InvalidPropertyError(
                self.id, f"commission rate must be within [0, 1], got {self.commission_rate!r}"
            )


@dataclass(frozen=True)
class ExpenseSnapshot:
    id: Any
    property_id: Any  # None means shared across all properties
    category: str
    amount: float
    date: date
    description: str = ""

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "date", parse_date(self.date))
        except ValueError as exc:
            raise InvalidExpenseError(self.id, str(exc)) from None
        if not _valid_amount(self.amount):
            raise InvalidExpenseError(self.id, f"amount must be a finite amount >= 0, got {self.amount!r}")
