"""Exception types raised when input records fail validation."""

from __future__ import annotations

from typing import Any


class RevPilotError(Exception):
    """Base class for all RevPilot errors."""


class InvalidWindowError(RevPilotError, ValueError):
    """A date window whose end precedes its start, or whose bounds are not dates."""


class InvalidRecordError(RevPilotError, ValueError):
    """A single input record is malformed. Carries the offending record id."""

    record_type = "record"

    def __init__(self, record_id: Any, message: str) -> None:
        self.record_id = record_id
        super().__init__(f"{self.record_type} {record_id!r}: {message}")


class InvalidBookingError(InvalidRecordError):
    record_type = "Booking"


class InvalidPropertyError(InvalidRecordError):
    record_type = "Property"


class InvalidExpenseError(InvalidRecordError):
    record_type = "Expense"
