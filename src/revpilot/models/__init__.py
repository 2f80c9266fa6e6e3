"""Database models."""

from revpilot.models.booking import Booking
from revpilot.models.expense import Expense
from revpilot.models.property import Property

__all__ = [
    "Booking",
    "Expense",
    "Property",
]
