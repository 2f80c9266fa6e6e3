"""Shared test fixtures."""

from __future__ import annotations

import os
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"  # In-memory DB for tests

from revpilot.database import Base
from revpilot.models.booking import Booking
from revpilot.models.expense import Expense
from revpilot.models.property import Property
from revpilot.snapshots import BookingSnapshot, PropertySnapshot, Window


def make_booking(
    booking_id: str,
    check_in: str,
    check_out: str,
    platform: str = "Airbnb",
    property_id: str = "P1",
    gross: float = 1000.0,
    payment_date: str | None = None,
    status: str = "confirmed",
) -> BookingSnapshot:
    """Build a booking snapshot from ISO date strings."""
    return BookingSnapshot(
        id=booking_id,
        property_id=property_id,
        platform=platform,
        check_in=check_in,
        check_out=check_out,
        gross_revenue=gross,
        payment_date=payment_date,
        status=status,
    )


@pytest.fixture
def march() -> Window:
    return Window(date(2024, 3, 1), date(2024, 3, 31))


@pytest.fixture
def properties() -> list[PropertySnapshot]:
    return [
        PropertySnapshot(id="P1", cleaning_fee=100.0, commission_rate=0.20, name="Loft"),
        PropertySnapshot(id="P2", cleaning_fee=0.0, commission_rate=0.15, name="Studio"),
    ]


@pytest.fixture
def db_session():
    """Create a fresh in-memory database for each test."""
    engine = create_engine("sqlite://", echo=False)
    Base.metadata.create_all(engine)
    session_factory = sessionmaker(bind=engine)
    session = session_factory()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def sample_property(db_session: Session) -> Property:
    """Create a sample property."""
    prop = Property(
        name="Test Loft",
        nickname="Loft",
        address="123 Test St",
        cleaning_fee=100.0,
        commission_rate=0.20,
    )
    db_session.add(prop)
    db_session.commit()
    return prop


@pytest.fixture
def sample_bookings(db_session: Session, sample_property: Property) -> list[Booking]:
    """Seed March 2024 bookings across all three platforms."""
    bookings = [
        Booking(
            property_id=sample_property.id, platform="Airbnb", reservation_code="AIR1",
            check_in_date=date(2024, 3, 2), check_out_date=date(2024, 3, 6),
            payment_date=date(2024, 3, 3), total_revenue=900.0,
        ),
        Booking(
            property_id=sample_property.id, platform="Booking.com", reservation_code="BKG1",
            check_in_date=date(2024, 3, 25), check_out_date=date(2024, 3, 30),
            payment_date=date(2024, 4, 15), total_revenue=1100.0,
        ),
        Booking(
            property_id=sample_property.id, platform="Direct", reservation_code="DIR1",
            check_in_date=date(2024, 3, 10), check_out_date=date(2024, 3, 12),
            payment_date=date(2024, 3, 10), total_revenue=400.0,
        ),
        Booking(
            property_id=sample_property.id, platform="Airbnb", reservation_code="AIR2",
            check_in_date=date(2024, 5, 1), check_out_date=date(2024, 5, 4),
            payment_date=date(2024, 5, 2), total_revenue=600.0,
        ),
    ]
    for booking in bookings:
        db_session.add(booking)
    db_session.commit()
    return bookings


@pytest.fixture
def sample_expenses(db_session: Session, sample_property: Property) -> list[Expense]:
    expenses = [
        Expense(property_id=sample_property.id, category="cleaning", description="Deep clean",
                amount=120.0, expense_date=date(2024, 3, 7)),
        Expense(property_id=None, category="software", description="Channel manager",
                amount=30.0, expense_date=date(2024, 3, 1)),
        Expense(property_id=sample_property.id, category="utilities", description="Power",
                amount=80.0, expense_date=date(2024, 4, 2)),
    ]
    for expense in expenses:
        db_session.add(expense)
    db_session.commit()
    return expenses
