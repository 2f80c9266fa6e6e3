"""Tests for database models."""

from datetime import date

import pytest
from sqlalchemy.orm import Session

from revpilot.errors import InvalidBookingError
from revpilot.models.booking import Booking
from revpilot.models.expense import Expense
from revpilot.models.property import Property
from revpilot.snapshots import BookingStatus


def test_create_property(db_session: Session):
    prop = Property(name="Beach House", address="456 Ocean Dr", cleaning_fee=80.0, commission_rate=0.25)
    db_session.add(prop)
    db_session.commit()

    loaded = db_session.query(Property).first()
    assert loaded.name == "Beach House"
    assert loaded.display_name == "Beach House"
    assert loaded.status == "active"


def test_property_snapshot(sample_property: Property):
    snapshot = sample_property.to_snapshot()
    assert snapshot.id == sample_property.id
    assert snapshot.name == "Loft"
    assert snapshot.commission_rate == 0.20


def test_booking_nights(sample_bookings: list[Booking]):
    assert sample_bookings[0].nights == 4  # Mar 2 to Mar 6


def test_booking_property_relationship(db_session: Session, sample_bookings: list[Booking]):
    booking = db_session.query(Booking).first()
    assert booking.prop is not None
    assert booking.prop.name == "Test Loft"


def test_booking_snapshot(sample_bookings: list[Booking]):
    snapshot = sample_bookings[1].to_snapshot()
    assert snapshot.platform == "Booking.com"
    assert snapshot.check_out == date(2024, 3, 30)
    assert snapshot.payment_date == date(2024, 4, 15)
    assert snapshot.status is BookingStatus.CONFIRMED
    assert snapshot.label == "BKG1"


def test_booking_snapshot_rejects_unknown_status(db_session: Session, sample_property: Property):
    booking = Booking(
        property_id=sample_property.id, platform="Airbnb",
        check_in_date=date(2024, 3, 1), check_out_date=date(2024, 3, 2),
        reservation_status="maybe",
    )
    db_session.add(booking)
    db_session.commit()

    with pytest.raises(InvalidBookingError, match="unknown status"):
        booking.to_snapshot()


def test_shared_expense_snapshot(sample_expenses: list[Expense]):
    snapshot = sample_expenses[1].to_snapshot()
    assert snapshot.property_id is None
    assert snapshot.category == "software"
    assert snapshot.date == date(2024, 3, 1)
