"""Booking model."""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from revpilot.database import Base
from revpilot.snapshots import BookingSnapshot


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), nullable=False)
    platform: Mapped[str] = mapped_column(String(50), default="Direct")  # Airbnb, Booking.com, Direct
    reservation_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    guest_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_revenue: Mapped[float] = mapped_column(Float, default=0.0)
    reservation_status: Mapped[str] = mapped_column(String(50), default="confirmed")  # confirmed, in_progress, finished, cancelled
    payment_status: Mapped[str | None] = mapped_column(String(50), nullable=True)  # pending, paid
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    prop: Mapped["Property"] = relationship(back_populates="bookings")  # noqa: F821

    def __repr__(self) -> str:
        return (
            f"<Booking id={self.id} property_id={self.property_id} "
            f"platform={self.platform!r} {self.check_in_date}..{self.check_out_date}>"
        )

    @property
    def nights(self) -> int:
        return (self.check_out_date - self.check_in_date).days

    def to_snapshot(self) -> BookingSnapshot:
        """Detach into an immutable engine record. Raises InvalidBookingError on bad rows."""
        return BookingSnapshot(
            id=self.id,
            property_id=self.property_id,
            platform=self.platform,
            check_in=self.check_in_date,
            check_out=self.check_out_date,
            gross_revenue=self.total_revenue or 0.0,
            payment_date=self.payment_date,
            status=self.reservation_status,
            reservation_code=self.reservation_code,
        )
