"""Property model."""

from __future__ import annotations

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from revpilot.database import Base
from revpilot.snapshots import PropertySnapshot


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    nickname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="active")  # active, inactive
    cleaning_fee: Mapped[float] = mapped_column(Float, default=0.0)
    commission_rate: Mapped[float] = mapped_column(Float, default=0.0)  # Co-host share of base revenue, 0..1
    base_nightly_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    bookings: Mapped[list["Booking"]] = relationship(back_populates="prop")  # noqa: F821
    expenses: Mapped[list["Expense"]] = relationship(back_populates="prop")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Property id={self.id} name={self.name!r}>"

    @property
    def display_name(self) -> str:
        return self.nickname or self.name

    def to_snapshot(self) -> PropertySnapshot:
        return PropertySnapshot(
            id=self.id,
            cleaning_fee=self.cleaning_fee or 0.0,
            commission_rate=self.commission_rate or 0.0,
            name=self.display_name,
        )
