"""Expense model."""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from revpilot.database import Base
from revpilot.snapshots import ExpenseSnapshot


class Expense(Base):
    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int | None] = mapped_column(ForeignKey("properties.id"), nullable=True)  # NULL = shared
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)
    expense_type: Mapped[str] = mapped_column(String(50), default="variable")  # fixed, variable
    is_recurrent: Mapped[bool] = mapped_column(Boolean, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))

    prop: Mapped["Property | None"] = relationship(back_populates="expenses")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Expense id={self.id} {self.category} ${self.amount:.2f}>"

    def to_snapshot(self) -> ExpenseSnapshot:
        return ExpenseSnapshot(
            id=self.id,
            property_id=self.property_id,
            category=self.category,
            amount=self.amount,
            date=self.expense_date,
            description=self.description,
        )
