"""Loads booking, property and expense snapshots from the database."""

from __future__ import annotations

import logging
from typing import Any, Collection

from sqlalchemy import and_, func, or_

from revpilot.database import get_session
from revpilot.models.booking import Booking
from revpilot.models.expense import Expense
from revpilot.models.property import Property
from revpilot.modules.platforms.rules import resolve_rule
from revpilot.snapshots import BookingSnapshot, ExpenseSnapshot, PropertySnapshot, Window

logger = logging.getLogger(__name__)


class BookingStore:
    """Coarse database filtering in front of the pure engine.

    Filters here only narrow the candidate set. Window membership by platform
    anchor is decided later by the recognition engine, never by these queries.
    """

    def load_bookings(
        self,
        window: Window,
        property_ids: Collection[Any] | None = None,
        platform: str | None = None,
    ) -> list[BookingSnapshot]:
        """Bookings whose stay overlaps the window or whose payment falls in it."""
        session = get_session()
        try:
            query = session.query(Booking).filter(
                or_(
                    and_(
                        Booking.check_out_date >= window.start,
                        Booking.check_in_date <= window.end,
                    ),
                    and_(
                        Booking.payment_date >= window.start,
                        Booking.payment_date <= window.end,
                    ),
                )
            )
            if property_ids:
                query = query.filter(Booking.property_id.in_(list(property_ids)))
            if platform is not None:
                rule = resolve_rule(platform)
                names = {rule.platform.lower(), *rule.aliases}
                query = query.filter(func.lower(Booking.platform).in_(sorted(names)))

            rows = query.order_by(Booking.check_in_date, Booking.id).all()
            snapshots = [row.to_snapshot() for row in rows]
            logger.info("Loaded %d bookings for %s", len(snapshots), window)
            return snapshots
        finally:
            session.close()

    def load_properties(self, property_ids: Collection[Any] | None = None) -> list[PropertySnapshot]:
        session = get_session()
        try:
            query = session.query(Property)
            if property_ids:
                query = query.filter(Property.id.in_(list(property_ids)))
            return [prop.to_snapshot() for prop in query.order_by(Property.id).all()]
        finally:
            session.close()

    def load_expenses(
        self, window: Window, property_ids: Collection[Any] | None = None
    ) -> list[ExpenseSnapshot]:
        """Expenses dated in the window; shared expenses are always included."""
        session = get_session()
        try:
            query = session.query(Expense).filter(
                Expense.expense_date >= window.start,
                Expense.expense_date <= window.end,
            )
            if property_ids:
                query = query.filter(
                    or_(Expense.property_id.in_(list(property_ids)), Expense.property_id.is_(None))
                )
            return [e.to_snapshot() for e in query.order_by(Expense.expense_date, Expense.id).all()]
        finally:
            session.close()
