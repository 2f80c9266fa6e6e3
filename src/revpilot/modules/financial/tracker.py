"""Period and annual profit reports built from recognized revenue and expenses."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Collection, Iterable, Mapping, Sequence

from revpilot.modules.recognition.engine import (
    RecognitionFlag,
    RecognitionReport,
    RevenueRecognitionEngine,
    index_properties,
    merge_flags,
)
from revpilot.modules.waterfall.calculator import from_cents, to_cents
from revpilot.snapshots import BookingSnapshot, ExpenseSnapshot, PropertySnapshot, Window

logger = logging.getLogger(__name__)


@dataclass
class PeriodReport:
    window: Window
    gross_revenue: float
    net_revenue: float
    deferred_net_revenue: float
    cash_net_revenue: float
    total_expenses: float
    net_profit: float
    profit_margin: float
    reservation_count: int = 0
    expenses_by_category: dict[str, float] = field(default_factory=dict)
    revenue_by_platform: list[tuple[str, float]] = field(default_factory=list)
    flags: list[RecognitionFlag] = field(default_factory=list)


@dataclass
class AnnualReport:
    year: int
    gross_revenue: float
    net_revenue: float
    total_expenses: float
    net_profit: float
    profit_margin: float
    expenses_by_category: dict[str, float] = field(default_factory=dict)
    monthly_breakdown: list[PeriodReport] = field(default_factory=list)
    flags: list[RecognitionFlag] = field(default_factory=list)


def _margin(net_profit: float, net_revenue: float) -> float:
    if net_revenue <= 0:
        return 0.0
    return net_profit / net_revenue * 100


class FinancialTracker:
    """Combines the recognition engine's operational view with period expenses."""

    def __init__(self, engine: RevenueRecognitionEngine | None = None) -> None:
        self._engine = engine or RevenueRecognitionEngine()

    def _expenses_in_scope(
        self,
        expenses: Iterable[ExpenseSnapshot],
        window: Window,
        property_ids: Collection[Any] | None,
    ) -> list[ExpenseSnapshot]:
        scope = set(property_ids) if property_ids else None
        return [
            e for e in expenses
            if window.contains(e.date)
            and (scope is None or e.property_id is None or e.property_id in scope)
        ]

    def report_from_recognition(
        self,
        report: RecognitionReport,
        expenses: Iterable[ExpenseSnapshot],
        property_ids: Collection[Any] | None = None,
    ) -> PeriodReport:
        """Build a period report from an already computed recognition report."""
        in_scope = self._expenses_in_scope(expenses, report.window, property_ids)

        by_category_cents: dict[str, int] = {}
        for expense in in_scope:
            by_category_cents[expense.category] = by_category_cents.get(expense.category, 0) + to_cents(expense.amount)
        expense_cents = sum(by_category_cents.values())

        operational = report.operational.totals
        net_profit_cents = operational.net_cents - expense_cents
        revenue_by_platform = sorted(
            ((name, totals.gross_revenue) for name, totals in report.operational.by_platform.items()),
            key=lambda item: (-item[1], item[0]),
        )

        return PeriodReport(
            window=report.window,
            gross_revenue=operational.gross_revenue,
            net_revenue=operational.net_revenue,
            deferred_net_revenue=report.deferred.totals.net_revenue,
            cash_net_revenue=report.financial.totals.net_revenue,
            total_expenses=from_cents(expense_cents),
            net_profit=from_cents(net_profit_cents),
            profit_margin=_margin(from_cents(net_profit_cents), operational.net_revenue),
            reservation_count=operational.reservation_count,
            expenses_by_category={k: from_cents(v) for k, v in sorted(by_category_cents.items())},
            revenue_by_platform=revenue_by_platform,
            flags=report.flags,
        )

    def get_period_report(
        self,
        bookings: Sequence[BookingSnapshot],
        properties: Iterable[PropertySnapshot] | Mapping[Any, PropertySnapshot] | None,
        expenses: Iterable[ExpenseSnapshot],
        window: Window,
        property_ids: Collection[Any] | None = None,
        platform: str | None = None,
    ) -> PeriodReport:
        """Generate a profit report for one window."""
        if property_ids:
            scope = set(property_ids)
            bookings = [b for b in bookings if b.property_id in scope]
        report = self._engine.recognize(bookings, properties, window, platform)
        return self.report_from_recognition(report, expenses, property_ids)

    def get_annual_report(
        self,
        bookings: Sequence[BookingSnapshot],
        properties: Iterable[PropertySnapshot] | Mapping[Any, PropertySnapshot] | None,
        expenses: Sequence[ExpenseSnapshot],
        year: int,
        property_ids: Collection[Any] | None = None,
        platform: str | None = None,
    ) -> AnnualReport:
        """Generate an annual report with a monthly breakdown."""
        props = index_properties(properties)
        year_window = Window(date(year, 1, 1), date(year, 12, 31))
        monthly_reports = [
            self.get_period_report(bookings, props, expenses, month, property_ids, platform)
            for month in year_window.iter_months()
        ]

        gross_cents = sum(to_cents(r.gross_revenue) for r in monthly_reports)
        net_cents = sum(to_cents(r.net_revenue) for r in monthly_reports)
        expense_cents = sum(to_cents(r.total_expenses) for r in monthly_reports)

        # Aggregate expenses by category
        all_categories: dict[str, int] = {}
        for report in monthly_reports:
            for cat, amount in report.expenses_by_category.items():
                all_categories[cat] = all_categories.get(cat, 0) + to_cents(amount)

        net_profit = from_cents(net_cents - expense_cents)
        logger.info("Built annual report for %d: net profit %.2f", year, net_profit)
        return AnnualReport(
            year=year,
            gross_revenue=from_cents(gross_cents),
            net_revenue=from_cents(net_cents),
            total_expenses=from_cents(expense_cents),
            net_profit=net_profit,
            profit_margin=_margin(net_profit, from_cents(net_cents)),
            expenses_by_category={k: from_cents(v) for k, v in sorted(all_categories.items())},
            monthly_breakdown=monthly_reports,
            flags=merge_flags(*(r.flags for r in monthly_reports)),
        )
