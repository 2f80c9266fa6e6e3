from revpilot.modules.waterfall.calculator import (
    RevenueBreakdown,
    RevenueTotals,
    compute_breakdown,
    sum_breakdowns,
)

__all__ = ["RevenueBreakdown", "RevenueTotals", "compute_breakdown", "sum_breakdowns"]
