from revpilot.modules.financial.tracker import AnnualReport, FinancialTracker, PeriodReport

__all__ = ["AnnualReport", "FinancialTracker", "PeriodReport"]
