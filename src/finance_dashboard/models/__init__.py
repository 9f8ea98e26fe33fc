"""Data models for revenue, expenses and the aggregated daily report."""

from finance_dashboard.models.breakfast import BreakfastEntry, BreakfastInfo
from finance_dashboard.models.diagnostics import ParseStats
from finance_dashboard.models.expense import (
    UNSPECIFIED_CATEGORY,
    CategoryDetail,
    DetailedExpenseRow,
    ExpenseDetails,
    ExpenseRecord,
)
from finance_dashboard.models.report import (
    AggregatedDailyUnit,
    ExpenseTotals,
    RevenueTotals,
)
from finance_dashboard.models.revenue import RevenueBreakdown, RevenueRow
from finance_dashboard.models.unit import BusinessUnit, PaymentMethod, SheetType

__all__ = [
    "AggregatedDailyUnit",
    "BreakfastEntry",
    "BreakfastInfo",
    "BusinessUnit",
    "CategoryDetail",
    "DetailedExpenseRow",
    "ExpenseDetails",
    "ExpenseRecord",
    "ExpenseTotals",
    "ParseStats",
    "PaymentMethod",
    "RevenueBreakdown",
    "RevenueRow",
    "RevenueTotals",
    "SheetType",
    "UNSPECIFIED_CATEGORY",
]
