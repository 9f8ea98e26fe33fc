"""Report data models for the dashboard output."""

from dataclasses import dataclass, field
from decimal import Decimal

from finance_dashboard.models.expense import ExpenseDetails
from finance_dashboard.models.revenue import RevenueBreakdown
from finance_dashboard.models.unit import BusinessUnit
from finance_dashboard.utils.decimal_utils import ZERO, decimal_to_json


@dataclass
class RevenueTotals:
    """Summed revenue of one (date, unit).

    ``total`` is cash + bank + acquiring + breakdown.online.
    """

    cash: Decimal = ZERO
    bank: Decimal = ZERO
    acquiring: Decimal = ZERO
    total: Decimal = ZERO
    breakdown: RevenueBreakdown | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "cash": decimal_to_json(self.cash),
            "bank": decimal_to_json(self.bank),
            "acquiring": decimal_to_json(self.acquiring),
            "total": decimal_to_json(self.total),
        }
        if self.breakdown is not None:
            data["breakdown"] = self.breakdown.to_dict()
        return data


@dataclass
class ExpenseTotals:
    """Summed expenses of one (date, unit)."""

    purchases: Decimal = ZERO
    salaries: Decimal = ZERO
    other: Decimal = ZERO
    total: Decimal = ZERO

    def to_dict(self) -> dict[str, object]:
        return {
            "purchases": decimal_to_json(self.purchases),
            "salaries": decimal_to_json(self.salaries),
            "other": decimal_to_json(self.other),
            "total": decimal_to_json(self.total),
        }


@dataclass
class AggregatedDailyUnit:
    """Canonical output row: one per (date, unit) seen in either source.

    Attributes:
        date: Canonical YYYY-MM-DD date.
        unit: Business unit.
        revenue: Summed revenue.
        expense: Summed expenses.
        profit: revenue.total - expense.total (may be negative).
        expense_details: Combined expense detail, when expenses exist.
    """

    date: str
    unit: BusinessUnit
    revenue: RevenueTotals = field(default_factory=RevenueTotals)
    expense: ExpenseTotals = field(default_factory=ExpenseTotals)
    profit: Decimal = ZERO
    expense_details: ExpenseDetails | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Sort/group key: date, then unit identifier."""
        return (self.date, self.unit.value)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "date": self.date,
            "unit": self.unit.value,
            "revenue": self.revenue.to_dict(),
            "expense": self.expense.to_dict(),
            "profit": decimal_to_json(self.profit),
        }
        if self.expense_details is not None:
            data["expenseDetails"] = self.expense_details.to_dict()
        return data
