"""Breakfast ledger data models."""

from dataclasses import dataclass
from decimal import Decimal

from finance_dashboard.utils.decimal_utils import ZERO, decimal_to_json


@dataclass(frozen=True)
class BreakfastEntry:
    """Breakfasts served on one date."""

    date: str
    count: int
    amount: Decimal = ZERO


@dataclass(frozen=True)
class BreakfastInfo:
    """Breakfast totals for a period."""

    count: int = 0
    amount: Decimal = ZERO

    def to_dict(self) -> dict[str, object]:
        return {"count": self.count, "amount": decimal_to_json(self.amount)}
