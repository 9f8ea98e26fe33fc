"""Expense data models."""

from dataclasses import dataclass, field
from decimal import Decimal

from finance_dashboard.models.unit import BusinessUnit, PaymentMethod
from finance_dashboard.utils.decimal_utils import ZERO, decimal_to_json

# Category recorded when the ledger leaves the category cell empty
UNSPECIFIED_CATEGORY = "Не указано"


@dataclass(frozen=True)
class ExpenseRecord:
    """One category-level expense transaction from an expense sheet.

    Attributes:
        date: Canonical YYYY-MM-DD date.
        unit: Business unit the expense is booked against.
        amount: Positive amount.
        category: Free-text expense category.
        payment_method: Sheet the record came from.
        original_date: Date cell as typed, kept for tracing.
        row_index: Grid row index, kept for tracing.
    """

    date: str
    unit: BusinessUnit
    amount: Decimal
    category: str
    payment_method: PaymentMethod
    original_date: str = ""
    row_index: int = 0


@dataclass(frozen=True)
class CategoryDetail:
    """A single transaction retained inside a combined expense row."""

    category: str
    amount: Decimal
    payment_method: PaymentMethod
    row_index: int

    def to_dict(self) -> dict[str, object]:
        return {
            "category": self.category,
            "amount": decimal_to_json(self.amount),
            "paymentMethod": self.payment_method.value,
            "rowIndex": self.row_index,
        }


@dataclass(frozen=True)
class ExpenseDetails:
    """Payment-method split and transaction list for one (date, unit).

    Invariant: ``total == cash + account == sum(d.amount for d in category_details)``.
    """

    cash: Decimal = ZERO
    account: Decimal = ZERO
    total: Decimal = ZERO
    cash_count: int = 0
    account_count: int = 0
    categories: tuple[str, ...] = ()
    category_details: tuple[CategoryDetail, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "cash": decimal_to_json(self.cash),
            "account": decimal_to_json(self.account),
            "total": decimal_to_json(self.total),
            "cashCount": self.cash_count,
            "accountCount": self.account_count,
            "categories": list(self.categories),
            "categoryDetails": [d.to_dict() for d in self.category_details],
        }


@dataclass(frozen=True)
class DetailedExpenseRow:
    """Combined expenses of one unit on one date.

    ``purchases`` and ``salaries`` are kept for the dashboard's legacy shape
    and are always zero here; everything lands in ``other``. Category
    bucketing happens in the front end from ``expense_details``.
    """

    date: str
    unit: BusinessUnit
    purchases: Decimal = ZERO
    salaries: Decimal = ZERO
    other: Decimal = ZERO
    expense_details: ExpenseDetails = field(default_factory=ExpenseDetails)

    @property
    def total(self) -> Decimal:
        return self.purchases + self.salaries + self.other
