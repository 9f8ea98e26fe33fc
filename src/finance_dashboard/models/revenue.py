"""Revenue data models."""

from dataclasses import dataclass
from decimal import Decimal

from finance_dashboard.models.unit import BusinessUnit
from finance_dashboard.utils.decimal_utils import ZERO, decimal_to_json


@dataclass(frozen=True)
class RevenueBreakdown:
    """Fine-grained split behind the cash/bank/acquiring triple.

    ``online`` is not part of ``bank``; it is added on top of
    cash + bank + acquiring when totalling a row.
    """

    bank_legal: Decimal = ZERO
    bank_individual: Decimal = ZERO
    online: Decimal = ZERO
    acquiring_terminal: Decimal = ZERO
    cash: Decimal = ZERO

    def plus(self, other: "RevenueBreakdown") -> "RevenueBreakdown":
        """Return the elementwise sum of two breakdowns."""
        return RevenueBreakdown(
            bank_legal=self.bank_legal + other.bank_legal,
            bank_individual=self.bank_individual + other.bank_individual,
            online=self.online + other.online,
            acquiring_terminal=self.acquiring_terminal + other.acquiring_terminal,
            cash=self.cash + other.cash,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "bankLegal": decimal_to_json(self.bank_legal),
            "bankIndividual": decimal_to_json(self.bank_individual),
            "online": decimal_to_json(self.online),
            "acquiringTerminal": decimal_to_json(self.acquiring_terminal),
            "cash": decimal_to_json(self.cash),
        }


@dataclass(frozen=True)
class RevenueRow:
    """One unit's revenue on one date.

    Attributes:
        date: Canonical YYYY-MM-DD date.
        unit: Business unit.
        cash: Cash takings.
        bank: Bank transfers (legal + individual).
        acquiring: Card terminal takings.
        breakdown: Optional finer split of the same money plus online sales.
    """

    date: str
    unit: BusinessUnit
    cash: Decimal = ZERO
    bank: Decimal = ZERO
    acquiring: Decimal = ZERO
    breakdown: RevenueBreakdown | None = None

    @property
    def total(self) -> Decimal:
        """cash + bank + acquiring, plus online sales when a breakdown exists."""
        online = self.breakdown.online if self.breakdown else ZERO
        return self.cash + self.bank + self.acquiring + online
