"""Parser for the synthetic revenue grid."""

from collections.abc import Mapping
from decimal import Decimal

from finance_dashboard.models.revenue import RevenueBreakdown, RevenueRow
from finance_dashboard.parsers.base import BaseParser
from finance_dashboard.utils.cells import (
    Cell,
    Grid,
    MoneyPolicy,
    as_date,
    cell_at,
    coerce_money,
    is_blank_row,
)
from finance_dashboard.utils.date_utils import InvalidDateError
from finance_dashboard.utils.decimal_utils import ZERO, InvalidAmountError
from finance_dashboard.utils.logging_config import get_logger
from finance_dashboard.utils.unit_utils import UnknownUnitError, normalize_unit

logger = get_logger(__name__)

# Column order of the revenue grid: header row, then one row per unit-day
REVENUE_HEADER = ["date", "unit", "cash", "bank", "acquiring", "breakdown"]
DATE_COL, UNIT_COL, CASH_COL, BANK_COL, ACQUIRING_COL, BREAKDOWN_COL = range(6)

# Breakdown field name -> keys accepted in a mapping cell
BREAKDOWN_KEYS = {
    "bank_legal": ("bank_legal", "bankLegal"),
    "bank_individual": ("bank_individual", "bankIndividual"),
    "online": ("online",),
    "acquiring_terminal": ("acquiring_terminal", "acquiringTerminal"),
    "cash": ("cash",),
}


class RevenueRowParser(BaseParser):
    """Parses ``[date, unit, cash, bank, acquiring, breakdown?]`` rows.

    Rows with an unparseable date or unknown unit are dropped silently.
    Money cells follow the configured MoneyPolicy: under STRICT a non-numeric
    cell drops the row, under LENIENT it counts as zero.
    """

    def __init__(self, money_policy: MoneyPolicy = MoneyPolicy.STRICT):
        """Initialize the parser.

        Args:
            money_policy: Treatment of non-numeric money cells.
        """
        super().__init__()
        self.money_policy = money_policy

    def parse(self, grid: Grid) -> list[RevenueRow]:
        """Parse revenue rows from a grid.

        Args:
            grid: Header row followed by revenue rows.

        Returns:
            Valid RevenueRow records, in grid order.

        Raises:
            ParseError: If the grid is not a sequence of rows.
        """
        self._reset_stats()
        result: list[RevenueRow] = []

        for row_index, row in self._data_rows(grid):
            self.stats.rows_seen += 1

            if is_blank_row(row):
                self.stats.blank += 1
                continue

            try:
                row_date = as_date(cell_at(row, DATE_COL))
            except InvalidDateError as e:
                self.stats.invalid_date += 1
                logger.debug(f"Revenue row {row_index} dropped: {e}")
                continue

            try:
                unit = normalize_unit(cell_at(row, UNIT_COL))
            except UnknownUnitError as e:
                self.stats.unknown_unit += 1
                logger.debug(f"Revenue row {row_index} dropped: {e}")
                continue

            try:
                cash = self._money(cell_at(row, CASH_COL))
                bank = self._money(cell_at(row, BANK_COL))
                acquiring = self._money(cell_at(row, ACQUIRING_COL))
                breakdown = self._parse_breakdown(cell_at(row, BREAKDOWN_COL), cash)
            except InvalidAmountError as e:
                self.stats.invalid_amount += 1
                logger.debug(f"Revenue row {row_index} dropped: {e}")
                continue

            result.append(
                RevenueRow(
                    date=row_date,
                    unit=unit,
                    cash=cash,
                    bank=bank,
                    acquiring=acquiring,
                    breakdown=breakdown,
                )
            )

        self.stats.records = len(result)
        self._log_stats()
        return result

    def _money(self, cell: Cell) -> Decimal:
        return coerce_money(cell, self.money_policy)

    def _parse_breakdown(self, cell: Cell, row_cash: Decimal) -> RevenueBreakdown | None:
        """Re-coerce an attached breakdown.

        Missing sub-fields are zero, except ``cash`` which falls back to the
        row's plain cash amount.

        Args:
            cell: RevenueBreakdown, mapping, or anything else (ignored).
            row_cash: The row's cash amount.

        Returns:
            RevenueBreakdown, or None if the cell carries no breakdown.
        """
        if isinstance(cell, RevenueBreakdown):
            return cell
        if not isinstance(cell, Mapping):
            return None

        values: dict[str, Decimal] = {}
        for field_name, keys in BREAKDOWN_KEYS.items():
            raw = next((cell[k] for k in keys if k in cell and cell[k] is not None), None)
            if raw is None:
                values[field_name] = row_cash if field_name == "cash" else ZERO
            else:
                values[field_name] = self._money(raw)

        return RevenueBreakdown(**values)


def parse_revenue_rows(
    grid: Grid,
    money_policy: MoneyPolicy = MoneyPolicy.STRICT,
) -> list[RevenueRow]:
    """Convenience function to parse a revenue grid.

    Args:
        grid: Header row followed by revenue rows.
        money_policy: Treatment of non-numeric money cells.

    Returns:
        Valid RevenueRow records.
    """
    return RevenueRowParser(money_policy).parse(grid)
