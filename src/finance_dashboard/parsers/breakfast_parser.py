"""Parser for the optional breakfast-count ledger."""

from finance_dashboard.models.breakfast import BreakfastEntry
from finance_dashboard.parsers.base import BaseParser
from finance_dashboard.utils.cells import Grid, as_amount, cell_at, is_blank
from finance_dashboard.utils.date_utils import InvalidDateError, parse_day_first_date
from finance_dashboard.utils.decimal_utils import InvalidAmountError
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class BreakfastParser(BaseParser):
    """Reads ``(date, count, amount)`` rows from the breakfast ledger.

    Dates are always day-first. A row is dropped when its date is invalid
    or its count/amount is non-numeric, negative, or (for count) fractional.
    """

    def __init__(
        self,
        date_col: int = 0,
        count_col: int = 1,
        amount_col: int = 2,
        repair_years: bool = True,
    ):
        super().__init__()
        self.date_col = date_col
        self.count_col = count_col
        self.amount_col = amount_col
        self.repair_years = repair_years

    def parse(self, grid: Grid) -> list[BreakfastEntry]:
        """Parse breakfast entries from a grid.

        Args:
            grid: Header row followed by ledger rows.

        Returns:
            Valid breakfast entries.
        """
        self._reset_stats("breakfast")
        entries: list[BreakfastEntry] = []

        for row_index, row in self._data_rows(grid):
            self.stats.rows_seen += 1
            date_value = cell_at(row, self.date_col)
            count_value = cell_at(row, self.count_col)
            amount_value = cell_at(row, self.amount_col)

            if is_blank(date_value) and is_blank(count_value) and is_blank(amount_value):
                self.stats.blank += 1
                continue

            try:
                entry_date = parse_day_first_date(date_value, self.repair_years)
            except InvalidDateError as e:
                self.stats.invalid_date += 1
                logger.debug(f"Breakfast row {row_index} dropped: {e}")
                continue

            try:
                count = as_amount(count_value)
                amount = as_amount(amount_value)
            except InvalidAmountError as e:
                self.stats.invalid_amount += 1
                logger.debug(f"Breakfast row {row_index} dropped: {e}")
                continue

            if count < 0 or amount < 0 or count != count.to_integral_value():
                self.stats.invalid_amount += 1
                continue

            entries.append(BreakfastEntry(date=entry_date, count=int(count), amount=amount))

        self.stats.records = len(entries)
        self._log_stats()
        return entries
