"""Parser for the cash and account expense sheets."""

from collections.abc import Mapping
from datetime import date
from decimal import Decimal

from finance_dashboard.models.expense import UNSPECIFIED_CATEGORY, ExpenseRecord
from finance_dashboard.models.unit import SheetType
from finance_dashboard.parsers.base import BaseParser, ParseError
from finance_dashboard.parsers.layouts import DEFAULT_SHEET_LAYOUTS, SheetLayout
from finance_dashboard.utils.cells import Grid, as_amount, as_label, cell_at, is_blank
from finance_dashboard.utils.date_utils import InvalidDateError, parse_day_first_date
from finance_dashboard.utils.decimal_utils import InvalidAmountError
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)

# Expenses above this are logged at debug level for spot checks
LARGE_EXPENSE_THRESHOLD = Decimal("50000")


class ExpenseSheetParser(BaseParser):
    """Reads expense records from one of the two expense sheets.

    Each sheet row carries one (date, amount, category) triple per business
    unit at fixed columns (see ``SheetLayout``). Every triple is judged on
    its own: a bad date or amount for one unit does not affect the others
    on the same row.
    """

    def __init__(
        self,
        sheet_type: SheetType,
        layouts: Mapping[SheetType, SheetLayout] | None = None,
        repair_years: bool = True,
        unspecified_category: str = UNSPECIFIED_CATEGORY,
    ):
        """Initialize the parser.

        Args:
            sheet_type: Which expense sheet this parser reads.
            layouts: Layout per sheet type (default: DEFAULT_SHEET_LAYOUTS).
            repair_years: Whether to repair known malformed years.
            unspecified_category: Category used when the cell is empty.
        """
        super().__init__()
        self.sheet_type = sheet_type
        self.layouts = dict(layouts) if layouts is not None else dict(DEFAULT_SHEET_LAYOUTS)
        self.repair_years = repair_years
        self.unspecified_category = unspecified_category

    def parse(self, grid: Grid) -> list[ExpenseRecord]:
        """Parse an expense sheet.

        Args:
            grid: Header row followed by ledger rows.

        Returns:
            One ExpenseRecord per valid (row, unit) pair.

        Raises:
            ParseError: If the grid is not a sequence of rows or no layout exists.
            LayoutError: If the header does not match the layout's expected headers.
        """
        sheet_type = self.sheet_type
        layout = self.layouts.get(sheet_type)
        if layout is None:
            raise ParseError(f"No layout configured for the {sheet_type.value} sheet")

        self._reset_stats(f"expenses:{sheet_type.value}")
        rows = self._data_rows(grid)
        if len(grid) > 0 and layout.expected_headers:
            layout.validate_header(grid[0])

        results: list[ExpenseRecord] = []
        for row_index, row in rows:
            self.stats.rows_seen += 1

            for unit, columns in layout.columns.items():
                date_value = cell_at(row, columns.date)
                amount_value = cell_at(row, columns.amount)
                category_value = cell_at(row, columns.category)

                if is_blank(date_value) and is_blank(amount_value) and is_blank(category_value):
                    self.stats.blank += 1
                    continue

                try:
                    expense_date = parse_day_first_date(date_value, self.repair_years)
                except InvalidDateError as e:
                    self.stats.invalid_date += 1
                    logger.debug(
                        f"{sheet_type.value} row {row_index} ({unit.value}) dropped: {e}; "
                        f"amount={amount_value!r}, category={category_value!r}"
                    )
                    continue

                try:
                    amount = as_amount(amount_value)
                except InvalidAmountError as e:
                    self.stats.invalid_amount += 1
                    logger.debug(f"{sheet_type.value} row {row_index} ({unit.value}) dropped: {e}")
                    continue

                if amount <= 0:
                    self.stats.non_positive_amount += 1
                    continue

                if amount > LARGE_EXPENSE_THRESHOLD:
                    logger.debug(
                        f"Large expense: {amount} on {expense_date} for {unit.value} "
                        f"from {sheet_type.value} sheet"
                    )

                results.append(
                    ExpenseRecord(
                        date=expense_date,
                        unit=unit,
                        amount=amount,
                        category=as_label(category_value) or self.unspecified_category,
                        payment_method=sheet_type,
                        original_date=(
                            date_value.isoformat()
                            if isinstance(date_value, date)
                            else str(date_value)
                        ),
                        row_index=row_index,
                    )
                )

        self.stats.records = len(results)
        self._log_stats()
        return results


def parse_expense_sheet(grid: Grid, sheet_type: SheetType) -> list[ExpenseRecord]:
    """Convenience function to parse an expense sheet with default layouts.

    Args:
        grid: Header row followed by ledger rows.
        sheet_type: Which expense sheet the grid came from.

    Returns:
        Parsed expense records.
    """
    return ExpenseSheetParser(sheet_type).parse(grid)
