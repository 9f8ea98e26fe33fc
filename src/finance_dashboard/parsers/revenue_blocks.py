"""Builds the revenue grid from the per-unit blocks of the revenue sheet.

The revenue sheet holds one column block per business unit, each starting
with a date column. Blocks are fetched separately (e.g. ``Выручка!B:G``)
and flattened here into the grid read by ``RevenueRowParser``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from finance_dashboard.models.diagnostics import ParseStats
from finance_dashboard.models.revenue import RevenueBreakdown
from finance_dashboard.models.unit import BusinessUnit
from finance_dashboard.parsers.base import ParseError
from finance_dashboard.parsers.revenue_parser import REVENUE_HEADER
from finance_dashboard.utils.cells import (
    Grid,
    MoneyPolicy,
    Row,
    as_date,
    cell_at,
    coerce_money,
    is_blank_row,
)
from finance_dashboard.utils.date_utils import InvalidDateError
from finance_dashboard.utils.decimal_utils import ZERO, InvalidAmountError
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RevenueBlockLayout:
    """Money column offsets inside one unit's block (date is column 0).

    A None offset means the block has no such column.
    """

    bank_legal: int | None = None
    bank_individual: int | None = None
    online: int | None = None
    acquiring_terminal: int | None = None
    cash: int | None = None

    @property
    def money_columns(self) -> list[int]:
        """Offsets of every money column present in the block."""
        offsets = [
            self.bank_legal,
            self.bank_individual,
            self.online,
            self.acquiring_terminal,
            self.cash,
        ]
        return [o for o in offsets if o is not None]


# Hotel B:G    -> date, bank (legal), bank (individual), online, terminal, cash
# Restaurant J:M, Spa P:S -> date, bank, terminal, cash
# Pool V:Y, Bar AB:AE     -> date, (unused), terminal, cash
DEFAULT_BLOCK_LAYOUTS: dict[BusinessUnit, RevenueBlockLayout] = {
    BusinessUnit.HOTEL: RevenueBlockLayout(
        bank_legal=1, bank_individual=2, online=3, acquiring_terminal=4, cash=5
    ),
    BusinessUnit.RESTAURANT: RevenueBlockLayout(bank_legal=1, acquiring_terminal=2, cash=3),
    BusinessUnit.SPA: RevenueBlockLayout(bank_legal=1, acquiring_terminal=2, cash=3),
    BusinessUnit.POOL: RevenueBlockLayout(acquiring_terminal=2, cash=3),
    BusinessUnit.BAR: RevenueBlockLayout(acquiring_terminal=2, cash=3),
}


class RevenueBlockBuilder:
    """Flattens per-unit revenue blocks into one revenue grid.

    Rows without a valid date are skipped, which also drops each block's
    header row. Money cells follow the MoneyPolicy shared with
    RevenueRowParser.
    """

    def __init__(
        self,
        layouts: Mapping[BusinessUnit, RevenueBlockLayout] | None = None,
        money_policy: MoneyPolicy = MoneyPolicy.STRICT,
    ):
        """Initialize the builder.

        Args:
            layouts: Block layout per unit (default: DEFAULT_BLOCK_LAYOUTS).
            money_policy: Treatment of non-numeric money cells.
        """
        self.layouts = dict(layouts) if layouts is not None else dict(DEFAULT_BLOCK_LAYOUTS)
        self.money_policy = money_policy
        self.stats: dict[BusinessUnit, ParseStats] = {}

    def build(self, blocks: Mapping[BusinessUnit, Grid]) -> list[list[object]]:
        """Build the revenue grid.

        Args:
            blocks: Raw block grid per unit, as read from the sheet.

        Returns:
            Header row followed by ``[date, unit, cash, bank, acquiring, breakdown]`` rows.

        Raises:
            ParseError: If a unit has no layout or a block is not a sequence of rows.
        """
        grid: list[list[object]] = [list(REVENUE_HEADER)]
        self.stats = {}

        for unit, block in blocks.items():
            layout = self.layouts.get(unit)
            if layout is None:
                raise ParseError(f"No revenue block layout for unit '{unit.value}'")
            if not isinstance(block, (list, tuple)):
                raise ParseError(
                    f"Expected a sequence of rows, got {type(block).__name__}",
                    f"revenue:{unit.value}",
                )

            stats = ParseStats(source=f"revenue:{unit.value}")
            for row_index, row in enumerate(block):
                built = self._build_row(unit, layout, row, row_index, stats)
                if built is not None:
                    grid.append(built)
                    stats.records += 1

            self.stats[unit] = stats
            logger.info(stats.summary())

        return grid

    def _build_row(
        self,
        unit: BusinessUnit,
        layout: RevenueBlockLayout,
        row: Row,
        row_index: int,
        stats: ParseStats,
    ) -> list[object] | None:
        if not isinstance(row, (list, tuple)) or is_blank_row(row):
            stats.blank += 1
            return None

        try:
            row_date = as_date(cell_at(row, 0))
        except InvalidDateError:
            # Row 0 is the sheet header; not worth counting
            if row_index > 0:
                stats.rows_seen += 1
                stats.invalid_date += 1
            return None

        stats.rows_seen += 1
        try:
            money = {
                name: self._money(row, getattr(layout, name))
                for name in ("bank_legal", "bank_individual", "online", "acquiring_terminal", "cash")
            }
        except InvalidAmountError as e:
            stats.invalid_amount += 1
            logger.debug(f"{unit.value} revenue row {row_index} dropped: {e}")
            return None

        breakdown = RevenueBreakdown(**money)
        bank = breakdown.bank_legal + breakdown.bank_individual
        acquiring = breakdown.acquiring_terminal
        return [row_date, unit.value, breakdown.cash, bank, acquiring, breakdown]

    def _money(self, row: Row, offset: int | None) -> Decimal:
        if offset is None:
            return ZERO
        return coerce_money(cell_at(row, offset), self.money_policy)
