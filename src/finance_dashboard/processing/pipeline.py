"""End-to-end pipeline: raw grids -> aggregated daily unit rows."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from finance_dashboard.config import Config
from finance_dashboard.models.breakfast import BreakfastEntry
from finance_dashboard.models.diagnostics import ParseStats
from finance_dashboard.models.expense import ExpenseRecord
from finance_dashboard.models.report import AggregatedDailyUnit
from finance_dashboard.models.unit import BusinessUnit, SheetType
from finance_dashboard.parsers.breakfast_parser import BreakfastParser
from finance_dashboard.parsers.expense_parser import ExpenseSheetParser
from finance_dashboard.parsers.revenue_blocks import RevenueBlockBuilder
from finance_dashboard.parsers.revenue_parser import RevenueRowParser
from finance_dashboard.processing.aggregator import DailyAggregator
from finance_dashboard.processing.expense_combiner import ExpenseCombiner
from finance_dashboard.utils.cells import Grid
from finance_dashboard.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Aggregated rows plus what each parser dropped.

    Attributes:
        rows: Aggregated rows sorted by (date, unit).
        stats: Parse diagnostics, one entry per block or sheet.
        breakfasts: Parsed breakfast entries (empty without a breakfast grid).
    """

    rows: list[AggregatedDailyUnit]
    stats: list[ParseStats] = field(default_factory=list)
    breakfasts: list[BreakfastEntry] = field(default_factory=list)

    @property
    def dropped(self) -> int:
        """Total rows or slots dropped across all sources."""
        return sum(s.dropped for s in self.stats)


def build_report(
    revenue_blocks: Mapping[BusinessUnit, Grid],
    cash_grid: Grid | None,
    account_grid: Grid | None,
    config: Config | None = None,
    breakfast_grid: Grid | None = None,
) -> PipelineResult:
    """Run the full pipeline over freshly fetched grids.

    The function allocates all of its state per call and does no I/O, so
    concurrent callers may share it freely.

    Args:
        revenue_blocks: Raw revenue block grid per unit.
        cash_grid: Cash expense sheet grid, or None if unavailable.
        account_grid: Account expense sheet grid, or None if unavailable.
        config: Configuration (defaults if None).
        breakfast_grid: Optional breakfast ledger grid.

    Returns:
        PipelineResult with aggregated rows and diagnostics.

    Raises:
        ParseError: If a grid is structurally invalid.
    """
    if config is None:
        config = Config()
    policy = config.pipeline.money_policy
    stats: list[ParseStats] = []

    with LogContext(logger, "revenue parsing", blocks=len(revenue_blocks)) as ctx:
        builder = RevenueBlockBuilder(money_policy=policy)
        revenue_grid = builder.build(revenue_blocks)
        stats.extend(builder.stats.values())

        revenue_parser = RevenueRowParser(money_policy=policy)
        revenues = revenue_parser.parse(revenue_grid)
        stats.append(revenue_parser.stats)
        ctx.update(
            records=len(revenues),
            dropped=revenue_parser.stats.dropped + sum(s.dropped for s in builder.stats.values()),
        )

    with LogContext(logger, "expense parsing") as ctx:
        records: dict[SheetType, list[ExpenseRecord]] = {}
        expense_dropped = 0
        for sheet_type, grid in ((SheetType.CASH, cash_grid), (SheetType.ACCOUNT, account_grid)):
            if grid is None:
                records[sheet_type] = []
                continue
            expense_parser = ExpenseSheetParser(
                sheet_type,
                layouts=config.layouts,
                repair_years=config.pipeline.repair_years,
                unspecified_category=config.pipeline.unspecified_category,
            )
            records[sheet_type] = expense_parser.parse(grid)
            stats.append(expense_parser.stats)
            expense_dropped += expense_parser.stats.dropped
        ctx.update(
            records=sum(len(r) for r in records.values()),
            dropped=expense_dropped,
        )

        expenses = ExpenseCombiner().combine(records[SheetType.CASH], records[SheetType.ACCOUNT])

    breakfasts: list[BreakfastEntry] = []
    if breakfast_grid is not None:
        breakfast_parser = BreakfastParser(repair_years=config.pipeline.repair_years)
        breakfasts = breakfast_parser.parse(breakfast_grid)
        stats.append(breakfast_parser.stats)

    with LogContext(logger, "aggregation") as ctx:
        rows = DailyAggregator().aggregate(revenues, expenses)
        ctx.update(rows=len(rows))

    result = PipelineResult(rows=rows, stats=stats, breakfasts=breakfasts)
    if result.dropped:
        logger.info(f"Dropped {result.dropped} malformed rows/slots while building report")
    return result
