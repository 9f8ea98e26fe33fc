"""Report service: fetches source ranges, runs the pipeline, caches results."""

from dataclasses import dataclass, field
from datetime import datetime

from finance_dashboard.config import Config, ConfigError
from finance_dashboard.models.breakfast import BreakfastInfo
from finance_dashboard.models.diagnostics import ParseStats
from finance_dashboard.models.report import AggregatedDailyUnit
from finance_dashboard.models.unit import BusinessUnit, SheetType
from finance_dashboard.processing.aggregator import filter_rows
from finance_dashboard.processing.breakfast import summarize_breakfasts
from finance_dashboard.processing.cache import ReportCache, make_cache_key
from finance_dashboard.processing.pipeline import build_report
from finance_dashboard.sources.base import BaseSource, SourceError
from finance_dashboard.utils.cells import Grid
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class FinanceReport:
    """A filtered report together with source freshness information."""

    data: list[AggregatedDailyUnit]
    revenue_last_modified: datetime | None = None
    expense_last_modified: datetime | None = None
    breakfast_info: BreakfastInfo | None = None
    stats: list[ParseStats] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Return the JSON response body consumed by the dashboard."""
        revenue_ts = self.revenue_last_modified.isoformat() if self.revenue_last_modified else None
        expense_ts = self.expense_last_modified.isoformat() if self.expense_last_modified else None
        body: dict[str, object] = {
            "data": [row.to_dict() for row in self.data],
            "lastModified": revenue_ts,
            "revenueLastModified": revenue_ts,
            "expenseLastModified": expense_ts,
            "diagnostics": [s.to_dict() for s in self.stats],
        }
        if self.breakfast_info is not None:
            body["breakfastInfo"] = self.breakfast_info.to_dict()
        return body


class FinanceService:
    """Builds dashboard reports from spreadsheet sources.

    Every uncached request re-fetches all ranges and re-runs the pipeline.
    """

    def __init__(
        self,
        config: Config,
        revenue_source: BaseSource | None,
        expense_source: BaseSource | None,
        breakfast_source: BaseSource | None = None,
        cache: ReportCache[FinanceReport] | None = None,
    ):
        """Initialize the service.

        Args:
            config: Application configuration.
            revenue_source: Workbook holding the revenue sheet.
            expense_source: Workbook holding both expense sheets.
            breakfast_source: Optional workbook holding the breakfast ledger.
            cache: Report cache (default: a new cache using config.cache.ttl_seconds).
        """
        self.config = config
        self.revenue_source = revenue_source
        self.expense_source = expense_source
        self.breakfast_source = breakfast_source
        self.cache: ReportCache[FinanceReport] = (
            cache if cache is not None else ReportCache(config.cache.ttl_seconds)
        )

    def get_report(
        self,
        unit: str = "all",
        start_date: str | None = None,
        end_date: str | None = None,
        include_breakfast: bool = False,
        refresh: bool = False,
    ) -> FinanceReport:
        """Return a report, from cache when fresh.

        Args:
            unit: "all" or a unit identifier.
            start_date: First date to include (YYYY-MM-DD), or None.
            end_date: Last date to include (YYYY-MM-DD), or None.
            include_breakfast: Whether to summarize the breakfast ledger.
            refresh: Bypass the cache for this request.

        Returns:
            The report.

        Raises:
            ConfigError: If no source is configured.
            SourceError: If the revenue sheet cannot be read and nothing fresh is cached.
        """
        if self.revenue_source is None and self.expense_source is None:
            raise ConfigError("No revenue or expense source configured")

        key = make_cache_key(unit, start_date, end_date, "breakfast" if include_breakfast else "")
        if not refresh:
            cached = self.cache.get(key)
            if cached is not None:
                logger.info(f"Returning cached report for {key}")
                return cached

        try:
            report = self._build(unit, start_date, end_date, include_breakfast)
        except SourceError as e:
            cached = self.cache.get(key)
            if cached is not None:
                logger.warning(f"Source unavailable ({e}); returning cached report")
                return cached
            raise

        self.cache.set(key, report)
        return report

    def _build(
        self,
        unit: str,
        start_date: str | None,
        end_date: str | None,
        include_breakfast: bool,
    ) -> FinanceReport:
        sheets = self.config.sheets

        revenue_blocks: dict[BusinessUnit, Grid] = {}
        if self.revenue_source is not None:
            block_units = list(sheets.revenue_ranges)
            grids = self.revenue_source.read_ranges(
                [(sheets.revenue_sheet, sheets.revenue_ranges[u]) for u in block_units]
            )
            revenue_blocks = dict(zip(block_units, grids))

        cash_grid: Grid | None = None
        account_grid: Grid | None = None
        if self.expense_source is not None:
            # A broken expense workbook still leaves a revenue-only report
            try:
                cash_grid, account_grid = self.expense_source.read_ranges(
                    [
                        (sheets.expense_sheet(SheetType.CASH), sheets.expense_range),
                        (sheets.expense_sheet(SheetType.ACCOUNT), sheets.expense_range),
                    ]
                )
            except SourceError as e:
                logger.error(f"Failed to read expense sheets: {e}")
                cash_grid = account_grid = None

        breakfast_grid: Grid | None = None
        if include_breakfast and self.breakfast_source is not None:
            try:
                breakfast_grid = self.breakfast_source.read_range(
                    sheets.breakfast_sheet, sheets.breakfast_range
                )
            except SourceError as e:
                logger.warning(f"Failed to read breakfast ledger: {e}")

        result = build_report(
            revenue_blocks,
            cash_grid,
            account_grid,
            config=self.config,
            breakfast_grid=breakfast_grid,
        )

        rows = filter_rows(result.rows, unit, start_date, end_date)
        logger.info(f"Report for unit={unit} {start_date or '*'}..{end_date or '*'}: {len(rows)} rows")

        return FinanceReport(
            data=rows,
            revenue_last_modified=self._last_modified(self.revenue_source),
            expense_last_modified=self._last_modified(self.expense_source),
            breakfast_info=(
                summarize_breakfasts(result.breakfasts, start_date, end_date)
                if include_breakfast
                else None
            ),
            stats=result.stats,
        )

    def _last_modified(self, source: BaseSource | None) -> datetime | None:
        if source is None:
            return None
        try:
            return source.last_modified()
        except (SourceError, OSError) as e:
            logger.warning(f"Failed to get last modified time of {source.name}: {e}")
            return None
