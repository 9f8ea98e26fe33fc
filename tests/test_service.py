"""Tests for the report cache and the finance service."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from finance_dashboard.config import Config, ConfigError
from finance_dashboard.models.unit import BusinessUnit
from finance_dashboard.processing.cache import ReportCache, make_cache_key
from finance_dashboard.service import FinanceService
from finance_dashboard.sources.base import SourceError

MODIFIED = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def cash_sheet() -> list[list[object]]:
    row: list[object] = [None] * 5
    row[1], row[3], row[4] = "15.01.2024", 500, "Продукты"
    return [["header"], row]


def account_sheet() -> list[list[object]]:
    row: list[object] = [None] * 4
    row[0], row[2], row[3] = "16.01.2024", 300, "ФОТ"
    return [["header"], row]


def read_in_batches(source: MagicMock) -> None:
    """Route batched reads through the mocked single-range reader."""
    source.read_ranges.side_effect = lambda requests: [
        source.read_range(sheet, cell_range) for sheet, cell_range in requests
    ]


def make_revenue_source() -> MagicMock:
    """Revenue workbook with a hotel and a spa block."""
    blocks = {
        "B:G": [["Дата"], ["15.01.2024", 400, 100, 300, 200, 1000]],
        "P:S": [["Дата"], ["16.01.2024", 10, 20, 30]],
    }
    source = MagicMock()
    source.name = "revenue.xlsx"
    source.read_range.side_effect = lambda sheet, cell_range: blocks.get(cell_range, [])
    read_in_batches(source)
    source.last_modified.return_value = MODIFIED
    return source


def make_expense_source() -> MagicMock:
    """Expense workbook with both sheets."""
    sheets = {"наличные": cash_sheet(), "Счет": account_sheet()}
    source = MagicMock()
    source.name = "expenses.xlsx"
    source.read_range.side_effect = lambda sheet, cell_range: sheets[sheet]
    read_in_batches(source)
    source.last_modified.return_value = MODIFIED
    return source


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(clock: FakeClock) -> FinanceService:
    """Service over mock sources with a controllable cache clock."""
    return FinanceService(
        Config(),
        make_revenue_source(),
        make_expense_source(),
        cache=ReportCache(ttl_seconds=300, clock=clock),
    )


class TestReportCache:
    """Tests for ReportCache class."""

    def test_fresh_entry_returned(self, clock: FakeClock) -> None:
        """Test that an entry is returned within its TTL."""
        cache: ReportCache[str] = ReportCache(ttl_seconds=10, clock=clock)
        cache.set(("k",), "value")
        clock.now = 10

        assert cache.get(("k",)) == "value"

    def test_expired_entry_evicted(self, clock: FakeClock) -> None:
        """Test that an expired entry is dropped on access."""
        cache: ReportCache[str] = ReportCache(ttl_seconds=10, clock=clock)
        cache.set(("k",), "value")
        clock.now = 10.5

        assert cache.get(("k",)) is None
        assert len(cache) == 0

    def test_clear(self, clock: FakeClock) -> None:
        """Test clearing the cache."""
        cache: ReportCache[str] = ReportCache(clock=clock)
        cache.set(("a",), "1")
        cache.set(("b",), "2")
        cache.clear()

        assert len(cache) == 0

    def test_make_cache_key(self) -> None:
        """Test that missing filters share a key."""
        assert make_cache_key() == make_cache_key("all", None, None)
        assert make_cache_key("hotel", "2024-01-01") != make_cache_key("hotel")
        assert make_cache_key("all", None, None, "breakfast") == ("all", "all", "all", "breakfast")


class TestFinanceService:
    """Tests for FinanceService class."""

    def test_report(self, service: FinanceService) -> None:
        """Test a full report from both workbooks."""
        report = service.get_report()

        assert [(r.date, r.unit) for r in report.data] == [
            ("2024-01-15", BusinessUnit.HOTEL),
            ("2024-01-16", BusinessUnit.HOTEL),
            ("2024-01-16", BusinessUnit.SPA),
        ]
        hotel = report.data[0]
        assert hotel.revenue.total == Decimal("2000")
        assert hotel.expense.total == Decimal("500")
        assert hotel.profit == Decimal("1500")
        assert report.data[1].profit == Decimal("-300")
        assert report.revenue_last_modified == MODIFIED
        assert report.breakfast_info is None

    def test_filters(self, service: FinanceService) -> None:
        """Test unit and date filters."""
        report = service.get_report(unit="hotel", start_date="2024-01-16", end_date="2024-01-16")

        assert len(report.data) == 1
        assert report.data[0].profit == Decimal("-300")

    def test_cached_until_ttl(self, service: FinanceService, clock: FakeClock) -> None:
        """Test that repeated requests are served from cache within the TTL."""
        first = service.get_report()
        clock.now = 100
        second = service.get_report()

        assert second is first
        assert service.revenue_source.read_ranges.call_count == 1
        assert service.revenue_source.read_range.call_count == 5
        assert service.expense_source.read_ranges.call_count == 1

        clock.now = 400
        third = service.get_report()
        assert third is not first
        assert service.revenue_source.read_ranges.call_count == 2
        assert service.revenue_source.read_range.call_count == 10

    def test_refresh_bypasses_cache(self, service: FinanceService) -> None:
        """Test that refresh=True rebuilds the report."""
        first = service.get_report()
        assert service.get_report(refresh=True) is not first

    def test_different_filters_cached_separately(self, service: FinanceService) -> None:
        """Test that each filter combination has its own cache entry."""
        service.get_report(unit="hotel")
        service.get_report(unit="spa")

        assert len(service.cache) == 2

    def test_source_failure_serves_cached_report(self, service: FinanceService) -> None:
        """Test fallback to a cached report when the revenue source fails."""
        first = service.get_report()
        service.revenue_source.read_range.side_effect = SourceError("offline")

        assert service.get_report(refresh=True) is first

    def test_source_failure_without_cache_raises(self, service: FinanceService) -> None:
        """Test that a revenue failure with nothing cached propagates."""
        service.revenue_source.read_range.side_effect = SourceError("offline")

        with pytest.raises(SourceError, match="offline"):
            service.get_report()

    def test_expense_failure_degrades(self, service: FinanceService) -> None:
        """Test that an unreadable expense workbook yields a revenue-only report."""
        service.expense_source.read_range.side_effect = SourceError("locked")

        report = service.get_report()

        assert all(r.expense.total == 0 for r in report.data)
        assert len(report.data) == 2

    def test_breakfast_info(self, clock: FakeClock) -> None:
        """Test that breakfast totals are included on request."""
        breakfast_source = MagicMock()
        breakfast_source.read_range.return_value = [
            ["Дата", "Кол-во", "Сумма"],
            ["15.01.2024", 12, 6000],
            ["20.01.2024", 3, 1500],
        ]
        service = FinanceService(
            Config(),
            make_revenue_source(),
            None,
            breakfast_source=breakfast_source,
            cache=ReportCache(clock=clock),
        )

        report = service.get_report(end_date="2024-01-16", include_breakfast=True)

        assert report.breakfast_info is not None
        assert report.breakfast_info.count == 12
        assert report.to_dict()["breakfastInfo"] == {"count": 12, "amount": 6000}
        assert report.expense_last_modified is None

    def test_no_sources(self) -> None:
        """Test that a service without sources refuses to build."""
        with pytest.raises(ConfigError):
            FinanceService(Config(), None, None).get_report()

    def test_to_dict_shape(self, service: FinanceService) -> None:
        """Test the JSON response body."""
        body = service.get_report().to_dict()

        assert set(body) == {
            "data",
            "lastModified",
            "revenueLastModified",
            "expenseLastModified",
            "diagnostics",
        }
        assert body["lastModified"] == MODIFIED.isoformat()
        assert body["data"][0]["revenue"]["breakdown"]["online"] == 300
        assert body["data"][0]["expenseDetails"]["categories"] == ["Продукты"]
