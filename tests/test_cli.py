"""Tests for the command-line interface and JSON export."""

import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest
from openpyxl import Workbook

from finance_dashboard.cli import create_parser, get_log_level, main, resolve_source
from finance_dashboard.output import JSONExporter
from finance_dashboard.service import FinanceReport


@pytest.fixture
def workbooks(tmp_path: Path) -> tuple[Path, Path]:
    """Create revenue and expense workbooks with one hotel day."""
    revenue_wb = Workbook()
    ws = revenue_wb.active
    ws.title = "Выручка"
    ws.append([None, "Дата", "Безнал ЮЛ", "Безнал ФЛ", "Онлайн", "Терминал", "Наличные"])
    ws.append([None, "15.01.2024", 400, 100, 300, 200, 1000])
    revenue_path = tmp_path / "revenue.xlsx"
    revenue_wb.save(revenue_path)

    expense_wb = Workbook()
    cash = expense_wb.active
    cash.title = "наличные"
    cash.append(["", "Дата", "", "Сумма", "Статья"])
    cash.append([None, "15.01.2024", None, 500, "Продукты"])
    account = expense_wb.create_sheet("Счет")
    account.append(["Дата", "", "Сумма", "Статья"])
    account.append(["15.01.2024", None, 300, "ФОТ"])
    expense_path = tmp_path / "expenses.xlsx"
    expense_wb.save(expense_path)

    return revenue_path, expense_path


class TestCreateParser:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        """Test default argument values."""
        args = create_parser().parse_args([])

        assert args.unit == "all"
        assert args.start_date is None
        assert args.money_policy is None
        assert args.verbose == 0

    def test_dates_and_unit(self) -> None:
        """Test date and unit options."""
        args = create_parser().parse_args(
            ["--unit", "spa", "--from", "2024-01-01", "--to", "2024-01-31", "-vv"]
        )

        assert args.unit == "spa"
        assert args.start_date == date(2024, 1, 1)
        assert args.end_date == date(2024, 1, 31)
        assert args.verbose == 2

    def test_invalid_unit(self) -> None:
        """Test that unknown units are rejected."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--unit", "casino"])

    def test_log_levels(self) -> None:
        """Test verbosity to log level mapping."""
        assert get_log_level(0) == "WARNING"
        assert get_log_level(1) == "INFO"
        assert get_log_level(3) == "DEBUG"


class TestResolveSource:
    """Tests for resolve_source function."""

    def test_argument_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an explicit path is used over the environment."""
        monkeypatch.setenv("REVENUE_WORKBOOK", "/elsewhere.xlsx")
        source = resolve_source(tmp_path / "r.xlsx", "REVENUE_WORKBOOK")

        assert source is not None
        assert source.path == tmp_path / "r.xlsx"

    def test_environment_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the environment variable fallback."""
        monkeypatch.setenv("EXPENSE_WORKBOOK", "data/expenses.xlsx")
        source = resolve_source(None, "EXPENSE_WORKBOOK")

        assert source is not None
        assert source.path == Path("data/expenses.xlsx")

    def test_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that nothing configured gives None."""
        monkeypatch.delenv("BREAKFAST_WORKBOOK", raising=False)
        assert resolve_source(None, "BREAKFAST_WORKBOOK") is None


class TestMain:
    """Tests for the main entry point."""

    def run(self, argv: list[str]) -> int:
        with (
            patch("sys.argv", ["finance-dashboard", *argv]),
            patch("finance_dashboard.cli.setup_logging"),
        ):
            return main()

    def test_writes_report(
        self, workbooks: tuple[Path, Path], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test building a report from workbooks into JSON."""
        revenue_path, expense_path = workbooks
        output = tmp_path / "out" / "report.json"
        monkeypatch.chdir(tmp_path)

        result = self.run(
            ["--revenue", str(revenue_path), "--expenses", str(expense_path), "-o", str(output)],
        )

        assert result == 0
        body = json.loads(output.read_text(encoding="utf-8"))
        hotel = [row for row in body["data"] if row["unit"] == "hotel"]
        assert len(hotel) == 1
        assert hotel[0]["revenue"]["total"] == 2000
        assert hotel[0]["expense"]["total"] == 800
        assert hotel[0]["profit"] == 1200
        assert hotel[0]["expenseDetails"]["categories"] == ["Продукты", "ФОТ"]

    def test_no_sources(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that running without any workbook fails."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("REVENUE_WORKBOOK", raising=False)
        monkeypatch.delenv("EXPENSE_WORKBOOK", raising=False)

        assert self.run([]) == 1

    def test_missing_workbook(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unreadable revenue workbook gives exit code 1."""
        monkeypatch.chdir(tmp_path)

        assert self.run(["--revenue", str(tmp_path / "missing.xlsx"), "--dry-run"]) == 1

    def test_validate_only(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test validating a broken settings file."""
        monkeypatch.chdir(tmp_path)
        settings = tmp_path / "settings.yaml"
        settings.write_text("pipeline:\n  money_policy: sloppy\n", encoding="utf-8")

        assert self.run(["--validate-only", "--config", str(settings)]) == 1
        assert self.run(["--validate-only", "--config-dir", str(tmp_path / "none")]) == 0


class TestJSONExporter:
    """Tests for JSONExporter class."""

    def test_export_creates_directories(self, tmp_path: Path) -> None:
        """Test writing a report into a new directory."""
        report = FinanceReport(data=[])
        path = JSONExporter().export(tmp_path / "nested" / "r.json", report)

        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == {
            "data": [],
            "lastModified": None,
            "revenueLastModified": None,
            "expenseLastModified": None,
            "diagnostics": [],
        }

    def test_dumps_compact(self) -> None:
        """Test compact output."""
        assert "\n" not in JSONExporter(indent=None).dumps(FinanceReport(data=[]))
