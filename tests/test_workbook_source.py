"""Tests for the openpyxl-backed workbook source."""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from openpyxl import Workbook, load_workbook

from finance_dashboard.sources.base import SourceError
from finance_dashboard.sources.workbook_source import WorkbookSource


@pytest.fixture
def workbook_path(tmp_path: Path) -> Path:
    """Create a small revenue workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Выручка"
    ws.append([None, "Дата", "Безнал ЮЛ", "Безнал ФЛ", "Онлайн", "Терминал", "Наличные"])
    ws.append([None, datetime(2024, 1, 15), 400, 100, 300, 200, 1000])
    ws.append([None, "16.01.2024", 10, None, None, None, None])
    ws.append([None, None, None, None, None, None, None])
    costs = wb.create_sheet("Расходы")
    costs.append(["Дата", "Примечание", "Сумма"])
    costs.append(["15.01.2024", None, 300])
    path = tmp_path / "revenue.xlsx"
    wb.save(path)
    return path


class TestWorkbookSource:
    """Tests for WorkbookSource class."""

    def test_read_column_range(self, workbook_path: Path) -> None:
        """Test reading a column range with trailing blanks trimmed."""
        rows = WorkbookSource(workbook_path).read_range("Выручка", "B:G")

        assert rows == [
            ["Дата", "Безнал ЮЛ", "Безнал ФЛ", "Онлайн", "Терминал", "Наличные"],
            [datetime(2024, 1, 15), 400, 100, 300, 200, 1000],
            ["16.01.2024", 10],
        ]

    def test_read_cell_range(self, workbook_path: Path) -> None:
        """Test reading a bounded cell range."""
        rows = WorkbookSource(workbook_path).read_range("Выручка", "B2:C2")
        assert rows == [[datetime(2024, 1, 15), 400]]

    def test_missing_sheet(self, workbook_path: Path) -> None:
        """Test that an unknown worksheet raises SourceError."""
        with pytest.raises(SourceError, match="not found") as exc_info:
            WorkbookSource(workbook_path).read_range("Счет", "A:Z")
        assert exc_info.value.location == "revenue.xlsx!Счет!A:Z"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing workbook raises SourceError."""
        source = WorkbookSource(tmp_path / "missing.xlsx")

        with pytest.raises(SourceError, match="Workbook not found"):
            source.read_range("Выручка", "B:G")
        assert source.last_modified() is None

    def test_invalid_range(self, workbook_path: Path) -> None:
        """Test that a malformed range raises SourceError."""
        with pytest.raises(SourceError, match="Invalid range"):
            WorkbookSource(workbook_path).read_range("Выручка", "not-a-range")

    def test_not_a_workbook(self, tmp_path: Path) -> None:
        """Test that a corrupt file raises SourceError."""
        path = tmp_path / "broken.xlsx"
        path.write_text("not a zip file")

        with pytest.raises(SourceError, match="Failed to open workbook"):
            WorkbookSource(path).read_range("Выручка", "B:G")

    def test_last_modified(self, workbook_path: Path) -> None:
        """Test that the modification time is timezone-aware."""
        source = WorkbookSource(workbook_path)

        modified = source.last_modified()
        assert modified is not None
        assert modified.tzinfo is not None
        assert source.name == "revenue.xlsx"

    def test_read_ranges_opens_once(self, workbook_path: Path) -> None:
        """Test that a batch of ranges shares one open workbook."""
        with patch(
            "finance_dashboard.sources.workbook_source.load_workbook", wraps=load_workbook
        ) as mock_load:
            grids = WorkbookSource(workbook_path).read_ranges(
                [("Выручка", "B:C"), ("Расходы", "A:C"), ("Выручка", "H:K")]
            )

        assert mock_load.call_count == 1
        assert grids == [
            [["Дата", "Безнал ЮЛ"], [datetime(2024, 1, 15), 400], ["16.01.2024", 10]],
            [["Дата", "Примечание", "Сумма"], ["15.01.2024", None, 300]],
            [],
        ]

    def test_read_ranges_checks_ranges_before_opening(self, workbook_path: Path) -> None:
        """Test that a malformed range fails the batch without opening the file."""
        with (
            patch("finance_dashboard.sources.workbook_source.load_workbook") as mock_load,
            pytest.raises(SourceError, match="Invalid range") as exc_info,
        ):
            WorkbookSource(workbook_path).read_ranges([("Выручка", "B:G"), ("Счет", "??")])

        mock_load.assert_not_called()
        assert exc_info.value.location == "revenue.xlsx!Счет!??"

    def test_read_ranges_missing_sheet(self, workbook_path: Path) -> None:
        """Test that one unknown sheet fails the whole batch."""
        with pytest.raises(SourceError, match="'Завтраки' not found"):
            WorkbookSource(workbook_path).read_ranges([("Выручка", "B:G"), ("Завтраки", "A:C")])
