"""Spreadsheet source backed by a local .xlsx workbook (openpyxl)."""

from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from openpyxl import Workbook, load_workbook
from openpyxl.utils import range_boundaries

from finance_dashboard.sources.base import BaseSource, SourceError
from finance_dashboard.utils.cells import is_blank
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)

# Maximum workbook size to prevent memory exhaustion (50 MB)
MAX_WORKBOOK_SIZE = 50 * 1024 * 1024


def _trim_row(row: tuple[object, ...]) -> list[object]:
    """Drop trailing empty cells, as online sheet readers do."""
    cells = list(row)
    while cells and is_blank(cells[-1]):
        cells.pop()
    return cells


class WorkbookSource(BaseSource):
    """Reads ranges from an Excel workbook on disk.

    Values are read with ``data_only=True`` so formula cells yield their
    cached results. Date-typed cells arrive as ``datetime`` objects.
    """

    def __init__(self, path: Path):
        """Initialize the source.

        Args:
            path: Path to the .xlsx workbook.
        """
        self.path = Path(path)

    @property
    def name(self) -> str:
        return self.path.name

    def read_range(self, sheet: str, cell_range: str) -> list[list[object]]:
        """Read a range from a worksheet.

        Args:
            sheet: Worksheet name.
            cell_range: Column range ("B:G") or cell range ("A1:C20").

        Returns:
            Rows of cell values with trailing empty cells and rows removed.

        Raises:
            SourceError: If the workbook, sheet or range cannot be read.
        """
        return self.read_ranges([(sheet, cell_range)])[0]

    def read_ranges(self, requests: Sequence[tuple[str, str]]) -> list[list[list[object]]]:
        """Read several ranges, opening the workbook only once.

        Raises:
            SourceError: If the workbook, any sheet or any range cannot be read.
        """
        bounds = []
        for sheet, cell_range in requests:
            try:
                bounds.append(range_boundaries(cell_range))
            except ValueError as e:
                raise SourceError(
                    f"Invalid range '{cell_range}': {e}", self._location(sheet, cell_range)
                ) from e

        wb = self._open()
        try:
            return [
                self._read_sheet(wb, sheet, cell_range, bound)
                for (sheet, cell_range), bound in zip(requests, bounds)
            ]
        finally:
            wb.close()

    def _location(self, sheet: str, cell_range: str) -> str:
        return f"{self.path.name}!{sheet}!{cell_range}"

    def _open(self) -> Workbook:
        if not self.path.exists():
            raise SourceError(f"Workbook not found: {self.path}", self.path.name)

        file_size = self.path.stat().st_size
        if file_size > MAX_WORKBOOK_SIZE:
            raise SourceError(
                f"Workbook too large ({file_size / 1024 / 1024:.1f} MB). "
                f"Maximum allowed is {MAX_WORKBOOK_SIZE / 1024 / 1024:.0f} MB",
                self.path.name,
            )

        try:
            return load_workbook(self.path, read_only=True, data_only=True)
        except Exception as e:
            raise SourceError(f"Failed to open workbook: {e}", self.path.name) from e

    def _read_sheet(
        self,
        wb: Workbook,
        sheet: str,
        cell_range: str,
        bounds: tuple[int | None, int | None, int | None, int | None],
    ) -> list[list[object]]:
        location = self._location(sheet, cell_range)
        if sheet not in wb.sheetnames:
            raise SourceError(f"Worksheet '{sheet}' not found", location)

        min_col, min_row, max_col, max_row = bounds
        rows = [
            _trim_row(row)
            for row in wb[sheet].iter_rows(
                min_row=min_row,
                max_row=max_row,
                min_col=min_col,
                max_col=max_col,
                values_only=True,
            )
        ]
        while rows and not rows[-1]:
            rows.pop()

        logger.debug(f"Read {len(rows)} rows from {location}")
        return rows

    def last_modified(self) -> datetime | None:
        """Return the workbook file's modification time (UTC)."""
        if not self.path.exists():
            return None
        return datetime.fromtimestamp(self.path.stat().st_mtime, tz=timezone.utc)
