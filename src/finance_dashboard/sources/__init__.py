"""Spreadsheet sources that supply raw cell grids."""

from finance_dashboard.sources.base import BaseSource, SourceError
from finance_dashboard.sources.workbook_source import WorkbookSource

__all__ = ["BaseSource", "SourceError", "WorkbookSource"]
