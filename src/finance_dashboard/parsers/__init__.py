"""Parsers turning raw sheet grids into typed records."""

from finance_dashboard.parsers.base import BaseParser, LayoutError, ParseError
from finance_dashboard.parsers.breakfast_parser import BreakfastParser
from finance_dashboard.parsers.expense_parser import ExpenseSheetParser, parse_expense_sheet
from finance_dashboard.parsers.layouts import (
    DEFAULT_SHEET_LAYOUTS,
    ColumnMap,
    SheetLayout,
)
from finance_dashboard.parsers.revenue_blocks import (
    DEFAULT_BLOCK_LAYOUTS,
    RevenueBlockBuilder,
    RevenueBlockLayout,
)
from finance_dashboard.parsers.revenue_parser import RevenueRowParser, parse_revenue_rows

__all__ = [
    "BaseParser",
    "BreakfastParser",
    "ColumnMap",
    "DEFAULT_BLOCK_LAYOUTS",
    "DEFAULT_SHEET_LAYOUTS",
    "ExpenseSheetParser",
    "LayoutError",
    "ParseError",
    "RevenueBlockBuilder",
    "RevenueBlockLayout",
    "RevenueRowParser",
    "SheetLayout",
    "parse_expense_sheet",
    "parse_revenue_rows",
]
