"""Coercion of raw spreadsheet cells into typed values.

A cell arriving from a sheet reader is ``str``, ``int``/``float``,
``date``/``datetime``, ``None`` or (for synthetic grids) a mapping. Parsers
never inspect those types themselves; they go through the helpers here.
"""

from collections.abc import Sequence
from decimal import Decimal
from enum import Enum
from typing import Any

from finance_dashboard.utils.date_utils import normalize_date
from finance_dashboard.utils.decimal_utils import (
    ZERO,
    InvalidAmountError,
    parse_amount,
    to_decimal,
)

Cell = Any
Row = Sequence[Cell]
Grid = Sequence[Row]


class MoneyPolicy(Enum):
    """How a non-empty, non-numeric money cell is treated."""

    STRICT = "strict"  # Drop the whole row
    LENIENT = "lenient"  # Count the cell as zero


def is_blank(cell: Cell) -> bool:
    """Return True for None and whitespace-only strings."""
    if cell is None:
        return True
    return isinstance(cell, str) and not cell.strip()


def is_blank_row(row: Row) -> bool:
    """Return True if every cell in the row is blank."""
    return all(is_blank(cell) for cell in row)


def cell_at(row: Row, idx: int | None) -> Cell:
    """Safely get a cell from a row.

    Sheet readers trim trailing empty cells, so short rows are normal.

    Args:
        row: Row of cells.
        idx: Column index.

    Returns:
        Value at index or None.
    """
    if idx is None or idx < 0 or idx >= len(row):
        return None
    return row[idx]


def as_label(cell: Cell) -> str:
    """Read a cell as trimmed text ('' for blanks)."""
    if is_blank(cell):
        return ""
    return str(cell).strip()


def as_amount(cell: Cell) -> Decimal:
    """Read a money cell as Decimal.

    Blank cells are zero. Numbers are converted through ``str``; strings go
    through ``parse_amount``.

    Raises:
        InvalidAmountError: If the cell holds something that is not a number.
    """
    if is_blank(cell):
        return ZERO
    if isinstance(cell, bool):
        raise InvalidAmountError(f"Boolean in money cell: {cell}")
    if isinstance(cell, (int, float, Decimal)):
        return to_decimal(cell)
    if isinstance(cell, str):
        return parse_amount(cell)
    raise InvalidAmountError(f"Unsupported money cell type: {type(cell).__name__}")


def coerce_money(cell: Cell, policy: MoneyPolicy) -> Decimal:
    """Read a money cell under the given policy.

    Raises:
        InvalidAmountError: Only under ``MoneyPolicy.STRICT``.
    """
    try:
        return as_amount(cell)
    except InvalidAmountError:
        if policy is MoneyPolicy.LENIENT:
            return ZERO
        raise


def as_date(cell: Cell) -> str:
    """Read a cell as a canonical ISO date (see ``normalize_date``)."""
    return normalize_date(cell)
