"""Declarative column layouts of the expense sheets."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from openpyxl.utils import column_index_from_string

from finance_dashboard.models.unit import BusinessUnit, SheetType
from finance_dashboard.parsers.base import LayoutError
from finance_dashboard.utils.cells import Row, as_label, cell_at


def column_index(value: int | str) -> int:
    """Convert a 0-based index or a column letter ("B") to a 0-based index.

    Raises:
        LayoutError: If the value is neither.
    """
    if isinstance(value, bool):
        raise LayoutError(f"Invalid column reference: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise LayoutError(f"Column index must be non-negative, got {value}")
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    try:
        return column_index_from_string(str(value).strip().upper()) - 1
    except ValueError as e:
        raise LayoutError(f"Invalid column reference: {value!r}") from e


@dataclass(frozen=True)
class ColumnMap:
    """Where one unit's (date, amount, category) triple lives in a sheet row."""

    date: int
    amount: int
    category: int

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "ColumnMap":
        """Create from a dict of column letters or 0-based indices."""
        try:
            return cls(
                date=column_index(data["date"]),  # type: ignore[arg-type]
                amount=column_index(data["amount"]),  # type: ignore[arg-type]
                category=column_index(data["category"]),  # type: ignore[arg-type]
            )
        except KeyError as e:
            raise LayoutError(f"Column map is missing {e}") from None

    @property
    def columns(self) -> tuple[int, int, int]:
        return (self.date, self.amount, self.category)


@dataclass(frozen=True)
class SheetLayout:
    """Fixed unit -> columns mapping for one expense sheet.

    Attributes:
        sheet_type: Which expense sheet this layout describes.
        columns: Column map per business unit.
        expected_headers: Optional column -> header label checks.
    """

    sheet_type: SheetType
    columns: Mapping[BusinessUnit, ColumnMap]
    expected_headers: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        seen: dict[int, BusinessUnit] = {}
        for unit, column_map in self.columns.items():
            for col in column_map.columns:
                if col in seen:
                    raise LayoutError(
                        f"{self.sheet_type.value} layout: column {col} is used by both "
                        f"'{seen[col].value}' and '{unit.value}'"
                    )
                seen[col] = unit

    def validate_header(self, header: Row) -> None:
        """Check the sheet's header row against ``expected_headers``.

        Args:
            header: First row of the sheet.

        Raises:
            LayoutError: If a configured header label does not match.
        """
        for col, expected in self.expected_headers.items():
            actual = as_label(cell_at(header, col))
            if actual.lower() != expected.strip().lower():
                raise LayoutError(
                    f"{self.sheet_type.value} sheet: expected header '{expected}' "
                    f"in column {col}, found '{actual}'"
                )

    @classmethod
    def from_dict(cls, sheet_type: SheetType, data: Mapping[str, object]) -> "SheetLayout":
        """Create from a configuration dict.

        Example::

            columns:
              hotel: {date: B, amount: D, category: E}
            expected_headers:
              B: Дата
        """
        raw_columns = data.get("columns") or {}
        if not isinstance(raw_columns, Mapping):
            raise LayoutError(f"'columns' must be a mapping, got {type(raw_columns).__name__}")

        columns: dict[BusinessUnit, ColumnMap] = {}
        for unit_name, col_data in raw_columns.items():
            try:
                unit = BusinessUnit(str(unit_name).lower())
            except ValueError:
                raise LayoutError(f"Unknown business unit in layout: {unit_name!r}") from None
            if not isinstance(col_data, Mapping):
                raise LayoutError(f"Column map for '{unit_name}' must be a mapping")
            columns[unit] = ColumnMap.from_dict(col_data)

        raw_headers = data.get("expected_headers") or {}
        if not isinstance(raw_headers, Mapping):
            raise LayoutError("'expected_headers' must be a mapping")
        headers = {column_index(col): str(label) for col, label in raw_headers.items()}

        return cls(sheet_type=sheet_type, columns=columns, expected_headers=headers)


# Cash sheet ("наличные"): hotel B/D/E, restaurant H/J/K, spa N/P/Q, pool T/V/W
CASH_SHEET_LAYOUT = SheetLayout(
    sheet_type=SheetType.CASH,
    columns={
        BusinessUnit.HOTEL: ColumnMap(date=1, amount=3, category=4),
        BusinessUnit.RESTAURANT: ColumnMap(date=7, amount=9, category=10),
        BusinessUnit.SPA: ColumnMap(date=13, amount=15, category=16),
        BusinessUnit.POOL: ColumnMap(date=19, amount=21, category=22),
    },
)

# Account sheet ("Счет"): hotel A/C/D, restaurant G/I/J, spa M/O/P
ACCOUNT_SHEET_LAYOUT = SheetLayout(
    sheet_type=SheetType.ACCOUNT,
    columns={
        BusinessUnit.HOTEL: ColumnMap(date=0, amount=2, category=3),
        BusinessUnit.RESTAURANT: ColumnMap(date=6, amount=8, category=9),
        BusinessUnit.SPA: ColumnMap(date=12, amount=14, category=15),
    },
)

DEFAULT_SHEET_LAYOUTS: dict[SheetType, SheetLayout] = {
    SheetType.CASH: CASH_SHEET_LAYOUT,
    SheetType.ACCOUNT: ACCOUNT_SHEET_LAYOUT,
}
