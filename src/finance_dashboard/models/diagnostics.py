"""Parse diagnostics collected while reading a sheet."""

from dataclasses import dataclass


@dataclass
class ParseStats:
    """Counters describing what a parser kept and what it dropped.

    Attributes:
        source: Name of the sheet or block that was parsed.
        rows_seen: Data rows examined (header excluded).
        records: Records produced.
        blank: Blank rows or empty unit slots skipped.
        invalid_date: Dropped because the date did not parse.
        unknown_unit: Dropped because the unit label was not recognized.
        invalid_amount: Dropped because a money cell was not numeric.
        non_positive_amount: Expense slots dropped for amount <= 0.
    """

    source: str = ""
    rows_seen: int = 0
    records: int = 0
    blank: int = 0
    invalid_date: int = 0
    unknown_unit: int = 0
    invalid_amount: int = 0
    non_positive_amount: int = 0

    @property
    def dropped(self) -> int:
        """Total number of rows or slots dropped for bad data."""
        return (
            self.invalid_date
            + self.unknown_unit
            + self.invalid_amount
            + self.non_positive_amount
        )

    def summary(self) -> str:
        """One-line description suitable for logging."""
        return (
            f"{self.source}: {self.records} records from {self.rows_seen} rows "
            f"(blank={self.blank}, invalid_date={self.invalid_date}, "
            f"unknown_unit={self.unknown_unit}, invalid_amount={self.invalid_amount}, "
            f"non_positive_amount={self.non_positive_amount})"
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "source": self.source,
            "rowsSeen": self.rows_seen,
            "records": self.records,
            "blank": self.blank,
            "invalidDate": self.invalid_date,
            "unknownUnit": self.unknown_unit,
            "invalidAmount": self.invalid_amount,
            "nonPositiveAmount": self.non_positive_amount,
        }
