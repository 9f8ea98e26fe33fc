"""Date parsing and normalization utilities.

Two entry points exist on purpose:

- ``normalize_date`` is the general normalizer used by the revenue sheet. It
  accepts spreadsheet serial numbers, Unix timestamps and several string
  layouts, trying month-first before day-first.
- ``parse_day_first_date`` is the narrow day-first-only variant used by the
  expense and breakfast ledgers, where ``05.03.2025`` always means 5 March.

Both return the canonical ``YYYY-MM-DD`` string or raise ``InvalidDateError``.
"""

import re
from datetime import date, datetime, timedelta, timezone

# Lotus/Excel epoch, with the 1900 leap-year quirk folded in
SPREADSHEET_EPOCH = datetime(1899, 12, 30)

# Numeric ranges accepted as dates; anything else (day counters, running
# totals typed into the date column) is rejected
SERIAL_MIN, SERIAL_MAX = 10_000, 100_000
UNIX_SECONDS_MIN = 1e9
UNIX_MILLIS_MIN = 1e12

# Accepted year window for day-first ledger dates
LEDGER_YEAR_MIN = 2020
LEDGER_YEAR_MAX = 2030

# General date patterns, tried in order; first valid calendar date wins.
# The second element names the group order (y=year, m=month, d=day).
DATE_PATTERNS = [
    # ISO, optionally followed by a time component
    (r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ][\d:.]+(?:Z|[+-]\d{2}:?\d{2})?)?$", "ymd"),
    # Month first, 4-digit year (revenue sheet convention)
    (r"^([01]?\d)[./-]([0-3]?\d)[./-](\d{4})$", "mdy"),
    # Day first, 4-digit year (expense sheet convention)
    (r"^([0-3]?\d)[./-]([01]?\d)[./-](\d{4})$", "dmy"),
    # Month first, 2-digit year
    (r"^([01]?\d)[./-]([0-3]?\d)[./-](\d{2})$", "mdy"),
    # Day first, 2-digit year
    (r"^([0-3]?\d)[./-]([01]?\d)[./-](\d{2})$", "dmy"),
]

COMPILED_PATTERNS = [(re.compile(pattern), order) for pattern, order in DATE_PATTERNS]

DAY_FIRST_PATTERN = re.compile(r"^(\d{1,2})[./-](\d{1,2})[./-](\d{2,5})$")


class InvalidDateError(ValueError):
    """Raised when a cell cannot be read as a calendar date."""

    pass


def _build_date(year: int, month: int, day: int) -> date | None:
    """Build a date, returning None for impossible calendar values."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _from_number(value: float) -> str:
    """Convert a numeric cell to an ISO date string.

    Args:
        value: Serial day count, Unix seconds or Unix milliseconds.

    Returns:
        ISO date string.

    Raises:
        InvalidDateError: If the number is outside every accepted range.
    """
    try:
        if SERIAL_MIN < value < SERIAL_MAX:
            return (SPREADSHEET_EPOCH + timedelta(days=value)).date().isoformat()
        if value > UNIX_MILLIS_MIN:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date().isoformat()
        if UNIX_SECONDS_MIN < value < UNIX_MILLIS_MIN:
            return datetime.fromtimestamp(value, tz=timezone.utc).date().isoformat()
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidDateError(f"Invalid numeric date: {value}") from e

    raise InvalidDateError(f"Invalid numeric date: {value}")


def normalize_date(value: object) -> str:
    """Normalize a heterogeneous date cell to ``YYYY-MM-DD``.

    Handles:
    - date/datetime objects
    - Spreadsheet serials in (10000, 100000): days since 1899-12-30
    - Unix milliseconds (> 1e12) and Unix seconds (1e9 .. 1e12)
    - ISO: 2024-01-15
    - Month first: 01.15.2024, 01/15/2024, 01-15-2024, 01.15.24
    - Day first: 15.01.2024, 15.01.24

    Month-first layouts are tried before day-first ones, so an ambiguous
    string such as ``05.03.2024`` resolves to 3 May.

    Args:
        value: The raw cell value.

    Returns:
        Canonical ISO date string.

    Raises:
        InvalidDateError: If the value matches no accepted format.
    """
    if value is None:
        raise InvalidDateError("Invalid date: empty")

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, bool):
        raise InvalidDateError(f"Invalid date: {value!r}")

    if isinstance(value, (int, float)):
        return _from_number(value)

    date_str = str(value).strip()
    if not date_str:
        raise InvalidDateError("Invalid date: empty string")

    for pattern, order in COMPILED_PATTERNS:
        match = pattern.match(date_str)
        if not match:
            continue

        parts = dict(zip(order, (int(g) for g in match.groups())))
        year = parts["y"]
        if len(match.group(order.index("y") + 1)) == 2:
            year += 2000

        parsed = _build_date(year, parts["m"], parts["d"])
        if parsed is not None:
            return parsed.isoformat()

    raise InvalidDateError(f"Invalid date: {value!r}")


def repair_suspicious_year(raw_year: str) -> int | None:
    """Map a malformed ledger year into the accepted window.

    Only known data-entry mistakes are corrected, and only when exactly one
    in-window year can be reached:

    - three digits, a zero was dropped: ``"225"`` -> 2025, ``"202"`` -> 2020
    - four digits, two adjacent digits swapped: ``"2052"`` -> 2025,
      ``"0225"`` -> 2025
    - five digits, one stray zero: ``"20025"`` -> 2025, ``"20250"`` -> 2025

    A year already inside the window is returned unchanged.

    Args:
        raw_year: Year digits as typed in the sheet.

    Returns:
        The repaired year, or None if no unique repair exists.
    """
    if not raw_year.isdigit():
        return None

    if len(raw_year) == 4 and LEDGER_YEAR_MIN <= int(raw_year) <= LEDGER_YEAR_MAX:
        return int(raw_year)

    candidates: set[int] = set()
    if len(raw_year) == 3:
        for i in range(len(raw_year) + 1):
            candidates.add(int(raw_year[:i] + "0" + raw_year[i:]))
    elif len(raw_year) == 4:
        for i in range(len(raw_year) - 1):
            swapped = raw_year[:i] + raw_year[i + 1] + raw_year[i] + raw_year[i + 2:]
            candidates.add(int(swapped))
    elif len(raw_year) == 5:
        for i, digit in enumerate(raw_year):
            if digit == "0":
                candidates.add(int(raw_year[:i] + raw_year[i + 1:]))

    in_window = {y for y in candidates if LEDGER_YEAR_MIN <= y <= LEDGER_YEAR_MAX}
    if len(in_window) == 1:
        return in_window.pop()
    return None


def parse_day_first_date(value: object, repair_years: bool = True) -> str:
    """Parse a day-first ledger date (``D.M.YY`` / ``DD.MM.YYYY``).

    Separators may be ``.``, ``/`` or ``-``. Two-digit years are read as
    20YY. Years outside 2020..2030 are passed through
    ``repair_suspicious_year`` when ``repair_years`` is set.

    Args:
        value: The raw cell value (string, date or datetime).
        repair_years: Whether to attempt year repair.

    Returns:
        Canonical ISO date string.

    Raises:
        InvalidDateError: If the value is not a valid day-first date.
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        if not LEDGER_YEAR_MIN <= value.year <= LEDGER_YEAR_MAX:
            raise InvalidDateError(f"Date out of range: {value.isoformat()}")
        return value.isoformat()

    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid date type: {type(value).__name__}")

    match = DAY_FIRST_PATTERN.match(value.strip())
    if not match:
        raise InvalidDateError(f"Invalid date: {value!r}")

    day, month, raw_year = int(match.group(1)), int(match.group(2)), match.group(3)

    year: int | None
    if len(raw_year) == 2:
        year = 2000 + int(raw_year)
    else:
        year = int(raw_year)
        if not LEDGER_YEAR_MIN <= year <= LEDGER_YEAR_MAX:
            year = repair_suspicious_year(raw_year) if repair_years else None

    if year is None or not LEDGER_YEAR_MIN <= year <= LEDGER_YEAR_MAX:
        raise InvalidDateError(f"Year out of range: {value!r}")

    parsed = _build_date(year, month, day)
    if parsed is None:
        raise InvalidDateError(f"Invalid date: {value!r}")
    return parsed.isoformat()


def is_date_in_range(
    d: str,
    start_date: str | None = None,
    end_date: str | None = None,
) -> bool:
    """Check if an ISO date string is within a range.

    Args:
        d: ISO date to check.
        start_date: Start of range (inclusive). None means no lower bound.
        end_date: End of range (inclusive). None means no upper bound.

    Returns:
        True if date is within range.
    """
    if start_date is not None and d < start_date:
        return False
    if end_date is not None and d > end_date:
        return False
    return True
