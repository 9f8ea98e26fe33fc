"""Decimal utilities for financial calculations.

All monetary calculations must use Decimal to avoid floating-point precision issues.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")

# Currency symbols to strip
CURRENCY_SYMBOLS = {"$", "€", "£", "₽", "руб.", "р."}

# Regular, non-breaking and narrow non-breaking spaces used as thousands separators
SPACE_PATTERN = re.compile(r"[\s\u00a0\u202f]")


class InvalidAmountError(ValueError):
    """Raised when a money cell holds text that is not a number."""

    pass


def parse_amount(raw_amount: str) -> Decimal:
    """Parse a raw amount string into a Decimal.

    Handles the formats seen in the ledgers:
    - Standard: 1234.56, -1234.56
    - Space grouping: 1 234,56 (regular or non-breaking spaces)
    - Decimal comma: 1234,56
    - Period grouping with decimal comma: 1.234,56
    - Comma grouping with decimal period: 1,234.56
    - Currency suffix/prefix: 1500 ₽, $1500

    Args:
        raw_amount: The raw amount string to parse.

    Returns:
        Signed amount as Decimal.

    Raises:
        InvalidAmountError: If the amount cannot be parsed.
    """
    if not raw_amount or not raw_amount.strip():
        raise InvalidAmountError("Empty amount string")

    amount_str = raw_amount.strip()
    for symbol in CURRENCY_SYMBOLS:
        amount_str = amount_str.replace(symbol, "")
    amount_str = SPACE_PATTERN.sub("", amount_str)

    # With both separators present the last one is the decimal mark
    # (1.234,56 and 1,234.56); a lone comma is always a decimal mark
    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif amount_str.count(",") == 1:
        amount_str = amount_str.replace(",", ".")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise InvalidAmountError(f"Cannot parse amount '{raw_amount}'") from e

    if not amount.is_finite():
        raise InvalidAmountError(f"Cannot parse amount '{raw_amount}'")

    return amount


def to_decimal(value: int | float | Decimal) -> Decimal:
    """Convert a numeric cell to Decimal without float artifacts.

    Args:
        value: Numeric value.

    Returns:
        Decimal value.

    Raises:
        InvalidAmountError: For NaN or infinite floats.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        # Convert float to string first for precision
        result = Decimal(str(value))
    if not result.is_finite():
        raise InvalidAmountError(f"Non-finite amount: {value}")
    return result


def format_money(amount: Decimal, decimal_places: int = 2) -> str:
    """Format a Decimal amount for display.

    Args:
        amount: The amount to format.
        decimal_places: Number of decimal places (default 2).

    Returns:
        Formatted string with space-grouped thousands, e.g. "12 500.00".
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places else "0"
    rounded = amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)
    return f"{rounded:,}".replace(",", " ")


def decimal_to_json(amount: Decimal) -> int | float:
    """Convert a Decimal to the closest JSON number.

    Integral amounts become ints so that ``1700`` does not render as ``1700.0``.
    """
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def sum_amounts(amounts: list[Decimal]) -> Decimal:
    """Sum a list of Decimal amounts.

    Args:
        amounts: List of Decimal amounts.

    Returns:
        Sum as Decimal.
    """
    total = ZERO
    for amount in amounts:
        total += amount
    return total
