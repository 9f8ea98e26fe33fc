"""Breakfast ledger summaries."""

from finance_dashboard.models.breakfast import BreakfastEntry, BreakfastInfo
from finance_dashboard.utils.date_utils import is_date_in_range
from finance_dashboard.utils.decimal_utils import sum_amounts


def summarize_breakfasts(
    entries: list[BreakfastEntry],
    start_date: str | None = None,
    end_date: str | None = None,
) -> BreakfastInfo:
    """Total breakfast count and amount over an inclusive date range.

    Args:
        entries: Parsed breakfast entries.
        start_date: First date (YYYY-MM-DD), or None for no lower bound.
        end_date: Last date (YYYY-MM-DD), or None for no upper bound.

    Returns:
        BreakfastInfo with the totals.
    """
    selected = [e for e in entries if is_date_in_range(e.date, start_date, end_date)]
    return BreakfastInfo(
        count=sum(e.count for e in selected),
        amount=sum_amounts([e.amount for e in selected]),
    )
