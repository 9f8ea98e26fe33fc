"""Daily per-unit aggregation of revenue and expenses."""

from finance_dashboard.models.expense import DetailedExpenseRow
from finance_dashboard.models.report import AggregatedDailyUnit
from finance_dashboard.models.revenue import RevenueBreakdown, RevenueRow
from finance_dashboard.models.unit import BusinessUnit
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class DailyAggregator:
    """Folds revenue rows and combined expense rows into one row per (date, unit).

    The output is sorted by date, then unit identifier; table rendering and
    export rely on that grouping.
    """

    def aggregate(
        self,
        revenues: list[RevenueRow],
        expenses: list[DetailedExpenseRow],
    ) -> list[AggregatedDailyUnit]:
        """Aggregate revenues and expenses.

        Args:
            revenues: Parsed revenue rows.
            expenses: Combined expense rows.

        Returns:
            Aggregated rows, sorted by (date, unit).
        """
        entries: dict[tuple[str, BusinessUnit], AggregatedDailyUnit] = {}

        def entry_for(entry_date: str, unit: BusinessUnit) -> AggregatedDailyUnit:
            key = (entry_date, unit)
            if key not in entries:
                entries[key] = AggregatedDailyUnit(date=entry_date, unit=unit)
            return entries[key]

        for row in revenues:
            revenue = entry_for(row.date, row.unit).revenue
            revenue.cash += row.cash
            revenue.bank += row.bank
            revenue.acquiring += row.acquiring
            revenue.total += row.total
            if row.breakdown is not None:
                previous = revenue.breakdown or RevenueBreakdown()
                revenue.breakdown = previous.plus(row.breakdown)

        for row in expenses:
            item = entry_for(row.date, row.unit)
            item.expense.purchases += row.purchases
            item.expense.salaries += row.salaries
            item.expense.other += row.other
            item.expense.total = item.expense.purchases + item.expense.salaries + item.expense.other
            # One combined row exists per key, so last write wins
            item.expense_details = row.expense_details

        for item in entries.values():
            item.profit = item.revenue.total - item.expense.total

        result = sorted(entries.values(), key=lambda item: item.key)
        logger.info(
            f"Aggregated {len(revenues)} revenue rows and {len(expenses)} expense rows "
            f"into {len(result)} daily unit rows"
        )
        return result


def aggregate_by_date_unit(
    revenues: list[RevenueRow],
    expenses: list[DetailedExpenseRow],
) -> list[AggregatedDailyUnit]:
    """Convenience function to aggregate revenues and expenses.

    Args:
        revenues: Parsed revenue rows.
        expenses: Combined expense rows.

    Returns:
        Aggregated rows, sorted by (date, unit).
    """
    return DailyAggregator().aggregate(revenues, expenses)


def filter_rows(
    rows: list[AggregatedDailyUnit],
    unit: BusinessUnit | str = "all",
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[AggregatedDailyUnit]:
    """Filter aggregated rows by unit and inclusive ISO date range.

    Args:
        rows: Aggregated rows.
        unit: BusinessUnit, its identifier, or "all".
        start_date: First date to keep (YYYY-MM-DD), or None.
        end_date: Last date to keep (YYYY-MM-DD), or None.

    Returns:
        Matching rows, in input order.
    """
    unit_value = unit.value if isinstance(unit, BusinessUnit) else unit
    return [
        row
        for row in rows
        if (unit_value == "all" or row.unit.value == unit_value)
        and (start_date is None or row.date >= start_date)
        and (end_date is None or row.date <= end_date)
    ]
