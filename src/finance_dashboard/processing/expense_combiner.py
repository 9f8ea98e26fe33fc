"""Combines cash-sheet and account-sheet expenses per (date, unit)."""

from finance_dashboard.models.expense import (
    CategoryDetail,
    DetailedExpenseRow,
    ExpenseDetails,
    ExpenseRecord,
)
from finance_dashboard.models.unit import BusinessUnit, PaymentMethod
from finance_dashboard.utils.decimal_utils import ZERO
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class ExpenseCombiner:
    """Groups expense records by (date, unit) into DetailedExpenseRow objects.

    The combined row keeps every underlying transaction in
    ``expense_details.category_details`` so that category breakdowns can be
    recomputed downstream without re-reading the sheets.
    """

    def combine(
        self,
        cash_records: list[ExpenseRecord],
        account_records: list[ExpenseRecord],
    ) -> list[DetailedExpenseRow]:
        """Combine records from both expense sheets.

        Args:
            cash_records: Records parsed from the cash sheet.
            account_records: Records parsed from the account sheet.

        Returns:
            One DetailedExpenseRow per (date, unit) seen in either input,
            in first-seen order.
        """
        groups: dict[tuple[str, BusinessUnit], list[ExpenseRecord]] = {}
        for record in [*cash_records, *account_records]:
            groups.setdefault((record.date, record.unit), []).append(record)

        rows = [
            self._combine_group(expense_date, unit, records)
            for (expense_date, unit), records in groups.items()
        ]

        logger.info(
            f"Combined {len(cash_records)} cash and {len(account_records)} account "
            f"expenses into {len(rows)} rows"
        )
        return rows

    def _combine_group(
        self,
        expense_date: str,
        unit: BusinessUnit,
        records: list[ExpenseRecord],
    ) -> DetailedExpenseRow:
        cash = ZERO
        account = ZERO
        cash_count = 0
        account_count = 0
        categories: list[str] = []

        for record in records:
            if record.payment_method is PaymentMethod.CASH:
                cash += record.amount
                cash_count += 1
            else:
                account += record.amount
                account_count += 1
            if record.category not in categories:
                categories.append(record.category)

        total = cash + account
        details = ExpenseDetails(
            cash=cash,
            account=account,
            total=total,
            cash_count=cash_count,
            account_count=account_count,
            categories=tuple(categories),
            category_details=tuple(
                CategoryDetail(
                    category=r.category,
                    amount=r.amount,
                    payment_method=r.payment_method,
                    row_index=r.row_index,
                )
                for r in records
            ),
        )

        return DetailedExpenseRow(
            date=expense_date,
            unit=unit,
            purchases=ZERO,
            salaries=ZERO,
            other=total,
            expense_details=details,
        )


def combine_expenses(
    cash_records: list[ExpenseRecord],
    account_records: list[ExpenseRecord],
) -> list[DetailedExpenseRow]:
    """Convenience function to combine expense records.

    Args:
        cash_records: Records parsed from the cash sheet.
        account_records: Records parsed from the account sheet.

    Returns:
        Combined expense rows.
    """
    return ExpenseCombiner().combine(cash_records, account_records)
