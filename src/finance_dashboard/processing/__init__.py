"""Processing pipeline components."""

from finance_dashboard.processing.aggregator import (
    DailyAggregator,
    aggregate_by_date_unit,
    filter_rows,
)
from finance_dashboard.processing.breakfast import summarize_breakfasts
from finance_dashboard.processing.cache import ReportCache, make_cache_key
from finance_dashboard.processing.expense_combiner import ExpenseCombiner, combine_expenses
from finance_dashboard.processing.pipeline import PipelineResult, build_report

__all__ = [
    "DailyAggregator",
    "ExpenseCombiner",
    "PipelineResult",
    "ReportCache",
    "aggregate_by_date_unit",
    "build_report",
    "combine_expenses",
    "filter_rows",
    "make_cache_key",
    "summarize_breakfasts",
]
