"""Daily revenue/expense/profit aggregation for hospitality business units."""

__version__ = "0.1.0"
