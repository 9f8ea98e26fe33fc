"""Output writers for dashboard reports."""

from finance_dashboard.output.json_exporter import JSONExporter

__all__ = ["JSONExporter"]
