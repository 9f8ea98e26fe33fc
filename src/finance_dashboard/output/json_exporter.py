"""JSON exporter producing the dashboard API response body."""

import json
from pathlib import Path

from finance_dashboard.service import FinanceReport
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class JSONExporter:
    """Writes a FinanceReport as the JSON body served to the front end."""

    def __init__(self, indent: int | None = 2):
        """Initialize JSON exporter.

        Args:
            indent: Indentation for pretty-printing (None for compact output).
        """
        self.indent = indent

    def dumps(self, report: FinanceReport) -> str:
        """Serialize a report to a JSON string."""
        return json.dumps(report.to_dict(), ensure_ascii=False, indent=self.indent)

    def export(self, output_path: Path, report: FinanceReport) -> Path:
        """Write a report to a file.

        Args:
            output_path: Destination file.
            report: Report to write.

        Returns:
            Path to the created file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.dumps(report))
            f.write("\n")

        logger.info(f"Exported {len(report.data)} rows to {output_path}")
        return output_path
