"""Abstract base class for spreadsheet sources."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from finance_dashboard.utils.cells import Grid


class SourceError(Exception):
    """Exception raised when a range cannot be fetched."""

    def __init__(self, message: str, location: str | None = None):
        """Initialize SourceError.

        Args:
            message: Error message.
            location: Optional description of the workbook/range that failed.
        """
        self.location = location
        super().__init__(message)


class BaseSource(ABC):
    """A spreadsheet that can be read range by range.

    Subclasses must implement:
    - read_range(): Return the cells of a range as a list of rows
    - last_modified(): Report when the spreadsheet last changed

    read_ranges() may be overridden to fetch several ranges in one pass.
    """

    @property
    def name(self) -> str:
        """Return source name for logging."""
        return self.__class__.__name__

    @abstractmethod
    def read_range(self, sheet: str, cell_range: str) -> Grid:
        """Read a range such as ``"B:G"`` or ``"A1:C20"`` from a worksheet.

        Args:
            sheet: Worksheet name.
            cell_range: Column or cell range.

        Returns:
            Rows of raw cell values; trailing empty cells and rows are trimmed.

        Raises:
            SourceError: If the range cannot be read.
        """
        pass

    def read_ranges(self, requests: Sequence[tuple[str, str]]) -> list[Grid]:
        """Read several (sheet, range) pairs in one pass over the spreadsheet.

        The default reads each range separately; sources with an expensive
        open step override this to open once.

        Args:
            requests: (sheet, cell_range) pairs.

        Returns:
            One grid per request, in request order.

        Raises:
            SourceError: If any range cannot be read.
        """
        return [self.read_range(sheet, cell_range) for sheet, cell_range in requests]

    @abstractmethod
    def last_modified(self) -> datetime | None:
        """Return the last modification time, if known."""
        pass
