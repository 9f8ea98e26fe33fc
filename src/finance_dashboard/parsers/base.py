"""Abstract base class for sheet grid parsers."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from finance_dashboard.models.diagnostics import ParseStats
from finance_dashboard.utils.cells import Grid, Row
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class ParseError(Exception):
    """Exception raised when a grid is structurally unusable.

    Bad cells never raise; they only drop their row. This is reserved for
    input that breaks the reader contract, e.g. a grid that is not a list.
    """

    def __init__(self, message: str, source: str | None = None):
        """Initialize ParseError.

        Args:
            message: Error message.
            source: Optional name of the sheet or block.
        """
        self.source = source
        super().__init__(message)


class LayoutError(ParseError):
    """Exception raised when a sheet does not match its declared layout."""

    pass


class BaseParser(ABC):
    """Abstract base class for all grid parsers.

    Subclasses implement ``parse()``; after each call ``stats`` describes
    what was kept and dropped.
    """

    def __init__(self) -> None:
        self.stats = ParseStats(source=self.name)

    @property
    def name(self) -> str:
        """Return parser name for logging."""
        return self.__class__.__name__

    @abstractmethod
    def parse(self, grid: Grid) -> list:
        """Parse a grid of cells.

        The first row is a header and is skipped.

        Args:
            grid: Rows of raw cells.

        Returns:
            List of parsed records.

        Raises:
            ParseError: If the grid is not a sequence of rows.
        """
        pass

    def _reset_stats(self, source: str | None = None) -> ParseStats:
        self.stats = ParseStats(source=source or self.name)
        return self.stats

    def _data_rows(self, grid: Grid) -> list[tuple[int, Row]]:
        """Validate the grid shape and return (row_index, row) past the header.

        Rows that are not sequences are skipped, as readers sometimes emit
        ``None`` for fully empty rows.

        Raises:
            ParseError: If the grid itself is not a sequence.
        """
        if isinstance(grid, (str, bytes)) or not isinstance(grid, Sequence):
            raise ParseError(
                f"Expected a sequence of rows, got {type(grid).__name__}", self.name
            )

        rows: list[tuple[int, Row]] = []
        for row_index, row in enumerate(grid):
            if row_index == 0:
                continue
            if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
                logger.debug(f"{self.name}: skipping non-row at index {row_index}")
                self.stats.blank += 1
                continue
            rows.append((row_index, row))
        return rows

    def _log_stats(self) -> None:
        logger.info(self.stats.summary())
