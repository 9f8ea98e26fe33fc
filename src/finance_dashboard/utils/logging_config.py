"""Logging configuration for the finance dashboard."""

import logging
import sys
from pathlib import Path

# Default log file name
DEFAULT_LOG_FILE = "finance_dashboard.log"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
) -> logging.Logger:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, uses DEFAULT_LOG_FILE.
        console_output: Whether to also output to stderr.

    Returns:
        The package logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("finance_dashboard")
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_file is None:
        log_file = DEFAULT_LOG_FILE

    file_handler = logging.FileHandler(Path(log_file), encoding="utf-8")
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__).

    Returns:
        A logger nested under the package logger.
    """
    if name.startswith("finance_dashboard"):
        return logging.getLogger(name)
    return logging.getLogger(f"finance_dashboard.{name}")


def _format_context(context: dict[str, object]) -> str:
    return ", ".join(f"{k}={v}" for k, v in context.items())


class LogContext:
    """Context manager that logs the start, end or failure of a stage.

    Stage results recorded with ``update()`` are appended to the completion
    message, which is then logged at INFO (or WARNING when ``dropped`` is
    non-zero) instead of DEBUG.
    """

    def __init__(self, logger: logging.Logger, operation: str, **context: object):
        """Initialize log context.

        Args:
            logger: Logger instance to use.
            operation: Name of the operation being performed.
            **context: Additional context to include in log messages.
        """
        self.logger = logger
        self.operation = operation
        self.context = context
        self.results: dict[str, object] = {}

    def update(self, **results: object) -> None:
        """Record stage results for the completion message."""
        self.results.update(results)

    def __enter__(self) -> "LogContext":
        self.logger.debug(f"Starting {self.operation}: {_format_context(self.context)}")
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        if exc_type is not None:
            self.logger.error(
                f"Error in {self.operation}: {exc_type.__name__}: {exc_val}",
                exc_info=True,
            )
        elif not self.results:
            self.logger.debug(f"Completed {self.operation}")
        else:
            level = logging.WARNING if self.results.get("dropped") else logging.INFO
            details = _format_context({**self.context, **self.results})
            self.logger.log(level, f"Completed {self.operation}: {details}")
        return False  # Don't suppress exceptions
