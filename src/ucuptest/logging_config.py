"""
Logging for ucuptest.

Modules log through ``get_logger(__name__)``. ``setup_logging`` attaches a
rich console handler to the package logger for test-run diagnostics, and the
error tracker counts what the client's global error hook reports.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "ucuptest"


def setup_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """
    Send ucuptest diagnostics to a rich console.

    Calling it again replaces the handler instead of stacking another one.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Console to write to (defaults to stderr)

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))

    for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setLevel(logger.level)
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module (e.g. 'ucuptest.client')."""
    return logging.getLogger(name)


class ErrorTracker:
    """Count errors by type and log them."""

    def __init__(self):
        self.errors: dict[str, int] = {}
        self.logger = get_logger(__name__)

    def log_error(
        self,
        error_type: str,
        message: str,
        exception: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.errors[error_type] = self.errors.get(error_type, 0) + 1

        log_msg = f"{error_type}: {message}"
        if context:
            log_msg += f" | Context: {context}"
        self.logger.error(log_msg, exc_info=exception)

    def get_error_counts(self) -> dict[str, int]:
        return self.errors.copy()

    def reset_counts(self) -> None:
        self.errors.clear()


_error_tracker = ErrorTracker()


def track_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """Track an error globally."""
    _error_tracker.log_error(error_type, message, exception, context)


def get_error_stats() -> dict[str, int]:
    """Get global error statistics."""
    return _error_tracker.get_error_counts()


def reset_error_stats() -> None:
    _error_tracker.reset_counts()
