"""Logging for ghd.

Log records only ever go to stderr; stdout carries nothing but the
command's result. Handlers hang off the ``ghd`` logger, so libraries
logging through the root logger are left alone.
"""

import logging
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "ghd"


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def levelno(self) -> int:
        return logging.getLevelName(self.value.upper())


def level_for(verbose: int, default: LogLevel = LogLevel.WARNING) -> LogLevel:
    """Level for a ``-v`` count; without ``-v`` the configured default applies."""
    if verbose >= 2:
        return LogLevel.DEBUG
    if verbose == 1:
        return LogLevel.INFO
    return default


def setup_logging(level: LogLevel = LogLevel.WARNING, color: bool = True) -> logging.Logger:
    """Attach a single stderr handler to the ``ghd`` logger.

    Calling it again replaces the previous handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for old in logger.handlers[:]:
        logger.removeHandler(old)

    handler: logging.Handler
    if color:
        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level.levelno)
    logger.propagate = False
    return logger


class StructuredLogger:
    """Logger that appends bound ``key=value`` context to each message."""

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
            name = f"{LOGGER_NAME}.{name}"
        self._logger = logging.getLogger(name)
        self._context = context or {}

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Return a logger carrying additional context."""
        return StructuredLogger(self._logger.name, {**self._context, **kwargs})

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def _log(self, level: int, message: str, kwargs: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        context = {**self._context, **kwargs}
        if context:
            message = f"{message} [{' '.join(f'{k}={v}' for k, v in context.items())}]"
        self._logger.log(level, message)
