"""
Logging utilities for peerbump.

Centralizes logger configuration and retrieval under the ``peerbump``
namespace. Besides the standard levels a ``NOTICE`` level sits between
INFO and WARNING for messages the user should see even without ``-v``
in a dry run, such as "nothing was written".
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from peerbump.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

#: Numeric value of the NOTICE level.
NOTICE: int = 25
logging.addLevelName(NOTICE, "NOTICE")

_ROOT = "peerbump"
_logging_configured: bool = False
_lock = threading.Lock()


class ColoredFormatter(logging.Formatter):
    """Formatter that paints the level name on a colored background."""

    COLORS = {
        "DEBUG": "\033[44m",
        "INFO": "\033[42m",
        "NOTICE": "\033[46m",
        "WARNING": "\033[43m",
        "ERROR": "\033[41m",
        "CRITICAL": "\033[45m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = True,
        stream: Optional[IO[str]] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color
        self._stream = stream

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        color = self.COLORS.get(levelname)
        if color and self.use_color and self._should_use_color():
            record.levelname = f"{color} {levelname} {self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname

    def _should_use_color(self) -> bool:
        """Determine whether ANSI colors should be emitted."""
        if os.environ.get("NO_COLOR"):
            return False
        if os.environ.get("CI"):
            return False
        stream = self._stream or sys.stderr
        try:
            return stream.isatty()
        except (AttributeError, OSError):
            return False


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure the ``peerbump`` logger hierarchy.

    Safe to call repeatedly; existing handlers are replaced.

    Args:
        level: Logging level (e.g. ``logging.INFO`` or :data:`NOTICE`).
        verbose: Use the timestamped format.
        stream: Output stream; defaults to ``sys.stderr``.
    """
    global _logging_configured

    with _lock:
        root_logger = logging.getLogger(_ROOT)
        root_logger.handlers.clear()
        root_logger.setLevel(level)

        target = stream or sys.stderr
        handler = logging.StreamHandler(target)
        handler.setLevel(level)

        fmt = LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT
        handler.setFormatter(
            ColoredFormatter(
                fmt,
                datefmt=LOG_DATE_FORMAT,
                use_color=not os.environ.get("NO_COLOR"),
                stream=target,
            )
        )

        root_logger.addHandler(handler)
        root_logger.propagate = False
        _logging_configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the ``peerbump`` namespace.

    Args:
        name: Logger name, either relative (``"core.resolver"``) or
            already qualified (``"peerbump.core.resolver"``).
    """
    if not name or name == _ROOT:
        logger = logging.getLogger(_ROOT)
    elif name.startswith(f"{_ROOT}."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{_ROOT}.{name}")

    # Library-safe default when the CLI has not configured logging
    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger


def is_logging_configured() -> bool:
    """Return True if :func:`setup_logging` has run."""
    return _logging_configured
