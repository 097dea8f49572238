"""
Logging setup for pinbump.

Loggers live under the ``pinbump`` namespace and stay silent until the CLI
calls :func:`setup_logging`; library users get a ``NullHandler``.

pinbump logs the commands it runs and the errors GitHub returns, both of
which can carry credentials, so the handler installed by
:func:`setup_logging` masks GitHub tokens before anything is written.
"""

from __future__ import annotations

import os
import re
import sys
import copy
import logging
import threading
from typing import IO, Iterable, List, Optional, Pattern

from pinbump.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_SECRET_MASK,
    LOG_SECRET_PATTERNS,
    LOG_VERBOSE_FORMAT,
)

_NAMESPACE = "pinbump"

_lock = threading.Lock()


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when stderr is a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if color is None or not self.use_color or not self._should_use_color():
            return super().format(record)

        # The record is shared with any other handler
        colored = copy.copy(record)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)

    @staticmethod
    def _should_use_color() -> bool:
        if os.environ.get("NO_COLOR") or os.environ.get("CI"):
            return False
        try:
            return sys.stderr.isatty()
        except (AttributeError, OSError):
            return False


class SecretMaskingFilter(logging.Filter):
    """Replace GitHub tokens in log records with a mask.

    The message is rendered once (``record.getMessage()``), masked, and
    stored back without arguments, so formatters see the masked text.
    """

    def __init__(
        self,
        patterns: Iterable[str] = LOG_SECRET_PATTERNS,
        mask: str = LOG_SECRET_MASK,
    ) -> None:
        super().__init__()
        self.patterns: List[Pattern[str]] = [re.compile(p) for p in patterns]
        self.mask = mask

    def redact(self, text: str) -> str:
        for pattern in self.patterns:
            text = pattern.sub(self.mask, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self.redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(
    *,
    level: int = logging.WARNING,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Send ``pinbump`` log records to ``stream`` (stderr by default).

    Any handler from a previous call is replaced, and records no longer
    propagate to the root logger.

    Args:
        level: Threshold, e.g. ``logging.INFO`` for ``-v``.
        verbose: Use the timestamped format with logger names (``-vv``).
        stream: Output stream.
    """
    formatter = ColoredFormatter(
        LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        use_color=not os.environ.get("NO_COLOR"),
    )
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(SecretMaskingFilter())

    with _lock:
        namespace_logger = logging.getLogger(_NAMESPACE)
        namespace_logger.handlers.clear()
        namespace_logger.setLevel(level)
        namespace_logger.addHandler(handler)
        namespace_logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the pinbump namespace.

    ``get_logger("core.graph")`` and ``get_logger("pinbump.core.graph")``
    return the same logger.
    """
    if not name or name == _NAMESPACE:
        full_name = _NAMESPACE
    elif name.startswith(f"{_NAMESPACE}."):
        full_name = name
    else:
        full_name = f"{_NAMESPACE}.{name}"

    logger = logging.getLogger(full_name)
    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())
    return logger
