"""
Logging setup shared by every entry point that embeds warmpath.

Lines look like: 2026-01-06T14:05:52Z [source] LEVEL message

LOG_LEVEL selects verbosity:
    INFO (default)  strategy outcomes, cache writes, snapshot saves
    DEBUG           state transitions, cache hits and misses, search summaries
    TRACE           every edge relaxation inside the weighted search

    from warmpath.logging_config import configure_logging

    configure_logging(source="pathfinder")
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

NOISY_LOGGERS = ("httpx", "httpcore")


def _trace(self: logging.Logger, message: object, *args: object, **kw: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kw)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """Stamps each record with its UTC creation time and a fixed source tag."""

    def __init__(self, source: str = "warmpath"):
        super().__init__()
        self.source = source

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        text = record.getMessage()
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return f"{stamp} [{self.source}] {record.levelname} {text}"


def resolve_level(level_name: str | None = None, debug: bool | None = None) -> int:
    """Map a LOG_LEVEL style name to a logging level; unknown names mean INFO."""
    name = (level_name if level_name is not None else os.getenv("LOG_LEVEL", "")).upper()
    if name == "TRACE":
        return TRACE
    if name == "DEBUG" or debug:
        return logging.DEBUG
    if name in ("WARNING", "ERROR", "CRITICAL"):
        return logging.getLevelName(name)  # type: ignore[no-any-return]
    return logging.INFO


def configure_logging(
    source: str = "warmpath",
    level: int | None = None,
    debug: bool | None = None,
) -> logging.Logger:
    """Install a single stdout handler on the root logger.

    Calling it again replaces the handler rather than stacking another one.

    Args:
        source: Tag shown in brackets on every line
        level: Explicit level; otherwise derived from LOG_LEVEL and debug
        debug: Force DEBUG when no explicit level is given
    """
    if level is None:
        level = resolve_level(debug=debug)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter(source=source))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
