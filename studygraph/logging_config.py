"""
Log setup for hosts that embed studygraph.

Every line comes out as ``<UTC timestamp> [<source>] <LEVEL> <message>``, e.g.
``2026-03-01T12:00:00Z [recommender] WARNING Ignoring self-connection for user u1``.

LOG_LEVEL picks the verbosity when no level is passed:
    INFO   builder summaries and recommendation counts (default)
    DEBUG  graph mutations, cache hits and misses, empty-result fallbacks
    TRACE  one line per scored candidate in recommend_partners

The engine modules only ever call ``logging.getLogger(__name__)``; nothing is
configured until the host calls configure_logging().
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime

# Below DEBUG: per-candidate scoring detail
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def _trace(self: logging.Logger, message: object, *args: object, **kw: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kw)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """Second-precision UTC timestamp, bracketed source tag, level, message.

    Tracebacks are appended on the following lines.
    """

    def __init__(self, source: str = "studygraph"):
        self.source = source
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        line = f"{stamp} [{self.source}] {record.levelname} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def resolve_level(level: int | None = None, debug: bool | None = None) -> int:
    """An explicit level wins, then LOG_LEVEL, then the debug flag, else INFO."""
    if level is not None:
        return level
    requested = os.getenv("LOG_LEVEL", "").upper()
    if requested == "TRACE":
        return TRACE
    if requested == "DEBUG" or debug:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    source: str = "studygraph",
    level: int | None = None,
    debug: bool | None = None,
) -> logging.Logger:
    """Route every logger through one stdout handler in the unified format.

    Replaces whatever handlers the root logger had, so calling it twice does
    not duplicate lines.

    Args:
        source: Tag shown in brackets, usually the host service name
        level: Explicit level; see resolve_level for the fallbacks
        debug: Shortcut for DEBUG when LOG_LEVEL is unset

    Returns:
        The root logger
    """
    level = resolve_level(level, debug)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter(source=source))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
