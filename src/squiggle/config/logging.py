# topmark:header:start
#
#   project      : Squiggle
#   file         : logging.py
#   file_relpath : src/squiggle/config/logging.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Logging for Squiggle: a TRACE level and block-aware, colored records.

Records emitted while a fenced block is being processed carry the line number
of its opening fence (see `block_extra`). `ChalkFormatter` prefixes such
records with ``block@L<n>`` so analyzer chatter can be traced back to the
document. Records always go to stderr, since stdout may carry the document.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5

#: Environment variable consulted when no explicit level is given.
LOG_LEVEL_ENV_VAR: Final[str] = "SQUIGGLE_LOG_LEVEL"

#: `LogRecord` attribute holding the opening line of the current block.
BLOCK_LINE_ATTR: Final[str] = "block_line"

LOG_FORMAT: Final[str] = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT: Final[str] = "[%(levelname)s] [%(name)s:%(lineno)d] %(message)s"

# Highest threshold first; the first one the record reaches picks the style.
_LEVEL_STYLES: Final[tuple[tuple[int, Callable[[str], str]], ...]] = (
    (logging.ERROR, chalk.red),
    (logging.WARNING, chalk.yellow),
    (logging.INFO, chalk.green),
    (logging.DEBUG, chalk.gray),
    (TRACE_LEVEL, chalk.blue),
)


class SquiggleLogger(logging.Logger):
    """Logger with a `trace` method below DEBUG."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log ``msg % args`` with severity TRACE."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, extra=extra, stacklevel=2)


logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.setLoggerClass(SquiggleLogger)


def block_extra(line_number: int) -> dict[str, object]:
    """Return the ``extra`` mapping tying a record to the block opened at ``line_number``."""
    return {BLOCK_LINE_ATTR: line_number}


class ChalkFormatter(logging.Formatter):
    """Formatter that tags block records and colors them by severity.

    Args:
        fmt (str): Format string passed to `logging.Formatter`.
        color (bool): If False, records are left uncolored (``--no-color``).
    """

    def __init__(self, fmt: str, *, color: bool = True) -> None:
        super().__init__(fmt)
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record``, prefixing the block it belongs to when known."""
        message: str = super().format(record)
        block_line: object = getattr(record, BLOCK_LINE_ATTR, None)
        if block_line is not None:
            message = f"block@L{block_line}: {message}"
        if not self.color:
            return message
        for threshold, style in _LEVEL_STYLES:
            if record.levelno >= threshold:
                return style(message)
        return chalk.dim(message)


def resolve_env_log_level() -> int | None:
    """Return the level named by ``SQUIGGLE_LOG_LEVEL``, or None if unset or unknown.

    Names are case-insensitive (``trace``, ``warn``, ...); digits are taken as
    numeric levels.
    """
    value: str = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    if not value:
        return None
    if value.isdigit():
        return int(value)
    level: int | str = logging.getLevelName(value)
    return level if isinstance(level, int) else None


def setup_logging(level: int | None = None, *, color: bool = True) -> None:
    """Install a single stderr handler on the root logger.

    Without an explicit ``level`` the environment is consulted, then CRITICAL,
    which keeps the CLI silent. Below INFO the logger name and line are shown.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT, color=color)
    )
    root_logger.addHandler(handler)


def get_logger(name: str) -> SquiggleLogger:
    """Return the `SquiggleLogger` named ``name``."""
    return cast("SquiggleLogger", logging.getLogger(name))
