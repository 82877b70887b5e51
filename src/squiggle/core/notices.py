# topmark:header:start
#
#   project      : Squiggle
#   file         : notices.py
#   file_relpath : src/squiggle/core/notices.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Run-level notices collected while transforming a document.

Notices report recoverable, block-scoped conditions (an analyzer failure, an
unterminated block that was flushed, an unknown config key). They are distinct
from the compiler diagnostics rendered *into* the document: notices describe
what happened to the run, and are shown to the user by the CLI.

Sections:
    * NoticeLevel: severity levels with associated terminal colors.
    * Notice: immutable structured notice (level + message).
    * NoticeStats: aggregated per-level counts.
    * NoticeLog: mutable per-run collection with helpers for adding and
      summarizing notices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from squiggle.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from squiggle.config.logging import SquiggleLogger


logger: SquiggleLogger = get_logger(__name__)


class NoticeLevel(Enum):
    """Severity levels for notices collected during a run.

    Levels map to terminal colors and are ordered by importance: ERROR > WARNING > INFO.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def fg(self) -> str:
        """Return the Click foreground color used to label notices of this level."""
        return {
            NoticeLevel.INFO: "blue",
            NoticeLevel.WARNING: "yellow",
            NoticeLevel.ERROR: "bright_red",
        }[self]


@dataclass(frozen=True)
class Notice:
    """Structured notice with a severity level and message."""

    level: NoticeLevel
    message: str


@dataclass(frozen=True)
class NoticeStats:
    """Aggregated counts for notices by severity level."""

    n_info: int
    n_warning: int
    n_error: int

    @property
    def total(self) -> int:
        """Return the total count of notices."""
        return self.n_info + self.n_warning + self.n_error


@dataclass
class NoticeLog:
    """Mutable, per-run collection of notices."""

    items: list[Notice] = field(default_factory=lambda: [])

    def _add(self, notice: Notice) -> None:
        self.items.append(notice)
        logger.trace("Adding [%s]: %r", notice.level.value, notice.message)

    def add_info(self, message: str) -> None:
        """Add an ``info`` notice to the log.

        Args:
            message: The notice message.
        """
        self._add(Notice(NoticeLevel.INFO, message))

    def add_warning(self, message: str) -> None:
        """Add a ``warning`` notice to the log.

        Args:
            message: The notice message.
        """
        self._add(Notice(NoticeLevel.WARNING, message))

    def add_error(self, message: str) -> None:
        """Add an ``error`` notice to the log.

        Args:
            message: The notice message.
        """
        self._add(Notice(NoticeLevel.ERROR, message))

    def extend(self, notices: Iterable[Notice]) -> None:
        """Append notices collected elsewhere (e.g. while loading config)."""
        for notice in notices:
            self._add(notice)

    def stats(self) -> NoticeStats:
        """Return per-level counts for notices in this log."""
        return compute_notice_stats(self.items)

    def has_warning(self) -> bool:
        """Return True if the log contains warning notices."""
        return any(n.level == NoticeLevel.WARNING for n in self.items)

    def has_error(self) -> bool:
        """Return True if the log contains error notices."""
        return any(n.level == NoticeLevel.ERROR for n in self.items)

    def __iter__(self) -> Iterator[Notice]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def compute_notice_stats(notices: Iterable[Notice]) -> NoticeStats:
    """Return per-level counts for a sequence of notices.

    Args:
        notices: the notices to count.

    Returns:
        Per-level counts.
    """
    n_info: int = 0
    n_warn: int = 0
    n_err: int = 0
    for n in notices:
        if n.level == NoticeLevel.INFO:
            n_info += 1
        elif n.level == NoticeLevel.WARNING:
            n_warn += 1
        else:
            n_err += 1
    return NoticeStats(n_info=n_info, n_warning=n_warn, n_error=n_err)
