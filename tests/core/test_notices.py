# topmark:header:start
#
#   project      : Squiggle
#   file         : test_notices.py
#   file_relpath : tests/core/test_notices.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Tests for run notices and library errors."""

from __future__ import annotations

from squiggle.core.errors import SquiggleError, UnterminatedBlockError
from squiggle.core.notices import Notice, NoticeLevel, NoticeLog, compute_notice_stats


def test_notice_log_counts_by_level() -> None:
    """Stats count each level separately."""
    log = NoticeLog()
    log.add_info("a")
    log.add_warning("b")
    log.add_warning("c")
    log.add_error("d")

    stats = log.stats()

    assert (stats.n_info, stats.n_warning, stats.n_error) == (1, 2, 1)
    assert stats.total == len(log) == 4
    assert log.has_warning()
    assert log.has_error()


def test_extend_keeps_order() -> None:
    """Notices collected elsewhere are appended in order."""
    log = NoticeLog()
    log.add_error("first")
    log.extend([Notice(NoticeLevel.WARNING, "second"), Notice(NoticeLevel.INFO, "third")])

    assert [n.message for n in log] == ["first", "second", "third"]


def test_empty_log() -> None:
    """An empty log reports nothing."""
    log = NoticeLog()

    assert not log.has_error()
    assert not log.has_warning()
    assert compute_notice_stats(log).total == 0


def test_unterminated_error_carries_line() -> None:
    """The error names the opening fence's line."""
    err = UnterminatedBlockError(7)

    assert isinstance(err, SquiggleError)
    assert err.line_number == 7
    assert str(err) == "Unterminated code block opened at line 7"
