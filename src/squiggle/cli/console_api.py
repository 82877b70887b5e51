# topmark:header:start
#
#   project      : Squiggle
#   file         : console_api.py
#   file_relpath : src/squiggle/cli/console_api.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""What the CLI needs from a console: run notices and a summary line."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from squiggle.core.notices import Notice


class ConsoleLike(Protocol):
    """Sink for user-facing output, kept apart from logging."""

    def notice(self, notice: Notice) -> None:
        """Show ``notice`` with its level label."""
        ...

    def summary(self, text: str) -> None:
        """Show the end-of-run summary line."""
        ...
