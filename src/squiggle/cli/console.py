# topmark:header:start
#
#   project      : Squiggle
#   file         : console.py
#   file_relpath : src/squiggle/cli/console.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Click-backed console for notices and the run summary.

Warnings and errors go to the error stream. Info notices and the summary go
to the output stream, which the CLI points at stderr whenever the document
itself is written to stdout.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

import click

from squiggle.cli.console_api import ConsoleLike
from squiggle.core.notices import NoticeLevel

if TYPE_CHECKING:
    from squiggle.core.notices import Notice


class ClickConsole(ConsoleLike):
    """Render notices as ``<level>: <message>`` with a colored label.

    Args:
        enable_color (bool): If False, labels are printed without ANSI styling.
        out (TextIO | None): Stream for info notices and the summary. Defaults to `sys.stdout`.
        err (TextIO | None): Stream for warnings and errors. Defaults to `sys.stderr`.
    """

    def __init__(
        self,
        *,
        enable_color: bool = True,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.enable_color = enable_color
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def label(self, level: NoticeLevel) -> str:
        """Return the (possibly styled) ``<level>:`` prefix."""
        text = f"{level.value}:"
        if not self.enable_color:
            return text
        return click.style(text, fg=level.fg, bold=level is NoticeLevel.ERROR)

    def notice(self, notice: Notice) -> None:
        """Write ``notice``, routing warnings and errors to the error stream."""
        stream: TextIO = self.out if notice.level is NoticeLevel.INFO else self.err
        line = f"{self.label(notice.level)} {notice.message}"
        click.echo(line, file=stream, color=self.enable_color)

    def summary(self, text: str) -> None:
        """Write the run summary to the output stream."""
        click.echo(text, file=self.out, color=self.enable_color)
