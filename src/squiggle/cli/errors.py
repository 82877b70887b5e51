# topmark:header:start
#
#   project      : Squiggle
#   file         : errors.py
#   file_relpath : src/squiggle/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""CLI errors: library failures mapped to exit codes.

A `SquiggleCliError` is displayed as an error notice through the console in
``ctx.obj``, so a run that aborts reads the same as the notices of a run that
completes. Errors raised before the console exists fall back to Click.
"""

from __future__ import annotations

from typing import IO, Any

import click

from squiggle.cli.exit_codes import ExitCode
from squiggle.core.notices import Notice, NoticeLevel


class SquiggleCliError(click.ClickException):
    """Base class for Squiggle CLI errors; ``exit_code`` is set per subclass."""

    exit_code = ExitCode.FAILURE

    def as_notice(self) -> Notice:
        """Return this error as an error-level run notice."""
        return Notice(NoticeLevel.ERROR, self.format_message())

    def show(self, file: IO[Any] | None = None) -> None:
        """Show the error as a notice, or via Click when no console is set up."""
        ctx = click.get_current_context(silent=True)
        obj = ctx.obj if ctx is not None else None
        console = obj.get("console") if isinstance(obj, dict) else None
        if console is None:
            super().show(file)
            return
        console.notice(self.as_notice())


class SquiggleUsageError(SquiggleCliError):
    """Conflicting or invalid command-line options."""

    exit_code = ExitCode.USAGE_ERROR


class SquiggleConfigError(SquiggleCliError):
    """Missing, malformed or invalid configuration."""

    exit_code = ExitCode.CONFIG_ERROR


class SquiggleFileNotFoundError(SquiggleCliError):
    """SOURCE does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class SquigglePermissionDeniedError(SquiggleCliError):
    exit_code = ExitCode.PERMISSION_DENIED


class SquiggleIOError(SquiggleCliError):
    exit_code = ExitCode.IO_ERROR


class SquiggleEncodingError(SquiggleCliError):
    """SOURCE is not valid UTF-8."""

    exit_code = ExitCode.ENCODING_ERROR


class SquigglePipelineError(SquiggleCliError):
    """The document cannot be transformed (unterminated block under the fatal policy)."""

    exit_code = ExitCode.PIPELINE_ERROR
