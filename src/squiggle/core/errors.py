# topmark:header:start
#
#   project      : Squiggle
#   file         : errors.py
#   file_relpath : src/squiggle/core/errors.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Library exceptions for Squiggle.

These exceptions are framework-agnostic. The CLI maps them onto
`click.ClickException` subclasses with dedicated exit codes (see
`squiggle.cli.errors`).
"""

from __future__ import annotations


class SquiggleError(Exception):
    """Base class for all Squiggle library errors."""


class AnalyzerError(SquiggleError):
    """The source analyzer failed for one block (missing runtime, crash, timeout, bad payload)."""


class UnterminatedBlockError(SquiggleError):
    """Input ended inside a fenced block while the fatal unterminated policy was active.

    Attributes:
        line_number: One-based line number of the opening fence.
    """

    def __init__(self, line_number: int) -> None:
        super().__init__(f"Unterminated code block opened at line {line_number}")
        self.line_number = line_number


class ConfigError(SquiggleError):
    """Invalid or malformed configuration."""
