# topmark:header:start
#
#   project      : Squiggle
#   file         : model.py
#   file_relpath : src/squiggle/annotate/model.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Data types exchanged between the source analyzer and the renderer.

Line indexing differs between the two positioned types and must stay that way:

* `Diagnostic.line` is a **zero-based** `LineIndex` into the analyzer's
  canonical text.
* `Query.line` is a **one-based** `LineNumber`.

Both are distinct `NewType`s so a mix-up shows up in type checking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

#: Zero-based line index (compiler diagnostics).
LineIndex = NewType("LineIndex", int)

#: One-based line number (inline queries).
LineNumber = NewType("LineNumber", int)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One compiler error attached to a position in the analyzed source.

    Attributes:
        line (LineIndex): Zero-based line in the canonical text.
        message (str): Rendered message; may contain newlines.
        character (int | None): Zero-based column of the span start.
        length (int | None): Span width in characters.
    """

    line: LineIndex
    message: str
    character: int | None = None
    length: int | None = None

    @property
    def span(self) -> tuple[int, int] | None:
        """Return the ``[start, end)`` column span, or None when the position is imprecise.

        ``character`` and ``length`` only count as a span when both are present.
        """
        if self.character is None or self.length is None:
            return None
        return (self.character, self.character + self.length)


@dataclass(frozen=True, slots=True)
class Query:
    """One inline type-lookup result (requested with a ``^?`` marker).

    Attributes:
        line (LineNumber): One-based line the result is rendered after.
        offset (int): Zero-based column at which the ``^?`` marker is rendered.
        text (str | None): Resolved description; may be multi-line; None renders as empty.
    """

    line: LineNumber
    offset: int
    text: str | None = None


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Output of one analyzer call.

    Attributes:
        code (str): Canonical text all positions refer to (may differ from the input
            when the analyzer strips directives such as ``// ^?`` lines).
        diagnostics (tuple[Diagnostic, ...]): Errors in analyzer order.
        queries (tuple[Query, ...]): Query results in analyzer order.
    """

    code: str
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)
    queries: tuple[Query, ...] = field(default_factory=tuple)
