# topmark:header:start
#
#   project      : Squiggle
#   file         : render.py
#   file_relpath : src/squiggle/annotate/render.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Pure rendering of diagnostics and queries as ``//`` comment lines.

Every function here is stateless: given the analyzer output it returns new
strings, so blocks can be rendered in any order (or in parallel).

Layout of an annotated source line::

    const x: number = "s";
    //                 ^^^
    // Type 'string' is not assignable to type 'number'.
    //    ^? - const x: number

* The **caret line** underlines the merged spans of all diagnostics on the
  line. The raw caret string is built from column 0 and its first two
  characters are replaced by the ``//`` marker, so carets stay under the
  columns they point at.
* **Message lines** repeat every diagnostic message, one ``// `` comment per
  message line, so multi-line messages never escape the comment.
* The **query line** places each ``^? - `` marker at its query offset;
  continuation lines of a multi-line result are re-commented and indented
  by the same gap.
"""

from __future__ import annotations

import re
from collections import defaultdict
from typing import TYPE_CHECKING

from squiggle.annotate.model import LineIndex, LineNumber
from squiggle.config.logging import get_logger
from squiggle.constants import CARET, COMMENT_MARKER, FENCE_MARKER, NEWLINE, QUERY_MARKER

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from squiggle.annotate.model import AnalysisResult, Diagnostic, Query
    from squiggle.config.logging import SquiggleLogger

logger: SquiggleLogger = get_logger(__name__)

#: Any line terminator that may appear inside analyzer-provided text.
LINE_BREAK_RE: re.Pattern[str] = re.compile(r"\r\n|\r|\n")

Interval = tuple[int, int]


def merge_spans(spans: Iterable[Interval]) -> list[Interval]:
    """Merge ``[start, end)`` spans into a sorted, non-overlapping sequence.

    Spans are sorted by start (stable, so ties keep their input order). Each
    span is then clamped to begin no earlier than the end of the span kept
    before it: ``start' = max(prev_end, start)``, ``end' = max(prev_end, end)``.
    Spans that collapse to zero width are dropped, so a span fully covered by
    an earlier one disappears.

    Args:
        spans (Iterable[Interval]): Raw spans, in diagnostic order.

    Returns:
        list[Interval]: Merged spans; every column they cover was covered by
        at least one input span.
    """
    merged: list[Interval] = []
    prev_end: int | None = None
    for start, end in sorted(spans, key=lambda span: span[0]):
        if prev_end is not None:
            start, end = max(prev_end, start), max(prev_end, end)
        if start >= end:
            continue
        merged.append((start, end))
        prev_end = end
    return merged


def render_carets(spans: Sequence[Interval]) -> str:
    """Return the raw caret string for merged spans, starting at column 0."""
    parts: list[str] = []
    prev_end: int = 0
    for start, end in spans:
        parts.append(" " * (start - prev_end))
        parts.append(CARET * (end - start))
        prev_end = end
    return "".join(parts)


def render_caret_line(diagnostics: Iterable[Diagnostic]) -> str | None:
    """Return the comment line underlining the diagnostics' spans.

    Diagnostics without a span (no ``character``/``length`` pair) are ignored.

    Returns:
        str | None: ``"//"`` followed by the raw caret string minus its first two
        characters, or None when no caret survives merging.
    """
    spans: list[Interval] = []
    for diagnostic in diagnostics:
        span: Interval | None = diagnostic.span
        if span is not None:
            spans.append(span)
    raw: str = render_carets(merge_spans(spans))
    if not raw:
        return None
    return COMMENT_MARKER + raw[len(COMMENT_MARKER) :]


def render_message_lines(diagnostics: Iterable[Diagnostic]) -> list[str]:
    """Return one ``// `` comment line per line of each diagnostic message, in order."""
    lines: list[str] = []
    for diagnostic in diagnostics:
        for message_line in LINE_BREAK_RE.split(diagnostic.message):
            lines.append(f"{COMMENT_MARKER} {message_line}")
    return lines


def render_query_line(queries: Iterable[Query]) -> str:
    """Return the combined ``^?`` comment for all queries on one source line.

    The gap before each marker is measured against the accumulated comment
    length, including any continuation lines of earlier results. A query whose
    offset falls inside what is already rendered gets no gap.
    """
    comment: str = COMMENT_MARKER
    for query in queries:
        gap: int = query.offset - len(comment)
        if gap < 0:
            logger.debug("Query at offset %d overlaps previous output; no gap", query.offset)
            gap = 0
        padding: str = " " * gap
        comment += padding + QUERY_MARKER
        comment += LINE_BREAK_RE.sub(NEWLINE + COMMENT_MARKER + padding, query.text or "")
    return comment


def annotate_lines(result: AnalysisResult) -> list[str]:
    """Return the canonical text's lines interleaved with their annotation comments.

    Diagnostics are matched by zero-based line index, queries by one-based
    line number (a query on line ``i + 1`` renders after source line ``i``).
    The empty line produced by a trailing newline is dropped when nothing was
    rendered after it.
    """
    errors_by_line: defaultdict[LineIndex, list[Diagnostic]] = defaultdict(list)
    for diagnostic in result.diagnostics:
        errors_by_line[diagnostic.line].append(diagnostic)
    queries_by_line: defaultdict[LineNumber, list[Query]] = defaultdict(list)
    for query in result.queries:
        queries_by_line[query.line].append(query)

    out: list[str] = []
    for index, line in enumerate(result.code.split(NEWLINE)):
        out.append(line)
        line_errors: list[Diagnostic] = errors_by_line.get(LineIndex(index), [])
        line_queries: list[Query] = queries_by_line.get(LineNumber(index + 1), [])
        if not line_errors and not line_queries:
            continue
        if line_errors:
            caret_line: str | None = render_caret_line(line_errors)
            if caret_line is not None:
                out.append(caret_line)
            out.extend(render_message_lines(line_errors))
        if line_queries:
            out.append(render_query_line(line_queries))

    if out and out[-1] == "":
        out.pop()
    return out


def wrap_fenced(lines: Sequence[str], language: str) -> str:
    """Return ``lines`` inside a fenced block tagged with ``language`` (no trailing newline)."""
    return NEWLINE.join([f"{FENCE_MARKER}{language}", *lines, FENCE_MARKER])
