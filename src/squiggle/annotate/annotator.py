# topmark:header:start
#
#   project      : Squiggle
#   file         : annotator.py
#   file_relpath : src/squiggle/annotate/annotator.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Annotator: analyze one block of source and render it as an annotated fenced block."""

from __future__ import annotations

from typing import TYPE_CHECKING

from squiggle.annotate.render import annotate_lines, wrap_fenced
from squiggle.config.logging import get_logger
from squiggle.config.model import STRICT_ANALYZER_OPTIONS
from squiggle.constants import DEFAULT_LANGUAGE

if TYPE_CHECKING:
    from squiggle.annotate.analyzer import SourceAnalyzer
    from squiggle.annotate.model import AnalysisResult
    from squiggle.config.logging import SquiggleLogger
    from squiggle.config.model import AnalyzerOptions

logger: SquiggleLogger = get_logger(__name__)


class Annotator:
    """Render source text with inline diagnostic and query comments.

    The annotator holds only immutable collaborators; `render` is pure given
    the analyzer's output.

    Args:
        analyzer (SourceAnalyzer): Produces diagnostics and queries for a block.
        options (AnalyzerOptions): Compiler options passed on every call.
        language (str): Tag written on the opening fence of the result.
    """

    def __init__(
        self,
        analyzer: SourceAnalyzer,
        *,
        options: AnalyzerOptions = STRICT_ANALYZER_OPTIONS,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self.analyzer = analyzer
        self.options = options
        self.language = language

    def analyze(self, source: str) -> AnalysisResult:
        """Run the analyzer on ``source``. Raises `AnalyzerError` on failure."""
        result: AnalysisResult = self.analyzer.analyze(source, self.options)
        logger.debug(
            "Analyzed block: %d diagnostic(s), %d query(ies)",
            len(result.diagnostics),
            len(result.queries),
        )
        return result

    def render(self, source: str) -> str:
        """Return ``source`` annotated and wrapped in a fenced block (no trailing newline)."""
        return wrap_fenced(annotate_lines(self.analyze(source)), self.language)
