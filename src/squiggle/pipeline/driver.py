# topmark:header:start
#
#   project      : Squiggle
#   file         : driver.py
#   file_relpath : src/squiggle/pipeline/driver.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Block driver: stream a document and annotate its fenced code blocks.

The driver is a two-state machine (`FenceState.OUTSIDE` / `FenceState.INSIDE`)
over the document's lines:

* OUTSIDE: lines are copied through; a fence-open line switches to INSIDE and
  starts a buffer.
* INSIDE: lines are buffered; a fence-close line hands the buffered content to
  the `Annotator` and writes its fenced rendering.

Which lines count as fences is decided by a `FenceMatcher` (see
`squiggle.config.types.FencePolicy`).

Failure handling is block-scoped. A block's output is only produced once its
rendering has succeeded; when the analyzer fails, the original block is
written back verbatim and an error notice is recorded. A document that ends
inside a block is flushed unannotated with a warning, or raises
`UnterminatedBlockError` under `UnterminatedPolicy.FATAL`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from squiggle.config.logging import block_extra, get_logger
from squiggle.config.types import FencePolicy, UnterminatedPolicy
from squiggle.constants import DEFAULT_LANGUAGE_TAGS, FENCE_MARKER, NEWLINE
from squiggle.core.errors import AnalyzerError, UnterminatedBlockError
from squiggle.core.notices import NoticeLog

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from squiggle.annotate.annotator import Annotator
    from squiggle.config.logging import SquiggleLogger
    from squiggle.config.model import Config

logger: SquiggleLogger = get_logger(__name__)


class FenceState(Enum):
    """Position of the driver relative to a fenced block."""

    OUTSIDE = "outside"
    INSIDE = "inside"


def fence_tag(line: str) -> str | None:
    """Return the language tag of a fence line, ``""`` for a bare fence, None otherwise.

    Only the first word of the info string counts (```` ```ts twoslash ```` → ``"ts"``).
    """
    if not line.startswith(FENCE_MARKER):
        return None
    info: list[str] = line[len(FENCE_MARKER) :].split()
    return info[0] if info else ""


@dataclass(frozen=True)
class FenceMatcher:
    """Decide which lines open and close an annotated block.

    Attributes:
        policy (FencePolicy): Fence-matching policy.
        language_tags (tuple[str, ...]): Tags that open a block under `FencePolicy.TAGGED`.
    """

    policy: FencePolicy = FencePolicy.TAGGED
    language_tags: tuple[str, ...] = DEFAULT_LANGUAGE_TAGS

    def opens(self, line: str) -> bool:
        """Return True if ``line`` opens an annotated block (checked while OUTSIDE)."""
        tag: str | None = fence_tag(line)
        if tag is None:
            return False
        if self.policy is FencePolicy.ANY:
            return True
        return tag in self.language_tags

    def closes(self, line: str) -> bool:
        """Return True if ``line`` closes the current block (checked while INSIDE)."""
        tag: str | None = fence_tag(line)
        if tag is None:
            return False
        if self.policy is FencePolicy.ANY:
            return True
        return tag == ""


@dataclass
class DriverStats:
    """Per-run counters kept by the driver."""

    lines_read: int = 0
    blocks_annotated: int = 0
    blocks_failed: int = 0
    blocks_unterminated: int = 0

    @property
    def blocks_total(self) -> int:
        """Return the number of blocks the driver opened."""
        return self.blocks_annotated + self.blocks_failed + self.blocks_unterminated


@dataclass
class BlockDriver:
    """Streaming fence state machine.

    Attributes:
        annotator (Annotator): Renders each complete block.
        matcher (FenceMatcher): Fence detection policy.
        unterminated_policy (UnterminatedPolicy): Behavior at end of input inside a block.
        notices (NoticeLog): Collects block-scoped failures and warnings.
        stats (DriverStats): Counters for the current run.
    """

    annotator: Annotator
    matcher: FenceMatcher = field(default_factory=FenceMatcher)
    unterminated_policy: UnterminatedPolicy = UnterminatedPolicy.FLUSH
    notices: NoticeLog = field(default_factory=NoticeLog)
    stats: DriverStats = field(default_factory=DriverStats)

    @classmethod
    def from_config(cls, config: Config, annotator: Annotator) -> BlockDriver:
        """Build a driver using the fence and unterminated policies of ``config``."""
        return cls(
            annotator=annotator,
            matcher=FenceMatcher(policy=config.fence_policy, language_tags=config.language_tags),
            unterminated_policy=config.unterminated_policy,
        )

    def transform(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield the transformed document, one newline-terminated chunk at a time.

        Args:
            lines (Iterable[str]): Document lines, with or without their terminators.

        Yields:
            str: Passthrough lines, or a whole rendered block.

        Raises:
            UnterminatedBlockError: If input ends inside a block under the fatal policy.
        """
        state: FenceState = FenceState.OUTSIDE
        opening: str = ""
        opened_at: int = 0
        buffer: list[str] = []

        for number, raw in enumerate(lines, start=1):
            self.stats.lines_read = number
            line: str = raw.rstrip("\r\n")
            if state is FenceState.OUTSIDE:
                if self.matcher.opens(line):
                    logger.debug("Opened: %r", line, extra=block_extra(number))
                    state, opening, opened_at, buffer = FenceState.INSIDE, line, number, []
                else:
                    yield line + NEWLINE
                continue

            if not self.matcher.closes(line):
                buffer.append(line)
                continue

            logger.debug("Closed at line %d", number, extra=block_extra(opened_at))
            yield self._render_block(opening, buffer, line, opened_at) + NEWLINE
            state, buffer = FenceState.OUTSIDE, []

        if state is FenceState.INSIDE:
            yield from self._flush_unterminated(opening, buffer, opened_at)

    def _render_block(self, opening: str, buffer: list[str], closing: str, opened_at: int) -> str:
        content: str = "".join(line + NEWLINE for line in buffer)
        try:
            rendered: str = self.annotator.render(content)
        except AnalyzerError as e:
            logger.warning("Analyzer failed: %s", e, extra=block_extra(opened_at))
            self.notices.add_error(f"Block at line {opened_at} left unannotated: {e}")
            self.stats.blocks_failed += 1
            return NEWLINE.join([opening, *buffer, closing])
        self.stats.blocks_annotated += 1
        return rendered

    def _flush_unterminated(
        self, opening: str, buffer: list[str], opened_at: int
    ) -> Iterator[str]:
        if self.unterminated_policy is UnterminatedPolicy.FATAL:
            raise UnterminatedBlockError(opened_at)
        logger.warning("Not closed; flushed unannotated", extra=block_extra(opened_at))
        self.notices.add_warning(
            f"Block at line {opened_at} is not closed; copied without annotations"
        )
        self.stats.blocks_unterminated += 1
        for line in (opening, *buffer):
            yield line + NEWLINE
