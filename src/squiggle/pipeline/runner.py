# topmark:header:start
#
#   project      : Squiggle
#   file         : runner.py
#   file_relpath : src/squiggle/pipeline/runner.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Run the block driver over documents held in strings, streams or files.

File output is written atomically: chunks stream into a temporary file next
to the destination, which replaces the destination only once the whole
document has been transformed. A fatal error therefore never leaves a
half-written destination behind.
"""

from __future__ import annotations

import io
import os
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from squiggle.annotate.analyzer import TwoslashAnalyzer
from squiggle.annotate.annotator import Annotator
from squiggle.config.logging import get_logger
from squiggle.config.model import CLI_OVERRIDES_SOURCE
from squiggle.config.types import UnterminatedPolicy
from squiggle.pipeline.driver import BlockDriver

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import TextIO

    from squiggle.annotate.analyzer import SourceAnalyzer
    from squiggle.config.logging import SquiggleLogger
    from squiggle.config.model import Config
    from squiggle.core.notices import NoticeLog
    from squiggle.pipeline.driver import DriverStats

logger: SquiggleLogger = get_logger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Outcome of transforming one document."""

    stats: DriverStats
    notices: NoticeLog


def build_driver(config: Config, analyzer: SourceAnalyzer | None = None) -> BlockDriver:
    """Return a driver wired to ``analyzer`` (the twoslash analyzer by default).

    Config-load notices are carried over into the driver's notice log, followed
    by an info notice per config file that contributed.
    """
    annotator = Annotator(
        analyzer if analyzer is not None else TwoslashAnalyzer.from_config(config),
        options=config.analyzer_options,
        language=config.language,
    )
    driver: BlockDriver = BlockDriver.from_config(config, annotator)
    driver.notices.extend(config.notices)
    for source in config.config_files:
        if source != CLI_OVERRIDES_SOURCE:
            driver.notices.add_info(f"Using configuration from {source}")
    return driver


def transform_stream(
    lines: Iterable[str],
    out: TextIO,
    config: Config,
    *,
    analyzer: SourceAnalyzer | None = None,
) -> RunResult:
    """Transform ``lines`` and write the result to ``out``.

    Chunks are written as they are produced, except under the fatal
    unterminated policy: there the document is held back until the whole
    input has been read, so a failing run writes nothing to ``out``.

    Raises:
        UnterminatedBlockError: Under the fatal unterminated policy.
    """
    driver: BlockDriver = build_driver(config, analyzer)
    if config.unterminated_policy is UnterminatedPolicy.FATAL:
        out.write("".join(driver.transform(lines)))
    else:
        for chunk in driver.transform(lines):
            out.write(chunk)
    logger.info(
        "Processed %d line(s): %d block(s) annotated, %d failed, %d unterminated",
        driver.stats.lines_read,
        driver.stats.blocks_annotated,
        driver.stats.blocks_failed,
        driver.stats.blocks_unterminated,
    )
    return RunResult(stats=driver.stats, notices=driver.notices)


def transform_text(
    text: str,
    config: Config,
    *,
    analyzer: SourceAnalyzer | None = None,
) -> tuple[str, RunResult]:
    """Transform a whole document held in memory.

    Every output line ends with a newline, including the last one.

    Returns:
        tuple[str, RunResult]: The transformed document and the run outcome.
    """
    driver: BlockDriver = build_driver(config, analyzer)
    result: str = "".join(driver.transform(io.StringIO(text)))
    return result, RunResult(stats=driver.stats, notices=driver.notices)


def transform_into_file(
    lines: Iterable[str],
    destination: Path,
    config: Config,
    *,
    analyzer: SourceAnalyzer | None = None,
) -> RunResult:
    """Transform ``lines`` into ``destination``, replacing it atomically.

    Raises:
        OSError: If the destination cannot be written.
        UnterminatedBlockError: Under the fatal unterminated policy; the
            destination is left untouched.
    """
    tmp_path: Path = sibling_tmp_path(destination)
    created: bool = False
    try:
        # Exclusive creation: the new file gets the umask-default mode.
        with tmp_path.open("x", encoding="utf-8", newline="") as tmp:
            created = True
            result: RunResult = transform_stream(lines, tmp, config, analyzer=analyzer)
        if destination.exists():
            shutil.copymode(destination, tmp_path)
        os.replace(tmp_path, destination)
        created = False
        logger.debug("Wrote %s", destination)
        return result
    finally:
        if created:
            safe_unlink(tmp_path)


def transform_file(
    source: Path,
    destination: Path,
    config: Config,
    *,
    analyzer: SourceAnalyzer | None = None,
) -> RunResult:
    """Transform the document at ``source`` into ``destination``.

    ``source`` and ``destination`` may be the same file.

    Raises:
        OSError: If the source cannot be read or the destination cannot be written.
        UnicodeDecodeError: If the source is not valid UTF-8.
        UnterminatedBlockError: Under the fatal unterminated policy.
    """
    with source.open("r", encoding="utf-8") as src:
        return transform_into_file(src, destination, config, analyzer=analyzer)


def sibling_tmp_path(destination: Path) -> Path:
    """Return a randomly named hidden path beside ``destination``."""
    return destination.resolve().parent / f".{destination.name}.{uuid.uuid4().hex[:12]}.tmp"


def safe_unlink(path: Path) -> None:
    """Attempt to delete a file; errors are logged and ignored."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error("Failed to delete %s: %s", path, e)
