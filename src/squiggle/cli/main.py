# topmark:header:start
#
#   project      : Squiggle
#   file         : main.py
#   file_relpath : src/squiggle/cli/main.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""The ``squiggle`` command: annotate the fenced code blocks of a document.

Examples:
  Annotate a Markdown source into a new file:

    $ squiggle README.src.md README.md

  Filter from STDIN to STDOUT:

    $ cat notes.md | squiggle - -

Key ideas:
- Shared state (console, verbosity) is placed into ``ctx.obj``.
- Library errors are translated into CLI errors with dedicated exit codes.
- Tests may inject a source analyzer via ``obj={"analyzer": ...}``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from squiggle.cli.console import ClickConsole
from squiggle.cli.errors import (
    SquiggleConfigError,
    SquiggleEncodingError,
    SquiggleFileNotFoundError,
    SquiggleIOError,
    SquigglePermissionDeniedError,
    SquigglePipelineError,
)
from squiggle.cli.exit_codes import ExitCode
from squiggle.cli.options import (
    CONTEXT_SETTINGS,
    analyzer_options,
    common_verbose_options,
    config_options,
    resolve_verbosity,
)
from squiggle.config.logging import get_logger, resolve_env_log_level, setup_logging
from squiggle.config.model import MutableConfig
from squiggle.config.types import UnterminatedPolicy
from squiggle.constants import SQUIGGLE_VERSION
from squiggle.core.errors import ConfigError, UnterminatedBlockError
from squiggle.core.notices import NoticeLevel
from squiggle.pipeline.runner import transform_into_file, transform_stream

if TYPE_CHECKING:
    from collections.abc import Iterable

    from squiggle.annotate.analyzer import SourceAnalyzer
    from squiggle.cli.console_api import ConsoleLike
    from squiggle.config.model import Config
    from squiggle.core.notices import NoticeStats
    from squiggle.pipeline.driver import DriverStats
    from squiggle.pipeline.runner import RunResult

logger = get_logger(__name__)

STDIO_DASH = "-"


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    no_color: bool,
    to_stdout: bool,
) -> ConsoleLike:
    """Initialize shared state (verbosity, logging and console) on the Click context.

    When the document is written to stdout, program output is sent to stderr.
    """
    ctx.obj = ctx.obj if isinstance(ctx.obj, dict) else {}

    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env, color=not no_color)

    console = ClickConsole(
        enable_color=not no_color,
        out=sys.stderr if to_stdout else None,
    )
    ctx.obj["console"] = console
    return console


def build_config(
    *,
    anchor: Path | None,
    config_file: Path | None,
    no_config: bool,
    args: dict[str, Any],
) -> Config:
    """Merge defaults, the config file and CLI overrides into a frozen config."""
    try:
        draft: MutableConfig = MutableConfig.load_merged(
            anchor=anchor,
            config_file=config_file,
            no_config=no_config,
        )
    except ConfigError as e:
        raise SquiggleConfigError(str(e)) from e
    return draft.apply_cli_args(args).freeze()


def run_document(
    source: str,
    destination: str,
    config: Config,
    analyzer: SourceAnalyzer | None,
) -> RunResult:
    """Transform ``source`` into ``destination`` (either may be ``-``).

    Library and OS errors are mapped to CLI errors carrying exit codes.
    """
    try:
        if source == STDIO_DASH:
            stdin = click.get_text_stream("stdin")
            return _run_to_destination(stdin, destination, config, analyzer)
        with Path(source).open("r", encoding="utf-8") as src:
            return _run_to_destination(src, destination, config, analyzer)
    except UnterminatedBlockError as e:
        raise SquigglePipelineError(str(e)) from e
    except UnicodeDecodeError as e:
        raise SquiggleEncodingError(f"{source}: not valid UTF-8 ({e.reason})") from e
    except PermissionError as e:
        raise SquigglePermissionDeniedError(f"Permission denied: {e.filename}") from e
    except OSError as e:
        raise SquiggleIOError(f"I/O error: {e}") from e


def _run_to_destination(
    lines: Iterable[str],
    destination: str,
    config: Config,
    analyzer: SourceAnalyzer | None,
) -> RunResult:
    if destination == STDIO_DASH:
        return transform_stream(lines, click.get_text_stream("stdout"), config, analyzer=analyzer)
    return transform_into_file(lines, Path(destination), config, analyzer=analyzer)


def report(console: ConsoleLike, result: RunResult, *, verbosity_level: int) -> None:
    """Print run notices and, when verbose, a summary line.

    ``-q`` keeps only error notices; ``-v`` adds info notices and the summary.
    """
    for notice in result.notices:
        if notice.level is NoticeLevel.WARNING and verbosity_level > logging.WARNING:
            continue
        if notice.level is NoticeLevel.INFO and verbosity_level > logging.INFO:
            continue
        console.notice(notice)

    if verbosity_level <= logging.INFO:
        stats: DriverStats = result.stats
        counts: NoticeStats = result.notices.stats()
        console.summary(
            f"{stats.blocks_total} block(s): {stats.blocks_annotated} annotated, "
            f"{stats.blocks_failed} failed, {stats.blocks_unterminated} unterminated "
            f"({counts.n_error} error(s), {counts.n_warning} warning(s))"
        )


@click.command(
    name="squiggle",
    context_settings=CONTEXT_SETTINGS,
    help="Annotate fenced TypeScript blocks in SOURCE with compiler errors, writing DEST.",
    epilog="""\
SOURCE and DEST may be '-' for STDIN/STDOUT. DEST is replaced atomically.

Examples:

  squiggle README.src.md README.md

  cat notes.md | squiggle - -
""",
)
@click.argument("source", type=click.Path(dir_okay=False, allow_dash=True))
@click.argument("destination", type=click.Path(dir_okay=False, allow_dash=True))
@common_verbose_options
@config_options
@analyzer_options
@click.option(
    "--fail-on-error",
    "fail_on_error",
    is_flag=True,
    help="Exit with status 1 when any block could not be annotated.",
)
@click.version_option(SQUIGGLE_VERSION, "-V", "--version", prog_name="squiggle")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    source: str,
    destination: str,
    verbose: int,
    quiet: int,
    no_color: bool,
    config_file: Path | None,
    no_config: bool,
    fence_policy: str | None,
    strict_unterminated: bool,
    node_executable: str | None,
    analyzer_timeout: float | None,
    fail_on_error: bool,
) -> None:
    """Entry point for the Squiggle CLI."""
    console: ConsoleLike = init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        no_color=no_color,
        to_stdout=destination == STDIO_DASH,
    )

    if source != STDIO_DASH and not Path(source).is_file():
        raise SquiggleFileNotFoundError(f"Source not found: {source}")

    config: Config = build_config(
        anchor=Path(source) if source != STDIO_DASH else None,
        config_file=config_file,
        no_config=no_config,
        args={
            "fence_policy": fence_policy,
            "unterminated_policy": UnterminatedPolicy.FATAL if strict_unterminated else None,
            "node_executable": node_executable,
            "analyzer_timeout": analyzer_timeout,
        },
    )
    logger.debug("Effective config: %s", config)

    analyzer: SourceAnalyzer | None = ctx.obj.get("analyzer")
    result: RunResult = run_document(source, destination, config, analyzer)

    report(console, result, verbosity_level=ctx.obj["verbosity_level"])

    if fail_on_error and result.notices.has_error():
        ctx.exit(ExitCode.FAILURE)


if __name__ == "__main__":
    cli()
