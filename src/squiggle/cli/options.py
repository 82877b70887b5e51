# topmark:header:start
#
#   file         : options.py
#   file_relpath : src/squiggle/cli/options.py
#   project      : Squiggle
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Common CLI option utilities for the Click-based Squiggle command.

This module centralizes reusable options (verbosity, color, analyzer
settings) and their resolution logic, so the command itself can stay thin.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, ParamSpec, TypeVar

import click

from squiggle.cli.errors import SquiggleUsageError
from squiggle.config.logging import TRACE_LEVEL
from squiggle.config.types import FencePolicy

P = ParamSpec("P")
R = TypeVar("R")

#: Click context settings shared by the command.
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
}


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the program-output verbosity from ``-v``/``-q`` counts.

    Returns:
        A logging-style level: TRACE for ``-vvv``, DEBUG for ``-vv``, INFO for
        ``-v``, ERROR for ``-q``, WARNING otherwise.

    Raises:
        SquiggleUsageError: If both verbose and quiet flags are used simultaneously.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise SquiggleUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:  # -vvv
        return TRACE_LEVEL
    if verbose_count == 2:  # -vv
        return logging.DEBUG
    if verbose_count == 1:  # -v
        return logging.INFO
    if quiet_count >= 1:  # -q
        return logging.ERROR
    return logging.WARNING


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` counting options to a command."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity (print a run summary). Repeat for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress warnings about blocks that were left unannotated.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable colored output.",
    )(f)
    return f


def config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add configuration-file and policy override options to a command."""
    f = click.option(
        "--config",
        "config_file",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Read settings from this squiggle.toml or pyproject.toml instead of discovering one.",
    )(f)
    f = click.option(
        "--no-config",
        "no_config",
        is_flag=True,
        help="Do not discover a config file; use built-in defaults and CLI options only.",
    )(f)
    f = click.option(
        "--fence-policy",
        "fence_policy",
        type=click.Choice([p.value for p in FencePolicy], case_sensitive=False),
        default=None,
        help="Which fences open a block: 'tagged' (only ts/typescript, default) or 'any'.",
    )(f)
    f = click.option(
        "--strict-unterminated",
        "strict_unterminated",
        is_flag=True,
        help="Fail when the document ends inside a code block instead of copying it as-is.",
    )(f)
    return f


def analyzer_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add options controlling the twoslash analyzer subprocess."""
    f = click.option(
        "--node",
        "node_executable",
        default=None,
        help="Node.js executable used to run @typescript/twoslash.",
    )(f)
    f = click.option(
        "--timeout",
        "analyzer_timeout",
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Seconds allowed to analyze one code block.",
    )(f)
    return f
