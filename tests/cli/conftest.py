# topmark:header:start
#
#   project      : Squiggle
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""CLI test helpers for running Squiggle with an injected analyzer.

`run_cli()` invokes the Click command with a fake `SourceAnalyzer` placed in
``ctx.obj``, so no Node.js process is started.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any

from click.testing import CliRunner, Result

from squiggle.cli.main import cli
from tests.conftest import FakeAnalyzer

if TYPE_CHECKING:
    from collections.abc import Sequence


def run_cli(
    argv: Sequence[str],
    *,
    analyzer: FakeAnalyzer | None = None,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI with a fake analyzer.

    Args:
        argv (Sequence[str]): CLI argument vector, e.g. ``["in.md", "out.md"]``.
        analyzer (FakeAnalyzer | None): Analyzer to inject; a pass-through fake by default.
        input_text (str | bytes | IO[Any] | None): Optional standard input, for ``-`` sources.

    Returns:
        Result: The `click.testing.Result` produced by `click.testing.CliRunner.invoke`.
    """
    runner = CliRunner()
    return runner.invoke(
        cli,
        list(argv),
        input=input_text,
        obj={"analyzer": analyzer if analyzer is not None else FakeAnalyzer()},
    )
