# topmark:header:start
#
#   project      : Squiggle
#   file         : __main__.py
#   file_relpath : src/squiggle/__main__.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Module entry point for running Squiggle via ``python -m squiggle``.

It delegates directly to `squiggle.cli.main.cli`, ensuring a single,
authoritative CLI entry point regardless of how Squiggle is launched.

Examples:
    Annotate a document::

        python -m squiggle README.src.md README.md
"""

from __future__ import annotations

from squiggle.cli.main import cli

if __name__ == "__main__":
    cli()
