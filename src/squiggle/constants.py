# topmark:header:start
#
#   project      : Squiggle
#   file         : constants.py
#   file_relpath : src/squiggle/constants.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Squiggle Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

SQUIGGLE_VERSION: str = get_version("squiggle")

#: Fence marker that opens and closes a code block.
FENCE_MARKER: str = "```"

#: Line-comment marker used for every annotation line.
COMMENT_MARKER: str = "//"

#: Marker rendered in front of an inline query result.
QUERY_MARKER: str = "^? - "

#: Character used to underline a diagnostic span.
CARET: str = "^"

#: Line terminator used when splitting and joining rendered text.
NEWLINE: str = "\n"

#: Language tag written on the opening fence of annotated blocks.
DEFAULT_LANGUAGE: str = "ts"

#: Fence tags that select a block for annotation under the tagged fence policy.
DEFAULT_LANGUAGE_TAGS: tuple[str, ...] = ("ts", "typescript")

#: File extension handed to the analyzer for the default language.
DEFAULT_EXTENSION: str = "ts"

DEFAULT_NODE_EXECUTABLE: str = "node"

#: Seconds allowed for one analyzer call (one fenced block).
DEFAULT_ANALYZER_TIMEOUT: float = 60.0

#: Dedicated config file name and the pyproject table that may hold the same keys.
CONFIG_FILE_NAME: str = "squiggle.toml"
PYPROJECT_FILE_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_TABLE: str = "squiggle"
