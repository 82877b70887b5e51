# topmark:header:start
#
#   project      : Squiggle
#   file         : io.py
#   file_relpath : src/squiggle/config/io.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Load TOML configuration sources and extract typed values.

Configuration is read from either a dedicated ``squiggle.toml`` file (keys at
the top level) or the ``[tool.squiggle]`` table of a ``pyproject.toml``.
Parsing is done with `tomlkit` and returned as plain `dict` structures.

Getters are *checked*: a value of the wrong type raises `ConfigError`, since a
half-applied configuration would silently change how documents are annotated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from squiggle.config.logging import get_logger
from squiggle.constants import PYPROJECT_FILE_NAME, PYPROJECT_TOOL_TABLE
from squiggle.core.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from squiggle.config.logging import SquiggleLogger
    from squiggle.config.types import TomlTable

logger: SquiggleLogger = get_logger(__name__)


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document (``squiggle.toml`` or ``pyproject.toml``).

    Returns:
        The parsed TOML content.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except TomlkitParseError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def load_config_table(path: Path) -> TomlTable:
    """Return the Squiggle table of a config file.

    For ``pyproject.toml`` this is the ``[tool.squiggle]`` table (empty when
    absent); for any other file the whole document is used.
    """
    data: TomlTable = load_toml_dict(path)
    if path.name != PYPROJECT_FILE_NAME:
        return data
    tool: Any = data.get("tool", {})
    table: Any = tool.get(PYPROJECT_TOOL_TABLE, {}) if isinstance(tool, dict) else {}
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.{PYPROJECT_TOOL_TABLE}] in {path} must be a table")
    if not table:
        logger.debug("No [tool.%s] table in %s", PYPROJECT_TOOL_TABLE, path)
    return cast("TomlTable", table)


def get_string_value_or_none(table: TomlTable, key: str) -> str | None:
    """Extract an optional string value from a TOML table.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.

    Returns:
        str | None: The string value, or ``None`` when absent.

    Raises:
        ConfigError: If the value is present but not a string.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")


def get_float_value_or_none(table: TomlTable, key: str) -> float | None:
    """Extract an optional positive number from a TOML table.

    Raises:
        ConfigError: If the value is present but not a positive number.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Config key '{key}' must be a number, got {type(value).__name__}")
    if value <= 0:
        raise ConfigError(f"Config key '{key}' must be positive, got {value}")
    return float(value)


def get_string_list_or_none(table: TomlTable, key: str) -> list[str] | None:
    """Extract an optional list of strings from a TOML table.

    Raises:
        ConfigError: If the value is present but not a list of strings.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, list) and all(isinstance(v, str) for v in cast("list[Any]", value)):
        return list(cast("list[str]", value))
    raise ConfigError(f"Config key '{key}' must be a list of strings")
