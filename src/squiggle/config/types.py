# topmark:header:start
#
#   project      : Squiggle
#   file         : types.py
#   file_relpath : src/squiggle/config/types.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Lightweight config types and aliases.

This module hosts stable, import-friendly definitions that other config modules
can depend on without risk of circular imports.

Exports:
    - `ArgsLike`: structural mapping type for CLI/API argument dicts.
    - `TomlTable`: parsed TOML table shape.
    - `FencePolicy`: which fence lines open and close an annotated block.
    - `UnterminatedPolicy`: what happens when input ends inside a block.
"""

from __future__ import annotations

# For runtime type checks, prefer collections.abc
from collections.abc import Mapping
from enum import Enum
from typing import Any

# ArgsLike: generic mapping accepted by config loaders (works for CLI namespaces and API dicts).
ArgsLike = Mapping[str, Any]

TomlTable = dict[str, Any]


class FencePolicy(str, Enum):
    """Fence-matching policies understood by the block driver.

    ANY: any line starting with the fence marker opens a block, whatever its
        language tag; any line starting with the fence marker closes it.
    TAGGED: only a fence tagged with one of the configured language tags opens
        a block; only a bare fence line closes it. Blocks in other languages
        pass through untouched.
    """

    ANY = "any"
    TAGGED = "tagged"

    @classmethod
    def from_name(cls, key_name: str | None) -> FencePolicy | None:
        """Find the FencePolicy member by its case-insensitive name.

        Args:
            key_name (str | None): The string name of the member (e.g., "any") or None.

        Returns:
            FencePolicy | None: The matching member or None if the key is None or unmatched.
        """
        if key_name is None:
            return None
        return cls.__members__.get(key_name.strip().upper())


class UnterminatedPolicy(str, Enum):
    """Policies for a document that ends inside a fenced block.

    FLUSH: write the buffered block unannotated and record a warning.
    FATAL: raise `UnterminatedBlockError`.
    """

    FLUSH = "flush"
    FATAL = "fatal"

    @classmethod
    def from_name(cls, key_name: str | None) -> UnterminatedPolicy | None:
        """Find the UnterminatedPolicy member by its case-insensitive name.

        Args:
            key_name (str | None): The string name of the member (e.g., "flush") or None.

        Returns:
            UnterminatedPolicy | None: The matching member or None if the key is None
                or unmatched.
        """
        if key_name is None:
            return None
        return cls.__members__.get(key_name.strip().upper())
