# topmark:header:start
#
#   project      : Squiggle
#   file         : model.py
#   file_relpath : src/squiggle/config/model.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `AnalyzerOptions`: the fixed, strict compiler options handed to the
      source analyzer for every block.
    - `Config`: an immutable runtime snapshot used by the driver and the
      annotator.
    - `MutableConfig`: a mutable builder used while merging defaults, config
      files and CLI overrides; it can be frozen into `Config` and thawed back.

Immutability:
    - `Config` stores tuples and is ``frozen=True`` to prevent accidental
      mutation at runtime. Use `Config.thaw` → edit → `MutableConfig.freeze`
      for safe updates.
    - `AnalyzerOptions` is constructed once and passed explicitly down to the
      analyzer; there is no process-wide compiler settings object.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

from squiggle.config.io import (
    get_float_value_or_none,
    get_string_list_or_none,
    get_string_value_or_none,
    load_config_table,
)
from squiggle.config.logging import get_logger
from squiggle.config.types import FencePolicy, UnterminatedPolicy
from squiggle.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_ANALYZER_TIMEOUT,
    DEFAULT_EXTENSION,
    DEFAULT_LANGUAGE,
    DEFAULT_LANGUAGE_TAGS,
    DEFAULT_NODE_EXECUTABLE,
    PYPROJECT_FILE_NAME,
)
from squiggle.core.errors import ConfigError
from squiggle.core.notices import Notice, NoticeLevel

if TYPE_CHECKING:
    from squiggle.config.logging import SquiggleLogger
    from squiggle.config.types import ArgsLike, TomlTable

logger: SquiggleLogger = get_logger(__name__)

#: Provenance label recorded for options given on the command line.
CLI_OVERRIDES_SOURCE: str = "<CLI overrides>"

#: Keys accepted in ``squiggle.toml`` / ``[tool.squiggle]``.
KNOWN_KEYS: frozenset[str] = frozenset(
    {
        "language",
        "language_tags",
        "extension",
        "fence_policy",
        "unterminated_policy",
        "node_executable",
        "analyzer_timeout",
    }
)


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True, slots=True)
class AnalyzerOptions:
    """Strict compiler options passed to the source analyzer.

    Values mirror the TypeScript compiler options of the same (camelCase)
    name. ``target=99`` is ``ESNext``, ``module=1`` is ``CommonJS`` and
    ``module_resolution=2`` is ``Node``.
    """

    target: int = 99
    module: int = 1
    module_resolution: int = 2
    strict: bool = True
    allow_unreachable_code: bool = False
    allow_unused_labels: bool = False
    no_fallthrough_cases_in_switch: bool = True
    no_implicit_any: bool = True
    no_implicit_override: bool = True
    no_implicit_returns: bool = True
    no_implicit_this: bool = True
    no_unused_locals: bool = True
    no_unused_parameters: bool = True
    strict_function_types: bool = True
    strict_null_checks: bool = True
    strict_property_initialization: bool = True
    use_unknown_in_catch_variables: bool = True
    resolve_json_module: bool = True
    declaration: bool = True
    declaration_map: bool = True
    import_helpers: bool = True
    no_emit_on_error: bool = True
    es_module_interop: bool = True
    force_consistent_casing_in_file_names: bool = True
    allow_synthetic_default_imports: bool = True
    experimental_decorators: bool = True
    emit_decorator_metadata: bool = True
    incremental: bool = False

    def to_compiler_options(self) -> dict[str, Any]:
        """Return the options as a camelCase compiler-options mapping (JSON-ready)."""
        return {_camel_case(f.name): getattr(self, f.name) for f in fields(self)}


#: The single analyzer configuration used for every block.
STRICT_ANALYZER_OPTIONS: AnalyzerOptions = AnalyzerOptions()


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration for Squiggle.

    Attributes:
        language (str): Language tag written on the opening fence of annotated blocks.
        language_tags (tuple[str, ...]): Fence tags selecting a block under `FencePolicy.TAGGED`.
        extension (str): File extension the analyzer assumes for block content.
        fence_policy (FencePolicy): Which fence lines open and close annotated blocks.
        unterminated_policy (UnterminatedPolicy): Behavior when input ends inside a block.
        node_executable (str): Node.js executable used by the twoslash analyzer.
        analyzer_timeout (float): Seconds allowed for one analyzer call.
        analyzer_options (AnalyzerOptions): Fixed compiler options for the analyzer.
        config_files (tuple[str, ...]): Config sources that contributed to this snapshot.
        notices (tuple[Notice, ...]): Warnings collected while loading configuration.
    """

    language: str
    language_tags: tuple[str, ...]
    extension: str
    fence_policy: FencePolicy
    unterminated_policy: UnterminatedPolicy
    node_executable: str
    analyzer_timeout: float
    analyzer_options: AnalyzerOptions
    config_files: tuple[str, ...]
    notices: tuple[Notice, ...]

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this frozen config."""
        return MutableConfig(
            language=self.language,
            language_tags=list(self.language_tags),
            extension=self.extension,
            fence_policy=self.fence_policy,
            unterminated_policy=self.unterminated_policy,
            node_executable=self.node_executable,
            analyzer_timeout=self.analyzer_timeout,
            config_files=list(self.config_files),
            notices=list(self.notices),
        )


# ------------------ Mutable builder ------------------


@dataclass
class MutableConfig:
    """Mutable configuration draft.

    Fields left at ``None`` inherit from the layer below during
    `merge_with`; `freeze` fills any remaining gaps with built-in defaults.
    """

    language: str | None = None
    language_tags: list[str] = field(default_factory=lambda: [])
    extension: str | None = None
    fence_policy: FencePolicy | None = None
    unterminated_policy: UnterminatedPolicy | None = None
    node_executable: str | None = None
    analyzer_timeout: float | None = None
    config_files: list[str] = field(default_factory=lambda: [])
    notices: list[Notice] = field(default_factory=lambda: [])

    # ---------------------------- Build/freeze ----------------------------
    def freeze(self) -> Config:
        """Freeze this mutable builder into an immutable Config."""
        language: str = self.language or DEFAULT_LANGUAGE
        tags: tuple[str, ...] = tuple(self.language_tags) or DEFAULT_LANGUAGE_TAGS
        if language not in tags:
            tags = (language, *tags)
        return Config(
            language=language,
            language_tags=tags,
            extension=self.extension or DEFAULT_EXTENSION,
            fence_policy=self.fence_policy or FencePolicy.TAGGED,
            unterminated_policy=self.unterminated_policy or UnterminatedPolicy.FLUSH,
            node_executable=self.node_executable or DEFAULT_NODE_EXECUTABLE,
            analyzer_timeout=self.analyzer_timeout or DEFAULT_ANALYZER_TIMEOUT,
            analyzer_options=STRICT_ANALYZER_OPTIONS,
            config_files=tuple(self.config_files),
            notices=tuple(self.notices),
        )

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a draft populated with the built-in defaults."""
        return cls(
            language=DEFAULT_LANGUAGE,
            language_tags=list(DEFAULT_LANGUAGE_TAGS),
            extension=DEFAULT_EXTENSION,
            fence_policy=FencePolicy.TAGGED,
            unterminated_policy=UnterminatedPolicy.FLUSH,
            node_executable=DEFAULT_NODE_EXECUTABLE,
            analyzer_timeout=DEFAULT_ANALYZER_TIMEOUT,
        )

    @classmethod
    def from_toml_dict(cls, data: TomlTable, *, source: str | None = None) -> MutableConfig:
        """Create a draft config from a parsed TOML table.

        Unknown keys are kept as warning notices rather than rejected, so a
        config written for a newer release still loads.

        Args:
            data (TomlTable): The Squiggle table.
            source (str | None): Label of the config source, for provenance and messages.

        Returns:
            MutableConfig: The resulting draft.

        Raises:
            ConfigError: If a known key has an invalid value.
        """
        label: str = source or "<config>"
        draft = cls()
        if source is not None:
            draft.config_files = [source]

        for key in sorted(set(data) - KNOWN_KEYS):
            draft.notices.append(
                Notice(NoticeLevel.WARNING, f"Unknown config key '{key}' in {label} (ignored)")
            )

        draft.language = get_string_value_or_none(data, "language")
        draft.language_tags = get_string_list_or_none(data, "language_tags") or []
        draft.extension = get_string_value_or_none(data, "extension")
        draft.node_executable = get_string_value_or_none(data, "node_executable")
        draft.analyzer_timeout = get_float_value_or_none(data, "analyzer_timeout")

        raw_fence: str | None = get_string_value_or_none(data, "fence_policy")
        draft.fence_policy = FencePolicy.from_name(raw_fence)
        if raw_fence is not None and draft.fence_policy is None:
            raise ConfigError(f"Invalid fence_policy '{raw_fence}' in {label}")

        raw_unterminated: str | None = get_string_value_or_none(data, "unterminated_policy")
        draft.unterminated_policy = UnterminatedPolicy.from_name(raw_unterminated)
        if raw_unterminated is not None and draft.unterminated_policy is None:
            raise ConfigError(f"Invalid unterminated_policy '{raw_unterminated}' in {label}")

        logger.trace("Draft config from %s: %s", label, draft)
        return draft

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig:
        """Load a draft from ``squiggle.toml`` or the ``[tool.squiggle]`` table of a pyproject."""
        logger.debug("Loading config from %s", path)
        return cls.from_toml_dict(load_config_table(path), source=str(path))

    @classmethod
    def discover_config_file(cls, start: Path) -> Path | None:
        """Return the nearest config file found walking up from ``start``.

        Within one directory ``squiggle.toml`` wins over a ``pyproject.toml``
        that carries a ``[tool.squiggle]`` table.
        """
        anchor: Path = start.resolve()
        if anchor.is_file():
            anchor = anchor.parent
        for directory in (anchor, *anchor.parents):
            candidate: Path = directory / CONFIG_FILE_NAME
            if candidate.is_file():
                return candidate
            pyproject: Path = directory / PYPROJECT_FILE_NAME
            if pyproject.is_file() and load_config_table(pyproject):
                return pyproject
        return None

    @classmethod
    def load_merged(
        cls,
        *,
        anchor: Path | None = None,
        config_file: Path | None = None,
        no_config: bool = False,
    ) -> MutableConfig:
        """Merge configuration layers into a draft.

        Merge order (lowest → highest precedence):
            1) Built-in defaults
            2) The config file given explicitly, or else the nearest one discovered
               upward from ``anchor`` (unless ``no_config``)

        CLI overrides are applied afterwards with `apply_cli_args`.
        """
        draft: MutableConfig = cls.from_defaults()
        if config_file is not None:
            return draft.merge_with(cls.from_toml_file(config_file))
        if no_config:
            return draft
        found: Path | None = cls.discover_config_file(anchor or Path.cwd())
        if found is not None:
            draft = draft.merge_with(cls.from_toml_file(found))
        return draft

    # ------------------------------- Merging -------------------------------
    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where values set in ``other`` override this draft."""
        return MutableConfig(
            language=other.language if other.language is not None else self.language,
            language_tags=other.language_tags or self.language_tags,
            extension=other.extension if other.extension is not None else self.extension,
            fence_policy=other.fence_policy
            if other.fence_policy is not None
            else self.fence_policy,
            unterminated_policy=other.unterminated_policy
            if other.unterminated_policy is not None
            else self.unterminated_policy,
            node_executable=other.node_executable
            if other.node_executable is not None
            else self.node_executable,
            analyzer_timeout=other.analyzer_timeout
            if other.analyzer_timeout is not None
            else self.analyzer_timeout,
            config_files=self.config_files + other.config_files,
            notices=self.notices + other.notices,
        )

    def apply_cli_args(self, args: ArgsLike) -> MutableConfig:
        """Update fields from an arguments mapping (CLI or API).

        Only keys present with a non-``None`` value override the draft.
        """
        logger.debug("Applying CLI arguments to MutableConfig: %s", args)
        fence_policy: FencePolicy | str | None = args.get("fence_policy")
        if fence_policy is not None:
            self.fence_policy = FencePolicy(fence_policy)
        unterminated: UnterminatedPolicy | str | None = args.get("unterminated_policy")
        if unterminated is not None:
            self.unterminated_policy = UnterminatedPolicy(unterminated)
        if args.get("node_executable") is not None:
            self.node_executable = str(args["node_executable"])
        if args.get("analyzer_timeout") is not None:
            self.analyzer_timeout = float(args["analyzer_timeout"])
        self.config_files.append(CLI_OVERRIDES_SOURCE)
        return self
