# topmark:header:start
#
#   project      : Squiggle
#   file         : __init__.py
#   file_relpath : src/squiggle/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Squiggle configuration.

Submodules:
    * `squiggle.config.logging`: TRACE-aware logger and colored formatter.
    * `squiggle.config.types`: policy enums and type aliases.
    * `squiggle.config.io`: TOML loading and checked value getters.
    * `squiggle.config.model`: `AnalyzerOptions`, `Config` and `MutableConfig`.

This package initializer stays import-free: `squiggle.config.logging` is
imported by nearly every module and must not pull the config model in.
"""
