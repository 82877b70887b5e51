# topmark:header:start
#
#   project      : Squiggle
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Pytest configuration for the Squiggle test suite.

This file sets up global fixtures, typed mark helpers and a fake source
analyzer, so no test depends on Node.js being installed.

Notes:
    Tests should respect the immutable/mutable configuration split:

    - Build configs using `squiggle.config.model.MutableConfig` (mutable),
      then `freeze()` into a `squiggle.config.model.Config`.
    - Do **not** mutate a frozen `Config`. If you need to tweak one,
      call `Config.thaw()`, edit the returned `MutableConfig`,
      then `freeze()` again.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from squiggle.annotate.model import AnalysisResult
from squiggle.config import logging
from squiggle.config.model import MutableConfig
from squiggle.core.errors import AnalyzerError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from squiggle.config.model import AnalyzerOptions, Config

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.pipeline`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_pipeline: DecoratorType[Any] = as_typed_mark(pytest.mark.pipeline)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


class FakeAnalyzer:
    """In-memory `SourceAnalyzer` used instead of the Node.js bridge.

    Sources found in ``results`` get the canned result; any other source is
    returned unchanged with no diagnostics. Sources listed in ``failing``
    raise `AnalyzerError`. Every call is recorded in ``calls``.

    Args:
        results (Mapping[str, AnalysisResult] | None): Canned results by exact source text.
        failing (set[str] | None): Sources for which analysis fails.
    """

    def __init__(
        self,
        results: Mapping[str, AnalysisResult] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.results: dict[str, AnalysisResult] = dict(results or {})
        self.failing: set[str] = set(failing or ())
        self.calls: list[tuple[str, AnalyzerOptions]] = []

    def analyze(self, source: str, options: AnalyzerOptions) -> AnalysisResult:
        """Return the canned result for ``source``."""
        self.calls.append((source, options))
        if source in self.failing:
            raise AnalyzerError("fake analyzer failure")
        return self.results.get(source, AnalysisResult(code=source))


@pytest.fixture
def fake_analyzer() -> FakeAnalyzer:
    """Return a pass-through fake analyzer (no diagnostics, no queries)."""
    return FakeAnalyzer()


@pytest.fixture(autouse=True)
def silence_squiggle_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure Squiggle's runtime log level is not forced via env during tests.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the log level to TRACE so failing tests show the full record trail."""
    logging.setup_logging(level=logging.TRACE_LEVEL)


def make_config(**overrides: Any) -> Config:
    """Return a frozen `Config` built from defaults and overrides.

    Args:
        **overrides (Any): Attribute overrides applied to the mutable builder before freezing.

    Returns:
        Config: An immutable configuration snapshot for use in tests.
    """
    m: MutableConfig = MutableConfig.from_defaults()
    for k, v in overrides.items():
        setattr(m, k, v)
    return m.freeze()
