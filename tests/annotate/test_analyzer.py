# topmark:header:start
#
#   project      : Squiggle
#   file         : test_analyzer.py
#   file_relpath : tests/annotate/test_analyzer.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Tests for the twoslash analyzer adapter.

The Node.js subprocess is never started: `subprocess.run` is replaced with a
stub that records the call and returns a canned `CompletedProcess`.
"""

from __future__ import annotations

import json
import subprocess
from typing import Any

import pytest

from squiggle.annotate import analyzer as analyzer_mod
from squiggle.annotate.analyzer import TwoslashAnalyzer, parse_analysis_payload
from squiggle.annotate.model import Diagnostic, LineIndex, LineNumber, Query
from squiggle.config.model import STRICT_ANALYZER_OPTIONS
from squiggle.core.errors import AnalyzerError
from tests.conftest import make_config, parametrize

PAYLOAD: dict[str, Any] = {
    "code": "let x: number = 'a';\n",
    "errors": [
        {"line": 0, "character": 16, "length": 3, "renderedMessage": "Type mismatch."},
        {"line": 0, "renderedMessage": "No position."},
    ],
    "queries": [{"line": 1, "offset": 4, "text": "let x: number"}],
}


class RunStub:
    """Stand-in for `subprocess.run` returning a fixed result or raising."""

    def __init__(
        self,
        *,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        exc: BaseException | None = None,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.exc = exc
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append((args, kwargs))
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, self.stderr)


def _install(monkeypatch: pytest.MonkeyPatch, stub: RunStub) -> RunStub:
    monkeypatch.setattr(analyzer_mod.subprocess, "run", stub)
    return stub


# --- payload parsing ---------------------------------------------------------


def test_parse_payload_builds_result() -> None:
    """Diagnostics keep analyzer order; imprecise positions have no span."""
    result = parse_analysis_payload(PAYLOAD)

    assert result.code == PAYLOAD["code"]
    assert result.diagnostics == (
        Diagnostic(line=LineIndex(0), message="Type mismatch.", character=16, length=3),
        Diagnostic(line=LineIndex(0), message="No position."),
    )
    assert result.queries == (Query(line=LineNumber(1), offset=4, text="let x: number"),)


def test_parse_payload_drops_half_span() -> None:
    """A character without a length does not count as a span."""
    result = parse_analysis_payload(
        {"code": "", "errors": [{"line": 0, "character": 2, "renderedMessage": "m"}]}
    )

    assert result.diagnostics[0].span is None
    assert result.diagnostics[0].character is None


def test_parse_payload_missing_lists_default_to_empty() -> None:
    """Only ``code`` is required."""
    result = parse_analysis_payload({"code": "x"})

    assert result.diagnostics == ()
    assert result.queries == ()


@parametrize(
    "payload",
    [
        [],
        {"errors": []},
        {"code": 1},
        {"code": "", "errors": {}},
        {"code": "", "errors": ["oops"]},
        {"code": "", "errors": [{"renderedMessage": "no line"}]},
        {"code": "", "errors": [{"line": True}]},
        {"code": "", "queries": [{"line": 1}]},
        {"code": "", "queries": [{"line": 1, "offset": 0, "text": 3}]},
    ],
)
def test_parse_payload_rejects_bad_shapes(payload: Any) -> None:
    """Unexpected payload shapes raise AnalyzerError."""
    with pytest.raises(AnalyzerError):
        parse_analysis_payload(payload)


# --- subprocess bridge -------------------------------------------------------


def test_analyze_sends_request_and_parses_response(monkeypatch: pytest.MonkeyPatch) -> None:
    """The request carries code, extension and camelCase compiler options."""
    stub = _install(monkeypatch, RunStub(stdout=json.dumps(PAYLOAD)))
    analyzer = TwoslashAnalyzer(node_executable="nodejs", timeout=5.0)

    result = analyzer.analyze("let x: number = 'a';\n", STRICT_ANALYZER_OPTIONS)

    assert len(result.diagnostics) == 2
    args, kwargs = stub.calls[0]
    assert args[:2] == ["nodejs", "-e"]
    assert kwargs["timeout"] == 5.0
    request = json.loads(kwargs["input"])
    assert request["code"] == "let x: number = 'a';\n"
    assert request["extension"] == "ts"
    assert request["options"]["noImplicitAny"] is True
    assert request["options"]["incremental"] is False


def test_from_config_uses_config_values() -> None:
    """Executable, timeout and extension come from the config."""
    analyzer = TwoslashAnalyzer.from_config(
        make_config(node_executable="/opt/node", analyzer_timeout=3.5, extension="tsx")
    )

    assert analyzer.node_executable == "/opt/node"
    assert analyzer.timeout == 3.5
    assert analyzer.extension == "tsx"


def test_nonzero_exit_reports_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    """A failing bridge surfaces its stderr in the error."""
    _install(monkeypatch, RunStub(returncode=1, stderr="Cannot find module '@typescript/twoslash'"))

    with pytest.raises(AnalyzerError, match="status 1: Cannot find module"):
        TwoslashAnalyzer().analyze("x", STRICT_ANALYZER_OPTIONS)


def test_missing_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    """FileNotFoundError from the OS becomes AnalyzerError."""
    _install(monkeypatch, RunStub(exc=FileNotFoundError("node")))

    with pytest.raises(AnalyzerError, match="'node' was not found"):
        TwoslashAnalyzer().analyze("x", STRICT_ANALYZER_OPTIONS)


def test_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """An analyzer call exceeding its timeout fails the block."""
    _install(monkeypatch, RunStub(exc=subprocess.TimeoutExpired(["node"], 2.0)))

    with pytest.raises(AnalyzerError, match="timed out after 2.0s"):
        TwoslashAnalyzer(timeout=2.0).analyze("x", STRICT_ANALYZER_OPTIONS)


def test_invalid_json(monkeypatch: pytest.MonkeyPatch) -> None:
    """Non-JSON output is an analyzer failure."""
    _install(monkeypatch, RunStub(stdout="not json"))

    with pytest.raises(AnalyzerError, match="invalid JSON"):
        TwoslashAnalyzer().analyze("x", STRICT_ANALYZER_OPTIONS)
