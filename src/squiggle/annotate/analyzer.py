# topmark:header:start
#
#   project      : Squiggle
#   file         : analyzer.py
#   file_relpath : src/squiggle/annotate/analyzer.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Source analyzers: the pluggable capability that produces diagnostics and queries.

An analyzer takes the raw content of one fenced block plus the fixed
`AnalyzerOptions` and returns an `AnalysisResult`. The renderer never looks
behind this interface, so tests substitute a fake and other languages can
plug in their own checker.

`TwoslashAnalyzer` is the shipped implementation: it runs the
``@typescript/twoslash`` package under Node.js, exchanging JSON over
stdin/stdout with a small bridge script. Node and the package must be
installed (``npm install @typescript/twoslash typescript``) where ``node``
resolves modules from (the working directory or ``NODE_PATH``).
"""

from __future__ import annotations

import json

# Bandit: the command is a fixed argument list (no shell), see `_run_bridge`.
import subprocess  # nosec B404
from typing import TYPE_CHECKING, Any, Protocol, cast

from squiggle.annotate.model import AnalysisResult, Diagnostic, LineIndex, LineNumber, Query
from squiggle.config.logging import get_logger
from squiggle.constants import DEFAULT_ANALYZER_TIMEOUT, DEFAULT_EXTENSION, DEFAULT_NODE_EXECUTABLE
from squiggle.core.errors import AnalyzerError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from squiggle.config.logging import SquiggleLogger
    from squiggle.config.model import AnalyzerOptions, Config

logger: SquiggleLogger = get_logger(__name__)


class SourceAnalyzer(Protocol):
    """Structural interface for anything that can analyze one block of source."""

    def analyze(self, source: str, options: AnalyzerOptions) -> AnalysisResult:
        """Analyze ``source`` under ``options``.

        Implementations must be deterministic for a given input pair and raise
        `AnalyzerError` on failure.
        """
        ...


#: Node.js bridge: reads a JSON request on stdin, writes the twoslash result on stdout.
TWOSLASH_BRIDGE_JS: str = """\
const { twoslasher } = require("@typescript/twoslash");
let input = "";
process.stdin.setEncoding("utf8");
process.stdin.on("data", (chunk) => { input += chunk; });
process.stdin.on("end", () => {
  const request = JSON.parse(input);
  const ret = twoslasher(request.code, request.extension, {
    defaultCompilerOptions: request.options,
  });
  process.stdout.write(JSON.stringify({
    code: ret.code,
    errors: ret.errors.map((e) => ({
      line: e.line,
      character: e.character,
      length: e.length,
      renderedMessage: e.renderedMessage,
    })),
    queries: ret.queries.map((q) => ({ line: q.line, offset: q.offset, text: q.text })),
  }));
});
"""


def _optional_int(entry: Mapping[str, Any], key: str) -> int | None:
    value: Any = entry.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise AnalyzerError(f"Analyzer field '{key}' must be an integer, got {value!r}")
    return value


def _required_int(entry: Mapping[str, Any], key: str) -> int:
    value: int | None = _optional_int(entry, key)
    if value is None:
        raise AnalyzerError(f"Analyzer field '{key}' is missing")
    return value


def _optional_str(entry: Mapping[str, Any], key: str) -> str | None:
    value: Any = entry.get(key)
    if value is None or isinstance(value, str):
        return value
    raise AnalyzerError(f"Analyzer field '{key}' must be a string, got {value!r}")


def _entries(payload: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    raw: Any = payload.get(key, [])
    if not isinstance(raw, list) or not all(isinstance(e, dict) for e in cast("list[Any]", raw)):
        raise AnalyzerError(f"Analyzer field '{key}' must be a list of objects")
    return cast("list[Mapping[str, Any]]", raw)


def parse_analysis_payload(payload: Any) -> AnalysisResult:
    """Convert a decoded twoslash JSON payload into an `AnalysisResult`.

    Expected shape::

        {"code": str,
         "errors": [{"line", "character"?, "length"?, "renderedMessage"}],
         "queries": [{"line", "offset", "text"?}]}

    A diagnostic keeps its span only when both ``character`` and ``length``
    are present.

    Raises:
        AnalyzerError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, dict):
        raise AnalyzerError("Analyzer output must be a JSON object")
    data: Mapping[str, Any] = cast("Mapping[str, Any]", payload)
    code: Any = data.get("code")
    if not isinstance(code, str):
        raise AnalyzerError("Analyzer field 'code' must be a string")

    diagnostics: list[Diagnostic] = []
    for entry in _entries(data, "errors"):
        character: int | None = _optional_int(entry, "character")
        length: int | None = _optional_int(entry, "length")
        if character is None or length is None:
            character = length = None
        diagnostics.append(
            Diagnostic(
                line=LineIndex(_required_int(entry, "line")),
                message=_optional_str(entry, "renderedMessage") or "",
                character=character,
                length=length,
            )
        )

    queries: list[Query] = [
        Query(
            line=LineNumber(_required_int(entry, "line")),
            offset=_required_int(entry, "offset"),
            text=_optional_str(entry, "text"),
        )
        for entry in _entries(data, "queries")
    ]
    return AnalysisResult(code=code, diagnostics=tuple(diagnostics), queries=tuple(queries))


class TwoslashAnalyzer:
    """Analyzer backed by ``@typescript/twoslash`` running under Node.js.

    Args:
        node_executable (str): Node.js executable name or path.
        timeout (float): Seconds allowed per block before the call fails.
        extension (str): File extension twoslash assumes for the snippet.
    """

    def __init__(
        self,
        *,
        node_executable: str = DEFAULT_NODE_EXECUTABLE,
        timeout: float = DEFAULT_ANALYZER_TIMEOUT,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self.node_executable = node_executable
        self.timeout = timeout
        self.extension = extension

    @classmethod
    def from_config(cls, config: Config) -> TwoslashAnalyzer:
        """Build an analyzer from the runtime config."""
        return cls(
            node_executable=config.node_executable,
            timeout=config.analyzer_timeout,
            extension=config.extension,
        )

    def analyze(self, source: str, options: AnalyzerOptions) -> AnalysisResult:
        """Run twoslash on ``source`` and parse its result.

        Raises:
            AnalyzerError: If Node cannot run, exits non-zero, times out, or
                prints something other than the expected JSON.
        """
        request: str = json.dumps(
            {
                "code": source,
                "extension": self.extension,
                "options": options.to_compiler_options(),
            }
        )
        stdout: str = self._run_bridge(request)
        try:
            payload: Any = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise AnalyzerError(f"Analyzer returned invalid JSON: {e}") from e
        return parse_analysis_payload(payload)

    def _run_bridge(self, request: str) -> str:
        args: list[str] = [self.node_executable, "-e", TWOSLASH_BRIDGE_JS]
        logger.debug("Running twoslash bridge with %s (timeout %.1fs)", args[0], self.timeout)
        try:
            completed: subprocess.CompletedProcess[str] = subprocess.run(  # nosec B603
                args,
                input=request,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise AnalyzerError(f"Executable '{self.node_executable}' was not found") from e
        except subprocess.TimeoutExpired as e:
            raise AnalyzerError(f"Analyzer timed out after {self.timeout:.1f}s") from e
        except OSError as e:
            raise AnalyzerError(f"Cannot run '{self.node_executable}': {e}") from e

        if completed.returncode != 0:
            stderr: str = (completed.stderr or "").strip()
            raise AnalyzerError(
                f"Analyzer exited with status {completed.returncode}: {stderr or '<no stderr>'}"
            )
        logger.trace("Analyzer output: %s", completed.stdout)
        return completed.stdout
