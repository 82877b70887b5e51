# topmark:header:start
#
#   project      : Squiggle
#   file         : __init__.py
#   file_relpath : src/squiggle/annotate/__init__.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Block annotation: analyzer contract, data model and the pure comment renderer.

Submodules:
    * `squiggle.annotate.model`: `Diagnostic`, `Query`, `AnalysisResult`.
    * `squiggle.annotate.analyzer`: `SourceAnalyzer` protocol and `TwoslashAnalyzer`.
    * `squiggle.annotate.render`: caret, message and query comment rendering.
    * `squiggle.annotate.annotator`: `Annotator`, tying analyzer and renderer together.
"""
