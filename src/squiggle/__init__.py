# topmark:header:start
#
#   project      : Squiggle
#   file         : __init__.py
#   file_relpath : src/squiggle/__init__.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Squiggle package.

Squiggle rewrites fenced code blocks in Markdown-like documents, annotating
each source line with ``//`` comments that underline compiler errors with
carets and show inline type-lookup (``^?``) results.
"""

from __future__ import annotations
