# topmark:header:start
#
#   project      : Squiggle
#   file         : __init__.py
#   file_relpath : src/squiggle/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Core primitives shared across Squiggle: library exceptions and run notices."""
