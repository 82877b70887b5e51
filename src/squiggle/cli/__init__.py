# topmark:header:start
#
#   project      : Squiggle
#   file         : __init__.py
#   file_relpath : src/squiggle/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Click command-line interface for Squiggle."""
