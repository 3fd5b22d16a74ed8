"""
Glob-style name matching for include and exclude patterns.

Pattern language:
- "*" matches everything
- "*.ext" matches by ".ext" suffix
- "prefix.*" matches by prefix
- any other pattern containing "*" is an anchored wildcard glob
- anything else must match exactly
"""

import re
from pathlib import Path


def matches(name: str, pattern: str) -> bool:
    """Check whether a file name matches a single pattern."""
    if pattern == "*":
        return True

    if pattern.startswith("*."):
        return name.endswith(pattern[1:])

    if pattern.endswith(".*"):
        return name.startswith(pattern[:-2])

    if "*" in pattern:
        regex = "^" + re.escape(pattern).replace(r"\*", ".*") + "$"
        return re.match(regex, name, re.DOTALL) is not None

    return name == pattern


def matches_any(name: str, patterns: list[str]) -> bool:
    """Check whether a file name matches any of the patterns."""
    return any(matches(name, p) for p in patterns)


def is_excluded(path: Path, exclude_patterns: list[str]) -> bool:
    """Check whether a path should be excluded.

    True when any path component equals a pattern verbatim, or when the
    leaf name matches a pattern under the glob rules above.
    """
    parts = path.parts
    for pattern in exclude_patterns:
        if pattern in parts:
            return True
        if matches(path.name, pattern):
            return True
    return False
