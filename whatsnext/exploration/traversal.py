"""
Bounded directory walk shared by the strategies.

Depth is the number of path segments between the root and an entry, so
files directly under the root are at depth 1.
"""

import logging
import os
from pathlib import Path

from whatsnext.lib.matching import is_excluded, matches_any

logger = logging.getLogger(__name__)


def _sorted_entries(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug(f"Skipping unreadable directory {directory}: {e}")
        return []


def enumerate_files(
    root: Path,
    max_depth: int,
    include_patterns: list[str],
    exclude_patterns: list[str],
    max_files: int,
) -> list[Path]:
    """
    Collect regular files under root in name order, a directory's files
    before its subdirectories.

    Hidden entries are skipped. A directory deeper than max_depth, or one
    matching an exclude pattern, is skipped with its whole subtree. Files
    are kept when their name matches an include pattern. The walk stops
    as soon as max_files files have been collected.

    Returns:
        Absolute file paths, at most max_files of them
    """
    files: list[Path] = []
    if max_files <= 0:
        return files

    # Stack of (directory, depth of its children); reversed so the
    # alphabetically first entry is visited first.
    stack: list[tuple[Path, int]] = [(root, 1)]
    while stack:
        directory, depth = stack.pop()
        subdirs: list[Path] = []

        for entry in _sorted_entries(directory):
            if entry.name.startswith("."):
                continue
            if depth > max_depth:
                continue

            path = Path(entry.path)
            if is_excluded(path.relative_to(root), exclude_patterns):
                continue

            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(path)
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
            except OSError:
                continue

            if matches_any(entry.name, include_patterns):
                files.append(path)
                if len(files) >= max_files:
                    return files

        for subdir in reversed(subdirs):
            stack.append((subdir, depth + 1))

    return files
