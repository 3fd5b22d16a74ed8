"""Git status operations."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from whatsnext.git.runner import run_git


@dataclass
class PorcelainStatus:
    """Working tree state bucketed from `git status --porcelain`.

    A file can land in more than one bucket (staged and then edited again).
    """
    modified: list[str] = field(default_factory=list)
    staged: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.modified or self.staged or self.untracked)


def parse_porcelain(output: str) -> PorcelainStatus:
    """Parse `git status --porcelain -z` output.

    Each entry is "XY path": X is the index state, Y the working tree
    state. "??" marks untracked files. Renames and copies carry the
    source path as an extra NUL-separated entry, which is skipped.
    """
    status = PorcelainStatus()
    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue

        index_state = entry[0]
        worktree_state = entry[1]
        path = entry[3:]

        if index_state in ("R", "C"):
            i += 1

        if entry.startswith("??"):
            status.untracked.append(path)
            continue

        if index_state not in (" ", "?"):
            status.staged.append(path)

        if worktree_state in ("M", "D"):
            status.modified.append(path)

    return status


def get_porcelain_status(worktree: Path) -> Optional[PorcelainStatus]:
    """Get bucketed working tree status, or None if git fails (e.g., not a repo)."""
    result = run_git(["status", "--porcelain", "-z"], worktree)
    if not result.success:
        return None
    return parse_porcelain(result.stdout)
