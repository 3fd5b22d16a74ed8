"""Git branch operations."""

from pathlib import Path

from whatsnext.git.runner import run_git


def get_current_branch(worktree: Path) -> str | None:
    """Get the current branch name, or None if detached HEAD."""
    result = run_git(["branch", "--show-current"], worktree)
    if result.success:
        return result.stdout.strip() or None
    return None


def get_divergence_count(worktree: Path, ref1: str, ref2: str) -> tuple[int, int] | None:
    """
    Get how many commits ref1 and ref2 have diverged.

    Returns:
        Tuple of (commits_in_ref1_not_in_ref2, commits_in_ref2_not_in_ref1),
        or None on error (including when ref1 is "@{upstream}" and no
        upstream is configured).

    Example:
        get_divergence_count(repo, "@{upstream}", "HEAD")
        -> (3, 5) means HEAD is 3 behind and 5 ahead of its upstream
    """
    result = run_git(["rev-list", "--left-right", "--count", f"{ref1}...{ref2}"], worktree)
    if not result.success:
        return None
    parts = result.stdout.strip().split()
    if len(parts) != 2:
        return None
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError:
        return None


def get_recent_commits(worktree: Path, limit: int = 5) -> list[str]:
    """Get up to `limit` one-line commit summaries. Empty when there are no commits."""
    result = run_git(["log", "--oneline", f"-{limit}"], worktree, timeout=10)
    if not result.success:
        return []
    return [line for line in result.stdout.splitlines() if line.strip()]
