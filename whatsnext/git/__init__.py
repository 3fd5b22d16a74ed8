"""Read-only git queries used by the Git-Status strategy.

Return type conventions:
- Functions returning GitResult: Caller must check .success before using output.
- Functions returning parsed values (str, list, tuple): Return None/empty on failure.
"""

from whatsnext.git.runner import GitResult, run_git, git_available
from whatsnext.git.status import PorcelainStatus, parse_porcelain, get_porcelain_status
from whatsnext.git.branch import get_current_branch, get_divergence_count, get_recent_commits

__all__ = [
    # runner
    "GitResult",
    "run_git",
    "git_available",
    # status
    "PorcelainStatus",
    "parse_porcelain",
    "get_porcelain_status",
    # branch
    "get_current_branch",
    "get_divergence_count",
    "get_recent_commits",
]
