"""Git-Status strategy: uncommitted work and upstream divergence."""

from pathlib import Path

from whatsnext.exploration.errors import ExecutionFailed
from whatsnext.exploration.strategy import ExplorationStrategy
from whatsnext.git import (
    get_current_branch,
    get_divergence_count,
    get_porcelain_status,
    get_recent_commits,
    git_available,
)
from whatsnext.lib.config import ExplorationConfig
from whatsnext.lib.types import ExplorationResult, Finding, FindingKind, Severity

MAX_UNTRACKED_LISTED = 10


class GitStatusStrategy(ExplorationStrategy):
    id = "git-status"
    name = "Git Status"
    description = "Check for uncommitted changes, untracked files, and branch status"

    def can_explore(self, path: Path) -> bool:
        return (path / ".git").exists()

    def explore(self, path: Path, config: ExplorationConfig) -> ExplorationResult:
        if not git_available():
            raise ExecutionFailed("git executable not found")

        findings: list[Finding] = []
        summary_parts: list[str] = []

        branch = get_current_branch(path)
        if branch:
            summary_parts.append(f"Branch: {branch}")

            divergence = get_divergence_count(path, "@{upstream}", "HEAD")
            if divergence:
                behind, ahead = divergence
                if ahead > 0:
                    findings.append(Finding(
                        kind=FindingKind.GIT_AHEAD,
                        title="Commits ahead of remote",
                        description=f"{ahead} commit(s) not pushed to remote",
                        severity=Severity.WARNING,
                    ))
                    summary_parts.append(f"Ahead: {ahead}")
                if behind > 0:
                    findings.append(Finding(
                        kind=FindingKind.GIT_BEHIND,
                        title="Commits behind remote",
                        description=f"{behind} commit(s) behind remote",
                        severity=Severity.WARNING,
                    ))
                    summary_parts.append(f"Behind: {behind}")

        status = get_porcelain_status(path)
        if status is not None:
            if status.modified:
                findings.append(Finding(
                    kind=FindingKind.GIT_UNCOMMITTED,
                    title="Modified files",
                    description=f"Files with uncommitted changes: {', '.join(status.modified)}",
                    severity=Severity.WARNING,
                    metadata={"files": ",".join(status.modified)},
                ))
                summary_parts.append(f"Modified: {len(status.modified)}")

            if status.staged:
                findings.append(Finding(
                    kind=FindingKind.GIT_UNCOMMITTED,
                    title="Staged changes",
                    description=f"Staged but not committed: {', '.join(status.staged)}",
                    severity=Severity.INFO,
                    metadata={"files": ",".join(status.staged)},
                ))
                summary_parts.append(f"Staged: {len(status.staged)}")

            if status.untracked:
                listed = ", ".join(status.untracked[:MAX_UNTRACKED_LISTED])
                if len(status.untracked) > MAX_UNTRACKED_LISTED:
                    listed += "..."
                findings.append(Finding(
                    kind=FindingKind.GIT_UNTRACKED,
                    title="Untracked files",
                    description=f"New files not added to git: {listed}",
                    severity=Severity.INFO,
                    metadata={"count": str(len(status.untracked))},
                ))
                summary_parts.append(f"Untracked: {len(status.untracked)}")

        commits = get_recent_commits(path, limit=5)
        if commits:
            summary_parts.append(f"Recent commits: {len(commits)}")

        summary = " | ".join(summary_parts) if summary_parts else "Clean git repository"
        return self.make_result(path, findings, summary)
