"""Recent-Changes strategy: files modified in the last day or week."""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from whatsnext.exploration.strategy import ExplorationStrategy, relative_path
from whatsnext.exploration.traversal import enumerate_files
from whatsnext.lib.config import ExplorationConfig
from whatsnext.lib.timeutil import format_time_ago
from whatsnext.lib.types import ExplorationResult, Finding, FindingKind, Severity

logger = logging.getLogger(__name__)

VERY_RECENT_SECONDS = 24 * 3600
RECENT_SECONDS = 7 * 24 * 3600
MAX_FINDINGS_PER_BUCKET = 10


class RecentChangesStrategy(ExplorationStrategy):
    id = "recent-changes"
    name = "Recent Changes"
    description = "Find files that were recently modified or created"

    def explore(self, path: Path, config: ExplorationConfig) -> ExplorationResult:
        # Over-collect: most files will fall outside both windows.
        files = enumerate_files(
            path,
            max_depth=config.max_depth,
            include_patterns=config.file_patterns,
            exclude_patterns=config.exclude_patterns,
            max_files=config.max_files_to_analyze * 2,
        )

        now = time.time()
        very_recent: list[tuple[Path, float]] = []
        recent: list[tuple[Path, float]] = []

        for file in files:
            try:
                mtime = file.stat().st_mtime
            except OSError as e:
                logger.debug(f"Skipping {file}: {e}")
                continue

            age = now - mtime
            if age <= VERY_RECENT_SECONDS:
                very_recent.append((file, mtime))
            elif age <= RECENT_SECONDS:
                recent.append((file, mtime))

        very_recent.sort(key=lambda item: item[1], reverse=True)
        recent.sort(key=lambda item: item[1], reverse=True)

        findings = []
        for file, mtime in very_recent[:MAX_FINDINGS_PER_BUCKET]:
            findings.append(self._finding(path, file, mtime, now, "Recently modified", Severity.INFO))
        for file, mtime in recent[:MAX_FINDINGS_PER_BUCKET]:
            findings.append(self._finding(path, file, mtime, now, "Modified this week", Severity.DEBUG))

        summary_parts = []
        if very_recent:
            summary_parts.append(f"{len(very_recent)} files modified in last 24h")
        if recent:
            summary_parts.append(f"{len(recent)} files modified this week")
        summary = ", ".join(summary_parts) if summary_parts else "No recent changes"

        return self.make_result(path, findings, summary)

    def _finding(self, root: Path, file: Path, mtime: float, now: float, label: str, severity: Severity) -> Finding:
        modified_at = datetime.fromtimestamp(mtime, tz=timezone.utc)
        return Finding(
            kind=FindingKind.RECENTLY_MODIFIED,
            title=f"{label}: {file.name}",
            description=f"Modified {format_time_ago(max(0.0, now - mtime))}",
            file_path=relative_path(file, root),
            severity=severity,
            metadata={"modified_at": modified_at.isoformat()},
        )
