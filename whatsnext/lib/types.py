"""
Shared data types for exploration.

Findings and results are created once by a strategy and never mutated.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from whatsnext.lib.timeutil import to_iso, utc_now


def new_id() -> str:
    return str(uuid.uuid4())


class FindingKind(Enum):
    TODO = "todo"
    FIXME = "fixme"
    HACK = "hack"
    NOTE = "note"
    GIT_UNCOMMITTED = "git-uncommitted"
    GIT_UNTRACKED = "git-untracked"
    GIT_AHEAD = "git-ahead"
    GIT_BEHIND = "git-behind"
    RECENTLY_MODIFIED = "recently-modified"
    RECENTLY_CREATED = "recently-created"
    PROJECT_STRUCTURE = "project-structure"
    ENTRY_POINT = "entry-point"
    DEPENDENCY = "dependency"
    CONFIG_FILE = "config-file"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _KIND_DISPLAY_NAMES[self]


_KIND_DISPLAY_NAMES = {
    FindingKind.TODO: "TODO",
    FindingKind.FIXME: "FIXME",
    FindingKind.HACK: "HACK",
    FindingKind.NOTE: "NOTE",
    FindingKind.GIT_UNCOMMITTED: "Uncommitted Changes",
    FindingKind.GIT_UNTRACKED: "Untracked Files",
    FindingKind.GIT_AHEAD: "Ahead of Remote",
    FindingKind.GIT_BEHIND: "Behind Remote",
    FindingKind.RECENTLY_MODIFIED: "Recently Modified",
    FindingKind.RECENTLY_CREATED: "Recently Created",
    FindingKind.PROJECT_STRUCTURE: "Project Structure",
    FindingKind.ENTRY_POINT: "Entry Point",
    FindingKind.DEPENDENCY: "Dependency",
    FindingKind.CONFIG_FILE: "Config File",
    FindingKind.OTHER: "Other",
}


class Severity(Enum):
    """Finding severity. Lower sort_order is more severe."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"

    @property
    def sort_order(self) -> int:
        return list(Severity).index(self)


@dataclass(frozen=True)
class Finding:
    """One discrete observation made by a strategy."""
    kind: FindingKind
    title: str
    description: str
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    severity: Severity = Severity.INFO
    metadata: dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "severity": self.severity.value,
            "metadata": dict(self.metadata),
        }


PROMPT_SUMMARY_MAX_FINDINGS = 20


@dataclass(frozen=True)
class ExplorationResult:
    """Findings and summary from one strategy run over one root."""
    strategy_id: str
    strategy_name: str
    source_path: Path
    findings: list[Finding] = field(default_factory=list)
    summary: str = ""
    explored_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)

    def prompt_summary(self) -> str:
        """Plain-text rendering used when assembling the analysis prompt."""
        parts = [f"=== {self.strategy_name} ===", f"Path: {self.source_path}"]

        if self.summary:
            parts.append(f"Summary: {self.summary}")

        if self.findings:
            parts.append(f"Findings ({len(self.findings)}):")
            for finding in self.findings[:PROMPT_SUMMARY_MAX_FINDINGS]:
                line = f"  - [{finding.kind.display_name}] {finding.title}"
                if finding.file_path:
                    location = finding.file_path
                    if finding.line_number is not None:
                        location += f":{finding.line_number}"
                    line += f" ({location})"
                parts.append(line)
            extra = len(self.findings) - PROMPT_SUMMARY_MAX_FINDINGS
            if extra > 0:
                parts.append(f"  ... and {extra} more")

        return "\n".join(parts)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "strategy_id": self.strategy_id,
            "strategy_name": self.strategy_name,
            "source_path": str(self.source_path),
            "summary": self.summary,
            "explored_at": to_iso(self.explored_at),
            "findings": [f.to_dict() for f in self.findings],
        }
