"""TODO-Scanner strategy: actionable comment markers in source files."""

import logging
import re
from pathlib import Path

from whatsnext.exploration.strategy import ExplorationStrategy, relative_path
from whatsnext.exploration.traversal import enumerate_files
from whatsnext.lib.config import ExplorationConfig
from whatsnext.lib.types import ExplorationResult, Finding, FindingKind, Severity

logger = logging.getLogger(__name__)

# (keyword, kind, severity); matched case-insensitively as whole words
MARKERS = [
    ("TODO", FindingKind.TODO, Severity.INFO),
    ("FIXME", FindingKind.FIXME, Severity.WARNING),
    ("HACK", FindingKind.HACK, Severity.WARNING),
    ("XXX", FindingKind.HACK, Severity.WARNING),
    ("BUG", FindingKind.FIXME, Severity.CRITICAL),
    ("NOTE", FindingKind.NOTE, Severity.DEBUG),
    ("OPTIMIZE", FindingKind.TODO, Severity.INFO),
    ("REVIEW", FindingKind.TODO, Severity.INFO),
]

_MARKER_PATTERNS = [
    (re.compile(rf"\b{keyword}\b", re.IGNORECASE), keyword, kind, severity)
    for keyword, kind, severity in MARKERS
]

TITLE_MAX_LEN = 60


def extract_comment_text(line: str, match: re.Match) -> str:
    """Text following a marker, minus separators and trailing comment closers."""
    text = line[match.end():].strip(": -\t")
    star = text.find("*")
    if star != -1:
        text = text[:star]
    return text.strip()


def scan_text(content: str, file_path: str) -> list[Finding]:
    """Find marker comments in file content, one finding per marker per line."""
    findings = []
    for line_number, line in enumerate(content.splitlines(), start=1):
        for pattern, keyword, kind, severity in _MARKER_PATTERNS:
            match = pattern.search(line)
            if not match:
                continue
            text = extract_comment_text(line, match)
            title = text[:TITLE_MAX_LEN] + ("..." if len(text) > TITLE_MAX_LEN else "")
            findings.append(Finding(
                kind=kind,
                title=f"{keyword}: {title}",
                description=text,
                file_path=file_path,
                line_number=line_number,
                severity=severity,
            ))
    return findings


class TodoScannerStrategy(ExplorationStrategy):
    id = "todo-scanner"
    name = "TODO Scanner"
    description = "Find TODO, FIXME, HACK, and NOTE comments in code"

    def explore(self, path: Path, config: ExplorationConfig) -> ExplorationResult:
        files = enumerate_files(
            path,
            max_depth=config.max_depth,
            include_patterns=config.file_patterns,
            exclude_patterns=config.exclude_patterns,
            max_files=config.max_files_to_analyze,
        )

        findings: list[Finding] = []
        for file in files:
            try:
                content = file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug(f"Skipping {file}: {e}")
                continue
            findings.extend(scan_text(content, relative_path(file, path)))

        findings.sort(key=lambda f: (f.severity.sort_order, f.file_path or ""))

        counts: dict[str, int] = {}
        for finding in findings:
            name = finding.kind.display_name
            counts[name] = counts.get(name, 0) + 1
        summary = ", ".join(f"{name}: {n}" for name, n in counts.items()) or "No action items found"

        return self.make_result(path, findings, summary)
