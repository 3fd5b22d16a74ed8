"""
Base class for exploration strategies.

A strategy is stateless: it is identified by id/name/description, says
whether it applies to a directory via can_explore, and turns a directory
into one ExplorationResult via explore.
"""

from pathlib import Path

from whatsnext.lib.config import ExplorationConfig
from whatsnext.lib.types import ExplorationResult, Finding


class ExplorationStrategy:
    id: str = ""
    name: str = ""
    description: str = ""

    def can_explore(self, path: Path) -> bool:
        """Cheap applicability check. Default: any directory."""
        return path.is_dir()

    def explore(self, path: Path, config: ExplorationConfig) -> ExplorationResult:
        raise NotImplementedError

    def make_result(self, path: Path, findings: list[Finding], summary: str) -> ExplorationResult:
        return ExplorationResult(
            strategy_id=self.id,
            strategy_name=self.name,
            source_path=path,
            findings=findings,
            summary=summary,
        )


def relative_path(path: Path, root: Path) -> str:
    """Path of a file relative to the explored root, in POSIX form."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
