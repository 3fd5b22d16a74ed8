"""Built-in exploration strategies."""

from whatsnext.exploration.strategies.git_status import GitStatusStrategy
from whatsnext.exploration.strategies.project_structure import ProjectStructureStrategy
from whatsnext.exploration.strategies.recent_changes import RecentChangesStrategy
from whatsnext.exploration.strategies.todo_scanner import TodoScannerStrategy

BUILTIN_STRATEGIES = [
    GitStatusStrategy,
    TodoScannerStrategy,
    RecentChangesStrategy,
    ProjectStructureStrategy,
]

__all__ = [
    "BUILTIN_STRATEGIES",
    "GitStatusStrategy",
    "TodoScannerStrategy",
    "RecentChangesStrategy",
    "ProjectStructureStrategy",
]
