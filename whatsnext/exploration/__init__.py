"""Directory exploration: strategies, registry, and the concurrent engine."""

from whatsnext.exploration.engine import ExplorationEngine
from whatsnext.exploration.errors import (
    ExecutionFailed,
    ExplorationError,
    ExplorationTimeout,
    NotADirectory,
    PathNotFound,
    PermissionDenied,
)
from whatsnext.exploration.registry import StrategyRegistry, build_default_registry
from whatsnext.exploration.strategy import ExplorationStrategy
from whatsnext.exploration.traversal import enumerate_files

__all__ = [
    "ExplorationEngine",
    "ExplorationStrategy",
    "StrategyRegistry",
    "build_default_registry",
    "enumerate_files",
    "ExplorationError",
    "PathNotFound",
    "NotADirectory",
    "PermissionDenied",
    "ExplorationTimeout",
    "ExecutionFailed",
]
