"""Exploration error taxonomy."""

from dataclasses import dataclass


class ExplorationError(Exception):
    """Base class for exploration failures."""


@dataclass(eq=False)
class PathNotFound(ExplorationError):
    path: str

    def __str__(self):
        return f"Path not found: {self.path}"


@dataclass(eq=False)
class NotADirectory(ExplorationError):
    path: str

    def __str__(self):
        return f"Not a directory: {self.path}"


@dataclass(eq=False)
class PermissionDenied(ExplorationError):
    path: str

    def __str__(self):
        return f"Permission denied: {self.path}"


@dataclass(eq=False)
class ExplorationTimeout(ExplorationError):
    strategy_id: str
    seconds: float

    def __str__(self):
        return f"Exploration timed out: {self.strategy_id} after {self.seconds:g}s"


@dataclass(eq=False)
class ExecutionFailed(ExplorationError):
    message: str

    def __str__(self):
        return f"Execution failed: {self.message}"
