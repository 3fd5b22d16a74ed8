"""
Configuration loader for whatsnext.

Loads config.yaml from the data directory. If no config file exists,
returns defaults. Values of the wrong type fall back to the default for
that key with a warning.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "WHATSNEXT_HOME"
CONFIG_FILENAME = "config.yaml"

DEFAULT_ENABLED_STRATEGIES = ["git-status", "todo-scanner", "recent-changes"]
DEFAULT_FILE_PATTERNS = ["*.swift", "*.md", "*.txt", "*.json"]
DEFAULT_EXCLUDE_PATTERNS = [".git", "node_modules", "build", ".build", "DerivedData", "Pods"]


@dataclass
class ExplorationConfig:
    """Per-folder exploration settings."""
    enabled_strategies: list[str] = field(default_factory=lambda: list(DEFAULT_ENABLED_STRATEGIES))
    max_depth: int = 3
    file_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_FILE_PATTERNS))
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    max_files_to_analyze: int = 50
    timeout_seconds: float = 30  # <= 0 disables the deadline


@dataclass
class FolderSource:
    """A folder to explore on refresh."""
    name: str
    path: Path
    enabled: bool = True
    exploration: ExplorationConfig = field(default_factory=ExplorationConfig)


@dataclass
class AppConfig:
    exploration: ExplorationConfig = field(default_factory=ExplorationConfig)
    folders: list[FolderSource] = field(default_factory=list)


def default_data_dir() -> Path:
    """$WHATSNEXT_HOME if set, else ~/.whatsnext."""
    env = os.environ.get(DATA_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".whatsnext"


def _string_list(data: dict, key: str, default: list[str]) -> list[str]:
    value = data.get(key)
    if value is None:
        return list(default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        logger.warning(f"Config '{key}' must be a list of strings, using default")
        return list(default)
    return value


def _number(data: dict, key: str, default, kind=int):
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning(f"Config '{key}' must be a number, got {value!r}; using default")
        return default
    return kind(value)


def parse_exploration(data: Optional[dict], base: Optional[ExplorationConfig] = None) -> ExplorationConfig:
    """Build an ExplorationConfig from a mapping, filling gaps from base."""
    base = base or ExplorationConfig()
    if not data:
        return replace(base)
    if not isinstance(data, dict):
        logger.warning("Config 'exploration' must be a mapping, using defaults")
        return replace(base)

    return ExplorationConfig(
        enabled_strategies=_string_list(data, "enabled_strategies", base.enabled_strategies),
        max_depth=_number(data, "max_depth", base.max_depth),
        file_patterns=_string_list(data, "file_patterns", base.file_patterns),
        exclude_patterns=_string_list(data, "exclude_patterns", base.exclude_patterns),
        max_files_to_analyze=_number(data, "max_files_to_analyze", base.max_files_to_analyze),
        timeout_seconds=_number(data, "timeout_seconds", base.timeout_seconds, kind=float),
    )


def _parse_folders(items, exploration: ExplorationConfig) -> list[FolderSource]:
    if items is None:
        return []
    if not isinstance(items, list):
        logger.warning("Config 'folders' must be a list, ignoring")
        return []

    folders = []
    for i, item in enumerate(items):
        if not isinstance(item, dict) or not isinstance(item.get("path"), str):
            logger.warning(f"Skipping folder {i}: missing path")
            continue
        path = Path(item["path"]).expanduser()
        folders.append(FolderSource(
            name=str(item.get("name") or path.name),
            path=path,
            enabled=bool(item.get("enabled", True)),
            exploration=parse_exploration(item.get("exploration"), exploration),
        ))
    return folders


def load_config(config_path: Optional[Path]) -> AppConfig:
    """Load config.yaml and return AppConfig.

    If config_path is None or file doesn't exist, returns defaults.
    """
    if config_path is None or not config_path.exists():
        return AppConfig()

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load {config_path}: {e}")
        return AppConfig()

    if not isinstance(data, dict):
        logger.warning(f"{config_path} is not a mapping, using defaults")
        return AppConfig()

    exploration = parse_exploration(data.get("exploration"))
    return AppConfig(
        exploration=exploration,
        folders=_parse_folders(data.get("folders"), exploration),
    )
