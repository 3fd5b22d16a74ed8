"""
whatsnext explore / strategies - Run exploration strategies over folders.
"""

import json
import sys
from dataclasses import replace
from pathlib import Path

from whatsnext.exploration import ExplorationEngine, NotADirectory, build_default_registry
from whatsnext.lib.config import AppConfig, ExplorationConfig


def resolve_exploration_config(path: Path, app_config: AppConfig) -> ExplorationConfig:
    """Per-folder config when path is a configured folder, else the global default."""
    resolved = path.expanduser().resolve()
    for folder in app_config.folders:
        if folder.path.expanduser().resolve() == resolved:
            return folder.exploration
    return app_config.exploration


def cmd_explore(args, data_dir: Path, app_config: AppConfig) -> int:
    """Explore one path, or every enabled configured folder."""
    engine = ExplorationEngine(build_default_registry())

    if args.path:
        targets = [(Path(args.path), resolve_exploration_config(Path(args.path), app_config))]
    else:
        targets = [(f.path, f.exploration) for f in app_config.folders if f.enabled]
        if not targets:
            print("ERROR: No path given and no folders configured")
            return 2

    results = []
    failed = False
    for path, config in targets:
        if args.strategy:
            config = replace(config, enabled_strategies=args.strategy)
        try:
            results.extend(engine.explore(path, config))
        except NotADirectory as e:
            # With --json, stdout holds only the JSON document.
            print(f"ERROR: {e}", file=sys.stderr if args.json else sys.stdout)
            failed = True

    exit_code = 1 if failed else 0
    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
        return exit_code

    if not results:
        print("No findings.")
        return exit_code

    for result in results:
        print(result.prompt_summary())
        print()
    return exit_code


def cmd_strategies(args, data_dir: Path, app_config: AppConfig) -> int:
    """List registered strategies."""
    registry = build_default_registry()
    enabled = set(app_config.exploration.enabled_strategies)
    for strategy in registry.all():
        marker = "*" if strategy.id in enabled else " "
        print(f"{marker} {strategy.id:<20} {strategy.name:<20} {strategy.description}")
    return 0
