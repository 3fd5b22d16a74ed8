#!/usr/bin/env python3
"""whatsnext CLI entrypoint."""

import argparse
import logging
import sys
from pathlib import Path

from whatsnext.commands import explore as cmd_explore_module
from whatsnext.commands import feedback as cmd_feedback_module
from whatsnext.commands import ingest as cmd_ingest_module
from whatsnext.commands import tasks as cmd_tasks_module
from whatsnext.lib.config import CONFIG_FILENAME, default_data_dir, load_config
from whatsnext.store.models import TaskStatus


def get_data_dir(args) -> Path:
    """Data directory from --data-dir, else $WHATSNEXT_HOME or ~/.whatsnext."""
    if args.data_dir:
        return Path(args.data_dir).expanduser()
    return default_data_dir()


def run_command(handler, args) -> int:
    data_dir = get_data_dir(args)
    config_path = Path(args.config).expanduser() if args.config else data_dir / CONFIG_FILENAME
    if args.config and not config_path.exists():
        print(f"ERROR: Config file not found: {config_path}")
        return 2
    return handler(args, data_dir, load_config(config_path))


def main(argv=None):
    parser = argparse.ArgumentParser(prog='whatsnext', description='Suggested-task pipeline CLI')
    parser.add_argument('--data-dir', help='Directory holding tasks.json, feedback.json and config.yaml')
    parser.add_argument('--config', help='Config file (default: <data-dir>/config.yaml)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # whatsnext explore
    p_explore = subparsers.add_parser('explore', help='Run exploration strategies on a folder')
    p_explore.add_argument('path', nargs='?', help='Folder to explore (default: all configured folders)')
    p_explore.add_argument('--strategy', '-s', action='append', help='Strategy id to run (repeatable)')
    p_explore.add_argument('--json', action='store_true', help='Print results as JSON')
    p_explore.set_defaults(func=cmd_explore_module.cmd_explore)

    # whatsnext strategies
    p_strategies = subparsers.add_parser('strategies', help='List available strategies')
    p_strategies.set_defaults(func=cmd_explore_module.cmd_strategies)

    # whatsnext ingest
    p_ingest = subparsers.add_parser('ingest', help='Parse a reply and merge its tasks')
    p_ingest.add_argument('file', help='Reply file, or - for stdin')
    p_ingest.add_argument('--model', help='Model name recorded in task provenance')
    p_ingest.add_argument('--source', action='append', help='Source name recorded in task provenance (repeatable)')
    p_ingest.set_defaults(func=cmd_ingest_module.cmd_ingest)

    # whatsnext tasks
    p_tasks = subparsers.add_parser('tasks', help='List tasks')
    p_tasks.set_defaults(func=cmd_tasks_module.cmd_tasks)

    # whatsnext status
    p_status = subparsers.add_parser('status', help='Set task status')
    p_status.add_argument('task_id', help='Task id or unique id prefix')
    p_status.add_argument('status', choices=[s.value for s in TaskStatus], help='New status')
    p_status.set_defaults(func=cmd_tasks_module.cmd_status)

    # whatsnext remove
    p_remove = subparsers.add_parser('remove', help='Remove a task')
    p_remove.add_argument('task_id', help='Task id or unique id prefix')
    p_remove.set_defaults(func=cmd_tasks_module.cmd_remove)

    # whatsnext clear
    p_clear = subparsers.add_parser('clear', help='Remove all tasks')
    p_clear.set_defaults(func=cmd_tasks_module.cmd_clear)

    # whatsnext feedback
    p_feedback = subparsers.add_parser('feedback', help='Show recent task outcomes')
    p_feedback.add_argument('--days', type=int, default=30, help='Look-back window in days')
    p_feedback.set_defaults(func=cmd_feedback_module.cmd_feedback)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run_command(args.func, args)


if __name__ == '__main__':
    sys.exit(main())
