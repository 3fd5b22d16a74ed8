"""
whatsnext ingest - Parse a reasoning-engine reply and merge it into the task list.
"""

import sys
from pathlib import Path

from whatsnext.commands.tasks import open_task_store
from whatsnext.lib.config import AppConfig
from whatsnext.reply import ParsingFailed, parse_tasks


def cmd_ingest(args, data_dir: Path, app_config: AppConfig) -> int:
    """Read a reply from a file (or "-" for stdin) and merge the parsed tasks."""
    if args.file == "-":
        raw = sys.stdin.read()
    else:
        try:
            raw = Path(args.file).read_text(encoding="utf-8")
        except OSError as e:
            print(f"ERROR: Cannot read {args.file}: {e}")
            return 2

    try:
        candidates = parse_tasks(raw, model_used=args.model or "", source_names=args.source or [])
    except ParsingFailed as e:
        print(f"ERROR: {e.message}")
        if e.excerpt:
            print(f"  Response began: {e.excerpt[:200]!r}")
        return 1

    store = open_task_store(data_dir)
    if not store.merge_tasks(candidates):
        print("ERROR: Failed to save tasks")
        return 1

    print(f"Parsed {len(candidates)} task(s); {len(store.tasks)} task(s) in list.")
    return 0
