"""
whatsnext feedback - Show recent task outcomes.
"""

from pathlib import Path

from whatsnext.lib.config import AppConfig
from whatsnext.store import FeedbackStore, get_feedback_path


def cmd_feedback(args, data_dir: Path, app_config: AppConfig) -> int:
    store = FeedbackStore(get_feedback_path(data_dir))
    records = store.recent_records(within_days=args.days)
    if not records:
        print(f"Feedback: none in the last {args.days} days")
        return 0

    print(f"Feedback (last {args.days} days)")
    print("-" * 60)
    for record in records:
        when = record.resolved_at.date().isoformat()
        print(f"  {when}  {record.outcome.value:<10} [{record.source_type.value}: {record.source_name}] {record.task_title}")
    return 0
