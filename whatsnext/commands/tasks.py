"""
whatsnext tasks / status / remove / clear - Inspect and update the task list.
"""

from pathlib import Path
from typing import Optional

from whatsnext.lib.config import AppConfig
from whatsnext.store import FeedbackStore, TaskStore, get_feedback_path, get_tasks_path
from whatsnext.store.models import SuggestedTask, TaskStatus

STATUS_LABELS = {
    TaskStatus.IN_PROGRESS: "in progress",
    TaskStatus.PENDING: "pending",
    TaskStatus.COMPLETED: "done",
    TaskStatus.DISMISSED: "dismissed",
}


def open_task_store(data_dir: Path) -> TaskStore:
    feedback = FeedbackStore(get_feedback_path(data_dir))
    return TaskStore(get_tasks_path(data_dir), feedback=feedback)


def resolve_task(store: TaskStore, id_prefix: str) -> Optional[SuggestedTask]:
    """Find a task by id or unique id prefix, printing an error if ambiguous."""
    matches = store.find(id_prefix)
    if not matches:
        print(f"ERROR: No task matching '{id_prefix}'")
        return None
    if len(matches) > 1:
        print(f"ERROR: '{id_prefix}' matches {len(matches)} tasks, use a longer prefix")
        return None
    return matches[0]


def cmd_tasks(args, data_dir: Path, app_config: AppConfig) -> int:
    """List tasks in display order."""
    store = open_task_store(data_dir)
    if not store.tasks:
        print("Tasks: none")
        return 0

    print("Tasks")
    print("-" * 60)
    for task in store.tasks:
        title = task.title[:40] + "..." if len(task.title) > 40 else task.title
        minutes = f" ~{task.estimated_minutes}m" if task.estimated_minutes else ""
        print(f"  {task.id[:8]}  {STATUS_LABELS[task.status]:<12} {task.priority.value:<7} {title}{minutes}")
    if store.last_refreshed:
        print()
        print(f"Last refreshed: {store.last_refreshed.isoformat(timespec='seconds')}")
    return 0


def cmd_status(args, data_dir: Path, app_config: AppConfig) -> int:
    """Set a task's lifecycle status."""
    store = open_task_store(data_dir)
    task = resolve_task(store, args.task_id)
    if task is None:
        return 1

    status = TaskStatus(args.status)
    if not store.set_status(task.id, status):
        print("ERROR: Failed to save tasks")
        return 1
    print(f"{task.title}: {STATUS_LABELS[status]}")
    return 0


def cmd_remove(args, data_dir: Path, app_config: AppConfig) -> int:
    store = open_task_store(data_dir)
    task = resolve_task(store, args.task_id)
    if task is None:
        return 1
    if not store.remove_task(task.id):
        print("ERROR: Failed to save tasks")
        return 1
    print(f"Removed: {task.title}")
    return 0


def cmd_clear(args, data_dir: Path, app_config: AppConfig) -> int:
    store = open_task_store(data_dir)
    if not store.clear_all():
        print("ERROR: Failed to save tasks")
        return 1
    print("Cleared all tasks.")
    return 0
