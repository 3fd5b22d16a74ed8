"""
Task lifecycle store.

Holds the authoritative task list and persists it to
<data_dir>/tasks.json after every mutation:

  {"tasks": [...], "lastRefreshed": "<iso timestamp>" | null}

Tasks are matched across refreshes by normalized title, never by id.
All mutations are expected to run from a single owner; concurrent merges
are not supported.
"""

import logging
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from typing import Optional

from whatsnext.lib.fileio import atomic_write_json, read_json
from whatsnext.lib.timeutil import from_iso, to_iso, utc_now
from whatsnext.lib.validate import ValidationError, validate_before_write
from whatsnext.store.feedback import FeedbackStore
from whatsnext.store.models import SuggestedTask, TaskOutcome, TaskStatus

logger = logging.getLogger(__name__)

TASKS_FILENAME = "tasks.json"
RESOLVED_RETENTION_DAYS = 5

# Unmatched existing tasks in these states survive a merge.
RETAINED_STATUSES = (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.DISMISSED)


def get_tasks_path(data_dir: Path) -> Path:
    return data_dir / TASKS_FILENAME


def sort_tasks(tasks: list[SuggestedTask]) -> list[SuggestedTask]:
    """Display order: in progress, pending, completed, dismissed; then by priority."""
    return sorted(tasks, key=lambda t: t.display_key())


class TaskStore:
    def __init__(self, path: Path, feedback: Optional[FeedbackStore] = None):
        self.path = path
        self.feedback = feedback
        self._tasks: list[SuggestedTask] = []
        self.last_refreshed = None
        self._load()
        self.prune_old_tasks()

    @property
    def tasks(self) -> list[SuggestedTask]:
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[SuggestedTask]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def find(self, id_prefix: str) -> list[SuggestedTask]:
        """Tasks whose id starts with id_prefix."""
        return [t for t in self._tasks if t.id.startswith(id_prefix)]

    def merge_tasks(self, candidates: list[SuggestedTask]) -> bool:
        """Merge freshly parsed candidates into the collection.

        - candidates whose title was dismissed are dropped
        - a candidate matching an existing task refreshes its content but
          keeps the existing id, status, and creation time
        - other candidates are added as pending
        - unmatched existing tasks that are in progress, completed, or
          dismissed are kept; unmatched pending tasks are dropped

        Returns True if the merged collection was persisted.
        """
        now = utc_now()

        existing_by_title: dict[str, SuggestedTask] = {}
        for task in self._tasks:
            existing_by_title.setdefault(task.normalized_title, task)
        dismissed = {t.normalized_title for t in self._tasks if t.status == TaskStatus.DISMISSED}

        merged: list[SuggestedTask] = []
        seen: set[str] = set()
        matched_ids: set[str] = set()

        for candidate in candidates:
            key = candidate.normalized_title
            if key in dismissed or key in seen:
                continue
            seen.add(key)

            existing = existing_by_title.get(key)
            if existing is not None:
                merged.append(replace(
                    existing,
                    generation_log=candidate.generation_log or existing.generation_log,
                    description=candidate.description,
                    priority=candidate.priority,
                    estimated_minutes=candidate.estimated_minutes,
                    action_plan=list(candidate.action_plan),
                    suggested_command=candidate.suggested_command,
                    source_info=candidate.source_info,
                    updated_at=now,
                ))
                matched_ids.add(existing.id)
            else:
                merged.append(replace(candidate, status=TaskStatus.PENDING, updated_at=now))

        for task in self._tasks:
            if task.id in matched_ids or task.status not in RETAINED_STATUSES:
                continue
            if task.normalized_title in seen:
                continue
            seen.add(task.normalized_title)
            merged.append(task)

        return self._commit(sort_tasks(merged), now)

    def add_task(self, task: SuggestedTask) -> bool:
        return self._commit(sort_tasks(self._tasks + [task]))

    def set_status(self, task_id: str, status: TaskStatus) -> bool:
        """Set a task's status. Unknown ids are a no-op returning False.

        Moving a task with source info to completed or dismissed also
        records the outcome in the feedback store, when one is attached.
        """
        task = self.get(task_id)
        if task is None:
            return False

        previous = (task.status, task.updated_at)
        task.status = status
        task.updated_at = utc_now()
        if not self._commit(sort_tasks(self._tasks)):
            task.status, task.updated_at = previous
            return False

        if self.feedback is not None and status.is_resolved and previous[0] != status:
            record = task.to_feedback_record(TaskOutcome(status.value))
            if record is not None:
                self.feedback.record_outcome(record)
        return True

    def remove_task(self, task_id: str) -> bool:
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            return False
        return self._commit(remaining)

    def clear_all(self) -> bool:
        return self._commit([])

    def prune_old_tasks(self, retention_days: int = RESOLVED_RETENTION_DAYS) -> int:
        """Drop completed and dismissed tasks not updated within retention_days.

        Returns the number of tasks removed.
        """
        cutoff = utc_now() - timedelta(days=retention_days)
        kept = [t for t in self._tasks if not (t.status.is_resolved and t.updated_at < cutoff)]
        removed = len(self._tasks) - len(kept)
        if removed:
            logger.info(f"Pruned {removed} resolved task(s) older than {retention_days} days")
            self._commit(kept)
        return removed

    def _commit(self, tasks: list[SuggestedTask], refreshed_at=None) -> bool:
        """Persist tasks, then make them current. On failure nothing changes."""
        last_refreshed = refreshed_at or self.last_refreshed
        data = {
            "tasks": [t.to_dict() for t in tasks],
            "lastRefreshed": to_iso(last_refreshed),
        }
        try:
            validate_before_write(data, "tasks", self.path)
            atomic_write_json(self.path, data)
        except (OSError, ValidationError) as e:
            logger.error(f"Failed to save tasks: {e}")
            return False

        self._tasks = tasks
        self.last_refreshed = last_refreshed
        return True

    def _load(self) -> None:
        data = read_json(self.path)
        if data is None:
            return
        try:
            tasks = [SuggestedTask.from_dict(t) for t in data.get("tasks", [])]
            last_refreshed = from_iso(data.get("lastRefreshed"))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Failed to load tasks: {e}")
            return
        self._tasks = tasks
        self.last_refreshed = last_refreshed
