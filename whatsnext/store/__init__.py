"""Persisted task collection and feedback history."""

from whatsnext.store.feedback import FeedbackStore, get_feedback_path
from whatsnext.store.tasks import TaskStore, get_tasks_path

__all__ = ["FeedbackStore", "TaskStore", "get_feedback_path", "get_tasks_path"]
