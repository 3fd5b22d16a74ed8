"""
Data models for suggested tasks and task feedback.

Persisted JSON uses the camelCase keys of the reply format, so a stored
task and a reply item read the same.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from whatsnext.lib.timeutil import from_iso, to_iso, utc_now
from whatsnext.lib.types import new_id


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def sort_order(self) -> int:
        return list(Priority).index(self)

    @classmethod
    def parse(cls, value) -> "Priority":
        """Map a loose priority string to a Priority, defaulting to MEDIUM."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.MEDIUM


class TaskStatus(Enum):
    """Lifecycle status. Declaration order is display order."""
    IN_PROGRESS = "in_progress"
    PENDING = "pending"
    COMPLETED = "completed"
    DISMISSED = "dismissed"

    @property
    def sort_order(self) -> int:
        return list(TaskStatus).index(self)

    @property
    def is_resolved(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.DISMISSED)


class TaskOutcome(Enum):
    COMPLETED = "completed"
    DISMISSED = "dismissed"


class SourceType(Enum):
    FOLDER = "folder"
    WEBSITE = "website"
    REMINDERS = "reminders"
    MAIL = "mail"

    @classmethod
    def parse(cls, value) -> Optional["SourceType"]:
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return None


@dataclass
class ActionStep:
    step_number: int
    description: str
    command: Optional[str] = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "stepNumber": self.step_number,
            "description": self.description,
            "command": self.command,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ActionStep":
        return cls(
            step_number=data["stepNumber"],
            description=data["description"],
            command=data.get("command"),
            id=data.get("id") or new_id(),
        )


@dataclass
class SourceInfo:
    """Where a task came from (a folder, a website, ...)."""
    source_type: SourceType
    source_name: str
    source_identifier: Optional[str] = None
    file_path: Optional[str] = None
    line_number: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "sourceType": self.source_type.value,
            "sourceName": self.source_name,
            "sourceIdentifier": self.source_identifier,
            "filePath": self.file_path,
            "lineNumber": self.line_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SourceInfo":
        return cls(
            source_type=SourceType(data["sourceType"]),
            source_name=data["sourceName"],
            source_identifier=data.get("sourceIdentifier"),
            file_path=data.get("filePath"),
            line_number=data.get("lineNumber"),
        )


@dataclass
class GenerationLog:
    """Provenance of a generated task."""
    generated_at: datetime = field(default_factory=utc_now)
    source_names: list[str] = field(default_factory=list)
    reasoning: str = ""
    model_used: str = ""
    prompt_excerpt: str = ""

    def to_dict(self) -> dict:
        return {
            "generatedAt": to_iso(self.generated_at),
            "sourceNames": list(self.source_names),
            "reasoning": self.reasoning,
            "modelUsed": self.model_used,
            "promptExcerpt": self.prompt_excerpt,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GenerationLog":
        return cls(
            generated_at=from_iso(data.get("generatedAt")) or utc_now(),
            source_names=list(data.get("sourceNames", [])),
            reasoning=data.get("reasoning", ""),
            model_used=data.get("modelUsed", ""),
            prompt_excerpt=data.get("promptExcerpt", ""),
        )


def normalize_title(title: str) -> str:
    """Merge identity of a task: lowercased, whitespace-trimmed title."""
    return title.strip().lower()


@dataclass
class SuggestedTask:
    """An actionable task, either generated or added by the user.

    Ids are not stable across refreshes; merges match on normalized_title.
    """
    title: str
    description: str
    priority: Priority = Priority.MEDIUM
    estimated_minutes: Optional[int] = None
    action_plan: list[ActionStep] = field(default_factory=list)
    suggested_command: Optional[str] = None
    source_info: Optional[SourceInfo] = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    generation_log: Optional[GenerationLog] = None
    id: str = field(default_factory=new_id)

    @property
    def normalized_title(self) -> str:
        return normalize_title(self.title)

    def display_key(self) -> tuple[int, int]:
        """Sort key: status display order, then priority."""
        return (self.status.sort_order, self.priority.sort_order)

    def to_feedback_record(self, outcome: TaskOutcome) -> Optional["FeedbackRecord"]:
        """Snapshot this task as a feedback record. None without source info."""
        if self.source_info is None:
            return None
        return FeedbackRecord(
            task_title=self.title,
            task_description=self.description,
            source_type=self.source_info.source_type,
            source_name=self.source_info.source_name,
            source_identifier=self.source_info.source_identifier,
            outcome=outcome,
            priority=self.priority,
            created_at=self.created_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "estimatedMinutes": self.estimated_minutes,
            "actionPlan": [s.to_dict() for s in self.action_plan],
            "suggestedCommand": self.suggested_command,
            "sourceInfo": self.source_info.to_dict() if self.source_info else None,
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
            "generationLog": self.generation_log.to_dict() if self.generation_log else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SuggestedTask":
        created_at = from_iso(data.get("createdAt")) or utc_now()
        source_info = data.get("sourceInfo")
        generation_log = data.get("generationLog")
        return cls(
            id=data["id"],
            title=data["title"],
            description=data["description"],
            priority=Priority.parse(data.get("priority")),
            estimated_minutes=data.get("estimatedMinutes"),
            action_plan=[ActionStep.from_dict(s) for s in data.get("actionPlan", [])],
            suggested_command=data.get("suggestedCommand"),
            source_info=SourceInfo.from_dict(source_info) if source_info else None,
            status=TaskStatus(data.get("status", TaskStatus.PENDING.value)),
            created_at=created_at,
            updated_at=from_iso(data.get("updatedAt")) or created_at,
            generation_log=GenerationLog.from_dict(generation_log) if generation_log else None,
        )


@dataclass(frozen=True)
class FeedbackRecord:
    """Outcome of a task the user finished or dismissed."""
    task_title: str
    task_description: str
    source_type: SourceType
    source_name: str
    outcome: TaskOutcome
    priority: Priority
    created_at: datetime
    resolved_at: datetime = field(default_factory=utc_now)
    source_identifier: Optional[str] = None
    id: str = field(default_factory=new_id)

    @property
    def source_key(self) -> tuple[str, str]:
        return (self.source_type.value, self.source_name)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "taskTitle": self.task_title,
            "taskDescription": self.task_description,
            "sourceType": self.source_type.value,
            "sourceName": self.source_name,
            "sourceIdentifier": self.source_identifier,
            "outcome": self.outcome.value,
            "priority": self.priority.value,
            "createdAt": to_iso(self.created_at),
            "resolvedAt": to_iso(self.resolved_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FeedbackRecord":
        return cls(
            id=data["id"],
            task_title=data["taskTitle"],
            task_description=data["taskDescription"],
            source_type=SourceType(data["sourceType"]),
            source_name=data["sourceName"],
            source_identifier=data.get("sourceIdentifier"),
            outcome=TaskOutcome(data["outcome"]),
            priority=Priority.parse(data.get("priority")),
            created_at=from_iso(data["createdAt"]),
            resolved_at=from_iso(data["resolvedAt"]),
        )
