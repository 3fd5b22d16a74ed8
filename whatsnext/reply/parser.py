"""
Defensive parsing of task replies from the reasoning engine.

Replies may be wrapped in a CLI envelope ({"result": "..."}), fenced in
markdown, surrounded by prose, or loosely typed. Parsing runs as a chain
of stages; each stage either returns tasks or raises _StageFailed, and
the next stage only runs on failure:

1. unwrap the envelope, strip fences, cut out the {...} span
2. strict: object with a "tasks" array, validated against the reply schema
3. array: a bare JSON array of task items
4. lenient: any object with a "tasks" array; bad entries are skipped
"""

import json
import logging
from typing import Any, Optional

from whatsnext.lib.timeutil import utc_now
from whatsnext.lib.validate import ValidationError, load_schema, validate, validate_instance
from whatsnext.store.models import (
    ActionStep,
    GenerationLog,
    Priority,
    SourceInfo,
    SourceType,
    SuggestedTask,
)

logger = logging.getLogger(__name__)

REPLY_SCHEMA = "task_reply"
EXCERPT_LEN = 500


class ParsingFailed(Exception):
    """Every parsing stage failed."""

    def __init__(self, message: str, excerpt: str = ""):
        self.message = message
        self.excerpt = excerpt
        super().__init__(f"{message}: {excerpt!r}" if excerpt else message)


class _StageFailed(Exception):
    pass


def unwrap_envelope(text: str) -> str:
    """Return the "result" string of a CLI JSON wrapper, or text unchanged."""
    try:
        wrapper = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return text
    if isinstance(wrapper, dict) and isinstance(wrapper.get("result"), str):
        return wrapper["result"]
    return text


def strip_markdown_fences(text: str) -> str:
    """Remove a leading ```json or ``` and a trailing ``` if present."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[len("```json"):]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def extract_json_span(text: str) -> str:
    """Cut from the first "{" to the last "}". Without a "{", return text unchanged."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return text
    return text[start:end + 1]


def _array_span(text: str) -> Optional[str]:
    """Cut from the first "[" to the last "]", unless the text opens with an object."""
    start = text.find("[")
    end = text.rfind("]")
    brace = text.find("{")
    if start == -1 or end < start or (brace != -1 and brace < start):
        return None
    return text[start:end + 1]


def _prepare(raw: str) -> tuple[str, str]:
    """Run the text clean-up stages. Returns (cleaned text, JSON candidate)."""
    cleaned = strip_markdown_fences(unwrap_envelope(raw))
    return cleaned, extract_json_span(cleaned)


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise _StageFailed(f"invalid JSON: {e}") from None


class _TaskFactory:
    """Builds SuggestedTask objects with shared provenance."""

    def __init__(self, model_used: str, prompt_excerpt: str, source_names: list[str]):
        self.model_used = model_used
        self.prompt_excerpt = prompt_excerpt
        self.source_names = source_names

    def build(
        self,
        title: str,
        description: str,
        priority: Any,
        estimated_minutes: Optional[int],
        reasoning: Optional[str],
        steps: list[tuple[str, Optional[str]]],
        suggested_command: Optional[str],
        source_info: Optional[SourceInfo],
    ) -> SuggestedTask:
        now = utc_now()
        return SuggestedTask(
            title=title,
            description=description,
            priority=Priority.parse(priority),
            estimated_minutes=estimated_minutes,
            action_plan=[
                ActionStep(step_number=i, description=desc, command=cmd)
                for i, (desc, cmd) in enumerate(steps, start=1)
            ],
            suggested_command=suggested_command,
            source_info=source_info,
            created_at=now,
            updated_at=now,
            generation_log=GenerationLog(
                generated_at=now,
                source_names=list(self.source_names),
                reasoning=reasoning or "",
                model_used=self.model_used,
                prompt_excerpt=self.prompt_excerpt,
            ),
        )

    def from_typed_item(self, item: dict) -> SuggestedTask:
        """Map a schema-valid reply item."""
        minutes = item.get("estimatedMinutes")
        return self.build(
            title=item["title"],
            description=item["description"],
            priority=item["priority"],
            estimated_minutes=int(minutes) if minutes is not None else None,
            reasoning=item.get("reasoning"),
            steps=[(s["description"], s.get("command")) for s in item.get("actionPlan") or []],
            suggested_command=item.get("suggestedCommand"),
            source_info=_source_info(item),
        )

    def from_loose_item(self, item: Any) -> Optional[SuggestedTask]:
        """Map a loosely-typed reply item field by field. None if title or description is missing."""
        if not isinstance(item, dict):
            return None
        title = item.get("title")
        description = item.get("description")
        if not isinstance(title, str) or not isinstance(description, str):
            return None

        steps = []
        plan = item.get("actionPlan")
        if isinstance(plan, list):
            for step in plan:
                if isinstance(step, dict) and isinstance(step.get("description"), str):
                    command = step.get("command")
                    steps.append((step["description"], command if isinstance(command, str) else None))

        reasoning = item.get("reasoning")
        command = item.get("suggestedCommand")
        return self.build(
            title=title,
            description=description,
            priority=item.get("priority"),
            estimated_minutes=_loose_int(item.get("estimatedMinutes")),
            reasoning=reasoning if isinstance(reasoning, str) else None,
            steps=steps,
            suggested_command=command if isinstance(command, str) else None,
            source_info=_source_info(item),
        )


def _loose_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _source_info(item: dict) -> Optional[SourceInfo]:
    source_type = SourceType.parse(item.get("sourceType"))
    source_name = item.get("sourceName")
    if source_type is None or not isinstance(source_name, str):
        return None
    identifier = item.get("sourceIdentifier")
    file_path = item.get("filePath")
    line = item.get("lineNumber")
    return SourceInfo(
        source_type=source_type,
        source_name=source_name,
        source_identifier=identifier if isinstance(identifier, str) else None,
        file_path=file_path if isinstance(file_path, str) else None,
        line_number=_loose_int(line),
    )


def _parse_strict(candidate: str, factory: _TaskFactory) -> list[SuggestedTask]:
    data = _loads(candidate)
    try:
        validate(data, REPLY_SCHEMA)
    except ValidationError as e:
        raise _StageFailed(str(e)) from None
    return [factory.from_typed_item(item) for item in data["tasks"]]


def _parse_array(candidates: list[str], factory: _TaskFactory) -> list[SuggestedTask]:
    array_schema = {"type": "array", "items": load_schema(REPLY_SCHEMA)["$defs"]["task"]}
    for candidate in candidates:
        try:
            data = _loads(candidate)
            validate_instance(data, array_schema, REPLY_SCHEMA)
        except (_StageFailed, ValidationError):
            continue
        return [factory.from_typed_item(item) for item in data]
    raise _StageFailed("not an array of tasks")


def _parse_lenient(candidate: str, factory: _TaskFactory) -> list[SuggestedTask]:
    data = _loads(candidate)
    if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
        raise _StageFailed("no tasks array")

    tasks = []
    for i, item in enumerate(data["tasks"]):
        task = factory.from_loose_item(item)
        if task is None:
            logger.warning(f"Skipping task {i}: missing title or description")
            continue
        tasks.append(task)
    return tasks


def parse_tasks(
    raw: str,
    model_used: str = "",
    prompt_excerpt: str = "",
    source_names: Optional[list[str]] = None,
) -> list[SuggestedTask]:
    """Parse a raw reply into candidate tasks.

    Args:
        raw: Reply text, optionally enveloped, fenced, or wrapped in prose
        model_used: Recorded in each task's generation log
        prompt_excerpt: Recorded in each task's generation log
        source_names: Recorded in each task's generation log

    Raises:
        ParsingFailed: if no stage can recover a task list
    """
    factory = _TaskFactory(model_used, prompt_excerpt, source_names or [])
    cleaned, candidate = _prepare(raw)

    stages = [
        ("strict", lambda: _parse_strict(candidate, factory)),
        ("array", lambda: _parse_array([c for c in (candidate, _array_span(cleaned)) if c], factory)),
        ("lenient", lambda: _parse_lenient(candidate, factory)),
    ]
    for name, stage in stages:
        try:
            tasks = stage()
        except _StageFailed as e:
            logger.debug(f"Reply parse stage '{name}' failed: {e}")
            continue
        logger.debug(f"Reply parsed by '{name}' stage: {len(tasks)} task(s)")
        return tasks

    raise ParsingFailed("Could not parse response as tasks", raw[:EXCERPT_LEN])


def is_well_formed(raw: str) -> bool:
    """Lightweight check: the cleaned reply is a JSON object with a "tasks" key."""
    _, candidate = _prepare(raw)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return False
    return isinstance(data, dict) and "tasks" in data
