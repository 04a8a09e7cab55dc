# src/study_mate/tasks/task_codec.py

"""
Polymorphic JSON codec for task lists.

JSON has no sum types, so each record carries a `typeIdentifier` string and
decoding dispatches on it through an explicit registry. A variant that is not
registered here cannot round-trip: it would come back as a plain Task.

Record shape:
    {
      "id": "<uuid>",
      "title": "...", "details": "...", "subject": "...",
      "dueDate": "2026-01-05T09:30:00Z",
      "priority": 0 | 1 | 2,
      "isCompleted": false,
      "typeIdentifier": "TaskBase" | "AssignmentTask" | "ExamTask" | "ReadingTask",
      "<extra>": "..."          # variant field, only when set
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from .errors import TaskDecodeError
from .task_models import AssignmentTask, ExamTask, Priority, ReadingTask, Task, TaskKind

logger = logging.getLogger(__name__)

TYPE_KEY = "typeIdentifier"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

TaskRecord = dict[str, Any]


@dataclass(frozen=True, slots=True)
class TaskType:
    cls: type[Task]
    # JSON key -> attribute name, for the variant-specific optional fields.
    extras: dict[str, str]


_REGISTRY: dict[str, TaskType] = {}


def register_task_type(cls: type[Task], extras: dict[str, str] | None = None) -> None:
    """Make a task class encodable/decodable under its `kind` tag."""
    _REGISTRY[str(cls.kind)] = TaskType(cls=cls, extras=dict(extras or {}))


def registered_kinds() -> list[str]:
    return list(_REGISTRY)


register_task_type(Task)
register_task_type(AssignmentTask, {"submissionLink": "submission_link"})
register_task_type(ExamTask, {"location": "location"})
register_task_type(ReadingTask, {"chapterRange": "chapter_range"})


# ---- timestamps ----


def format_timestamp(dt: datetime) -> str:
    """ISO-8601 in UTC, second precision (sub-second part is dropped)."""
    return dt.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(raw: str) -> datetime:
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


# ---- encoding ----


def encode_task(task: Task) -> TaskRecord:
    tag = str(task.kind)
    task_type = _REGISTRY.get(tag)
    if task_type is None or not isinstance(task, task_type.cls):
        raise TypeError(f"Task class {type(task).__name__} is not registered for {tag!r}")

    record: TaskRecord = {
        "id": str(task.id),
        "title": task.title,
        "details": task.details,
        "subject": task.subject,
        "dueDate": format_timestamp(task.due_date),
        "priority": int(task.priority),
        "isCompleted": bool(task.is_completed),
        TYPE_KEY: tag,
    }
    for key, attr in task_type.extras.items():
        value = getattr(task, attr)
        if value is not None:
            record[key] = value
    return record


def encode_tasks(tasks: Iterable[Task]) -> list[TaskRecord]:
    return [encode_task(t) for t in tasks]


def dumps(tasks: Iterable[Task]) -> str:
    return json.dumps(encode_tasks(tasks), ensure_ascii=False, indent=2, sort_keys=True)


# ---- decoding ----


def _require_str(record: TaskRecord, key: str) -> str:
    if key not in record:
        raise TaskDecodeError(f"missing required field {key!r}")
    value = record[key]
    if not isinstance(value, str):
        raise TaskDecodeError(f"field {key!r} must be a string")
    return value


def _optional_str(record: TaskRecord, key: str, default: str | None) -> str | None:
    value = record.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise TaskDecodeError(f"field {key!r} must be a string")
    return value


def _common_fields(record: TaskRecord) -> dict[str, Any]:
    raw_id = _require_str(record, "id")
    try:
        task_id = UUID(raw_id)
    except ValueError as e:
        raise TaskDecodeError(f"field 'id' is not a valid UUID: {raw_id!r}") from e

    raw_due = _require_str(record, "dueDate")
    try:
        due_date = parse_timestamp(raw_due)
    except ValueError as e:
        raise TaskDecodeError(f"field 'dueDate' is not an ISO-8601 timestamp: {raw_due!r}") from e

    if "priority" not in record:
        raise TaskDecodeError("missing required field 'priority'")
    raw_priority = record["priority"]
    # bool is an int subclass; true/false are not priorities.
    if not isinstance(raw_priority, int) or isinstance(raw_priority, bool):
        raise TaskDecodeError("field 'priority' must be an integer")
    try:
        priority = Priority(raw_priority)
    except ValueError as e:
        raise TaskDecodeError(f"unknown priority {raw_priority!r}") from e

    is_completed = record.get("isCompleted", False)
    if not isinstance(is_completed, bool):
        raise TaskDecodeError("field 'isCompleted' must be a boolean")

    return {
        "id": task_id,
        "title": _require_str(record, "title"),
        "details": _optional_str(record, "details", ""),
        "subject": _require_str(record, "subject"),
        "due_date": due_date,
        "priority": priority,
        "is_completed": is_completed,
    }


def decode_task(record: Any) -> Task:
    """
    Rebuild one task from its record.

    Unknown or missing type tags fall back to a base Task with the common
    fields only. Missing/malformed required fields raise TaskDecodeError.
    """
    if not isinstance(record, dict):
        raise TaskDecodeError("record must be a JSON object")

    tag = record.get(TYPE_KEY)
    task_type = _REGISTRY.get(tag) if isinstance(tag, str) else None
    if task_type is None:
        logger.warning("Unknown task type %r; decoding as %s", tag, TaskKind.BASE)
        task_type = _REGISTRY[str(TaskKind.BASE)]

    kwargs = _common_fields(record)
    for key, attr in task_type.extras.items():
        kwargs[attr] = _optional_str(record, key, None)
    return task_type.cls(**kwargs)


def decode_tasks(data: Any) -> list[Task]:
    """Decode a whole list. One bad record fails the call."""
    if not isinstance(data, list):
        raise TaskDecodeError("task document must be a JSON array")

    out: list[Task] = []
    for i, record in enumerate(data):
        try:
            out.append(decode_task(record))
        except TaskDecodeError as e:
            raise TaskDecodeError(e.reason, index=i) from e
    return out


def loads(text: str) -> list[Task]:
    return decode_tasks(json.loads(text))
