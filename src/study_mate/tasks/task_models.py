# src/study_mate/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import IntEnum, StrEnum
from typing import ClassVar
from uuid import UUID, uuid4


class Priority(IntEnum):
    """
    Task priority.

    The integer values are what gets persisted (0=low, 1=medium, 2=high),
    so they must never be renumbered.
    """

    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, raw: str) -> Priority:
        """Parse "low"/"medium"/"high" (or "l"/"m"/"h", or 0/1/2)."""
        s = (raw or "").strip().lower()
        for p in cls:
            if s in (p.label, p.label[0], str(p.value)):
                return p
        raise ValueError(f"Unknown priority: {raw!r}")


class TaskKind(StrEnum):
    """Type tags stored in the `typeIdentifier` field of every persisted task."""

    BASE = "TaskBase"
    ASSIGNMENT = "AssignmentTask"
    EXAM = "ExamTask"
    READING = "ReadingTask"


def _now() -> datetime:
    return datetime.now(UTC)


def _aware(dt: datetime) -> datetime:
    # Naive datetimes are taken as local wall-clock time.
    return dt if dt.tzinfo is not None else dt.astimezone()


@dataclass(slots=True, kw_only=True)
class Task:
    """
    A study task (the base variant).

    Construction never validates: an empty title or a past due date is a valid
    object. Business rules live in `validation.validate`, applied by TaskList.
    """

    kind: ClassVar[TaskKind] = TaskKind.BASE

    id: UUID = field(default_factory=uuid4)
    title: str
    details: str = ""
    subject: str
    due_date: datetime
    priority: Priority = Priority.MEDIUM
    is_completed: bool = False

    def __post_init__(self) -> None:
        # Field edits can put a naive value back later; readers apply _aware too.
        self.due_date = _aware(self.due_date)
        self.priority = Priority(self.priority)

    def is_overdue(self, now: datetime | None = None) -> bool:
        """True when the due date is strictly before `now`."""
        if now is None:
            now = _now()
        return _aware(self.due_date) < _aware(now)

    def mark_complete(self) -> None:
        self.is_completed = True


@dataclass(slots=True, kw_only=True)
class AssignmentTask(Task):
    kind: ClassVar[TaskKind] = TaskKind.ASSIGNMENT

    submission_link: str | None = None


@dataclass(slots=True, kw_only=True)
class ExamTask(Task):
    kind: ClassVar[TaskKind] = TaskKind.EXAM

    location: str | None = None


@dataclass(slots=True, kw_only=True)
class ReadingTask(Task):
    kind: ClassVar[TaskKind] = TaskKind.READING

    chapter_range: str | None = None


def sort_key(task: Task) -> tuple[datetime, int]:
    """
    Canonical ordering: due date ascending, then priority descending
    (high before medium before low on equal due dates).
    """
    return (_aware(task.due_date), -int(task.priority))


def sort_tasks(tasks: list[Task]) -> list[Task]:
    return sorted(tasks, key=sort_key)
