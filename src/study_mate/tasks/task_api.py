# src/study_mate/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from .task_models import AssignmentTask, ExamTask, Priority, ReadingTask, Task, TaskKind
from .task_list import TaskList

logger = logging.getLogger(__name__)

DEFAULT_SUBJECTS = ("IT", "Math", "History", "Design")

_EXTRA_ATTR: dict[TaskKind, str] = {
    TaskKind.ASSIGNMENT: "submission_link",
    TaskKind.EXAM: "location",
    TaskKind.READING: "chapter_range",
}

_KIND_ALIASES: dict[str, TaskKind] = {
    "task": TaskKind.BASE,
    "base": TaskKind.BASE,
    "assignment": TaskKind.ASSIGNMENT,
    "exam": TaskKind.EXAM,
    "reading": TaskKind.READING,
}


def parse_kind(raw: str) -> TaskKind:
    s = (raw or "").strip()
    kind = _KIND_ALIASES.get(s.lower())
    if kind is not None:
        return kind
    return TaskKind(s)


def new_task(
    kind: TaskKind,
    *,
    title: str,
    subject: str,
    due_date: datetime,
    details: str = "",
    priority: Priority = Priority.MEDIUM,
    extra: str | None = None,
) -> Task:
    """
    Convenience factory used by presentation code.
    `extra` fills the variant field (link/location/chapters) and is ignored for base tasks.
    """
    common = dict(title=title, details=details, subject=subject, due_date=due_date, priority=priority)
    if kind is TaskKind.ASSIGNMENT:
        return AssignmentTask(**common, submission_link=extra)
    if kind is TaskKind.EXAM:
        return ExamTask(**common, location=extra)
    if kind is TaskKind.READING:
        return ReadingTask(**common, chapter_range=extra)
    return Task(**common)


def extra_value(task: Task) -> str | None:
    attr = _EXTRA_ATTR.get(task.kind)
    return getattr(task, attr) if attr else None


def sample_tasks(now: datetime | None = None) -> list[Task]:
    """Demo tasks for a fresh install, due over the next few days."""
    if now is None:
        now = datetime.now(UTC)
    day = timedelta(days=1)
    it, math, history, design = DEFAULT_SUBJECTS

    return [
        AssignmentTask(
            title="Submit Project Proposal",
            details="1-2 pages",
            subject=design,
            due_date=now + day,
            priority=Priority.HIGH,
        ),
        ExamTask(
            title="Algebra Midterm",
            details="Ch 1-5",
            subject=math,
            due_date=now + day * 3,
            priority=Priority.HIGH,
            location="Room 204",
        ),
        ReadingTask(
            title="Read Networking Basics",
            details="Take notes",
            subject=it,
            due_date=now + day * 2,
            priority=Priority.MEDIUM,
            chapter_range="Ch 2-3",
        ),
        ReadingTask(
            title="WWII Overview",
            details="Summary",
            subject=history,
            due_date=now + day * 4,
            priority=Priority.LOW,
            chapter_range="pp. 45-60",
        ),
    ]


def add_sample_tasks(task_list: TaskList, now: datetime | None = None) -> int:
    """Add the demo tasks through the normal add path. Returns how many were accepted."""
    if now is None:
        now = task_list.now()
    added = sum(1 for t in sample_tasks(now) if task_list.add(t))
    logger.info("Added %d sample tasks", added)
    return added
