# src/study_mate/tasks/validation.py

from __future__ import annotations

from datetime import UTC, datetime

from .errors import EmptyTitleError, PastDueDateError
from .task_models import Task


def validate(task: Task, now: datetime | None = None) -> None:
    """
    Check a task before it is added or updated.

    Raises EmptyTitleError for a blank (or whitespace-only) title, then
    PastDueDateError when the due date is strictly before `now`.
    """
    if not task.title.strip():
        raise EmptyTitleError()
    if task.is_overdue(now if now is not None else datetime.now(UTC)):
        raise PastDueDateError()
