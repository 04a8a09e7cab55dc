# tests/test_task_api.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from study_mate.tasks.task_api import (
    add_sample_tasks,
    extra_value,
    new_task,
    parse_kind,
    sample_tasks,
)
from study_mate.tasks.task_list import TaskList
from study_mate.tasks.task_models import AssignmentTask, ExamTask, Priority, ReadingTask, Task, TaskKind
from study_mate.tasks.task_store import InMemoryTaskStore

from .fakes import FixedClock

NOW = datetime(2030, 1, 10, 12, 0, tzinfo=UTC)


def test_sample_tasks_cover_the_variants() -> None:
    tasks = sample_tasks(NOW)

    assert [type(t) for t in tasks] == [AssignmentTask, ExamTask, ReadingTask, ReadingTask]
    assert {t.subject for t in tasks} == {"IT", "Math", "History", "Design"}
    assert all(t.due_date > NOW for t in tasks)
    exam = tasks[1]
    assert isinstance(exam, ExamTask)
    assert exam.location == "Room 204"
    assert exam.due_date == NOW + timedelta(days=3)


def test_add_sample_tasks_goes_through_task_list(store: InMemoryTaskStore, clock: FixedClock) -> None:
    tl = TaskList(store, clock=clock, tz=UTC)

    assert add_sample_tasks(tl, clock.now) == 4
    assert len(store.saved_tasks) == 4
    # Sorted by due date: +1d, +2d, +3d, +4d
    assert [t.title for t in tl.upcoming] == [
        "Submit Project Proposal",
        "Read Networking Basics",
        "Algebra Midterm",
        "WWII Overview",
    ]


@pytest.mark.parametrize(
    ("kind", "cls", "attr"),
    [
        (TaskKind.ASSIGNMENT, AssignmentTask, "submission_link"),
        (TaskKind.EXAM, ExamTask, "location"),
        (TaskKind.READING, ReadingTask, "chapter_range"),
    ],
)
def test_new_task_fills_variant_field(kind: TaskKind, cls: type, attr: str) -> None:
    task = new_task(kind, title="T", subject="IT", due_date=NOW, priority=Priority.HIGH, extra="x")

    assert type(task) is cls
    assert getattr(task, attr) == "x"
    assert extra_value(task) == "x"
    assert task.priority is Priority.HIGH


def test_new_base_task_ignores_extra() -> None:
    task = new_task(TaskKind.BASE, title="T", subject="IT", due_date=NOW, extra="ignored")
    assert type(task) is Task
    assert extra_value(task) is None


def test_parse_kind() -> None:
    assert parse_kind("exam") is TaskKind.EXAM
    assert parse_kind("Reading") is TaskKind.READING
    assert parse_kind("AssignmentTask") is TaskKind.ASSIGNMENT
    assert parse_kind("task") is TaskKind.BASE
    with pytest.raises(ValueError):
        parse_kind("lab")
