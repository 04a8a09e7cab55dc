# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from study_mate.core.state import AppState
from study_mate.preferences import PreferencesStore
from study_mate.tasks.task_list import TaskList
from study_mate.tasks.task_store import InMemoryTaskStore

from .fakes import FixedClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="StudyMate",
        log_level="WARNING",
        log_to_file=False,
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.json",
        preferences_path=tmp_path / "preferences.json",
    )


@pytest.fixture()
def clock() -> FixedClock:
    """
    Late evening UTC, so +1h/+2h land on the next calendar day.
    TaskList fixtures use tz=UTC for the "today" calendar.
    """
    return FixedClock(datetime(2030, 1, 10, 23, 15, tzinfo=UTC))


@pytest.fixture()
def store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture()
def task_list(store: InMemoryTaskStore, clock: FixedClock) -> TaskList:
    return TaskList(store, clock=clock, tz=UTC)


@pytest.fixture()
def state(settings: SimpleNamespace, task_list: TaskList) -> AppState:
    """AppState wired with an in-memory task store and a real preferences file."""
    return AppState(
        settings=settings,
        task_list=task_list,
        preferences=PreferencesStore(settings.preferences_path),
    )
