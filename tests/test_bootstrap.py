# tests/test_bootstrap.py

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest

from study_mate.cli.bootstrap import create_initial_state
from study_mate.connectors.console_connector import run_console_loop
from study_mate.core.state import AppState
from study_mate.tasks.task_models import ReadingTask, Task


def _feed(lines: list[str]):
    it: Iterator[str] = iter(lines)

    def input_fn(_prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return input_fn


def test_state_persists_across_restarts(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    task = ReadingTask(
        title="Chapter 4",
        subject="History",
        due_date=datetime.now(UTC) + timedelta(days=2),
        chapter_range="pp. 10-20",
    )
    assert state.task_list.add(task)
    state.preferences.save_user_name("Ada")

    restarted = create_initial_state(settings=settings)

    (loaded,) = restarted.task_list.tasks
    assert isinstance(loaded, ReadingTask)
    assert loaded.chapter_range == "pp. 10-20"
    assert loaded.id == task.id
    assert restarted.preferences.user_name == "Ada"
    assert settings.tasks_path.exists()


def test_corrupt_task_file_reports_error(settings: SimpleNamespace) -> None:
    settings.tasks_path.write_text('[{"typeIdentifier": "ExamTask"}]', "utf-8")

    state = create_initial_state(settings=settings)

    assert state.task_list.tasks == ()
    assert state.task_list.last_error_message == "Failed to load tasks."


def test_console_loop_runs_commands(state: AppState, capsys: pytest.CaptureFixture[str]) -> None:
    run_console_loop(state, input_fn=_feed(["/samples", "hello", "", "/status", "/exit", "/never"]))

    out = capsys.readouterr().out
    assert "Welcome back" in out
    assert "Added 4 sample tasks." in out
    assert "Commands start with '/'" in out
    assert "Tasks: 4" in out
    assert len(state.task_list.tasks) == 4


def test_console_loop_reports_command_error_once(state: AppState, capsys: pytest.CaptureFixture[str]) -> None:
    state.preferences.save_user_name("Ada")

    run_console_loop(state, input_fn=_feed(["/add task IT 2000-01-01 low Too late"]))

    out = capsys.readouterr().out
    assert "Welcome back, Ada!" in out
    assert "Error: Due date cannot be in the past." in out
    assert "[!]" not in out


def test_console_loop_prints_errors_raised_outside_commands(
    state: AppState, capsys: pytest.CaptureFixture[str]
) -> None:
    lines = iter(["/status"])

    def input_fn(_prompt: str) -> str:
        # Another component changes the list between prompts.
        state.task_list.add(Task(title="  ", subject="IT", due_date=state.task_list.now()))
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    run_console_loop(state, input_fn=input_fn)

    out = capsys.readouterr().out
    assert out.count("[!] Title cannot be empty.") == 1


def test_undecodable_task_file_reports_error(settings: SimpleNamespace) -> None:
    settings.tasks_path.write_bytes(b'[{"title": "\xff\xfe"}]')

    state = create_initial_state(settings=settings)

    assert state.task_list.tasks == ()
    assert state.task_list.last_error_message == "Failed to load tasks."
