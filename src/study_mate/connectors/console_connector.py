# src/study_mate/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_list import TaskList

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _greeting(state: AppState) -> str:
    app_name = str(getattr(state.settings, "app_name", "StudyMate"))
    name = state.preferences.user_name
    who = f", {name}" if name else ""
    return f"[{app_name}] Welcome back{who}! Type /help for commands, /exit to quit."


class _ErrorWatcher:
    """
    Print a task-list error once when it first appears.

    While `paused` (a command is running) errors are only recorded: the
    command reply already reports them.
    """

    def __init__(self, task_list: TaskList) -> None:
        self.last: str | None = task_list.last_error_message
        self.paused = False

    def __call__(self, task_list: TaskList) -> None:
        err = task_list.last_error_message
        if err and err != self.last and not self.paused:
            _print_ts(f"[!] {err}")
        self.last = err


def run_console_loop(state: AppState, input_fn: Callable[[str], str] = input) -> None:
    logger.info("Console connector started.")
    _print_ts(_greeting(state))

    if not state.preferences.has_completed_onboarding:
        _print_ts("Tip: tell me your name with /name <your name>, or try /samples.")

    startup_error = state.task_list.last_error_message
    if startup_error:
        _print_ts(f"[!] {startup_error} Use /reload to retry.")

    watcher = _ErrorWatcher(state.task_list)
    unsubscribe = state.task_list.subscribe(watcher)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        while True:
            try:
                user_input = input_fn(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            watcher.paused = True
            try:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."
            finally:
                watcher.paused = False

            if cmd_response is None:
                cmd_response = "Commands start with '/'. Type /help for the list."
            print(cmd_response)
    finally:
        unsubscribe()
