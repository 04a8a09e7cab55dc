# src/study_mate/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime, time
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import add_sample_tasks, extra_value, new_task, parse_kind
from ..tasks.task_models import Priority, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting / parsing helpers ----


def _fmt_due(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def format_task(position: int, task: Task) -> str:
    check = "x" if task.is_completed else " "
    extra = extra_value(task)
    extra_str = f" [{extra}]" if extra else ""
    return (
        f"{position}. [{check}] {task.title} "
        f"({task.subject}, {task.kind}, due {_fmt_due(task.due_date)}, {task.priority.label})"
        f"{extra_str}"
    )


def _render(state: AppState, title: str, tasks: list[Task]) -> list[str]:
    positions = {t.id: i for i, t in enumerate(state.task_list.tasks, start=1)}
    lines = [f"{title} ({len(tasks)}):"]
    if not tasks:
        lines.append("  (none)")
    for t in tasks:
        lines.append("  " + format_task(positions[t.id], t))
    return lines


def parse_due(raw: str) -> datetime:
    """
    Parse a local due date: "YYYY-MM-DD" (end of that day) or "YYYY-MM-DDTHH:MM".
    """
    dt = datetime.fromisoformat(raw)
    if len(raw) == 10:
        dt = datetime.combine(dt.date(), time(23, 59))
    return dt if dt.tzinfo is not None else dt.astimezone()


def _task_at(state: AppState, raw: str) -> Task | None:
    try:
        n = int(raw)
    except ValueError:
        return None
    tasks = state.task_list.tasks
    if 1 <= n <= len(tasks):
        return tasks[n - 1]
    return None


def _result(state: AppState, ok_text: str) -> str:
    err = state.task_list.last_error_message
    return f"Error: {err}" if err else ok_text


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list           -> overdue, today, upcoming
    /list all       -> every task (honours /subject filter)
    /list overdue | today | upcoming
    """
    tl = state.task_list
    which = args[0].lower() if args else ""

    if which == "all":
        subject = tl.selected_subject
        title = f"Tasks in {subject}" if subject else "All tasks"
        return "\n".join(_render(state, title, tl.filtered_by_subject))
    if which == "overdue":
        return "\n".join(_render(state, "Overdue", tl.overdue))
    if which == "today":
        return "\n".join(_render(state, "Due today", tl.due_today))
    if which == "upcoming":
        return "\n".join(_render(state, "Upcoming", tl.upcoming))
    if which:
        return "Usage: /list [all|overdue|today|upcoming]"

    lines: list[str] = []
    lines += _render(state, "Overdue", tl.overdue)
    lines += _render(state, "Due today", tl.due_today)
    lines += _render(state, "Upcoming", tl.upcoming)
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <kind> <subject> <due> <priority> <title...> [| extra]

    kind: task | assignment | exam | reading
    due:  YYYY-MM-DD or YYYY-MM-DDTHH:MM (local time)
    extra: submission link / location / chapter range
    """
    usage = (
        "Usage: /add <task|assignment|exam|reading> <subject> <YYYY-MM-DD[THH:MM]> "
        "<low|medium|high> <title> [| extra]"
    )
    if len(args) < 5:
        return usage

    try:
        kind = parse_kind(args[0])
        due = parse_due(args[2])
        priority = Priority.from_label(args[3])
    except ValueError as e:
        return f"{e}\n{usage}"

    title, _, extra = " ".join(args[4:]).partition("|")
    task = new_task(
        kind,
        title=title.strip(),
        subject=args[1],
        due_date=due,
        priority=priority,
        extra=extra.strip() or None,
    )
    if not state.task_list.add(task):
        return f"Error: {state.task_list.last_error_message}"
    return _result(state, f"Added: {task.title}")


def cmd_done(state: AppState, args: list[str]) -> str:
    task = _task_at(state, args[0]) if args else None
    if task is None:
        return "Usage: /done <n> (see /list all for numbers)"
    state.task_list.toggle_complete(task)
    status = "completed" if task.is_completed else "not completed"
    return _result(state, f"{task.title}: {status}")


def cmd_delete(state: AppState, args: list[str]) -> str:
    task = _task_at(state, args[0]) if args else None
    if task is None:
        return "Usage: /delete <n> (see /list all for numbers)"
    state.task_list.delete(task)
    return _result(state, f"Deleted: {task.title}")


def cmd_clear(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args or args[0].lower() != "yes":
        return "This removes every task. Run /clear yes to confirm."
    if emit:
        emit("Clearing all tasks...")
    state.task_list.clear_all_tasks()
    return _result(state, "All tasks cleared.")


def cmd_subject(state: AppState, args: list[str]) -> str:
    """
    /subject        -> clear the filter
    /subject <name> -> only show that subject in /list all
    """
    tl = state.task_list
    if not args:
        tl.selected_subject = None
        known = ", ".join(tl.subjects) or "(none)"
        return f"Subject filter cleared. Subjects: {known}"
    tl.selected_subject = " ".join(args)
    return f"Subject filter: {tl.selected_subject}"


def cmd_reload(state: AppState, args: list[str]) -> str:
    ok = state.task_list.reload()
    if not ok:
        return f"Error: {state.task_list.last_error_message}"
    return f"Reloaded {len(state.task_list.tasks)} tasks."


def cmd_samples(state: AppState, args: list[str]) -> str:
    n = add_sample_tasks(state.task_list)
    return _result(state, f"Added {n} sample tasks.")


def cmd_name(state: AppState, args: list[str]) -> str:
    prefs = state.preferences
    if not args:
        return f"Hello, {prefs.user_name}!" if prefs.user_name else "No name set. Use /name <your name>."
    prefs.save_user_name(" ".join(args))
    return f"Nice to meet you, {prefs.user_name}!"


def cmd_status(state: AppState, args: list[str]) -> str:
    tl = state.task_list
    done = sum(1 for t in tl.tasks if t.is_completed)
    err = tl.last_error_message or "none"
    return (
        "Status:\n"
        f"  Tasks: {len(tl.tasks)} ({done} completed)\n"
        f"  Overdue: {len(tl.overdue)}  Today: {len(tl.due_today)}  Upcoming: {len(tl.upcoming)}\n"
        f"  Subject filter: {tl.selected_subject or 'none'}\n"
        f"  Last error: {err}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks: /list [all|overdue|today|upcoming].", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <kind> <subject> <due> <priority> <title> [| extra].",
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <n>.", aliases=["rm"])
registry.register("clear", cmd_clear, help_text="Delete every task: /clear yes.")
registry.register("subject", cmd_subject, help_text="Filter /list all by subject: /subject [name].")
registry.register("reload", cmd_reload, help_text="Re-read tasks from disk.")
registry.register("samples", cmd_samples, help_text="Add a few demo tasks.")
registry.register("name", cmd_name, help_text="Show or set your name: /name [name].")
registry.register("status", cmd_status, help_text="Show task counts and the last error.")
