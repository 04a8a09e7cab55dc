# src/study_mate/tasks/task_list.py

"""
TaskList: the in-memory task collection and its business rules.

- loads once from a TaskRepo at construction (reload() to retry),
- validates before add/update,
- writes the whole collection through to the repo after every mutation,
- derives the overdue / due-today / upcoming / by-subject views on demand.

Errors never escape: storage and validation failures are turned into
`last_error_message`, which presentation code displays and may dismiss.
Listeners registered with subscribe() are called after every state change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime, tzinfo
from uuid import UUID

from ..core.ports import TaskRepo
from .errors import LoadFailedError, SaveFailedError, StorageError, ValidationError
from .task_models import Task, sort_key
from .validation import validate

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Listener = Callable[["TaskList"], None]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TaskList:
    def __init__(
        self,
        repo: TaskRepo,
        *,
        clock: Clock | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._repo = repo
        self._clock: Clock = clock or _utc_now
        # Calendar used for "today"; None means the system local timezone.
        self._tz = tz
        self._tasks: list[Task] = []
        self._selected_subject: str | None = None
        self._last_error_message: str | None = None
        self._listeners: list[Listener] = []

        try:
            self._tasks = sorted(repo.load(), key=sort_key)
        except StorageError:
            logger.exception("Initial task load failed.")
            self._tasks = []
            self._last_error_message = LoadFailedError.default_message

        logger.info("TaskList ready total=%d", len(self._tasks))

    # ---- state ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Snapshot of all tasks in canonical order."""
        return tuple(self._tasks)

    @property
    def last_error_message(self) -> str | None:
        return self._last_error_message

    @property
    def selected_subject(self) -> str | None:
        return self._selected_subject

    @selected_subject.setter
    def selected_subject(self, subject: str | None) -> None:
        self._selected_subject = subject
        self._notify()

    @property
    def subjects(self) -> list[str]:
        return sorted({t.subject for t in self._tasks})

    def find(self, task_id: UUID) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def dismiss_error(self) -> None:
        if self._last_error_message is not None:
            self._last_error_message = None
            self._notify()

    # ---- change notifications ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("TaskList listener failed: %r", listener)

    # ---- derived views ----

    def now(self) -> datetime:
        """Current time according to the injected clock."""
        return self._clock()

    def _local_date(self, dt: datetime) -> date:
        return dt.astimezone(self._tz).date()

    @property
    def overdue(self) -> list[Task]:
        now = self.now()
        return sorted(
            (t for t in self._tasks if not t.is_completed and t.is_overdue(now)),
            key=sort_key,
        )

    @property
    def due_today(self) -> list[Task]:
        now = self.now()
        today = self._local_date(now)
        return sorted(
            (
                t
                for t in self._tasks
                if not t.is_completed
                and not t.is_overdue(now)
                and self._local_date(t.due_date) == today
            ),
            key=sort_key,
        )

    @property
    def upcoming(self) -> list[Task]:
        now = self.now()
        today = self._local_date(now)
        return sorted(
            (
                t
                for t in self._tasks
                if not t.is_completed
                and not t.is_overdue(now)
                and self._local_date(t.due_date) != today
            ),
            key=sort_key,
        )

    @property
    def filtered_by_subject(self) -> list[Task]:
        subject = self._selected_subject
        if not subject:
            return list(self._tasks)
        return [t for t in self._tasks if t.subject == subject]

    # ---- loading ----

    def reload(self) -> bool:
        """Re-read everything from the repo. On failure the current list is kept."""
        try:
            loaded = sorted(self._repo.load(), key=sort_key)
        except StorageError:
            logger.exception("Task reload failed.")
            self._last_error_message = LoadFailedError.default_message
            self._notify()
            return False

        self._tasks = loaded
        self._last_error_message = None
        logger.info("Tasks reloaded total=%d", len(self._tasks))
        self._notify()
        return True

    # ---- mutations ----

    def add(self, task: Task) -> bool:
        if not self._validate(task):
            return False
        self._tasks.append(task)
        self._tasks.sort(key=sort_key)
        logger.debug("Task added id=%s kind=%s", task.id, task.kind)
        self._persist()
        return True

    def update(self, task: Task) -> bool:
        """
        Replace the stored task that has the same id.

        An unknown id is silently ignored (returns False, no error message).
        """
        if not self._validate(task):
            return False
        idx = self._index_of(task.id)
        if idx is None:
            logger.debug("Update ignored; no task id=%s", task.id)
            self._notify()
            return False
        self._tasks[idx] = task
        self._tasks.sort(key=sort_key)
        logger.debug("Task updated id=%s", task.id)
        self._persist()
        return True

    def delete(self, task: Task) -> None:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task.id]
        logger.debug("Task delete id=%s removed=%d", task.id, before - len(self._tasks))
        self._persist()

    def delete_at(self, indices: Iterable[int]) -> None:
        """Remove tasks by position in `tasks`; out-of-range positions are ignored."""
        drop = {i for i in indices if 0 <= i < len(self._tasks)}
        self._tasks = [t for i, t in enumerate(self._tasks) if i not in drop]
        logger.debug("Task delete_at removed=%d", len(drop))
        self._persist()

    def toggle_complete(self, task: Task) -> None:
        """Flip completion of the task with the same id; unknown ids are a no-op."""
        idx = self._index_of(task.id)
        if idx is None:
            return
        target = self._tasks[idx]
        target.is_completed = not target.is_completed
        logger.debug("Task id=%s completed=%s", target.id, target.is_completed)
        self._persist()

    def clear_all_tasks(self) -> None:
        self._tasks = []
        logger.info("All tasks cleared.")
        self._persist()

    # ---- helpers ----

    def _index_of(self, task_id: UUID) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _validate(self, task: Task) -> bool:
        try:
            validate(task, self.now())
        except ValidationError as e:
            logger.warning("Task rejected id=%s: %s", task.id, e.message)
            self._last_error_message = e.message
            self._notify()
            return False
        self._last_error_message = None
        return True

    def _persist(self) -> None:
        try:
            self._repo.save(list(self._tasks))
        except StorageError:
            logger.exception("Saving tasks failed.")
            self._last_error_message = SaveFailedError.default_message
        self._notify()
