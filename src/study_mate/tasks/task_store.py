# src/study_mate/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from . import task_codec
from .errors import LoadFailedError, SaveFailedError, TaskDecodeError
from .task_codec import TaskRecord
from .task_models import Task

logger = logging.getLogger(__name__)


class FileTaskStore:
    """
    JSON file task store.

    The file holds a single JSON array of task records (see task_codec).

    - missing file      -> empty list (first run)
    - zero-length file  -> empty list
    - anything that fails to read/parse/decode -> LoadFailedError

    Saves are atomic: the document is written to a sibling temp file and then
    moved over the target with os.replace, so a crash mid-write leaves the
    previous file intact.

    No locking: one process owns the file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        logger.debug("FileTaskStore path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Task]:
        if not self._path.exists():
            logger.info("No task file at %s; starting empty.", self._path)
            return []

        try:
            raw = self._path.read_text("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read %s: %s", self._path, e)
            raise LoadFailedError() from e

        if not raw.strip():
            return []

        try:
            tasks = task_codec.loads(raw)
        except (json.JSONDecodeError, TaskDecodeError, RecursionError, ValueError) as e:
            logger.error("Failed to decode %s: %s", self._path, e)
            raise LoadFailedError() from e

        logger.debug("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: list[Task]) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            json_str = task_codec.dumps(tasks)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json_str, "utf-8")
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save tasks to %s: %s", self._path, e)
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise SaveFailedError() from e

        logger.debug("Saved %d tasks to %s", len(tasks), self._path)


class InMemoryTaskStore:
    """
    In-memory task store for tests and embedding.

    Tasks are kept as encoded records, so what `load` returns never aliases
    the caller's live objects (same as going through a file).
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._records: list[TaskRecord] = task_codec.encode_tasks(tasks or [])
        self.save_count = 0

    def load(self) -> list[Task]:
        return task_codec.decode_tasks(self._records)

    def save(self, tasks: list[Task]) -> None:
        self._records = task_codec.encode_tasks(tasks)
        self.save_count += 1

    @property
    def saved_tasks(self) -> list[Task]:
        return self.load()

    @property
    def records(self) -> list[TaskRecord]:
        return [dict(r) for r in self._records]
