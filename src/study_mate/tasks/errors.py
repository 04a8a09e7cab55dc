# src/study_mate/tasks/errors.py

"""
Domain errors.

Stores and the validator raise these; TaskList is the single place that
catches them and turns them into `last_error_message`.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that carry a user-facing message."""

    default_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    pass


class EmptyTitleError(ValidationError):
    default_message = "Title cannot be empty."


class PastDueDateError(ValidationError):
    default_message = "Due date cannot be in the past."


class StorageError(AppError):
    pass


class LoadFailedError(StorageError):
    default_message = "Failed to load tasks."


class SaveFailedError(StorageError):
    default_message = "Failed to save tasks."


class TaskDecodeError(ValueError):
    """A persisted record could not be turned back into a task."""

    def __init__(self, reason: str, *, index: int | None = None) -> None:
        self.reason = reason
        self.index = index
        where = f"record {index}: " if index is not None else ""
        super().__init__(f"{where}{reason}")
