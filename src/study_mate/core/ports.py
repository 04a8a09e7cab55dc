# src/study_mate/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task list depends on Protocols instead of concrete stores.
This keeps persistence swappable (JSON file, in-memory) and makes testing easier.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """
    Whole-collection task persistence.

    Both methods may raise StorageError. `save` always replaces the full
    collection; there is no incremental update.
    """

    def load(self) -> list[Task]: ...
    def save(self, tasks: list[Task]) -> None: ...


class PreferencesRepo(Protocol):
    """User preferences (name + onboarding flag)."""

    @property
    def user_name(self) -> str: ...

    @property
    def has_completed_onboarding(self) -> bool: ...

    def save_user_name(self, name: str) -> None: ...
    def reset(self) -> None: ...
