# src/study_mate/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local directories exist,
- wires the concrete task store and preferences into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..preferences import PreferencesStore
from ..tasks.task_list import TaskList
from ..tasks.task_store import FileTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)
    settings.preferences_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = FileTaskStore(settings.tasks_path)
    state = AppState(
        settings=settings,
        task_list=TaskList(store),
        preferences=PreferencesStore(settings.preferences_path),
    )
    logger.debug("State created tasks_path=%s", settings.tasks_path)
    return state
