# src/study_mate/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_list import TaskList
from .ports import PreferencesRepo


@dataclass
class AppState:
    # Settings object (real Settings or a test SimpleNamespace).
    settings: object

    task_list: TaskList
    preferences: PreferencesRepo
