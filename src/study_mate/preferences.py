# src/study_mate/preferences.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class PreferencesStore:
    """
    Small JSON-backed user preferences (display name, onboarding flag).

    Created once in bootstrap and handed to the code that needs it.
    Every change is written immediately (tmp file + os.replace).
    A missing or unreadable file just means defaults.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._user_name = ""
        self._has_completed_onboarding = False
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def user_name(self) -> str:
        return self._user_name

    @property
    def has_completed_onboarding(self) -> bool:
        return self._has_completed_onboarding

    def save_user_name(self, name: str) -> None:
        self._user_name = name.strip()
        self._has_completed_onboarding = True
        self._save()

    def reset(self) -> None:
        self._user_name = ""
        self._has_completed_onboarding = False
        self._save()

    # ---- persistence ----

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable preferences file %s", self._path, exc_info=True)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed preferences file %s", self._path)
            return

        name = data.get("userName")
        self._user_name = name if isinstance(name, str) else ""
        self._has_completed_onboarding = data.get("hasCompletedOnboarding") is True

    def _save(self) -> None:
        data = {
            "userName": self._user_name,
            "hasCompletedOnboarding": self._has_completed_onboarding,
        }
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp_path, self._path)
        except OSError:
            logger.exception("Failed to save preferences to %s", self._path)
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
