# src/taskmaster/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local group container directory exists,
- wires the concrete SQLite / JSON backends into the two stores,
- shuts them down best-effort.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..preferences.kv_store import JsonFileKeyValueStore
from ..preferences.store import PreferencesStore
from ..tasks.sqlite_backend import SQLiteTaskBackend
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
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

    state = AppState(
        settings=settings,
        task_store=TaskStore(SQLiteTaskBackend(settings.tasks_db_path)),
        preferences=PreferencesStore(JsonFileKeyValueStore(settings.preferences_path)),
    )
    logger.info(
        "State ready tasks=%s prefs=%s", settings.tasks_db_path, settings.preferences_path
    )
    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.preferences.close()
    except Exception:
        logger.debug("Preferences close failed.", exc_info=True)

    try:
        state.task_store.close()
    except Exception:
        logger.debug("TaskStore close failed.", exc_info=True)
