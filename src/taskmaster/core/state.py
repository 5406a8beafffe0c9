# src/taskmaster/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..preferences.store import PreferencesStore
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything a front end needs, passed explicitly.

    Built once by the composition root (cli/bootstrap.py); there is no global lookup.
    """

    # Settings object (config.Settings in the app, SimpleNamespace in tests).
    settings: Any

    task_store: TaskStore
    preferences: PreferencesStore
