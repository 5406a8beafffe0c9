# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmaster.core.state import AppState
from taskmaster.preferences.kv_store import InMemoryKeyValueStore
from taskmaster.preferences.store import PreferencesStore
from taskmaster.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeTaskBackend


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    container = tmp_path / "group.test.taskmaster"
    return SimpleNamespace(
        app_name="Taskmaster",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        group_container="group.test.taskmaster",
        container_dir=container,
        tasks_db_path=container / "Taskmaster.sqlite3",
        preferences_path=container / "preferences.json",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def backend() -> FakeTaskBackend:
    return FakeTaskBackend()


@pytest.fixture()
def store(backend: FakeTaskBackend, clock: FakeClock) -> TaskStore:
    return TaskStore(backend, clock=clock)


@pytest.fixture()
def prefs() -> PreferencesStore:
    return PreferencesStore(InMemoryKeyValueStore())


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, prefs: PreferencesStore) -> AppState:
    """
    AppState wired with the in-memory backends.

    SQLite / JSON persistence has its own tests; here we care about behavior.
    """
    return AppState(settings=settings, task_store=store, preferences=prefs)
