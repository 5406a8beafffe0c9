# src/taskmaster/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Both app variants point at the same group container directory by default,
  so they see the same task collection and preferences.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TASKMASTER"

DEFAULT_GROUP_CONTAINER = "group.io.github.tsgrissom.taskmaster"

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env never overrides variables that are already exported.
load_dotenv(find_dotenv(usecwd=True), override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Front end ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    group_container: str
    container_dir: Path
    tasks_db_path: Path
    preferences_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Taskmaster").strip() or "Taskmaster"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskmaster"))
        group_container = (
            _env(_k("GROUP_CONTAINER"), DEFAULT_GROUP_CONTAINER).strip() or DEFAULT_GROUP_CONTAINER
        )
        container_dir = data_dir / group_container
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), container_dir / "Taskmaster.sqlite3")
        preferences_path = _env_path(_k("PREFERENCES_PATH"), container_dir / "preferences.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            group_container=group_container,
            container_dir=container_dir,
            tasks_db_path=tasks_db_path,
            preferences_path=preferences_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
