# src/taskmaster/logging_setup.py

"""
Logging for the console app.

Two handlers on the root logger:
- stderr: taskmaster records at the configured level (TASKMASTER_LOG_LEVEL),
  anything else only at ERROR+. Turning the debug_enabled preference on drops
  it to DEBUG until the preference is turned off again.
- taskmaster.log in the data dir: everything at file_level.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from .preferences.schema import DEBUG_ENABLED

if TYPE_CHECKING:
    from .preferences.store import PreferencesStore

logger = logging.getLogger(__name__)

APP_LOGGER = "taskmaster"
LOG_FILE_NAME = "taskmaster.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def parse_level(name: str | None, default: int = logging.INFO) -> int:
    """'debug' / 'WARNING' / '10' -> logging level; anything else -> default."""
    raw = (name or "").strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


class _AppRecordsFilter(logging.Filter):
    """Pass taskmaster records; other loggers (py.warnings included) only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == APP_LOGGER or record.name.startswith(APP_LOGGER + "."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskmaster",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> logging.Handler:
    """
    Install the console and file handlers, replacing any existing ones.

    Returns the console handler so its level can follow the debug preference.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_AppRecordsFilter())
    root.addHandler(console)

    fh = logging.FileHandler(str(log_dir / LOG_FILE_NAME), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return console


def follow_debug_preference(
    handler: logging.Handler,
    prefs: PreferencesStore,
    base_level: int,
) -> Callable[[], None]:
    """
    Keep handler at DEBUG while debug_enabled is on, at base_level otherwise.

    Applies the current value right away. Returns the unsubscribe callable.
    """

    def _apply(key: str | None = None) -> None:
        if key is not None and key != DEBUG_ENABLED.key:
            return
        debug = prefs.get(DEBUG_ENABLED)
        handler.setLevel(logging.DEBUG if debug else base_level)
        logger.debug("Console log level -> %s", logging.getLevelName(handler.level))

    _apply()
    return prefs.on_change(_apply)
