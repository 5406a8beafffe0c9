# src/taskmaster/preferences/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..core.ports import KeyListener, Unsubscribe

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore:
    """
    Flat key-value layer with a registered-defaults fallback and change callbacks.

    Every set()/remove() notifies subscribers, even when the value is unchanged.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self._defaults: dict[str, Any] = {}
        self._subscribers: list[KeyListener] = []

    # ---- notifications ----

    def subscribe(self, callback: KeyListener) -> Unsubscribe:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _notify(self, key: str | None) -> None:
        for cb in list(self._subscribers):
            try:
                cb(key)
            except Exception:
                logger.exception("Key-value subscriber failed key=%s", key)

    # ---- values ----

    def register_defaults(self, defaults: Mapping[str, Any]) -> None:
        self._defaults.update(defaults)

    def get(self, key: str) -> Any | None:
        if key in self._values:
            return self._values[key]
        return self._defaults.get(key)

    def contains(self, key: str) -> bool:
        """True only for explicitly stored values (not registered defaults)."""
        return key in self._values

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._persist()
        self._notify(key)

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._persist()
        self._notify(key)

    def refresh(self) -> None:
        return

    def _persist(self) -> None:
        return


class JsonFileKeyValueStore(InMemoryKeyValueStore):
    """
    Key-value layer persisted as one JSON object on disk.

    - Missing or malformed file -> empty (defaults apply).
    - Writes are atomic (tmp file + os.replace) and best-effort: failures are logged.
    - refresh() picks up edits made by another process (file signature check) and
      notifies once per changed key.
    - set()/remove() refresh first, so a key written by another process since the
      last refresh is kept when the file is rewritten.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self._path = Path(path)
        self._signature: tuple[int, int, int] | None = None
        self._values = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _stat_signature(self) -> tuple[int, int, int] | None:
        # os.replace gives every rewrite a new inode, so this changes even when
        # two writes land within one mtime tick.
        try:
            st = self._path.stat()
        except OSError:
            return None
        return (st.st_ino, st.st_mtime_ns, st.st_size)

    def _load(self) -> dict[str, Any]:
        self._signature = self._stat_signature()
        if self._signature is None:
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to read preferences from %s; using defaults.", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Preferences file %s is not a JSON object; ignoring.", self._path)
            return {}
        return {str(k): v for k, v in data.items()}

    def _persist(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(self._values, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
            with contextlib.suppress(Exception):
                os.chmod(self._path, 0o600)
            self._signature = self._stat_signature()
        except Exception:
            logger.exception("Failed to save preferences to %s", self._path)

    def refresh(self) -> None:
        if self._stat_signature() == self._signature:
            return

        old = self._values
        self._values = self._load()

        changed = sorted(
            k for k in set(old) | set(self._values) if old.get(k) != self._values.get(k)
        )
        if changed:
            logger.info("Preferences changed externally: %s", ", ".join(changed))
        for key in changed:
            self._notify(key)

    def set(self, key: str, value: Any) -> None:
        self.refresh()
        super().set(key, value)

    def remove(self, key: str) -> None:
        self.refresh()
        super().remove(key)
