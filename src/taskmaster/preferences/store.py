# src/taskmaster/preferences/store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from ..core.ports import KeyListener, KeyValueBackend
from .schema import ALL_PREFERENCES, MISSING, Preference

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PreferencesStore:
    """
    Typed access to the preference table over a flat key-value layer.

    - get() never raises: missing or unparseable values resolve to the default.
    - set() never raises either: a value that does not fit the declared type is
      logged and dropped.
    - on_change() listeners fire for every change the backend reports, whether it
      came from this process or was picked up by refresh().
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        preferences: Iterable[Preference[Any]] = ALL_PREFERENCES,
    ) -> None:
        self._backend = backend
        self._prefs = {p.key: p for p in preferences}
        self._listeners: list[KeyListener] = []

        # Fallback layer only; stored values are never overwritten.
        self._backend.register_defaults(
            {p.key: p.encode(p.default) for p in self._prefs.values()}
        )
        self._unsubscribe_backend: Callable[[], None] | None = self._backend.subscribe(
            self._on_backend_change
        )
        logger.info("PreferencesStore ready keys=%d", len(self._prefs))

    def close(self) -> None:
        if self._unsubscribe_backend is not None:
            self._unsubscribe_backend()
            self._unsubscribe_backend = None

    @property
    def preferences(self) -> list[Preference[Any]]:
        return list(self._prefs.values())

    def get(self, pref: Preference[T]) -> T:
        try:
            raw = self._backend.get(pref.key)
        except Exception:
            logger.exception("Preference read failed key=%s; using default.", pref.key)
            return pref.default
        return pref.decode(raw)

    def set(self, pref: Preference[T], value: Any) -> bool:
        typed = pref.coerce(value)
        if typed is MISSING:
            logger.warning("Ignoring invalid value for %s: %r", pref.name, value)
            return False
        try:
            self._backend.set(pref.key, pref.encode(typed))
        except Exception:
            logger.exception("Preference write failed key=%s", pref.key)
            return False
        logger.debug("Preference set %s=%r", pref.name, typed)
        return True

    def snapshot(self) -> dict[str, Any]:
        return {p.name: self.get(p) for p in self._prefs.values()}

    def refresh(self) -> None:
        try:
            self._backend.refresh()
        except Exception:
            logger.exception("Preference refresh failed.")

    # ---- change notification ----

    def on_change(self, listener: KeyListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _on_backend_change(self, key: str | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(key)
            except Exception:
                logger.exception("Preference listener failed key=%s", key)
