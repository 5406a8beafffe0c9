# src/taskmaster/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the stores.

The stores depend on Protocols instead of concrete storage engines.
This keeps SQLite / JSON files swappable and lets tests run against in-memory fakes.
"""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task

KeyListener = Callable[[str | None], None]
# Called with the changed key, or None when the whole layer was reloaded.

Unsubscribe = Callable[[], None]


class TaskBackend(Protocol):
    """
    Durable task collection keyed by task id.

    insert() is insert-or-replace; a replaced row keeps its original position.
    Writes may be staged until save().
    """

    def open(self) -> None: ...
    def load_all(self) -> list[Task]: ...
    def insert(self, task: Task) -> None: ...
    def delete(self, task_id: str) -> None: ...
    def save(self) -> None: ...
    def close(self) -> None: ...


class KeyValueBackend(Protocol):
    """
    Flat key -> primitive value layer.

    Registered defaults are a fallback layer: they are returned by get() when no
    value is stored, and are never written over stored values.
    """

    def get(self, key: str) -> Any | None: ...
    def set(self, key: str, value: Any) -> None: ...
    def remove(self, key: str) -> None: ...
    def register_defaults(self, defaults: Mapping[str, Any]) -> None: ...
    def subscribe(self, callback: KeyListener) -> Unsubscribe: ...
    def refresh(self) -> None: ...
