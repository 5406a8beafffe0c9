# src/taskmaster/tasks/live.py

"""
Live query over the task collection.

LiveTaskList never copies: every access reads the store's current ordering,
so a consumer holding one sees inserts, updates and deletes without re-querying.
Subscribers additionally get a TaskChange per mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, overload

from .task_models import Task

if TYPE_CHECKING:
    from .task_store import TaskStore

logger = logging.getLogger(__name__)


class ChangeKind(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class TaskChange:
    kind: ChangeKind
    task: Task
    # Position in the collection: after the change for inserted/updated,
    # before the change for deleted.
    index: int


TaskListener = Callable[[TaskChange], None]


class ChangeBroadcaster:
    """Plain observer list. Listener errors are logged, never raised to the mutator."""

    def __init__(self) -> None:
        self._listeners: list[TaskListener] = []

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def emit(self, change: TaskChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Task listener failed kind=%s id=%s", change.kind, change.task.id)


class LiveTaskList(Sequence[Task]):
    """Read-only, always-current view over TaskStore in insertion order."""

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    def _snapshot(self) -> list[Task]:
        return self._store.ordered_tasks()

    @overload
    def __getitem__(self, index: int) -> Task: ...

    @overload
    def __getitem__(self, index: slice) -> list[Task]: ...

    def __getitem__(self, index: int | slice) -> Task | list[Task]:
        return self._snapshot()[index]

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._snapshot())

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, Task):
            return False
        return self._store.get(item.id) is not None

    def ids(self) -> list[str]:
        return [t.id for t in self._snapshot()]

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        return self._store.subscribe(listener)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"LiveTaskList(n={len(self)})"
