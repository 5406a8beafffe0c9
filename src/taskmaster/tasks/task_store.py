# src/taskmaster/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..core.ports import TaskBackend
from .live import ChangeBroadcaster, ChangeKind, LiveTaskList, TaskChange, TaskListener
from .task_models import Task

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class TaskStore:
    """
    Owner of the task collection.

    The in-memory collection (id -> Task plus an ordered id list) is authoritative.
    Every mutation is written through to the backend and flushed right away, but a
    failed flush is only logged: the in-memory change stays.

    Consumers get references to the stored Task objects and must mutate them through
    the store, so updated_at and change notifications stay consistent.
    """

    def __init__(self, backend: TaskBackend, *, clock: Clock = time.time) -> None:
        self._backend = backend
        self._clock = clock
        self._tasks: dict[str, Task] = {}
        self._order: list[str] = []
        self._changes = ChangeBroadcaster()

        # Ids whose last write/delete is not committed. refresh() must not let
        # stale backend rows override them.
        self._unsynced: set[str] = set()
        self._unsynced_deletes: set[str] = set()
        # Subset of the above that reached the backend but whose save() failed.
        # The next successful save() commits them too.
        self._staged: set[str] = set()

        try:
            self._backend.open()
            for task in self._backend.load_all():
                if task.id in self._tasks:
                    continue
                self._tasks[task.id] = task
                self._order.append(task.id)
        except Exception:
            logger.exception("TaskStore failed to load tasks; starting empty.")

        logger.info("TaskStore ready total=%s", len(self._order))

    def close(self) -> None:
        try:
            self._backend.close()
        except Exception:
            logger.debug("TaskStore backend close failed.", exc_info=True)

    # ---- low-level helpers ----

    def _now(self) -> float:
        return float(self._clock())

    def _persist(
        self,
        action: str,
        write: Callable[[], None],
        ids: list[str],
        *,
        deleted: bool = False,
    ) -> None:
        pending = self._unsynced_deletes if deleted else self._unsynced
        try:
            write()
        except Exception:
            logger.exception(
                "TaskStore write failed action=%s; keeping in-memory state.", action
            )
            pending.update(ids)
            self._staged.difference_update(ids)
            return
        try:
            self._backend.save()
        except Exception:
            logger.exception(
                "TaskStore flush failed action=%s; keeping in-memory state.", action
            )
            pending.update(ids)
            self._staged.update(ids)
            return

        pending.difference_update(ids)
        if self._staged:
            self._unsynced.difference_update(self._staged)
            self._unsynced_deletes.difference_update(self._staged)
            self._staged.clear()

    def _write_task(self, action: str, task: Task) -> None:
        self._persist(action, lambda: self._backend.insert(task), [task.id])

    def _resolve(self, task: Task | str) -> Task | None:
        task_id = task if isinstance(task, str) else task.id
        return self._tasks.get(task_id)

    def _append(self, task: Task) -> None:
        self._tasks[task.id] = task
        self._order.append(task.id)
        self._changes.emit(TaskChange(ChangeKind.INSERTED, task, len(self._order) - 1))

    # ---- queries ----

    def __len__(self) -> int:
        return len(self._order)

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def ordered_tasks(self) -> list[Task]:
        return [self._tasks[i] for i in self._order]

    def query_all(self) -> LiveTaskList:
        return LiveTaskList(self)

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        return self._changes.subscribe(listener)

    # ---- mutations ----

    def add(self, body: str) -> Task:
        """Create a task. The body is stripped but not validated (empty is allowed)."""
        task = Task.create(body.strip(), now=self._now())
        self._append(task)
        self._write_task("add", task)
        logger.debug("Task added id=%s", task.id)
        return task

    def update(
        self,
        task: Task | str,
        *,
        body: str | None = None,
        is_complete: bool | None = None,
    ) -> Task | None:
        """
        Apply body and/or completion changes to the stored task.

        updated_at moves only when a value actually changes.
        Returns the stored task, or None if it is not (or no longer) in the store.
        """
        current = self._resolve(task)
        if current is None:
            logger.debug("Task update ignored; unknown id=%s", getattr(task, "id", task))
            return None

        changed = False
        if body is not None:
            new_body = body.strip()
            if new_body != current.body:
                current.body = new_body
                changed = True

        if is_complete is not None and bool(is_complete) != current.is_complete:
            current.is_complete = bool(is_complete)
            changed = True

        if not changed:
            return current

        current.touch(self._now())
        self._changes.emit(
            TaskChange(ChangeKind.UPDATED, current, self._order.index(current.id))
        )
        self._write_task("update", current)
        return current

    def edit_body(self, task: Task | str, body: str) -> Task | None:
        return self.update(task, body=body)

    def toggle_complete(self, task: Task | str) -> Task | None:
        current = self._resolve(task)
        if current is None:
            return None
        return self.update(current, is_complete=not current.is_complete)

    def duplicate(self, task: Task | str) -> Task | None:
        """New task with the same body/completion and its own id and timestamps."""
        source = self._resolve(task)
        if source is None:
            # A detached Task can still be copied; it just has no stored original.
            if isinstance(task, str):
                return None
            source = task

        copy = Task.create(source.body, is_complete=source.is_complete, now=self._now())
        self._append(copy)
        self._write_task("duplicate", copy)
        logger.debug("Task duplicated src=%s new=%s", source.id, copy.id)
        return copy

    def delete(self, task: Task | str) -> None:
        """Remove a task. Deleting an absent task is a no-op."""
        current = self._resolve(task)
        if current is None:
            return

        index = self._order.index(current.id)
        del self._order[index]
        del self._tasks[current.id]
        self._unsynced.discard(current.id)
        self._changes.emit(TaskChange(ChangeKind.DELETED, current, index))

        self._persist(
            "delete", lambda: self._backend.delete(current.id), [current.id], deleted=True
        )
        logger.debug("Task deleted id=%s", current.id)

    def clear_all(self) -> int:
        """Delete every task. Returns how many were removed."""
        removed = self.ordered_tasks()
        if not removed:
            return 0

        for task in removed:
            self._order.remove(task.id)
            del self._tasks[task.id]
            self._unsynced.discard(task.id)
            self._changes.emit(TaskChange(ChangeKind.DELETED, task, 0))

        def _write() -> None:
            for task in removed:
                self._backend.delete(task.id)

        self._persist("clear_all", _write, [t.id for t in removed], deleted=True)

        logger.info("Cleared %d tasks.", len(removed))
        return len(removed)

    # ---- shared container ----

    def refresh(self) -> int:
        """
        Reload from the backend and apply changes written by someone else
        (e.g. the other app variant sharing the same container).

        Tasks with unflushed local changes are left untouched.
        Returns the number of change events emitted.
        """
        try:
            rows = self._backend.load_all()
        except Exception:
            logger.exception("TaskStore refresh failed; keeping in-memory state.")
            return 0

        incoming = {t.id: t for t in rows if t.id not in self._unsynced_deletes}
        events = 0

        for task_id in list(self._order):
            if task_id in incoming or task_id in self._unsynced:
                continue
            index = self._order.index(task_id)
            task = self._tasks.pop(task_id)
            del self._order[index]
            self._changes.emit(TaskChange(ChangeKind.DELETED, task, index))
            events += 1

        for task_id, fresh in incoming.items():
            current = self._tasks.get(task_id)
            if current is None:
                fresh.touch(fresh.updated_at)
                self._append(fresh)
                events += 1
                continue
            if task_id in self._unsynced:
                continue
            fresh_updated = max(fresh.updated_at, current.created_at)
            if (current.body, current.is_complete, current.updated_at) == (
                fresh.body,
                fresh.is_complete,
                fresh_updated,
            ):
                continue
            current.body = fresh.body
            current.is_complete = fresh.is_complete
            current.touch(fresh_updated)
            self._changes.emit(
                TaskChange(ChangeKind.UPDATED, current, self._order.index(task_id))
            )
            events += 1

        if events:
            logger.info("TaskStore refresh applied %d external changes.", events)
        return events
