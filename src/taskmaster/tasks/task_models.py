# src/taskmaster/tasks/task_models.py

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass


def new_task_id() -> str:
    return str(uuid.uuid4()).upper()


@dataclass(slots=True)
class Task:
    """
    One to-do item.

    Notes:
    - id and created_at never change after construction.
    - updated_at is never earlier than created_at; see touch().
    """

    id: str
    body: str
    is_complete: bool
    created_at: float
    updated_at: float

    @classmethod
    def create(cls, body: str, *, is_complete: bool = False, now: float | None = None) -> Task:
        if now is None:
            now = time.time()
        return cls(
            id=new_task_id(),
            body=body,
            is_complete=bool(is_complete),
            created_at=now,
            updated_at=now,
        )

    def touch(self, now: float) -> None:
        self.updated_at = max(float(now), self.created_at)
