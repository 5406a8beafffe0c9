# src/taskmaster/tasks/sqlite_backend.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)


class SQLiteTaskBackend:
    """
    SQLite task backend.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    One connection is held between open() and close(). insert()/delete() run inside
    the current transaction; save() commits it. Rows keep their insertion position
    (seq) when replaced, so load_all() returns insertion order.
    """

    def __init__(self, db_path: str | Path = "Taskmaster.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError(f"SQLiteTaskBackend is not open: {self._db_path}")
        return self._conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS tasks (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                body TEXT NOT NULL DEFAULT '',
                is_complete INTEGER NOT NULL DEFAULT 0,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
            """
        )

        # Migrations (safe): add missing columns.
        cur.execute("PRAGMA table_info(tasks)")
        cols = {row["name"] for row in cur.fetchall()}

        def add_col(name: str, decl: str) -> None:
            if name in cols:
                return
            cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
            logger.info("Task schema migration: added column %s", name)

        add_col("body", "TEXT NOT NULL DEFAULT ''")
        add_col("is_complete", "INTEGER NOT NULL DEFAULT 0")
        add_col("created_at", "REAL NOT NULL DEFAULT 0")
        add_col("updated_at", "REAL NOT NULL DEFAULT 0")

        conn.commit()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        created_at = float(row["created_at"] or 0.0)
        updated_at = float(row["updated_at"] or 0.0)
        return Task(
            id=str(row["id"]),
            body=str(row["body"] or ""),
            is_complete=bool(row["is_complete"]),
            created_at=created_at,
            updated_at=max(created_at, updated_at),
        )

    # ---- TaskBackend ----

    def open(self) -> None:
        if self._conn is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        try:
            self._ensure_schema(conn)
        except Exception:
            conn.close()
            raise
        self._conn = conn
        logger.info("SQLiteTaskBackend open db=%s", self._db_path)

    def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.commit()
        finally:
            conn.close()

    def load_all(self) -> list[Task]:
        cur = self._require_conn().execute("SELECT * FROM tasks ORDER BY seq ASC")
        return [self._row_to_task(r) for r in cur.fetchall()]

    def insert(self, task: Task) -> None:
        self._require_conn().execute(
            """
            INSERT INTO tasks(id, body, is_complete, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                body = excluded.body,
                is_complete = excluded.is_complete,
                updated_at = excluded.updated_at
            """,
            (
                task.id,
                task.body,
                1 if task.is_complete else 0,
                float(task.created_at),
                float(task.updated_at),
            ),
        )

    def delete(self, task_id: str) -> None:
        self._require_conn().execute("DELETE FROM tasks WHERE id = ?", (task_id,))

    def save(self) -> None:
        self._require_conn().commit()

    def count_tasks(self) -> int:
        (n,) = self._require_conn().execute("SELECT COUNT(*) FROM tasks").fetchone()
        return int(n)
