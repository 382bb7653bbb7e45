# src/study_companion/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
import uuid
from pathlib import Path
from typing import Any

from .task_models import UPDATABLE_FIELDS, Task, TaskServiceError

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task service (local default backend).

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection

    sqlite3 errors are re-raised as TaskServiceError so the view can handle
    every backend the same way.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except TaskServiceError:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    category TEXT NOT NULL DEFAULT 'general',
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("category", "TEXT NOT NULL DEFAULT 'general'")
            add_col("completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            category=str(row["category"] or "general"),
            completed=bool(row["completed"]),
            created_at=float(row["created_at"] or 0.0),
        )

    def _fetch(self, conn: sqlite3.Connection, task_id: str) -> Task:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise TaskServiceError(f"Task not found: {task_id}")
        return self._row_to_task(row)

    # ---- public API ----

    def count_tasks(self) -> int:
        try:
            conn = self._get_conn()
            try:
                (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
                return int(n)
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise TaskServiceError(f"Failed to count tasks: {e}") from e

    def list_tasks(self) -> list[Task]:
        """All tasks, newest first."""
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute(
                    "SELECT * FROM tasks ORDER BY created_at DESC, rowid DESC"
                ).fetchall()
                return [self._row_to_task(r) for r in rows]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise TaskServiceError(f"Failed to list tasks: {e}") from e

    def create_task(self, title: str, category: str) -> Task:
        if not title or not title.strip():
            raise TaskServiceError("title is required")

        now = time.time()
        task = Task(
            id=uuid.uuid4().hex,
            title=title.strip(),
            category=(category or "general").strip(),
            completed=False,
            created_at=now,
        )
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO tasks(id, title, category, completed, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (task.id, task.title, task.category, 0, now, now),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise TaskServiceError(f"Failed to create task: {e}") from e

        logger.debug("Task added id=%s category=%s", task.id, task.category)
        return task

    def update_task(self, task_id: str, **fields: Any) -> Task:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise TaskServiceError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        sets: list[str] = []
        params: list[Any] = []

        if "title" in fields:
            title = str(fields["title"] or "").strip()
            if not title:
                raise TaskServiceError("title is required")
            sets.append("title = ?")
            params.append(title)

        if "category" in fields:
            sets.append("category = ?")
            params.append(str(fields["category"] or "general"))

        if "completed" in fields:
            sets.append("completed = ?")
            params.append(1 if fields["completed"] else 0)

        try:
            conn = self._get_conn()
            try:
                if sets:
                    sets.append("updated_at = ?")
                    params.append(time.time())
                    params.append(task_id)
                    cur = conn.execute(
                        f"UPDATE tasks SET {', '.join(sets)} WHERE id = ?", params
                    )
                    conn.commit()
                    if cur.rowcount != 1:
                        raise TaskServiceError(f"Task not found: {task_id}")
                return self._fetch(conn, task_id)
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise TaskServiceError(f"Failed to update task {task_id}: {e}") from e

    def delete_task(self, task_id: str) -> bool:
        try:
            conn = self._get_conn()
            try:
                cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
                conn.commit()
                deleted = cur.rowcount == 1
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise TaskServiceError(f"Failed to delete task {task_id}: {e}") from e

        logger.debug("Task delete id=%s deleted=%s", task_id, deleted)
        return deleted
