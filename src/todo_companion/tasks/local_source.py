# src/todo_companion/tasks/local_source.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from ..core.errors import SourceFailureError, TaskNotFoundError
from .task_models import Task

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

SOURCE_NAME = "local"


class TasksLocalDataSource:
    """
    SQLite task store (the on-device tier).

    Schema handling:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each call opens its own SQLite connection
    - blocking sqlite3 work runs in a worker thread (asyncio.to_thread)
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TasksLocalDataSource ready db=%s total=%s", self._db_path, self._count_sync())

    @property
    def db_path(self) -> Path:
        return self._db_path

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
                    entry_id TEXT PRIMARY KEY,
                    title TEXT,
                    description TEXT,
                    completed INTEGER NOT NULL DEFAULT 0
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
                logger.info("TasksLocalDataSource migration: added column %s", name)

            add_col("title", "TEXT")
            add_col("description", "TEXT")
            add_col("completed", "INTEGER NOT NULL DEFAULT 0")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["entry_id"]),
            title=row["title"],
            description=row["description"],
            is_completed=bool(row["completed"]),
        )

    async def _run(self, op: str, fn: Callable[[], _T]) -> _T:
        try:
            return await asyncio.to_thread(fn)
        except sqlite3.Error as e:
            logger.debug("SQLite %s failed db=%s", op, self._db_path, exc_info=True)
            raise SourceFailureError(SOURCE_NAME, f"{op} failed: {e}") from e

    def _execute(self, sql: str, params: tuple = ()) -> int:
        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount
        finally:
            conn.close()

    def _count_sync(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def _fetch_all_sync(self) -> list[Task]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT entry_id, title, description, completed FROM tasks ORDER BY rowid ASC"
            ).fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def _fetch_one_sync(self, task_id: str) -> Task | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT entry_id, title, description, completed FROM tasks WHERE entry_id = ?",
                (task_id,),
            ).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def _set_completed(self, task_id: str, completed: bool) -> int:
        return self._execute(
            "UPDATE tasks SET completed = ? WHERE entry_id = ?",
            (1 if completed else 0, task_id),
        )

    # ---- TasksDataSource ----

    async def count_tasks(self) -> int:
        return await self._run("count_tasks", self._count_sync)

    async def get_tasks(self) -> list[Task]:
        return await self._run("get_tasks", self._fetch_all_sync)

    async def get_task(self, task_id: str) -> Task:
        task = await self._run("get_task", lambda: self._fetch_one_sync(task_id))
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def save_task(self, task: Task) -> None:
        await self._run(
            "save_task",
            lambda: self._execute(
                """
                INSERT INTO tasks(entry_id, title, description, completed)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(entry_id) DO UPDATE SET
                    title = excluded.title,
                    description = excluded.description,
                    completed = excluded.completed
                """,
                (task.id, task.title, task.description, 1 if task.is_completed else 0),
            ),
        )
        logger.debug("Task saved id=%s completed=%s", task.id, task.is_completed)

    async def complete_task(self, task: Task | str) -> None:
        task_id = task if isinstance(task, str) else task.id
        await self._run("complete_task", lambda: self._set_completed(task_id, True))

    async def activate_task(self, task: Task | str) -> None:
        task_id = task if isinstance(task, str) else task.id
        await self._run("activate_task", lambda: self._set_completed(task_id, False))

    async def clear_completed_tasks(self) -> None:
        n = await self._run(
            "clear_completed_tasks",
            lambda: self._execute("DELETE FROM tasks WHERE completed = 1"),
        )
        logger.debug("Cleared %s completed tasks", n)

    async def delete_all_tasks(self) -> None:
        await self._run("delete_all_tasks", lambda: self._execute("DELETE FROM tasks"))

    async def delete_task(self, task_id: str) -> None:
        await self._run(
            "delete_task",
            lambda: self._execute("DELETE FROM tasks WHERE entry_id = ?", (task_id,)),
        )

    async def refresh_tasks(self) -> None:
        # The repository owns refresh logic across tiers.
        return
