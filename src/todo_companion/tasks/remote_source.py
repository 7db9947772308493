# src/todo_companion/tasks/remote_source.py

"""
Simulated task service.

Stands in for a network backend: every call waits a fixed latency before
completing, and the data only lives as long as the process.
"""

from __future__ import annotations

import asyncio
import logging

from ..core.errors import TaskNotFoundError
from .task_models import Task

logger = logging.getLogger(__name__)

DEMO_TASKS: tuple[tuple[str, str], ...] = (
    ("Build tower in Pisa", "Ground looks good, no foundation work required."),
    ("Finish bridge in Tacoma", "Found awesome girders at half the cost!"),
)


class TasksRemoteDataSource:
    def __init__(self, *, latency_seconds: float = 2.0, seed_demo_tasks: bool = True) -> None:
        self._latency = max(0.0, float(latency_seconds))
        self._service_data: dict[str, Task] = {}
        if seed_demo_tasks:
            for title, description in DEMO_TASKS:
                self._put(Task(title=title, description=description))
        logger.info(
            "TasksRemoteDataSource ready latency=%.2fs seeded=%s",
            self._latency,
            len(self._service_data),
        )

    def add_tasks(self, *tasks: Task) -> None:
        """Preload tasks without latency (demos and tests)."""
        for task in tasks:
            self._put(task)

    def _put(self, task: Task) -> None:
        self._service_data[task.id] = task

    async def _simulate_latency(self) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)

    async def get_tasks(self) -> list[Task]:
        await self._simulate_latency()
        return list(self._service_data.values())

    async def get_task(self, task_id: str) -> Task:
        await self._simulate_latency()
        task = self._service_data.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def save_task(self, task: Task) -> None:
        await self._simulate_latency()
        self._put(task)

    async def complete_task(self, task: Task | str) -> None:
        await self._simulate_latency()
        # Ids cannot be resolved here; the repository converts ids using its cache.
        if isinstance(task, Task):
            self._put(task.as_completed())

    async def activate_task(self, task: Task | str) -> None:
        await self._simulate_latency()
        if isinstance(task, Task):
            self._put(task.as_active())

    async def clear_completed_tasks(self) -> None:
        await self._simulate_latency()
        self._service_data = {k: t for k, t in self._service_data.items() if not t.is_completed}

    async def delete_all_tasks(self) -> None:
        await self._simulate_latency()
        self._service_data.clear()

    async def delete_task(self, task_id: str) -> None:
        await self._simulate_latency()
        self._service_data.pop(task_id, None)

    async def refresh_tasks(self) -> None:
        return
