# src/todo_companion/core/ports.py

"""
Ports (interfaces) used by the core.

The repository and the console depend on this Protocol instead of concrete
storage classes. The local store, the remote service and the caching
repository all implement it, so callers cannot tell them apart.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..tasks.task_models import Task


@runtime_checkable
class TasksDataSource(Protocol):
    """
    Async task storage contract.

    Every call is single-shot: it returns once or raises once.
    - get_task raises TaskNotFoundError for unknown ids
    - I/O failures surface as SourceFailureError
    - complete_task / activate_task accept a Task or a task id; a source that
      cannot resolve ids on its own treats the id form as a no-op
    - refresh_tasks is only meaningful for sources that cache
    """

    async def get_tasks(self) -> list[Task]: ...

    async def get_task(self, task_id: str) -> Task: ...

    async def save_task(self, task: Task) -> None: ...

    async def complete_task(self, task: Task | str) -> None: ...

    async def activate_task(self, task: Task | str) -> None: ...

    async def clear_completed_tasks(self) -> None: ...

    async def delete_all_tasks(self) -> None: ...

    async def delete_task(self, task_id: str) -> None: ...

    async def refresh_tasks(self) -> None: ...
