# src/todo_companion/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.errors import EmptyTaskError, NoDataAvailableError
from ..core.ports import TasksDataSource
from .task_models import Task, TasksFilterType, TaskStatistics

logger = logging.getLogger(__name__)


def _clean(text: str | None) -> str:
    return (text or "").strip()


async def create_task(repo: TasksDataSource, title: str | None, description: str | None = None) -> Task:
    """Create and save a new active task. Empty tasks are rejected."""
    task = Task(title=_clean(title), description=_clean(description))
    if task.is_empty:
        raise EmptyTaskError()
    await repo.save_task(task)
    logger.info("Task created id=%s", task.id)
    return task


async def update_task(
    repo: TasksDataSource,
    task_id: str,
    title: str | None,
    description: str | None = None,
) -> Task:
    """
    Replace an existing task's text, keeping its id.

    Edits are full replacements: the edited task comes back as active.
    """
    task = Task(title=_clean(title), description=_clean(description), id=task_id)
    if task.is_empty:
        raise EmptyTaskError()
    await repo.save_task(task)
    logger.info("Task updated id=%s", task.id)
    return task


def filter_tasks(tasks: Iterable[Task], filtering: TasksFilterType = TasksFilterType.ALL) -> list[Task]:
    if filtering == TasksFilterType.ACTIVE:
        return [t for t in tasks if t.is_active]
    if filtering == TasksFilterType.COMPLETED:
        return [t for t in tasks if t.is_completed]
    return list(tasks)


async def load_tasks(
    repo: TasksDataSource,
    filtering: TasksFilterType = TasksFilterType.ALL,
    *,
    force_update: bool = False,
) -> list[Task]:
    """
    Load tasks for a listing.

    force_update marks the cache dirty first so the remote service answers.
    "No data" is an empty listing here; other errors propagate.
    """
    if force_update:
        await repo.refresh_tasks()
    try:
        tasks = await repo.get_tasks()
    except NoDataAvailableError:
        return []
    return filter_tasks(tasks, filtering)


def compute_statistics(tasks: Iterable[Task]) -> TaskStatistics:
    completed = 0
    active = 0
    for t in tasks:
        if t.is_completed:
            completed += 1
        else:
            active += 1
    return TaskStatistics(active=active, completed=completed)


async def load_statistics(repo: TasksDataSource) -> TaskStatistics:
    try:
        tasks = await repo.get_tasks()
    except NoDataAvailableError:
        return TaskStatistics()
    return compute_statistics(tasks)
