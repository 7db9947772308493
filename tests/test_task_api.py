# tests/test_task_api.py

from __future__ import annotations

import pytest

from todo_companion.core.errors import EmptyTaskError
from todo_companion.tasks.task_api import (
    compute_statistics,
    create_task,
    filter_tasks,
    load_statistics,
    load_tasks,
    update_task,
)
from todo_companion.tasks.task_models import Task, TasksFilterType, TaskStatistics

from .fakes import FakeTasksDataSource


@pytest.mark.asyncio
async def test_create_task_strips_and_saves() -> None:
    repo = FakeTasksDataSource()

    task = await create_task(repo, "  Buy milk ", " two liters ")

    assert (task.title, task.description) == ("Buy milk", "two liters")
    assert task.is_active
    assert repo.args_of("save_task") == [task]


@pytest.mark.asyncio
async def test_create_empty_task_is_rejected() -> None:
    repo = FakeTasksDataSource()

    with pytest.raises(EmptyTaskError):
        await create_task(repo, "   ", None)

    assert repo.calls == []


@pytest.mark.asyncio
async def test_update_task_keeps_id_and_reactivates() -> None:
    original = Task("old", "", is_completed=True)
    repo = FakeTasksDataSource([original])

    edited = await update_task(repo, original.id, "new", "details")

    assert edited.id == original.id
    assert edited.is_active
    assert repo.tasks[original.id] == edited


@pytest.mark.asyncio
async def test_update_to_empty_is_rejected() -> None:
    repo = FakeTasksDataSource()

    with pytest.raises(EmptyTaskError):
        await update_task(repo, "some-id", "", "")


def test_filter_tasks() -> None:
    active = Task("a", "")
    done = Task("b", "", is_completed=True)
    tasks = [active, done]

    assert filter_tasks(tasks, TasksFilterType.ALL) == tasks
    assert filter_tasks(tasks, TasksFilterType.ACTIVE) == [active]
    assert filter_tasks(tasks, TasksFilterType.COMPLETED) == [done]


@pytest.mark.asyncio
async def test_load_tasks_force_update_refreshes_first() -> None:
    active = Task("a", "")
    repo = FakeTasksDataSource([active, Task("b", "", is_completed=True)])

    tasks = await load_tasks(repo, TasksFilterType.ACTIVE, force_update=True)

    assert tasks == [active]
    assert [name for name, _ in repo.calls] == ["refresh_tasks", "get_tasks"]


@pytest.mark.asyncio
async def test_load_tasks_without_data_is_empty(repo) -> None:
    assert await load_tasks(repo) == []


def test_compute_statistics() -> None:
    tasks = [Task("a", ""), Task("b", "", is_completed=True), Task("c", "", is_completed=True)]

    assert compute_statistics(tasks) == TaskStatistics(active=1, completed=2)
    assert compute_statistics([]) == TaskStatistics()


@pytest.mark.asyncio
async def test_load_statistics_through_repository(repo) -> None:
    assert await load_statistics(repo) == TaskStatistics()

    await repo.save_task(Task("a", ""))
    await repo.save_task(Task("b", "", is_completed=True))

    assert await load_statistics(repo) == TaskStatistics(active=1, completed=1)
