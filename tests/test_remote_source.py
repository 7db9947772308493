# tests/test_remote_source.py

from __future__ import annotations

import asyncio

import pytest

from todo_companion.core.errors import TaskNotFoundError
from todo_companion.tasks.remote_source import DEMO_TASKS, TasksRemoteDataSource
from todo_companion.tasks.task_models import Task


@pytest.mark.asyncio
async def test_seeded_with_demo_tasks() -> None:
    remote = TasksRemoteDataSource(latency_seconds=0.0)

    tasks = await remote.get_tasks()

    assert [(t.title, t.description) for t in tasks] == list(DEMO_TASKS)
    assert all(t.is_active for t in tasks)


@pytest.mark.asyncio
async def test_id_only_status_changes_are_ignored() -> None:
    task = Task("remote", "")
    remote = TasksRemoteDataSource(latency_seconds=0.0, seed_demo_tasks=False)
    remote.add_tasks(task)

    await remote.complete_task(task.id)
    assert (await remote.get_task(task.id)).is_active is True

    await remote.complete_task(task)
    assert (await remote.get_task(task.id)).is_completed is True

    await remote.activate_task(task.id)
    assert (await remote.get_task(task.id)).is_completed is True

    await remote.activate_task(task)
    assert (await remote.get_task(task.id)).is_active is True


@pytest.mark.asyncio
async def test_clear_delete_and_not_found() -> None:
    active = Task("active", "")
    done = Task("done", "", is_completed=True)
    remote = TasksRemoteDataSource(latency_seconds=0.0, seed_demo_tasks=False)
    remote.add_tasks(active, done)

    await remote.clear_completed_tasks()
    assert await remote.get_tasks() == [active]

    await remote.delete_task(active.id)
    with pytest.raises(TaskNotFoundError):
        await remote.get_task(active.id)

    await remote.save_task(done)
    await remote.delete_all_tasks()
    assert await remote.get_tasks() == []


@pytest.mark.asyncio
async def test_every_call_waits_for_latency() -> None:
    remote = TasksRemoteDataSource(latency_seconds=0.05, seed_demo_tasks=False)
    loop = asyncio.get_running_loop()

    started = loop.time()
    await remote.save_task(Task("slow", ""))
    await remote.get_tasks()

    assert loop.time() - started >= 0.09
