# src/todo_companion/tasks/repository.py

"""
Caching task repository.

Sits in front of two data sources (remote service + local SQLite store) and
implements the same TasksDataSource contract itself, so callers never see
which tier answered.

Read policy:
- get_tasks: clean cache -> cache; dirty cache -> remote (authoritative, written
  through to local); cold cache -> local if non-empty, else remote.
- get_task: cache -> local -> remote (the cache answers even when dirty).

Writes go to remote, then local, then the cache. The cache is updated even if a
tier fails; the first failure is re-raised to the caller.

Concurrency:
- one asyncio.Lock guards the cache map, the dirty flag and the in-flight table
- tier I/O never runs while the lock is held
- identical concurrent reads share a single in-flight load
- a refresh issued while a remote load runs keeps the cache dirty; only an
  authoritative load started after the latest refresh clears the flag
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, TypeVar

from ..core.errors import NoDataAvailableError, TaskNotFoundError
from ..core.ports import TasksDataSource
from .task_models import Task

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _retrieve_exception(load: asyncio.Task[Any]) -> None:
    # Every caller of a shared load may have been cancelled; mark its error as seen.
    if not load.cancelled():
        load.exception()


class TasksRepository:
    def __init__(self, remote: TasksDataSource, local: TasksDataSource) -> None:
        self._remote = remote
        self._local = local

        # None until the first successful fetch or the first write.
        self._cached_tasks: dict[str, Task] | None = None
        self._cache_is_dirty = False
        # Bumped by every refresh_tasks(); a remote load only clears the dirty
        # flag if no refresh happened after it started.
        self._refresh_generation = 0

        self._lock = asyncio.Lock()
        self._in_flight: dict[Hashable, asyncio.Task[Any]] = {}

    # ---- introspection (tests, /status) ----

    @property
    def cached_tasks(self) -> dict[str, Task] | None:
        return None if self._cached_tasks is None else dict(self._cached_tasks)

    @property
    def cache_is_dirty(self) -> bool:
        return self._cache_is_dirty

    # ---- cache helpers (call with the lock held) ----

    def _ensure_cache(self) -> dict[str, Task]:
        if self._cached_tasks is None:
            self._cached_tasks = {}
        return self._cached_tasks

    def _cached_task(self, task_id: str) -> Task | None:
        if not self._cached_tasks:
            return None
        return self._cached_tasks.get(task_id)

    def _join_or_start(self, key: Hashable, factory: Callable[[], Awaitable[_T]]) -> asyncio.Task[_T]:
        load = self._in_flight.get(key)
        if load is not None:
            logger.debug("Joining in-flight load %s", key)
            return load
        load = asyncio.create_task(self._run_load(key, factory))
        load.add_done_callback(_retrieve_exception)
        self._in_flight[key] = load
        return load

    async def _run_load(self, key: Hashable, factory: Callable[[], Awaitable[_T]]) -> _T:
        try:
            return await factory()
        finally:
            async with self._lock:
                if self._in_flight.get(key) is asyncio.current_task():
                    del self._in_flight[key]

    async def _cache_put(self, *tasks: Task) -> None:
        async with self._lock:
            cache = self._ensure_cache()
            for task in tasks:
                cache[task.id] = task

    # ---- reads ----

    async def get_tasks(self) -> list[Task]:
        """
        Return all tasks from the cache, the local store or the remote service.

        Raises NoDataAvailableError instead of returning an empty list.
        """
        async with self._lock:
            if self._cached_tasks is not None and not self._cache_is_dirty:
                if not self._cached_tasks:
                    raise NoDataAvailableError()
                logger.debug("get_tasks served from cache (%d)", len(self._cached_tasks))
                return list(self._cached_tasks.values())

            authoritative = self._cache_is_dirty
            generation = self._refresh_generation
            load = self._join_or_start(
                ("all", authoritative, generation),
                lambda: self._load_tasks(authoritative=authoritative, generation=generation),
            )

        # Shielded: a cancelled caller must not cancel a load others may share.
        return await asyncio.shield(load)

    async def _load_tasks(self, *, authoritative: bool, generation: int) -> list[Task]:
        if authoritative:
            logger.debug("Cache dirty; loading tasks from remote")
            tasks = await self._load_remote_tasks(authoritative=True, generation=generation)
        else:
            local_tasks = await self._local.get_tasks()
            if local_tasks:
                await self._cache_put(*local_tasks)
                logger.debug("get_tasks served from local (%d)", len(local_tasks))
                return local_tasks

            logger.debug("Local store empty; loading tasks from remote")
            tasks = await self._load_remote_tasks(authoritative=False, generation=generation)

        if not tasks:
            raise NoDataAvailableError()
        return tasks

    async def _load_remote_tasks(self, *, authoritative: bool, generation: int) -> list[Task]:
        tasks = await self._remote.get_tasks()

        async with self._lock:
            # A cold read that found nothing anywhere leaves the cache uninitialized.
            if tasks or authoritative:
                cache = self._ensure_cache()
                for task in tasks:
                    cache[task.id] = task
            if authoritative and generation == self._refresh_generation:
                self._cache_is_dirty = False
            elif self._cache_is_dirty:
                logger.debug("Refresh requested during remote load; cache stays dirty")

        for task in tasks:
            await self._local.save_task(task)

        logger.debug("get_tasks served from remote (%d), written through to local", len(tasks))
        return tasks

    async def get_task(self, task_id: str) -> Task:
        """
        Return one task from the cache, the local store or the remote service.

        A cached task is returned even when the cache is marked dirty.
        """
        async with self._lock:
            cached = self._cached_task(task_id)
            if cached is not None:
                return cached
            load = self._join_or_start(("one", task_id), lambda: self._load_task(task_id))

        return await asyncio.shield(load)

    async def _load_task(self, task_id: str) -> Task:
        try:
            task = await self._local.get_task(task_id)
        except TaskNotFoundError:
            logger.debug("Task %s not in local store; asking remote", task_id)
        else:
            await self._cache_put(task)
            return task

        task = await self._remote.get_task(task_id)
        await self._cache_put(task)
        await self._local.save_task(task)
        return task

    # ---- writes ----

    async def _write_through(self, op: str, call: Callable[[TasksDataSource], Awaitable[None]]) -> None:
        """Run `call` on remote, then local; re-raise the first failure."""
        first_error: Exception | None = None
        for name, source in (("remote", self._remote), ("local", self._local)):
            try:
                await call(source)
            except Exception as e:
                if first_error is None:
                    first_error = e
                else:
                    logger.warning("%s failed on %s after an earlier failure", op, name, exc_info=True)
        if first_error is not None:
            raise first_error

    async def save_task(self, task: Task) -> None:
        try:
            await self._write_through("save_task", lambda source: source.save_task(task))
        finally:
            await self._cache_put(task)

    async def complete_task(self, task: Task | str) -> None:
        target = await self._resolve(task)
        if target is None:
            return
        try:
            await self._write_through("complete_task", lambda source: source.complete_task(target))
        finally:
            await self._cache_put(target.as_completed())

    async def activate_task(self, task: Task | str) -> None:
        target = await self._resolve(task)
        if target is None:
            return
        try:
            await self._write_through("activate_task", lambda source: source.activate_task(target))
        finally:
            await self._cache_put(target.as_active())

    async def _resolve(self, task: Task | str) -> Task | None:
        if isinstance(task, Task):
            return task
        async with self._lock:
            cached = self._cached_task(task)
        if cached is None:
            logger.debug("Task id %s is not cached; ignoring status change", task)
        return cached

    async def clear_completed_tasks(self) -> None:
        try:
            await self._write_through("clear_completed_tasks", lambda source: source.clear_completed_tasks())
        finally:
            async with self._lock:
                cache = self._ensure_cache()
                for task_id in [k for k, t in cache.items() if t.is_completed]:
                    del cache[task_id]

    async def delete_all_tasks(self) -> None:
        try:
            await self._write_through("delete_all_tasks", lambda source: source.delete_all_tasks())
        finally:
            async with self._lock:
                # Empty but initialized: unless a refresh is pending, the next get_tasks
                # reports no data without a reload.
                self._cached_tasks = {}

    async def delete_task(self, task_id: str) -> None:
        try:
            await self._write_through("delete_task", lambda source: source.delete_task(task_id))
        finally:
            async with self._lock:
                if self._cached_tasks is not None:
                    self._cached_tasks.pop(task_id, None)

    async def refresh_tasks(self) -> None:
        async with self._lock:
            self._cache_is_dirty = True
            self._refresh_generation += 1
        logger.debug("Task cache marked dirty (generation %d)", self._refresh_generation)
