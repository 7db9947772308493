# src/todo_companion/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the local store, the remote service and the caching repository into AppState.
"""

from __future__ import annotations

import contextlib
import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.local_source import TasksLocalDataSource
from ..tasks.remote_source import TasksRemoteDataSource
from ..tasks.repository import TasksRepository

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    local_source = TasksLocalDataSource(settings.tasks_db_path)
    remote_source = TasksRemoteDataSource(
        latency_seconds=settings.remote_latency_seconds,
        seed_demo_tasks=settings.remote_seed_demo,
    )

    state = AppState(
        settings=settings,
        tasks=TasksRepository(remote_source, local_source),
        local_source=local_source,
        remote_source=remote_source,
    )
    logger.info("Task repository wired (db=%s)", settings.tasks_db_path)
    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    for source in (state.local_source, state.remote_source):
        close = getattr(source, "close", None)
        if callable(close):
            with contextlib.suppress(Exception):
                close()
