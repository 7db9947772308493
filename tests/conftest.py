# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_companion.cli.bootstrap import create_initial_state
from todo_companion.core.state import AppState
from todo_companion.tasks.repository import TasksRepository

from .fakes import FakeTasksDataSource


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        # No simulated latency and no demo data in tests.
        remote_latency_seconds=0.0,
        remote_seed_demo=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired by the real composition root.

    NOTE: the local store is real SQLite (tmp dir) because its behavior
    is part of what we want to test.
    """
    return create_initial_state(settings=settings)


@pytest.fixture()
def remote() -> FakeTasksDataSource:
    return FakeTasksDataSource(resolve_ids=False)


@pytest.fixture()
def local() -> FakeTasksDataSource:
    return FakeTasksDataSource()


@pytest.fixture()
def repo(remote: FakeTasksDataSource, local: FakeTasksDataSource) -> TasksRepository:
    # A fresh repository per test: no state leaks between tests.
    return TasksRepository(remote, local)
