# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_companion import config
from todo_companion.config import Settings

_VARS = (
    "TODO_APP_NAME",
    "TODO_LOG_LEVEL",
    "TODO_DATA_DIR",
    "TODO_TASKS_DB_PATH",
    "TODO_REMOTE_LATENCY_SECONDS",
    "TODO_REMOTE_SEED_DEMO",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env) -> None:
    s = Settings.from_env()

    assert s.app_name == "todo"
    assert s.log_level == "INFO"
    assert s.data_dir == Path(".local/todo")
    assert s.tasks_db_path == Path(".local/todo") / "tasks.sqlite3"
    assert s.remote_latency_seconds == 2.0
    assert s.remote_seed_demo is True


def test_env_overrides(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("TODO_APP_NAME", "  ")
    clean_env.setenv("TODO_DATA_DIR", str(tmp_path))
    clean_env.setenv("TODO_REMOTE_LATENCY_SECONDS", "0.25")
    clean_env.setenv("TODO_REMOTE_SEED_DEMO", "off")

    s = Settings.from_env()

    assert s.app_name == "todo"
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.remote_latency_seconds == 0.25
    assert s.remote_seed_demo is False


def test_bad_numbers_fall_back(clean_env) -> None:
    clean_env.setenv("TODO_REMOTE_LATENCY_SECONDS", "fast")
    assert Settings.from_env().remote_latency_seconds == 2.0

    clean_env.setenv("TODO_REMOTE_LATENCY_SECONDS", "-3")
    assert Settings.from_env().remote_latency_seconds == 0.0


def test_get_settings_is_built_once(clean_env, tmp_path: Path) -> None:
    clean_env.chdir(tmp_path)
    clean_env.setattr(config, "_SETTINGS", None)
    clean_env.setenv("TODO_LOG_LEVEL", "DEBUG")

    first = config.get_settings()
    clean_env.setenv("TODO_LOG_LEVEL", "ERROR")

    assert config.get_settings() is first
    assert first.log_level == "DEBUG"
