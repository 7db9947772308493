# tests/test_task_models.py

from __future__ import annotations

import dataclasses

import pytest

from todo_companion.tasks.task_models import Task, TasksFilterType, TaskStatistics


def test_new_task_defaults() -> None:
    a = Task("a", "")
    b = Task("b", "")

    assert a.is_active is True
    assert a.is_completed is False
    assert a.id and b.id and a.id != b.id


@pytest.mark.parametrize(
    ("title", "description", "empty", "shown"),
    [
        ("Title", "Desc", False, "Title"),
        ("", "Desc", False, "Desc"),
        (None, "Desc", False, "Desc"),
        ("Title", None, False, "Title"),
        ("", "", True, ""),
        (None, None, True, None),
    ],
)
def test_derived_fields(title, description, empty, shown) -> None:
    task = Task(title, description)

    assert task.is_empty is empty
    assert task.title_for_list == shown


def test_status_changes_return_new_values() -> None:
    task = Task("t", "d")

    done = task.as_completed()

    assert done is not task
    assert done.id == task.id
    assert done.is_completed is True
    assert task.is_completed is False
    assert done.as_active() == task


def test_tasks_are_immutable() -> None:
    task = Task("t", "d")

    with pytest.raises(dataclasses.FrozenInstanceError):
        task.title = "changed"  # type: ignore[misc]


def test_filter_type_parse() -> None:
    assert TasksFilterType.parse("Active") == TasksFilterType.ACTIVE
    assert TasksFilterType.parse("completed") == TasksFilterType.COMPLETED
    assert TasksFilterType.parse(None) == TasksFilterType.ALL
    assert TasksFilterType.parse("bogus") == TasksFilterType.ALL


def test_statistics_percentages() -> None:
    stats = TaskStatistics(active=1, completed=3)

    assert stats.total == 4
    assert stats.active_percent == 25.0
    assert stats.completed_percent == 75.0
    assert TaskStatistics().active_percent == 0.0
