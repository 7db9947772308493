# src/todo_companion/core/errors.py

"""
Error taxonomy shared by data sources, the repository and the console.

Data sources raise these; the repository re-raises them unchanged.
"""

from __future__ import annotations


class TasksError(Exception):
    """Base exception for task storage errors."""


class TaskNotFoundError(TasksError):
    """No tier (cache, local, remote) knows the task."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"No task found with task_id={task_id!r}")


class NoDataAvailableError(TasksError):
    """A full-list read found every consulted tier empty."""

    def __init__(self, message: str = "No tasks available") -> None:
        super().__init__(message)


class SourceFailureError(TasksError):
    """I/O of a single tier failed (storage or network)."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"{source}: {message}")


class EmptyTaskError(TasksError, ValueError):
    """A task must have a title or a description."""

    def __init__(self) -> None:
        super().__init__("Task must have a title or a description")


def friendly_error_message(err: Exception) -> str:
    if isinstance(err, TaskNotFoundError):
        return "Task not found."
    if isinstance(err, NoDataAvailableError):
        return "No tasks yet. Use /add to create one."
    if isinstance(err, EmptyTaskError):
        return "Tasks cannot be empty: give it a title or a description."
    if isinstance(err, SourceFailureError):
        return f"Could not load or save tasks ({err.source} unavailable)."
    return str(err).strip() or "Unexpected error."
