# src/todo_companion/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.repository import TasksRepository
from ..tasks.task_models import TasksFilterType
from .ports import TasksDataSource


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    # The one repository instance for this process; callers receive it from here.
    tasks: TasksRepository

    local_source: TasksDataSource
    remote_source: TasksDataSource

    # Listing preferences of the console session.
    filtering: TasksFilterType = TasksFilterType.ALL
    first_load: bool = True
