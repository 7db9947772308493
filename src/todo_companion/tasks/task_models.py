# src/todo_companion/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import StrEnum


def _new_task_id() -> str:
    return str(uuid.uuid4())


class TasksFilterType(StrEnum):
    """Which tasks a listing shows."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TasksFilterType:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


@dataclass(frozen=True, slots=True)
class Task:
    """
    Immutable to-do item.

    Tasks sharing an id are the same logical task; a status change builds a new
    value with the same id instead of mutating this one.
    """

    title: str | None = None
    description: str | None = None
    id: str = field(default_factory=_new_task_id)
    is_completed: bool = False

    @property
    def is_active(self) -> bool:
        return not self.is_completed

    @property
    def is_empty(self) -> bool:
        return not self.title and not self.description

    @property
    def title_for_list(self) -> str | None:
        if self.title:
            return self.title
        return self.description

    def as_completed(self) -> Task:
        return replace(self, is_completed=True)

    def as_active(self) -> Task:
        return replace(self, is_completed=False)


@dataclass(frozen=True, slots=True)
class TaskStatistics:
    active: int = 0
    completed: int = 0

    @property
    def total(self) -> int:
        return self.active + self.completed

    @property
    def active_percent(self) -> float:
        return 100.0 * self.active / self.total if self.total else 0.0

    @property
    def completed_percent(self) -> float:
        return 100.0 * self.completed / self.total if self.total else 0.0
