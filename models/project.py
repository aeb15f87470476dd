from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from utils.enums import DayOfWeek, Priority, repeat_days_label
from utils.logger import Logger

from .base import IdentityMixin, TagList, new_id, normalize_tags, parse_datetime, serialize_datetime


def coerce_repeat_days(raw: Any) -> set[DayOfWeek]:
    """Convert persisted weekday values (ints or names) into DayOfWeek, dropping invalid ones."""
    days: set[DayOfWeek] = set()
    if not raw:
        return days
    if isinstance(raw, str | int):
        raw = [raw]
    for value in raw:
        try:
            if isinstance(value, str) and not value.isdigit():
                days.add(DayOfWeek[value.upper()])
            else:
                days.add(DayOfWeek(int(value)))
        except (KeyError, ValueError, TypeError):
            Logger().warning(f"Ignoring invalid repeat day value: {value!r}")
    return days


@dataclass(eq=False)
class Task(IdentityMixin):
    """A recurring or one-off activity owned by exactly one Project."""

    name: str
    start_date: datetime = field(default_factory=datetime.now)
    tags: TagList = field(default_factory=list)
    priority: int = Priority.MAYBE
    repeat_days: set[DayOfWeek] = field(default_factory=set)
    id: str = field(default_factory=new_id)

    @property
    def repeat_label(self) -> str:
        return repeat_days_label(self.repeat_days)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """Create Task from its persisted dictionary."""
        start_date = parse_datetime(data.get("start_date")) or datetime.now()
        return cls(
            id=str(data.get("id") or new_id()),
            name=str(data.get("name", "")),
            start_date=start_date,
            tags=normalize_tags(data.get("tags")),
            priority=int(data.get("priority") or Priority.MAYBE),
            repeat_days=coerce_repeat_days(data.get("repeat_days")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "start_date": serialize_datetime(self.start_date),
            "tags": list(self.tags),
            "priority": int(self.priority),
            "repeat_days": sorted(int(day) for day in self.repeat_days),
        }

    def __repr__(self) -> str:
        return (
            f"Task(id='{self.id}', name='{self.name}', "
            f"start_date={self.start_date.isoformat()}, repeat='{self.repeat_label}')"
        )


@dataclass(eq=False)
class Project(IdentityMixin):
    """A named grouping of Tasks. Deleting a project deletes its tasks."""

    name: str
    tasks: list[Task] = field(default_factory=list)
    start_date: datetime = field(default_factory=datetime.now)
    priority: int = Priority.MAYBE
    id: str = field(default_factory=new_id)

    def find_task(self, task_id: str) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    def has_task_named(self, name: str) -> bool:
        wanted = name.casefold()
        return any(task.name.casefold() == wanted for task in self.tasks)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        """Create Project (and its owned tasks) from its persisted dictionary."""
        tasks_raw = data.get("tasks") or []
        tasks = [Task.from_dict(t) for t in tasks_raw if isinstance(t, dict)]
        return cls(
            id=str(data.get("id") or new_id()),
            name=str(data.get("name", "")),
            tasks=tasks,
            start_date=parse_datetime(data.get("start_date")) or datetime.now(),
            priority=int(data.get("priority") or Priority.MAYBE),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tasks": [task.to_dict() for task in self.tasks],
            "start_date": serialize_datetime(self.start_date),
            "priority": int(self.priority),
        }

    def __repr__(self) -> str:
        return f"Project(id='{self.id}', name='{self.name}', tasks={len(self.tasks)})"
