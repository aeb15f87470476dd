"""
InMemoryStore - reference EntityStore keeping entities in insertion order.

Entities are held as their persisted dictionaries, so every read returns a
fresh object rebuilt through ``from_dict``. Used by tests and by callers that
do not need durability.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from models.project import Project, Task
from models.session import Session
from models.settings import Settings
from utils.logger import Logger

T = TypeVar("T")

SUPPORTED_TYPES: tuple[type, ...] = (Project, Task, Session, Settings)


class StoreError(RuntimeError):
    """Raised by InMemoryStore for injected or structural failures."""


class InMemoryStore:
    """Dictionary-backed store honoring the EntityStore protocol."""

    def __init__(self) -> None:
        self.logger = Logger()
        self._tables: dict[type, dict[str, dict[str, Any]]] = {t: {} for t in SUPPORTED_TYPES}
        # (operation, entity id) pairs that should fail, for exercising error paths
        self.fail_on: set[tuple[str, str]] = set()

    def _table(self, entity_type: type) -> dict[str, dict[str, Any]]:
        table = self._tables.get(entity_type)
        if table is None:
            raise StoreError(f"Unsupported entity type: {entity_type.__name__}")
        return table

    def _check_fault(self, operation: str, entity_id: str) -> None:
        if (operation, entity_id) in self.fail_on or (operation, "*") in self.fail_on:
            raise StoreError(f"Injected {operation} failure for {entity_id}")

    def insert(self, entity: Any) -> None:
        table = self._table(type(entity))
        self._check_fault("insert", entity.id)
        data = entity.to_dict()
        table[entity.id] = data
        if isinstance(entity, Project):
            # Owned tasks are stored alongside their project
            for task_data in data["tasks"]:
                self._tables[Task][task_data["id"]] = dict(task_data)
        elif isinstance(entity, Task):
            for project_data in self._tables[Project].values():
                project_data["tasks"] = [
                    dict(data) if t.get("id") == entity.id else t
                    for t in project_data.get("tasks", [])
                ]

    def delete(self, entity: Any) -> None:
        table = self._table(type(entity))
        self._check_fault("delete", entity.id)
        if entity.id not in table:
            raise StoreError(f"{type(entity).__name__} {entity.id} is not stored")
        data = table.pop(entity.id)
        if isinstance(entity, Project):
            for task_data in data.get("tasks", []):
                self._tables[Task].pop(task_data.get("id"), None)
        elif isinstance(entity, Task):
            # Keep the owning project's stored task list in sync
            for project_data in self._tables[Project].values():
                project_data["tasks"] = [
                    t for t in project_data.get("tasks", []) if t.get("id") != entity.id
                ]

    def fetch_all(
        self, entity_type: type[T], predicate: Callable[[T], bool] | None = None
    ) -> list[T]:
        table = self._table(entity_type)
        self._check_fault("fetch", entity_type.__name__)
        items = [entity_type.from_dict(data) for data in table.values()]  # type: ignore[attr-defined]
        if predicate is None:
            return items
        return [item for item in items if predicate(item)]

    def count(self, entity_type: type) -> int:
        return len(self._table(entity_type))
