"""
Persistence interface for the tracker.
Protocol-based so any store (SQL, document, in-memory) can be injected.
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from models.project import Project, Task
from models.session import Session
from models.settings import Settings

Entity = Project | Task | Session | Settings
T = TypeVar("T")


class EntityStore(Protocol):
    """Opaque persistence collaborator.

    Inserted and deleted entities must be visible to subsequent reads. Any
    exception raised is treated by callers as a failed single-entity write
    or read.
    """

    def insert(self, entity: Any) -> None:
        """Durably keep ``entity``; inserting an already stored entity updates it."""
        ...

    def delete(self, entity: Any) -> None:
        """Remove ``entity``."""
        ...

    def fetch_all(
        self, entity_type: type[T], predicate: Callable[[T], bool] | None = None
    ) -> list[T]:
        """Every stored entity of ``entity_type`` matching ``predicate``, in store order."""
        ...
