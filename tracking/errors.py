"""
Error types used across the tracker.

These are intentionally simple and typed for clear error handling paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class TrackerError(Exception):
    """Base class for tracker errors."""


class ValidationError(TrackerError):
    """
    Raised when input is rejected before any store mutation.

    Attributes:
        details: Individual violation messages.
    """

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details: list[str] = list(details or [])


class PersistenceFailure(TrackerError):
    """
    Raised when the store collaborator fails an insert, delete or fetch.

    Attributes:
        operation: "insert", "delete" or "fetch".
        entity: Short description of the entity involved (e.g. "Task 1f0c...").
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        operation: str | None = None,
        entity: str | None = None,
    ) -> None:
        if not message:
            if operation and entity:
                message = f"{operation} failed for {entity}"
            elif operation:
                message = f"{operation} failed"
            else:
                message = "persistence failure"
        super().__init__(message)
        self.operation: str | None = operation
        self.entity: str | None = entity


class InvariantViolation(TrackerError):
    """
    Raised internally for states that should not occur, such as stopping an
    idle stopwatch. Callers absorb it as a logged no-op where that is safe.
    """


@dataclass
class CascadeReport:
    """Outcome of a multi-entity delete."""

    deleted: list[str] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures

    def merge(self, other: CascadeReport) -> None:
        self.deleted.extend(other.deleted)
        self.failures.extend(other.failures)
