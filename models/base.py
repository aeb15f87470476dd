"""
Base models and serialization utilities for the activity tracker.

Provides consistent patterns for identity and serialization: tags are always
lists in models, datetimes are naive local datetimes in models and ISO-8601
strings in the persisted dictionaries.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
import uuid


# Type aliases for clarity
TagList = list[str]


def new_id() -> str:
    """Opaque unique identifier for a new entity."""
    return str(uuid.uuid4())


def normalize_tags(tags: str | list[str] | tuple[str, ...] | set[str] | None) -> TagList:
    """Normalize tags from various input formats to consistent array format.

    Args:
        tags: Tags as string (comma-separated), list, or None

    Returns:
        List of tags in original order, empty if None
    """
    if tags is None:
        return []

    if isinstance(tags, str):
        return [tag.strip() for tag in tags.split(",") if tag.strip()]

    if isinstance(tags, list | tuple | set):
        return [str(tag).strip() for tag in tags if str(tag).strip()]

    # Fallback for unexpected types
    return []


def serialize_datetime(value: datetime | date | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-like datetime string to datetime, robust to minor variations."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    v = str(value).strip()
    if " " in v and "T" not in v:
        v = v.replace(" ", "T", 1)
    try:
        return datetime.fromisoformat(v)
    except ValueError:
        return None


class IdentityMixin:
    """Equality and hashing by ``id``, so entities work as set and dict keys."""

    id: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.id))
