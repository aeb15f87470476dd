from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from tracking.errors import ValidationError

from .base import IdentityMixin, new_id, parse_datetime, serialize_datetime


@dataclass(frozen=True)
class Interval:
    """One contiguous start/end pair within a Session."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValidationError(
                "Interval end precedes its start",
                details=[f"start={self.start.isoformat()} end={self.end.isoformat()}"],
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Interval:
        start = parse_datetime(data.get("start"))
        end = parse_datetime(data.get("end"))
        if start is None or end is None:
            raise ValidationError("Interval requires both start and end", details=[repr(data)])
        return cls(start=start, end=end)

    def to_dict(self) -> dict[str, Any]:
        return {"start": serialize_datetime(self.start), "end": serialize_datetime(self.end)}

    def as_tuple(self) -> tuple[datetime, datetime]:
        return (self.start, self.end)


@dataclass(eq=False)
class Session(IdentityMixin):
    """Time spent on a Task, filed under one calendar day.

    ``task_id`` is a weak back-reference: deleting the task does not delete
    the session unless the caller cascades.
    """

    task_id: str
    completion_date: datetime
    intervals: list[Interval] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    @property
    def total_duration(self) -> timedelta:
        return sum((interval.duration for interval in self.intervals), timedelta())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        completion_date = parse_datetime(data.get("completion_date"))
        if completion_date is None:
            raise ValidationError("Session requires a completion date", details=[repr(data)])
        return cls(
            id=str(data.get("id") or new_id()),
            task_id=str(data.get("task_id", "")),
            completion_date=completion_date,
            intervals=[Interval.from_dict(i) for i in data.get("intervals") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "completion_date": serialize_datetime(self.completion_date),
            "intervals": [interval.to_dict() for interval in self.intervals],
        }

    def __repr__(self) -> str:
        return (
            f"Session(id='{self.id}', task_id='{self.task_id}', "
            f"completion_date={self.completion_date.date().isoformat()}, "
            f"intervals={len(self.intervals)})"
        )
