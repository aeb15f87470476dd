from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tracking.errors import ValidationError
from utils.enums import AccentColor

from .base import IdentityMixin, new_id, parse_datetime, serialize_datetime

DEFAULT_FONT_SIZE = 14.0


@dataclass(frozen=True)
class Tag:
    """Entry in the global tag vocabulary."""

    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str) -> Tag:
        if isinstance(data, str):
            return cls(name=data)
        return cls(name=str(data.get("name", "")))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True)
class HourAndMinute:
    """Time of day for the daily reminder."""

    hour: int
    minute: int

    def __post_init__(self) -> None:
        errors = []
        if not 0 <= self.hour <= 23:
            errors.append(f"hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            errors.append(f"minute must be between 0 and 59, got {self.minute}")
        if errors:
            raise ValidationError("Invalid notification time", details=errors)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HourAndMinute:
        return cls(hour=int(data.get("hour", 0)), minute=int(data.get("minute", 0)))

    def to_dict(self) -> dict[str, Any]:
        return {"hour": self.hour, "minute": self.minute}

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(eq=False)
class Settings(IdentityMixin):
    """Singleton-per-store user preferences and tag vocabulary."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    birthday: datetime | None = None
    accent_color: AccentColor = AccentColor.YELLOW
    available_tags: list[Tag] = field(default_factory=list)
    notification_time: HourAndMinute | None = None
    font_size: float | None = DEFAULT_FONT_SIZE
    id: str = field(default_factory=new_id)

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.available_tags]

    def has_tag(self, name: str) -> bool:
        wanted = name.casefold()
        return any(tag.name.casefold() == wanted for tag in self.available_tags)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        notification_raw = data.get("notification_time")
        try:
            accent = AccentColor(str(data.get("accent_color") or AccentColor.YELLOW.value))
        except ValueError:
            accent = AccentColor.YELLOW
        font_size = data.get("font_size", DEFAULT_FONT_SIZE)
        return cls(
            id=str(data.get("id") or new_id()),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            email=data.get("email"),
            birthday=parse_datetime(data.get("birthday")),
            accent_color=accent,
            available_tags=[Tag.from_dict(t) for t in data.get("available_tags") or []],
            notification_time=(
                HourAndMinute.from_dict(notification_raw)
                if isinstance(notification_raw, dict)
                else None
            ),
            font_size=float(font_size) if font_size is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "birthday": serialize_datetime(self.birthday),
            "accent_color": self.accent_color.value,
            "available_tags": [tag.to_dict() for tag in self.available_tags],
            "notification_time": (
                self.notification_time.to_dict() if self.notification_time else None
            ),
            "font_size": self.font_size,
        }
