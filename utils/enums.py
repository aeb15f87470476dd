"""
Enums and constants for the activity tracker
Centralized location for application constants
"""

from __future__ import annotations

from datetime import date
from enum import Enum, IntEnum
from typing import Any


class DayOfWeek(IntEnum):
    """Weekday on the ISO scale: Monday is 1, Sunday is 7."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def all(cls) -> list[DayOfWeek]:
        """Every weekday, Monday first."""
        return sorted(cls)

    @classmethod
    def from_date(cls, value: date) -> DayOfWeek:
        return cls(value.isoweekday())

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def short_label(self) -> str:
        # Monday -> Mon, Tuesday -> Tue
        return self.label[:3]


WEEKDAYS: frozenset[DayOfWeek] = frozenset(DayOfWeek.all()[:5])
WEEKEND_DAYS: frozenset[DayOfWeek] = frozenset({DayOfWeek.SATURDAY, DayOfWeek.SUNDAY})
EVERY_DAY: frozenset[DayOfWeek] = frozenset(DayOfWeek)


class Priority(IntEnum):
    """Project and task priority"""

    MEH = 1
    MAYBE = 2
    MUST = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Granularity(Enum):
    """Bucketing granularity for calendar keys"""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class Timeframe(Enum):
    """Reporting timeframe enumeration"""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ALL_TIME = "all_time"

    @property
    def granularity(self) -> Granularity | None:
        """Bucket granularity for this timeframe, None for all-time."""
        return _TIMEFRAME_GRANULARITY[self]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


_TIMEFRAME_GRANULARITY: dict[Timeframe, Granularity | None] = {
    Timeframe.DAILY: Granularity.DAY,
    Timeframe.WEEKLY: Granularity.WEEK,
    Timeframe.MONTHLY: Granularity.MONTH,
    Timeframe.ALL_TIME: None,
}


class AccentColor(str, Enum):
    """Accent color preference"""

    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    PURPLE = "purple"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class LogLevel(Enum):
    """Logging level enumeration"""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Enums:
    """Container class for all application enums with utility methods for validation and listing."""

    DayOfWeek = DayOfWeek
    Priority = Priority
    Granularity = Granularity
    Timeframe = Timeframe
    AccentColor = AccentColor
    LogLevel = LogLevel

    @classmethod
    def list_enum_names(cls) -> list[str]:
        """Return a list of all enum class names in this container."""
        return [
            name
            for name in dir(cls)
            if isinstance(getattr(cls, name), type) and issubclass(getattr(cls, name), Enum)
        ]

    def is_valid_value(self, enum_name: str, value: Any) -> bool:
        """Validate if a value is valid for the specified enum.

        Args:
            enum_name (str): The name of the enum class (e.g., 'Timeframe').
            value: The value to validate.

        Returns:
            bool: True if the value is valid for the enum, False otherwise.
        """
        if not isinstance(enum_name, str):
            return False

        enum_class = getattr(self, enum_name, None)
        if enum_class and issubclass(enum_class, Enum):
            return isinstance(value, enum_class)
        return False


def repeat_days_label(repeat_days: set[DayOfWeek] | frozenset[DayOfWeek]) -> str:
    """Human summary of a weekly repeat pattern."""
    days = frozenset(repeat_days)
    if not days:
        return "Never"
    if days == WEEKDAYS:
        return "Every Weekday"
    if days == WEEKEND_DAYS:
        return "Every Weekend Day"
    if days == EVERY_DAY:
        return "Every Day"
    return ", ".join(day.short_label for day in sorted(days))
