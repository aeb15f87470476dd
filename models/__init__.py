"""
Entity models shared by the tracking engine and the store adapter.
Plain dataclasses with no persistence dependencies.
"""

from .project import Project, Task
from .session import Interval, Session
from .settings import HourAndMinute, Settings, Tag


__all__ = [
    "Project",
    "Task",
    "Session",
    "Interval",
    "Settings",
    "Tag",
    "HourAndMinute",
]
