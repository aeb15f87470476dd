"""
Shared fixtures and test data factories for tracking tests
"""

from datetime import datetime, timedelta

import pytest

from models.project import Project, Task
from models.session import Interval, Session
from utils.enums import DayOfWeek


class FakeClock:
    """Manually advanced clock for deterministic stopwatch tests"""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def create_test_task(name: str = "Test Task", **kwargs) -> Task:
    """Factory function to create test tasks"""
    defaults = {
        "name": name,
        "start_date": datetime(2024, 1, 1, 8, 0),
        "tags": [],
        "repeat_days": set(),
    }
    defaults.update(kwargs)
    return Task(**defaults)


def create_test_session(
    task: Task, completion_date: datetime, minutes: int = 30, **kwargs
) -> Session:
    """Factory function to create a session holding one interval of ``minutes``"""
    start = completion_date.replace(hour=10, minute=0)
    defaults = {
        "task_id": task.id,
        "completion_date": completion_date,
        "intervals": [Interval(start=start, end=start + timedelta(minutes=minutes))],
    }
    defaults.update(kwargs)
    return Session(**defaults)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gym_task():
    """Task started Monday 2024-01-01, repeating Monday and Wednesday"""
    return create_test_task("Gym", repeat_days={DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY})


@pytest.fixture
def sample_projects():
    writing = Project(
        name="Writing",
        tasks=[
            create_test_task("Draft chapter", tags=["Deep Work"]),
            create_test_task("Edit notes", tags=["admin"]),
        ],
    )
    fitness = Project(
        name="Fitness",
        tasks=[
            create_test_task("Morning run", tags=["outdoor", "cardio"]),
            create_test_task("Stretching", tags=["work-life"]),
        ],
    )
    return [writing, fitness]
