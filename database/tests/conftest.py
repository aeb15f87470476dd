"""
Shared fixtures and test configuration for database tests
"""

from datetime import datetime
from unittest.mock import patch

import pytest

from database.memory_store import InMemoryStore
from database.tracker_service import TrackerService
from models.project import Project, Task
from utils.config_loader import TrackerConfig

FIXED_NOW = datetime(2024, 1, 1, 9, 0)


def create_test_project(name: str = "Test Project", **kwargs) -> Project:
    """Factory function to create test projects"""
    defaults = {"name": name, "start_date": FIXED_NOW}
    defaults.update(kwargs)
    return Project(**defaults)


def create_test_task(name: str = "Test Task", **kwargs) -> Task:
    """Factory function to create test tasks"""
    defaults = {"name": name, "start_date": FIXED_NOW}
    defaults.update(kwargs)
    return Task(**defaults)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def config():
    return TrackerConfig()


@pytest.fixture
def service(store, config):
    return TrackerService(store, config, clock=lambda: FIXED_NOW)


@pytest.fixture
def mock_sentry():
    """Capture forwarded exceptions instead of sending them"""
    with patch("database.error_reporting.sentry_sdk") as sentry:
        yield sentry


@pytest.fixture
def populated(service):
    """Two projects with two tasks each, created through the service"""
    health = service.create_project("Health", priority=3)
    run = service.add_task(health, "Run", tags=["cardio"], repeat_days=[1, 3])
    stretch = service.add_task(health, "Stretch", tags=["mobility"])
    work = service.create_project("Work", priority=1)
    email = service.add_task(work, "Email", tags=["admin"], repeat_days=[1, 2, 3, 4, 5])
    report = service.add_task(work, "Report")
    return {
        "health": health,
        "work": work,
        "run": run,
        "stretch": stretch,
        "email": email,
        "report": report,
    }
