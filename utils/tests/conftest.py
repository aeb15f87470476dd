"""
Shared fixtures for utils tests
"""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_tracker_environment(monkeypatch):
    """Keep host ACTIVITY_TRACKER_* variables from leaking into config tests"""
    for key in list(os.environ):
        if key.startswith("ACTIVITY_TRACKER_"):
            monkeypatch.delenv(key, raising=False)
