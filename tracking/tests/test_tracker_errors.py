"""
Tests for tracker error types.
"""

from ..errors import CascadeReport, PersistenceFailure, TrackerError, ValidationError


def test_validation_error_details():
    error = ValidationError("Cannot add task", details=["Task name cannot be empty"])

    assert isinstance(error, TrackerError)
    assert str(error) == "Cannot add task"
    assert error.details == ["Task name cannot be empty"]
    assert ValidationError("bad").details == []


def test_persistence_failure_builds_message():
    error = PersistenceFailure(operation="delete", entity="Task abc")

    assert str(error) == "delete failed for Task abc"
    assert error.operation == "delete"
    assert error.entity == "Task abc"
    assert str(PersistenceFailure(operation="fetch")) == "fetch failed"
    assert str(PersistenceFailure("custom")) == "custom"


def test_cascade_report_merge():
    first = CascadeReport(deleted=["s1"])
    second = CascadeReport(deleted=["t1"], failures=[("p1", "delete failed for Project p1")])

    assert first.success

    first.merge(second)

    assert first.deleted == ["s1", "t1"]
    assert first.success is False
