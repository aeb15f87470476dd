"""
Tests for TrackerValidator business rules.
"""

import pytest

from database.tracker_validator import MAX_NAME_LENGTH, TrackerValidator, ValidationResult
from models.settings import Settings, Tag

from .conftest import create_test_project, create_test_task


@pytest.fixture
def validator():
    return TrackerValidator()


class TestValidationResult:
    def test_warnings_default_to_empty_list(self):
        result = ValidationResult(is_valid=True, errors=[])

        if result.warnings != []:
            raise AssertionError


class TestProjectCreation:
    def test_valid_project(self, validator):
        result = validator.validate_project_creation("Health", 2, [])

        assert result.is_valid
        assert result.errors == []

    def test_duplicate_name_is_case_insensitive(self, validator):
        existing = [create_test_project("Health")]

        result = validator.validate_project_creation("  HEALTH ", 2, existing)

        assert not result.is_valid
        assert "already exists" in result.errors[0]

    @pytest.mark.parametrize(
        "name,priority",
        [("", 2), ("   ", 2), (None, 2), ("x" * (MAX_NAME_LENGTH + 1), 2), ("ok", 0), ("ok", True)],
    )
    def test_invalid_inputs(self, validator, name, priority):
        assert not validator.validate_project_creation(name, priority, []).is_valid


class TestTaskCreation:
    def test_valid_task(self, validator):
        project = create_test_project("Health")

        result = validator.validate_task_creation("Run", project, 3, ["cardio"], [1, 3])

        assert result.is_valid

    def test_duplicate_task_name_within_project(self, validator):
        project = create_test_project("Health", tasks=[create_test_task("Run")])

        result = validator.validate_task_creation("run", project, 2, [], [])

        assert not result.is_valid

    def test_same_task_name_in_other_project_is_fine(self, validator):
        project = create_test_project("Work")

        assert validator.validate_task_creation("Run", project, 2, [], []).is_valid

    def test_invalid_repeat_day(self, validator):
        result = validator.validate_task_creation("Run", create_test_project(), 2, [], [8])

        assert not result.is_valid
        assert "repeat day" in result.errors[0]

    def test_duplicate_tags_warn(self, validator):
        result = validator.validate_task_creation(
            "Run", create_test_project(), 2, ["Cardio", "cardio"], []
        )

        assert result.is_valid
        assert result.warnings


class TestUpdates:
    def test_unknown_fields_rejected(self, validator):
        result = validator.validate_task_update({"id": "new"})

        assert not result.is_valid
        assert "Unknown fields: id" in result.errors

    def test_empty_name_rejected(self, validator):
        assert not validator.validate_project_update({"name": " "}).is_valid

    def test_empty_changes_warn(self, validator):
        result = validator.validate_project_update({})

        assert result.is_valid
        assert result.warnings == ["No changes supplied"]

    def test_bad_start_date_rejected(self, validator):
        assert not validator.validate_task_update({"start_date": "tomorrow"}).is_valid

    def test_valid_task_update(self, validator):
        assert validator.validate_task_update({"tags": ["a"], "repeat_days": {6, 7}}).is_valid


class TestTags:
    def test_new_tag(self, validator):
        assert validator.validate_tag("Focus", Settings()).is_valid

    def test_existing_tag(self, validator):
        settings = Settings(available_tags=[Tag("Focus")])

        assert not validator.validate_tag("focus", settings).is_valid

    def test_blank_tag(self, validator):
        assert not validator.validate_tag("  ", Settings()).is_valid
