"""
TrackerValidator - Data validation for project, task and settings operations.
Handles input validation and business rule enforcement.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from models.project import Project
from models.settings import Settings
from utils.enums import DayOfWeek, Priority
from utils.logger import Logger

MAX_NAME_LENGTH = 200

PROJECT_UPDATE_FIELDS = {"name", "start_date", "priority"}
TASK_UPDATE_FIELDS = {"name", "tags", "start_date", "priority", "repeat_days"}


@dataclass
class ValidationResult:
    """Result of a validation operation"""

    is_valid: bool
    errors: list[str]
    warnings: list[str] = None

    def __post_init__(self):
        if self.warnings is None:
            self.warnings = []


def _name_errors(kind: str, name: Any) -> list[str]:
    if not isinstance(name, str):
        return [f"{kind} name must be a string"]
    if not name.strip():
        return [f"{kind} name cannot be empty"]
    if len(name) > MAX_NAME_LENGTH:
        return [f"{kind} name exceeds maximum length ({MAX_NAME_LENGTH} characters)"]
    return []


def _priority_errors(priority: Any) -> list[str]:
    if isinstance(priority, bool) or not isinstance(priority, int):
        return ["Priority must be an integer"]
    if priority not in {p.value for p in Priority}:
        return ["Priority must be between 1 and 3"]
    return []


def _repeat_day_errors(repeat_days: Any) -> list[str]:
    if not isinstance(repeat_days, set | frozenset | list | tuple):
        return ["Repeat days must be a collection of weekdays"]
    for day in repeat_days:
        if isinstance(day, bool) or not isinstance(day, int) or day not in range(1, 8):
            return [f"Invalid repeat day: {day!r}"]
    return []


def _tag_errors(tags: Any) -> list[str]:
    if not isinstance(tags, list | tuple):
        return ["Tags must be a list"]
    if any(not isinstance(tag, str) for tag in tags):
        return ["All tags must be strings"]
    return []


class TrackerValidator:
    """
    Validator for tracker data and operations.
    Uniqueness of names is checked at creation time only.
    """

    def __init__(self):
        self.logger = Logger()

    def validate_project_creation(
        self, name: str, priority: int, existing: Iterable[Project]
    ) -> ValidationResult:
        """Validate data for project creation"""
        errors = _name_errors("Project", name) + _priority_errors(priority)
        warnings: list[str] = []

        if not errors:
            wanted = name.strip().casefold()
            if any(p.name.strip().casefold() == wanted for p in existing):
                errors.append("A project with the same name already exists")

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)

    def validate_task_creation(
        self,
        name: str,
        project: Project,
        priority: int,
        tags: list[str],
        repeat_days: Iterable[DayOfWeek],
    ) -> ValidationResult:
        """Validate data for adding a task to ``project``"""
        errors = (
            _name_errors("Task", name)
            + _priority_errors(priority)
            + _tag_errors(tags)
            + _repeat_day_errors(repeat_days)
        )
        warnings: list[str] = []

        if not errors and project.has_task_named(name.strip()):
            errors.append("A task with the same name already exists")

        if not errors and len(tags) != len({tag.casefold() for tag in tags}):
            warnings.append("Duplicate tags detected (case-insensitive)")

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)

    def _validate_update(
        self, kind: str, changes: dict[str, Any], allowed_fields: set[str]
    ) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        if not changes:
            warnings.append("No changes supplied")

        unknown_fields = set(changes) - allowed_fields
        if unknown_fields:
            errors.append(f"Unknown fields: {', '.join(sorted(unknown_fields))}")

        if "name" in changes:
            errors.extend(_name_errors(kind, changes["name"]))
        if "priority" in changes:
            errors.extend(_priority_errors(changes["priority"]))
        if "tags" in changes:
            errors.extend(_tag_errors(changes["tags"]))
        if "repeat_days" in changes:
            errors.extend(_repeat_day_errors(changes["repeat_days"]))
        if "start_date" in changes and not hasattr(changes["start_date"], "year"):
            errors.append("Start date must be a date")

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)

    def validate_project_update(self, changes: dict[str, Any]) -> ValidationResult:
        """Validate a project patch (renames are not re-checked for uniqueness)"""
        return self._validate_update("Project", changes, PROJECT_UPDATE_FIELDS)

    def validate_task_update(self, changes: dict[str, Any]) -> ValidationResult:
        """Validate a task patch (renames are not re-checked for uniqueness)"""
        return self._validate_update("Task", changes, TASK_UPDATE_FIELDS)

    def validate_tag(self, name: str, settings: Settings) -> ValidationResult:
        """Validate a new tag for the global vocabulary"""
        errors: list[str] = []
        if not isinstance(name, str) or not name.strip():
            errors.append("Tag name cannot be empty")
        elif settings.has_tag(name.strip()):
            errors.append("Tag already exists")
        return ValidationResult(is_valid=len(errors) == 0, errors=errors)
