"""
TrackerService - store adapter orchestrating tracker operations.
Combines the entity store, validation, recurrence and aggregation so callers
never talk to the persistence collaborator directly.

Every write is validated first, then issued to the store, and only applied to
the caller's in-memory objects once the store accepted it. Deletes of related
entities all go through ``cascade_delete``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import dataclasses
from datetime import date, datetime, timedelta
from typing import Any, TypeVar

from models.project import Project, Task, coerce_repeat_days
from models.session import Interval, Session
from models.settings import HourAndMinute, Settings, Tag
from tracking import aggregation, recurrence, search as search_engine
from tracking.errors import CascadeReport, PersistenceFailure, ValidationError
from tracking.stopwatch import Stopwatch, StopwatchState
from utils.calendar_utils import as_datetime
from utils.config_loader import TrackerConfig
from utils.enums import DayOfWeek, Timeframe
from utils.logger import Logger

from .error_reporting import report_failure
from .interfaces import EntityStore
from .tracker_validator import TrackerValidator, ValidationResult

T = TypeVar("T")

SETTINGS_UPDATE_FIELDS = {
    "first_name",
    "last_name",
    "email",
    "birthday",
    "accent_color",
    "font_size",
}


def _describe(entity: Any) -> str:
    return f"{type(entity).__name__} {getattr(entity, 'id', '?')}"


class TrackerService:
    """
    Main service for tracker operations.
    Orchestrates the store, validator and the tracking engine.
    """

    def __init__(
        self,
        store: EntityStore,
        config: TrackerConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.logger = Logger()
        self.store = store
        if config is not None:
            # Without an explicit config the ACTIVITY_TRACKER_LOG_* variables govern logging
            self.logger.configure(config.log_level, config.log_dir)
        self.config = config or TrackerConfig()
        self.validator = TrackerValidator()
        self._clock = clock

    # ---- store access ----

    def _insert(self, entity: Any) -> None:
        try:
            self.store.insert(entity)
        except Exception as e:
            report_failure(e, "insert", _describe(entity))
            raise PersistenceFailure(operation="insert", entity=_describe(entity)) from e

    def _delete(self, entity: Any) -> None:
        try:
            self.store.delete(entity)
        except Exception as e:
            report_failure(e, "delete", _describe(entity))
            raise PersistenceFailure(operation="delete", entity=_describe(entity)) from e

    def _fetch(
        self, entity_type: type[T], predicate: Callable[[T], bool] | None = None
    ) -> list[T]:
        try:
            return self.store.fetch_all(entity_type, predicate)
        except Exception as e:
            report_failure(e, "fetch", entity_type.__name__)
            raise PersistenceFailure(operation="fetch", entity=entity_type.__name__) from e

    def _require(self, result: ValidationResult, message: str) -> None:
        for warning in result.warnings:
            self.logger.info(f"{message}: {warning}")
        if not result.is_valid:
            self.logger.warning(f"{message}: {'; '.join(result.errors)}")
            raise ValidationError(message, details=result.errors)

    # ---- queries ----

    def projects(self) -> list[Project]:
        return self._fetch(Project)

    def projects_by_priority(self) -> list[Project]:
        """Projects with the highest priority first, then by name."""
        return sorted(self.projects(), key=lambda p: (-int(p.priority), p.name.casefold()))

    def sessions(self, predicate: Callable[[Session], bool] | None = None) -> list[Session]:
        return self._fetch(Session, predicate)

    def tasks_on(self, when: date | datetime) -> list[Task]:
        tasks = recurrence.all_tasks(self.projects())
        return recurrence.tasks_on(tasks, when, self.config.recurrence_tolerance_days)

    def tasks_in_month(self, month: date | datetime) -> list[tuple[date, list[Task]]]:
        tasks = recurrence.all_tasks(self.projects())
        return recurrence.tasks_in_month(tasks, month, self.config.recurrence_tolerance_days)

    def day_progress(self, when: date | datetime) -> tuple[int, int]:
        tasks = recurrence.all_tasks(self.projects())
        return recurrence.day_progress(
            tasks, self.sessions(), when, self.config.recurrence_tolerance_days
        )

    def completed_session_for(self, task_id: str, when: date | datetime) -> Session | None:
        return aggregation.completed_session_for(self.sessions(), task_id, when)

    def rollup(self, timeframe: Timeframe, anchor: date | datetime) -> dict[str, timedelta]:
        return aggregation.rollup(self.sessions(), timeframe, anchor)

    def search(self, query: str) -> list[search_engine.Match]:
        return search_engine.search(self.projects_by_priority(), query)

    # ---- projects and tasks ----

    def create_project(
        self,
        name: str,
        start_date: date | datetime | None = None,
        priority: int | None = None,
    ) -> Project:
        """Create a project with a name unique among projects (case-insensitive)."""
        priority = self.config.default_priority if priority is None else priority
        self._require(
            self.validator.validate_project_creation(name, priority, self.projects()),
            "Cannot create project",
        )
        project = Project(
            name=name.strip(),
            start_date=as_datetime(start_date) if start_date else self._clock(),
            priority=priority,
        )
        self._insert(project)
        self.logger.info(f"Created project {project.id} '{project.name}'")
        return project

    def add_task(
        self,
        project: Project,
        name: str,
        tags: Sequence[str] = (),
        start_date: date | datetime | None = None,
        priority: int | None = None,
        repeat_days: Iterable[DayOfWeek | int] = (),
    ) -> Task:
        """Add a task with a name unique within ``project`` (case-insensitive)."""
        priority = self.config.default_priority if priority is None else priority
        tags = list(tags)
        repeat_days = list(repeat_days)
        self._require(
            self.validator.validate_task_creation(name, project, priority, tags, repeat_days),
            "Cannot add task",
        )
        task = Task(
            name=name.strip(),
            start_date=as_datetime(start_date) if start_date else self._clock(),
            tags=[tag.strip() for tag in tags if tag.strip()],
            priority=priority,
            repeat_days=coerce_repeat_days(repeat_days),
        )
        updated = dataclasses.replace(project, tasks=[*project.tasks, task])
        self._insert(updated)
        project.tasks.append(task)
        self.logger.info(f"Added task {task.id} '{task.name}' to project {project.id}")
        return task

    @staticmethod
    def _normalize_changes(changes: dict[str, Any]) -> dict[str, Any]:
        normalized = dict(changes)
        if isinstance(normalized.get("name"), str):
            normalized["name"] = normalized["name"].strip()
        if "tags" in normalized:
            normalized["tags"] = [t.strip() for t in normalized["tags"] if t.strip()]
        if "repeat_days" in normalized:
            normalized["repeat_days"] = coerce_repeat_days(normalized["repeat_days"])
        if "start_date" in normalized:
            normalized["start_date"] = as_datetime(normalized["start_date"])
        return normalized

    def _apply_patch(self, entity: T, changes: dict[str, Any]) -> T:
        updated = dataclasses.replace(entity, **changes)
        self._insert(updated)
        for field_name, value in changes.items():
            setattr(entity, field_name, value)
        return entity

    def patch_project(self, project: Project, changes: dict[str, Any]) -> Project:
        """Apply a validated field diff to ``project``."""
        self._require(self.validator.validate_project_update(changes), "Cannot update project")
        return self._apply_patch(project, self._normalize_changes(changes))

    def patch_task(self, task: Task, changes: dict[str, Any]) -> Task:
        """Apply a validated field diff to ``task``. Past dates are re-evaluated under new repeat days."""
        self._require(self.validator.validate_task_update(changes), "Cannot update task")
        return self._apply_patch(task, self._normalize_changes(changes))

    def move_tasks(self, tasks: Sequence[Task], source: Project, target: Project) -> None:
        """Move tasks between projects; their sessions follow them by task id."""
        if source.id == target.id:
            return
        moving_ids = {t.id for t in tasks}
        unknown = [t.name for t in tasks if source.find_task(t.id) is None]
        if unknown:
            raise ValidationError("Tasks do not belong to the source project", details=unknown)

        new_target = dataclasses.replace(target, tasks=[*target.tasks, *tasks])
        new_source = dataclasses.replace(
            source, tasks=[t for t in source.tasks if t.id not in moving_ids]
        )
        self._insert(new_target)
        self._insert(new_source)
        target.tasks.extend(tasks)
        source.tasks[:] = new_source.tasks
        self.logger.info(f"Moved {len(tasks)} task(s) from {source.id} to {target.id}")

    # ---- deletion ----

    def cascade_delete(
        self, tasks: Sequence[Task], project: Project | None = None, *, keep_tasks: bool = False
    ) -> CascadeReport:
        """Delete the sessions of ``tasks``, then the tasks, then ``project``.

        Every entity is attempted; each failure is logged, reported and
        listed in the returned report. With ``keep_tasks`` only sessions are
        removed.
        """
        report = CascadeReport()
        task_ids = {t.id for t in tasks}

        try:
            doomed_sessions = self.sessions(lambda s: s.task_id in task_ids) if task_ids else []
        except PersistenceFailure as e:
            report.failures.append(("sessions", str(e)))
            doomed_sessions = []

        for session in doomed_sessions:
            self._attempt_delete(session, report)

        if not keep_tasks:
            for task in tasks:
                if self._attempt_delete(task, report) and project is not None:
                    project.tasks[:] = [t for t in project.tasks if t.id != task.id]

        if project is not None and not keep_tasks:
            self._attempt_delete(project, report)

        if report.failures:
            self.logger.error(
                f"Cascade delete finished with {len(report.failures)} failure(s); "
                f"deleted {len(report.deleted)} entities"
            )
        else:
            self.logger.info(f"Cascade delete removed {len(report.deleted)} entities")
        return report

    def _attempt_delete(self, entity: Any, report: CascadeReport) -> bool:
        try:
            self._delete(entity)
        except PersistenceFailure as e:
            report.failures.append((entity.id, str(e)))
            return False
        report.deleted.append(entity.id)
        return True

    def delete_task(self, project: Project, task: Task) -> CascadeReport:
        return self.delete_tasks(project, [task])

    def delete_tasks(self, project: Project, tasks: Sequence[Task]) -> CascadeReport:
        """Delete tasks of ``project`` together with their sessions."""
        report = self.cascade_delete(tasks)
        deleted = set(report.deleted)
        project.tasks[:] = [t for t in project.tasks if t.id not in deleted]
        return report

    def delete_project(self, project: Project) -> CascadeReport:
        """Delete a project, its tasks and their sessions."""
        return self.cascade_delete(list(project.tasks), project=project)

    def discard_sessions(self, task: Task) -> CascadeReport:
        """Delete every session recorded for ``task``, keeping the task."""
        return self.cascade_delete([task], keep_tasks=True)

    # ---- sessions ----

    def record_session(
        self,
        task_id: str,
        completion_date: date | datetime,
        intervals: Sequence[Interval],
        existing: Session | None = None,
    ) -> Session:
        """Persist time spent on a task for one day.

        With ``existing`` the session's intervals are replaced by ``intervals``
        (continue tracking). Otherwise, when unique sessions are enforced and
        the task already has a session that day, ``intervals`` are appended to
        it instead of creating a duplicate.
        """
        if not task_id:
            raise ValidationError("Session requires a task id")
        if not intervals:
            raise ValidationError("Session requires at least one interval")

        when = as_datetime(completion_date)
        target = existing
        new_intervals = list(intervals)
        if target is None and self.config.enforce_unique_sessions:
            target = self.completed_session_for(task_id, when)
            if target is not None:
                new_intervals = [*target.intervals, *intervals]
                self.logger.info(f"Merging into existing session {target.id} for task {task_id}")

        if target is None:
            session = Session(task_id=task_id, completion_date=when, intervals=new_intervals)
            self._insert(session)
            self.logger.info(f"Recorded session {session.id} for task {task_id}")
            return session

        self._insert(dataclasses.replace(target, intervals=new_intervals))
        target.intervals = new_intervals
        self.logger.info(f"Updated session {target.id} for task {task_id}")
        return target

    def save_stopwatch(
        self,
        stopwatch: Stopwatch,
        task_id: str,
        completion_date: date | datetime,
        existing: Session | None = None,
    ) -> Session | None:
        """Persist the intervals of ``stopwatch``, then finish it. None if nothing was timed.

        The stopwatch is only paused before the write; when the store rejects
        the session it stays paused and can be started again.
        """
        if stopwatch.state is StopwatchState.FINISHED:
            self.logger.warning("Stopwatch already finished; nothing to save")
            return None
        if stopwatch.is_running:
            stopwatch.stop()
        intervals = stopwatch.intervals
        if not intervals:
            self.logger.warning("Stopwatch save skipped: nothing was timed")
            return None
        session = self.record_session(task_id, completion_date, intervals, existing)
        stopwatch.finish(task_id, completion_date)
        return session

    def stopwatch(self, session: Session | None = None, **kwargs: Any) -> Stopwatch:
        """A stopwatch using the configured tick interval and the service clock.

        With ``session`` the stopwatch resumes from its stored intervals.
        """
        kwargs.setdefault("clock", self._clock)
        kwargs.setdefault("tick_interval", self.config.tick_interval_seconds)
        if session is not None:
            return Stopwatch.from_session(session, **kwargs)
        return Stopwatch(**kwargs)

    def add_manual_session(
        self,
        task_id: str,
        completion_date: date | datetime,
        start: datetime,
        end: datetime,
    ) -> Session | None:
        """Record a single interval entered by hand. None when start and end are the same minute."""
        interval = Stopwatch.manual_interval(start, end)
        if interval is None:
            self.logger.info("Manual entry skipped: start and end are the same minute")
            return None
        return self.record_session(task_id, completion_date, [interval])

    # ---- settings ----

    def settings(self) -> Settings:
        """The settings singleton, created with defaults on first access."""
        existing = self._fetch(Settings)
        if existing:
            if len(existing) > 1:
                self.logger.warning(f"Found {len(existing)} settings records; using the first")
            return existing[0]
        settings = Settings(
            accent_color=self.config.default_accent_color,
            font_size=self.config.default_font_size,
        )
        self._insert(settings)
        self.logger.info("Created default settings")
        return settings

    def patch_settings(self, changes: dict[str, Any]) -> Settings:
        unknown = set(changes) - SETTINGS_UPDATE_FIELDS
        if unknown:
            raise ValidationError(
                "Cannot update settings", details=[f"Unknown fields: {', '.join(sorted(unknown))}"]
            )
        return self._apply_patch(self.settings(), changes)

    def add_tag(self, name: str) -> Tag:
        settings = self.settings()
        self._require(self.validator.validate_tag(name, settings), "Cannot add tag")
        tag = Tag(name=name.strip())
        self._apply_patch(settings, {"available_tags": [*settings.available_tags, tag]})
        return tag

    def remove_tag(self, name: str) -> bool:
        """Remove a tag from the vocabulary. Tasks keep their tag strings."""
        settings = self.settings()
        wanted = name.strip().casefold()
        remaining = [t for t in settings.available_tags if t.name.casefold() != wanted]
        if len(remaining) == len(settings.available_tags):
            return False
        self._apply_patch(settings, {"available_tags": remaining})
        return True

    def set_notification_time(self, hour: int, minute: int) -> HourAndMinute:
        notification_time = HourAndMinute(hour=hour, minute=minute)
        self._apply_patch(self.settings(), {"notification_time": notification_time})
        return notification_time

    def clear_notification_time(self) -> None:
        self._apply_patch(self.settings(), {"notification_time": None})
