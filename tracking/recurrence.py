"""
Recurrence evaluation: which tasks are due on a given calendar day.

``is_active`` is the single rule used by the calendar grid, the daily task
list and the monthly list. Every consumer in this module goes through it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from models.project import Project, Task
from models.session import Session
from utils.calendar_utils import as_datetime, days_of_month, same_day, weekday_index
from utils.enums import DayOfWeek
from utils.logger import Logger

from .errors import InvariantViolation

logger = Logger()

DEFAULT_TOLERANCE_DAYS = 1


def _repeats_on(task: Task, weekday: int) -> bool:
    """Membership of ``weekday`` in the task's repeat days.

    Raises:
        InvariantViolation: if the repeat-day set holds values that are not weekdays
    """
    try:
        days = task.repeat_days or set()
        for value in days:
            if not isinstance(value, DayOfWeek) and int(value) not in range(1, 8):
                raise InvariantViolation(f"Invalid repeat day {value!r} on task {task.id}")
        return weekday in {int(value) for value in days}
    except (TypeError, ValueError) as e:
        raise InvariantViolation(f"Corrupt repeat days on task {task.id}: {e}") from e


def is_active(
    task: Task,
    when: date | datetime,
    tolerance_days: int = DEFAULT_TOLERANCE_DAYS,
) -> bool:
    """Decide whether ``task`` is due on the calendar day of ``when``.

    1. A start date after ``when`` plus the tolerance (one day by default)
       excludes the task, so tasks created later today still show today.
    2. The task's first day always counts.
    3. Otherwise the weekday of ``when`` must be one of the repeat days.

    A corrupt repeat-day set is logged and treated as not repeating.
    """
    moment = as_datetime(when)
    if task.start_date > moment + timedelta(days=tolerance_days):
        return False

    if same_day(task.start_date, moment):
        return True

    try:
        return _repeats_on(task, weekday_index(moment))
    except InvariantViolation as e:
        logger.warning(f"Recurrence check absorbed: {e}")
        return False


def all_tasks(projects: Iterable[Project]) -> list[Task]:
    return [task for project in projects for task in project.tasks]


def tasks_on(
    tasks: Iterable[Task],
    when: date | datetime,
    tolerance_days: int = DEFAULT_TOLERANCE_DAYS,
) -> list[Task]:
    """Tasks due on ``when``, in input order."""
    return [task for task in tasks if is_active(task, when, tolerance_days)]


def tasks_in_month(
    tasks: Sequence[Task],
    month: date | datetime,
    tolerance_days: int = DEFAULT_TOLERANCE_DAYS,
) -> list[tuple[date, list[Task]]]:
    """Each day of ``month`` that has due tasks, paired with those tasks."""
    result = []
    for day in days_of_month(month):
        due = tasks_on(tasks, day, tolerance_days)
        if due:
            result.append((day, due))
    return result


def day_progress(
    tasks: Sequence[Task],
    sessions: Iterable[Session],
    when: date | datetime,
    tolerance_days: int = DEFAULT_TOLERANCE_DAYS,
) -> tuple[int, int]:
    """Return ``(done, due)`` for the calendar badge of one day.

    A due task counts as done when any session is filed for it on that day.
    """
    due = tasks_on(tasks, when, tolerance_days)
    done_ids = {s.task_id for s in sessions if same_day(s.completion_date, when)}
    done = sum(1 for task in due if task.id in done_ids)
    return done, len(due)
