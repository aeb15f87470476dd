"""
Session aggregation: completion lookups, per-task totals and timeframe rollups.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from models.project import Task
from models.session import Session
from utils.calendar_utils import (
    BucketKey,
    YearAndWeek,
    bucket_key,
    same_day,
    year_and_week,
)
from utils.enums import Granularity, Timeframe

UNKNOWN_TASK_NAME = "Unknown"


def total_duration(session: Session) -> timedelta:
    """Sum of the session's interval durations."""
    return session.total_duration


def sessions_on(sessions: Iterable[Session], when: date | datetime) -> list[Session]:
    return [s for s in sessions if same_day(s.completion_date, when)]


def completed_session_for(
    sessions: Iterable[Session], task_id: str, when: date | datetime
) -> Session | None:
    """First session filed for ``task_id`` on the day of ``when``.

    Duplicates for the same task and day are tolerated; the first one in
    iteration order wins.
    """
    return next(
        (s for s in sessions if s.task_id == task_id and same_day(s.completion_date, when)),
        None,
    )


def is_completed(task: Task, sessions: Iterable[Session], when: date | datetime) -> bool:
    return completed_session_for(sessions, task.id, when) is not None


def filter_sessions(
    sessions: Iterable[Session], timeframe: Timeframe, anchor: date | datetime
) -> list[Session]:
    """Sessions whose completion date shares ``anchor``'s bucket for the timeframe."""
    granularity = timeframe.granularity
    if granularity is None:
        return list(sessions)
    anchor_key = bucket_key(anchor, granularity)
    return [s for s in sessions if bucket_key(s.completion_date, granularity) == anchor_key]


def rollup(
    sessions: Iterable[Session], timeframe: Timeframe, anchor: date | datetime
) -> dict[str, timedelta]:
    """Total tracked time per task id within ``anchor``'s bucket.

    Tasks whose summed duration is exactly zero are dropped.
    """
    totals: dict[str, timedelta] = defaultdict(timedelta)
    for session in filter_sessions(sessions, timeframe, anchor):
        totals[session.task_id] += total_duration(session)
    return {task_id: total for task_id, total in totals.items() if total != timedelta()}


def sorted_rollup(totals: dict[str, timedelta]) -> list[tuple[str, timedelta]]:
    """Rollup entries, longest first, ties by task id."""
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def distinct_buckets(
    sessions: Iterable[Session], granularity: Granularity
) -> list[BucketKey | YearAndWeek]:
    """Sorted, de-duplicated buckets that have sessions, for timeframe pickers.

    Week buckets carry the month of the completion date and sort by
    (year, month, week); month buckets sort by (year, month).
    """
    if granularity is Granularity.WEEK:
        weeks = {year_and_week(s.completion_date) for s in sessions}
        return sorted(weeks)
    return sorted({bucket_key(s.completion_date, granularity) for s in sessions})


def resolve_task_name(tasks: Sequence[Task], task_id: str) -> str:
    """Name of the task with ``task_id``, or "Unknown" once it has been deleted."""
    return next((t.name for t in tasks if t.id == task_id), UNKNOWN_TASK_NAME)
