"""
Project/task/tag search with match reasons.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from models.project import Project, Task


class MatchKind(Enum):
    PROJECT_NAME = "project_name"
    TASK = "task"
    TAG = "tag"


@dataclass(frozen=True)
class MatchReason:
    """Why a project surfaced: its name, one of its tasks, or a tag on a task."""

    kind: MatchKind
    value: str | None = None

    @classmethod
    def project_name(cls) -> MatchReason:
        return cls(MatchKind.PROJECT_NAME)

    @classmethod
    def task(cls, task_id: str) -> MatchReason:
        return cls(MatchKind.TASK, task_id)

    @classmethod
    def tag(cls, tag_name: str) -> MatchReason:
        return cls(MatchKind.TAG, tag_name)


@dataclass
class Match:
    """A project with the tasks and tags that matched, in first-seen order."""

    project: Project
    tasks: list[Task] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    reasons: set[MatchReason] = field(default_factory=set)

    def _add_task(self, task: Task) -> None:
        if task not in self.tasks:
            self.tasks.append(task)

    def _add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack.casefold()


def search(projects: Iterable[Project], query: str) -> list[Match]:
    """Case-insensitive substring search over project names, task names and task tags.

    Results follow project order; projects with no match are left out. An empty
    or whitespace-only query matches nothing. Otherwise the query is matched
    as typed, surrounding whitespace included.
    """
    raw = query or ""
    if not raw.strip():
        return []
    needle = raw.casefold()

    results: list[Match] = []
    for project in projects:
        match = Match(project=project)
        if _contains(project.name, needle):
            match.reasons.add(MatchReason.project_name())
        for task in project.tasks:
            if _contains(task.name, needle):
                match._add_task(task)
                match.reasons.add(MatchReason.task(task.id))
            for tag in task.tags:
                if _contains(tag, needle):
                    match._add_task(task)
                    match._add_tag(tag)
                    match.reasons.add(MatchReason.tag(tag))
        if match.reasons:
            results.append(match)
    return results
