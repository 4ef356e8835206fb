# src/toodoo/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

DEFAULT_MAX_TITLE_LENGTH = 100


class TaskCategory(StrEnum):
    """Closed set of task categories. Anything else maps to NONE."""

    NONE = "none"
    WORK = "work"
    PERSONAL = "personal"
    URGENT = "urgent"

    @classmethod
    def from_raw(cls, raw: object) -> TaskCategory:
        if not raw or not isinstance(raw, str):
            return cls.NONE
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.NONE


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    created_at: datetime
    order: int
    completed: bool = False
    category: TaskCategory = TaskCategory.NONE

    def matches(self, task_filter: TaskFilter) -> bool:
        if task_filter is TaskFilter.ACTIVE:
            return not self.completed
        if task_filter is TaskFilter.COMPLETED:
            return self.completed
        return True

    def sort_key(self) -> tuple[bool, int]:
        """Incomplete tasks first, then ascending order."""
        return (self.completed, self.order)


def new_task_id() -> str:
    return str(uuid.uuid4())


def utc_now_ms() -> datetime:
    """Current UTC time truncated to milliseconds (what survives serialization)."""
    now = datetime.now(UTC)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def clean_title(raw: str | None, max_length: int = DEFAULT_MAX_TITLE_LENGTH) -> str | None:
    """
    Trim and bound a task title.

    Returns None when nothing is left after trimming.
    """
    if raw is None:
        return None
    title = raw.strip()
    if not title:
        return None
    return title[:max_length]


def format_timestamp(ts: datetime) -> str:
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: object) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        ts = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)
