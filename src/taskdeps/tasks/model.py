"""Task and TaskList data models read by the dependency engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


PRIORITY_MIN = 1
PRIORITY_MAX = 5
DEFAULT_PRIORITY = 3


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    CANCELLED = "cancelled"


# Statuses in which a task is no longer workable.
CLOSED_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Task:
    id: str
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: int = DEFAULT_PRIORITY
    dependencies: list[str] = field(default_factory=list)
    estimated_duration: int | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    completed_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_open(self) -> bool:
        """True when the task's own status still permits work."""
        return self.status not in CLOSED_STATUSES


@dataclass
class TaskList:
    id: str = ""
    title: str = ""
    description: str = ""
    tasks: list[Task] = field(default_factory=list)

    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    def get_task(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def index_of(self, task_id: str) -> int:
        for i, t in enumerate(self.tasks):
            if t.id == task_id:
                return i
        return -1
