"""Exception hierarchy for hard failures.

Business-rule violations found by the validator are returned as data, not
raised. The classes below cover the cases a caller cannot reasonably continue
from: oversized input, illegal status transitions, rejected commits and
malformed task list files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from taskdeps.tasks.validate import ValidationResult


class TaskDepsError(Exception):
    """Base class for all taskdeps errors."""


class ResourceLimitError(TaskDepsError):
    """Raised when a task list exceeds the configured node ceiling."""

    def __init__(self, limit: int, actual: int) -> None:
        self.limit = limit
        self.actual = actual
        super().__init__(
            f"Task list has {actual} tasks, exceeding the limit of {limit}"
        )


class InvalidTransitionError(TaskDepsError):
    """Raised when a status change is not in the transition table."""

    def __init__(self, task_id: str, current: str, target: str) -> None:
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid status transition for task {task_id}: {current} -> {target}"
        )


class DependencyValidationError(TaskDepsError):
    """Raised by the commit helpers when a dependency change is rejected."""

    def __init__(self, task_id: str, result: ValidationResult) -> None:
        self.task_id = task_id
        self.result = result
        super().__init__(
            f"Dependencies for task {task_id} rejected: " + "; ".join(result.errors)
        )


class TaskNotFoundError(TaskDepsError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class DuplicateTaskError(TaskDepsError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task already exists: {task_id}")


class TaskListFormatError(TaskDepsError):
    """Raised when a task list file cannot be parsed into a TaskList."""
