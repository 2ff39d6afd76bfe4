"""Task status state machine.

Allowed transitions are kept in a single lookup table; every status change in
the codebase goes through :func:`ensure_transition`.
"""

from __future__ import annotations

from taskdeps import log
from taskdeps.errors import InvalidTransitionError
from taskdeps.tasks.model import TaskStatus


VALID_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({
        TaskStatus.IN_PROGRESS,
        TaskStatus.COMPLETED,
        TaskStatus.BLOCKED,
        TaskStatus.CANCELLED,
    }),
    TaskStatus.IN_PROGRESS: frozenset({
        TaskStatus.COMPLETED,
        TaskStatus.BLOCKED,
        TaskStatus.PENDING,
        TaskStatus.CANCELLED,
    }),
    TaskStatus.COMPLETED: frozenset({
        TaskStatus.PENDING,
        TaskStatus.IN_PROGRESS,
    }),
    TaskStatus.BLOCKED: frozenset({
        TaskStatus.PENDING,
        TaskStatus.IN_PROGRESS,
        TaskStatus.CANCELLED,
    }),
    TaskStatus.CANCELLED: frozenset({
        TaskStatus.PENDING,
    }),
}


def parse_status(value: str | TaskStatus) -> TaskStatus:
    """Coerce *value* to a ``TaskStatus``; raises ``ValueError`` if unknown."""
    if isinstance(value, TaskStatus):
        return value
    normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return TaskStatus(normalized)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValueError(f"Unknown status {value!r}. Valid statuses: {allowed}.") from None


def allowed_transitions(current: TaskStatus) -> frozenset[TaskStatus]:
    return VALID_TRANSITIONS[current]


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    if current == target:
        return True
    return target in VALID_TRANSITIONS[current]


def ensure_transition(task_id: str, current: TaskStatus, target: TaskStatus) -> None:
    """Raise ``InvalidTransitionError`` unless *current* -> *target* is allowed."""
    if not can_transition(current, target):
        raise InvalidTransitionError(task_id, current.value, target.value)
    log.debug(f"Task {task_id}: {current.value} -> {target.value}")
