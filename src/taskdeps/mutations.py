"""Validate-then-commit helpers for dependency and status changes.

Each helper validates first and returns a new ``TaskList``; the input list and
its tasks are left untouched. A rejected change raises and nothing of it is
applied.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from taskdeps import log
from taskdeps.config import Config
from taskdeps.errors import DependencyValidationError, DuplicateTaskError, TaskNotFoundError
from taskdeps.status import ensure_transition, parse_status
from taskdeps.tasks.model import Task, TaskList, TaskStatus, utcnow
from taskdeps.tasks.validate import ValidationResult, validate_dependencies


def _replace_task(task_list: TaskList, updated: Task) -> TaskList:
    tasks = list(task_list.tasks)
    tasks[task_list.index_of(updated.id)] = updated
    return replace(task_list, tasks=tasks)


def _require_task(task_list: TaskList, task_id: str) -> Task:
    task = task_list.get_task(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


def set_task_dependencies(
    task_list: TaskList,
    task_id: str,
    dependency_ids: Iterable[str],
    config: Config | None = None,
    now: datetime | None = None,
) -> tuple[TaskList, ValidationResult]:
    """Replace the dependencies of *task_id* after validating them.

    Returns the new list and the validation result (for its warnings).
    Raises ``DependencyValidationError`` if the change is rejected.
    """
    task = _require_task(task_list, task_id)
    result = validate_dependencies(task_id, dependency_ids, task_list, config)
    if not result.is_valid:
        raise DependencyValidationError(task_id, result)

    updated = replace(
        task,
        dependencies=list(result.effective_dependencies),
        updated_at=now or utcnow(),
    )
    log.debug(f"Task {task_id}: dependencies set to {result.effective_dependencies}")
    return _replace_task(task_list, updated), result


def add_task(
    task_list: TaskList,
    task: Task,
    config: Config | None = None,
) -> tuple[TaskList, ValidationResult]:
    """Append *task* after validating its dependencies against the list."""
    if task_list.get_task(task.id) is not None:
        raise DuplicateTaskError(task.id)

    result = validate_dependencies(task.id, task.dependencies, task_list, config)
    if not result.is_valid:
        raise DependencyValidationError(task.id, result)

    added = replace(task, dependencies=list(result.effective_dependencies))
    log.debug(f"Task {task.id}: added with {len(added.dependencies)} dependencies")
    return replace(task_list, tasks=[*task_list.tasks, added]), result


def change_status(
    task_list: TaskList,
    task_id: str,
    status: str | TaskStatus,
    now: datetime | None = None,
) -> TaskList:
    """Move *task_id* to *status*, enforcing the transition table."""
    task = _require_task(task_list, task_id)
    target = parse_status(status)
    ensure_transition(task_id, task.status, target)
    if target == task.status:
        return task_list

    stamp = now or utcnow()
    updated = replace(
        task,
        status=target,
        updated_at=stamp,
        completed_at=stamp if target == TaskStatus.COMPLETED else None,
    )
    return _replace_task(task_list, updated)
