"""Ready and blocked task computation.

A task is *ready* when its own status permits work (not completed, not
cancelled) and every dependency exists and is completed. A task is *blocked*
when at least one existing dependency is not completed. Both are recomputed
from scratch on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from taskdeps import log
from taskdeps.config import Config
from taskdeps.tasks.model import Task
from taskdeps.tasks.snapshot import TaskSource, dedupe, index_tasks, task_snapshot


@dataclass
class BlockedItem:
    task: Task
    blocked_by: list[Task] = field(default_factory=list)

    @property
    def blocked_by_ids(self) -> list[str]:
        return [t.id for t in self.blocked_by]


# ── per-task checks ──────────────────────────────────────────────


def deps_satisfied(task: Task, index: dict[str, Task]) -> bool:
    for dep in dedupe(task.dependencies):
        dep_task = index.get(dep)
        if dep_task is None or not dep_task.is_completed:
            return False
    return True


def is_ready(task: Task, index: dict[str, Task]) -> bool:
    return task.is_open and deps_satisfied(task, index)


def incomplete_dependencies(task: Task, index: dict[str, Task]) -> list[Task]:
    """Existing dependencies of *task* that are not completed, in order."""
    blocking: list[Task] = []
    for dep in dedupe(task.dependencies):
        dep_task = index.get(dep)
        if dep_task is not None and not dep_task.is_completed:
            blocking.append(dep_task)
    return blocking


# ── collection queries ───────────────────────────────────────────


def get_ready_items(tasks: TaskSource, config: Config | None = None) -> list[Task]:
    """Return the tasks that can be worked on now, in list order."""
    snapshot = task_snapshot(tasks, config)
    index = index_tasks(snapshot)
    ready = [t for t in snapshot if is_ready(t, index)]
    log.debug(f"Ready items: {len(ready)} of {len(snapshot)}")
    return ready


def get_blocked_items(tasks: TaskSource, config: Config | None = None) -> list[BlockedItem]:
    """Return each task with incomplete dependencies, paired with those dependencies."""
    snapshot = task_snapshot(tasks, config)
    index = index_tasks(snapshot)
    blocked: list[BlockedItem] = []
    for task in snapshot:
        blocking = incomplete_dependencies(task, index)
        if blocking:
            blocked.append(BlockedItem(task=task, blocked_by=blocking))
    log.debug(f"Blocked items: {len(blocked)} of {len(snapshot)}")
    return blocked


def explain_block(task: Task, tasks: TaskSource, config: Config | None = None) -> str:
    """Human-readable explanation of why *task* is not ready."""
    index = index_tasks(task_snapshot(tasks, config))
    reasons: list[str] = []

    if not task.is_open:
        reasons.append(f"status: {task.status.value}")

    waiting: list[str] = []
    for dep in dedupe(task.dependencies):
        dep_task = index.get(dep)
        if dep_task is None:
            waiting.append(f"{dep} (missing)")
        elif not dep_task.is_completed:
            waiting.append(f"{dep} ({dep_task.status.value})")
    if waiting:
        reasons.append(f"depends on: {' '.join(waiting)}")

    return " ".join(reasons)
