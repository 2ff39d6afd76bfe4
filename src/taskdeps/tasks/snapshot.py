"""Point-in-time views over a task collection.

Every engine entry point starts by taking a snapshot: the caller's tasks are
copied into a plain list (the list, not the tasks), checked against the node
ceiling and indexed by id. Nothing here mutates a Task.
"""

from __future__ import annotations

from collections.abc import Iterable

from taskdeps import log
from taskdeps.config import Config, resolve_config
from taskdeps.errors import ResourceLimitError
from taskdeps.tasks.model import Task, TaskList

TaskSource = TaskList | Iterable[Task]


def task_snapshot(tasks: TaskSource, config: Config | None = None) -> list[Task]:
    """Return the tasks as a list, enforcing ``config.max_nodes``."""
    seq = list(tasks.tasks if isinstance(tasks, TaskList) else tasks)
    cfg = resolve_config(config)
    if len(seq) > cfg.max_nodes:
        raise ResourceLimitError(cfg.max_nodes, len(seq))
    return seq


def dedupe(ids: Iterable[str]) -> list[str]:
    """Drop repeated ids, keeping first-occurrence order."""
    return list(dict.fromkeys(ids))


def index_tasks(tasks: list[Task]) -> dict[str, Task]:
    """Map id -> task. On duplicate ids the first task wins."""
    index: dict[str, Task] = {}
    for task in tasks:
        if task.id in index:
            log.debug(f"Duplicate task id {task.id}: keeping first occurrence")
            continue
        index[task.id] = task
    return index


def dependency_edges(tasks: list[Task]) -> dict[str, list[str]]:
    """Map id -> de-duplicated dependency ids, in list order.

    Dangling ids are kept; traversals skip edges whose target is not a key.
    """
    edges: dict[str, list[str]] = {}
    for task in tasks:
        if task.id in edges:
            continue
        edges[task.id] = dedupe(task.dependencies)
    return edges
