"""Deterministic topological ordering of tasks.

Kahn's algorithm with a heap of available tasks. When several tasks are
available at once the heap yields the highest priority first, then the
earliest ``created_at``, then the earliest position in the list.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from heapq import heapify, heappop, heappush
from typing import Any

from taskdeps import log
from taskdeps.config import Config
from taskdeps.cycles import find_cycles
from taskdeps.tasks.model import Task
from taskdeps.tasks.snapshot import TaskSource, dependency_edges, index_tasks, task_snapshot


@dataclass
class TaskOrder:
    """Result of :func:`suggest_task_order`.

    ``tasks`` never contains a task that sits on a cycle or depends on one;
    those ids are listed in ``excluded`` and the cycles in ``cycles``.
    """

    tasks: list[Task] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)

    @property
    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    @property
    def is_complete(self) -> bool:
        return not self.excluded


def topological_ids(
    edges: Mapping[str, Sequence[str]],
    key: Callable[[str], Any],
) -> tuple[list[str], list[str]]:
    """Order the nodes of *edges* so every dependency precedes its dependents.

    *edges* maps node -> dependencies; targets that are not keys are ignored.
    *key* ranks simultaneously available nodes (smallest first) and must be
    unique per node. Returns ``(ordered, excluded)`` where *excluded* holds
    the nodes that never became available because of a cycle upstream.
    """
    dependents: dict[str, list[str]] = {node: [] for node in edges}
    indegree: dict[str, int] = {}
    for node, deps in edges.items():
        existing = [d for d in deps if d in dependents]
        indegree[node] = len(existing)
        for dep in existing:
            dependents[dep].append(node)

    heap = [(key(node), node) for node, degree in indegree.items() if degree == 0]
    heapify(heap)

    ordered: list[str] = []
    while heap:
        _, node = heappop(heap)
        ordered.append(node)
        for child in dependents[node]:
            indegree[child] -= 1
            if indegree[child] == 0:
                heappush(heap, (key(child), child))

    excluded = [node for node in edges if indegree[node] > 0]
    return ordered, excluded


def _priority_key(index: dict[str, Task], position: dict[str, int]) -> Callable[[str], tuple]:
    def key(task_id: str) -> tuple:
        task = index[task_id]
        return (-task.priority, task.created_at.timestamp(), position[task_id])

    return key


def suggest_task_order(tasks: TaskSource, config: Config | None = None) -> TaskOrder:
    """Suggest an execution order that respects every dependency."""
    snapshot = task_snapshot(tasks, config)
    index = index_tasks(snapshot)
    edges = dependency_edges(snapshot)
    position = {task_id: i for i, task_id in enumerate(edges)}

    cycles = find_cycles(edges)
    ordered, excluded = topological_ids(edges, _priority_key(index, position))

    if cycles:
        log.warn(
            f"Dependency cycle(s) found while ordering tasks; "
            f"{len(excluded)} task(s) left out of the order"
        )

    log.debug(f"Task order suggested: {len(ordered)} of {len(edges)} task(s)")
    return TaskOrder(
        tasks=[index[task_id] for task_id in ordered],
        cycles=cycles,
        excluded=excluded,
    )
