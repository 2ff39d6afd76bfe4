"""Longest duration-weighted path through the dependency DAG."""

from __future__ import annotations

from dataclasses import dataclass, field

from taskdeps import log
from taskdeps.config import Config
from taskdeps.cycles import find_cycles
from taskdeps.ordering import topological_ids
from taskdeps.tasks.model import Task
from taskdeps.tasks.snapshot import TaskSource, dependency_edges, index_tasks, task_snapshot


@dataclass
class CriticalPath:
    task_ids: list[str] = field(default_factory=list)
    total_duration: int = 0
    cycles: list[list[str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.task_ids)


@dataclass
class _Chain:
    """Best chain of a given length ending at a node."""

    priority_sum: int
    previous: tuple[str, int] | None


def _weight(task: Task) -> int:
    return task.estimated_duration or 0


def calculate_critical_path(tasks: TaskSource, config: Config | None = None) -> CriticalPath:
    """Return the longest root-to-leaf chain weighted by ``estimated_duration``.

    Tasks without an estimate weigh zero. Ties prefer the chain with the
    higher average priority over the whole chain, then the one ending at the
    earlier task in the list. Tasks on or downstream of a cycle are left out
    and the cycles are reported in the result.
    """
    snapshot = task_snapshot(tasks, config)
    index = index_tasks(snapshot)
    edges = dependency_edges(snapshot)
    position = {task_id: i for i, task_id in enumerate(edges)}

    cycles = find_cycles(edges)
    ordered, excluded = topological_ids(edges, position.__getitem__)
    if cycles:
        log.warn(
            f"Dependency cycle(s) found while computing the critical path; "
            f"{len(excluded)} task(s) ignored"
        )

    # Only maximum-duration prefixes can end up on the critical path. Among
    # those, a node keeps the best priority sum per chain length.
    duration: dict[str, int] = {}
    chains: dict[str, dict[int, _Chain]] = {}
    has_dependents: set[str] = set()
    for task_id in ordered:
        task = index[task_id]
        deps = sorted((d for d in edges[task_id] if d in chains), key=position.__getitem__)
        has_dependents.update(deps)

        if not deps:
            duration[task_id] = _weight(task)
            chains[task_id] = {1: _Chain(task.priority, None)}
            continue

        longest = max(duration[dep] for dep in deps)
        states: dict[int, _Chain] = {}
        for dep in deps:
            if duration[dep] != longest:
                continue
            for length, chain in chains[dep].items():
                total = chain.priority_sum + task.priority
                current = states.get(length + 1)
                if current is None or total > current.priority_sum:
                    states[length + 1] = _Chain(total, (dep, length))
        duration[task_id] = longest + _weight(task)
        chains[task_id] = states

    best: tuple[tuple[int, float, int], str, int] | None = None
    for task_id in ordered:
        if task_id in has_dependents:
            continue
        for length in sorted(chains[task_id]):
            rank = (
                duration[task_id],
                chains[task_id][length].priority_sum / length,
                -position[task_id],
            )
            if best is None or rank > best[0]:
                best = (rank, task_id, length)

    if best is None:
        return CriticalPath(cycles=cycles)

    _, end, length = best
    path: list[str] = []
    cursor: tuple[str, int] | None = (end, length)
    while cursor is not None:
        node, size = cursor
        path.append(node)
        cursor = chains[node][size].previous
    path.reverse()

    total_duration = duration[end]
    log.debug(f"Critical path: {len(path)} task(s), {total_duration} minute(s)")
    return CriticalPath(task_ids=path, total_duration=total_duration, cycles=cycles)
