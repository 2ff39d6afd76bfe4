"""Cycle detection over task dependency edges.

Uses a three-colour depth-first search: WHITE nodes are unvisited, GRAY nodes
are on the current DFS path, BLACK nodes are finished. An edge into a GRAY
node closes a cycle, which is read off the path from that node to the current
one. The search is iterative so long dependency chains never hit the
interpreter's recursion limit.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from taskdeps import log
from taskdeps.config import Config
from taskdeps.tasks.snapshot import TaskSource, dedupe, dependency_edges, task_snapshot

WHITE, GRAY, BLACK = 0, 1, 2


def _canonical(cycle: list[str]) -> tuple[str, ...]:
    """Rotation-independent key for a closed cycle ``[a, b, ..., a]``."""
    body = cycle[:-1]
    pivot = body.index(min(body))
    return tuple(body[pivot:] + body[:pivot])


def find_cycles(edges: Mapping[str, Sequence[str]]) -> list[list[str]]:
    """Return every distinct cycle found in *edges*.

    *edges* maps node -> the nodes it depends on. Nodes are visited in mapping
    order; targets that are not keys of *edges* are ignored. Each cycle is
    returned closed, e.g. ``["A", "B", "A"]``.
    """
    color: dict[str, int] = {node: WHITE for node in edges}
    cycles: list[list[str]] = []
    seen: set[tuple[str, ...]] = set()

    for start in edges:
        if color[start] != WHITE:
            continue

        path: list[str] = [start]
        position: dict[str, int] = {start: 0}
        stack = [iter(edges[start])]
        color[start] = GRAY

        while stack:
            descended = False
            for dep in stack[-1]:
                state = color.get(dep)
                if state is None:
                    continue
                if state == GRAY:
                    cycle = path[position[dep]:] + [dep]
                    key = _canonical(cycle)
                    if key not in seen:
                        seen.add(key)
                        cycles.append(cycle)
                elif state == WHITE:
                    color[dep] = GRAY
                    position[dep] = len(path)
                    path.append(dep)
                    stack.append(iter(edges[dep]))
                    descended = True
                    break

            if not descended:
                done = path.pop()
                del position[done]
                color[done] = BLACK
                stack.pop()

    return cycles


def cycle_members(cycles: Iterable[Sequence[str]]) -> set[str]:
    """Return the set of node ids that appear on any cycle."""
    members: set[str] = set()
    for cycle in cycles:
        members.update(cycle)
    return members


def format_cycle(cycle: Sequence[str]) -> str:
    return " → ".join(cycle)


def detect_cycles(tasks: TaskSource, config: Config | None = None) -> list[list[str]]:
    """Return all dependency cycles in the current task collection."""
    edges = dependency_edges(task_snapshot(tasks, config))
    cycles = find_cycles(edges)
    log.debug(f"Cycle detection: {len(edges)} nodes, {len(cycles)} cycle(s)")
    return cycles


def simulate_cycles(
    task_id: str,
    proposed: Iterable[str],
    tasks: TaskSource,
    config: Config | None = None,
) -> list[list[str]]:
    """Return the cycles present if *task_id* depended on exactly *proposed*.

    The whole graph is re-checked with the proposed edges in place of the
    task's current ones; *task_id* may be a task that does not exist yet.
    """
    edges = dependency_edges(task_snapshot(tasks, config))
    edges[task_id] = dedupe(proposed)
    return find_cycles(edges)


def would_create_cycle(
    task_id: str,
    proposed: Iterable[str],
    tasks: TaskSource,
    config: Config | None = None,
) -> bool:
    return bool(simulate_cycles(task_id, proposed, tasks, config))
