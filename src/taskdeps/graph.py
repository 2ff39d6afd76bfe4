"""Dependency graph construction.

The graph is held in id-keyed maps next to the tasks rather than inside them:
``edges`` points from a task to what it depends on, ``dependents`` points the
other way. It is rebuilt from the current snapshot on every call and safe to
build from inconsistent data (cycles, dangling ids, duplicate ids).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from taskdeps import log
from taskdeps.config import Config
from taskdeps.cycles import find_cycles
from taskdeps.ordering import topological_ids
from taskdeps.readiness import incomplete_dependencies, is_ready
from taskdeps.tasks.model import Task
from taskdeps.tasks.snapshot import TaskSource, dependency_edges, index_tasks, task_snapshot


@dataclass
class DependencyGraph:
    nodes: dict[str, Task] = field(default_factory=dict)
    edges: dict[str, list[str]] = field(default_factory=dict)
    dependents: dict[str, list[str]] = field(default_factory=dict)
    roots: list[str] = field(default_factory=list)
    leaves: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)
    ready: list[str] = field(default_factory=list)
    blocked: list[str] = field(default_factory=list)
    missing: dict[str, list[str]] = field(default_factory=dict)
    depths: dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def edge_count(self) -> int:
        return sum(
            1 for deps in self.edges.values() for dep in deps if dep in self.nodes
        )

    def dependencies_of(self, task_id: str) -> list[str]:
        return list(self.edges.get(task_id, []))

    def dependents_of(self, task_id: str) -> list[str]:
        return list(self.dependents.get(task_id, []))


def _depths(edges: dict[str, list[str]], ordered: list[str]) -> dict[str, int]:
    depths: dict[str, int] = {}
    for task_id in ordered:
        parents = [depths[d] for d in edges[task_id] if d in depths]
        depths[task_id] = max(parents) + 1 if parents else 0
    return depths


def build_dependency_graph(tasks: TaskSource, config: Config | None = None) -> DependencyGraph:
    """Build a :class:`DependencyGraph` from the current task collection."""
    snapshot = task_snapshot(tasks, config)
    nodes = index_tasks(snapshot)
    edges = dependency_edges(snapshot)

    dependents: dict[str, list[str]] = {task_id: [] for task_id in nodes}
    missing: dict[str, list[str]] = {}
    for task_id, deps in edges.items():
        for dep in deps:
            if dep in dependents:
                dependents[dep].append(task_id)
            else:
                missing.setdefault(task_id, []).append(dep)

    position = {task_id: i for i, task_id in enumerate(nodes)}
    ordered, _ = topological_ids(edges, position.__getitem__)

    graph = DependencyGraph(
        nodes=nodes,
        edges=edges,
        dependents=dependents,
        roots=[task_id for task_id, deps in edges.items() if not deps],
        leaves=[task_id for task_id, users in dependents.items() if not users],
        cycles=find_cycles(edges),
        ready=[task_id for task_id, task in nodes.items() if is_ready(task, nodes)],
        blocked=[
            task_id
            for task_id, task in nodes.items()
            if incomplete_dependencies(task, nodes)
        ],
        missing=missing,
        depths=_depths(edges, ordered),
    )

    log.debug(
        f"Dependency graph built: {len(graph)} nodes, {graph.edge_count} edges, "
        f"{len(graph.roots)} roots, {len(graph.leaves)} leaves, "
        f"{len(graph.cycles)} cycles"
    )
    return graph
