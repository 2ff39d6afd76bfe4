"""Dependency analysis: summary numbers and recommendations for one task list."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from taskdeps import log
from taskdeps.config import Config, resolve_config
from taskdeps.critical_path import CriticalPath, calculate_critical_path
from taskdeps.graph import build_dependency_graph
from taskdeps.readiness import get_blocked_items, get_ready_items
from taskdeps.tasks.model import Task, TaskStatus
from taskdeps.tasks.snapshot import TaskSource, task_snapshot

HIGH_PRIORITY = 4
EARLY_STAGE_PROGRESS = 25
LATE_STAGE_PROGRESS = 75
EARLY_STAGE_MIN_TASKS = 5


@dataclass
class DependencyAnalysis:
    total: int = 0
    completed: int = 0
    active: int = 0
    with_dependencies: int = 0
    ready_ids: list[str] = field(default_factory=list)
    blocked_ids: list[str] = field(default_factory=list)
    critical_path: CriticalPath = field(default_factory=CriticalPath)
    bottlenecks: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)
    max_depth: int = 0
    progress: int = 0
    recommendations: list[str] = field(default_factory=list)


def _top_blocker(blocked_by: list[list[Task]]) -> tuple[Task, int] | None:
    counts: Counter[str] = Counter()
    first_seen: dict[str, Task] = {}
    for deps in blocked_by:
        for dep in deps:
            counts[dep.id] += 1
            first_seen.setdefault(dep.id, dep)
    if not counts:
        return None
    task_id, count = counts.most_common(1)[0]
    return first_seen[task_id], count


def analyze_dependencies(tasks: TaskSource, config: Config | None = None) -> DependencyAnalysis:
    """Summarize the dependency structure of *tasks* and suggest where to focus."""
    cfg = resolve_config(config)
    snapshot = task_snapshot(tasks, cfg)
    graph = build_dependency_graph(snapshot, cfg)
    critical = calculate_critical_path(snapshot, cfg)
    ready = get_ready_items(snapshot, cfg)
    blocked = get_blocked_items(snapshot, cfg)

    total = len(snapshot)
    completed = sum(1 for t in snapshot if t.status == TaskStatus.COMPLETED)
    active = sum(1 for t in snapshot if t.is_open)
    progress = round(completed / total * 100) if total else 0

    bottlenecks = [
        task_id
        for task_id, users in graph.dependents.items()
        if len(users) >= cfg.bottleneck_threshold
        and not graph.nodes[task_id].is_completed
    ]

    recs: list[str] = []

    remaining_path = [
        graph.nodes[task_id]
        for task_id in critical.task_ids
        if not graph.nodes[task_id].is_completed
    ]
    if remaining_path:
        recs.append(
            f'Focus on the critical path: start with "{remaining_path[0].title}" '
            f"as it affects {len(critical) - 1} other tasks."
        )

    if not ready and active:
        top = _top_blocker([item.blocked_by for item in blocked])
        if top is not None:
            blocker, count = top
            recs.append(
                f'No tasks are ready! Focus on completing "{blocker.title}" '
                f"which is blocking {count} other tasks."
            )
        else:
            recs.append(
                "No tasks are ready. Check for circular dependencies or review task statuses."
            )
    elif ready:
        urgent = [t for t in ready if t.priority >= HIGH_PRIORITY]
        if urgent:
            recs.append(
                f"{len(ready)} tasks are ready. Prioritize high-priority tasks "
                f'like "{urgent[0].title}".'
            )
        else:
            recs.append(
                f"{len(ready)} tasks are ready to work on. Consider starting with "
                "the oldest or highest priority task."
            )

    if bottlenecks:
        recs.append(
            f'Bottleneck detected: "{graph.nodes[bottlenecks[0]].title}" is blocking '
            "multiple tasks. Consider breaking it down or prioritizing it."
        )

    if graph.cycles:
        recs.append(
            f"{len(graph.cycles)} circular dependencies detected. Review and break "
            "these cycles to unblock progress."
        )

    if progress < EARLY_STAGE_PROGRESS and total > EARLY_STAGE_MIN_TASKS:
        recs.append(
            "Project is in early stages. Focus on completing foundational tasks "
            "to unlock more work."
        )
    elif progress > LATE_STAGE_PROGRESS:
        recs.append(
            "Project is nearing completion! Focus on finishing remaining tasks "
            "and final reviews."
        )

    analysis = DependencyAnalysis(
        total=total,
        completed=completed,
        active=active,
        with_dependencies=sum(1 for t in snapshot if t.dependencies),
        ready_ids=[t.id for t in ready],
        blocked_ids=[item.task.id for item in blocked],
        critical_path=critical,
        bottlenecks=bottlenecks,
        cycles=graph.cycles,
        max_depth=max(graph.depths.values(), default=0),
        progress=progress,
        recommendations=recs,
    )
    log.debug(
        f"Dependency analysis: {total} tasks, {len(ready)} ready, "
        f"{len(blocked)} blocked, {len(recs)} recommendation(s)"
    )
    return analysis
