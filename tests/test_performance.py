"""Large task lists at the default node ceiling (opt-in with --run-perf)."""

from __future__ import annotations

import time

import pytest

from taskdeps.config import DEFAULT_MAX_NODES
from taskdeps.critical_path import calculate_critical_path
from taskdeps.errors import ResourceLimitError
from taskdeps.graph import build_dependency_graph
from taskdeps.ordering import suggest_task_order
from taskdeps.readiness import get_ready_items
from taskdeps.tasks.model import Task, TaskList
from taskdeps.tasks.validate import validate_dependencies

pytestmark = pytest.mark.perf

# Generous bound for slow CI machines.
TIME_LIMIT_SECONDS = 10.0


def _chain(n: int) -> TaskList:
    tasks = [
        Task(
            id=f"T{i}",
            title=f"Task {i}",
            dependencies=[f"T{i - 1}"] if i else [],
            estimated_duration=1,
        )
        for i in range(n)
    ]
    return TaskList(id="chain", tasks=tasks)


def _layered(n: int, width: int = 100) -> TaskList:
    tasks = []
    for i in range(n):
        layer = i // width
        deps = [f"T{(layer - 1) * width + j}" for j in range(0, width, 10)] if layer else []
        tasks.append(Task(id=f"T{i}", title=f"Task {i}", dependencies=deps, priority=i % 5 + 1))
    return TaskList(id="layered", tasks=tasks)


def _timed(fn, *args):
    start = time.perf_counter()
    result = fn(*args)
    return result, time.perf_counter() - start


def test_chain_at_ceiling():
    tl = _chain(DEFAULT_MAX_NODES)

    graph, elapsed = _timed(build_dependency_graph, tl)
    assert elapsed < TIME_LIMIT_SECONDS
    assert graph.depths[f"T{DEFAULT_MAX_NODES - 1}"] == DEFAULT_MAX_NODES - 1

    path, elapsed = _timed(calculate_critical_path, tl)
    assert elapsed < TIME_LIMIT_SECONDS
    assert path.total_duration == DEFAULT_MAX_NODES


def test_cycle_check_on_deep_chain():
    tl = _chain(DEFAULT_MAX_NODES)
    result, elapsed = _timed(validate_dependencies, "T0", [f"T{DEFAULT_MAX_NODES - 1}"], tl)
    assert elapsed < TIME_LIMIT_SECONDS
    assert result.circular_dependencies


def test_layered_order_and_readiness():
    tl = _layered(DEFAULT_MAX_NODES)

    order, elapsed = _timed(suggest_task_order, tl)
    assert elapsed < TIME_LIMIT_SECONDS
    assert len(order.tasks) == DEFAULT_MAX_NODES

    ready, elapsed = _timed(get_ready_items, tl)
    assert elapsed < TIME_LIMIT_SECONDS
    assert len(ready) == 100


def test_over_ceiling_rejected():
    with pytest.raises(ResourceLimitError):
        build_dependency_graph(_chain(DEFAULT_MAX_NODES + 1))
