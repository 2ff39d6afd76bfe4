"""Shared fixtures for taskdeps tests.

File handling in tests:
- Use tmp_path for any task list file so tests are isolated and cleaned up.
- Use taskdeps.tasks.io save_task_list/load_task_list for task list files.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from taskdeps import log
from taskdeps.tasks.io import save_task_list
from taskdeps.tasks.model import Task, TaskList, TaskStatus

BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register opt-in switch for large-graph performance tests."""
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Run performance tests marked with 'perf'.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip perf tests unless explicitly enabled."""
    if config.getoption("--run-perf"):
        return

    skip_perf = pytest.mark.skip(
        reason="Perf tests are skipped by default. Use --run-perf to include them.",
    )
    for item in items:
        if "perf" in item.keywords:
            item.add_marker(skip_perf)


@pytest.fixture(autouse=True)
def _quiet_log():
    """Reset verbose logging between tests (the CLI toggles it globally)."""
    log.set_verbose(False)
    yield
    log.set_verbose(False)


def _make_task(
    id: str,
    title: str = "",
    status: TaskStatus = TaskStatus.PENDING,
    priority: int = 3,
    dependencies: list[str] | None = None,
    estimated_duration: int | None = None,
    minute: int = 0,
) -> Task:
    created = BASE_TIME + timedelta(minutes=minute)
    return Task(
        id=id,
        title=title or f"Task {id}",
        status=status,
        priority=priority,
        dependencies=dependencies or [],
        estimated_duration=estimated_duration,
        created_at=created,
        updated_at=created,
    )


def _make_task_list(tasks: list[Task], id: str = "test") -> TaskList:
    return TaskList(id=id, title="Test list", tasks=tasks)


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def make_task_list():
    """Factory fixture that creates TaskList instances."""
    return _make_task_list


@pytest.fixture
def diamond() -> TaskList:
    """A <- (B, C) <- D: B and C depend on A, D depends on both."""
    return _make_task_list([
        _make_task("A", minute=0),
        _make_task("B", dependencies=["A"], minute=1),
        _make_task("C", dependencies=["A"], minute=2),
        _make_task("D", dependencies=["B", "C"], minute=3),
    ])


@pytest.fixture
def task_file(tmp_path: Path, diamond: TaskList) -> Path:
    """The diamond list saved as YAML."""
    path = tmp_path / "tasks.yaml"
    save_task_list(path, diamond)
    return path
