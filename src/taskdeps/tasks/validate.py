"""Dependency validation: the gate every dependency change passes before commit.

Validation never raises for business-rule violations. All checks run and the
caller gets every error and warning in one :class:`ValidationResult`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from rich.markup import escape

from taskdeps import log
from taskdeps.config import Config, resolve_config
from taskdeps.cycles import find_cycles, format_cycle, simulate_cycles
from taskdeps.tasks.model import PRIORITY_MAX, PRIORITY_MIN, Task, TaskList
from taskdeps.tasks.snapshot import (
    TaskSource,
    dedupe,
    dependency_edges,
    index_tasks,
    task_snapshot,
)

SELF_DEPENDENCY_ERROR = "Task cannot depend on itself"
DUPLICATE_WARNING = "Duplicate dependencies detected and will be removed"


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    circular_dependencies: list[list[str]] = field(default_factory=list)
    effective_dependencies: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


# ── shared checks ────────────────────────────────────────────────


def _check_dependency_set(
    task_id: str,
    proposed: list[str],
    index: dict[str, Task],
    cfg: Config,
    result: ValidationResult,
    prefix: str = "",
) -> list[str]:
    """Run the per-task checks; return the de-duplicated dependency list."""
    effective = dedupe(proposed)

    missing = [dep for dep in effective if dep not in index]
    if missing:
        result.errors.append(
            f"{prefix}Invalid dependencies: {', '.join(missing)} do not exist"
        )

    if task_id in effective:
        result.errors.append(f"{prefix}{SELF_DEPENDENCY_ERROR}")

    if len(effective) != len(proposed):
        result.warnings.append(f"{prefix}{DUPLICATE_WARNING}")

    completed_titles = [
        index[dep].title or dep
        for dep in effective
        if dep in index and index[dep].is_completed
    ]
    if completed_titles:
        result.warnings.append(
            f"{prefix}Dependencies on completed tasks: {', '.join(completed_titles)}"
        )

    if len(effective) > cfg.max_dependencies:
        result.errors.append(
            f"{prefix}Maximum {cfg.max_dependencies} dependencies allowed per task"
        )

    return effective


def _record_cycles(result: ValidationResult, cycles: list[list[str]]) -> None:
    if not cycles:
        return
    result.circular_dependencies.extend(cycles)
    result.errors.append(
        "Circular dependencies detected: "
        + ", ".join(format_cycle(cycle) for cycle in cycles)
    )


# ── public API ───────────────────────────────────────────────────


def validate_dependencies(
    task_id: str,
    proposed_ids: Iterable[str],
    tasks: TaskSource,
    config: Config | None = None,
) -> ValidationResult:
    """Validate making *task_id* depend on exactly *proposed_ids*.

    *task_id* may be a task that is not in *tasks* yet (a task being added).
    The result's ``effective_dependencies`` is the de-duplicated set a caller
    should commit when ``is_valid`` is true.
    """
    cfg = resolve_config(config)
    snapshot = task_snapshot(tasks, cfg)
    index = index_tasks(snapshot)
    proposed = list(proposed_ids)

    log.debug(
        f"Validating dependencies for {task_id}: {len(proposed)} proposed, "
        f"{len(snapshot)} tasks in list"
    )

    result = ValidationResult()
    result.effective_dependencies = _check_dependency_set(
        task_id, proposed, index, cfg, result
    )

    # A self edge is already reported above; keep it out of the cycle search.
    simulated = [dep for dep in result.effective_dependencies if dep != task_id]
    _record_cycles(result, simulate_cycles(task_id, simulated, snapshot, cfg))

    log.debug(
        f"Dependency validation for {task_id}: valid={result.is_valid}, "
        f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
    )
    return result


def validate_task_list(task_list: TaskList, config: Config | None = None) -> ValidationResult:
    """Check a whole task list against the committed-state invariants."""
    cfg = resolve_config(config)
    snapshot = task_snapshot(task_list, cfg)
    index = index_tasks(snapshot)
    result = ValidationResult()

    seen: set[str] = set()
    for n, task in enumerate(snapshot, start=1):
        if not task.id:
            result.errors.append(f"Task #{n}: missing id")
            continue
        if task.id in seen:
            result.errors.append(f"Duplicate id: {task.id}")
            continue
        seen.add(task.id)

        prefix = f"Task {task.id}: "
        if not task.title:
            result.errors.append(f"{prefix}missing title")
        if not PRIORITY_MIN <= task.priority <= PRIORITY_MAX:
            result.errors.append(
                f"{prefix}priority must be between {PRIORITY_MIN} and "
                f"{PRIORITY_MAX} (got {task.priority})"
            )
        if task.estimated_duration is not None and task.estimated_duration <= 0:
            result.errors.append(
                f"{prefix}estimated_duration must be a positive number of minutes"
            )

        _check_dependency_set(
            task.id, list(task.dependencies), index, cfg, result, prefix=prefix
        )

    # Self edges are already reported per task.
    edges = {
        task_id: [dep for dep in deps if dep != task_id]
        for task_id, deps in dependency_edges(snapshot).items()
    }
    _record_cycles(result, find_cycles(edges))
    return result


def validate_and_report(task_list: TaskList, config: Config | None = None) -> bool:
    """Validate *task_list* and print errors/warnings. Return ``True`` if valid."""
    result = validate_task_list(task_list, config)

    for warning in result.warnings:
        log.warn(escape(warning))

    if result.is_valid:
        log.success(f"Task list is valid ({len(task_list.tasks)} tasks)")
        return True

    log.error("Task list validation failed:")
    for err in result.errors:
        log.error(f"  - {escape(err)}")
    return False


def format_validation_error(result: ValidationResult) -> str:
    """Render *result* as a user-facing message with suggestions."""
    lines: list[str] = []

    if result.errors:
        lines.append("Dependency validation failed:")
        lines.extend(f"  • {err}" for err in result.errors)

    if result.warnings:
        lines.append("Warnings:")
        lines.extend(f"  • {warning}" for warning in result.warnings)

    if result.circular_dependencies:
        lines.append("Circular dependencies:")
        lines.extend(f"  • {format_cycle(c)}" for c in result.circular_dependencies)

    suggestions: list[str] = []
    if any("Invalid dependencies" in err for err in result.errors):
        suggestions.append("Verify that all dependency task IDs exist in the same list")
        suggestions.append("Check for typos in task IDs")
    if result.circular_dependencies:
        suggestions.append("Remove one or more dependencies to break the circular chain")
        suggestions.append("Consider restructuring tasks to avoid circular dependencies")
    if any("Maximum" in err for err in result.errors):
        suggestions.append("Split the task into smaller tasks with fewer dependencies")

    if suggestions:
        lines.append("")
        lines.append("Suggestions:")
        lines.extend(f"  • {s}" for s in suggestions)

    return "\n".join(lines)
