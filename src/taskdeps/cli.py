"""taskdeps CLI: inspect and edit task list dependencies.

Installed as ``taskdeps`` console_script via pipx / pip.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.markup import escape

from taskdeps import __version__
from taskdeps import log as glog
from taskdeps.config import Config
from taskdeps.errors import DependencyValidationError, TaskDepsError
from taskdeps.tasks.io import load_task_list, save_task_list
from taskdeps.tasks.model import Task


# ── Custom Click group that turns domain errors into exit code 1 ─────


class TaskdepsGroup(click.Group):
    """Report ``TaskDepsError`` as a one-line error instead of a traceback."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except DependencyValidationError as exc:
            from taskdeps.tasks.validate import format_validation_error

            glog.error(f"Dependencies for {escape(exc.task_id)} rejected")
            glog.console.print(escape(format_validation_error(exc.result)))
            ctx.exit(1)
        except TaskDepsError as exc:
            glog.error(escape(str(exc)))
            ctx.exit(1)


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

TASK_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _split_ids(values: tuple[str, ...]) -> list[str]:
    """Accept ``A B`` as well as ``A,B``; empty items are a usage error."""
    ids: list[str] = []
    for value in values:
        parts = [part.strip() for part in value.split(",")]
        if any(not part for part in parts):
            raise click.BadParameter(
                "Dependency list cannot contain empty values (example: A,B).",
                param_hint="DEPENDENCIES",
            )
        ids.extend(parts)
    return ids


def _task_line(task: Task) -> str:
    title = f" {escape(task.title)}" if task.title else ""
    return f"  - [cyan]{escape(task.id)}[/cyan]{title} (p{task.priority}, {task.status.value})"


def _print_cycles(cycles: list[list[str]]) -> None:
    from taskdeps.cycles import format_cycle

    for cycle in cycles:
        glog.console.print(f"  [red]{escape(format_cycle(cycle))}[/red]")


@click.group(cls=TaskdepsGroup, context_settings=CONTEXT_SETTINGS)
@click.option("--max-nodes", type=click.IntRange(min=1), default=None, help="Node ceiling (default: $TASKDEPS_MAX_NODES or 10000)")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="taskdeps")
@click.pass_context
def main(ctx: click.Context, max_nodes: int | None, verbose: bool) -> None:
    """taskdeps: dependency resolution for task lists.

    Every command reads a task list file (YAML or JSON) and works on a
    snapshot of it. Commands that change dependencies or statuses validate
    first and only write the file when the change is accepted.

    \b
    EXAMPLES:
      taskdeps check tasks.yaml                 # Check list invariants
      taskdeps ready tasks.yaml                 # What can be worked on now
      taskdeps order tasks.yaml                 # Suggested execution order
      taskdeps validate tasks.yaml T3 T1,T2     # Dry-run a dependency change
      taskdeps set-deps tasks.yaml T3 T1 T2     # Validate and save
      taskdeps set-status tasks.yaml T1 completed
    """
    glog.set_verbose(verbose)
    try:
        ctx.obj = Config(max_nodes=max_nodes or 0, verbose=verbose)
    except ValueError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from None


# ── Read-only commands ───────────────────────────────────────────


@main.command()
@click.argument("task_file", type=TASK_FILE)
@click.pass_obj
def check(cfg: Config, task_file: Path) -> None:
    """Check a task list against the dependency invariants."""
    from taskdeps.tasks.validate import validate_and_report

    if not validate_and_report(load_task_list(task_file), cfg):
        sys.exit(1)


@main.command()
@click.argument("task_file", type=TASK_FILE)
@click.pass_obj
def graph(cfg: Config, task_file: Path) -> None:
    """Show the dependency graph structure."""
    from taskdeps.graph import build_dependency_graph

    g = build_dependency_graph(load_task_list(task_file), cfg)

    glog.info(f"{len(g)} tasks, {g.edge_count} dependency edges")
    glog.console.print(f"Roots:  {glog.fmt_ids(g.roots) or '-'}")
    glog.console.print(f"Leaves: {glog.fmt_ids(g.leaves) or '-'}")
    glog.console.print(f"Depth:  {max(g.depths.values(), default=0)}")

    edges = [(task_id, deps) for task_id, deps in g.edges.items() if deps]
    if edges:
        glog.console.print("")
        glog.console.print("[bold]>>> Dependencies[/bold]")
        for task_id, deps in edges:
            glog.console.print(f"  {escape(task_id)} -> {glog.fmt_ids(deps)}")

    for task_id, refs in g.missing.items():
        glog.warn(f"{escape(task_id)} references missing task(s): {glog.fmt_ids(refs)}")

    if g.cycles:
        glog.error(f"{len(g.cycles)} dependency cycle(s):")
        _print_cycles(g.cycles)
        sys.exit(1)


@main.command()
@click.argument("task_file", type=TASK_FILE)
@click.argument("task_id")
@click.argument("dependencies", nargs=-1)
@click.pass_obj
def validate(cfg: Config, task_file: Path, task_id: str, dependencies: tuple[str, ...]) -> None:
    """Dry-run setting TASK_ID's dependencies to DEPENDENCIES."""
    from taskdeps.tasks.validate import format_validation_error, validate_dependencies

    result = validate_dependencies(
        task_id, _split_ids(dependencies), load_task_list(task_file), cfg
    )
    if not result.is_valid:
        glog.console.print(escape(format_validation_error(result)))
        sys.exit(1)

    for warning in result.warnings:
        glog.warn(escape(warning))
    glog.success(
        f"Dependencies for {escape(task_id)} are valid: "
        f"{glog.fmt_ids(result.effective_dependencies) or '(none)'}"
    )


@main.command()
@click.argument("task_file", type=TASK_FILE)
@click.pass_obj
def ready(cfg: Config, task_file: Path) -> None:
    """List tasks that can be worked on now."""
    from taskdeps.readiness import get_ready_items

    items = get_ready_items(load_task_list(task_file), cfg)
    if not items:
        glog.warn("No tasks are ready.")
        return
    glog.info(f"Ready tasks: {len(items)}")
    for task in items:
        glog.console.print(_task_line(task))


@main.command()
@click.argument("task_file", type=TASK_FILE)
@click.pass_obj
def blocked(cfg: Config, task_file: Path) -> None:
    """List blocked tasks and what they are waiting on."""
    from taskdeps.readiness import get_blocked_items

    items = get_blocked_items(load_task_list(task_file), cfg)
    if not items:
        glog.success("No blocked tasks.")
        return
    glog.info(f"Blocked tasks: {len(items)}")
    for item in items:
        waiting = " ".join(
            f"{escape(dep.id)} ({dep.status.value})" for dep in item.blocked_by
        )
        glog.console.print(_task_line(item.task))
        glog.console.print(f"      waiting on: {waiting}")


@main.command()
@click.argument("task_file", type=TASK_FILE)
@click.pass_obj
def order(cfg: Config, task_file: Path) -> None:
    """Suggest an execution order that respects dependencies."""
    from taskdeps.ordering import suggest_task_order

    result = suggest_task_order(load_task_list(task_file), cfg)
    for n, task in enumerate(result.tasks, start=1):
        title = f" {escape(task.title)}" if task.title else ""
        glog.console.print(f"{n:>3}. [cyan]{escape(task.id)}[/cyan]{title}")

    if result.excluded:
        glog.error(f"Left out because of dependency cycles: {glog.fmt_ids(result.excluded)}")
        _print_cycles(result.cycles)
        sys.exit(1)


@main.command("critical-path")
@click.argument("task_file", type=TASK_FILE)
@click.pass_obj
def critical_path(cfg: Config, task_file: Path) -> None:
    """Show the longest duration-weighted dependency chain."""
    from taskdeps.critical_path import calculate_critical_path

    task_list = load_task_list(task_file)
    path = calculate_critical_path(task_list, cfg)
    if not path.task_ids:
        glog.warn("No critical path (empty or fully cyclic task list).")
        _print_cycles(path.cycles)
        return

    glog.info(f"Critical path: {len(path)} tasks, {path.total_duration} min")
    for task_id in path.task_ids:
        task = task_list.get_task(task_id)
        minutes = task.estimated_duration if task and task.estimated_duration else 0
        title = f" {escape(task.title)}" if task and task.title else ""
        glog.console.print(f"  - [cyan]{escape(task_id)}[/cyan]{title} ({minutes} min)")
    if path.cycles:
        glog.warn("Tasks on dependency cycles were ignored:")
        _print_cycles(path.cycles)


@main.command()
@click.argument("task_file", type=TASK_FILE)
@click.pass_obj
def analyze(cfg: Config, task_file: Path) -> None:
    """Summarize the dependency structure and suggest where to focus."""
    from taskdeps.analysis import analyze_dependencies

    a = analyze_dependencies(load_task_list(task_file), cfg)

    glog.console.print("[bold]============================================[/bold]")
    glog.console.print("[bold]>>> Dependency Analysis[/bold]")
    glog.console.print(f"Tasks:         {a.total} ({a.completed} completed, {a.active} active)")
    glog.console.print(f"Progress:      {a.progress}%")
    glog.console.print(f"With deps:     {a.with_dependencies}")
    glog.console.print(f"Ready:         {glog.fmt_ids(a.ready_ids) or '-'}")
    glog.console.print(f"Blocked:       {glog.fmt_ids(a.blocked_ids) or '-'}")
    glog.console.print(
        f"Critical path: {glog.fmt_ids(a.critical_path.task_ids) or '-'} "
        f"({a.critical_path.total_duration} min)"
    )
    glog.console.print(f"Max depth:     {a.max_depth}")
    if a.bottlenecks:
        glog.console.print(f"Bottlenecks:   {glog.fmt_ids(a.bottlenecks)}")
    if a.cycles:
        glog.console.print("Cycles:")
        _print_cycles(a.cycles)

    if a.recommendations:
        glog.console.print("")
        glog.console.print("[bold]>>> Recommendations[/bold]")
        for rec in a.recommendations:
            glog.console.print(f"  - {escape(rec)}")
    glog.console.print("[bold]============================================[/bold]")


# ── Mutating commands ────────────────────────────────────────────


@main.command("set-deps")
@click.argument("task_file", type=TASK_FILE)
@click.argument("task_id")
@click.argument("dependencies", nargs=-1)
@click.pass_obj
def set_deps(cfg: Config, task_file: Path, task_id: str, dependencies: tuple[str, ...]) -> None:
    """Validate and save TASK_ID's new DEPENDENCIES (none clears them)."""
    from taskdeps.mutations import set_task_dependencies

    updated, result = set_task_dependencies(
        load_task_list(task_file), task_id, _split_ids(dependencies), cfg
    )
    for warning in result.warnings:
        glog.warn(escape(warning))
    save_task_list(task_file, updated)
    glog.success(
        f"Saved dependencies for {escape(task_id)}: "
        f"{glog.fmt_ids(result.effective_dependencies) or '(none)'}"
    )


@main.command("set-status")
@click.argument("task_file", type=TASK_FILE)
@click.argument("task_id")
@click.argument("status")
def set_status(task_file: Path, task_id: str, status: str) -> None:
    """Move TASK_ID to STATUS if the transition is allowed."""
    from taskdeps.mutations import change_status
    from taskdeps.status import parse_status

    try:
        target = parse_status(status)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="STATUS") from None

    updated = change_status(load_task_list(task_file), task_id, target)
    save_task_list(task_file, updated)
    glog.success(f"Task {escape(task_id)} is now {target.value}")
