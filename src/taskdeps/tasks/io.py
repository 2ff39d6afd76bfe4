"""Load and save task lists as YAML or JSON files."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from taskdeps.errors import TaskListFormatError
from taskdeps.status import parse_status
from taskdeps.tasks.model import DEFAULT_PRIORITY, Task, TaskList, utcnow

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)

PathLike = Path | str


def _as_path(path: PathLike) -> Path:
    return path if isinstance(path, Path) else Path(path)


def _parse_datetime(value: Any, field_name: str, task_id: str) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise TaskListFormatError(
                f"Task {task_id}: {field_name} is not an ISO-8601 timestamp: {value!r}"
            ) from None
    else:
        raise TaskListFormatError(f"Task {task_id}: {field_name} must be a timestamp")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _str_list(value: Any, field_name: str, task_id: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TaskListFormatError(f"Task {task_id}: {field_name} must be a list")
    return [str(v) for v in value]


def _optional_int(value: Any, field_name: str, task_id: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TaskListFormatError(f"Task {task_id}: {field_name} must be an integer")
    return value


def task_from_dict(data: dict[str, Any]) -> Task:
    if not isinstance(data, dict):
        raise TaskListFormatError("Each task must be a mapping")

    task_id = str(data.get("id", "") or "")
    try:
        status = parse_status(str(data.get("status", "pending")))
    except ValueError as exc:
        raise TaskListFormatError(f"Task {task_id}: {exc}") from None

    priority = _optional_int(data.get("priority"), "priority", task_id)
    created = _parse_datetime(data.get("created_at"), "created_at", task_id) or utcnow()
    updated = _parse_datetime(data.get("updated_at"), "updated_at", task_id) or created

    return Task(
        id=task_id,
        title=str(data.get("title", "") or ""),
        description=str(data.get("description", "") or ""),
        status=status,
        priority=DEFAULT_PRIORITY if priority is None else priority,
        dependencies=_str_list(data.get("dependencies"), "dependencies", task_id),
        estimated_duration=_optional_int(
            data.get("estimated_duration"), "estimated_duration", task_id
        ),
        tags=_str_list(data.get("tags"), "tags", task_id),
        created_at=created,
        updated_at=updated,
        completed_at=_parse_datetime(data.get("completed_at"), "completed_at", task_id),
    )


def task_to_dict(task: Task) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "status": task.status.value,
        "priority": task.priority,
        "dependencies": list(task.dependencies),
    }
    if task.description:
        data["description"] = task.description
    if task.estimated_duration is not None:
        data["estimated_duration"] = task.estimated_duration
    if task.tags:
        data["tags"] = list(task.tags)
    data["created_at"] = task.created_at.isoformat()
    data["updated_at"] = task.updated_at.isoformat()
    if task.completed_at is not None:
        data["completed_at"] = task.completed_at.isoformat()
    return data


def task_list_from_dict(data: Any) -> TaskList:
    if not isinstance(data, dict):
        raise TaskListFormatError("Task list document must be a mapping")
    raw_tasks = data.get("tasks") or []
    if not isinstance(raw_tasks, list):
        raise TaskListFormatError("'tasks' must be a list")
    return TaskList(
        id=str(data.get("id", "") or ""),
        title=str(data.get("title", "") or ""),
        description=str(data.get("description", "") or ""),
        tasks=[task_from_dict(item) for item in raw_tasks],
    )


def task_list_to_dict(task_list: TaskList) -> dict[str, Any]:
    data: dict[str, Any] = {"id": task_list.id, "title": task_list.title}
    if task_list.description:
        data["description"] = task_list.description
    data["tasks"] = [task_to_dict(t) for t in task_list.tasks]
    return data


def load_task_list(path: PathLike) -> TaskList:
    """Read a task list from a ``.yaml``/``.yml`` or ``.json`` file."""
    p = _as_path(path)
    suffix = p.suffix.lower()
    try:
        text = p.read_text(encoding="utf-8")
        if suffix in JSON_SUFFIXES:
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TaskListFormatError(f"Could not parse {p}: {exc}") from exc
    return task_list_from_dict(data)


def save_task_list(path: PathLike, task_list: TaskList) -> None:
    """Write *task_list* to *path*; the suffix selects JSON or YAML."""
    p = _as_path(path)
    data = task_list_to_dict(task_list)
    if p.suffix.lower() in JSON_SUFFIXES:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    else:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    p.write_text(text, encoding="utf-8")
