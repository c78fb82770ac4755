"""Task records as read by the matching engine, and task file loading."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import TaskFileError


@dataclass(frozen=True)
class Task:
    """Read-only view of a task record."""

    id: str
    title: str
    description: str | None = None
    tags: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Task":
        tags = data.get("tags") or ()
        if isinstance(tags, str):
            tags = (tags,)
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            description=data.get("description") or None,
            tags=tuple(str(tag) for tag in tags),
            metadata=dict(data.get("metadata") or {}),
        )


def task_field(task: Any, name: str) -> Any:
    """Read a field from a task object or mapping."""
    if isinstance(task, Mapping):
        return task.get(name)
    return getattr(task, name, None)


def task_title(task: Any) -> str:
    title = task_field(task, "title")
    return title if isinstance(title, str) else ""


def task_description(task: Any) -> str:
    description = task_field(task, "description")
    return description if isinstance(description, str) else ""


def task_id(task: Any) -> str:
    value = task_field(task, "id")
    return "" if value is None else str(value)


def task_search_text(task: Any) -> str:
    """Text scored for similar-task search; the title counts twice."""
    title = task_title(task)
    description = task_description(task)
    if description:
        return f"{title} {title} {description}"
    return title


def load_tasks(path: Path | str) -> list[Task]:
    """Load tasks from a YAML or JSON file.

    The file holds a list of task mappings, or a mapping with a ``tasks``
    list. Entries without a title are skipped.
    """
    task_path = Path(path)
    try:
        data = yaml.safe_load(task_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TaskFileError(f"Cannot read task file {task_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise TaskFileError(f"Invalid task file {task_path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("tasks")
    if not isinstance(data, list):
        raise TaskFileError(f"Task file {task_path} must contain a list of tasks")

    tasks: list[Task] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict) or not entry.get("title"):
            continue
        if "id" not in entry:
            entry = {**entry, "id": str(index + 1)}
        tasks.append(Task.from_mapping(entry))
    return tasks
