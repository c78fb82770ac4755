import json

import pytest

from taskmatch.errors import TaskFileError
from taskmatch.tasks import Task, load_tasks, task_field, task_search_text


def test_load_tasks_from_yaml_list(tmp_path):
    path = tmp_path / "tasks.yaml"
    path.write_text(
        "- id: 10\n"
        "  title: Fix login bug\n"
        "  tags: [auth]\n"
        "- title: Add dark mode\n"
        "  description: Theme support\n"
        "- description: no title here\n",
        encoding="utf-8",
    )

    tasks = load_tasks(path)

    assert tasks == [
        Task(id="10", title="Fix login bug", tags=("auth",)),
        Task(id="2", title="Add dark mode", description="Theme support"),
    ]


def test_load_tasks_from_json_mapping(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"tasks": [{"id": "a", "title": "Write docs"}]}), encoding="utf-8")
    assert load_tasks(path) == [Task(id="a", title="Write docs")]


def test_load_tasks_rejects_non_list(tmp_path):
    path = tmp_path / "tasks.yaml"
    path.write_text("just a string\n", encoding="utf-8")
    with pytest.raises(TaskFileError):
        load_tasks(path)


def test_load_tasks_invalid_yaml(tmp_path):
    path = tmp_path / "tasks.yaml"
    path.write_text("- title: [unclosed\n", encoding="utf-8")
    with pytest.raises(TaskFileError):
        load_tasks(path)


def test_load_tasks_missing_file(tmp_path):
    with pytest.raises(TaskFileError):
        load_tasks(tmp_path / "missing.yaml")


def test_task_field_reads_objects_and_mappings():
    assert task_field({"title": "A"}, "title") == "A"
    assert task_field(Task(id="1", title="B"), "title") == "B"
    assert task_field(object(), "title") is None


def test_task_search_text_repeats_title():
    assert task_search_text(Task(id="1", title="Fix bug")) == "Fix bug"
    assert (
        task_search_text({"title": "Fix bug", "description": "on mobile"})
        == "Fix bug Fix bug on mobile"
    )
