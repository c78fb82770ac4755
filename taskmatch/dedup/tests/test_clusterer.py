import asyncio

import pytest

from taskmatch.dedup.clusterer import (
    build_similarity_matrix,
    find_duplicate_groups,
    group_components,
    group_greedy,
    groups_from_matrix,
)
from taskmatch.nlp.service import MatchService
from taskmatch.tasks import Task


def _table_similarity(table: dict[frozenset, float]):
    async def similarity(text1: str, text2: str) -> float:
        return table.get(frozenset((text1, text2)), 0.0)

    return similarity


CHAIN = _table_similarity(
    {
        frozenset(("A", "B")): 0.6,
        frozenset(("B", "C")): 0.6,
        frozenset(("A", "C")): 0.1,
    }
)


def _tasks(*titles: str) -> list[Task]:
    return [Task(id=str(i), title=title) for i, title in enumerate(titles, 1)]


def test_duplicate_titles_are_grouped():
    tasks = _tasks("Fix login bug", "Fix login bug urgent", "Add dark mode")

    groups = asyncio.run(MatchService().find_duplicate_groups(tasks, threshold=0.5))

    assert len(groups) == 1
    group = groups[0]
    assert [task.id for task in group.tasks] == ["1", "2"]
    assert group.max_similarity >= 0.5
    assert group.similarity_matrix[0][0] == 1.0
    assert group.similarity_matrix[0][1] == group.similarity_matrix[1][0]


def test_threshold_one_groups_only_identical_titles():
    tasks = _tasks("Fix login bug", "Fix login bug urgent", "fix tests", "Fix test")
    assert asyncio.run(MatchService().find_duplicate_groups(tasks, threshold=1.0)) == []

    tasks = _tasks("Fix login bug", "fix login bug", "Add dark mode")
    groups = asyncio.run(MatchService().find_duplicate_groups(tasks, threshold=1.0))
    assert [[task.id for task in group.tasks] for group in groups] == [["1", "2"]]


def test_fewer_than_two_tasks():
    assert asyncio.run(find_duplicate_groups([], CHAIN, 0.5)) == []
    assert asyncio.run(find_duplicate_groups(_tasks("A"), CHAIN, 0.5)) == []


def test_similarity_matrix_is_symmetric_with_unit_diagonal():
    matrix = asyncio.run(build_similarity_matrix(["A", "B", "C"], CHAIN))
    assert matrix == [
        [1.0, 0.6, 0.1],
        [0.6, 1.0, 0.6],
        [0.1, 0.6, 1.0],
    ]


def test_greedy_joins_against_any_member():
    groups = asyncio.run(find_duplicate_groups(_tasks("A", "B", "C"), CHAIN, 0.5))
    assert [[task.title for task in group.tasks] for group in groups] == [["A", "B", "C"]]
    assert groups[0].max_similarity == pytest.approx(0.6)


def test_greedy_depends_on_input_order():
    groups = asyncio.run(find_duplicate_groups(_tasks("A", "C", "B"), CHAIN, 0.5))

    assert [[task.title for task in group.tasks] for group in groups] == [["A", "B"]]
    assert groups[0].similarity_matrix == ((1.0, 0.6), (0.6, 1.0))


def test_components_strategy_is_order_independent():
    groups = asyncio.run(
        find_duplicate_groups(_tasks("A", "C", "B"), CHAIN, 0.5, strategy="components")
    )
    assert [[task.title for task in group.tasks] for group in groups] == [["A", "C", "B"]]
    assert groups[0].max_similarity == pytest.approx(0.6)


def test_each_task_in_at_most_one_group():
    matrix = [
        [1.0, 0.9, 0.0, 0.0],
        [0.9, 1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.8],
        [0.0, 0.0, 0.8, 1.0],
    ]
    for grouping in (group_greedy, group_components):
        groups = grouping(matrix, 0.5)
        members = [index for indices, _ in groups for index in indices]
        assert sorted(members) == [0, 1, 2, 3]
        assert [indices for indices, _ in groups] == [[0, 1], [2, 3]]


def test_unknown_strategy():
    with pytest.raises(ValueError):
        groups_from_matrix(_tasks("A", "B"), [[1.0, 0.0], [0.0, 1.0]], 0.5, "louvain")
