"""Grouping of near-duplicate tasks from a pairwise similarity matrix."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
import logging
from typing import Any

import networkx as nx

from ..tasks import task_title

log = logging.getLogger(__name__)

SimilarityFn = Callable[[str, str], Awaitable[float]]

GREEDY = "greedy"
COMPONENTS = "components"


@dataclass(frozen=True)
class DuplicateGroup:
    """Tasks judged to be duplicates of each other.

    ``similarity_matrix`` is indexed like ``tasks``: symmetric with 1.0 on
    the diagonal.
    """

    tasks: tuple[Any, ...]
    max_similarity: float
    similarity_matrix: tuple[tuple[float, ...], ...]

    def __len__(self) -> int:
        return len(self.tasks)


async def build_similarity_matrix(
    texts: Sequence[str],
    similarity_fn: SimilarityFn,
) -> list[list[float]]:
    """Score every unordered pair once and mirror it."""
    n = len(texts)
    matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        matrix[i][i] = 1.0

    pairs = [(i, j) for i in range(n) for j in range(i + 1, n)]
    scores = await asyncio.gather(*(similarity_fn(texts[i], texts[j]) for i, j in pairs))
    for (i, j), score in zip(pairs, scores):
        matrix[i][j] = score
        matrix[j][i] = score
    return matrix


def submatrix(matrix: Sequence[Sequence[float]], indices: Sequence[int]) -> list[list[float]]:
    """Restrict a square matrix to the given rows/columns, reindexed."""
    return [[matrix[i][j] for j in indices] for i in indices]


def group_greedy(
    matrix: Sequence[Sequence[float]],
    threshold: float,
) -> list[tuple[list[int], float]]:
    """Single forward pass of single-link grouping.

    Each unassigned item starts a group; every later-scanned unassigned item
    joins if it reaches ``threshold`` against any current member. Items
    skipped earlier in the scan are not revisited, so results depend on
    input order when similarity is not transitive.

    Returns:
        (member indices, max admitting similarity) for every group, singletons
        included.
    """
    n = len(matrix)
    assigned: set[int] = set()
    groups: list[tuple[list[int], float]] = []

    for i in range(n):
        if i in assigned:
            continue
        members = [i]
        assigned.add(i)
        max_similarity = 0.0

        for j in range(n):
            if j == i or j in assigned:
                continue
            best = max(matrix[j][member] for member in members)
            if best >= threshold:
                members.append(j)
                assigned.add(j)
                max_similarity = max(max_similarity, best)

        groups.append((members, max_similarity))
    return groups


def group_components(
    matrix: Sequence[Sequence[float]],
    threshold: float,
) -> list[tuple[list[int], float]]:
    """Connected components of the graph of pairs at or above ``threshold``."""
    graph = nx.Graph()
    graph.add_nodes_from(range(len(matrix)))
    for i in range(len(matrix)):
        for j in range(i + 1, len(matrix)):
            if matrix[i][j] >= threshold:
                graph.add_edge(i, j, weight=matrix[i][j])

    groups: list[tuple[list[int], float]] = []
    for component in nx.connected_components(graph):
        members = sorted(component)
        weights = [data["weight"] for _, _, data in graph.subgraph(members).edges(data=True)]
        groups.append((members, max(weights, default=0.0)))
    groups.sort(key=lambda group: group[0][0])
    return groups


_STRATEGIES = {GREEDY: group_greedy, COMPONENTS: group_components}


def groups_from_matrix(
    tasks: Sequence[Any],
    matrix: Sequence[Sequence[float]],
    threshold: float,
    strategy: str = GREEDY,
) -> list[DuplicateGroup]:
    """Partition tasks into duplicate groups of two or more members."""
    try:
        grouping = _STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown clustering strategy: {strategy}") from None

    groups: list[DuplicateGroup] = []
    for members, max_similarity in grouping(matrix, threshold):
        if len(members) < 2:
            continue
        groups.append(
            DuplicateGroup(
                tasks=tuple(tasks[i] for i in members),
                max_similarity=max_similarity,
                similarity_matrix=tuple(tuple(row) for row in submatrix(matrix, members)),
            )
        )
    return groups


async def find_duplicate_groups(
    tasks: Sequence[Any],
    similarity_fn: SimilarityFn,
    threshold: float,
    *,
    strategy: str = GREEDY,
) -> list[DuplicateGroup]:
    """Group tasks whose titles are similar at or above ``threshold``."""
    if len(tasks) <= 1:
        return []

    matrix = await build_similarity_matrix([task_title(task) for task in tasks], similarity_fn)
    groups = groups_from_matrix(tasks, matrix, threshold, strategy)
    log.debug(
        f"Found {len(groups)} duplicate groups among {len(tasks)} tasks "
        f"(threshold={threshold}, strategy={strategy})"
    )
    return groups
