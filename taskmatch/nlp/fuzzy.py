"""Edit-distance task search and merging of ranked result lists."""

from collections.abc import Iterable

from ..tasks import task_description, task_id, task_title
from .distance import fuzzy_score
from .tokenize import normalize_text
from .types import SimilarTask


def _sorted(results: Iterable[SimilarTask]) -> list[SimilarTask]:
    return sorted(results, key=lambda task: -task.similarity)


def fuzzy_search(tasks: Iterable, query: str, threshold: float = 0.4) -> list[SimilarTask]:
    """Score tasks by the better of title and description edit similarity."""
    normalized_query = normalize_text(query)

    results: list[SimilarTask] = []
    for task in tasks:
        similarity = fuzzy_score(normalized_query, normalize_text(task_title(task)))
        description = task_description(task)
        if description:
            similarity = max(similarity, fuzzy_score(normalized_query, normalize_text(description)))

        if similarity >= threshold:
            results.append(
                SimilarTask(id=task_id(task), title=task_title(task), similarity=similarity)
            )

    return _sorted(results)


def combine_search_results(
    nlp_results: Iterable[SimilarTask],
    fuzzy_results: Iterable[SimilarTask],
    nlp_weight: float = 0.7,
) -> list[SimilarTask]:
    """Merge two ranked lists by weighted score, one entry per task id."""
    fuzzy_weight = 1.0 - nlp_weight
    combined: dict[str, SimilarTask] = {}

    for result in nlp_results:
        combined[result.id] = SimilarTask(
            id=result.id, title=result.title, similarity=result.similarity * nlp_weight
        )

    for result in fuzzy_results:
        weighted = result.similarity * fuzzy_weight
        existing = combined.get(result.id)
        if existing is not None:
            weighted += existing.similarity
        combined[result.id] = SimilarTask(id=result.id, title=result.title, similarity=weighted)

    return _sorted(combined.values())
