"""Two-pass similarity scoring of one target against many candidates."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from .cache import NlpCache
from .config import DEFAULT_MATCH_CONFIG, MatchConfig
from .distance import jaccard_similarity
from .processor import MAX_DISTINCT_SCORE
from .tokenize import fold_text, tokenize_and_normalize

SimilarityFn = Callable[[str, str], Awaitable[float]]


def length_ratio(text1: str, text2: str) -> float:
    """Ratio of the shorter to the longer text length."""
    longest = max(len(text1), len(text2))
    if longest == 0:
        return 0.0
    return min(len(text1), len(text2)) / longest


def estimate_similarity(
    target: str,
    text: str,
    config: MatchConfig = DEFAULT_MATCH_CONFIG,
) -> tuple[float, bool]:
    """Cheap similarity estimate for two texts.

    Empty, identical and length-gated pairs are decided on the lowercased,
    trimmed texts, exactly as the full scorer decides them.

    Returns:
        (score, final) where final marks scores that need no exact pass.
    """
    folded_target = fold_text(target)
    folded_text = fold_text(text)
    if not folded_target or not folded_text:
        return 0.0, True
    if folded_target == folded_text:
        return 1.0, True

    ratio = length_ratio(folded_target, folded_text)
    if ratio < config.length_ratio_gate:
        return ratio * config.length_ratio_penalty, True

    estimate = jaccard_similarity(
        tokenize_and_normalize(folded_target),
        tokenize_and_normalize(folded_text),
    )
    return min(estimate, MAX_DISTINCT_SCORE), False


def _by_score(results: list[tuple[int, float]]) -> list[tuple[int, float]]:
    return sorted(results, key=lambda item: (-item[1], item[0]))


async def bulk_calculate_similarity(
    target: str,
    candidates: Sequence[str],
    threshold: float = 0.1,
    *,
    similarity: SimilarityFn,
    cache: NlpCache | None = None,
    config: MatchConfig = DEFAULT_MATCH_CONFIG,
) -> list[tuple[int, float]]:
    """Score candidates against a target, returning (index, score) pairs.

    A cheap first pass (cache, exact/empty checks, length-ratio gate, stemmed
    token Jaccard) keeps candidates scoring at least ``threshold *
    prefilter_factor``. Survivors whose estimate exceeds ``accept_first_pass``
    keep it without being cached; the rest are rescored with ``similarity``.
    Cached scores and the trivial empty, identical and length-gated cases are
    final. Results are at or above ``threshold`` and sorted by descending
    score.
    """
    first_pass: list[tuple[int, float]] = []
    settled: set[int] = set()
    for index, text in enumerate(candidates):
        cached = cache.get_similarity(target, text) if cache else None
        if cached is not None:
            first_pass.append((index, cached))
            settled.add(index)
            continue

        score, final = estimate_similarity(target, text, config)
        if final:
            settled.add(index)
            if cache:
                cache.set_similarity(target, text, score)
        first_pass.append((index, score))

    cutoff = threshold * config.prefilter_factor
    potential = _by_score([item for item in first_pass if item[1] >= cutoff])

    async def _finalize(index: int, estimate: float) -> tuple[int, float]:
        if index in settled:
            return index, estimate
        if estimate > config.accept_first_pass:
            # Token estimates stay out of the shared cache.
            return index, estimate
        score = await similarity(target, candidates[index])
        if cache:
            cache.set_similarity(target, candidates[index], score)
        return index, score

    second_pass = await asyncio.gather(
        *(_finalize(index, estimate) for index, estimate in potential)
    )

    return _by_score([item for item in second_pass if item[1] >= threshold])
