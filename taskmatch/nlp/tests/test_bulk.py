import asyncio

import pytest

from taskmatch.nlp.bulk import bulk_calculate_similarity, estimate_similarity, length_ratio
from taskmatch.nlp.cache import NlpCache


class _Similarity:
    def __init__(self, score: float = 0.42):
        self.score = score
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, text1: str, text2: str) -> float:
        self.calls.append((text1, text2))
        return self.score


def test_length_ratio():
    assert length_ratio("ab", "abcd") == 0.5
    assert length_ratio("", "") == 0.0


def test_estimate_similarity_trivial_cases_are_final():
    assert estimate_similarity("", "fix") == (0.0, True)
    assert estimate_similarity("fix bug", "fix bug") == (1.0, True)


def test_estimate_similarity_length_gate():
    score, final = estimate_similarity("ab", "abcdefghij")
    assert score == pytest.approx(0.1)
    assert final


def test_estimate_similarity_token_jaccard():
    assert estimate_similarity("fix login bug", "fix login page") == (0.5, False)


def test_estimate_similarity_punctuation_is_not_identity():
    # Only lowercasing and trimming decide identity; punctuation still counts.
    assert estimate_similarity("Fix bug!", "fix bug") == (pytest.approx(0.99), False)
    assert estimate_similarity("  Fix Bug ", "fix bug") == (1.0, True)


def test_bulk_rescores_only_uncertain_candidates():
    similarity = _Similarity()
    candidates = [
        "fix login bug",
        "Fix login page",
        "x",
        "totally unrelated words",
    ]

    results = asyncio.run(
        bulk_calculate_similarity("Fix login bug", candidates, 0.3, similarity=similarity)
    )

    assert results == [(0, 1.0), (1, pytest.approx(0.42))]
    assert similarity.calls == [("Fix login bug", "Fix login page")]


def test_bulk_accepts_high_first_pass_estimates():
    similarity = _Similarity()
    results = asyncio.run(
        bulk_calculate_similarity(
            "deploy api docs", ["deploy api doc"], 0.3, similarity=similarity
        )
    )

    assert results == [(0, pytest.approx(0.99))]
    assert similarity.calls == []


def test_bulk_does_not_cache_accepted_estimates():
    cache = NlpCache()
    results = asyncio.run(
        bulk_calculate_similarity(
            "deploy api docs", ["deploy api doc"], 0.3, similarity=_Similarity(), cache=cache
        )
    )

    assert results == [(0, pytest.approx(0.99))]
    assert cache.get_similarity("deploy api docs", "deploy api doc") is None


def test_bulk_uses_and_fills_cache():
    cache = NlpCache()
    cache.set_similarity("fix login bug", "rewrite login flow", 0.77)
    similarity = _Similarity(0.5)

    results = asyncio.run(
        bulk_calculate_similarity(
            "fix login bug",
            ["rewrite login flow", "fix login page"],
            0.3,
            similarity=similarity,
            cache=cache,
        )
    )

    assert results == [(0, 0.77), (1, 0.5)]
    assert similarity.calls == [("fix login bug", "fix login page")]
    assert cache.get_similarity("fix login page", "fix login bug") == 0.5


def test_bulk_filters_below_threshold():
    results = asyncio.run(
        bulk_calculate_similarity(
            "fix login bug", ["fix login page"], 0.6, similarity=_Similarity(0.55)
        )
    )
    assert results == []


def test_bulk_empty_candidates():
    assert asyncio.run(bulk_calculate_similarity("fix", [], similarity=_Similarity())) == []
