"""String distance and set similarity metrics."""

from collections.abc import Iterable
from typing import Any


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def levenshtein_distance(s1: Any, s2: Any) -> int:
    """Minimum number of single-character edits turning s1 into s2."""
    s1 = _text(s1)
    s2 = _text(s2)

    track = [[0] * (len(s1) + 1) for _ in range(len(s2) + 1)]
    for i in range(len(s1) + 1):
        track[0][i] = i
    for j in range(len(s2) + 1):
        track[j][0] = j

    for j in range(1, len(s2) + 1):
        for i in range(1, len(s1) + 1):
            indicator = 0 if s1[i - 1] == s2[j - 1] else 1
            track[j][i] = min(
                track[j][i - 1] + 1,
                track[j - 1][i] + 1,
                track[j - 1][i - 1] + indicator,
            )

    return track[len(s2)][len(s1)]


def fuzzy_score(s1: Any, s2: Any) -> float:
    """Normalized Levenshtein similarity in [0, 1]."""
    s1 = _text(s1).lower().strip()
    s2 = _text(s2).lower().strip()

    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0

    distance = levenshtein_distance(s1, s2)
    return 1.0 - distance / max(len(s1), len(s2))


def jaccard_similarity(tokens1: Iterable[str] | None, tokens2: Iterable[str] | None) -> float:
    """Intersection over union of two token sets, 0.0 when either is empty."""
    set1 = set(tokens1 or ())
    set2 = set(tokens2 or ())

    if not set1 or not set2:
        return 0.0

    return len(set1 & set2) / len(set1 | set2)
