"""Deterministic text normalization and tokenization."""

import re
from typing import Any

from .stemming import stem_word

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WS_RE = re.compile(r"\s+")

MIN_TOKEN_LENGTH = 3


def _as_text(text: Any) -> str:
    if text is None:
        return ""
    if not isinstance(text, str):
        return str(text)
    return text


def fold_text(text: Any) -> str:
    """Lowercase and trim. Exact-match and length comparisons use this form."""
    return _as_text(text).lower().strip()


def collapse_whitespace(text: str | None) -> str:
    """Collapse whitespace runs to single spaces and strip."""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()


def normalize_text(text: Any) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    lowered = _as_text(text).lower()
    return collapse_whitespace(_NON_WORD_RE.sub(" ", lowered))


def tokenize(text: Any) -> list[str]:
    """Split text into lowercase word tokens, keeping short and repeated ones."""
    if not isinstance(text, str):
        return []
    return [token for token in _WS_RE.split(_NON_WORD_RE.sub(" ", text.lower())) if token]


def tokenize_and_normalize(text: Any, stem: bool = True) -> list[str]:
    """Tokenize text into unique similarity-ready terms.

    Tokens shorter than three characters are dropped, the rest are stemmed
    (unless ``stem`` is False) and de-duplicated in first-seen order.
    """
    if not isinstance(text, str):
        return []

    terms: list[str] = []
    seen: set[str] = set()
    for token in tokenize(text):
        if len(token) < MIN_TOKEN_LENGTH:
            continue
        term = stem_word(token) if stem else token
        if term and term not in seen:
            seen.add(term)
            terms.append(term)
    return terms
