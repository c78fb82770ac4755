"""Query processing, blended similarity and search filter extraction."""

import asyncio
import inspect
import logging
import re
from typing import Any, Protocol

from ..errors import ClassifierTimeoutError
from .config import DEFAULT_MATCH_CONFIG, MatchConfig
from .distance import jaccard_similarity
from .entities import ENTITY_TERMS_TO_REMOVE
from .stemming import stem_word
from .tokenize import collapse_whitespace, fold_text, tokenize as rule_tokenize
from .types import ClassifierResult, ExtractedSearchFilters, ProcessedQuery

log = logging.getLogger(__name__)

_ACTION_INTENT_PREFIX = "search.action."

# Only identical texts score 1.0.
MAX_DISTINCT_SCORE = 0.99


class Tokenizer(Protocol):
    def tokenize(self, text: str) -> list[str]: ...


class Stemmer(Protocol):
    def stem(self, word: str) -> str: ...


class RuleTokenizer:
    """Tokenizer backed by the rule-based normalizer."""

    def tokenize(self, text: str) -> list[str]:
        return rule_tokenize(text)


class RuleStemmer:
    """Stemmer backed by the suffix-stripping rules."""

    def stem(self, word: str) -> str:
        return stem_word(word)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _tokens(text: str, tokenizer: Tokenizer | None) -> list[str]:
    if tokenizer is None:
        return text.split()
    return list(tokenizer.tokenize(text))


def _stems(tokens: list[str], stemmer: Stemmer | None) -> list[str]:
    kept = [token for token in tokens if len(token) > 2]
    if stemmer is None:
        return [token.lower() for token in kept]
    return [stemmer.stem(token) for token in kept]


async def classify(
    classifier: Any,
    text: str,
    *,
    locale: str = "en",
    timeout: float | None = None,
) -> ClassifierResult:
    """Call the classifier, treating failures and malformed output as empty.

    Raises:
        ClassifierTimeoutError: the classifier did not answer within
            ``timeout`` seconds.
    """
    if classifier is None:
        return ClassifierResult()

    try:
        raw = classifier.process(locale, text)
        if inspect.isawaitable(raw):
            if timeout:
                try:
                    raw = await asyncio.wait_for(raw, timeout)
                except TimeoutError as exc:
                    raise ClassifierTimeoutError(
                        f"Classifier exceeded {timeout}s deadline"
                    ) from exc
            else:
                raw = await raw
        return ClassifierResult.coerce(raw)
    except ClassifierTimeoutError:
        raise
    except Exception as exc:
        log.warning(f"Classifier failed for {text[:60]!r}: {exc}")
        return ClassifierResult()


async def process_query(
    query: str | None,
    classifier: Any,
    tokenizer: Tokenizer | None = None,
    stemmer: Stemmer | None = None,
    *,
    locale: str = "en",
    timeout: float | None = None,
) -> ProcessedQuery:
    """Normalize, tokenize and classify a search query."""
    original = _text(query)
    normalized = fold_text(original)
    tokens = _tokens(normalized, tokenizer)
    stems = _stems(tokens, stemmer)

    result = await classify(classifier, normalized, locale=locale, timeout=timeout)

    entities: dict[str, list[str]] = {}
    for entity in result.entities:
        entities.setdefault(entity.type, []).append(entity.value)

    return ProcessedQuery(
        original=original,
        normalized=normalized,
        tokens=tuple(tokens),
        stems=tuple(stems),
        intent=result.intents[0].name if result.intents else None,
        intents=result.intents,
        entities=entities,
        tags=tuple(entities.get("tag", [])),
        status=entities.get("status", [None])[0],
        readiness=entities.get("readiness", [None])[0],
    )


async def calculate_similarity(
    text1: str | None,
    text2: str | None,
    tokenizer: Tokenizer | None,
    stemmer: Stemmer | None,
    classifier: Any,
    *,
    locale: str = "en",
    timeout: float | None = None,
    config: MatchConfig = DEFAULT_MATCH_CONFIG,
) -> float:
    """Blend stem Jaccard similarity with intent overlap."""
    norm1 = fold_text(text1)
    norm2 = fold_text(text2)

    if not norm1 or not norm2:
        return 0.0
    if norm1 == norm2:
        return 1.0

    stems1 = _stems(_tokens(norm1, tokenizer), stemmer)
    stems2 = _stems(_tokens(norm2, tokenizer), stemmer)
    lexical = jaccard_similarity(stems1, stems2)

    result1 = await classify(classifier, norm1, locale=locale, timeout=timeout)
    result2 = await classify(classifier, norm2, locale=locale, timeout=timeout)
    intents1 = set(result1.intent_names)
    intents2 = set(result2.intent_names)

    both_have_intents = bool(intents1) and bool(intents2)
    intent_similarity = jaccard_similarity(intents1, intents2) if both_have_intents else 0.0

    weight = config.lexical_weight(both_have_intents)
    score = lexical * weight + intent_similarity * (1 - weight)
    return min(MAX_DISTINCT_SCORE, max(0.0, score))


async def extract_search_filters(
    query: str | None,
    classifier: Any,
    tokenizer: Tokenizer | None = None,
    stemmer: Stemmer | None = None,
    *,
    locale: str = "en",
    timeout: float | None = None,
) -> ExtractedSearchFilters:
    """Turn a natural-language query into structured search filters."""
    processed = await process_query(
        query, classifier, tokenizer, stemmer, locale=locale, timeout=timeout
    )

    extracted: list[str] = []

    if processed.status:
        extracted.append(f"status:{processed.status}")
    if processed.readiness:
        extracted.append(f"readiness:{processed.readiness}")
    for tag in processed.tags:
        extracted.append(f"tag:{tag}")

    priority = None
    if processed.entities.get("priority"):
        priority = processed.entities["priority"][0]
        extracted.append(f"priority:{priority}")

    action_types: tuple[str, ...] = ()
    if processed.intent and processed.intent.startswith(_ACTION_INTENT_PREFIX):
        action = processed.intent[len(_ACTION_INTENT_PREFIX) :]
        if action:
            action_types = (action,)
            extracted.append(f"action:{action}")

    return ExtractedSearchFilters(
        query=collapse_whitespace(processed.normalized) or None,
        status=processed.status,
        readiness=processed.readiness,
        priority=priority,
        tags=processed.tags,
        action_types=action_types,
        extracted_terms=tuple(extracted),
    )


def remove_extracted_terms(query: str, terms: list[str] | tuple[str, ...]) -> str:
    """Strip vocabulary words belonging to extracted ``type:value`` terms."""
    words: list[str] = []
    for term in terms:
        entity_type, _, value = term.partition(":")
        for word in ENTITY_TERMS_TO_REMOVE.get(entity_type, {}).get(value, ()):
            if word not in words:
                words.append(word)

    if not words:
        return query

    words.sort(key=len, reverse=True)
    pattern = re.compile(
        "|".join(rf"\b{re.escape(word)}\b" for word in words), re.IGNORECASE
    )
    return collapse_whitespace(pattern.sub("", query))
