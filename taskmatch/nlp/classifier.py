"""Intent/entity classifier capability and its variants."""

import asyncio
import logging
import math
import re
from typing import Any, Protocol

from ..errors import ConfigError
from .config import DEFAULT_EMBEDDING_MODEL
from .entities import ACTION_VERBS, INTENT_EXAMPLES, TASK_ENTITIES
from .types import ClassifierResult, EntityMatch, Intent

log = logging.getLogger(__name__)

_TAG_RE = re.compile(r"(?:\btag:|(?:^|\s)#)([\w][\w/-]*)", re.IGNORECASE)


class Classifier(Protocol):
    async def process(self, locale: str, text: str) -> Any: ...


class QueryEmbedder(Protocol):
    def embed(self, text: str) -> list[float]: ...


def _vocabulary_pattern(forms: tuple[str, ...]) -> re.Pattern:
    ordered = sorted(set(forms), key=len, reverse=True)
    alternation = "|".join(re.escape(form) for form in ordered)
    return re.compile(rf"(?<![\w-])(?:{alternation})(?![\w-])", re.IGNORECASE)


_ENTITY_PATTERNS: list[tuple[str, str, re.Pattern]] = [
    (entity_type, value, _vocabulary_pattern(forms))
    for entity_type, values in TASK_ENTITIES.items()
    for value, forms in values.items()
]

_ACTION_PATTERNS: list[tuple[str, re.Pattern]] = [
    (verb, _vocabulary_pattern(forms)) for verb, forms in ACTION_VERBS.items()
]


def extract_entities(text: str) -> list[tuple[int, EntityMatch]]:
    """Find vocabulary entities and tags, returned with their text positions."""
    found: list[tuple[int, EntityMatch]] = []
    for entity_type, value, pattern in _ENTITY_PATTERNS:
        match = pattern.search(text)
        if match:
            found.append((match.start(), EntityMatch(type=entity_type, value=value)))

    for match in _TAG_RE.finditer(text):
        found.append((match.start(1), EntityMatch(type="tag", value=match.group(1).lower())))

    found.sort(key=lambda item: item[0])
    return found


def _positional_score(rank: int) -> float:
    return max(0.1, round(1.0 - 0.1 * rank, 2))


class NullClassifier:
    """Classifier that never reports intents or entities."""

    async def process(self, locale: str, text: str) -> ClassifierResult:
        return ClassifierResult()


class KeywordClassifier:
    """Vocabulary-driven classifier.

    Entities come from the task vocabulary (status, readiness, priority) plus
    ``tag:name`` and ``#name`` tags. Every matched vocabulary entry also
    yields a ``search.<type>.<value>`` intent, and action words yield
    ``search.action.<verb>``; intents are ranked by where they occur.
    """

    async def process(self, locale: str, text: str) -> ClassifierResult:
        return self.classify(text)

    def classify(self, text: str) -> ClassifierResult:
        if not isinstance(text, str) or not text.strip():
            return ClassifierResult()

        located = extract_entities(text)

        signals: list[tuple[int, str]] = [
            (position, f"search.{entity.type}.{entity.value}")
            for position, entity in located
            if entity.type != "tag"
        ]
        for verb, pattern in _ACTION_PATTERNS:
            match = pattern.search(text)
            if match:
                signals.append((match.start(), f"search.action.{verb}"))
        signals.sort(key=lambda item: item[0])

        intents: list[Intent] = []
        seen: set[str] = set()
        for _, name in signals:
            if name in seen:
                continue
            seen.add(name)
            intents.append(Intent(name=name, score=_positional_score(len(intents))))

        return ClassifierResult(
            intents=tuple(intents),
            entities=tuple(entity for _, entity in located),
        )


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0:
        return 0.0
    return dot / norm


class EmbeddingClassifier:
    """Ranks intents by embedding similarity to example utterances.

    Example embeddings are computed once on first use. Entities are taken
    from the keyword vocabulary.
    """

    def __init__(
        self,
        embedder: QueryEmbedder,
        examples: dict[str, tuple[str, ...]] | None = None,
        *,
        min_score: float = 0.5,
        max_intents: int = 3,
    ):
        self.embedder = embedder
        self.examples = examples if examples is not None else INTENT_EXAMPLES
        self.min_score = min_score
        self.max_intents = max_intents
        self._keywords = KeywordClassifier()
        self._example_vectors: list[tuple[str, list[float]]] | None = None

    def _ensure_examples(self) -> list[tuple[str, list[float]]]:
        if self._example_vectors is None:
            self._example_vectors = [
                (intent, self.embedder.embed(utterance))
                for intent, utterances in self.examples.items()
                for utterance in utterances
            ]
            log.info(f"Embedded {len(self._example_vectors)} intent examples")
        return self._example_vectors

    def classify(self, text: str) -> ClassifierResult:
        if not isinstance(text, str) or not text.strip():
            return ClassifierResult()

        vector = self.embedder.embed(text)
        best: dict[str, float] = {}
        for intent, example in self._ensure_examples():
            score = _cosine(vector, example)
            if score > best.get(intent, -1.0):
                best[intent] = score

        ranked = sorted(
            (item for item in best.items() if item[1] >= self.min_score),
            key=lambda item: (-item[1], item[0]),
        )
        intents = tuple(
            Intent(name=name, score=round(score, 4))
            for name, score in ranked[: self.max_intents]
        )
        entities = self._keywords.classify(text).entities
        return ClassifierResult(intents=intents, entities=entities)

    async def process(self, locale: str, text: str) -> ClassifierResult:
        return await asyncio.to_thread(self.classify, text)


def _default_embedder(model: str) -> QueryEmbedder:
    from .embedder import Embedder

    return Embedder(model)


def create_classifier(
    kind: str,
    *,
    embedder: QueryEmbedder | None = None,
    model: str = DEFAULT_EMBEDDING_MODEL,
) -> Classifier:
    """Build the classifier variant named by configuration."""
    if kind == "mock":
        return NullClassifier()
    if kind == "keyword":
        return KeywordClassifier()
    if kind == "embedding":
        return EmbeddingClassifier(embedder or _default_embedder(model))
    raise ConfigError(f"Unknown classifier kind: {kind!r}")
