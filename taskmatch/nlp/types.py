"""Typed contracts for query processing and similarity search."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def _field(item: Any, *names: str) -> Any:
    for name in names:
        if isinstance(item, Mapping):
            if name in item:
                return item[name]
        elif hasattr(item, name):
            return getattr(item, name)
    return None


def _score(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class Intent:
    name: str
    score: float


@dataclass(frozen=True)
class EntityMatch:
    type: str
    value: str


@dataclass(frozen=True)
class ClassifierResult:
    """Intents and named entities reported by a classifier."""

    intents: tuple[Intent, ...] = ()
    entities: tuple[EntityMatch, ...] = ()

    @property
    def intent_names(self) -> list[str]:
        return [intent.name for intent in self.intents]

    @classmethod
    def coerce(cls, raw: Any) -> "ClassifierResult":
        """Build a result from classifier output of any shape.

        Accepts ``ClassifierResult`` instances, mappings and objects with
        ``intents``/``entities`` attributes. Intents may use ``name`` or
        ``intent`` keys, entities ``type``/``entity`` and ``value``/``option``.
        Missing fields become empty and malformed items are dropped.
        """
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return cls()

        intents: list[Intent] = []
        raw_intents = _field(raw, "intents")
        if isinstance(raw_intents, (list, tuple)):
            for item in raw_intents:
                name = _field(item, "name", "intent")
                if isinstance(name, str) and name:
                    intents.append(Intent(name=name, score=_score(_field(item, "score"))))

        entities: list[EntityMatch] = []
        raw_entities = _field(raw, "entities")
        if isinstance(raw_entities, (list, tuple)):
            for item in raw_entities:
                entity_type = _field(item, "type", "entity")
                value = _field(item, "value", "option")
                if isinstance(entity_type, str) and entity_type and isinstance(value, str) and value:
                    entities.append(EntityMatch(type=entity_type, value=value))

        return cls(intents=tuple(intents), entities=tuple(entities))


@dataclass(frozen=True)
class ProcessedQuery:
    original: str
    normalized: str
    tokens: tuple[str, ...]
    stems: tuple[str, ...]
    intent: str | None
    intents: tuple[Intent, ...]
    entities: dict[str, list[str]]
    tags: tuple[str, ...] = ()
    status: str | None = None
    readiness: str | None = None


@dataclass(frozen=True)
class ExtractedSearchFilters:
    query: str | None = None
    status: str | None = None
    readiness: str | None = None
    priority: str | None = None
    tags: tuple[str, ...] = ()
    action_types: tuple[str, ...] = ()
    extracted_terms: tuple[str, ...] = ()


@dataclass(frozen=True)
class SimilarTask:
    id: str
    title: str
    similarity: float
