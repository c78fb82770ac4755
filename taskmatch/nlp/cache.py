"""TTL- and capacity-bounded caches for processed queries and similarity scores."""

from collections.abc import Callable
from dataclasses import dataclass
import logging
import math
import threading
import time
from typing import Generic, TypeVar

from .tokenize import fold_text
from .types import ExtractedSearchFilters, ProcessedQuery

log = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_TTL = 300.0
DEFAULT_CAPACITY = 1000
DEFAULT_EVICTION_FRACTION = 0.2

# Joins the two halves of a pair key; never occurs in task text.
PAIR_SEPARATOR = "\x00"


def normalize_key(text: str | None) -> str:
    """Cache key for a single text."""
    return fold_text(text)


def pair_key(text1: str | None, text2: str | None) -> str:
    """Order-independent cache key for a pair of texts."""
    first, second = sorted((normalize_key(text1), normalize_key(text2)))
    return f"{first}{PAIR_SEPARATOR}{second}"


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    timestamp: float


class TTLCache(Generic[V]):
    """In-memory key/value store with TTL expiry and bounded size.

    Reads never refresh an entry's timestamp. When an insert pushes the size
    over capacity, expired entries are purged first and then the oldest
    ``eviction_fraction`` of the remaining entries (rounded up) is dropped.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        capacity: int = DEFAULT_CAPACITY,
        *,
        eviction_fraction: float = DEFAULT_EVICTION_FRACTION,
        clock: Callable[[], float] = time.time,
        name: str = "cache",
    ):
        self.ttl = ttl
        self.capacity = capacity
        self.eviction_fraction = eviction_fraction
        self.name = name
        self._clock = clock
        self._entries: dict[str, CacheEntry[V]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def _expired(self, entry: CacheEntry[V], now: float) -> bool:
        return now - entry.timestamp >= self.ttl

    def get(self, key: str) -> V | None:
        """Return the cached value, or None on a miss or expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._expired(entry, self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: V) -> None:
        """Store a value stamped with the current time."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, timestamp=self._clock())
            if len(self._entries) > self.capacity:
                self._evict()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop all expired entries. Returns the number removed."""
        with self._lock:
            return self._purge_expired()

    def _purge_expired(self) -> int:
        now = self._clock()
        expired = [k for k, entry in self._entries.items() if self._expired(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def _evict(self) -> None:
        purged = self._purge_expired()
        evicted = 0
        if len(self._entries) > self.capacity:
            oldest = sorted(self._entries.items(), key=lambda item: item[1].timestamp)
            evicted = math.ceil(len(self._entries) * self.eviction_fraction)
            for key, _ in oldest[:evicted]:
                del self._entries[key]
        log.debug(f"{self.name} over capacity: purged {purged} expired, evicted {evicted} oldest")


class NlpCache:
    """Independent caches for processed queries, similarity scores and filters."""

    KINDS = ("query", "similarity", "filters")

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        capacity: int = DEFAULT_CAPACITY,
        *,
        eviction_fraction: float = DEFAULT_EVICTION_FRACTION,
        clock: Callable[[], float] = time.time,
    ):
        def _make(name: str) -> TTLCache:
            return TTLCache(
                ttl,
                capacity,
                eviction_fraction=eviction_fraction,
                clock=clock,
                name=f"{name} cache",
            )

        self.queries: TTLCache[ProcessedQuery] = _make("query")
        self.similarities: TTLCache[float] = _make("similarity")
        self.filters: TTLCache[ExtractedSearchFilters] = _make("filters")

    def get_processed_query(self, query: str) -> ProcessedQuery | None:
        return self.queries.get(normalize_key(query))

    def set_processed_query(self, query: str, processed: ProcessedQuery) -> None:
        self.queries.set(normalize_key(query), processed)

    def get_similarity(self, text1: str, text2: str) -> float | None:
        return self.similarities.get(pair_key(text1, text2))

    def set_similarity(self, text1: str, text2: str, score: float) -> None:
        self.similarities.set(pair_key(text1, text2), score)

    def get_filters(self, query: str) -> ExtractedSearchFilters | None:
        return self.filters.get(normalize_key(query))

    def set_filters(self, query: str, filters: ExtractedSearchFilters) -> None:
        self.filters.set(normalize_key(query), filters)

    def clear(self, kind: str | None = None) -> None:
        """Clear one cache by kind, or all of them."""
        if kind is None:
            for cache in (self.queries, self.similarities, self.filters):
                cache.clear()
            return
        if kind == "query":
            self.queries.clear()
        elif kind == "similarity":
            self.similarities.clear()
        elif kind == "filters":
            self.filters.clear()
        else:
            raise ValueError(f"Unknown cache kind: {kind}")

    def stats(self) -> dict[str, int]:
        return {
            "query": len(self.queries),
            "similarity": len(self.similarities),
            "filters": len(self.filters),
        }
