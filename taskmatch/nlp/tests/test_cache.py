import pytest

from taskmatch.nlp.cache import NlpCache, TTLCache, normalize_key, pair_key


class _Clock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_entry_expires_at_ttl():
    clock = _Clock()
    cache = TTLCache(ttl=10, capacity=5, clock=clock)
    cache.set("a", 1)

    clock.now = 9.9
    assert cache.get("a") == 1

    clock.now = 10.0
    assert cache.get("a") is None
    assert len(cache) == 0


def test_reads_do_not_refresh_timestamp():
    clock = _Clock()
    cache = TTLCache(ttl=10, capacity=5, clock=clock)
    cache.set("a", 1)

    clock.now = 5
    assert cache.get("a") == 1
    clock.now = 10
    assert cache.get("a") is None


def test_overflow_evicts_oldest_fifth_rounded_up():
    clock = _Clock()
    cache = TTLCache(ttl=100, capacity=5, clock=clock)
    for i in range(6):
        clock.now = float(i)
        cache.set(f"k{i}", i)

    assert len(cache) == 4
    assert "k0" not in cache
    assert "k1" not in cache
    assert cache.get("k2") == 2
    assert cache.get("k5") == 5


def test_overflow_purges_expired_before_evicting():
    clock = _Clock()
    cache = TTLCache(ttl=10, capacity=3, clock=clock)
    cache.set("a", 1)
    clock.now = 1
    cache.set("b", 2)
    clock.now = 5
    cache.set("c", 3)

    clock.now = 11
    cache.set("d", 4)

    assert len(cache) == 2
    assert cache.get("c") == 3
    assert cache.get("d") == 4


def test_purge_expired_returns_count():
    clock = _Clock()
    cache = TTLCache(ttl=10, capacity=5, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    clock.now = 20
    assert cache.purge_expired() == 2


def test_pair_key_is_order_independent():
    assert pair_key("B", " a ") == pair_key("a", "b") == "a\x00b"
    assert normalize_key(None) == ""


def test_pair_key_texts_with_colons_do_not_collide():
    assert pair_key("a:b", "c") != pair_key("a", "b:c")

    cache = NlpCache()
    cache.set_similarity("Release:v2", "notes", 0.3)
    assert cache.get_similarity("notes:release", "v2") is None
    assert cache.get_similarity("notes", "release:v2") == 0.3


def test_nlp_cache_similarity_is_symmetric():
    cache = NlpCache()
    cache.set_similarity("Fix login", "fix bug", 0.4)
    assert cache.get_similarity("fix bug", "FIX LOGIN") == 0.4


def test_nlp_cache_clear_by_kind():
    cache = NlpCache()
    cache.set_similarity("a", "b", 0.5)
    cache.set_filters("query", object())
    assert cache.stats() == {"query": 0, "similarity": 1, "filters": 1}

    cache.clear("similarity")
    assert cache.stats() == {"query": 0, "similarity": 0, "filters": 1}

    cache.clear()
    assert cache.stats() == {"query": 0, "similarity": 0, "filters": 0}


def test_nlp_cache_clear_unknown_kind():
    with pytest.raises(ValueError):
        NlpCache().clear("everything")


def test_nlp_cache_caches_are_independent():
    clock = _Clock()
    cache = NlpCache(ttl=10, capacity=2, clock=clock)
    cache.set_similarity("a", "b", 0.1)
    cache.set_similarity("a", "c", 0.2)
    cache.set_filters("x", object())

    assert cache.stats()["similarity"] == 2
    assert cache.stats()["filters"] == 1
