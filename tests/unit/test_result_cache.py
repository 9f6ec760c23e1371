"""Unit tests for the LRU/TTL ResultCache."""

import pytest

from stencil.cache import MISS, CacheStats, ResultCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def tick():
    return FakeClock()


@pytest.fixture
def cache(tick):
    return ResultCache(max_size=3, default_ttl=10.0, clock=tick, name="test")


class TestGetSet:
    def test_miss_then_hit(self, cache):
        assert cache.get("a") is MISS
        cache.set("a", 1)
        assert cache.get("a") == 1

    def test_falsy_values_are_hits(self, cache):
        cache.set("none", None)
        cache.set("zero", 0)
        assert cache.get("none") is None
        assert cache.get("zero") == 0
        assert cache.stats().hits == 2

    def test_replace_keeps_size(self, cache):
        cache.set("a", 1)
        cache.set("a", 2)
        assert len(cache) == 1
        assert cache.get("a") == 2

    def test_delete(self, cache):
        cache.set("a", 1)
        assert cache.delete("a") is True
        assert cache.delete("a") is False

    def test_rejects_zero_size(self):
        with pytest.raises(ValueError):
            ResultCache(max_size=0)


class TestEviction:
    def test_inserting_past_capacity_evicts_least_recently_used(self, cache):
        for key in "abc":
            cache.set(key, key)
        cache.get("a")
        cache.set("d", "d")
        assert len(cache) == 3
        assert "b" not in cache
        assert all(key in cache for key in "acd")
        assert cache.stats().evictions == 1

    def test_without_access_oldest_goes_first(self, cache):
        for key in "abcd":
            cache.set(key, key)
        assert cache.get("a") is MISS
        assert cache.get("b") == "b"

    def test_replacing_refreshes_position(self, cache):
        for key in "abc":
            cache.set(key, key)
        cache.set("a", "again")
        cache.set("d", "d")
        assert "a" in cache
        assert "b" not in cache


class TestExpiry:
    def test_entry_expires_at_ttl(self, cache, tick):
        cache.set("a", 1)
        tick.now = 9.9
        assert cache.get("a") == 1
        tick.now = 10.0
        assert cache.get("a") is MISS
        assert len(cache) == 0

    def test_per_entry_ttl(self, cache, tick):
        cache.set("short", 1, ttl=1.0)
        cache.set("long", 2, ttl=100.0)
        tick.now = 50.0
        assert cache.get("short") is MISS
        assert cache.get("long") == 2

    def test_contains_honors_expiry_without_counting(self, cache, tick):
        cache.set("a", 1)
        tick.now = 20.0
        assert "a" not in cache
        assert cache.stats().hits == 0
        assert cache.stats().misses == 0

    def test_sweep(self, cache, tick):
        cache.set("a", 1, ttl=1.0)
        cache.set("b", 2, ttl=1.0)
        cache.set("c", 3)
        tick.now = 5.0
        assert cache.sweep() == 2
        assert len(cache) == 1
        assert cache.sweep() == 0


class TestBookkeeping:
    def test_stats_and_hit_rate(self, cache):
        assert cache.stats().hit_rate == 0.0
        cache.set("a", 1)
        cache.get("a")
        cache.get("a")
        cache.get("b")
        stats = cache.stats()
        assert (stats.hits, stats.misses, stats.size, stats.max_size) == (2, 1, 1, 3)
        assert stats.hit_rate == pytest.approx(2 / 3)
        assert stats.to_dict()["hit_rate"] == pytest.approx(2 / 3)

    def test_reset_stats_keeps_entries(self, cache):
        cache.set("a", 1)
        cache.get("a")
        cache.reset_stats()
        assert cache.stats() == CacheStats(size=1, max_size=3)

    def test_stats_add(self):
        total = CacheStats(1, 2, 3, 4, 5) + CacheStats(1, 1, 1, 1, 1)
        assert total == CacheStats(2, 3, 4, 5, 6)

    def test_peek_does_not_touch_order_or_counters(self, cache, tick):
        cache.set("a", 1)
        tick.now = 3.0
        cache.get("a")
        entry = cache.peek("a")
        assert entry.access_count == 1
        assert entry.last_accessed_at == 3.0
        assert entry.inserted_at == 0.0
        assert cache.stats().hits == 1
        assert cache.peek("zzz") is None

    def test_invalidate_prefix(self, cache):
        cache.set("t1:x", 1)
        cache.set("t1:y", 2)
        cache.set("t2:x", 3)
        assert cache.invalidate_prefix("t1:") == 2
        assert "t2:x" in cache

    def test_clear(self, cache):
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0

    def test_repr(self, cache):
        cache.set("a", 1)
        assert repr(cache) == "<ResultCache test 1/3>"
