"""Unit tests for TTLCache."""

from sofra_cache.cache.l1_cache import TTLCache


class TestTTLCache:
    """Test the per-process LRU + TTL tier."""

    def test_get_miss(self):
        cache = TTLCache(max_size=10, ttl_seconds=60)
        assert cache.get("nonexistent") is None

    def test_set_and_get(self, clock):
        cache = TTLCache(max_size=10, ttl_seconds=60, clock=clock)

        cache.set("restaurants", [{"id": "1"}])
        cache.set("count", 42)

        assert cache.get("restaurants") == [{"id": "1"}]
        assert cache.get("count") == 42
        assert "count" in cache
        assert len(cache) == 2

    def test_delete(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("to_delete", "value")

        cache.delete("to_delete")
        cache.delete("nonexistent")

        assert cache.get("to_delete") is None

    def test_clear(self, clock):
        cache = TTLCache(clock=clock)
        for i in range(5):
            cache.set(f"key{i}", i)

        cache.clear()

        assert len(cache) == 0
        assert cache.keys() == []

    def test_lru_eviction(self, clock):
        cache = TTLCache(max_size=3, ttl_seconds=60, clock=clock)
        cache.set("key1", "value1")
        cache.set("key2", "value2")
        cache.set("key3", "value3")

        # key2 becomes least recently used
        cache.get("key1")
        cache.get("key3")
        cache.set("key4", "value4")

        assert cache.get("key2") is None
        assert sorted(cache.keys()) == ["key1", "key3", "key4"]

    def test_zero_max_size_holds_nothing(self, clock):
        cache = TTLCache(max_size=0, clock=clock)
        cache.set("key", "value")
        assert len(cache) == 0

    def test_expiry(self, clock):
        cache = TTLCache(max_size=10, ttl_seconds=5, clock=clock)
        cache.set("key", "value")

        clock.advance(4.5)
        assert cache.get("key") == "value"

        clock.advance(0.5)
        assert cache.get("key") is None
        assert "key" not in cache

    def test_per_entry_ttl(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.set("short", 1, ttl_seconds=1)
        cache.set("long", 2)

        clock.advance(2)

        assert cache.get("short") is None
        assert cache.get("long") == 2
        assert cache.default_ttl == 60
