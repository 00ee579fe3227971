"""
Unit tests for the in-process Cache Service.

Time is driven by a fake millisecond clock so expiry boundaries are exact.
"""

import threading

import pytest

from app.domain.cache import CacheEntry, CacheStats
from app.services.cache import CacheService, DEFAULT_TTL_MS


class TestGenerateKey:
    """Test deterministic key generation."""

    def test_sorts_params(self):
        """Keys are sorted and joined with a pipe."""
        assert CacheService.generate_key("prefix", {"b": 2, "a": 1}) == "prefix:a:1|b:2"

    def test_construction_order_is_irrelevant(self):
        """Permutations of the same pairs produce the same key."""
        first = {"page": 1, "limit": 10, "search": "all"}
        second = {"search": "all", "page": 1, "limit": 10}
        third = dict(reversed(list(first.items())))

        key = CacheService.generate_key("noticias", first)
        assert key == CacheService.generate_key("noticias", second)
        assert key == CacheService.generate_key("noticias", third)
        assert key == "noticias:limit:10|page:1|search:all"

    def test_any_difference_changes_key(self):
        """Values, key sets and prefixes all participate in the key."""
        base = CacheService.generate_key("noticias", {"page": 1, "limit": 10})

        assert base != CacheService.generate_key("noticias", {"page": 2, "limit": 10})
        assert base != CacheService.generate_key("noticias", {"page": 1})
        assert base != CacheService.generate_key(
            "noticias", {"page": 1, "limit": 10, "search": "x"}
        )
        assert base != CacheService.generate_key("outro", {"page": 1, "limit": 10})

    def test_empty_params(self):
        assert CacheService.generate_key("prefix", {}) == "prefix:"

    def test_instance_call(self, cache_service):
        """generate_key has no side effects on the store."""
        cache_service.generate_key("noticias", {"page": 1})
        assert len(cache_service) == 0


class TestSetAndGet:
    """Test storage and lazy expiry."""

    def test_get_within_ttl(self, cache_service, clock):
        value = {"data": [1, 2, 3]}
        cache_service.set("k", value, 1000)

        clock.advance(500)
        assert cache_service.get("k") is value

    def test_get_after_ttl(self, cache_service, clock):
        cache_service.set("k", "v", 1000)

        clock.advance(1001)
        assert cache_service.get("k") is None

    def test_expiry_boundary_is_exclusive(self, cache_service, clock):
        """A read at exactly the expiry instant is still a hit."""
        cache_service.set("k", "v", 1000)

        clock.advance(1000)
        assert cache_service.get("k") == "v"

        clock.advance(1)
        assert cache_service.get("k") is None

    def test_expired_entry_removed_on_get(self, cache_service, clock):
        cache_service.set("k", "v", 10)
        clock.advance(11)

        assert cache_service.get_stats().expired_entries == 1
        cache_service.get("k")
        assert cache_service.get_stats().total_entries == 0

    def test_missing_key(self, cache_service):
        assert cache_service.get("missing") is None

    def test_custom_default(self, cache_service):
        sentinel = object()
        assert cache_service.get("missing", sentinel) is sentinel

    def test_default_ttl(self, cache_service, clock):
        """Without ttl_ms the five minute default applies."""
        assert DEFAULT_TTL_MS == 300_000
        cache_service.set("k", "v")

        clock.advance(DEFAULT_TTL_MS)
        assert cache_service.get("k") == "v"

        clock.advance(1)
        assert cache_service.get("k") is None

    def test_configured_default_ttl(self, clock):
        cache = CacheService(default_ttl_ms=50, clock=clock)
        cache.set("k", "v")

        clock.advance(51)
        assert cache.get("k") is None

    def test_zero_ttl_expires_on_next_tick(self, cache_service, clock):
        cache_service.set("k", "v", 0)

        clock.advance(1)
        assert cache_service.get("k") is None

    def test_negative_ttl_is_already_expired(self, cache_service):
        cache_service.set("k", "v", -1)
        assert cache_service.get("k") is None

    def test_overwrite_resets_expiry(self, cache_service, clock):
        """set() replaces the entry; it never extends the old one."""
        cache_service.set("k", "old", 1000)
        clock.advance(900)
        cache_service.set("k", "new", 1000)

        clock.advance(900)
        assert cache_service.get("k") == "new"

    def test_value_returned_without_copy(self, cache_service):
        payload = {"items": []}
        cache_service.set("k", payload)

        cache_service.get("k")["items"].append(1)
        assert cache_service.get("k") == {"items": [1]}


class TestInvalidateByPrefix:
    """Test namespace invalidation."""

    def test_removes_only_matching_keys(self, cache_service):
        cache_service.set("noticias:1", "a")
        cache_service.set("noticias:2", "b")
        cache_service.set("outro:1", "c")

        removed = cache_service.invalidate_by_prefix("noticias")

        assert removed == 2
        assert cache_service.get("noticias:1") is None
        assert cache_service.get("noticias:2") is None
        assert cache_service.get("outro:1") == "c"

    def test_idempotent(self, cache_service):
        cache_service.set("noticias:1", "a")
        cache_service.set("outro:1", "c")

        assert cache_service.invalidate_by_prefix("noticias") == 1
        assert cache_service.invalidate_by_prefix("noticias") == 0
        assert cache_service.get_stats().total_entries == 1
        assert cache_service.get("outro:1") == "c"

    def test_prefix_is_literal(self, cache_service):
        """Regex metacharacters in the prefix are matched literally."""
        cache_service.set("a.b:1", "x")
        cache_service.set("axb:1", "y")
        cache_service.set("n*:1", "z")

        cache_service.invalidate_by_prefix("a.b")
        cache_service.invalidate_by_prefix("n*")

        assert cache_service.get("a.b:1") is None
        assert cache_service.get("axb:1") == "y"
        assert cache_service.get("n*:1") is None

    def test_plain_string_prefix(self, cache_service):
        """Prefix matching is raw startswith, not namespace-aware."""
        cache_service.set("noticias:1", "a")
        cache_service.set("noticiasx", "b")

        cache_service.invalidate_by_prefix("noticias")

        assert cache_service.get_stats().total_entries == 0

    def test_removes_expired_matches_too(self, cache_service, clock):
        cache_service.set("noticias:1", "a", 10)
        clock.advance(20)

        assert cache_service.invalidate_by_prefix("noticias") == 1
        assert len(cache_service) == 0

    def test_many_entries(self, cache_service):
        for i in range(500):
            cache_service.set(f"noticias:page:{i}", i)
            cache_service.set(f"other:{i}", i)

        assert cache_service.invalidate_by_prefix("noticias:") == 500
        assert len(cache_service) == 500


class TestDeleteAndClear:
    """Test point and full removal."""

    def test_delete_returns_true_once(self, cache_service):
        cache_service.set("k", "v")

        assert cache_service.delete("k") is True
        assert cache_service.delete("k") is False
        assert cache_service.get("k") is None

    def test_delete_unknown_key(self, cache_service):
        assert cache_service.delete("never-set") is False

    def test_clear(self, cache_service):
        cache_service.set("a", 1)
        cache_service.set("b", 2)

        cache_service.clear()

        assert cache_service.get("a") is None
        assert cache_service.get("b") is None
        assert len(cache_service) == 0


class TestStats:
    """Test the read-only statistics scan."""

    def test_empty(self, cache_service):
        assert cache_service.get_stats() == CacheStats(0, 0, 0)

    def test_counts_valid_and_expired(self, cache_service, clock):
        cache_service.set("short", "a", 100)
        cache_service.set("long", "b", 10_000)

        clock.advance(500)
        stats = cache_service.get_stats()

        assert stats.total_entries == 2
        assert stats.valid_entries == 1
        assert stats.expired_entries == 1

    def test_does_not_evict(self, cache_service, clock):
        cache_service.set("short", "a", 100)
        cache_service.set("long", "b", 10_000)
        clock.advance(500)

        first = cache_service.get_stats()
        second = cache_service.get_stats()

        assert first == second
        assert len(cache_service) == 2

    def test_to_dict(self):
        stats = CacheStats(total_entries=3, valid_entries=2, expired_entries=1)
        assert stats.to_dict() == {
            "totalEntries": 3,
            "validEntries": 2,
            "expiredEntries": 1,
        }

    def test_inconsistent_stats_rejected(self):
        with pytest.raises(ValueError):
            CacheStats(total_entries=3, valid_entries=1, expired_entries=1)


class TestCacheEntry:
    """Test the entry entity."""

    def test_create(self):
        entry = CacheEntry.create("v", now=100.0, ttl_ms=50)
        assert entry.expires_at == 150.0

    def test_is_expired_strict(self):
        entry = CacheEntry(value="v", expires_at=150.0)
        assert not entry.is_expired(150.0)
        assert entry.is_expired(150.1)


class TestConcurrency:
    """The cache is one critical section when used from threads."""

    def test_parallel_writers_and_invalidation(self):
        cache = CacheService()
        errors = []

        def writer(worker: int):
            try:
                for i in range(200):
                    cache.set(f"noticias:{worker}:{i}", i)
                    cache.get(f"noticias:{worker}:{i}")
            except Exception as e:  # pragma: no cover - surfaced via assertion
                errors.append(e)

        def invalidator():
            try:
                for _ in range(50):
                    cache.invalidate_by_prefix("noticias")
                    cache.get_stats()
            except Exception as e:  # pragma: no cover - surfaced via assertion
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        threads.append(threading.Thread(target=invalidator))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        stats = cache.get_stats()
        assert stats.total_entries == stats.valid_entries + stats.expired_entries
