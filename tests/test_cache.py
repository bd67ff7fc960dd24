"""Tests for changelog_generator.cache."""

from __future__ import annotations

import pytest

from changelog_generator.cache import ResponseCache, make_cache_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestMakeCacheKey:
    """Tests for make_cache_key()."""

    def test_parameter_order_does_not_matter(self) -> None:
        assert make_cache_key("op", {"a": 1, "b": 2}) == make_cache_key("op", {"b": 2, "a": 1})

    def test_method_is_part_of_key(self) -> None:
        assert make_cache_key("op1", {"a": 1}) != make_cache_key("op2", {"a": 1})

    def test_format(self) -> None:
        assert make_cache_key("list_tags", {"repo": "y", "owner": "x"}) == 'list_tags:{"owner": "x", "repo": "y"}'


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_miss_returns_none(self, clock: FakeClock) -> None:
        assert ResponseCache(clock=clock).get("k") is None

    def test_hit_within_ttl(self, clock: FakeClock) -> None:
        cache = ResponseCache(ttl=3600, clock=clock)
        cache.put("k", [1, 2])

        clock.now += 3599
        assert cache.get("k") == [1, 2]

    def test_expired_entry_is_a_miss(self, clock: FakeClock) -> None:
        cache = ResponseCache(ttl=3600, clock=clock)
        cache.put("k", "v")

        clock.now += 3600
        assert cache.get("k") is None
        # not swept, only ignored
        assert len(cache) == 1

    def test_put_overwrites_stale_entry(self, clock: FakeClock) -> None:
        cache = ResponseCache(ttl=10, clock=clock)
        cache.put("k", "old")
        clock.now += 20

        cache.put("k", "new")

        assert cache.get("k") == "new"
        assert len(cache) == 1

    def test_memoize_calls_producer_once(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)
        calls = []

        def produce() -> str:
            calls.append(1)
            return "value"

        assert cache.memoize("k", produce) == "value"
        assert cache.memoize("k", produce) == "value"
        assert len(calls) == 1

    def test_memoize_caches_empty_list(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)
        calls = []

        def produce() -> list:
            calls.append(1)
            return []

        cache.memoize("k", produce)
        cache.memoize("k", produce)

        assert len(calls) == 1

    def test_memoize_does_not_cache_failures(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)

        def fail() -> str:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cache.memoize("k", fail)

        assert cache.get("k") is None
        assert cache.memoize("k", lambda: "ok") == "ok"
