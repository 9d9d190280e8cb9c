"""Tests for the response cache."""

from nutriempower.services.cache import ResponseCache
from tests.conftest import FakeClock


def test_get_returns_stored_value() -> None:
    cache = ResponseCache()

    cache.set("hello[]", "hi there")

    assert cache.get("hello[]") == "hi there"
    assert cache.get("missing") is None


def test_entries_expire_after_ttl_even_when_read() -> None:
    clock = FakeClock()
    cache = ResponseCache(ttl_seconds=900, clock=clock)
    cache.set("key", "value")

    clock.advance(600)
    assert cache.get("key") == "value"

    clock.advance(300)
    assert cache.get("key") is None
    assert len(cache) == 0


def test_bound_keeps_most_recent_insertions() -> None:
    cache = ResponseCache(max_entries=3)

    for index in range(10):
        cache.set(f"key-{index}", f"value-{index}")

    assert len(cache) == 3
    assert cache.keys() == ["key-7", "key-8", "key-9"]


def test_eviction_ignores_read_recency() -> None:
    cache = ResponseCache(max_entries=2)
    cache.set("first", "1")
    cache.set("second", "2")

    assert cache.get("first") == "1"
    cache.set("third", "3")

    assert cache.get("first") is None
    assert cache.keys() == ["second", "third"]


def test_resetting_live_key_keeps_earlier_expiry() -> None:
    clock = FakeClock()
    cache = ResponseCache(ttl_seconds=100, clock=clock)
    cache.set("key", "old")

    clock.advance(60)
    cache.set("key", "new")
    assert cache.get("key") == "new"

    clock.advance(40)
    assert cache.get("key") is None


def test_expired_key_can_be_stored_again() -> None:
    clock = FakeClock()
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    cache.set("key", "old")
    clock.advance(10)

    cache.set("key", "new")
    clock.advance(5)

    assert cache.get("key") == "new"
