"""Tests for the in-memory TTL cache."""

from tests.fakes import FakeClock
from transfer_advisor.adapters.cache import TtlCache


def test_fresh_entry_is_returned() -> None:
    clock = FakeClock()
    cache: TtlCache[list[int]] = TtlCache(15, clock=clock)
    cache.set("701301", [1, 2])

    clock.advance(14.9)

    assert cache.get("701301") == [1, 2]


def test_expired_entry_is_not_fresh_but_still_stale() -> None:
    """Given an entry older than the TTL, then get misses and get_stale still returns it."""
    clock = FakeClock()
    cache: TtlCache[list[int]] = TtlCache(15, clock=clock)
    cache.set("701301", [1])

    clock.advance(15)

    assert cache.get("701301") is None
    assert cache.get_stale("701301") == [1]


def test_set_replaces_entry_and_resets_age() -> None:
    clock = FakeClock()
    cache: TtlCache[str] = TtlCache(15, clock=clock)
    cache.set("k", "old")
    clock.advance(20)

    cache.set("k", "new")

    assert cache.get("k") == "new"
    clock.advance(14)
    assert cache.get("k") == "new"


def test_missing_key() -> None:
    cache: TtlCache[str] = TtlCache(15)

    assert cache.get("nope") is None
    assert cache.get_stale("nope") is None
