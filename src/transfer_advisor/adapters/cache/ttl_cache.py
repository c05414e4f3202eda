"""In-memory TTL cache implementation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from transfer_advisor.domain.contracts.ttl_cache import TtlCacheProtocol

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A cached value and the monotonic time it was stored at."""

    value: V
    stored_at: float


class TtlCache(TtlCacheProtocol[V]):
    """Keyed in-memory cache with a fixed time-to-live.

    Entries are only ever replaced whole, so concurrent readers always see a
    complete value. Expired entries are kept for stale fallback and are never
    explicitly invalidated.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: How long an entry counts as fresh.
            clock: Monotonic time source, injectable for tests.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[V]] = {}

    def get(self, key: str) -> V | None:
        """Get a cached value if it has not expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            return None
        return entry.value

    def get_stale(self, key: str) -> V | None:
        """Get the last cached value regardless of age."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: V) -> None:
        """Store a value, replacing any previous entry for the key."""
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
