"""Protocol for time-to-live caching."""

from typing import Protocol, TypeVar

V = TypeVar("V")


class TtlCacheProtocol(Protocol[V]):
    """Protocol for a keyed cache whose entries expire after a fixed TTL."""

    def get(self, key: str) -> V | None:
        """Get a cached value if it has not expired.

        Args:
            key: Cache key (stop id or trip id).

        Returns:
            The cached value, or None if missing or expired.
        """
        ...

    def get_stale(self, key: str) -> V | None:
        """Get the last cached value regardless of age.

        Args:
            key: Cache key.

        Returns:
            The last stored value, or None if nothing was ever stored.
        """
        ...

    def set(self, key: str, value: V) -> None:
        """Store a value, replacing any previous entry for the key.

        Args:
            key: Cache key.
            value: Value to store.
        """
        ...
