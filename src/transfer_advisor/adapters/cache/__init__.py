"""Cache adapters."""

from transfer_advisor.adapters.cache.ttl_cache import CacheEntry, TtlCache

__all__ = ["CacheEntry", "TtlCache"]
