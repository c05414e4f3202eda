"""Contracts (protocols) shared between layers."""

from transfer_advisor.domain.contracts.ttl_cache import TtlCacheProtocol

__all__ = ["TtlCacheProtocol"]
