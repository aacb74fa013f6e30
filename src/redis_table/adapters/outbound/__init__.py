"""Outbound adapters - implementations of outbound ports."""

from redis_table.adapters.outbound.redis_store_client import (
    RedisConnectionProvider,
    RedisStoreClient,
)

__all__ = [
    "RedisStoreClient",
    "RedisConnectionProvider",
]
