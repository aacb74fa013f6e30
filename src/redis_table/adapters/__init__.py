"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (command text, REST)
- Outbound adapters: Implement external dependencies (Redis)
"""

from redis_table.adapters.outbound import (
    RedisConnectionProvider,
    RedisStoreClient,
)

__all__ = [
    # Outbound adapters
    "RedisStoreClient",
    "RedisConnectionProvider",
]
