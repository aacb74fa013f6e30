"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for external systems that redis_table
depends on: the key-value store itself.
"""

from redis_table.ports.outbound.store_client import StoreClient, StoreConnectionProvider

__all__ = [
    "StoreClient",
    "StoreConnectionProvider",
]
