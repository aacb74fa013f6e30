"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (ResultCursor)
- Outbound ports: Dependencies on external systems (StoreClient,
  StoreConnectionProvider)

Adapters implement these ports with concrete functionality.
"""

from redis_table.ports.inbound import ResultCursor
from redis_table.ports.outbound import StoreClient, StoreConnectionProvider

__all__ = [
    # Inbound ports
    "ResultCursor",
    # Outbound ports
    "StoreClient",
    "StoreConnectionProvider",
]
