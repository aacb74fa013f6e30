"""Inbound ports - API contracts offered to callers.

Inbound ports define the interfaces that clients use to consume the
results of store commands.
"""

from redis_table.ports.inbound.result_cursor import ResultCursor

__all__ = [
    "ResultCursor",
]
