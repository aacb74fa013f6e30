"""Domain entities for redis_table.

Exports:
    - Row: One row of a tabular result
    - TabularResult: Immutable columns + rows snapshot
"""

from redis_table.domain.entities.tabular_result import Row, TabularResult

__all__ = [
    "Row",
    "TabularResult",
]
