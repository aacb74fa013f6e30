"""Result cursor port - the consumption surface offered to callers.

Generic tabular consumers read a command's result through this contract
without knowing which native reply produced it.

Row numbers and column positions are 1-based, the way tabular APIs number
them; 0 means "not on a row".

References:
    - PEP 249 (DB-API 2.0) cursor conventions
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol

from redis_table.domain.value_objects import ColumnType


class ResultCursor(Protocol):
    """Protocol for a scrollable cursor over one materialized result.

    A cursor starts before the first row. Navigation methods return True
    when they leave the cursor on a row and False otherwise.

    Thread Safety:
        Position state is not safe for concurrent mutation. Distinct
        cursors may be used from distinct threads.

    Example:
        with engine.execute("LRANGE queue 0 -1") as cursor:
            while cursor.next():
                print(cursor.value("value"))
    """

    # Shape

    @abstractmethod
    def column_count(self) -> int:
        """Number of columns in the result."""
        ...

    @abstractmethod
    def column_name(self, position: int) -> str:
        """Name of the column at 1-based ``position``.

        Raises:
            NotFoundError: If position is out of range.
        """
        ...

    @abstractmethod
    def column_type(self, position: int) -> ColumnType:
        """Type tag of the column at 1-based ``position``.

        Raises:
            NotFoundError: If position is out of range.
        """
        ...

    # Navigation

    @abstractmethod
    def next(self) -> bool:
        """Advance one row."""
        ...

    @abstractmethod
    def previous(self) -> bool:
        """Move back one row."""
        ...

    @abstractmethod
    def first(self) -> bool:
        """Jump to the first row. False if there are no rows."""
        ...

    @abstractmethod
    def last(self) -> bool:
        """Jump to the last row. False if there are no rows."""
        ...

    @abstractmethod
    def absolute(self, row: int) -> bool:
        """Jump to a 1-based row; 0 is before-first, negatives count from the end."""
        ...

    @abstractmethod
    def relative(self, rows: int) -> bool:
        """Move ``rows`` rows from the current row number."""
        ...

    @abstractmethod
    def is_before_first(self) -> bool:
        ...

    @abstractmethod
    def is_after_last(self) -> bool:
        ...

    @abstractmethod
    def row_number(self) -> int:
        """1-based current row number, 0 when not on a row."""
        ...

    # Values

    @abstractmethod
    def value(self, column: int | str) -> Any:
        """Value of a column in the current row.

        Args:
            column: 1-based position or case-insensitive column name.

        Raises:
            StateError: If the cursor is not on a row or is closed.
            NotFoundError: If the column does not exist.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the result. Every later call except close() raises StateError."""
        ...
