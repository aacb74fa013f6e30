"""Scrollable cursor over one materialized TabularResult.

The cursor owns its result until close(). Positions follow CursorPosition:
the cursor starts before the first row, moves forward and backward
without touching the store, and reports 1-based row numbers.

Usage:
    with statement.execute_query("HGETALL user:1") as cursor:
        for row in cursor:
            print(row["field"], row["value"])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator

from redis_table.application.metadata import ResultMetadata
from redis_table.domain.entities import Row, TabularResult
from redis_table.domain.errors import ConversionError, NotFoundError, StateError
from redis_table.domain.value_objects import ColumnType, CursorPosition, CursorState

if TYPE_CHECKING:
    from redis_table.infrastructure.metrics import MetricsRegistry

_TRUE_TEXT = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_TEXT = frozenset({"0", "false", "f", "no", "n", "off", ""})


class TabularCursor:
    """Stateful reader implementing the ResultCursor port.

    Navigation methods return True when they leave the cursor on a row.
    Value access while not on a row raises StateError; every call except
    close() raises StateError once the cursor is closed.

    Thread Safety:
        Not safe for concurrent mutation. The underlying result is
        immutable, so separate cursors never interfere.
    """

    def __init__(
        self,
        result: TabularResult,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self._result: TabularResult | None = result
        self._metadata = ResultMetadata(result.schema)
        self._position = CursorPosition.before_first()
        self._last_was_null = False
        self._metrics = metrics
        if self._metrics is not None:
            self._metrics.open_cursors.inc()

    # Lifecycle

    @property
    def closed(self) -> bool:
        return self._result is None

    def close(self) -> None:
        """Release the result. Idempotent."""
        if self._result is None:
            return
        self._result = None
        self._position = CursorPosition.before_first()
        if self._metrics is not None:
            self._metrics.open_cursors.dec()

    def _live(self) -> TabularResult:
        if self._result is None:
            raise StateError("Cursor is closed")
        return self._result

    def __enter__(self) -> "TabularCursor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[Row]:
        """Iterate from the current position, advancing with next()."""
        while self.next():
            yield self.current_row()

    # Shape

    @property
    def result(self) -> TabularResult:
        return self._live()

    @property
    def metadata(self) -> ResultMetadata:
        self._live()
        return self._metadata

    def column_count(self) -> int:
        self._live()
        return self._metadata.column_count()

    def column_name(self, position: int) -> str:
        self._live()
        return self._metadata.column_name(position)

    def column_type(self, position: int) -> ColumnType:
        self._live()
        return self._metadata.column_type(position)

    def find_column(self, name: str) -> int:
        self._live()
        return self._metadata.find_column(name)

    # Navigation

    @property
    def position(self) -> CursorPosition:
        return self._position

    def row_count(self) -> int:
        return self._live().row_count

    def next(self) -> bool:
        count = self._live().row_count
        match self._position.state:
            case CursorState.BEFORE_FIRST:
                return self._move_to(0, count)
            case CursorState.ON_ROW:
                return self._move_to(self._position.index + 1, count)
            case CursorState.AFTER_LAST:
                return False

    def previous(self) -> bool:
        count = self._live().row_count
        match self._position.state:
            case CursorState.BEFORE_FIRST:
                return False
            case CursorState.ON_ROW:
                return self._move_to(self._position.index - 1, count)
            case CursorState.AFTER_LAST:
                return self._move_to(count - 1, count)

    def first(self) -> bool:
        count = self._live().row_count
        if count == 0:
            return False
        return self._move_to(0, count)

    def last(self) -> bool:
        count = self._live().row_count
        if count == 0:
            return False
        return self._move_to(count - 1, count)

    def before_first(self) -> None:
        self._live()
        self._position = CursorPosition.before_first()

    def after_last(self) -> None:
        self._live()
        self._position = CursorPosition.after_last()

    def absolute(self, row: int) -> bool:
        """Move to a 1-based row.

        ``0`` moves before the first row, a row past the end moves after the
        last, and a negative row counts back from the end (``-1`` is the
        last row). On an empty result the cursor does not move.
        """
        count = self._live().row_count
        if count == 0:
            return False
        if row < 0:
            row = count + row + 1
        if row <= 0:
            self._position = CursorPosition.before_first()
            return False
        return self._move_to(row - 1, count)

    def relative(self, rows: int) -> bool:
        """Move to ``absolute(row_number() + rows)``.

        Off a row the base is 0, so a negative target counts back from the
        end like any other negative absolute row.
        """
        self._live()
        return self.absolute(self.row_number() + rows)

    def _move_to(self, index: int, count: int) -> bool:
        if index < 0:
            self._position = CursorPosition.before_first()
            return False
        if index >= count:
            self._position = CursorPosition.after_last()
            return False
        self._position = CursorPosition.on_row(index)
        return True

    def is_before_first(self) -> bool:
        self._live()
        return self._position.state is CursorState.BEFORE_FIRST

    def is_after_last(self) -> bool:
        self._live()
        return self._position.state is CursorState.AFTER_LAST

    def is_first(self) -> bool:
        self._live()
        return self._position.is_on_row and self._position.index == 0

    def is_last(self) -> bool:
        count = self._live().row_count
        return self._position.is_on_row and self._position.index == count - 1

    def row_number(self) -> int:
        """1-based current row number, 0 when not on a row."""
        self._live()
        return self._position.row_number

    # Values

    def current_row(self) -> Row:
        result = self._live()
        if not self._position.is_on_row:
            raise StateError(f"Cursor is not on a row ({self._position})")
        return result.rows[self._position.index]

    def value(self, column: int | str) -> Any:
        """Stored value of a column in the current row.

        Args:
            column: 1-based position or case-insensitive column name.

        Raises:
            StateError: If the cursor is closed or not on a row.
            NotFoundError: If the column does not exist.
        """
        row = self.current_row()
        if isinstance(column, str):
            position = self._metadata.find_column(column)
        elif isinstance(column, int) and not isinstance(column, bool):
            position = column
            self._metadata.column(position)
        else:
            raise NotFoundError(f"Invalid column reference {column!r}")
        value = row.values[position - 1]
        self._last_was_null = value is None
        return value

    def was_null(self) -> bool:
        """Whether the last value read was null."""
        self._live()
        return self._last_was_null

    def get_string(self, column: int | str) -> str | None:
        value = self.value(column)
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")
        return str(value)

    def get_int(self, column: int | str) -> int | None:
        value = self.value(column)
        if value is None:
            return None
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError as e:
            raise ConversionError(f"Cannot convert {value!r} to int") from e

    def get_float(self, column: int | str) -> float | None:
        value = self.value(column)
        if value is None:
            return None
        try:
            return float(value if isinstance(value, (int, float)) else str(value).strip())
        except ValueError as e:
            raise ConversionError(f"Cannot convert {value!r} to float") from e

    def get_bool(self, column: int | str) -> bool | None:
        value = self.value(column)
        if value is None:
            return None
        if isinstance(value, (bool, int)):
            return bool(value)
        text = str(value).strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
        raise ConversionError(f"Cannot convert {value!r} to bool")

    def get_bytes(self, column: int | str) -> bytes | None:
        value = self.value(column)
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        return str(value).encode("utf-8")

    def __repr__(self) -> str:
        if self._result is None:
            return "TabularCursor(closed)"
        return (
            f"TabularCursor({self._result.schema!r}, rows={self._result.row_count}, "
            f"position={self._position})"
        )
