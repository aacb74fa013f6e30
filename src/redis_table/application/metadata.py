"""Column metadata for tabular results.

Positions are 1-based, matching cursor row numbers and the numbering
tabular consumers expect.
"""

from __future__ import annotations

from redis_table.domain.errors import NotFoundError
from redis_table.domain.value_objects import Column, ColumnSchema, ColumnType


class ResultMetadata:
    """Describes the shape of one result before or while its rows are read.

    Every shaped column is nullable and read-only: empty replies produce
    null rows, and results are snapshots.

    Example:
        >>> meta = ResultMetadata(FIELD_VALUE_SCHEMA)
        >>> meta.column_count()
        2
        >>> meta.find_column("VALUE")
        2
    """

    __slots__ = ("_schema",)

    def __init__(self, schema: ColumnSchema) -> None:
        self._schema = schema

    @property
    def schema(self) -> ColumnSchema:
        return self._schema

    def column_count(self) -> int:
        return len(self._schema)

    def column(self, position: int) -> Column:
        """Column at 1-based ``position``.

        Raises:
            NotFoundError: If position is outside 1..column_count().
        """
        if isinstance(position, bool) or not 1 <= position <= len(self._schema):
            raise NotFoundError(
                f"Column position {position} out of range 1..{len(self._schema)}"
            )
        return self._schema[position - 1]

    def column_name(self, position: int) -> str:
        return self.column(position).name

    def column_label(self, position: int) -> str:
        # Shaped results carry no aliases; the label is the name.
        return self.column(position).name

    def column_type(self, position: int) -> ColumnType:
        return self.column(position).type

    def column_type_name(self, position: int) -> str:
        return self.column(position).type.type_name

    def column_class_name(self, position: int) -> str:
        return self.column(position).type.class_name

    def is_signed(self, position: int) -> bool:
        return self.column(position).type.signed

    def is_nullable(self, position: int) -> bool:
        self.column(position)
        return True

    def is_read_only(self, position: int) -> bool:
        self.column(position)
        return True

    def find_column(self, name: str) -> int:
        """1-based position of a column, ignoring case.

        Raises:
            NotFoundError: If no column has that name.
        """
        idx = self._schema.index_of(name)
        if idx is None:
            raise NotFoundError(f"Column '{name}' not found")
        return idx + 1

    def __repr__(self) -> str:
        return f"ResultMetadata({self._schema!r})"
