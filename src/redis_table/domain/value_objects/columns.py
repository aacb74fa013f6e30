"""Column types and schemas for tabular results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator


class ColumnType(Enum):
    """Column type tags.

    Each tag carries the SQL type name reported to consumers, the Python
    class values of that column are exposed as, and whether it is signed.
    """

    TEXT = ("VARCHAR", "str", False)
    INTEGER = ("BIGINT", "int", True)
    FLOAT = ("DOUBLE", "float", True)
    BOOLEAN = ("BOOLEAN", "bool", False)
    BINARY = ("VARBINARY", "bytes", False)

    def __init__(self, type_name: str, class_name: str, signed: bool) -> None:
        self.type_name = type_name
        self.class_name = class_name
        self.signed = signed

    @property
    def tag(self) -> str:
        """Lower-case tag, e.g. ``text`` or ``integer``."""
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class Column:
    """A named, typed column."""

    name: str
    type: ColumnType = ColumnType.TEXT

    def __str__(self) -> str:
        return f"{self.name}:{self.type.tag}"


class ColumnSchema:
    """Ordered, immutable sequence of columns.

    A schema always has at least one column; lookups by name are
    case-insensitive. The first column wins if two names differ only in case.
    """

    __slots__ = ("_columns", "_index")

    def __init__(self, columns: Iterable[Column]) -> None:
        cols = tuple(columns)
        if not cols:
            raise ValueError("ColumnSchema requires at least one column")
        self._columns: tuple[Column, ...] = cols
        self._index: dict[str, int] = {}
        for i, col in enumerate(cols):
            self._index.setdefault(col.name.lower(), i)

    @classmethod
    def of(cls, *specs: tuple[str, ColumnType]) -> ColumnSchema:
        """Build a schema from ``(name, type)`` pairs."""
        return cls([Column(name, col_type) for name, col_type in specs])

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self._columns)

    def index_of(self, name: str) -> int | None:
        """Return the 0-based position of a column, or None."""
        return self._index.get(name.lower())

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __getitem__(self, index: int) -> Column:
        return self._columns[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnSchema):
            return NotImplemented
        return self._columns == other._columns

    def __hash__(self) -> int:
        return hash(self._columns)

    def __repr__(self) -> str:
        return f"ColumnSchema({', '.join(str(c) for c in self._columns)})"


# Schemas produced by the reply shaper
VALUE_SCHEMA = ColumnSchema.of(("value", ColumnType.TEXT))
COUNT_SCHEMA = ColumnSchema.of(("count", ColumnType.INTEGER))
FIELD_VALUE_SCHEMA = ColumnSchema.of(("field", ColumnType.TEXT), ("value", ColumnType.TEXT))
RESULT_SCHEMA = ColumnSchema.of(("result", ColumnType.TEXT))
