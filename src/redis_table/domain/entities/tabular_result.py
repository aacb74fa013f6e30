"""Tabular results: rows conforming to a column schema.

A TabularResult is a snapshot. Shaping is eager, so the row count and the
schema are fixed at construction and nothing is fetched from the store
afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence

from redis_table.domain.errors import NotFoundError
from redis_table.domain.value_objects import ColumnSchema, Command


@dataclass(frozen=True, slots=True)
class Row:
    """One row of a tabular result.

    Rows are accessed by 0-based position or by case-insensitive column name.
    """

    schema: ColumnSchema
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        if len(self.values) != len(self.schema):
            raise ValueError(
                f"Row has {len(self.values)} values but schema has {len(self.schema)} columns"
            )

    @property
    def columns(self) -> tuple[str, ...]:
        return self.schema.names

    def __getitem__(self, key: str | int) -> Any:
        if isinstance(key, int):
            return self.values[key]
        idx = self.schema.index_of(key)
        if idx is None:
            raise NotFoundError(f"Column '{key}' not found")
        return self.values[idx]

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def as_dict(self) -> dict[str, Any]:
        return dict(zip(self.schema.names, self.values))

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{c}={v!r}" for c, v in zip(self.schema.names, self.values))
        return f"Row({pairs})"


@dataclass(frozen=True, slots=True)
class TabularResult:
    """An immutable table of rows produced from one native reply.

    Attributes:
        schema: The column schema every row conforms to.
        rows: Rows in reply order.
        command: The command that produced this result, if known.
    """

    schema: ColumnSchema
    rows: tuple[Row, ...] = ()
    command: Command | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.rows, tuple):
            object.__setattr__(self, "rows", tuple(self.rows))
        for row in self.rows:
            if row.schema != self.schema:
                raise ValueError(f"Row {row!r} does not conform to {self.schema!r}")

    @classmethod
    def from_values(
        cls,
        schema: ColumnSchema,
        values: Iterable[Sequence[Any]],
        command: Command | None = None,
    ) -> TabularResult:
        """Build a result from raw value sequences, one per row."""
        rows = tuple(Row(schema, tuple(v)) for v in values)
        return cls(schema=schema, rows=rows, command=command)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.schema)

    def truncated(self, max_rows: int) -> TabularResult:
        """Return a result holding at most ``max_rows`` rows (0 means no limit)."""
        if max_rows <= 0 or max_rows >= len(self.rows):
            return self
        return TabularResult(schema=self.schema, rows=self.rows[:max_rows], command=self.command)

    def first_value(self) -> Any:
        """Value of the first column of the first row, or None if empty."""
        if not self.rows:
            return None
        return self.rows[0].values[0]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)
