"""Cursor positions over a materialized row sequence.

State machine:

                 next() / first()
    BEFORE_FIRST ────────────────> ON_ROW(0) ──next()──> ON_ROW(1) ... ON_ROW(n-1)
         ^                             │                                  │
         │ previous() at row 0         │                          next()  │
         └─────────────────────────────┘                                  v
                                                                     AFTER_LAST

    absolute(k): 0 -> BEFORE_FIRST, k > n -> AFTER_LAST,
                 1..n -> ON_ROW(k-1), negative k counts back from the end.
    relative(k): absolute(row_number + k)

On an empty result next() moves straight from BEFORE_FIRST to AFTER_LAST.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class CursorState(Enum):
    """Coarse cursor states."""

    BEFORE_FIRST = auto()
    ON_ROW = auto()
    AFTER_LAST = auto()


@dataclass(frozen=True, slots=True)
class CursorPosition:
    """Where a cursor currently sits.

    Attributes:
        state: The coarse state.
        index: 0-based row index, only meaningful when state is ON_ROW.
    """

    state: CursorState
    index: int = -1

    def __post_init__(self) -> None:
        if self.state is CursorState.ON_ROW and self.index < 0:
            raise ValueError(f"ON_ROW requires a non-negative index, got {self.index}")

    @classmethod
    def before_first(cls) -> CursorPosition:
        return cls(CursorState.BEFORE_FIRST)

    @classmethod
    def after_last(cls) -> CursorPosition:
        return cls(CursorState.AFTER_LAST)

    @classmethod
    def on_row(cls, index: int) -> CursorPosition:
        return cls(CursorState.ON_ROW, index)

    @property
    def is_on_row(self) -> bool:
        return self.state is CursorState.ON_ROW

    @property
    def row_number(self) -> int:
        """1-based row number, or 0 when not on a row."""
        return self.index + 1 if self.is_on_row else 0

    def __str__(self) -> str:
        if self.is_on_row:
            return f"on-row({self.index})"
        return self.state.name.lower().replace("_", "-")
