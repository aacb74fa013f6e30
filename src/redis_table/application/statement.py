"""Statements: the execution context that owns cursors.

A Statement executes one command at a time. Each execution closes the
cursor produced by the previous one, and closing the statement closes its
open cursor.
"""

from __future__ import annotations

from typing import Callable

from redis_table.application.cursor import TabularCursor
from redis_table.application.executor import CommandExecutor, ExecutionOutcome
from redis_table.application.metadata import ResultMetadata
from redis_table.domain.errors import StateError, UnsupportedOperationError
from redis_table.domain.services import decode_text
from redis_table.domain.value_objects import IntegerReply, NativeReply, ScalarReply
from redis_table.infrastructure.logging import get_logger

logger = get_logger(__name__)

NO_UPDATE_COUNT = -1


def update_count_of(reply: NativeReply) -> int:
    """Derive an update count from a native reply.

    ``OK`` counts as one affected item, an integer reply is taken as is, a
    numeric string is parsed, and anything else counts as one.
    """
    match reply:
        case IntegerReply(value=value):
            return value
        case ScalarReply(value=value):
            text = decode_text(value).strip()
            if text == "OK":
                return 1
            try:
                return int(text)
            except ValueError:
                return 1
        case _:
            return 1


class Statement:
    """Executes commands and exposes their results.

    Example:
        with engine.create_statement() as stmt:
            stmt.execute_update('SET greeting "hello world"')
            cursor = stmt.execute_query("GET greeting")
            cursor.next()
            cursor.get_string("value")  # 'hello world'
    """

    def __init__(
        self,
        executor: CommandExecutor,
        statement_id: int = 0,
        on_close: Callable[[Statement], None] | None = None,
    ) -> None:
        self._executor = executor
        self._statement_id = statement_id
        self._on_close = on_close
        self._max_rows = executor.max_rows
        self._cursor: TabularCursor | None = None
        self._last_outcome: ExecutionOutcome | None = None
        self._update_count = NO_UPDATE_COUNT
        self._closed = False
        self._log = logger.bind(statement_id=statement_id)

    @property
    def statement_id(self) -> int:
        return self._statement_id

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise StateError("Statement is closed")

    @property
    def max_rows(self) -> int:
        """Row limit for results of this statement (0 means unlimited)."""
        self._check_open()
        return self._max_rows

    @max_rows.setter
    def max_rows(self, value: int) -> None:
        self._check_open()
        if value < 0:
            raise ValueError(f"max_rows must be >= 0, got {value}")
        self._max_rows = value

    # Execution

    def execute(self, text: str) -> bool:
        """Execute a command, keeping its cursor as the current result.

        Every command produces a result, so this always returns True.
        """
        self.execute_query(text)
        return True

    def execute_query(self, text: str) -> TabularCursor:
        """Execute a command and return a cursor over its result."""
        self._check_open()
        self._release_cursor()
        self._forget_outcome()
        outcome = self._executor.execute(text, max_rows=self._max_rows)
        self._last_outcome = outcome
        self._cursor = TabularCursor(outcome.result, metrics=self._executor.metrics)
        return self._cursor

    def execute_update(self, text: str) -> int:
        """Execute a command and return its update count."""
        self._check_open()
        self._release_cursor()
        self._forget_outcome()
        outcome = self._executor.execute(text, max_rows=self._max_rows)
        self._last_outcome = outcome
        self._update_count = update_count_of(outcome.reply)
        return self._update_count

    def cancel(self) -> None:
        """Store commands run to completion once sent; cancellation is refused."""
        self._check_open()
        raise UnsupportedOperationError("Store commands cannot be cancelled")

    # Results

    @property
    def result(self) -> TabularCursor | None:
        """Cursor from the last query, or None after an update."""
        self._check_open()
        return self._cursor

    @property
    def update_count(self) -> int:
        """Update count of the last update, -1 after a query or a failed command."""
        self._check_open()
        return self._update_count

    @property
    def metadata(self) -> ResultMetadata | None:
        """Metadata of the most recently produced result."""
        self._check_open()
        if self._last_outcome is None:
            return None
        return ResultMetadata(self._last_outcome.result.schema)

    @property
    def last_outcome(self) -> ExecutionOutcome | None:
        return self._last_outcome

    # Lifecycle

    def _forget_outcome(self) -> None:
        # A failed command leaves no result behind
        self._last_outcome = None
        self._update_count = NO_UPDATE_COUNT

    def _release_cursor(self) -> None:
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None

    def close(self) -> None:
        """Close the statement and its open cursor. Idempotent."""
        if self._closed:
            return
        self._release_cursor()
        self._closed = True
        self._last_outcome = None
        if self._on_close is not None:
            self._on_close(self)
        self._log.debug("statement_closed")

    def __enter__(self) -> "Statement":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Statement(id={self._statement_id}, {state})"
