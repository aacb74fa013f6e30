"""Table Engine - unified entry point for tabular access to the store.

This module provides the TableEngine class that wires the command parser,
dispatch table, store connection provider and reply shaper together and
hands out statements and cursors.

Usage:
    from redis_table.application import TableEngine

    with TableEngine() as engine:
        engine.execute_update('HSET user:1 name "Ada Lovelace" born 1815')

        with engine.execute("HGETALL user:1") as cursor:
            for row in cursor:
                print(row["field"], row["value"])
"""

from __future__ import annotations

import itertools
from typing import Any

from redis_table.adapters.outbound.redis_store_client import RedisConnectionProvider
from redis_table.application.cursor import TabularCursor
from redis_table.application.executor import CommandExecutor
from redis_table.application.statement import Statement, update_count_of
from redis_table.domain.errors import StateError, StoreError
from redis_table.domain.services import DispatchTable
from redis_table.domain.value_objects import ScalarReply
from redis_table.infrastructure.config import Config, get_config
from redis_table.infrastructure.logging import get_logger
from redis_table.infrastructure.metrics import MetricsRegistry, get_metrics
from redis_table.infrastructure.tracing import trace_function
from redis_table.ports.outbound import StoreConnectionProvider

logger = get_logger(__name__)


class TableEngine:
    """Main engine that owns the store connection provider.

    Cursors returned by execute() are independent of each other; cursors
    returned by a Statement are closed when that statement runs its next
    command or is closed.

    Thread Safety:
        The engine may be shared between threads. Each thread should use
        its own statements and cursors.
    """

    def __init__(
        self,
        config: Config | None = None,
        provider: StoreConnectionProvider | None = None,
        table: DispatchTable | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration. Uses the global configuration if None.
            provider: Connection provider. A RedisConnectionProvider built
                from ``config.store`` is created on start() if None, and
                closed on stop().
            table: Verb registry. Defaults to the built-in table.
            metrics: Metrics registry. Defaults to the global one.
        """
        self._config = config or get_config()
        self._provider = provider
        self._owns_provider = provider is None
        self._table = table
        self._metrics = metrics or get_metrics()

        self._executor: CommandExecutor | None = None
        self._statements: dict[int, Statement] = {}
        self._statement_ids = itertools.count(1)
        self._started = False

    @property
    def config(self) -> Config:
        return self._config

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def executor(self) -> CommandExecutor:
        return self._require_executor()

    @trace_function("redis_table.engine.start")
    def start(self) -> None:
        """Start the engine.

        Raises:
            StateError: If already started.
        """
        if self._started:
            raise StateError("Table engine already started")

        if self._provider is None:
            self._provider = RedisConnectionProvider(self._config.store)

        execution = self._config.execution
        self._executor = CommandExecutor(
            provider=self._provider,
            table=self._table,
            metrics=self._metrics,
            allow_raw=execution.allow_raw_commands,
            max_rows=execution.max_rows,
        )
        self._started = True

        logger.info(
            "engine_started",
            verbs=len(self._executor.table),
            allow_raw=execution.allow_raw_commands,
            max_rows=execution.max_rows,
        )

    @trace_function("redis_table.engine.stop")
    def stop(self) -> None:
        """Stop the engine, closing open statements and owned connections.

        Raises:
            StateError: If not started.
        """
        if not self._started:
            raise StateError("Table engine not started")

        for statement in list(self._statements.values()):
            statement.close()
        self._statements.clear()

        if self._owns_provider and self._provider is not None:
            self._provider.close()
            self._provider = None

        self._executor = None
        self._started = False
        logger.info("engine_stopped")

    def _require_executor(self) -> CommandExecutor:
        if not self._started or self._executor is None:
            raise StateError("Table engine not started")
        return self._executor

    # Execution

    def create_statement(self) -> Statement:
        """Create a statement bound to this engine."""
        executor = self._require_executor()
        statement = Statement(
            executor,
            statement_id=next(self._statement_ids),
            on_close=self._forget_statement,
        )
        self._statements[statement.statement_id] = statement
        return statement

    def _forget_statement(self, statement: Statement) -> None:
        self._statements.pop(statement.statement_id, None)

    def execute(self, text: str) -> TabularCursor:
        """Execute a command and return a new cursor over its result.

        Raises:
            StateError: If the engine is not started.
            ParseError, ArgumentError, StoreError: As raised by execution.
        """
        executor = self._require_executor()
        outcome = executor.execute(text)
        return TabularCursor(outcome.result, metrics=self._metrics)

    def execute_update(self, text: str) -> int:
        """Execute a command and return its update count."""
        outcome = self._require_executor().execute(text)
        return update_count_of(outcome.reply)

    def ping(self) -> bool:
        """Check that the store answers PING."""
        try:
            outcome = self._require_executor().execute("PING")
        except StoreError:
            return False
        match outcome.reply:
            case ScalarReply(value=value):
                return value in (b"PONG", "PONG")
            case _:
                return False

    def get_stats(self) -> dict[str, Any]:
        """Get engine statistics.

        Returns:
            Dictionary with various statistics.
        """
        stats: dict[str, Any] = {
            "started": self._started,
            "open_statements": len(self._statements),
            "max_rows": self._config.execution.max_rows,
            "allow_raw_commands": self._config.execution.allow_raw_commands,
            "max_connections": self._config.store.max_connections,
        }
        if self._executor is not None:
            stats["verbs"] = list(self._executor.table.verbs)
        return stats

    def __enter__(self) -> "TableEngine":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
