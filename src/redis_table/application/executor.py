"""Command executor: text in, tabular result out.

Pipeline for one command:

    text --CommandParser--> Command
         --DispatchTable--> NativeReply      (inside provider.connection())
         --ReplyShaper----> TabularResult    (truncated to max_rows)

The store connection is borrowed for the dispatch and shaping of a single
command and is released on every exit path, including failures.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from redis_table.adapters.inbound.command_parser import CommandParser
from redis_table.domain.entities import TabularResult
from redis_table.domain.errors import RedisTableError, StoreError
from redis_table.domain.services import DispatchTable, ReplyShaper, default_dispatch_table
from redis_table.domain.value_objects import Command, NativeReply
from redis_table.infrastructure.logging import get_logger
from redis_table.infrastructure.metrics import MetricsRegistry, get_metrics
from redis_table.infrastructure.tracing import command_span, record_result
from redis_table.ports.outbound import StoreConnectionProvider

logger = get_logger(__name__)

# Metric label values for commands outside the dispatch table
RAW_VERB_LABEL = "RAW"
UNPARSED_VERB_LABEL = "UNPARSED"


@dataclass(frozen=True)
class ExecutionOutcome:
    """Everything produced by executing one command."""

    command: Command
    reply: NativeReply = field(repr=False)
    result: TabularResult
    raw: bool = False
    elapsed_seconds: float = 0.0

    @property
    def row_count(self) -> int:
        return self.result.row_count


class CommandExecutor:
    """Runs command text against the store and shapes the reply.

    Thread Safety:
        Safe to share between threads as long as the connection provider
        is; the executor itself holds no per-command state.
    """

    def __init__(
        self,
        provider: StoreConnectionProvider,
        table: DispatchTable | None = None,
        shaper: ReplyShaper | None = None,
        parser: CommandParser | None = None,
        metrics: MetricsRegistry | None = None,
        allow_raw: bool = True,
        max_rows: int = 0,
    ) -> None:
        """Initialize the executor.

        Args:
            provider: Source of scoped store connections.
            table: Verb registry. Defaults to the built-in table.
            shaper: Reply shaper.
            parser: Command text parser.
            metrics: Metrics registry. Defaults to the global one.
            allow_raw: Send unknown verbs verbatim instead of rejecting them.
            max_rows: Row limit applied to every result (0 means unlimited).
        """
        if max_rows < 0:
            raise ValueError(f"max_rows must be >= 0, got {max_rows}")
        self._provider = provider
        self._table = table if table is not None else default_dispatch_table()
        self._shaper = shaper or ReplyShaper()
        self._parser = parser or CommandParser()
        self._metrics = metrics or get_metrics()
        self._allow_raw = allow_raw
        self._max_rows = max_rows

    @property
    def table(self) -> DispatchTable:
        return self._table

    @property
    def metrics(self) -> MetricsRegistry:
        return self._metrics

    @property
    def allow_raw(self) -> bool:
        return self._allow_raw

    @property
    def max_rows(self) -> int:
        return self._max_rows

    def parse(self, text: str) -> Command:
        """Parse command text without executing it."""
        return self._parser.parse(text)

    def execute(self, text: str, max_rows: int | None = None) -> ExecutionOutcome:
        """Execute one command.

        Args:
            text: Command text, e.g. ``HGETALL user:1``.
            max_rows: Per-call row limit overriding the executor's.

        Returns:
            The command, its native reply and the shaped result.

        Raises:
            ParseError: The text holds no command.
            ArgumentError: Bad arguments for a known verb, or an unknown
                verb while raw commands are disabled.
            StoreError: The store call failed.
        """
        limit = self._max_rows if max_rows is None else max_rows
        start = time.perf_counter()
        label = UNPARSED_VERB_LABEL
        verb: str | None = None

        try:
            command = self._parser.parse(text)
            verb = command.verb
            raw = command.verb not in self._table
            label = RAW_VERB_LABEL if raw else command.verb

            with command_span(command.verb, command.arg_count, raw=raw) as span:
                with self._provider.connection() as store:
                    reply = self._table.dispatch(command, store, allow_raw=self._allow_raw)
                    result = self._shaper.shape(reply, command).truncated(limit)
                record_result(span, reply.kind.name.lower(), result.row_count)
        except RedisTableError as e:
            self._record_failure(label, verb, e)
            raise

        elapsed = time.perf_counter() - start
        self._metrics.commands_total.labels(verb=label, status="success").inc()
        self._metrics.command_latency_seconds.labels(verb=label).observe(elapsed)
        self._metrics.rows_shaped.observe(result.row_count)

        if raw:
            self._metrics.raw_commands_total.inc()
            logger.info("raw_command_dispatched", verb=command.verb, arg_count=command.arg_count)

        logger.debug(
            "command_executed",
            verb=command.verb,
            rows=result.row_count,
            reply_kind=reply.kind.name.lower(),
            elapsed_ms=round(elapsed * 1000, 3),
        )
        return ExecutionOutcome(
            command=command,
            reply=reply,
            result=result,
            raw=raw,
            elapsed_seconds=elapsed,
        )

    def _record_failure(self, label: str, verb: str | None, error: RedisTableError) -> None:
        self._metrics.commands_total.labels(verb=label, status="error").inc()
        if isinstance(error, StoreError):
            self._metrics.store_errors_total.inc()
        log = logger.warning if isinstance(error, StoreError) else logger.info
        log(
            "command_failed",
            verb=verb,
            error_type=type(error).__name__,
            error=str(error),
        )
