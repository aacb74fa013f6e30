"""Infrastructure layer - cross-cutting concerns."""

from redis_table.infrastructure.config import (
    Config,
    ExecutionConfig,
    ObservabilityConfig,
    ServerConfig,
    StoreConfig,
    get_config,
)
from redis_table.infrastructure.logging import setup_logging, get_logger
from redis_table.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from redis_table.infrastructure.tracing import (
    setup_tracing,
    get_tracer,
    trace_span,
    command_span,
    record_result,
)

__all__ = [
    "Config",
    "StoreConfig",
    "ExecutionConfig",
    "ServerConfig",
    "ObservabilityConfig",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
    "command_span",
    "record_result",
]
