"""Prometheus metrics for redis_table."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all command execution metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Command metrics
        self.commands_total = Counter(
            "redis_table_commands_total",
            "Total number of commands executed",
            ["verb", "status"],  # status: success, error
            registry=self._registry,
        )

        self.command_latency_seconds = Histogram(
            "redis_table_command_latency_seconds",
            "Command latency in seconds, parse to shaped result",
            ["verb"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

        self.raw_commands_total = Counter(
            "redis_table_raw_commands_total",
            "Commands sent through the raw path because their verb is not registered",
            registry=self._registry,
        )

        # Result metrics
        self.rows_shaped = Histogram(
            "redis_table_rows_shaped",
            "Rows per shaped result",
            buckets=(1, 2, 5, 10, 50, 100, 500, 1000, 10000),
            registry=self._registry,
        )

        self.open_cursors = Gauge(
            "redis_table_open_cursors",
            "Number of cursors not yet closed",
            registry=self._registry,
        )

        # Store metrics
        self.store_errors_total = Counter(
            "redis_table_store_errors_total",
            "Total errors reported by the store",
            registry=self._registry,
        )

        self.info = Info(
            "redis_table",
            "redis_table build information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up the Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from redis_table import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
