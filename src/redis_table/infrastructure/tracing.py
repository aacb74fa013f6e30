"""OpenTelemetry tracing configuration."""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

_TRACER_NAME = "redis_table"

# Span and attribute names for command execution
EXECUTE_SPAN = "redis_table.execute"
VERB_ATTRIBUTE = "command.verb"
ARG_COUNT_ATTRIBUTE = "command.arg_count"
RAW_ATTRIBUTE = "command.raw"
REPLY_KIND_ATTRIBUTE = "reply.kind"
ROW_COUNT_ATTRIBUTE = "result.row_count"

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = _TRACER_NAME,
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Set up OpenTelemetry tracing.

    Args:
        service_name: Name of the service for tracing
        otlp_endpoint: OTLP collector endpoint (e.g., "http://localhost:4317")
        console_export: Whether to also export to console (for debugging)

    Returns:
        Configured tracer instance
    """
    global _tracer

    from redis_table import __version__

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": __version__,
        }
    )
    provider = TracerProvider(resource=resource)

    if otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)

    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(_TRACER_NAME)
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Context manager for creating a trace span.

    Exceptions raised inside the block are recorded on the span by the
    SDK and re-raised.

    Args:
        name: Name of the span
        attributes: Optional attributes to add to the span

    Yields:
        The created span
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)
        yield span


def trace_function(
    name: str | None = None,
    attributes: dict[str, Any] | None = None,
):
    """
    Decorator for tracing a function.

    Args:
        name: Optional span name (defaults to the function's qualified name)
        attributes: Optional attributes to add to the span
    """
    def decorator(func):
        span_name = name or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with trace_span(span_name, attributes):
                return func(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def command_span(verb: str, arg_count: int, raw: bool = False) -> Generator[trace.Span, None, None]:
    """
    Open the span one command executes in.

    Args:
        verb: Upper-case command verb
        arg_count: Number of arguments after the verb
        raw: Whether the verb bypasses the dispatch table

    Yields:
        The command span, for record_result()
    """
    attributes = {
        VERB_ATTRIBUTE: verb,
        ARG_COUNT_ATTRIBUTE: arg_count,
        RAW_ATTRIBUTE: raw,
    }
    with trace_span(EXECUTE_SPAN, attributes) as span:
        yield span


def record_result(span: trace.Span, reply_kind: str, row_count: int) -> None:
    """Attach the reply kind and shaped row count to a command span."""
    span.set_attribute(REPLY_KIND_ATTRIBUTE, reply_kind)
    span.set_attribute(ROW_COUNT_ATTRIBUTE, row_count)
