"""REST API adapter for the table engine.

This module provides a FastAPI-based REST API for running store commands
and receiving their tabular results.

Endpoints:
    POST /execute - Execute a command and return its table
    POST /execute/update - Execute a command and return its update count
    GET /health - Health check (pings the store)
    GET /stats - Engine statistics

Usage:
    from redis_table.adapters.inbound.rest_api import create_app
    from redis_table.application import TableEngine

    engine = TableEngine()
    engine.start()

    app = create_app(engine)
    # Run with uvicorn: uvicorn app:app --host 0.0.0.0 --port 8080

References:
    - FastAPI documentation: https://fastapi.tiangolo.com/
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from redis_table import __version__
from redis_table.domain.entities import TabularResult
from redis_table.domain.errors import (
    ArgumentError,
    ParseError,
    RedisTableError,
    StateError,
    StoreError,
    UnsupportedOperationError,
)
from redis_table.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from redis_table.application import TableEngine

logger = get_logger(__name__)


class CommandRequest(BaseModel):
    """Request model for command execution."""

    command: str = Field(..., min_length=1, description="Command text, e.g. 'HGETALL user:1'")


class ColumnModel(BaseModel):
    """One column of a tabular response."""

    name: str = Field(..., description="Column name")
    type: str = Field(..., description="Column type tag (text, integer, ...)")


class TabularResponse(BaseModel):
    """Response model for a tabular result."""

    columns: list[ColumnModel] = Field(..., description="Result columns in order")
    rows: list[dict[str, Any]] = Field(default_factory=list, description="Result rows")
    row_count: int = Field(0, description="Number of rows")


class UpdateResponse(BaseModel):
    """Response model for update execution."""

    update_count: int = Field(..., description="Update count derived from the reply")


class StatsResponse(BaseModel):
    """Response model for engine statistics."""

    started: bool = Field(..., description="Whether the engine is started")
    open_statements: int = Field(0, description="Number of open statements")
    max_rows: int = Field(0, description="Row limit per result (0 means unlimited)")
    allow_raw_commands: bool = Field(True, description="Whether unknown verbs are sent verbatim")
    max_connections: int = Field(0, description="Store connection pool size")
    verbs: list[str] = Field(default_factory=list, description="Registered verbs")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    store: str = Field(..., description="Store reachability: up, down or unknown")
    version: str = Field(..., description="API version")


def _result_to_response(result: TabularResult) -> TabularResponse:
    """Convert a TabularResult to a TabularResponse."""
    return TabularResponse(
        columns=[ColumnModel(name=c.name, type=c.type.tag) for c in result.schema],
        rows=[row.as_dict() for row in result],
        row_count=result.row_count,
    )


def _to_http_error(error: RedisTableError) -> HTTPException:
    """Map library errors to HTTP errors."""
    if isinstance(error, (ParseError, ArgumentError, UnsupportedOperationError)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, StoreError):
        return HTTPException(status_code=502, detail=str(error))
    if isinstance(error, StateError):
        return HTTPException(status_code=503, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def create_app(engine: TableEngine) -> FastAPI:
    """Create a FastAPI application for the table engine.

    Args:
        engine: The table engine to use.

    Returns:
        A configured FastAPI application.
    """
    app = FastAPI(
        title="redis_table API",
        description="REST API for running store commands as tables",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Endpoints are sync so FastAPI runs the blocking store calls in its threadpool.

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        if not engine.is_started:
            return HealthResponse(status="unhealthy", store="unknown", version=__version__)
        store_up = engine.ping()
        return HealthResponse(
            status="healthy" if store_up else "degraded",
            store="up" if store_up else "down",
            version=__version__,
        )

    @app.get("/stats", response_model=StatsResponse, tags=["Stats"])
    def get_stats() -> StatsResponse:
        """Get engine statistics."""
        if not engine.is_started:
            raise HTTPException(status_code=503, detail="Table engine not started")
        return StatsResponse(**engine.get_stats())

    @app.post("/execute", response_model=TabularResponse, tags=["Commands"])
    def execute_command(request: CommandRequest) -> TabularResponse:
        """Execute a command and return its tabular result."""
        try:
            with engine.execute(request.command) as cursor:
                return _result_to_response(cursor.result)
        except RedisTableError as e:
            raise _to_http_error(e) from e

    @app.post("/execute/update", response_model=UpdateResponse, tags=["Commands"])
    def execute_update(request: CommandRequest) -> UpdateResponse:
        """Execute a command and return its update count."""
        try:
            return UpdateResponse(update_count=engine.execute_update(request.command))
        except RedisTableError as e:
            raise _to_http_error(e) from e

    return app


def run_server(
    engine: TableEngine,
    host: str = "0.0.0.0",
    port: int = 8080,
) -> None:
    """Run the REST API server.

    Args:
        engine: The table engine.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    app = create_app(engine)
    uvicorn.run(app, host=host, port=port)


def main() -> None:
    """Start the engine and serve it with settings from the environment."""
    from redis_table.application import TableEngine
    from redis_table.infrastructure import (
        get_config,
        setup_logging,
        setup_metrics,
        setup_tracing,
    )

    config = get_config()
    observability = config.observability
    setup_logging(
        level=observability.log_level,
        log_format=observability.log_format,
        store_log_level=observability.store_log_level,
    )
    setup_tracing(
        service_name=observability.otel_service_name,
        otlp_endpoint=observability.otel_endpoint,
    )
    metrics = setup_metrics(port=config.server.metrics_port)

    with TableEngine(config=config, metrics=metrics) as engine:
        logger.info("server_starting", host=config.server.host, port=config.server.port)
        run_server(engine, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
