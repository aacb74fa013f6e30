"""Configuration management for redis_table."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreConfig(BaseModel):
    """Connection settings for the key-value store."""

    url: str = Field(
        default="redis://localhost:6379/0",
        description="Store URL (redis://, rediss:// or unix://)",
    )
    connect_timeout_seconds: float = Field(
        default=2.0, gt=0, description="Socket connect timeout in seconds"
    )
    socket_timeout_seconds: float = Field(
        default=2.0, gt=0, description="Socket read/write timeout in seconds"
    )
    client_name: str | None = Field(
        default=None, description="Name reported through CLIENT SETNAME"
    )
    max_connections: int = Field(
        default=10, ge=1, le=1000, description="Connection pool size"
    )

    @field_validator("url")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        if not value.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("url must use the redis://, rediss:// or unix:// scheme")
        return value


class ExecutionConfig(BaseModel):
    """Command execution settings."""

    max_rows: int = Field(
        default=0, ge=0, description="Row limit per result (0 means unlimited)"
    )
    allow_raw_commands: bool = Field(
        default=True,
        description="Send verbs missing from the dispatch table straight to the store",
    )


class ServerConfig(BaseModel):
    """REST server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, ge=1, le=65535, description="REST API port")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    store_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Log level for the redis client library"
    )
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="redis_table", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for redis_table.

    Every field can be overridden from the environment, e.g.
    ``REDIS_TABLE_STORE__URL=redis://cache:6379/2``.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_TABLE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    store: StoreConfig = Field(default_factory=StoreConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
