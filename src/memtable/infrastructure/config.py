"""Configuration management for memtable."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from memtable.domain.value_objects import OverflowPolicy


class ChangeStreamConfig(BaseModel):
    """Per-table change broadcast configuration."""

    buffer_size: int = Field(
        default=64, ge=1, le=1_000_000, description="Events buffered per subscriber"
    )
    overflow_policy: OverflowPolicy = Field(
        default=OverflowPolicy.DROP_NEWEST,
        description="What a full subscriber buffer does with a new event",
    )


class ObserveConfig(BaseModel):
    """Table observer configuration."""

    snapshot_buffer_size: int = Field(
        default=16, ge=1, le=100_000, description="Snapshots buffered per observer"
    )
    join_timeout_seconds: float = Field(
        default=1.0, ge=0.0, description="Max time close() waits for the observer worker"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus exporter port (None disables it)"
    )
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="memtable", description="Service name for tracing")
    otel_console_export: bool = Field(
        default=False, description="Also export spans to stdout"
    )


class Config(BaseSettings):
    """Main configuration for memtable."""

    model_config = SettingsConfigDict(
        env_prefix="MEMTABLE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    changes: ChangeStreamConfig = Field(default_factory=ChangeStreamConfig)
    observe: ObserveConfig = Field(default_factory=ObserveConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
