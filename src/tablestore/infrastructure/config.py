"""Configuration management for the table store."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Snapshot storage configuration."""

    snapshot_path: Path = Field(
        default=Path("tangue.db.json"), description="Snapshot file path"
    )
    fsync: bool = Field(default=True, description="fsync the snapshot before replacing it")
    on_corrupt: Literal["quarantine", "empty", "fail"] = Field(
        default="quarantine", description="What to do with an unreadable snapshot at startup"
    )
    rollback_on_persist_failure: bool = Field(
        default=True,
        description="Undo the in-memory mutation when its snapshot write fails",
    )
    ephemeral: bool = Field(
        default=False, description="Keep snapshots in memory only (nothing is written to disk)"
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8080, ge=1, le=65535, description="Server port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_enabled: bool = Field(default=False, description="Start the Prometheus exporter")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="tablestore", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the table store."""

    model_config = SettingsConfigDict(
        env_prefix="TABLESTORE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the snapshot's parent directory exists."""
        if not self.storage.ephemeral:
            self.storage.snapshot_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
