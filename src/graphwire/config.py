"""Configuration management for graphwire containers."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WiringConfig(BaseModel):
    """Component wiring configuration."""

    strict_field_wiring: bool = Field(
        default=True,
        description="Fail wiring when a public field's type cannot be resolved; "
        "when disabled such fields are left untouched",
    )


class ExecutionConfig(BaseModel):
    """Background entry-point execution configuration."""

    max_workers: int = Field(default=8, ge=1, le=1024, description="Background worker threads")
    thread_name_prefix: str = Field(
        default="graphwire", min_length=1, description="Name prefix for worker threads"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")


class Settings(BaseSettings):
    """Main configuration for a container."""

    model_config = SettingsConfigDict(
        env_prefix="GRAPHWIRE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    wiring: WiringConfig = Field(default_factory=WiringConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_settings() -> Settings:
    """Get the global settings instance."""
    return Settings()
