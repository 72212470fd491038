"""Configuration management for charstats using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="CHARSTATS_",
        extra="ignore",
    )

    # Engine
    change_epsilon: float = Field(
        default=1e-6,
        ge=0.0,
        description="Tolerance used to decide whether a non-integral final value changed",
    )
    missing_value: float = Field(
        default=0.0,
        description="Value returned by lookup-by-id reads when the attribute is unknown",
    )

    # Schema
    schema_path: Path | None = Field(
        default=None, description="Default attribute schema YAML file for the CLI"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format (console or json)")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
