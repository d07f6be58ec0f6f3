"""Centralized catalog-sync settings using pydantic-settings.

This module provides a single source of truth for configuration loaded
from environment variables. Uses pydantic for automatic validation,
type coercion, and documentation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration loaded from environment variables.

    All settings have sensible defaults. Override via environment
    variables as documented per field.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )

    # Reconciliation behavior
    log_update_diffs: bool = Field(
        default=True,
        validation_alias="CATALOG_SYNC_LOG_UPDATE_DIFFS",
        description="Log a field-level diff after each successful service update",
    )


# Global settings instance - initialized once at module import
settings = Settings()
