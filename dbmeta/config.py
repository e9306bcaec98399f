"""
Configuration management for dbmeta.

Loads configuration from environment variables with support for .env files.
Uses Pydantic Settings for validation and type coercion.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dbmeta.models.schema import DatabaseType


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via ``DBMETA_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="DBMETA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Source database
    database_url: str | None = Field(default=None, description="SQLAlchemy connection URL")
    database_type: str | None = Field(
        default=None, description="Source database type, detected from the URL when unset"
    )
    default_schema: str | None = Field(default=None, description="Schema to read when none is given")

    # DDL generation
    target_dialect: str = Field(default="mysql", description="Dialect used to render DDL")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str | None = Field(default=None, description="Log file path")
    log_sql: bool = Field(default=False, description="Log SQL issued by catalog queries")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("target_dialect")
    @classmethod
    def validate_target_dialect(cls, v: str) -> str:
        return v.strip().lower()

    def get_database_type(self) -> DatabaseType:
        """Configured source database type, falling back to URL detection."""
        if self.database_type:
            return DatabaseType.from_name(self.database_type)
        if self.database_url:
            return DatabaseType.from_url(self.database_url)
        return DatabaseType.OTHER


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from a specific .env file.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Settings: Application settings instance
    """
    get_settings.cache_clear()
    if env_file:
        return Settings(_env_file=str(env_file))
    return get_settings()
