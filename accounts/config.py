"""Configuration loading for the Accounts user-management context.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # User store configuration
    store_backend: Literal["memory", "sqlite"] = Field(
        default="memory",
        description="User repository backend type",
    )
    store_sqlite_path: str = Field(
        default="./data/users.db",
        description="SQLite database file path",
    )

    # Password hashing
    bcrypt_rounds: int = Field(
        default=10,
        description="bcrypt cost factor used when hashing passwords",
    )

    # Domain event publishing
    event_backend: Literal["log", "bus"] = Field(
        default="log",
        description="Domain event publisher type",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["cli"] = Field(
        default="cli",
        description="Run mode",
    )

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """Ensure the bcrypt cost factor is in the range bcrypt accepts."""
        if v < 4 or v > 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @field_validator("store_sqlite_path")
    @classmethod
    def validate_sqlite_path(cls, v: str) -> str:
        """Ensure the SQLite path is not blank."""
        if not v.strip():
            raise ValueError("store_sqlite_path must be a non-empty path")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
