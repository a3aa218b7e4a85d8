"""Configuration management for Gatehouse.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once and is
immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production-use-openssl-rand-hex-32"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GATEHOUSE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Gatehouse"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"

    # Credential Store Settings
    database_url: str = "sqlite+aiosqlite:///./gh_data/gatehouse.db"
    db_echo: bool = False
    store_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound for a single credential store round trip",
    )

    # Token Settings
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        description="Secret key for token signing",
    )
    token_issuer: str = "gatehouse"
    token_expire_days: int = 7

    # Password Settings
    password_min_length: int = 6
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536  # KiB
    argon2_parallelism: int = 4

    # Session Settings
    session_file: str = "./gh_data/session.json"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("token_expire_days", "password_min_length")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Reject zero or negative counts."""
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("store_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Reject zero or negative timeouts."""
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Refuse to sign tokens with the placeholder key in production."""
        if self.is_production and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError(
                "GATEHOUSE_SECRET_KEY must be set in production. "
                "Generate one with: openssl rand -hex 32"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
