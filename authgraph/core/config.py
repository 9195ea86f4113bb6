"""
Application configuration using Pydantic Settings.
"""

from typing import Any
from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    url: str = Field(
        default="sqlite+aiosqlite:///./authgraph.db",
        description="SQLAlchemy async connection URL",
    )
    echo: bool = Field(default=False, description="Echo SQL queries")


class AuthzSettings(BaseSettings):
    """Authorization graph configuration."""

    model_config = SettingsConfigDict(env_prefix="AUTHZ_")

    # Validation mode
    strict: bool = Field(
        default=False,
        description="Raise InvalidName/NotFound instead of silently ignoring bad input",
    )
    allow_cycles: bool = Field(
        default=False,
        description="Accept child edges that close a cycle in the role graph",
    )

    # Access cache
    cache_enabled: bool = Field(
        default=False,
        description="Memoize resolved access sets per user (advisory contexts only)",
    )
    invalidate_on_write: bool = Field(
        default=True,
        description="Drop cached access sets from every mutation path",
    )

    # HTTP surface
    user_id_header: str = Field(default="X-User-ID")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="authgraph")
    app_version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="json or text")

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    authz: AuthzSettings = Field(default_factory=AuthzSettings)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = {"development", "staging", "production", "testing"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in {"json", "text"}:
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def get_authz_config(self) -> dict[str, Any]:
        """Get keyword arguments for AuthManager."""
        return {
            "strict": self.authz.strict,
            "allow_cycles": self.authz.allow_cycles,
            "invalidate_on_write": self.authz.invalidate_on_write,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Shorthand
settings = get_settings()
