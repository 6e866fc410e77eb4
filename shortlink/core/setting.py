"""
Configuration Settings

This module defines application configuration using Pydantic Settings.

Sources, highest priority first:
- Keyword arguments passed to Settings()
- Environment variables (case-insensitive, e.g. ADMIN_TOKEN)
- .env file
- config.json in the working directory
- Secrets directory (unused by default)

Design Decisions:
- Keeps reading config.json so existing deployments keep their config file
- Field names are lowercase so config.json keys match them exactly
- An empty admin_token disables the admin API instead of failing startup
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

__all__ = ["Settings", "settings"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and config files.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        json_file="config.json",
        case_sensitive=False,
        extra="ignore"
    )

    # Admin API
    admin_token: str = Field(
        default="",
        description="Shared token required in the Authorization header of admin requests"
    )

    # Server
    host: str = Field(default="127.0.0.1", description="Interface the server binds to")
    port: int = Field(default=8000, ge=1, le=65535, description="Port the server listens on")
    api_prefix: str = Field(default="/api", description="Path prefix of the admin API")
    redirect_prefix: str = Field(
        default="",
        description="Path prefix of redirect routes ('' serves /<short_code>)"
    )
    cors_origins: list[str] = Field(default=["*"], description="Origins allowed by CORS")

    # Persistence
    store_path: str = Field(default="urls.json", description="File holding the registry")

    # Short codes
    short_code_length: int = Field(
        default=6,
        ge=1,
        le=18,
        description="Digits per short code (6 = '000000' to '999999')"
    )
    short_code_max_attempts: int = Field(
        default=32,
        ge=1,
        description="Random candidates tried per create before giving up"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level name")

    @field_validator("api_prefix", "redirect_prefix")
    @classmethod
    def normalize_prefix(cls, value: str) -> str:
        """Route prefixes are '' or start with '/' and have no trailing '/'."""
        value = value.strip().strip("/")
        return f"/{value}" if value else ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


settings = Settings()
