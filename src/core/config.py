"""
Core configuration module for the Exprolution expression search.

This module manages application settings using Pydantic Settings,
providing type-safe configuration with environment variable support.
Search parameters live in ``src.exprolution.core.config``.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables or a ``.env``
    file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_version: str = "1.0.0"
    log_level: str = Field(default="INFO")

    # Logfire settings
    logfire_token: Optional[str] = Field(default=None)
    logfire_service_name: str = Field(default="exprolution-cli")
    logfire_environment: str = Field(default="development")
    logfire_send: bool = Field(
        default=False,
        description="Send spans to the Logfire backend (requires a token)"
    )
    logfire_console: bool = Field(
        default=False,
        description="Mirror spans and logs to the console"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


settings = Settings()
