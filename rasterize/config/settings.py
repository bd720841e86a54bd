"""
Application Settings
===================

Rasterizer settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Rasterizer settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="rasterize", description="Application name")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    log_level: str = Field(default="WARNING", description="Logging level")

    # Rendering Configuration
    default_viewport_width: int = Field(default=600, gt=0, description="Default viewport width")
    default_viewport_height: int = Field(default=600, gt=0, description="Default viewport height")
    settle_delay_ms: int = Field(
        default=200, ge=0, description="Grace period between page load and capture"
    )

    # Browser Configuration
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    navigation_timeout_ms: int = Field(
        default=0, ge=0, description="Navigation timeout in milliseconds (0 disables it)"
    )
    browser_args: List[str] = Field(
        default=[
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
        ],
        description="Extra Chromium launch arguments",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="RASTERIZE_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
