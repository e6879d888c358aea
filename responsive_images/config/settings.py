"""
Application Settings
===================

Build-time settings for responsive image generation using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

from responsive_images.models.schemas import MarkupPolicy, OutputFormat


class Settings(BaseSettings):
    """Responsive image settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Responsive Images", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(
        default=None, description="Directory for rotating log files (console only when unset)"
    )

    # Output Configuration
    output_format: OutputFormat = Field(
        default=OutputFormat.JPEG, description="Raster format of generated variants"
    )
    output_dir: Path = Field(
        default=Path("_site/images/"), description="Directory generated variants are written to"
    )
    url_path: str = Field(default="/images/", description="URL prefix of generated variants")
    quality: int = Field(default=80, ge=1, le=100, description="Encoder quality (1-100)")
    overwrite_existing: bool = Field(
        default=False, description="Re-encode variants that already exist on disk"
    )

    # Markup Configuration
    markup_policy: MarkupPolicy = Field(
        default=MarkupPolicy.PICTURE, description="Markup strategy: picture or srcset"
    )
    default_link_target: str = Field(
        default="_self", description="Anchor target used when the caller gives none"
    )
    sizes_offset: int = Field(
        default=10, ge=0, description="Pixels added to each width for srcset sizes breakpoints"
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

    @field_validator("url_path")
    @classmethod
    def normalize_url_path(cls, v: str) -> str:
        """Ensure the URL prefix starts and ends with a slash."""
        v = v.strip()
        if not v.startswith("/"):
            v = "/" + v
        if not v.endswith("/"):
            v = v + "/"
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="RESPONSIVE_IMAGES_",
        extra="ignore",
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
