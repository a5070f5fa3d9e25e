"""
Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files
with validation and type conversion.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .formatter import RutFormat


class RutEngineSettings(BaseSettings):
    """
    rut_engine settings loaded from environment variables and .env files.

    Settings are loaded in this order of precedence:
    1. Environment variables
    2. .env file in current directory
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: str = Field(
        default="json",
        description="Log output format (json, text)"
    )

    service_name: str = Field(
        default="rut-engine",
        description="Service name for logging"
    )

    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)"
    )

    # Formatting
    default_format: RutFormat = Field(
        default=RutFormat.READABLE,
        description="Layout used by the CLI when --mode is not given"
    )

    # Synthetic RUT generation
    generator_min_correlative: int = Field(
        default=1_000_000,
        ge=1,
        description="Smallest correlative produced by generate_valid_rut()"
    )

    generator_max_correlative: int = Field(
        default=30_000_000,
        ge=1,
        description="Largest correlative produced by generate_valid_rut()"
    )

    # Registry lookup
    registry_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the RUT registry API"
    )

    registry_api_key: Optional[str] = Field(
        default=None,
        description="API key sent to the RUT registry"
    )

    registry_timeout: float = Field(
        default=10.0,
        ge=1.0,
        le=300.0,
        description="Registry request timeout in seconds"
    )

    registry_max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum number of retry attempts for registry requests"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(valid_levels))}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format is supported."""
        valid_formats = {"json", "text"}
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {', '.join(sorted(valid_formats))}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment name."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of: {', '.join(sorted(valid_envs))}")
        return v.lower()

    @field_validator("registry_base_url")
    @classmethod
    def validate_registry_base_url(cls, v):
        """Validate registry URL format if provided."""
        if v is None:
            return v

        v = v.strip()
        if not v:
            return None

        if not v.startswith(("http://", "https://")):
            raise ValueError("registry_base_url must be an http(s) URL")

        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_generator_range(self):
        """Validate the generator range is not empty."""
        if self.generator_min_correlative > self.generator_max_correlative:
            raise ValueError(
                "generator_min_correlative must not exceed generator_max_correlative"
            )
        return self

    def get_registry_headers(self) -> dict:
        """Get standard registry headers, with authentication when configured."""
        headers = {
            "User-Agent": f"{self.service_name}/1.0",
            "Accept": "application/json",
        }
        if self.registry_api_key:
            headers["Authorization"] = f"Bearer {self.registry_api_key}"
        return headers


@lru_cache()
def get_settings() -> RutEngineSettings:
    """
    Get cached settings instance.

    Settings are read once per process; call get_settings.cache_clear()
    to reload them.
    """
    return RutEngineSettings()


settings = get_settings
