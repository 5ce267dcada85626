"""Main application configuration schema."""

from typing import Any, Dict

from pydantic import BaseModel, Field

from .logging_schema import LoggingConfig
from .provider_schema import ProviderConfig
from .retry_schema import RetryConfig


class AppConfig(BaseModel):
    """Application configuration."""

    version: str = Field("1.0.0", description="Configuration version")
    provider: ProviderConfig = Field(default_factory=lambda: ProviderConfig())
    retry: RetryConfig = Field(default_factory=lambda: RetryConfig())
    logging: LoggingConfig = Field(default_factory=lambda: LoggingConfig())


def validate_config(config: Dict[str, Any]) -> AppConfig:
    """
    Validate configuration.

    Args:
        config: Configuration to validate

    Returns:
        Validated configuration

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    return AppConfig(**config)
