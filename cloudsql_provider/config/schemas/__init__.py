"""Configuration schemas."""

from .app_schema import AppConfig, validate_config
from .logging_schema import LoggingConfig
from .provider_schema import ProviderConfig
from .retry_schema import RetryConfig

__all__ = [
    "AppConfig",
    "validate_config",
    "ProviderConfig",
    "RetryConfig",
    "LoggingConfig",
]
