"""Configuration package with clean public API."""

from .defaults import DEFAULT_CONFIG, LogDestination, LogLevel

# Main configuration classes
from .schemas import (
    AppConfig, validate_config,
    ProviderConfig,
    RetryConfig,
    LoggingConfig,
)

# Configuration management
from .manager import ConfigurationManager, load_config_file

__all__ = [
    # Defaults
    'DEFAULT_CONFIG',
    'LogLevel',
    'LogDestination',

    # Main configuration
    'AppConfig',
    'validate_config',

    # Specific configurations
    'ProviderConfig',
    'RetryConfig',
    'LoggingConfig',

    # Configuration management
    'ConfigurationManager',
    'load_config_file',
]
