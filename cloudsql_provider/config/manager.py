"""Configuration management for the provider."""
from __future__ import annotations
import json
import os
import threading
from typing import Any, Dict, Optional, Type, TypeVar

import yaml
from pydantic import ValidationError as PydanticValidationError

from cloudsql_provider.config.defaults import (
    CONFIG_FILE_NAMES,
    ENV_OVERRIDES,
    deep_update,
    default_config,
    interpolate_values,
)
from cloudsql_provider.config.schemas import (
    AppConfig,
    LoggingConfig,
    ProviderConfig,
    RetryConfig,
    validate_config,
)
from cloudsql_provider.domain.core.exceptions import ConfigurationError

T = TypeVar('T')


class ConfigurationManager:
    """
    Single source of truth for provider configuration.

    Configuration is resolved in this order, later sources winning:
    - Built-in defaults
    - A JSON or YAML configuration file
    - Environment variable overrides

    ``${VAR}`` and ``${VAR:default}`` references are expanded after merging,
    and the result is validated into an AppConfig on first access.
    """

    def __init__(self, config_file: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration manager with lazy loading.

        Args:
            config_file: Optional path to a configuration file. If not provided,
                        cloudsqlprov_config.{json,yml,yaml} is looked up in
                        $CLOUDSQL_PROVIDER_CONFDIR
            overrides: Optional values applied on top of every other source
        """
        self._config_file = config_file
        self._overrides = overrides or {}
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def _find_config_file(self) -> Optional[str]:
        if self._config_file:
            if not os.path.exists(self._config_file):
                raise ConfigurationError(f"Configuration file not found: {self._config_file}")
            return self._config_file

        conf_dir = os.environ.get("CLOUDSQL_PROVIDER_CONFDIR")
        if not conf_dir:
            return None
        for name in CONFIG_FILE_NAMES:
            path = os.path.join(conf_dir, name)
            if os.path.exists(path):
                return path
        return None

    def _load_config_data(self) -> Dict[str, Any]:
        config = default_config()

        config_path = self._find_config_file()
        if config_path:
            deep_update(config, load_config_file(config_path))

        self._apply_env_overrides(config)
        deep_update(config, self._overrides)
        return interpolate_values(config)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> None:
        """Apply environment variable overrides."""
        for path, env_vars in ENV_OVERRIDES:
            for env_var in env_vars:
                value = os.environ.get(env_var)
                if value:
                    self._set_nested_value(config, path, value)
                    break

    def _set_nested_value(self, config: Dict[str, Any], path: tuple, value: Any) -> None:
        """Set a nested configuration value."""
        current = config
        for key in path[:-1]:
            current = current.setdefault(key, {})
        current[path[-1]] = value

    def _load_app_config(self) -> AppConfig:
        """Load and validate application configuration from all sources."""
        config_data = self._load_config_data()
        try:
            return validate_config(config_data)
        except PydanticValidationError as e:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors),
                missing_fields=[
                    '.'.join(str(p) for p in err['loc'])
                    for err in e.errors() if err['type'] == 'missing'
                ],
            ) from e

    def get_config(self) -> Dict[str, Any]:
        """Get the complete validated configuration as a dictionary."""
        return self.app_config.model_dump()

    def get_typed(self, config_type: Type[T]) -> T:
        """Get a configuration section by its schema type."""
        type_mapping = {
            ProviderConfig: 'provider',
            RetryConfig: 'retry',
            LoggingConfig: 'logging',
        }
        if config_type not in type_mapping:
            raise ValueError(f"Unknown configuration type: {config_type.__name__}")
        return getattr(self.app_config, type_mapping[config_type])

    def reload(self) -> None:
        """Reload configuration from sources on next access."""
        with self._lock:
            self._app_config = None


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load a JSON or YAML configuration file."""
    try:
        with open(config_path, 'r') as f:
            if config_path.endswith(('.yml', '.yaml')):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load configuration from {config_path}: {str(e)}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {config_path} must be a mapping")
    return data
