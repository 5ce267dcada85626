# cloudsql_provider/config/defaults.py
import copy
import os
import re
from enum import Enum
from typing import Any, Dict, List, Tuple


class LogLevel(str, Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogDestination(str, Enum):
    """Log destination enumeration."""
    FILE = "file"
    CONSOLE = "console"
    BOTH = "both"


CONFIG_FILE_NAMES = (
    "cloudsqlprov_config.json",
    "cloudsqlprov_config.yml",
    "cloudsqlprov_config.yaml",
)

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "1.0.0",

    # Provider configuration
    "provider": {
        "project": None,
        "credentials_file": None,
        "api_version": "v1beta4",
        "endpoint_url": None,
        "num_retries": 0,
    },

    # Retry policy for operations rejected while an instance is busy
    "retry": {
        "timeout_seconds": 1200,
        "initial_interval": 1,
        "max_interval": 30,
        "multiplier": 2,
    },

    # Logging configuration
    "logging": {
        "level": "${CLOUDSQL_PROVIDER_LOG_LEVEL:INFO}",
        "destination": "${CLOUDSQL_PROVIDER_LOG_DESTINATION:console}",
        "file_path": "${CLOUDSQL_PROVIDER_LOGDIR:.}/cloudsql-provider.log",
        "max_size_mb": 10,
        "backup_count": 5,
    },
}

# Environment variables that override a configuration key; the first set one wins.
ENV_OVERRIDES: List[Tuple[Tuple[str, ...], List[str]]] = [
    (("provider", "project"), ["GOOGLE_PROJECT", "GOOGLE_CLOUD_PROJECT", "CLOUDSDK_CORE_PROJECT"]),
    (("provider", "credentials_file"), ["GOOGLE_APPLICATION_CREDENTIALS"]),
    (("provider", "endpoint_url"), ["CLOUDSQL_PROVIDER_ENDPOINT_URL"]),
    (("retry", "timeout_seconds"), ["CLOUDSQL_PROVIDER_READ_TIMEOUT"]),
]

_VARIABLE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")


def default_config() -> Dict[str, Any]:
    """Return a fresh copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def deep_update(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    """Merge ``source`` into ``target`` recursively, in place."""
    for key, value in source.items():
        if key in target and isinstance(target[key], dict) and isinstance(value, dict):
            deep_update(target[key], value)
        else:
            target[key] = value


def interpolate_values(config: Any) -> Any:
    """
    Expand ``${VAR}`` and ``${VAR:default}`` references in configuration values.

    Unset variables without a default are left as written.
    """
    if isinstance(config, str):
        def replace(match: "re.Match") -> str:
            name, default = match.group(1), match.group(2)
            if name in os.environ:
                return os.environ[name]
            return default if default is not None else match.group(0)
        return _VARIABLE.sub(replace, config)
    elif isinstance(config, dict):
        return {k: interpolate_values(v) for k, v in config.items()}
    elif isinstance(config, list):
        return [interpolate_values(v) for v in config]
    return config
