"""Logging configuration schema."""
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from cloudsql_provider.config.defaults import LogDestination, LogLevel


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    destination: str = Field("console", description="Where to write logs: file, console (stderr) or both")
    file_path: Optional[str] = Field(None, description="Log file path when logging to a file")
    max_size_mb: int = Field(10, description="Log file size before rotation")
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    format: str = Field(
        "%(asctime)s - %(levelname)s - %(name)s [%(caller_info)s] - %(message)s",
        description="Log record format",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        level = v.upper()
        if level not in LogLevel.__members__:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        """Validate log destination."""
        try:
            return LogDestination(v.lower()).value
        except ValueError:
            raise ValueError(
                f"Invalid log destination: {v}. Must be one of: "
                f"{', '.join(d.value for d in LogDestination)}"
            )

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v
