"""Retry configuration schema."""
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class RetryConfig(BaseModel):
    """Retry policy for operations rejected while the instance is busy."""

    timeout_seconds: float = Field(1200, description="Total time allowed for a read, retries included")
    initial_interval: float = Field(1, description="First wait between attempts, in seconds")
    max_interval: float = Field(30, description="Longest wait between attempts, in seconds")
    multiplier: float = Field(2, description="Exponential backoff multiplier")
    max_attempts: Optional[int] = Field(None, description="Cap on attempts within the timeout")

    @model_validator(mode="after")
    def validate_intervals(self) -> "RetryConfig":
        """Validate relationships between retry settings."""
        if self.timeout_seconds <= 0:
            raise ValueError("Retry timeout must be positive")
        if self.initial_interval <= 0 or self.multiplier <= 0:
            raise ValueError("Retry interval and multiplier must be positive")
        if self.initial_interval > self.max_interval:
            raise ValueError("Initial retry interval cannot be greater than the maximum interval")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        return self
