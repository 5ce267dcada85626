"""Provider configuration schema."""
import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Same rule the Cloud Resource Manager applies to project IDs.
PROJECT_ID_PATTERN = re.compile(r"^[a-z][a-z0-9\-]{4,28}[a-z0-9]$")


class ProviderConfig(BaseModel):
    """Google Cloud SQL provider configuration."""

    project: Optional[str] = Field(None, description="Default project for reads")
    credentials_file: Optional[str] = Field(
        None, description="Service account key file; Application Default Credentials when unset"
    )
    api_version: str = Field("v1beta4", description="SQL Admin API version")
    endpoint_url: Optional[str] = Field(None, description="Override of the SQL Admin API endpoint")
    num_retries: int = Field(0, description="Transport-level retries for each API request")

    @field_validator("project", "credentials_file", "endpoint_url", mode="before")
    @classmethod
    def empty_as_unset(cls, v):
        return v or None

    @field_validator("project")
    @classmethod
    def validate_project(cls, v: Optional[str]) -> Optional[str]:
        """Validate project ID format."""
        if v is not None and not PROJECT_ID_PATTERN.match(v):
            raise ValueError(
                f"Invalid GCP project ID format: '{v}'. "
                f"Must be 6-30 lowercase letters, digits, or hyphens."
            )
        return v

    @field_validator("api_version")
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        if v not in ("v1", "v1beta4"):
            raise ValueError("SQL Admin API version must be v1 or v1beta4")
        return v

    @field_validator("num_retries")
    @classmethod
    def validate_num_retries(cls, v: int) -> int:
        if v < 0 or v > 10:
            raise ValueError("num_retries must be between 0 and 10")
        return v
