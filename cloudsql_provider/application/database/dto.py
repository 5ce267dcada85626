"""Data transfer objects for the databases data sources."""
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from cloudsql_provider.domain.core.exceptions import ValidationError
from cloudsql_provider.domain.database.value_objects import DatabaseOutput, FilterClause


class BaseRequest(BaseModel):
    """Base class for data source read requests."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    project: Optional[str] = None
    instance: str = Field(min_length=1)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]):
        """Build a request from the orchestrator payload."""
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            errors = {
                '.'.join(str(p) for p in err['loc']): err['msg'] for err in e.errors()
            }
            raise ValidationError(f"Invalid {cls.__name__} payload: {errors}", errors) from e


class ReadDatabasesRequest(BaseRequest):
    """Read of all databases of an instance, optionally filtered."""

    filters: List[Dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("filters", "filter"),
    )

    @field_validator("filters", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v

    def to_clauses(self) -> List[FilterClause]:
        """Convert the wire filter blocks, in order, to filter clauses."""
        return [FilterClause.from_dict(block) for block in self.filters]


class ReadDatabaseRequest(BaseRequest):
    """Read of a single database by name."""

    name: str = Field(min_length=1)


class DatabaseResponse(BaseModel):
    """Result of a single database read."""

    id: str
    project: str
    instance: str
    name: str
    charset: str = ""
    collation: str = ""
    self_link: str = ""


class DatabasesResponse(BaseModel):
    """Result of a databases read."""

    id: str
    project: str
    instance: str
    databases: List[Dict[str, str]] = Field(default_factory=list)

    def outputs(self) -> List[DatabaseOutput]:
        return [DatabaseOutput.from_dict(entry) for entry in self.databases]
