# cloudsql_provider/domain/database/value_objects.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple
from enum import Enum

from cloudsql_provider.domain.core.exceptions import ValidationError
from cloudsql_provider.domain.database.exceptions import UnknownFilterFieldError

# Literal suffix of the composite identifier assigned to a databases result set.
RESULT_SET_SUFFIX = "databases"


class FilterField(str, Enum):
    """Database fields a filter clause may target."""
    NAME = "name"
    CHARSET = "charset"
    COLLATION = "collation"

    @classmethod
    def parse(cls, value: Any) -> "FilterField":
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        raise UnknownFilterFieldError(value, [e.value for e in cls])


def _patterns(value: Any, key: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValidationError(f"Filter {key} must be a list of strings", {key: value})
    for item in value:
        if not isinstance(item, str):
            raise ValidationError(f"Filter {key} must be a list of strings", {key: value})
    return tuple(value)


@dataclass(frozen=True)
class FilterClause:
    """One named-field include/exclude regex rule."""
    field: FilterField
    include_patterns: Tuple[str, ...] = ()
    exclude_patterns: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "field", FilterField.parse(self.field))
        object.__setattr__(self, "include_patterns",
                           _patterns(self.include_patterns, "values"))
        object.__setattr__(self, "exclude_patterns",
                           _patterns(self.exclude_patterns, "exclude_values"))

    @property
    def is_neutral(self) -> bool:
        return not self.include_patterns and not self.exclude_patterns

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.field.value,
            "values": list(self.include_patterns),
            "exclude_values": list(self.exclude_patterns),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterClause":
        if not isinstance(data, dict):
            raise ValidationError("Filter clause must be an object", data)
        return cls(
            field=FilterField.parse(data.get("name")),
            include_patterns=data.get("values"),
            exclude_patterns=data.get("exclude_values"),
        )


@dataclass(frozen=True)
class DatabaseRecord:
    """A Cloud SQL database as returned by the SQL Admin API."""
    name: str
    instance: str
    project: str
    charset: Optional[str] = None
    collation: Optional[str] = None
    self_link: Optional[str] = None
    etag: Optional[str] = None
    kind: str = "sql#database"

    def to_attributes(self) -> Dict[str, str]:
        """Flat attribute view of the fields shared with the data source output."""
        return {
            "name": self.name,
            "instance": self.instance,
            "project": self.project,
            "charset": self.charset or "",
            "collation": self.collation or "",
            "self_link": self.self_link or "",
        }

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "DatabaseRecord":
        try:
            return cls(
                name=item["name"],
                instance=item["instance"],
                project=item["project"],
                charset=item.get("charset"),
                collation=item.get("collation"),
                self_link=item.get("selfLink"),
                etag=item.get("etag"),
                kind=item.get("kind", "sql#database"),
            )
        except KeyError as e:
            raise ValidationError(f"Database item is missing field {e.args[0]!r}", item)


@dataclass(frozen=True)
class DatabaseOutput:
    """Declaratively exposed shape of a database; every field is a string."""
    project: str
    instance: str
    name: str
    charset: str = ""
    collation: str = ""
    self_link: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "project": self.project,
            "instance": self.instance,
            "name": self.name,
            "charset": self.charset,
            "collation": self.collation,
            "self_link": self.self_link,
        }

    def to_attributes(self) -> Dict[str, str]:
        return self.to_dict()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatabaseOutput":
        return cls(**{k: data.get(k) or "" for k in
                      ("project", "instance", "name", "charset", "collation", "self_link")})


@dataclass(frozen=True)
class DatabasesResultSetId:
    """Synthetic identifier of the databases listed for one instance."""
    project: str
    instance: str
    suffix: str = field(default=RESULT_SET_SUFFIX)

    def __post_init__(self):
        if not self.project:
            raise ValidationError("Project is required for a result set ID")
        if not self.instance:
            raise ValidationError("Instance is required for a result set ID")

    def __str__(self) -> str:
        return f"projects/{self.project}/instances/{self.instance}/{self.suffix}"
