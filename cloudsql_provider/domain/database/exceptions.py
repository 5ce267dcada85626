# cloudsql_provider/domain/database/exceptions.py
from typing import Any, List, Tuple

from cloudsql_provider.domain.core.exceptions import (
    ConfigurationError,
    DomainException,
    ResourceNotFoundError,
)


class UnknownFilterFieldError(ConfigurationError):
    """Raised when a filter clause names a field that cannot be filtered on."""
    def __init__(self, field: Any, allowed: List[str]):
        super().__init__(
            f"Unknown filter field {field!r}; must be one of {', '.join(allowed)}"
        )
        self.field = field
        self.allowed = allowed


class InvalidFilterPatternError(ConfigurationError):
    """Raised when a filter pattern is not a valid regular expression."""
    def __init__(self, field: str, pattern: str, reason: str):
        super().__init__(
            f"Invalid regular expression {pattern!r} in filter on {field!r}: {reason}"
        )
        self.field = field
        self.pattern = pattern
        self.reason = reason


class DataSourceNotFoundError(ResourceNotFoundError):
    """Raised when the parent of a data source does not exist remotely."""
    pass


class VerificationError(DomainException):
    """Base exception for data source verification failures."""
    pass


class RecordAbsentError(VerificationError):
    """Raised when an expected record is missing from a data source output."""
    def __init__(self, key: str):
        super().__init__(f"Database {key!r} not found in data source output")
        self.key = key


class RecordPresentError(VerificationError):
    """Raised when a record expected to be filtered out is still present."""
    def __init__(self, key: str, index: int):
        super().__init__(
            f"Database {key!r} is present in data source output at index {index}, "
            f"but should have been excluded"
        )
        self.key = key
        self.index = index


class FieldMismatchError(VerificationError):
    """Raised with every field discrepancy found for one record comparison."""
    def __init__(self, key: str, mismatches: List[Tuple[str, Any, Any]]):
        lines = [f"{field} is {actual!r}; want {expected!r}"
                 for field, actual, expected in mismatches]
        super().__init__(
            f"Data source output for database {key!r} does not match:\n" + "\n".join(lines)
        )
        self.key = key
        self.mismatches = mismatches
