"""Cloud SQL databases bounded context.

- value_objects.py: FilterClause, DatabaseRecord, DatabaseOutput, result set ID
- filter_pipeline.py: include/exclude regex filtering
- projector.py: record to output projection
- verification.py: reconciliation of outputs against known records
- exceptions.py: context-specific exceptions
"""

from .exceptions import (
    DataSourceNotFoundError,
    FieldMismatchError,
    InvalidFilterPatternError,
    RecordAbsentError,
    RecordPresentError,
    UnknownFilterFieldError,
    VerificationError,
)
from .value_objects import (
    DatabaseOutput,
    DatabaseRecord,
    DatabasesResultSetId,
    FilterClause,
    FilterField,
)

__all__ = [
    # Value objects
    "FilterField",
    "FilterClause",
    "DatabaseRecord",
    "DatabaseOutput",
    "DatabasesResultSetId",
    # Exceptions
    "UnknownFilterFieldError",
    "InvalidFilterPatternError",
    "DataSourceNotFoundError",
    "VerificationError",
    "RecordAbsentError",
    "RecordPresentError",
    "FieldMismatchError",
]
