"""Databases data source use cases."""

from .dto import DatabaseResponse, DatabasesResponse, ReadDatabaseRequest, ReadDatabasesRequest
from .service import DatabaseQueryService

__all__ = [
    "DatabaseQueryService",
    "ReadDatabasesRequest",
    "ReadDatabaseRequest",
    "DatabasesResponse",
    "DatabaseResponse",
]
