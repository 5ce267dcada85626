"""Domain port for reading Cloud SQL databases."""

from abc import ABC, abstractmethod
from typing import List, Optional

from cloudsql_provider.domain.database.value_objects import DatabaseRecord


class DatabaseFetcherPort(ABC):
    """Domain port for database read operations."""

    @abstractmethod
    def list_databases(self, project: str, instance: str) -> List[DatabaseRecord]:
        """List every database of an instance, in the order the service returns them."""

    @abstractmethod
    def get_database(self, project: str, instance: str, name: str) -> DatabaseRecord:
        """Get one database of an instance by name."""

    @abstractmethod
    def resolve_default_project(self) -> Optional[str]:
        """Project to use when a read does not name one."""
