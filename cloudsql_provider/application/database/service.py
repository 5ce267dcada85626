# cloudsql_provider/application/database/service.py
from typing import Optional

from cloudsql_provider.application.database.dto import (
    DatabaseResponse,
    DatabasesResponse,
    ReadDatabaseRequest,
    ReadDatabasesRequest,
)
from cloudsql_provider.config.schemas import ProviderConfig
from cloudsql_provider.domain.base.ports import DatabaseFetcherPort
from cloudsql_provider.domain.core.exceptions import ConfigurationError, ResourceNotFoundError
from cloudsql_provider.domain.database import filter_pipeline, projector
from cloudsql_provider.domain.database.exceptions import DataSourceNotFoundError
from cloudsql_provider.domain.database.value_objects import DatabasesResultSetId
from cloudsql_provider.infrastructure.logging.logger import get_logger


class DatabaseQueryService:
    """Application service backing the Cloud SQL database data sources."""

    def __init__(self,
                 fetcher: DatabaseFetcherPort,
                 provider_config: Optional[ProviderConfig] = None):
        self._fetcher = fetcher
        self._config = provider_config or ProviderConfig()
        self._logger = get_logger(__name__)

    def resolve_project(self, project: Optional[str] = None) -> str:
        """Explicit project, else the configured one, else the credentials' project."""
        resolved = project or self._config.project or self._fetcher.resolve_default_project()
        if not resolved:
            raise ConfigurationError(
                "project: required field is not set and no default project could be resolved",
                missing_fields=["project"],
            )
        return resolved

    def read_databases(self, request: ReadDatabasesRequest) -> DatabasesResponse:
        """Fetch, filter and project the databases of one instance."""
        clauses = request.to_clauses()
        project = self.resolve_project(request.project)
        result_id = DatabasesResultSetId(project=project, instance=request.instance)

        self._logger.info("Reading databases", id=str(result_id), filters=len(clauses))
        try:
            records = self._fetcher.list_databases(project, request.instance)
        except ResourceNotFoundError as e:
            self._logger.warning("Instance not found", id=str(result_id))
            raise DataSourceNotFoundError(
                "Databases in instance", f"projects/{project}/instances/{request.instance}"
            ) from e

        surviving = filter_pipeline.apply(records, clauses)
        databases = projector.project(surviving)

        self._logger.info("Read databases", id=str(result_id),
                          fetched=len(records), returned=len(databases))
        return DatabasesResponse(
            id=str(result_id),
            project=project,
            instance=request.instance,
            databases=[database.to_dict() for database in databases],
        )

    def read_database(self, request: ReadDatabaseRequest) -> DatabaseResponse:
        """Fetch and project one database."""
        project = self.resolve_project(request.project)
        database_id = f"projects/{project}/instances/{request.instance}/databases/{request.name}"

        self._logger.info("Reading database", id=database_id)
        try:
            record = self._fetcher.get_database(project, request.instance, request.name)
        except ResourceNotFoundError as e:
            self._logger.warning("Database not found", id=database_id)
            raise DataSourceNotFoundError("Database", database_id) from e

        return DatabaseResponse(id=database_id, **projector.project_record(record).to_dict())
