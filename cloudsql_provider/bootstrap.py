"""Application bootstrap - wires configuration, logging, fetcher and services."""

from __future__ import annotations

from typing import Any, Dict, Optional

from cloudsql_provider.application.database import DatabaseQueryService
from cloudsql_provider.config import ConfigurationManager
from cloudsql_provider.domain.base.ports import DatabaseFetcherPort
from cloudsql_provider.infrastructure.logging.logger import get_logger, setup_logging


class Application:
    """Application context with lazily created collaborators."""

    def __init__(self,
                 config_path: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None,
                 fetcher: Optional[DatabaseFetcherPort] = None) -> None:
        """
        Initialize the instance.

        Args:
            config_path: Optional configuration file path
            overrides: Configuration values applied on top of every other source
            fetcher: Fetcher to use instead of the SQL Admin API client
        """
        self.config_manager = ConfigurationManager(config_path, overrides=overrides)
        self._fetcher = fetcher
        self._database_service: Optional[DatabaseQueryService] = None
        self.logger = get_logger(__name__)

    def initialize(self) -> "Application":
        """Validate configuration and set up logging."""
        setup_logging(self.config_manager.app_config.logging)
        self.logger.debug("Application initialized",
                          api_version=self.config_manager.app_config.provider.api_version)
        return self

    @property
    def fetcher(self) -> DatabaseFetcherPort:
        if self._fetcher is None:
            from cloudsql_provider.infrastructure.gcp import SQLAdminClient

            app_config = self.config_manager.app_config
            self._fetcher = SQLAdminClient(app_config.provider, app_config.retry)
        return self._fetcher

    @property
    def database_service(self) -> DatabaseQueryService:
        if self._database_service is None:
            self._database_service = DatabaseQueryService(
                self.fetcher, self.config_manager.app_config.provider
            )
        return self._database_service


def create_application(config_path: Optional[str] = None,
                       overrides: Optional[Dict[str, Any]] = None) -> Application:
    """Create and initialize the application."""
    return Application(config_path, overrides=overrides).initialize()
