"""Cloud SQL Admin API client used to fetch databases."""
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

import google.auth
import tenacity
from google.auth.credentials import Credentials as GoogleCredentials
from google.auth.exceptions import DefaultCredentialsError
from google.oauth2 import service_account
from googleapiclient import discovery
from googleapiclient.errors import HttpError

from cloudsql_provider.config.schemas import ProviderConfig, RetryConfig
from cloudsql_provider.domain.base.ports import DatabaseFetcherPort
from cloudsql_provider.domain.core.exceptions import ResourceNotFoundError
from cloudsql_provider.domain.database.value_objects import DatabaseRecord
from cloudsql_provider.infrastructure.exceptions import (
    CredentialsError,
    GCPOperationError,
    OperationTimeoutError,
    TransientOperationError,
)
from cloudsql_provider.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

SQL_ADMIN_SCOPE = "https://www.googleapis.com/auth/sqlservice.admin"
# Error reason returned with HTTP 409 while another operation runs on the instance.
OPERATION_IN_PROGRESS = "operationInProgress"


class SQLAdminClient(DatabaseFetcherPort):
    """
    Fetches Cloud SQL databases through the SQL Admin REST API.

    Requests rejected because the instance is busy with another operation are
    retried with exponential backoff until the configured timeout, after which
    the read fails as a whole.
    """

    def __init__(self,
                 provider_config: ProviderConfig,
                 retry_config: Optional[RetryConfig] = None,
                 credentials: Optional[GoogleCredentials] = None,
                 http: Optional[Any] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize the client. The API service is built on first use.

        Args:
            provider_config: Provider configuration
            retry_config: Retry policy; defaults apply when omitted
            credentials: Explicit credentials, bypassing key file and ADC lookup
            http: Preconfigured HTTP object (authorized or mocked); replaces credentials
            sleep: Function used to wait between retries
            clock: Monotonic clock the retry deadline is measured against
        """
        self._config = provider_config
        self._retry_config = retry_config or RetryConfig()
        self._credentials = credentials
        self._credentials_project: Optional[str] = getattr(credentials, "project_id", None)
        self._http = http
        self._sleep = sleep
        self._clock = clock
        self._service = None

    @property
    def service(self):
        """Lazily built SQL Admin API service."""
        if self._service is None:
            self._service = self._build_service()
        return self._service

    def _build_service(self):
        kwargs: Dict[str, Any] = {"cache_discovery": False}
        if self._config.endpoint_url:
            kwargs["client_options"] = {"api_endpoint": self._config.endpoint_url}
        if self._http is not None:
            kwargs["http"] = self._http
        else:
            kwargs["credentials"] = self._get_credentials()

        logger.debug("Building SQL Admin service", api_version=self._config.api_version,
                     endpoint_url=self._config.endpoint_url)
        return discovery.build("sqladmin", self._config.api_version, **kwargs)

    def _get_credentials(self) -> GoogleCredentials:
        if self._credentials is None:
            self._credentials, self._credentials_project = self._load_credentials()
        return self._credentials

    def _load_credentials(self) -> Tuple[GoogleCredentials, Optional[str]]:
        """Load credentials from the configured key file or from ADC."""
        try:
            if self._config.credentials_file:
                credentials = service_account.Credentials.from_service_account_file(
                    self._config.credentials_file, scopes=[SQL_ADMIN_SCOPE]
                )
                return credentials, credentials.project_id
            return google.auth.default(scopes=[SQL_ADMIN_SCOPE])
        except (DefaultCredentialsError, OSError, ValueError) as e:
            logger.error("Failed to load GCP credentials", error=str(e))
            raise CredentialsError(f"Failed to load GCP credentials: {str(e)}")

    def resolve_default_project(self) -> Optional[str]:
        """Configured project, else the project attached to the credentials."""
        if self._config.project:
            return self._config.project
        if self._http is not None and self._credentials is None:
            return None
        self._get_credentials()
        return self._credentials_project

    def list_databases(self, project: str, instance: str) -> List[DatabaseRecord]:
        request = self.service.databases().list(project=project, instance=instance)
        response = self._execute(
            "databases.list", request,
            resource_type="Instance",
            resource_id=f"projects/{project}/instances/{instance}",
        )
        records = [DatabaseRecord.from_api(item) for item in response.get("items") or []]
        logger.info("Listed databases", project=project, instance=instance, count=len(records))
        return records

    def get_database(self, project: str, instance: str, name: str) -> DatabaseRecord:
        request = self.service.databases().get(project=project, instance=instance, database=name)
        response = self._execute(
            "databases.get", request,
            resource_type="Database",
            resource_id=f"projects/{project}/instances/{instance}/databases/{name}",
        )
        return DatabaseRecord.from_api(response)

    def _retrying(self, deadline: float) -> tenacity.Retrying:
        """
        Retry policy for one read.

        Waits are cut short at ``deadline`` and no attempt starts after it, so a
        read never outlives the timeout by more than one request.
        """
        config = self._retry_config
        backoff = tenacity.wait_exponential(
            multiplier=config.initial_interval,
            min=config.initial_interval,
            max=config.max_interval,
            exp_base=config.multiplier,
        )

        def past_deadline(retry_state: tenacity.RetryCallState) -> bool:
            return self._clock() >= deadline

        def wait_within_deadline(retry_state: tenacity.RetryCallState) -> float:
            return max(0.0, min(backoff(retry_state), deadline - self._clock()))

        stop = past_deadline
        if config.max_attempts:
            stop = tenacity.stop_any(past_deadline, tenacity.stop_after_attempt(config.max_attempts))
        return tenacity.Retrying(
            retry=tenacity.retry_if_exception_type(TransientOperationError),
            stop=stop,
            wait=wait_within_deadline,
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
        )

    def _execute(self, operation: str, request: Any,
                 resource_type: str, resource_id: str) -> Dict[str, Any]:
        """Execute a request, retrying while the instance reports a running operation."""
        started = self._clock()
        try:
            for attempt in self._retrying(started + self._retry_config.timeout_seconds):
                with attempt:
                    return self._call(operation, request, resource_type, resource_id)
        except tenacity.RetryError as e:
            last_error = e.last_attempt.exception()
            attempts = e.last_attempt.attempt_number
            elapsed = self._clock() - started
            logger.error("Gave up waiting for in-progress operation",
                         operation=operation, resource_id=resource_id,
                         attempts=attempts, elapsed_seconds=round(elapsed, 3))
            raise OperationTimeoutError(
                operation, self._retry_config.timeout_seconds, attempts, elapsed,
                details=str(last_error)
            ) from last_error

    def _call(self, operation: str, request: Any,
              resource_type: str, resource_id: str) -> Dict[str, Any]:
        try:
            return request.execute(num_retries=self._config.num_retries)
        except HttpError as e:
            raise translate_http_error(operation, e, resource_type, resource_id) from e


def translate_http_error(operation: str, error: HttpError,
                         resource_type: str, resource_id: str) -> Exception:
    """Map an API error onto the domain and infrastructure exception types."""
    status = getattr(error.resp, "status", None)
    content = error.content
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    reason = getattr(error, "reason", None) or str(error)

    if status == 409 and OPERATION_IN_PROGRESS in (content or ""):
        return TransientOperationError(operation, status, reason, details=content)
    if status == 404:
        return ResourceNotFoundError(resource_type, resource_id)
    return GCPOperationError(operation, status, reason, details=content)
