import json
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

from cloudsql_provider.config.schemas import LoggingConfig, ProviderConfig
from cloudsql_provider.domain.base.ports import DatabaseFetcherPort
from cloudsql_provider.domain.database.value_objects import DatabaseRecord
from cloudsql_provider.infrastructure.logging import setup_logging

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PROJECT = "my-project-123"

GOOGLE_ENV_VARS = [
    "GOOGLE_PROJECT",
    "GOOGLE_CLOUD_PROJECT",
    "CLOUDSDK_CORE_PROJECT",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "CLOUDSQL_PROVIDER_CONFDIR",
    "CLOUDSQL_PROVIDER_ENDPOINT_URL",
    "CLOUDSQL_PROVIDER_READ_TIMEOUT",
    "CLOUDSQL_PROVIDER_LOG_LEVEL",
    "CLOUDSQL_PROVIDER_LOG_DESTINATION",
    "CLOUDSQL_PROVIDER_LOGDIR",
]


@pytest.fixture(autouse=True, scope="session")
def console_logging():
    """Route structured logs to stderr so stdout only carries command output."""
    setup_logging(LoggingConfig(level="DEBUG", destination="console"))


@pytest.fixture(autouse=True)
def clean_google_env(monkeypatch):
    """Keep the developer's gcloud environment out of the tests."""
    for env_var in GOOGLE_ENV_VARS:
        monkeypatch.delenv(env_var, raising=False)


def make_record(name: str, instance: str = "main-instance", project: str = PROJECT,
                charset: str = "UTF8", collation: str = "en_US.UTF8") -> DatabaseRecord:
    return DatabaseRecord(
        name=name,
        instance=instance,
        project=project,
        charset=charset,
        collation=collation,
        self_link=(f"https://sqladmin.googleapis.com/sql/v1beta4/projects/{project}"
                   f"/instances/{instance}/databases/{name}"),
        etag=f"etag-{name}",
    )


def load_fixture(name: str) -> Dict[str, Any]:
    with open(FIXTURES_DIR / "sqladmin" / name) as f:
        return json.load(f)


@pytest.fixture
def pg_records() -> List[DatabaseRecord]:
    return [
        make_record("pg-db1", instance="pg-instance"),
        make_record("pg-db2", instance="pg-instance"),
    ]


@pytest.fixture
def mysql_records() -> List[DatabaseRecord]:
    return [
        make_record("mysql-db1", instance="mysql-instance", charset="UTF8", collation="utf8_general_ci"),
        make_record("mysql-db2", instance="mysql-instance", charset="UTF8", collation="utf8_general_ci"),
        make_record("mysql-db3", instance="mysql-instance", charset="utf8mb4", collation="utf8mb4_0900_ai_ci"),
    ]


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(project=PROJECT)


@pytest.fixture
def mock_fetcher():
    fetcher = Mock(spec=DatabaseFetcherPort)
    fetcher.resolve_default_project.return_value = None
    return fetcher
