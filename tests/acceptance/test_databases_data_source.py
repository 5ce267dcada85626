"""
End-to-end reads of the databases data source against recorded SQL Admin responses.

Each scenario compares the data source output with the state the resource side
of the orchestrator keeps for the same databases. That state carries the count
marker and resource-only attributes, which the comparison skips.
"""
import json

import pytest
from googleapiclient.http import HttpMockSequence

from cloudsql_provider.application.database import DatabaseQueryService, ReadDatabasesRequest
from cloudsql_provider.config.schemas import ProviderConfig, RetryConfig
from cloudsql_provider.domain.database.exceptions import (
    DataSourceNotFoundError,
    InvalidFilterPatternError,
)
from cloudsql_provider.domain.database.verification import (
    verify_absence,
    verify_data_source,
    verify_presence,
)
from cloudsql_provider.infrastructure.gcp import SQLAdminClient
from conftest import PROJECT, load_fixture

pytestmark = pytest.mark.acceptance


def resource_states(fixture, *names):
    """Resource-side state of the named databases in a recorded list response."""
    states = []
    for item in load_fixture(fixture)["items"]:
        if item["name"] not in names:
            continue
        states.append({
            "%": "8",
            "id": f"{item['project']}:{item['instance']}:{item['name']}",
            "deletion_policy": "DELETE",
            "name": item["name"],
            "instance": item["instance"],
            "project": item["project"],
            "charset": item["charset"],
            "collation": item["collation"],
            "self_link": item["selfLink"],
        })
    return states


def service_for(*responses):
    client = SQLAdminClient(
        ProviderConfig(project=PROJECT),
        RetryConfig(max_attempts=3),
        http=HttpMockSequence([
            ({"status": str(status)}, json.dumps(load_fixture(fixture)))
            for status, fixture in responses
        ]),
        sleep=lambda seconds: None,
    )
    return DatabaseQueryService(client, ProviderConfig(project=PROJECT))


def read(service, instance, filters=()):
    return service.read_databases(ReadDatabasesRequest.from_payload({
        "instance": instance,
        "filters": list(filters),
    }))


def test_unfiltered_postgres_instance():
    service = service_for((200, "databases_list_pg.json"))

    response = read(service, "pg-instance")

    outputs = response.outputs()
    assert response.id == f"projects/{PROJECT}/instances/pg-instance/databases"
    assert [o.name for o in outputs] == ["postgres", "pg-db1", "pg-db2"]
    verify_data_source(outputs, resource_states("databases_list_pg.json", "pg-db1", "pg-db2"))


def test_mysql_name_filter():
    service = service_for((200, "databases_list_mysql.json"))

    response = read(service, "mysql-instance", [
        {"name": "name", "values": [".*[0-9]"], "exclude_values": [".*2", ".*3"]},
    ])

    outputs = response.outputs()
    verify_data_source(outputs, resource_states("databases_list_mysql.json", "mysql-db1"))
    verify_absence(outputs, "mysql-db2")
    verify_absence(outputs, "mysql-db3")
    verify_absence(outputs, "sys")


def test_mysql_name_and_charset_filters():
    service = service_for((200, "databases_list_mysql.json"))

    response = read(service, "mysql-instance", [
        {"name": "name", "values": [".*[0-9]"]},
        {"name": "charset", "values": [".*8"], "exclude_values": [".*mb4"]},
    ])

    outputs = response.outputs()
    verify_data_source(outputs, resource_states("databases_list_mysql.json", "mysql-db1"))
    verify_absence(outputs, "mysql-db3")
    # "sys" is utf8mb3: it passes the charset clause but has no digit in its name.
    verify_absence(outputs, "sys")
    verify_presence(outputs, "mysql-db2")


def test_read_waits_out_operation_in_progress():
    service = service_for(
        (409, "error_operation_in_progress.json"),
        (200, "databases_list_pg.json"),
    )

    response = read(service, "pg-instance", [{"name": "name", "values": ["^pg-"]}])

    assert [d["name"] for d in response.databases] == ["pg-db1", "pg-db2"]


def test_missing_instance():
    service = service_for((404, "error_instance_not_found.json"))

    with pytest.raises(DataSourceNotFoundError):
        read(service, "gone-instance")


def test_malformed_pattern_fails_the_read():
    service = service_for((200, "databases_list_mysql.json"))

    with pytest.raises(InvalidFilterPatternError):
        read(service, "mysql-instance", [{"name": "collation", "exclude_values": ["*ci"]}])
