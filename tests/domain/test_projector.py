from cloudsql_provider.domain.database import projector
from cloudsql_provider.domain.database.value_objects import DatabaseOutput, DatabaseRecord
from conftest import PROJECT, make_record


def test_project_empty():
    assert projector.project([]) == []


def test_project_is_one_to_one_and_ordered(mysql_records):
    outputs = projector.project(mysql_records)

    assert [o.name for o in outputs] == ["mysql-db1", "mysql-db2", "mysql-db3"]
    assert all(isinstance(o, DatabaseOutput) for o in outputs)


def test_project_record_copies_fields():
    record = make_record("app", instance="main", charset="utf8mb4", collation="utf8mb4_bin")

    output = projector.project_record(record)

    assert output.to_dict() == {
        "project": PROJECT,
        "instance": "main",
        "name": "app",
        "charset": "utf8mb4",
        "collation": "utf8mb4_bin",
        "self_link": record.self_link,
    }


def test_project_record_drops_api_only_fields():
    record = make_record("app")

    assert "etag" not in projector.project_record(record).to_dict()
    assert "kind" not in projector.project_record(record).to_dict()


def test_project_record_unset_values_become_empty_strings():
    record = DatabaseRecord(name="app", instance="main", project=PROJECT)

    output = projector.project_record(record)

    assert output.charset == ""
    assert output.collation == ""
    assert output.self_link == ""
