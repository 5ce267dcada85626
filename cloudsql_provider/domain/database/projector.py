"""Projection of database records into the data source output shape."""
from typing import List, Sequence

from cloudsql_provider.domain.database.value_objects import DatabaseOutput, DatabaseRecord


def project_record(record: DatabaseRecord) -> DatabaseOutput:
    return DatabaseOutput(
        project=record.project or "",
        instance=record.instance or "",
        name=record.name or "",
        charset=record.charset or "",
        collation=record.collation or "",
        self_link=record.self_link or "",
    )


def project(records: Sequence[DatabaseRecord]) -> List[DatabaseOutput]:
    """Map records to outputs one-to-one; an empty input gives an empty list."""
    return [project_record(record) for record in records]
