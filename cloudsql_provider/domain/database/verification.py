"""Reconciliation of data source output against known database records.

These checks prove that a filtered (or unfiltered) databases output is a faithful
projection of records that were created independently, for example by the
resource side of the orchestrator. Both sides are compared as flat attribute
maps of strings, the way the orchestrator stores state.
"""
from typing import AbstractSet, Any, Dict, Iterable, List, Mapping, Optional, Sequence

from cloudsql_provider.domain.database.exceptions import (
    FieldMismatchError,
    RecordAbsentError,
    RecordPresentError,
)
from cloudsql_provider.domain.database.value_objects import DatabaseOutput

# Attribute-count marker stored alongside every flattened object.
COUNT_MARKER = "%"
# Suffix of list-length attributes, e.g. "labels.#".
COUNT_SUFFIX = ".#"
# Attributes only the managed resource state carries.
RESOURCE_ONLY_FIELDS = frozenset({"deletion_policy", "id"})


def _attributes(obj: Any) -> Dict[str, Optional[str]]:
    if isinstance(obj, Mapping):
        items = obj.items()
    elif hasattr(obj, "to_attributes"):
        items = obj.to_attributes().items()
    else:
        raise TypeError(f"Cannot read attributes from {type(obj).__name__}")
    return {str(k): (None if v is None else str(v)) for k, v in items}


def _is_empty_count(value: Optional[str]) -> bool:
    return value is None or value == "" or value == "0"


def verify_presence(output: Sequence[DatabaseOutput], expected_key: str) -> int:
    """Return the index of the entry named ``expected_key``."""
    for index, entry in enumerate(output):
        if entry.name == expected_key:
            return index
    raise RecordAbsentError(expected_key)


def verify_absence(output: Sequence[DatabaseOutput], excluded_key: str) -> None:
    """Fail if any entry is named ``excluded_key``."""
    for index, entry in enumerate(output):
        if entry.name == excluded_key:
            raise RecordPresentError(excluded_key, index)


def verify_fields_match(output_entry: Any, expected: Any,
                        ignored_fields: AbstractSet[str] = frozenset()) -> None:
    """
    Compare every attribute of ``expected`` with the same attribute of ``output_entry``.

    The count marker and ``ignored_fields`` are skipped. A count-suffixed
    attribute is equal when both sides are empty ("0", "" or unset), since one
    side may store an empty list where the other stores none.

    Raises:
        FieldMismatchError: With all discrepancies, if there is at least one
    """
    actual = _attributes(output_entry)
    wanted = _attributes(expected)

    mismatches = []
    for key, value in wanted.items():
        if key == COUNT_MARKER or key in ignored_fields:
            continue
        got = actual.get(key)
        if got == value:
            continue
        if key.endswith(COUNT_SUFFIX) and _is_empty_count(got) and _is_empty_count(value):
            continue
        mismatches.append((key, got, value))

    if mismatches:
        raise FieldMismatchError(wanted.get("name") or actual.get("name") or "", mismatches)


def verify_data_source(output: Sequence[DatabaseOutput], expected_records: Iterable[Any],
                       ignored_fields: AbstractSet[str] = RESOURCE_ONLY_FIELDS) -> List[int]:
    """Check that each expected record is present and matches field for field."""
    indexes = []
    for expected in expected_records:
        name = _attributes(expected).get("name") or ""
        index = verify_presence(output, name)
        verify_fields_match(output[index], expected, ignored_fields)
        indexes.append(index)
    return indexes
