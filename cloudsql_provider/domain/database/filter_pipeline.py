"""Include/exclude regex filtering of fetched database records.

A pipeline is an ordered list of FilterClause values combined with logical AND.
Each clause contributes one boolean:

    (no include patterns or any include pattern matches) and no exclude pattern matches

so an exclude match always wins over an include match, and an empty clause is
neutral. A record survives when every clause holds; evaluation of a record stops
at the first clause that does not.

Patterns use unanchored search semantics: ``.*8`` matches ``utf8mb4``.
"""
import re
from operator import attrgetter
from typing import Callable, Dict, List, NamedTuple, Pattern, Sequence, Tuple

from cloudsql_provider.domain.database.exceptions import (
    InvalidFilterPatternError,
    UnknownFilterFieldError,
)
from cloudsql_provider.domain.database.value_objects import (
    DatabaseRecord,
    FilterClause,
    FilterField,
)

FIELD_RESOLVERS: Dict[FilterField, Callable[[DatabaseRecord], str]] = {
    FilterField.NAME: attrgetter("name"),
    FilterField.CHARSET: attrgetter("charset"),
    FilterField.COLLATION: attrgetter("collation"),
}


class CompiledClause(NamedTuple):
    """A FilterClause with its patterns compiled."""
    field: FilterField
    include: Tuple[Pattern, ...]
    exclude: Tuple[Pattern, ...]


def _compile(field: FilterField, patterns: Sequence[str]) -> Tuple[Pattern, ...]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise InvalidFilterPatternError(field.value, pattern, str(e)) from e
    return tuple(compiled)


def compile_clauses(clauses: Sequence[FilterClause]) -> List[CompiledClause]:
    """Compile every pattern of every clause, failing on the first bad one."""
    compiled = []
    for clause in clauses:
        field = FilterField.parse(clause.field)
        if field not in FIELD_RESOLVERS:
            raise UnknownFilterFieldError(field, [f.value for f in FIELD_RESOLVERS])
        compiled.append(CompiledClause(
            field=field,
            include=_compile(field, clause.include_patterns),
            exclude=_compile(field, clause.exclude_patterns),
        ))
    return compiled


def resolve_field(record: DatabaseRecord, field: FilterField) -> str:
    """Value of a filterable field, with unset values read as empty strings."""
    try:
        resolver = FIELD_RESOLVERS[field]
    except KeyError:
        raise UnknownFilterFieldError(field, [f.value for f in FIELD_RESOLVERS])
    return resolver(record) or ""


def clause_matches(clause: CompiledClause, value: str) -> bool:
    """Outcome of a single clause for one field value."""
    included = not clause.include or any(p.search(value) for p in clause.include)
    excluded = any(p.search(value) for p in clause.exclude)
    return included and not excluded


def record_included(record: DatabaseRecord, clauses: Sequence[CompiledClause]) -> bool:
    # all() is the AND fold; it stops at the first clause that fails.
    return all(clause_matches(c, resolve_field(record, c.field)) for c in clauses)


def apply(records: Sequence[DatabaseRecord],
          clauses: Sequence[FilterClause]) -> List[DatabaseRecord]:
    """
    Return the records that pass every clause, in their original order.

    Args:
        records: Records in the order the fetcher returned them
        clauses: Filter clauses, combined with AND

    Returns:
        The surviving records

    Raises:
        InvalidFilterPatternError: If any pattern fails to compile
        UnknownFilterFieldError: If a clause names an unsupported field
    """
    if not records:
        return []
    if not clauses:
        return list(records)

    compiled = compile_clauses(clauses)
    return [record for record in records if record_included(record, compiled)]
