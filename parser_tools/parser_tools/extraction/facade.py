"""Extraction facade.

Binds each extractor to a name and exposes it in two shapes:

* **bulk**: :func:`extract_list` / :func:`extract_count` return every record
  for one input at once;
* **row-producing**: :class:`ExtractionCursor` yields one record per pull,
  computing the full result on the first pull and serving later pulls from
  the memoized list.

Each call parses its input once and owns the resulting trees; nothing is
cached between calls.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable

from parser_tools.config import load_settings
from parser_tools.sql_toolkit import Dialect, SqlNode, SqlToolkit

from ._types import (
    DetailedWhereConditionResult,
    ExtractionRecord,
    FunctionResult,
    StatementResult,
    TableContext,
    TableResult,
    WhereConditionResult,
)
from .functions import extract_functions
from .predicates import extract_where_conditions, extract_where_conditions_detailed
from .splitter import ParseOutcome, parse_sql, render_statements
from .tables import extract_tables

logger = logging.getLogger(__name__)


class Extraction(str, enum.Enum):
    """The record kinds the facade can produce."""

    STATEMENTS = "statements"
    TABLES = "tables"
    WHERE = "where"
    WHERE_DETAILED = "where_detailed"
    FUNCTIONS = "functions"


_PER_STATEMENT: dict[Extraction, Callable[[SqlNode], list]] = {
    Extraction.TABLES: extract_tables,
    Extraction.WHERE: extract_where_conditions,
    Extraction.WHERE_DETAILED: extract_where_conditions_detailed,
    Extraction.FUNCTIONS: extract_functions,
}

_NAME_EXCLUDED_CONTEXTS = frozenset({TableContext.CTE, TableContext.FROM_CTE, TableContext.SUBQUERY})


def _resolve_dialect(dialect: Dialect | str | None) -> Dialect:
    if dialect is None:
        return load_settings().dialect
    return Dialect(dialect)


def _run(outcome: ParseOutcome, extraction: Extraction, toolkit: SqlToolkit | None) -> list:
    if extraction is Extraction.STATEMENTS:
        return render_statements(outcome, toolkit=toolkit)
    extractor = _PER_STATEMENT[extraction]
    results: list = []
    for statement in outcome.statements:
        results.extend(extractor(statement))
    return results


# ---------------------------------------------------------------------------
# Bulk form
# ---------------------------------------------------------------------------


def extract_list(
    sql: str,
    extraction: Extraction | str,
    *,
    dialect: Dialect | str | None = None,
    toolkit: SqlToolkit | None = None,
) -> list[ExtractionRecord]:
    """Return every record of kind *extraction* found in *sql*, in order.

    Malformed SQL yields an empty list.

    Raises:
        ValueError: If *extraction* or *dialect* names no known member.
    """
    kind = Extraction(extraction)
    outcome = parse_sql(sql, dialect=_resolve_dialect(dialect), toolkit=toolkit)
    results = _run(outcome, kind, toolkit)
    logger.debug(
        "Extracted %d %s record(s) from %d statement(s)",
        len(results),
        kind.value,
        len(outcome.statements),
    )
    return results


extract = extract_list


def extract_count(
    sql: str,
    extraction: Extraction | str,
    *,
    dialect: Dialect | str | None = None,
    toolkit: SqlToolkit | None = None,
) -> int:
    """Return how many records :func:`extract_list` produces for *sql*."""
    return len(extract_list(sql, extraction, dialect=dialect, toolkit=toolkit))


# ---------------------------------------------------------------------------
# Row-producing form
# ---------------------------------------------------------------------------


class ExtractionCursor:
    """Pull-driven, single-pass sequence of records for one input.

    The first pull runs the full extraction and memoizes it; every later
    pull only advances a position.  The cursor cannot be rewound: iterating
    it again after exhaustion yields nothing.  It is owned by one request
    and must not be shared.
    """

    def __init__(
        self,
        sql: str,
        extraction: Extraction | str,
        *,
        dialect: Dialect | str | None = None,
        toolkit: SqlToolkit | None = None,
    ) -> None:
        self._sql = sql
        self._extraction = Extraction(extraction)
        self._dialect = dialect
        self._toolkit = toolkit
        self._results: list[ExtractionRecord] | None = None
        self._position = 0

    @property
    def extraction(self) -> Extraction:
        return self._extraction

    @property
    def materialized(self) -> bool:
        """True once the first pull has computed the results."""
        return self._results is not None

    @property
    def exhausted(self) -> bool:
        return self._results is not None and self._position >= len(self._results)

    def _materialize(self) -> list[ExtractionRecord]:
        if self._results is None:
            self._results = extract_list(
                self._sql,
                self._extraction,
                dialect=self._dialect,
                toolkit=self._toolkit,
            )
        return self._results

    def fetch(self) -> ExtractionRecord | None:
        """Return the next record, or ``None`` once the sequence is exhausted."""
        results = self._materialize()
        if self._position >= len(results):
            return None
        record = results[self._position]
        self._position += 1
        return record

    def __iter__(self) -> ExtractionCursor:
        return self

    def __next__(self) -> ExtractionRecord:
        record = self.fetch()
        if record is None:
            raise StopIteration
        return record


# ---------------------------------------------------------------------------
# Named entry points
# ---------------------------------------------------------------------------


def parse_statements(sql: str, *, dialect: Dialect | str | None = None) -> list[StatementResult]:
    """Return the canonical statements of *sql*."""
    return extract_list(sql, Extraction.STATEMENTS, dialect=dialect)  # type: ignore[return-value]


def num_statements(sql: str, *, dialect: Dialect | str | None = None) -> int:
    return extract_count(sql, Extraction.STATEMENTS, dialect=dialect)


def parse_tables(sql: str, *, dialect: Dialect | str | None = None) -> list[TableResult]:
    return extract_list(sql, Extraction.TABLES, dialect=dialect)  # type: ignore[return-value]


def parse_table_names(sql: str, *, dialect: Dialect | str | None = None) -> list[str]:
    """Return the distinct base-table names *sql* touches, CTEs and aliases excluded."""
    names: list[str] = []
    for table in parse_tables(sql, dialect=dialect):
        if table.context in _NAME_EXCLUDED_CONTEXTS:
            continue
        if table.qualified_name not in names:
            names.append(table.qualified_name)
    return names


def parse_where(sql: str, *, dialect: Dialect | str | None = None) -> list[WhereConditionResult]:
    return extract_list(sql, Extraction.WHERE, dialect=dialect)  # type: ignore[return-value]


def parse_where_detailed(
    sql: str, *, dialect: Dialect | str | None = None
) -> list[DetailedWhereConditionResult]:
    return extract_list(sql, Extraction.WHERE_DETAILED, dialect=dialect)  # type: ignore[return-value]


def parse_functions(sql: str, *, dialect: Dialect | str | None = None) -> list[FunctionResult]:
    return extract_list(sql, Extraction.FUNCTIONS, dialect=dialect)  # type: ignore[return-value]


def parse_function_names(sql: str, *, dialect: Dialect | str | None = None) -> list[str]:
    """Return the distinct function names called in *sql*, first use first."""
    names: list[str] = []
    for call in parse_functions(sql, dialect=dialect):
        if call.function_name not in names:
            names.append(call.function_name)
    return names


def is_parsable(sql: str, *, dialect: Dialect | str | None = None) -> bool:
    """True when *sql* parses into at least one statement."""
    outcome = parse_sql(sql, dialect=_resolve_dialect(dialect))
    return outcome.ok and bool(outcome.statements)
