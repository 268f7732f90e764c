"""Statement splitting.

Turns raw SQL text into independently re-serializable statements.  This is
the single point where a syntax error is absorbed: a failed parse becomes a
:class:`ParseOutcome` carrying the error, and every consumer of the outcome
sees zero statements.  Malformed SQL therefore yields no findings rather
than an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from parser_tools.sql_toolkit import (
    Dialect,
    SqlNode,
    SqlParseError,
    SqlToolkit,
    resolve_toolkit,
)

from ._types import StatementResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParseOutcome:
    """Either the parsed statements of one input, or the error that stopped it."""

    statements: tuple[SqlNode, ...] = ()
    dialect: Dialect = Dialect.DUCKDB
    error: SqlParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_sql(
    sql: str,
    *,
    dialect: Dialect = Dialect.DUCKDB,
    toolkit: SqlToolkit | None = None,
) -> ParseOutcome:
    """Parse *sql* into statement trees without raising on syntax errors."""
    if not sql or not sql.strip():
        return ParseOutcome(dialect=dialect)

    tk = resolve_toolkit(toolkit)
    try:
        result = tk.parser.parse_multi(sql, dialect)
    except SqlParseError as exc:
        logger.debug(
            "Discarding unparsable SQL (%d chars): %s",
            len(sql),
            exc,
            extra={"sql_preview": sql[:120]},
        )
        return ParseOutcome(dialect=dialect, error=exc)

    for warning in result.warnings:
        logger.debug("Parser warning: %s", warning)
    return ParseOutcome(statements=result.statements, dialect=dialect)


def split_statements(
    sql: str,
    *,
    dialect: Dialect = Dialect.DUCKDB,
    toolkit: SqlToolkit | None = None,
) -> list[StatementResult]:
    """Return one canonical :class:`StatementResult` per statement in *sql*."""
    outcome = parse_sql(sql, dialect=dialect, toolkit=toolkit)
    return render_statements(outcome, toolkit=toolkit)


def render_statements(
    outcome: ParseOutcome,
    *,
    toolkit: SqlToolkit | None = None,
) -> list[StatementResult]:
    """Re-serialize the statements of a parse outcome, in source order."""
    if not outcome.ok:
        return []
    tk = resolve_toolkit(toolkit)
    return [
        StatementResult(statement=tk.renderer.render(node, outcome.dialect))
        for node in outcome.statements
    ]
