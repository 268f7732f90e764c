"""Function call extraction.

Every call site is reported, repeated calls included, so callers can count
how often a function is used.  Arguments are visited before the call that
receives them, and a nested call keeps the clause context of its outermost
call.  Nested queries are not entered from a clause; they are reached as
query blocks of their own.
"""

from __future__ import annotations

from typing import Iterator

from parser_tools.sql_toolkit import SqlNode, SqlNodeKind

from ._scope import iter_blocks, iter_sources, join_condition
from ._types import ClauseContext, FunctionResult

_CLAUSE_CONTEXTS: tuple[tuple[SqlNodeKind, ClauseContext], ...] = (
    (SqlNodeKind.WHERE, ClauseContext.WHERE),
    (SqlNodeKind.GROUP, ClauseContext.GROUP_BY),
    (SqlNodeKind.HAVING, ClauseContext.HAVING),
    (SqlNodeKind.ORDER, ClauseContext.ORDER_BY),
)


def extract_functions(statement: SqlNode) -> list[FunctionResult]:
    """Return one record per function call site in *statement*."""
    results: list[FunctionResult] = []
    for block in iter_blocks(statement):
        for context, clause in _block_clauses(block):
            for call in _calls(clause):
                results.append(
                    FunctionResult(
                        function_name=call.name,
                        schema=".".join(call.qualifier) or None,
                        context=context,
                    )
                )
    return results


def _block_clauses(block: SqlNode) -> Iterator[tuple[ClauseContext, SqlNode]]:
    if block.kind == SqlNodeKind.SELECT:
        for item in block.children:
            if item.role == "expressions":
                yield ClauseContext.SELECT_LIST, item
    for _, join in iter_sources(block):
        condition = join_condition(join) if join is not None else None
        if condition is not None:
            yield ClauseContext.JOIN_ON, condition
    for kind, context in _CLAUSE_CONTEXTS:
        for clause in block.children_of(kind):
            yield context, clause


def _calls(node: SqlNode) -> Iterator[SqlNode]:
    """Yield FUNCTION nodes under and including *node*, arguments first."""
    if node.is_query:
        return
    for child in node.children:
        yield from _calls(child)
    if node.kind == SqlNodeKind.FUNCTION:
        yield node
