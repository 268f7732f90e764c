"""Filter predicate extraction.

Locates the JOIN ON, WHERE and HAVING conditions of every query block and
splits AND-chains into conjuncts.  Disjunctions and negations are never
split: they are reported whole in coarse mode and skipped in detailed mode,
since they are not single comparisons.

Table attribution is conservative: a conjunct is attributed only when every
column it references resolves to the same single table in scope.
"""

from __future__ import annotations

from parser_tools.sql_toolkit import SqlNode, SqlNodeKind

from ._scope import attribute, block_sources, filter_clauses, iter_blocks, split_conjuncts
from ._types import DetailedWhereConditionResult, WhereConditionResult

_VALUE_KINDS = frozenset({SqlNodeKind.LITERAL, SqlNodeKind.PARAMETER})

# Operator to use when the operands of a comparison are swapped.
_MIRRORED_OPERATORS: dict[str, str] = {
    "=": "=",
    "<>": "<>",
    "<": ">",
    "<=": ">=",
    ">": "<",
    ">=": "<=",
}


def extract_where_conditions(statement: SqlNode) -> list[WhereConditionResult]:
    """Return one record per filter conjunct, with its SQL text."""
    results: list[WhereConditionResult] = []
    for block in iter_blocks(statement):
        sources = block_sources(block)
        for context, condition in filter_clauses(block):
            for conjunct in split_conjuncts(condition):
                results.append(
                    WhereConditionResult(
                        condition=conjunct.sql_text,
                        table_name=attribute(conjunct, sources),
                        context=context,
                    )
                )
    return results


def extract_where_conditions_detailed(statement: SqlNode) -> list[DetailedWhereConditionResult]:
    """Return the ``column <op> value`` conjuncts, decomposed."""
    results: list[DetailedWhereConditionResult] = []
    for block in iter_blocks(statement):
        sources = block_sources(block)
        for context, condition in filter_clauses(block):
            for conjunct in split_conjuncts(condition):
                shape = _comparison_shape(conjunct)
                if shape is None:
                    continue
                column, operator, value = shape
                results.append(
                    DetailedWhereConditionResult(
                        column_name=column.name,
                        operator_type=operator,
                        value=value.sql_text,
                        table_name=attribute(conjunct, sources),
                        context=context,
                    )
                )
    return results


def _comparison_shape(conjunct: SqlNode) -> tuple[SqlNode, str, SqlNode] | None:
    """Return ``(column, operator, value)`` for a column/literal comparison.

    A mirrored ``value <op> column`` is normalized so the column comes first
    and the operator reads the same way.
    """
    if conjunct.kind != SqlNodeKind.COMPARISON or len(conjunct.children) != 2:
        return None
    left, right = conjunct.children
    if left.kind == SqlNodeKind.COLUMN and right.kind in _VALUE_KINDS:
        return left, conjunct.operator, right
    if right.kind == SqlNodeKind.COLUMN and left.kind in _VALUE_KINDS:
        mirrored = _MIRRORED_OPERATORS.get(conjunct.operator)
        if mirrored is None:
            return None
        return right, mirrored, left
    return None
