"""Table reference extraction.

Lists the base tables, CTEs and subquery aliases a statement reads from, and
the tables it writes to (for MERGE, its target; its USING source is a read).
A subquery in table position is reported by its alias only; the tables
inside it are reported through the subquery's own query block, so aliases
are exposed one level deep and never flattened into the enclosing scope.
"""

from __future__ import annotations

from parser_tools.sql_toolkit import SqlNode, SqlNodeKind

from ._scope import BLOCK_KINDS, iter_sources, write_target
from ._types import TableContext, TableResult

_WRITE_KINDS: dict[SqlNodeKind, TableContext] = {
    SqlNodeKind.INSERT: TableContext.INSERT,
    SqlNodeKind.UPDATE: TableContext.UPDATE,
    SqlNodeKind.DELETE: TableContext.DELETE,
    SqlNodeKind.CREATE: TableContext.CREATE,
    SqlNodeKind.MERGE: TableContext.MERGE,
}


def extract_tables(statement: SqlNode) -> list[TableResult]:
    """Return the table references of one statement, in traversal order."""
    cte_names = {cte.name.lower() for cte in statement.find_all(SqlNodeKind.CTE) if cte.name}
    results: list[TableResult] = []

    for node in statement.walk():
        if node.kind == SqlNodeKind.CTE and node.name:
            results.append(TableResult(schema=None, table=node.name, context=TableContext.CTE))

        write_context = _WRITE_KINDS.get(node.kind)
        if write_context is not None:
            target = write_target(node)
            if target is not None:
                results.append(_table_result(target, write_context))

        if node.kind == SqlNodeKind.MERGE:
            source = node.child_by_role("using")
            if source is not None:
                results.extend(_item_tables(source, TableContext.FROM, cte_names))

        if node.kind in BLOCK_KINDS:
            results.extend(_block_tables(node, cte_names))

    return _dedupe(results)


def _block_tables(block: SqlNode, cte_names: set[str]) -> list[TableResult]:
    sources = list(iter_sources(block))
    has_joins = any(join is not None for _, join in sources)
    source_context = TableContext.JOIN_LEFT if has_joins else TableContext.FROM

    found: list[TableResult] = []
    if block.kind == SqlNodeKind.DELETE:
        for item in (c for c in block.children if c.role == "using"):
            found.extend(_item_tables(item, source_context, cte_names))
    for item, join in sources:
        context = TableContext.JOIN_RIGHT if join is not None else source_context
        found.extend(_item_tables(item, context, cte_names))
    return found


def _item_tables(item: SqlNode, context: TableContext, cte_names: set[str]) -> list[TableResult]:
    if item.kind == SqlNodeKind.TABLE:
        if not item.qualifier and item.name.lower() in cte_names:
            context = TableContext.FROM_CTE
        return [_table_result(item, context)]
    if item.kind == SqlNodeKind.SUBQUERY and item.alias:
        return [TableResult(schema=None, table=item.alias, context=TableContext.SUBQUERY)]
    return []


def _table_result(table: SqlNode, context: TableContext) -> TableResult:
    catalog: str | None = None
    schema: str | None = None
    if len(table.qualifier) >= 2:
        catalog, schema = table.qualifier[-2], table.qualifier[-1]
    elif table.qualifier:
        schema = table.qualifier[0]
    return TableResult(
        schema=schema,
        table=table.name,
        context=context,
        write_target=context.is_write,
        catalog=catalog,
    )


def _dedupe(results: list[TableResult]) -> list[TableResult]:
    seen: set[TableResult] = set()
    unique: list[TableResult] = []
    for result in results:
        if result not in seen:
            seen.add(result)
            unique.append(result)
    return unique
