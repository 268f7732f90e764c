"""Query-block traversal shared by the extractors.

A *query block* is a SELECT, UPDATE or DELETE node: the unit that owns a set
of table sources (its FROM and JOIN items) and its own filter clauses.  The
helpers here only look at :class:`SqlNode` kinds, roles and children, so they
work with any toolkit backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from parser_tools.sql_toolkit import SqlNode, SqlNodeKind

from ._types import ClauseContext

BLOCK_KINDS: frozenset[SqlNodeKind] = frozenset(
    {SqlNodeKind.SELECT, SqlNodeKind.UPDATE, SqlNodeKind.DELETE}
)


@dataclass(frozen=True, slots=True)
class Source:
    """A table source visible inside one query block.

    ``table`` is what predicates are attributed to: the base table name, or
    the alias for a subquery.  ``alias`` is how columns may qualify it.
    """

    table: str | None
    alias: str | None = None

    def matches(self, qualifier: str) -> bool:
        wanted = qualifier.lower()
        return any(name is not None and name.lower() == wanted for name in (self.alias, self.table))


def iter_blocks(statement: SqlNode) -> Iterator[SqlNode]:
    """Yield every query block in *statement*, outermost first (pre-order)."""
    for node in statement.walk():
        if node.kind in BLOCK_KINDS:
            yield node


def from_items(block: SqlNode) -> list[SqlNode]:
    """Return the table items of a block's FROM clause."""
    items: list[SqlNode] = []
    for from_node in block.children_of(SqlNodeKind.FROM):
        items.extend(from_node.children)
    return items


def join_item(join: SqlNode) -> SqlNode | None:
    """Return the table item a JOIN node brings in."""
    item = join.child_by_role("this")
    if item is None and join.children:
        item = join.children[0]
    return item


def join_condition(join: SqlNode) -> SqlNode | None:
    """Return a JOIN's ON condition (``USING`` joins have none)."""
    return join.child_by_role("on")


def nested_join(item: SqlNode) -> SqlNode | None:
    """Return the leading TABLE of a parenthesized join ``(a JOIN b ON ...)``.

    The parser wraps such a join in a subquery node whose body is a table
    carrying the JOIN children; ``None`` for any other item.
    """
    if item.kind != SqlNodeKind.SUBQUERY:
        return None
    head = item.child_by_role("this")
    if head is None or head.kind != SqlNodeKind.TABLE or not head.children_of(SqlNodeKind.JOIN):
        return None
    return head


def iter_sources(block: SqlNode) -> Iterator[tuple[SqlNode, SqlNode | None]]:
    """Yield ``(item, join)`` for every table item of a block's FROM and JOINs.

    ``join`` is the JOIN node that brings the item in, or ``None`` for a FROM
    item.  Parenthesized joins are opened up in place, in source order.
    """
    for item in from_items(block):
        yield from _expand(item, None)
    for join in block.children_of(SqlNodeKind.JOIN):
        item = join_item(join)
        if item is not None:
            yield from _expand(item, join)


def _expand(item: SqlNode, join: SqlNode | None) -> Iterator[tuple[SqlNode, SqlNode | None]]:
    head = nested_join(item)
    if head is None:
        yield item, join
        return
    yield head, join
    for inner in head.children_of(SqlNodeKind.JOIN):
        inner_item = join_item(inner)
        if inner_item is not None:
            yield from _expand(inner_item, inner)


def write_target(statement: SqlNode) -> SqlNode | None:
    """Return the TABLE written by an INSERT/UPDATE/DELETE/CREATE node."""
    target = statement.child_by_role("this")
    if target is not None and target.kind == SqlNodeKind.SCHEMA:
        # INSERT INTO t (a, b) / CREATE TABLE t (...) wrap the table.
        target = target.child_by_role("this")
    if target is None or target.kind != SqlNodeKind.TABLE:
        return None
    return target


def _as_source(item: SqlNode) -> Source:
    if item.kind == SqlNodeKind.TABLE:
        return Source(table=item.name, alias=item.alias or None)
    # Subqueries, table functions and VALUES lists are only known by alias.
    return Source(table=item.alias or None, alias=item.alias or None)


def block_sources(block: SqlNode) -> list[Source]:
    """Return the table sources visible to predicates of *block*."""
    items: list[SqlNode] = []
    if block.kind in (SqlNodeKind.UPDATE, SqlNodeKind.DELETE):
        target = write_target(block)
        if target is not None:
            items.append(target)
        items.extend(c for c in block.children if c.role == "using")
    items.extend(item for item, _ in iter_sources(block))
    return [_as_source(item) for item in items]


def filter_clauses(block: SqlNode) -> Iterator[tuple[ClauseContext, SqlNode]]:
    """Yield ``(context, condition)`` for a block's JOIN ON, WHERE and HAVING."""
    for _, join in iter_sources(block):
        condition = join_condition(join) if join is not None else None
        if condition is not None:
            yield ClauseContext.JOIN_ON, condition
    for kind, context in ((SqlNodeKind.WHERE, ClauseContext.WHERE), (SqlNodeKind.HAVING, ClauseContext.HAVING)):
        for clause in block.children_of(kind):
            if clause.children:
                yield context, clause.children[0]


def split_conjuncts(condition: SqlNode) -> Iterator[SqlNode]:
    """Flatten an AND-chain into its conjuncts; anything else is one conjunct."""
    if condition.kind == SqlNodeKind.AND:
        for child in condition.children:
            yield from split_conjuncts(child)
    elif (
        condition.kind == SqlNodeKind.PAREN
        and len(condition.children) == 1
        and condition.children[0].kind == SqlNodeKind.AND
    ):
        yield from split_conjuncts(condition.children[0])
    else:
        yield condition


def iter_local(node: SqlNode) -> Iterator[SqlNode]:
    """Yield *node*'s descendants without entering nested queries (pre-order)."""
    for child in node.children:
        if child.is_query:
            continue
        yield child
        yield from iter_local(child)


def attribute(condition: SqlNode, sources: list[Source]) -> str | None:
    """Return the single table every column in *condition* belongs to.

    ``None`` when the condition has no columns, when any column cannot be
    resolved, or when the columns span more than one table.
    """
    nodes = [condition, *iter_local(condition)]
    matched: set[Source] = set()
    for column in (n for n in nodes if n.kind == SqlNodeKind.COLUMN):
        source = _resolve(column, sources)
        if source is None:
            return None
        matched.add(source)
    # Two instances of one table (a self-join) are two sources.
    if len(matched) != 1:
        return None
    return matched.pop().table


def _resolve(column: SqlNode, sources: list[Source]) -> Source | None:
    if column.qualifier:
        matches = [s for s in sources if s.matches(column.qualifier[-1])]
    else:
        matches = sources
    if len(matches) != 1:
        return None
    return matches[0]
