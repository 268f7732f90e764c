"""Unit tests for the query-block helpers in parser_tools.extraction._scope."""

from __future__ import annotations

from parser_tools.extraction._scope import (
    Source,
    attribute,
    block_sources,
    filter_clauses,
    iter_blocks,
    iter_sources,
    split_conjuncts,
)
from parser_tools.extraction._types import ClauseContext
from parser_tools.sql_toolkit import Dialect, SqlNode, SqlNodeKind, get_sql_toolkit


def _statement(sql: str) -> SqlNode:
    return get_sql_toolkit().parser.parse_one(sql, Dialect.DUCKDB).single


def _column(name: str, *qualifier: str) -> SqlNode:
    return SqlNode(kind=SqlNodeKind.COLUMN, name=name, qualifier=qualifier)


class TestSource:
    def test_matches_alias(self):
        assert Source(table="orders", alias="o").matches("O")

    def test_matches_table(self):
        assert Source(table="orders", alias="o").matches("orders")

    def test_no_match(self):
        assert not Source(table="orders", alias="o").matches("c")

    def test_unnamed_source_never_matches(self):
        assert not Source(table=None).matches("x")


class TestBlocks:
    def test_outermost_first(self):
        blocks = list(iter_blocks(_statement("SELECT * FROM (SELECT * FROM t) AS s")))
        assert len(blocks) == 2
        assert blocks[0].kind == SqlNodeKind.SELECT
        assert blocks[1].find(SqlNodeKind.TABLE).name == "t"

    def test_union_has_two_blocks(self):
        assert len(list(iter_blocks(_statement("SELECT 1 UNION SELECT 2")))) == 2

    def test_sources_include_joins(self):
        block = _statement("SELECT * FROM a x JOIN b ON x.id = b.id")
        assert block_sources(block) == [Source(table="a", alias="x"), Source(table="b")]

    def test_sources_open_parenthesized_join(self):
        block = _statement("SELECT * FROM (a JOIN b ON a.id = b.id) JOIN c USING (id)")
        assert block_sources(block) == [Source(table="a"), Source(table="b"), Source(table="c")]

    def test_iter_sources_pairs_items_with_joins(self):
        block = _statement("SELECT * FROM (a JOIN b ON a.id = b.id)")
        pairs = [(item.name, join is not None) for item, join in iter_sources(block)]
        assert pairs == [("a", False), ("b", True)]

    def test_filter_clause_order(self):
        block = _statement("SELECT a FROM t JOIN u ON t.id = u.id WHERE t.a = 1 GROUP BY a HAVING a > 0")
        assert [ctx for ctx, _ in filter_clauses(block)] == [
            ClauseContext.JOIN_ON,
            ClauseContext.WHERE,
            ClauseContext.HAVING,
        ]

    def test_using_join_has_no_condition(self):
        block = _statement("SELECT * FROM a JOIN b USING (id)")
        assert list(filter_clauses(block)) == []


class TestConjuncts:
    def test_flat_chain(self):
        where = _statement("SELECT * FROM t WHERE a = 1 AND b = 2 AND c = 3").find(SqlNodeKind.WHERE)
        assert len(list(split_conjuncts(where.children[0]))) == 3

    def test_or_not_split(self):
        where = _statement("SELECT * FROM t WHERE a = 1 OR b = 2").find(SqlNodeKind.WHERE)
        assert len(list(split_conjuncts(where.children[0]))) == 1

    def test_paren_around_or_not_split(self):
        where = _statement("SELECT * FROM t WHERE (a = 1 OR b = 2) AND c = 3").find(SqlNodeKind.WHERE)
        kinds = [c.kind for c in split_conjuncts(where.children[0])]
        assert kinds == [SqlNodeKind.PAREN, SqlNodeKind.COMPARISON]


class TestAttribute:
    SOURCES = [Source(table="orders", alias="o"), Source(table="customers", alias="c")]

    def test_single_table(self):
        condition = SqlNode(kind=SqlNodeKind.COMPARISON, children=(_column("total", "o"),))
        assert attribute(condition, self.SOURCES) == "orders"

    def test_two_tables(self):
        condition = SqlNode(
            kind=SqlNodeKind.COMPARISON,
            children=(_column("id", "o"), _column("id", "c")),
        )
        assert attribute(condition, self.SOURCES) is None

    def test_unknown_qualifier(self):
        condition = SqlNode(kind=SqlNodeKind.COMPARISON, children=(_column("id", "z"),))
        assert attribute(condition, self.SOURCES) is None

    def test_unqualified_with_one_source(self):
        condition = SqlNode(kind=SqlNodeKind.COMPARISON, children=(_column("id"),))
        assert attribute(condition, [Source(table="t")]) == "t"

    def test_unqualified_with_many_sources(self):
        condition = SqlNode(kind=SqlNodeKind.COMPARISON, children=(_column("id"),))
        assert attribute(condition, self.SOURCES) is None

    def test_self_join_aliases_are_separate_sources(self):
        sources = [Source(table="t", alias="t1"), Source(table="t", alias="t2")]
        condition = SqlNode(
            kind=SqlNodeKind.COMPARISON,
            children=(_column("id", "t1"), _column("id", "t2")),
        )
        assert attribute(condition, sources) is None

    def test_self_join_single_alias(self):
        sources = [Source(table="t", alias="t1"), Source(table="t", alias="t2")]
        condition = SqlNode(kind=SqlNodeKind.COMPARISON, children=(_column("x", "t2"),))
        assert attribute(condition, sources) == "t"

    def test_no_columns(self):
        assert attribute(SqlNode(kind=SqlNodeKind.LITERAL), self.SOURCES) is None

    def test_nested_query_columns_ignored(self):
        nested = SqlNode(kind=SqlNodeKind.SUBQUERY, children=(_column("x", "inner"),))
        condition = SqlNode(kind=SqlNodeKind.IN, children=(_column("id", "o"), nested))
        assert attribute(condition, self.SOURCES) == "orders"
