"""SQL toolkit shared types.

Every type here is implementation-agnostic. Extraction code operates on these
types exclusively. The backing implementation (SQLGlot today) converts its
native syntax tree into :class:`SqlNode` trees internally.

ZERO dependency on any SQL parsing library.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Dialect
# ---------------------------------------------------------------------------


class Dialect(str, enum.Enum):
    """Supported SQL dialects (values are the backend's dialect names)."""

    DUCKDB = "duckdb"
    DATABRICKS = "databricks"
    REDSHIFT = "redshift"
    POSTGRES = "postgres"
    SNOWFLAKE = "snowflake"
    BIGQUERY = "bigquery"
    MYSQL = "mysql"
    SQLITE = "sqlite"


# ---------------------------------------------------------------------------
# AST Node Types
# ---------------------------------------------------------------------------


class SqlNodeKind(str, enum.Enum):
    """Node kinds the extractors match on.

    This is NOT a 1:1 mapping to any parser's internal types; it is the
    subset the extraction engine inspects.  Everything else is UNKNOWN and
    is only ever walked through.
    """

    # Statement types
    SELECT = "select"
    UNION = "union"
    INTERSECT = "intersect"
    EXCEPT = "except"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    CREATE = "create"
    DROP = "drop"
    ALTER = "alter"
    MERGE = "merge"
    COMMAND = "command"

    # Clause types
    WITH = "with"
    CTE = "cte"
    FROM = "from"
    JOIN = "join"
    WHERE = "where"
    GROUP = "group"
    HAVING = "having"
    ORDER = "order"

    # Table reference types
    TABLE = "table"
    TABLE_FUNCTION = "table_function"
    SUBQUERY = "subquery"
    SCHEMA = "schema"

    # Expression types
    COLUMN = "column"
    STAR = "star"
    ALIAS = "alias"
    LITERAL = "literal"
    PARAMETER = "parameter"
    FUNCTION = "function"
    CAST = "cast"
    CASE = "case"
    WINDOW = "window"

    # Boolean / predicate types
    AND = "and"
    OR = "or"
    NOT = "not"
    PAREN = "paren"
    COMPARISON = "comparison"
    IN = "in"
    BETWEEN = "between"
    LIKE = "like"
    IS = "is"
    EXISTS = "exists"

    # Catch-all
    UNKNOWN = "unknown"


QUERY_KINDS: frozenset[SqlNodeKind] = frozenset(
    {
        SqlNodeKind.SELECT,
        SqlNodeKind.UNION,
        SqlNodeKind.INTERSECT,
        SqlNodeKind.EXCEPT,
        SqlNodeKind.SUBQUERY,
    }
)


# ---------------------------------------------------------------------------
# AST Wrapper
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SqlNode:
    """Opaque wrapper around an AST node.

    Consumer code can inspect ``kind``, ``name``, ``alias``, ``qualifier``,
    ``operator``, ``role``, ``children`` and ``sql_text``.

    ``qualifier`` holds the dotted prefix of a name, outermost first: the
    ``(catalog, schema)`` of a table, the ``(table,)`` of a column, the
    ``(schema,)`` of a function call.  ``role`` names the slot this node
    occupies in its parent (``"this"``, ``"expression"``, ``"on"`` …).

    The ``raw`` field holds the implementation-specific object for
    escape-hatch operations and is excluded from ``__eq__`` / ``__hash__``
    so that two nodes compare equal when their logical content matches.
    """

    kind: SqlNodeKind
    name: str = ""
    alias: str = ""
    qualifier: tuple[str, ...] = ()
    operator: str = ""
    role: str = ""
    children: tuple[SqlNode, ...] = ()
    sql_text: str = ""
    raw: Any = field(default=None, repr=False, compare=False, hash=False)

    # -- traversal helpers ---------------------------------------------------

    def find_all(self, kind: SqlNodeKind) -> list[SqlNode]:
        """Recursively find all descendant nodes of the given kind."""
        result: list[SqlNode] = []
        self._collect(kind, result)
        return result

    def _collect(self, kind: SqlNodeKind, acc: list[SqlNode]) -> None:
        for child in self.children:
            if child.kind == kind:
                acc.append(child)
            child._collect(kind, acc)

    def find(self, kind: SqlNodeKind) -> SqlNode | None:
        """Find the first descendant of *kind* (depth-first), or ``None``."""
        for child in self.children:
            if child.kind == kind:
                return child
            found = child.find(kind)
            if found is not None:
                return found
        return None

    def walk(self) -> list[SqlNode]:
        """Return a flat list of this node and all descendants (pre-order DFS)."""
        result: list[SqlNode] = []
        self._walk(result)
        return result

    def _walk(self, acc: list[SqlNode]) -> None:
        acc.append(self)
        for child in self.children:
            child._walk(acc)

    def child_by_role(self, role: str) -> SqlNode | None:
        """Return the first direct child occupying *role*, or ``None``."""
        for child in self.children:
            if child.role == role:
                return child
        return None

    def children_of(self, kind: SqlNodeKind) -> list[SqlNode]:
        """Return the direct children of the given kind, in order."""
        return [child for child in self.children if child.kind == kind]

    @property
    def is_query(self) -> bool:
        """True for nodes that open a nested query scope."""
        return self.kind in QUERY_KINDS


# ---------------------------------------------------------------------------
# Result Containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Result of parsing a SQL string.

    ``statements`` handles multi-statement SQL (separated by ``;``).
    """

    statements: tuple[SqlNode, ...]
    dialect: Dialect
    warnings: list[str] = field(default_factory=list)

    @property
    def single(self) -> SqlNode:
        """Return the single statement, or raise if zero / multiple."""
        if len(self.statements) != 1:
            raise ValueError(f"Expected exactly 1 statement, got {len(self.statements)}")
        return self.statements[0]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SqlToolkitError(Exception):
    """Base exception for all sql_toolkit errors."""


class SqlParseError(SqlToolkitError):
    """SQL could not be parsed."""
