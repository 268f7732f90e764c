"""SQLGlot-backed implementation of the SQL toolkit protocols.

This is the ONLY file in the package that imports ``sqlglot`` directly.
All extraction code goes through the protocol interfaces defined in
:mod:`parser_tools.sql_toolkit._protocols` and inspects :class:`SqlNode`
trees, never sqlglot expressions.

Supports SQLGlot v25 and later.
"""

from __future__ import annotations

import logging
from dataclasses import replace

import sqlglot
from sqlglot import exp
from sqlglot.errors import ErrorLevel, SqlglotError

from .._types import (
    Dialect,
    ParseResult,
    SqlNode,
    SqlNodeKind,
    SqlParseError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal: SQLGlot expression → SqlNodeKind mapping
# ---------------------------------------------------------------------------

# Maps sqlglot expression class names to our SqlNodeKind enum.
# This is the single point where sqlglot types are translated into our
# implementation-agnostic types.  Kept as a dict for O(1) lookup.
_EXP_KIND_MAP: dict[str, SqlNodeKind] = {
    "Select": SqlNodeKind.SELECT,
    "Union": SqlNodeKind.UNION,
    "Intersect": SqlNodeKind.INTERSECT,
    "Except": SqlNodeKind.EXCEPT,
    "Insert": SqlNodeKind.INSERT,
    "Update": SqlNodeKind.UPDATE,
    "Delete": SqlNodeKind.DELETE,
    "Create": SqlNodeKind.CREATE,
    "Drop": SqlNodeKind.DROP,
    "Alter": SqlNodeKind.ALTER,
    "AlterTable": SqlNodeKind.ALTER,
    "Merge": SqlNodeKind.MERGE,
    "Command": SqlNodeKind.COMMAND,
    "With": SqlNodeKind.WITH,
    "CTE": SqlNodeKind.CTE,
    "From": SqlNodeKind.FROM,
    "Join": SqlNodeKind.JOIN,
    "Where": SqlNodeKind.WHERE,
    "Group": SqlNodeKind.GROUP,
    "Having": SqlNodeKind.HAVING,
    "Order": SqlNodeKind.ORDER,
    "Table": SqlNodeKind.TABLE,
    "Subquery": SqlNodeKind.SUBQUERY,
    "Schema": SqlNodeKind.SCHEMA,
    "Column": SqlNodeKind.COLUMN,
    "Star": SqlNodeKind.STAR,
    "Alias": SqlNodeKind.ALIAS,
    "Literal": SqlNodeKind.LITERAL,
    "Null": SqlNodeKind.LITERAL,
    "Boolean": SqlNodeKind.LITERAL,
    "Placeholder": SqlNodeKind.PARAMETER,
    "Parameter": SqlNodeKind.PARAMETER,
    "Cast": SqlNodeKind.CAST,
    "TryCast": SqlNodeKind.CAST,
    "Case": SqlNodeKind.CASE,
    "Window": SqlNodeKind.WINDOW,
    "And": SqlNodeKind.AND,
    "Or": SqlNodeKind.OR,
    "Not": SqlNodeKind.NOT,
    "Paren": SqlNodeKind.PAREN,
    "EQ": SqlNodeKind.COMPARISON,
    "NEQ": SqlNodeKind.COMPARISON,
    "GT": SqlNodeKind.COMPARISON,
    "GTE": SqlNodeKind.COMPARISON,
    "LT": SqlNodeKind.COMPARISON,
    "LTE": SqlNodeKind.COMPARISON,
    "In": SqlNodeKind.IN,
    "Between": SqlNodeKind.BETWEEN,
    "Like": SqlNodeKind.LIKE,
    "ILike": SqlNodeKind.LIKE,
    "Is": SqlNodeKind.IS,
    "Exists": SqlNodeKind.EXISTS,
}

_COMPARISON_OPERATORS: dict[str, str] = {
    "EQ": "=",
    "NEQ": "<>",
    "GT": ">",
    "GTE": ">=",
    "LT": "<",
    "LTE": "<=",
}

# Root expression types accepted as complete statements.  sqlglot happily
# parses a bare expression ("SELEC * FRM" is a multiplication of two
# columns); those are rejected.  Looked up by name because the class set
# varies between sqlglot releases.
_STATEMENT_TYPE_NAMES: tuple[str, ...] = (
    "Query",
    "Select",
    "Union",
    "Intersect",
    "Except",
    "Subquery",
    "Values",
    "DML",
    "DDL",
    "Insert",
    "Update",
    "Delete",
    "Merge",
    "Create",
    "Drop",
    "Alter",
    "AlterTable",
    "TruncateTable",
    "Command",
    "Transaction",
    "Commit",
    "Rollback",
    "Set",
    "Use",
    "Describe",
    "Pragma",
    "Show",
    "Copy",
    "Analyze",
    "Grant",
    "Revoke",
    "Cache",
    "Uncache",
    "Refresh",
    "LoadData",
    "Kill",
    "Summarize",
)
_STATEMENT_TYPES: tuple[type, ...] = tuple(
    getattr(exp, name) for name in _STATEMENT_TYPE_NAMES if hasattr(exp, name)
)

# Beyond this depth nodes are collapsed to UNKNOWN leaves.
_MAX_DEPTH = 200


# ---------------------------------------------------------------------------
# Internal: AST conversion helpers
# ---------------------------------------------------------------------------


def _dialect_value(dialect: Dialect) -> str:
    """Return the sqlglot dialect string for a :class:`Dialect` enum member."""
    return dialect.value


def _classify_node(node: exp.Expression) -> SqlNodeKind:
    """Map a sqlglot expression to a :class:`SqlNodeKind`.

    Table functions (``FROM read_csv(...)``), CASE branches and negated
    literals are special-cased; any remaining ``Func`` subclass is a function call.
    """
    cls_name = type(node).__name__

    if isinstance(node, exp.Table) and isinstance(node.this, exp.Func):
        return SqlNodeKind.TABLE_FUNCTION

    # A CASE branch (WHEN ... THEN ...) is an If node, not an IF() call.
    if isinstance(node, exp.If) and isinstance(node.parent, exp.Case):
        return SqlNodeKind.UNKNOWN

    # Direct lookup first (fast path).
    kind = _EXP_KIND_MAP.get(cls_name)
    if kind is not None:
        return kind

    if isinstance(node, exp.Neg) and isinstance(node.this, exp.Literal):
        return SqlNodeKind.LITERAL

    if isinstance(node, exp.Func):
        return SqlNodeKind.FUNCTION

    return SqlNodeKind.UNKNOWN


def _function_name(node: exp.Func) -> str:
    """Return the lower-cased call name of a function expression."""
    if isinstance(node, exp.Anonymous):
        return (node.name or "").lower()
    return node.sql_name().lower()


def _node_name(node: exp.Expression, kind: SqlNodeKind) -> str:
    """Extract a meaningful name from a sqlglot expression node."""
    if kind == SqlNodeKind.FUNCTION:
        return _function_name(node)  # type: ignore[arg-type]
    if isinstance(node, (exp.Table, exp.Column)):
        return node.name or ""
    # CTEs are named by their alias.
    if isinstance(node, exp.CTE):
        return node.alias or ""
    if isinstance(node, exp.Star):
        return "*"
    if isinstance(node, exp.Alias):
        return node.alias or ""
    if kind == SqlNodeKind.LITERAL:
        return ""
    # Generic fallback.
    if hasattr(node, "name"):
        return str(node.name) if node.name else ""
    return ""


def _node_alias(node: exp.Expression) -> str:
    """Extract the alias from a sqlglot expression, if present."""
    if isinstance(node, exp.Alias):
        return node.alias or ""
    alias_node = node.args.get("alias")
    if alias_node is not None and hasattr(alias_node, "name"):
        return alias_node.name or ""
    return ""


def _node_qualifier(node: exp.Expression) -> tuple[str, ...]:
    """Return the dotted prefix of a table or column name, outermost first."""
    if isinstance(node, exp.Table):
        keys = ("catalog", "db")
    elif isinstance(node, exp.Column):
        keys = ("catalog", "db", "table")
    else:
        return ()
    return tuple(part for part in (node.text(key) for key in keys) if part)


def _connector_operands(node: exp.Connector) -> list[exp.Expression]:
    """Return the operands of a left-deep AND/OR chain, left to right."""
    operands: list[exp.Expression] = []
    stack: list[exp.Expression] = [node]
    while stack:
        current = stack.pop()
        if type(current) is type(node):
            stack.append(current.expression)
            stack.append(current.this)
        else:
            operands.append(current)
    return operands


def _render(node: exp.Expression, dialect: Dialect) -> str:
    try:
        return node.sql(dialect=_dialect_value(dialect))
    except Exception:
        return ""


def _to_sql_node(
    node: exp.Expression,
    dialect: Dialect,
    *,
    depth: int = 0,
    role: str = "",
) -> SqlNode:
    """Recursively convert a sqlglot AST into a :class:`SqlNode` tree.

    Limits recursion depth to ``_MAX_DEPTH`` to avoid stack overflow on
    deeply nested SQL.
    """
    if depth > _MAX_DEPTH:
        return SqlNode(kind=SqlNodeKind.UNKNOWN, role=role, sql_text=_render(node, dialect), raw=node)

    # ``schema.func(x)`` parses as Dot(this=schema, expression=func); surface
    # it as the function call itself, qualified by the schema.
    if isinstance(node, exp.Dot) and isinstance(node.expression, exp.Func):
        call = _to_sql_node(node.expression, dialect, depth=depth, role=role)
        return replace(
            call,
            qualifier=(_render(node.this, dialect),),
            sql_text=_render(node, dialect),
            raw=node,
        )

    kind = _classify_node(node)

    # Convert children.  sqlglot's .walk() is breadth-first and includes
    # self; we want direct children only.  Use .iter_expressions() for that.
    # AND/OR chains are nested left-deep by the parser; they become one
    # n-ary node so long filters do not run into the depth limit.
    if isinstance(node, (exp.And, exp.Or)):
        operands = _connector_operands(node)
    else:
        operands = list(node.iter_expressions())
    children = tuple(
        _to_sql_node(child, dialect, depth=depth + 1, role=child.arg_key or "")
        for child in operands
    )

    return SqlNode(
        kind=kind,
        name=_node_name(node, kind),
        alias=_node_alias(node),
        qualifier=_node_qualifier(node),
        operator=_COMPARISON_OPERATORS.get(type(node).__name__, ""),
        role=role,
        children=children,
        sql_text=_render(node, dialect),
        raw=node,
    )


def _check_statement(ast: exp.Expression) -> None:
    """Raise :class:`SqlParseError` unless *ast* is a complete statement."""
    if not isinstance(ast, _STATEMENT_TYPES):
        raise SqlParseError(f"Not a SQL statement: {type(ast).__name__} expression")


# ---------------------------------------------------------------------------
# SqlGlotParser
# ---------------------------------------------------------------------------


class SqlGlotParser:
    """SQLGlot-backed :class:`SqlParser` implementation."""

    def parse_one(
        self,
        sql: str,
        dialect: Dialect = Dialect.DUCKDB,
    ) -> ParseResult:
        """Parse a single SQL statement."""
        try:
            ast = sqlglot.parse_one(
                sql,
                read=_dialect_value(dialect),
                error_level=ErrorLevel.RAISE,
            )
            _check_statement(ast)
        except SqlglotError as exc:
            raise SqlParseError(f"Failed to parse SQL: {exc}") from exc

        return ParseResult(
            statements=(_to_sql_node(ast, dialect),),
            dialect=dialect,
            warnings=[],
        )

    def parse_multi(
        self,
        sql: str,
        dialect: Dialect = Dialect.DUCKDB,
    ) -> ParseResult:
        """Parse potentially multi-statement SQL."""
        try:
            asts = sqlglot.parse(
                sql,
                read=_dialect_value(dialect),
                error_level=ErrorLevel.RAISE,
            )
        except SqlglotError as exc:
            raise SqlParseError(f"Failed to parse multi-statement SQL: {exc}") from exc

        nodes: list[SqlNode] = []
        warnings: list[str] = []
        for ast in asts:
            if ast is None:
                warnings.append("Empty statement encountered")
                continue
            _check_statement(ast)
            nodes.append(_to_sql_node(ast, dialect))

        return ParseResult(
            statements=tuple(nodes),
            dialect=dialect,
            warnings=warnings,
        )


# ---------------------------------------------------------------------------
# SqlGlotRenderer
# ---------------------------------------------------------------------------


class SqlGlotRenderer:
    """SQLGlot-backed :class:`SqlRenderer` implementation."""

    def render(
        self,
        node: SqlNode,
        dialect: Dialect = Dialect.DUCKDB,
    ) -> str:
        """Render an AST node to a SQL string."""
        raw = node.raw
        if raw is None:
            raise ValueError("SqlNode has no raw expression attached")

        if not isinstance(raw, exp.Expression):
            raise TypeError(f"Expected sqlglot Expression, got {type(raw).__name__}")

        return raw.sql(dialect=_dialect_value(dialect))


# ---------------------------------------------------------------------------
# Composite Toolkit
# ---------------------------------------------------------------------------


class SqlGlotToolkit:
    """Composite :class:`SqlToolkit` backed by SQLGlot.

    This is the default implementation returned by :func:`get_sql_toolkit`.
    Holds no per-request state, so one instance serves concurrent callers.
    """

    def __init__(self) -> None:
        self._parser = SqlGlotParser()
        self._renderer = SqlGlotRenderer()

    @property
    def parser(self) -> SqlGlotParser:
        return self._parser

    @property
    def renderer(self) -> SqlGlotRenderer:
        return self._renderer
