"""SQL Toolkit: implementation-agnostic SQL parsing into statement trees.

Usage::

    from parser_tools.sql_toolkit import get_sql_toolkit, Dialect

    tk = get_sql_toolkit()
    result = tk.parser.parse_multi("SELECT 1; SELECT 2", Dialect.DUCKDB)
    text = tk.renderer.render(result.statements[0], Dialect.DUCKDB)

The default implementation delegates to SQLGlot.  A different backend can be
swapped in via ``register_implementation()`` without touching extraction code.
"""

from ._factory import get_sql_toolkit, register_implementation, reset_toolkit, resolve_toolkit
from ._protocols import SqlParser, SqlRenderer, SqlToolkit
from ._types import (
    QUERY_KINDS,
    Dialect,
    ParseResult,
    SqlNode,
    SqlNodeKind,
    SqlParseError,
    SqlToolkitError,
)

__all__ = [
    # Factory
    "get_sql_toolkit",
    "register_implementation",
    "reset_toolkit",
    "resolve_toolkit",
    # Protocols
    "SqlToolkit",
    "SqlParser",
    "SqlRenderer",
    # Types
    "QUERY_KINDS",
    "Dialect",
    "SqlNodeKind",
    "SqlNode",
    "ParseResult",
    # Exceptions
    "SqlToolkitError",
    "SqlParseError",
]
