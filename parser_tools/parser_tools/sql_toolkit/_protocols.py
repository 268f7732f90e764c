"""SQL toolkit protocol definitions.

These define the interface contract that ANY implementation must satisfy.
Extraction code depends on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ._types import Dialect, ParseResult, SqlNode

# ---------------------------------------------------------------------------
# Individual Capability Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class SqlParser(Protocol):
    """Parse SQL strings into :class:`SqlNode` statement trees."""

    def parse_one(
        self,
        sql: str,
        dialect: Dialect = Dialect.DUCKDB,
    ) -> ParseResult:
        """Parse a single SQL statement.

        Args:
            sql: The SQL string to parse.
            dialect: Source dialect.

        Returns:
            ``ParseResult`` with a single statement.

        Raises:
            SqlParseError: If the SQL is invalid or is not a statement.
        """
        ...

    def parse_multi(
        self,
        sql: str,
        dialect: Dialect = Dialect.DUCKDB,
    ) -> ParseResult:
        """Parse potentially multi-statement SQL (separated by ``;``).

        Returns:
            ``ParseResult`` with zero or more statements, in source order.

        Raises:
            SqlParseError: If any statement is invalid.
        """
        ...


@runtime_checkable
class SqlRenderer(Protocol):
    """Render statement trees back to SQL strings."""

    def render(
        self,
        node: SqlNode,
        dialect: Dialect = Dialect.DUCKDB,
    ) -> str:
        """Render an AST node to a SQL string.

        Args:
            node: The AST node to render (must have ``raw`` set).
            dialect: Target dialect for rendering.

        Returns:
            The rendered SQL string.
        """
        ...


# ---------------------------------------------------------------------------
# Composite Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class SqlToolkit(Protocol):
    """Composite protocol: a complete SQL toolkit implementation.

    This is what extraction code receives from the factory.
    """

    @property
    def parser(self) -> SqlParser:
        ...

    @property
    def renderer(self) -> SqlRenderer:
        ...
