"""Records produced by the extraction engine.

Every record is an immutable value type.  Optional fields are ``None`` when
the value cannot be derived, never an empty string, so that "unknown" is
never confused with an empty identifier.
"""

from __future__ import annotations

import enum
from dataclasses import astuple, dataclass
from typing import Any, Union

# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------


class ClauseContext(str, enum.Enum):
    """The clause an extracted predicate or function call was found in."""

    SELECT_LIST = "select_list"
    WHERE = "where"
    HAVING = "having"
    JOIN_ON = "join_on"
    GROUP_BY = "group_by"
    ORDER_BY = "order_by"


class TableContext(str, enum.Enum):
    """How a statement uses a table reference."""

    FROM = "from"
    JOIN_LEFT = "join_left"
    JOIN_RIGHT = "join_right"
    FROM_CTE = "from_cte"
    CTE = "cte"
    SUBQUERY = "subquery"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    CREATE = "create"
    MERGE = "merge"

    @property
    def is_write(self) -> bool:
        return self in _WRITE_CONTEXTS


_WRITE_CONTEXTS = frozenset(
    {
        TableContext.INSERT,
        TableContext.UPDATE,
        TableContext.DELETE,
        TableContext.CREATE,
        TableContext.MERGE,
    }
)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class _Row:
    """Mixin giving records a flat, plain-valued row shape."""

    __slots__ = ()

    def as_row(self) -> tuple[Any, ...]:
        """Return field values in declaration order, enums as their values."""
        return tuple(v.value if isinstance(v, enum.Enum) else v for v in astuple(self))  # type: ignore[call-overload]


@dataclass(frozen=True, slots=True)
class StatementResult(_Row):
    """One top-level statement, re-serialized to canonical SQL."""

    statement: str


@dataclass(frozen=True, slots=True)
class TableResult(_Row):
    """A base table, CTE or subquery alias referenced by a statement."""

    schema: str | None
    table: str
    context: TableContext
    write_target: bool = False
    catalog: str | None = None

    @property
    def qualified_name(self) -> str:
        """Return ``catalog.schema.table``, omitting absent parts."""
        return ".".join(p for p in (self.catalog, self.schema, self.table) if p)


@dataclass(frozen=True, slots=True)
class WhereConditionResult(_Row):
    """One conjunct of a filter expression, as SQL text."""

    condition: str
    table_name: str | None
    context: ClauseContext


@dataclass(frozen=True, slots=True)
class DetailedWhereConditionResult(_Row):
    """A ``column <op> value`` conjunct, decomposed."""

    column_name: str
    operator_type: str
    value: str
    table_name: str | None
    context: ClauseContext


@dataclass(frozen=True, slots=True)
class FunctionResult(_Row):
    """One function call site."""

    function_name: str
    schema: str | None
    context: ClauseContext


ExtractionRecord = Union[
    StatementResult,
    TableResult,
    WhereConditionResult,
    DetailedWhereConditionResult,
    FunctionResult,
]
