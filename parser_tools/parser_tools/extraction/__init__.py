"""Structural extraction from SQL text: statements, tables, predicates, functions."""

from parser_tools.extraction._types import (
    ClauseContext,
    DetailedWhereConditionResult,
    ExtractionRecord,
    FunctionResult,
    StatementResult,
    TableContext,
    TableResult,
    WhereConditionResult,
)
from parser_tools.extraction.facade import (
    Extraction,
    ExtractionCursor,
    extract,
    extract_count,
    extract_list,
    is_parsable,
    num_statements,
    parse_function_names,
    parse_functions,
    parse_statements,
    parse_table_names,
    parse_tables,
    parse_where,
    parse_where_detailed,
)
from parser_tools.extraction.functions import extract_functions
from parser_tools.extraction.predicates import (
    extract_where_conditions,
    extract_where_conditions_detailed,
)
from parser_tools.extraction.splitter import ParseOutcome, parse_sql, split_statements
from parser_tools.extraction.tables import extract_tables

__all__ = [
    "ClauseContext",
    "DetailedWhereConditionResult",
    "Extraction",
    "ExtractionCursor",
    "ExtractionRecord",
    "FunctionResult",
    "ParseOutcome",
    "StatementResult",
    "TableContext",
    "TableResult",
    "WhereConditionResult",
    "extract",
    "extract_count",
    "extract_functions",
    "extract_list",
    "extract_tables",
    "extract_where_conditions",
    "extract_where_conditions_detailed",
    "is_parsable",
    "num_statements",
    "parse_function_names",
    "parse_functions",
    "parse_sql",
    "parse_statements",
    "parse_table_names",
    "parse_tables",
    "parse_where",
    "parse_where_detailed",
    "split_statements",
]
