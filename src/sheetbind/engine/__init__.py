"""Reference resolution and row expansion engine."""

from .forward import ForwardBinder, QueryResults, shift_formula_rows, sql_to_workbook
from .ranges import RangeResolver, ResolvedRange
from .reverse import ReverseBinder, workbook_to_sql

__all__ = [
    "ForwardBinder",
    "QueryResults",
    "shift_formula_rows",
    "sql_to_workbook",
    "RangeResolver",
    "ResolvedRange",
    "ReverseBinder",
    "workbook_to_sql",
]
