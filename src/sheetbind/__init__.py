"""sheetbind - bind query results to spreadsheet templates and back."""

from .engine import sql_to_workbook, workbook_to_sql
from .sheets import Cell, CellType, Extent, InvalidAddressError, Sheet, Workbook

__version__ = "0.1.0"

__all__ = [
    "sql_to_workbook",
    "workbook_to_sql",
    "Cell",
    "CellType",
    "Extent",
    "InvalidAddressError",
    "Sheet",
    "Workbook",
]
