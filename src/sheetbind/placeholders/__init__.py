"""Reference grammars for binding query results and cells.

Two grammars are supported: query references (``?query[0].column``) inside
spreadsheet cells and cell references (``<Sheet>!A1:``) inside text templates.
"""

from .models import (
    QueryReference,
    DirectReference,
    IterativeReference,
    CellRangeReference,
    ValidationResult,
)
from .parser import ReferenceScanner

__all__ = [
    "QueryReference",
    "DirectReference",
    "IterativeReference",
    "CellRangeReference",
    "ValidationResult",
    "ReferenceScanner",
]
