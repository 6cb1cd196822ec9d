"""Data models for query and cell references."""

from typing import Optional

from pydantic import BaseModel, Field


class QueryReference(BaseModel):
    """A ?query[index].column match found inside cell text."""

    query_name: str
    column_name: str
    index: Optional[int] = None  # None marks an iterative reference
    syntax: str  # Matched text (e.g., "?summary[0].total_value")
    start_pos: int = 0
    end_pos: int = 0

    @property
    def is_iterative(self) -> bool:
        return self.index is None


class DirectReference(BaseModel):
    """Cell bound to one value of one record."""

    address: str  # Target cell (e.g., "B6")
    row: int
    col: int
    query_name: str
    index: int
    column_name: str


class IterativeReference(BaseModel):
    """Template row expanded into one row per record."""

    template_row: int  # Row at scan time, zero-based
    query_name: str
    columns: dict[int, str] = Field(default_factory=dict)  # column index -> column name


class CellRangeReference(BaseModel):
    """A <Sheet>!A1, <Sheet>!A1:A10 or <Sheet>!A1: match inside a text template."""

    sheet_name: str
    start_address: str
    end_address: Optional[str] = None
    is_open_range: bool = False
    syntax: str  # Matched text
    start_pos: int = 0
    end_pos: int = 0

    @property
    def is_range(self) -> bool:
        return self.is_open_range or self.end_address is not None


class ValidationResult(BaseModel):
    """Result of validating reference syntax in a template."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
