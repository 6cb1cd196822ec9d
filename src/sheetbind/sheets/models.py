"""Data models for decoded workbooks."""

import copy
from enum import Enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel, Field, model_validator

from .address import decode, encode, decode_range, encode_range


class CellType(str, Enum):
    """Output type tag of a cell."""

    NUMBER = "number"
    TEXT = "text"
    EMPTY = "empty"


def tag_for(value: Any) -> CellType:
    """Return the cell type tag for a native scalar."""
    if value is None:
        return CellType.EMPTY
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return CellType.NUMBER
    return CellType.TEXT


def to_text(value: Any) -> str:
    """Plain string coercion of a cell value, without quoting or escaping."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Cell(BaseModel):
    """A single cell: tagged value, optional formula and opaque style token."""

    value: Any = None
    type: CellType = CellType.EMPTY
    formula: Optional[str] = None  # Stored without the leading "="
    style: Optional[Any] = None  # Copied as-is, never interpreted

    @model_validator(mode="after")
    def _tag_type(self) -> "Cell":
        if self.formula is not None:
            self.type = CellType.NUMBER
        elif "type" not in self.model_fields_set:
            self.type = tag_for(self.value)
        return self

    @classmethod
    def from_scalar(cls, value: Any, style: Optional[Any] = None) -> "Cell":
        """Create a cell tagged by the native type of the value."""
        return cls(value=value, type=tag_for(value), style=style)

    @classmethod
    def from_formula(
        cls, formula: str, style: Optional[Any] = None, value: Any = None
    ) -> "Cell":
        """Create a formula cell; value is the cached result, if known."""
        return cls(value=value, type=CellType.NUMBER, formula=formula, style=style)

    @property
    def is_empty(self) -> bool:
        return self.value is None and self.formula is None

    @property
    def text(self) -> str:
        return to_text(self.value)


class Extent(BaseModel):
    """Declared bounding rectangle of a sheet, zero-based and inclusive."""

    min_row: int = Field(default=0, ge=0)
    min_col: int = Field(default=0, ge=0)
    max_row: int = Field(default=0, ge=0)
    max_col: int = Field(default=0, ge=0)

    @classmethod
    def from_ref(cls, ref: str) -> "Extent":
        """Build an extent from "A1:E7" notation."""
        (start_row, start_col), (end_row, end_col) = decode_range(ref)
        return cls(
            min_row=min(start_row, end_row),
            min_col=min(start_col, end_col),
            max_row=max(start_row, end_row),
            max_col=max(start_col, end_col),
        )

    @property
    def ref(self) -> str:
        return encode_range((self.min_row, self.min_col), (self.max_row, self.max_col))

    @property
    def rows(self) -> range:
        return range(self.min_row, self.max_row + 1)

    @property
    def columns(self) -> range:
        return range(self.min_col, self.max_col + 1)

    def covering(self, row: int, col: int) -> "Extent":
        """Return the smallest extent enclosing this one and (row, col)."""
        return Extent(
            min_row=min(self.min_row, row),
            min_col=min(self.min_col, col),
            max_row=max(self.max_row, row),
            max_col=max(self.max_col, col),
        )


class SheetData(BaseModel):
    """JSON form of a sheet: address-keyed cells plus extent and widths."""

    ref: Optional[str] = None
    cells: dict[str, Cell] = Field(default_factory=dict)
    cols: list[Optional[float]] = Field(default_factory=list)


class WorkbookData(BaseModel):
    """JSON form of a workbook."""

    sheets: dict[str, SheetData] = Field(default_factory=dict)


class Sheet:
    """Sparse grid of cells keyed by zero-based (row, col)."""

    def __init__(
        self,
        name: str,
        cells: Optional[dict[tuple[int, int], Cell]] = None,
        extent: Optional[Extent] = None,
        column_widths: Optional[list[Optional[float]]] = None,
    ):
        self.name = name
        self.extent = extent
        self.column_widths = list(column_widths or [])
        self._cells: dict[tuple[int, int], Cell] = {}
        for (row, col), cell in (cells or {}).items():
            self.set_cell(row, col, cell)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        ref = self.extent.ref if self.extent else None
        return f"Sheet(name={self.name!r}, ref={ref!r}, cells={len(self._cells)})"

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        return self._cells.get((row, col))

    def set_cell(self, row: int, col: int, cell: Cell) -> None:
        """Store a cell, growing the extent to cover it."""
        self._cells[(row, col)] = cell
        if self.extent is None:
            self.extent = Extent(min_row=row, min_col=col, max_row=row, max_col=col)
        else:
            self.extent = self.extent.covering(row, col)

    def delete_cell(self, row: int, col: int) -> None:
        self._cells.pop((row, col), None)

    def __getitem__(self, address: str) -> Optional[Cell]:
        return self.get_cell(*decode(address))

    def __setitem__(self, address: str, cell: Cell) -> None:
        self.set_cell(*decode(address), cell)

    def iter_cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Yield (row, col, cell) in row-major order."""
        for (row, col) in sorted(self._cells):
            yield row, col, self._cells[(row, col)]

    def row_cells(self, row: int) -> dict[int, Cell]:
        """Return the populated cells of a row keyed by column index."""
        return {col: cell for (r, col), cell in sorted(self._cells.items()) if r == row}

    def insert_rows(self, after_row: int, count: int) -> None:
        """
        Splice blank rows immediately below a row.

        Every cell below ``after_row`` moves down by ``count`` rows and the
        extent's row bound grows by ``count``.
        """
        if count <= 0:
            return
        shifted: dict[tuple[int, int], Cell] = {}
        for (row, col), cell in self._cells.items():
            if row > after_row:
                shifted[(row + count, col)] = cell
            else:
                shifted[(row, col)] = cell
        self._cells = shifted
        if self.extent is not None:
            self.extent = self.extent.model_copy(
                update={"max_row": self.extent.max_row + count}
            )

    def recompute_extent(self) -> Optional[Extent]:
        """Grow the declared extent so it covers every populated cell."""
        for row, col in self._cells:
            if self.extent is None:
                self.extent = Extent(min_row=row, min_col=col, max_row=row, max_col=col)
            else:
                self.extent = self.extent.covering(row, col)
        return self.extent

    def copy(self) -> "Sheet":
        return copy.deepcopy(self)

    def to_data(self) -> SheetData:
        return SheetData(
            ref=self.extent.ref if self.extent else None,
            cells={encode(row, col): cell for row, col, cell in self.iter_cells()},
            cols=list(self.column_widths),
        )

    @classmethod
    def from_data(cls, name: str, data: SheetData) -> "Sheet":
        sheet = cls(
            name=name,
            extent=Extent.from_ref(data.ref) if data.ref else None,
            column_widths=data.cols,
        )
        for address, cell in data.cells.items():
            sheet[address] = cell
        return sheet


class Workbook:
    """Ordered mapping of sheet name to Sheet."""

    def __init__(self, sheets: Optional[list[Sheet]] = None):
        self._sheets: dict[str, Sheet] = {}
        for sheet in sheets or []:
            self.add_sheet(sheet)

    def add_sheet(self, sheet: Sheet) -> Sheet:
        if sheet.name in self._sheets:
            raise ValueError(f"Duplicate sheet name: {sheet.name}")
        self._sheets[sheet.name] = sheet
        return sheet

    @property
    def sheet_names(self) -> list[str]:
        return list(self._sheets)

    def get(self, name: str) -> Optional[Sheet]:
        return self._sheets.get(name)

    def __getitem__(self, name: str) -> Sheet:
        return self._sheets[name]

    def __contains__(self, name: object) -> bool:
        return name in self._sheets

    def __iter__(self) -> Iterator[Sheet]:
        return iter(self._sheets.values())

    def __len__(self) -> int:
        return len(self._sheets)

    def __repr__(self) -> str:
        return f"Workbook(sheets={self.sheet_names!r})"

    def copy(self) -> "Workbook":
        return copy.deepcopy(self)

    def to_data(self) -> WorkbookData:
        return WorkbookData(sheets={sheet.name: sheet.to_data() for sheet in self})

    @classmethod
    def from_data(cls, data: WorkbookData) -> "Workbook":
        return cls([Sheet.from_data(name, sheet) for name, sheet in data.sheets.items()])
