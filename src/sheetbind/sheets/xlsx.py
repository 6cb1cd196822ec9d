"""Excel (.xlsx) codec backed by openpyxl."""

import logging
from copy import copy
from pathlib import Path
from typing import Any, Optional, Union

from openpyxl import Workbook as OpenpyxlWorkbook
from openpyxl import load_workbook
from openpyxl.descriptors.serialisable import Serialisable
from openpyxl.utils import get_column_letter

from .codec import SpreadsheetCodec
from .models import Cell, Extent, Sheet, Workbook

logger = logging.getLogger(__name__)

# Style attributes carried through the opaque style token
STYLE_ATTRIBUTES = ("font", "fill", "border", "alignment", "number_format", "protection")


def extract_style(cell) -> Optional[dict[str, Any]]:
    """Copy an openpyxl cell's style into a detached style token."""
    if not cell.has_style:
        return None
    return {attr: copy(getattr(cell, attr)) for attr in STYLE_ATTRIBUTES}


def apply_style(cell, style: Optional[Any]) -> None:
    """Apply a style token produced by extract_style to an openpyxl cell.

    Tokens from other codecs (plain JSON, for instance) are ignored.
    """
    if not isinstance(style, dict):
        return
    for attr in STYLE_ATTRIBUTES:
        value = style.get(attr)
        if attr == "number_format" and isinstance(value, str):
            cell.number_format = value
        elif isinstance(value, Serialisable):
            setattr(cell, attr, copy(value))


def _formula_text(value: Any) -> str:
    # ArrayFormula exposes its expression as .text
    text = getattr(value, "text", value)
    return str(text)[1:] if str(text).startswith("=") else str(text)


class XlsxCodec(SpreadsheetCodec):
    """Read and write .xlsx files through openpyxl."""

    def load(self, source: Union[str, Path]) -> Workbook:
        """
        Load an .xlsx file into a Workbook.

        Formulas are read from one pass and their cached results from a
        second, data-only pass.

        Args:
            source: Path to the .xlsx file

        Returns:
            Decoded Workbook
        """
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Workbook not found at {path}")

        formulas_book = load_workbook(path)
        values_book = load_workbook(path, data_only=True)

        workbook = Workbook()
        for ws in formulas_book.worksheets:
            cached = values_book[ws.title]
            sheet = Sheet(name=ws.title)
            # Read before iter_rows, which materializes blank cells from A1
            declared = Extent(
                min_row=ws.min_row - 1,
                min_col=ws.min_column - 1,
                max_row=ws.max_row - 1,
                max_col=ws.max_column - 1,
            )

            for row in ws.iter_rows(
                min_row=ws.min_row,
                min_col=ws.min_column,
                max_row=ws.max_row,
                max_col=ws.max_column,
            ):
                for source_cell in row:
                    if source_cell.value is None and not source_cell.has_style:
                        continue
                    style = extract_style(source_cell)
                    if source_cell.data_type == "f":
                        cached_value = cached.cell(
                            row=source_cell.row, column=source_cell.column
                        ).value
                        cell = Cell.from_formula(
                            _formula_text(source_cell.value), style=style, value=cached_value
                        )
                    else:
                        cell = Cell.from_scalar(source_cell.value, style=style)
                    sheet.set_cell(source_cell.row - 1, source_cell.column - 1, cell)

            if len(sheet):
                # The declared dimension may include trailing blank rows
                sheet.extent = declared
                sheet.recompute_extent()

            sheet.column_widths = self._column_widths(ws)
            workbook.add_sheet(sheet)
            logger.debug(
                f"Loaded sheet '{sheet.name}' with {len(sheet)} cells "
                f"({sheet.extent.ref if sheet.extent else 'empty'})"
            )

        logger.info(f"Loaded {len(workbook)} sheets from {path}")
        return workbook

    def save(self, workbook: Workbook, target: Union[str, Path]) -> None:
        """Write a Workbook to an .xlsx file, preserving formulas, styles and widths."""
        book = OpenpyxlWorkbook()
        if len(workbook):
            book.remove(book.active)

        for sheet in workbook:
            ws = book.create_sheet(title=sheet.name)
            for row, col, cell in sheet.iter_cells():
                target_cell = ws.cell(row=row + 1, column=col + 1)
                if cell.formula is not None:
                    target_cell.value = f"={cell.formula}"
                elif cell.value is not None:
                    target_cell.value = cell.value
                apply_style(target_cell, cell.style)

            for idx, width in enumerate(sheet.column_widths, start=1):
                if width is not None:
                    ws.column_dimensions[get_column_letter(idx)].width = width

        target_path = Path(target)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        book.save(target_path)
        logger.info(f"Saved {len(workbook)} sheets to {target_path}")

    @staticmethod
    def _column_widths(ws) -> list[Optional[float]]:
        widths: list[Optional[float]] = []
        for idx in range(1, ws.max_column + 1):
            letter = get_column_letter(idx)
            dimension = ws.column_dimensions.get(letter)
            widths.append(dimension.width if dimension is not None and dimension.customWidth else None)
        # Trailing unset widths carry no information
        while widths and widths[-1] is None:
            widths.pop()
        return widths
