"""Row extent resolution for ranged cell references."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..placeholders.models import CellRangeReference
from ..sheets.address import decode
from ..sheets.models import Sheet, Workbook

logger = logging.getLogger(__name__)


@dataclass
class ResolvedRange:
    """Row span of a closed or open range in a single column."""

    start_row: int
    col: int
    end_row: int
    is_open_range: bool
    sheet_found: bool

    @property
    def row_count(self) -> int:
        """Rows this range contributes to the number of generated statements."""
        return max(self.end_row - self.start_row + 1, 0)

    def covers(self, row: int) -> bool:
        """Whether the range supplies a value at ``row``; open ranges always do."""
        if self.is_open_range:
            return True
        return row <= self.end_row


class RangeResolver:
    """Determine the effective row extent of range references."""

    def find_last_row(self, sheet: Optional[Sheet], start_row: int, col: int) -> int:
        """
        Find the last populated row of a column.

        Scans every row of the sheet's declared extent at ``col``.

        Args:
            sheet: The sheet to scan
            start_row: Zero-based row where the range starts
            col: Zero-based column index

        Returns:
            Greatest row index holding a non-empty cell, or ``start_row``
            when nothing at or below it is populated
        """
        if sheet is None or sheet.extent is None:
            return start_row

        last_row = None
        for row in sheet.extent.rows:
            cell = sheet.get_cell(row, col)
            if cell is not None and not cell.is_empty:
                last_row = row

        if last_row is None or last_row < start_row:
            return start_row
        return last_row

    def resolve(self, workbook: Workbook, reference: CellRangeReference) -> ResolvedRange:
        """Resolve the row span of a closed or open range reference."""
        start_row, col = decode(reference.start_address)
        sheet = workbook.get(reference.sheet_name)

        if reference.is_open_range:
            end_row = self.find_last_row(sheet, start_row, col)
        else:
            end_row, _ = decode(reference.end_address)

        if sheet is None:
            logger.warning(f"Sheet '{reference.sheet_name}' not found for {reference.syntax}")

        resolved = ResolvedRange(
            start_row=start_row,
            col=col,
            end_row=end_row,
            is_open_range=reference.is_open_range,
            sheet_found=sheet is not None,
        )
        logger.debug(f"Resolved {reference.syntax} to {resolved.row_count} rows")
        return resolved
