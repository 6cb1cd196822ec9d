"""Forward binding: populate a workbook template with query results."""

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from ..placeholders import DirectReference, IterativeReference, ReferenceScanner
from ..placeholders.syntax import FORMULA_CELL_TOKEN_PATTERN
from ..sheets.address import encode
from ..sheets.models import Cell, Sheet, Workbook

logger = logging.getLogger(__name__)

QueryResults = Mapping[str, Sequence[Mapping[str, Any]]]


def shift_formula_rows(formula: str, offset: int) -> str:
    """Add ``offset`` to the row number of every cell token in a formula.

    Column letters are left unchanged, so "C2*D2" shifted by 2 is "C4*D4".
    """
    if offset == 0:
        return formula
    return FORMULA_CELL_TOKEN_PATTERN.sub(
        lambda match: f"{match.group(1)}{int(match.group(2)) + offset}", formula
    )


class ForwardBinder:
    """
    Bind query results into a workbook template.

    Cells holding ``?query[index].column`` are replaced by a single value.
    Rows holding ``?query.column`` are expanded into one row per record,
    with formulas and styles of the template row carried to every new row.
    """

    def __init__(self, scanner: Optional[ReferenceScanner] = None):
        self.scanner = scanner or ReferenceScanner()

    def bind(self, template: Workbook, query_results: QueryResults) -> Workbook:
        """
        Populate a copy of the template.

        Args:
            template: Workbook template, left unmodified
            query_results: Map of query name to its ordered records

        Returns:
            New Workbook with references resolved
        """
        workbook = template.copy()
        total_inserted = 0

        for sheet in workbook:
            total_inserted += self.bind_sheet(sheet, query_results)

        logger.info(
            f"Bound {len(workbook)} sheets, inserted {total_inserted} rows"
        )
        return workbook

    def bind_sheet(self, sheet: Sheet, query_results: QueryResults) -> int:
        """Resolve every reference in a sheet in place; returns rows inserted."""
        if sheet.extent is None:
            logger.debug(f"Skipping sheet '{sheet.name}' without extent")
            return 0

        direct, iterative = self._scan(sheet)

        for reference in direct:
            self._resolve_direct(sheet, reference, query_results)

        # Earlier groups shift the rows of later ones
        rows_inserted = 0
        for reference in sorted(iterative, key=lambda ref: ref.template_row):
            rows_inserted += self._expand(sheet, reference, query_results, rows_inserted)

        sheet.recompute_extent()
        logger.debug(
            f"Sheet '{sheet.name}': {len(direct)} direct, {len(iterative)} iterative "
            f"references, {rows_inserted} rows inserted, extent {sheet.extent.ref}"
        )
        return rows_inserted

    def _scan(self, sheet: Sheet) -> tuple[list[DirectReference], list[IterativeReference]]:
        """Classify the query references of every text cell in the extent."""
        direct: list[DirectReference] = []
        iterative: dict[int, IterativeReference] = {}

        for row in sheet.extent.rows:
            for col in sheet.extent.columns:
                cell = sheet.get_cell(row, col)
                if cell is None or cell.formula is not None or not isinstance(cell.value, str):
                    continue

                match = self.scanner.scan_query_reference(cell.value)
                if match is None:
                    continue

                if match.is_iterative:
                    if row not in iterative:
                        iterative[row] = IterativeReference(
                            template_row=row, query_name=match.query_name
                        )
                    iterative[row].columns[col] = match.column_name
                else:
                    direct.append(
                        DirectReference(
                            address=encode(row, col),
                            row=row,
                            col=col,
                            query_name=match.query_name,
                            index=match.index,
                            column_name=match.column_name,
                        )
                    )

        return direct, list(iterative.values())

    def _resolve_direct(
        self, sheet: Sheet, reference: DirectReference, query_results: QueryResults
    ) -> None:
        records = query_results.get(reference.query_name)
        if not records or reference.index >= len(records):
            logger.warning(
                f"Unresolved reference in {sheet.name}!{reference.address}: "
                f"no record {reference.query_name}[{reference.index}]"
            )
            return

        record = records[reference.index]
        if reference.column_name not in record:
            logger.warning(
                f"Unresolved reference in {sheet.name}!{reference.address}: "
                f"column '{reference.column_name}' missing from {reference.query_name}"
            )
            return

        existing = sheet.get_cell(reference.row, reference.col)
        sheet.set_cell(
            reference.row,
            reference.col,
            Cell.from_scalar(
                record[reference.column_name],
                style=existing.style if existing is not None else None,
            ),
        )

    def _expand(
        self,
        sheet: Sheet,
        reference: IterativeReference,
        query_results: QueryResults,
        row_offset: int,
    ) -> int:
        """Expand one template row into a row per record; returns rows inserted."""
        records = query_results.get(reference.query_name)
        if not records:
            logger.warning(
                f"No records for '{reference.query_name}', leaving template row "
                f"{reference.template_row + 1} of '{sheet.name}' untouched"
            )
            return 0

        template_row = reference.template_row + row_offset
        template_cells = sheet.row_cells(template_row)
        rows_to_insert = len(records) - 1

        if rows_to_insert > 0:
            sheet.insert_rows(template_row, rows_to_insert)

        for i, record in enumerate(records):
            row = template_row + i

            # Formulas and literals of the template row (offset 0 keeps them as-is)
            if i > 0:
                for col, template_cell in template_cells.items():
                    if col in reference.columns:
                        continue
                    sheet.set_cell(row, col, self._copy_template_cell(template_cell, i))

            for col, column_name in reference.columns.items():
                template_cell = template_cells.get(col)
                style = copy.deepcopy(template_cell.style) if template_cell is not None else None
                value = record.get(column_name) if isinstance(record, Mapping) else None
                sheet.set_cell(row, col, Cell.from_scalar(value, style=style))

        logger.debug(
            f"Expanded '{reference.query_name}' at row {template_row + 1} of "
            f"'{sheet.name}' into {len(records)} rows"
        )
        return max(rows_to_insert, 0)

    @staticmethod
    def _copy_template_cell(cell: Cell, offset: int) -> Cell:
        style = copy.deepcopy(cell.style)
        if cell.formula is not None:
            return Cell.from_formula(shift_formula_rows(cell.formula, offset), style=style)
        return Cell(value=cell.value, type=cell.type, style=style)


def sql_to_workbook(template: Workbook, query_results: QueryResults) -> Workbook:
    """Populate a workbook template with query results."""
    return ForwardBinder().bind(template, query_results)
