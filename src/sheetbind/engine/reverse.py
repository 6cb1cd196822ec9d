"""Reverse binding: generate text statements from a populated workbook."""

import logging
from typing import Optional

from ..placeholders import CellRangeReference, ReferenceScanner
from ..sheets.address import decode
from ..sheets.models import Workbook
from .ranges import RangeResolver, ResolvedRange

logger = logging.getLogger(__name__)


class ReverseBinder:
    """
    Fill text templates with values read from a workbook.

    ``<Sheet>!A1`` is replaced by a single value. Templates holding a closed
    (``<Sheet>!A1:A10``) or open (``<Sheet>!A1:``) range produce one statement
    per row of the longest range.
    """

    def __init__(
        self,
        scanner: Optional[ReferenceScanner] = None,
        range_resolver: Optional[RangeResolver] = None,
    ):
        self.scanner = scanner or ReferenceScanner()
        self.range_resolver = range_resolver or RangeResolver()

    def bind(self, workbook: Workbook, templates: list[str]) -> list[str]:
        """
        Generate statements for every template.

        Args:
            workbook: Populated workbook
            templates: Text templates with cell references

        Returns:
            Flat list of generated statements, in template order
        """
        statements = []
        for template in templates:
            statements.extend(self.render(workbook, template))

        logger.info(f"Generated {len(statements)} statements from {len(templates)} templates")
        return statements

    def render(self, workbook: Workbook, template: str) -> list[str]:
        """Generate the statements of a single template."""
        references = self.scanner.extract_cell_references(template)
        if not references:
            return [template]

        # Single-cell references resolve to the same text on every statement
        fixed: dict[int, str] = {}
        ranges: dict[int, ResolvedRange] = {}
        for i, reference in enumerate(references):
            if reference.is_range:
                ranges[i] = self.range_resolver.resolve(workbook, reference)
            else:
                row, col = decode(reference.start_address)
                fixed[i] = self._cell_text(workbook, reference.sheet_name, row, col)

        if not ranges:
            return [self._substitute(template, [(references[i], text) for i, text in fixed.items()])]

        # Every template yields at least one statement
        max_row_count = max(1, *(resolved.row_count for resolved in ranges.values()))

        statements = []
        for k in range(max_row_count):
            replacements: list[tuple[CellRangeReference, str]] = []
            for i, reference in enumerate(references):
                if i in fixed:
                    replacements.append((reference, fixed[i]))
                    continue

                resolved = ranges[i]
                row = resolved.start_row + k
                if not resolved.covers(row):
                    # Past the end of a closed range: occurrence stays as written
                    continue
                replacements.append(
                    (reference, self._cell_text(workbook, reference.sheet_name, row, resolved.col))
                )
            statements.append(self._substitute(template, replacements))

        logger.debug(f"Template expanded to {len(statements)} statements")
        return statements

    @staticmethod
    def _cell_text(workbook: Workbook, sheet_name: str, row: int, col: int) -> str:
        """Text of a cell; empty string for a missing sheet, cell or value."""
        sheet = workbook.get(sheet_name)
        if sheet is None:
            return ""
        cell = sheet.get_cell(row, col)
        if cell is None:
            return ""
        return cell.text

    @staticmethod
    def _substitute(
        template: str, replacements: list[tuple[CellRangeReference, str]]
    ) -> str:
        result = template
        # Replace in reverse order to preserve positions
        for reference, text in sorted(replacements, key=lambda item: item[0].start_pos, reverse=True):
            result = result[: reference.start_pos] + text + result[reference.end_pos :]
        return result


def workbook_to_sql(workbook: Workbook, templates: list[str]) -> list[str]:
    """Generate statements from a workbook and a list of templates."""
    return ReverseBinder().bind(workbook, templates)
