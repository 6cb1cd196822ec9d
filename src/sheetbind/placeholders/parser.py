"""Scanner for query references in cells and cell references in templates."""

import logging
from typing import Optional

from ..sheets.address import InvalidAddressError, decode
from .models import CellRangeReference, QueryReference, ValidationResult
from .syntax import CELL_REFERENCE_PATTERN, QUERY_REFERENCE_PATTERN

logger = logging.getLogger(__name__)


class ReferenceScanner:
    """Scan text for references.

    Every method is a pure function of its input; no match position is
    carried from one call to the next.
    """

    def scan_query_reference(self, text: str) -> Optional[QueryReference]:
        """
        Find the first query reference in a cell's text.

        Args:
            text: The cell text

        Returns:
            QueryReference for the first match, or None
        """
        match = QUERY_REFERENCE_PATTERN.search(text)
        if not match:
            return None

        query_name, index, column_name = match.groups()
        return QueryReference(
            query_name=query_name,
            column_name=column_name,
            index=int(index) if index is not None else None,
            syntax=match.group(0),
            start_pos=match.start(),
            end_pos=match.end(),
        )

    def extract_cell_references(self, template: str) -> list[CellRangeReference]:
        """
        Extract all cell references from a template, left to right.

        Args:
            template: Text template (typically a SQL statement)

        Returns:
            List of CellRangeReference objects in discovery order
        """
        references = []

        for match in CELL_REFERENCE_PATTERN.finditer(template):
            sheet_name, start_address, end_address = match.groups()
            reference = CellRangeReference(
                sheet_name=sheet_name,
                start_address=start_address,
                end_address=end_address,
                is_open_range=match.group(0).endswith(":"),
                syntax=match.group(0),
                start_pos=match.start(),
                end_pos=match.end(),
            )
            references.append(reference)
            logger.debug(f"Found cell reference: {reference.syntax}")

        return references

    def validate_template(self, template: str) -> ValidationResult:
        """
        Validate cell reference syntax in a template.

        Args:
            template: The template to validate

        Returns:
            ValidationResult with validation status and any errors
        """
        errors = []
        warnings = []

        references = self.extract_cell_references(template)
        if not references:
            warnings.append("No cell references found - template will be emitted unchanged")

        for reference in references:
            try:
                start_row, start_col = decode(reference.start_address)
                if reference.end_address:
                    end_row, end_col = decode(reference.end_address)
                    if end_row < start_row:
                        warnings.append(
                            f"Range {reference.syntax} ends above its start and yields no rows"
                        )
                    if end_col != start_col:
                        warnings.append(
                            f"Range {reference.syntax} spans several columns; "
                            "only the start column is read"
                        )
            except InvalidAddressError as e:
                errors.append(f"{reference.syntax}: {e}")

        return ValidationResult(
            valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )
