"""Reference syntax definitions and patterns."""

import re
from typing import Optional, Pattern

# ?query.column - Iterative reference (one generated row per record)
# ?query[0].column - Direct reference to a single record
QUERY_REFERENCE_PATTERN: Pattern = re.compile(r"\?(\w+)(?:\[(\d+)\])?\.(\w+)")

# <Sheet>!A1 - Single cell
# <Sheet>!A1:A10 - Closed range
# <Sheet>!A1: - Open range, runs to the last populated row of the column
CELL_REFERENCE_PATTERN: Pattern = re.compile(r"<([^<>]+)>!([A-Z]+\d+)(?::([A-Z]+\d+)?)?")

# Relative-row cell token inside a formula; function names such as LOG10( are not tokens
FORMULA_CELL_TOKEN_PATTERN: Pattern = re.compile(r"(?<![A-Za-z_])(\$?[A-Z]+)(\d+)(?![\w(])")


def format_cell_reference(
    sheet_name: str,
    start_address: str,
    end_address: Optional[str] = None,
    is_open_range: bool = False,
) -> str:
    """Render a cell reference back into template syntax."""
    text = f"<{sheet_name}>!{start_address}"
    if end_address:
        text += f":{end_address}"
    elif is_open_range:
        text += ":"
    return text
