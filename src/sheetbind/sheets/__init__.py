"""Workbook model, address codec and spreadsheet codecs."""

from .address import (
    InvalidAddressError,
    decode,
    encode,
    decode_range,
    encode_range,
    column_letter_to_index,
    index_to_column_letter,
)
from .codec import SpreadsheetCodec
from .models import (
    Cell,
    CellType,
    Extent,
    Sheet,
    SheetData,
    Workbook,
    WorkbookData,
    tag_for,
    to_text,
)

__all__ = [
    "InvalidAddressError",
    "decode",
    "encode",
    "decode_range",
    "encode_range",
    "column_letter_to_index",
    "index_to_column_letter",
    "SpreadsheetCodec",
    "Cell",
    "CellType",
    "Extent",
    "Sheet",
    "SheetData",
    "Workbook",
    "WorkbookData",
    "tag_for",
    "to_text",
]
