"""A1 address encoding and decoding."""

import re

CELL_ADDRESS_PATTERN = re.compile(r"^([A-Z]+)([1-9]\d*)$")


class InvalidAddressError(ValueError):
    """Raised when address text cannot be decoded into cell coordinates."""

    def __init__(self, address: str, reason: str = "malformed address"):
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid cell address '{address}': {reason}")


def column_letter_to_index(col: str) -> int:
    """Convert column letter(s) to 0-based index. A=0, B=1, ..., Z=25, AA=26, etc."""
    if not col or not col.isalpha() or not col.isupper():
        raise InvalidAddressError(col, "column letters must be uppercase A-Z")
    result = 0
    for char in col:
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def index_to_column_letter(index: int) -> str:
    """Convert 0-based index to column letter(s)."""
    if index < 0:
        raise InvalidAddressError(str(index), "column index must be non-negative")
    result = ""
    index += 1
    while index > 0:
        index -= 1
        result = chr(ord("A") + (index % 26)) + result
        index //= 26
    return result


def decode(address: str) -> tuple[int, int]:
    """
    Decode an A1 address into zero-based (row, col) coordinates.

    Args:
        address: Address such as "A1" or "AB12"

    Returns:
        Tuple of (row, col), both zero-based

    Raises:
        InvalidAddressError: If the letters or row digits are missing or malformed
    """
    match = CELL_ADDRESS_PATTERN.match(address or "")
    if not match:
        raise InvalidAddressError(address)
    return int(match.group(2)) - 1, column_letter_to_index(match.group(1))


def encode(row: int, col: int) -> str:
    """Encode zero-based (row, col) coordinates as an A1 address."""
    if row < 0:
        raise InvalidAddressError(f"{row},{col}", "row index must be non-negative")
    return f"{index_to_column_letter(col)}{row + 1}"


def decode_range(range_notation: str) -> tuple[tuple[int, int], tuple[int, int]]:
    """Decode "A1:E7" (or a single "A1") into start and end coordinates."""
    start, _, end = range_notation.partition(":")
    start_coords = decode(start)
    end_coords = decode(end) if end else start_coords
    return start_coords, end_coords


def encode_range(start: tuple[int, int], end: tuple[int, int]) -> str:
    """Encode start and end coordinates as "A1:E7" notation."""
    return f"{encode(*start)}:{encode(*end)}"
