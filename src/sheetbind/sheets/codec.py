"""Base spreadsheet codec interface."""

from abc import ABC, abstractmethod
from typing import Any

from .models import Workbook


class SpreadsheetCodec(ABC):
    """Abstract base class for spreadsheet codecs.

    A codec is the only library-specific surface: it decodes an external
    spreadsheet into a Workbook and encodes a Workbook back out. The binding
    engine never sees the underlying library.
    """

    @abstractmethod
    def load(self, source: Any) -> Workbook:
        """Decode a spreadsheet into a Workbook."""
        pass

    @abstractmethod
    def save(self, workbook: Workbook, target: Any) -> None:
        """Encode a Workbook into the target spreadsheet."""
        pass
