"""Tests for the Google Sheets codec with a mocked Sheets service."""

from unittest.mock import MagicMock, Mock

import pytest
from googleapiclient.errors import HttpError

from sheetbind.sheets import Cell, CellType, Sheet, Workbook
from sheetbind.sheets.client import GoogleSheetsCodec

GRIDS = {
    "UNFORMATTED_VALUE": [["Name", "Price", "Doubled"], ["Widget", 19.99, 39.98], ["", 5]],
    "FORMULA": [["Name", "Price", "Doubled"], ["Widget", 19.99, "=B2*2"], ["", 5]],
}


@pytest.fixture
def mock_service():
    """A Sheets service returning one sheet named Data."""
    service = MagicMock()
    spreadsheets = service.spreadsheets.return_value
    spreadsheets.get.return_value.execute.return_value = {
        "sheets": [{"properties": {"title": "Data"}}]
    }

    def get_values(spreadsheetId, range, valueRenderOption):
        return Mock(execute=Mock(return_value={"values": GRIDS[valueRenderOption]}))

    spreadsheets.values.return_value.get.side_effect = get_values
    spreadsheets.values.return_value.batchUpdate.return_value.execute.return_value = {
        "totalUpdatedCells": 4
    }
    return service


def _http_error() -> HttpError:
    return HttpError(Mock(status=403, reason="Forbidden"), b"denied")


class TestLoad:
    """Test loading spreadsheets."""

    def test_sheet_titles(self, mock_service):
        codec = GoogleSheetsCodec(service=mock_service)

        assert codec.get_sheet_titles("abc") == ["Data"]

    def test_values_and_formulas(self, mock_service):
        sheet = GoogleSheetsCodec(service=mock_service).load("abc")["Data"]

        assert sheet["A2"].value == "Widget"
        assert sheet["B2"].value == 19.99
        assert sheet["B2"].type == CellType.NUMBER
        assert sheet["C2"].formula == "B2*2"
        assert sheet["C2"].value == 39.98

    def test_blank_strings_are_skipped(self, mock_service):
        sheet = GoogleSheetsCodec(service=mock_service).load("abc")["Data"]

        assert sheet["A3"] is None
        assert sheet["B3"].value == 5
        assert sheet.extent.ref == "A1:C3"

    def test_sheet_titles_are_quoted(self, mock_service):
        GoogleSheetsCodec(service=mock_service).load("abc")

        values = mock_service.spreadsheets.return_value.values.return_value
        ranges = [call.kwargs["range"] for call in values.get.call_args_list]
        assert ranges == ["'Data'", "'Data'"]

    def test_http_error_is_wrapped(self, mock_service):
        mock_service.spreadsheets.return_value.get.return_value.execute.side_effect = _http_error()

        with pytest.raises(RuntimeError, match="Failed to get spreadsheet info"):
            GoogleSheetsCodec(service=mock_service).load("abc")


class TestSave:
    """Test writing workbooks back to a spreadsheet."""

    def test_batch_update_body(self, mock_service):
        sheet = Sheet(name="Out's")
        sheet["A1"] = Cell.from_scalar("x")
        sheet["B2"] = Cell.from_formula("A1*2")

        GoogleSheetsCodec(service=mock_service).save(Workbook([sheet]), "abc")

        batch_update = mock_service.spreadsheets.return_value.values.return_value.batchUpdate
        kwargs = batch_update.call_args.kwargs
        assert kwargs["spreadsheetId"] == "abc"
        assert kwargs["body"] == {
            "valueInputOption": "USER_ENTERED",
            "data": [{"range": "'Out''s'!A1:B2", "values": [["x", ""], ["", "=A1*2"]]}],
        }

    def test_empty_workbook_makes_no_request(self, mock_service):
        GoogleSheetsCodec(service=mock_service).save(Workbook([Sheet(name="Empty")]), "abc")

        mock_service.spreadsheets.return_value.values.return_value.batchUpdate.assert_not_called()

    def test_http_error_is_wrapped(self, mock_service):
        batch_update = mock_service.spreadsheets.return_value.values.return_value.batchUpdate
        batch_update.return_value.execute.side_effect = _http_error()
        sheet = Sheet(name="Out")
        sheet["A1"] = Cell.from_scalar(1)

        with pytest.raises(RuntimeError, match="Failed to write spreadsheet"):
            GoogleSheetsCodec(service=mock_service).save(Workbook([sheet]), "abc")
