"""Tests for open and closed range resolution."""

from sheetbind.engine.ranges import RangeResolver, ResolvedRange
from sheetbind.placeholders import ReferenceScanner
from sheetbind.sheets import Cell, Extent, Sheet, Workbook


def _reference(text: str):
    return ReferenceScanner().extract_cell_references(text)[0]


class TestFindLastRow:
    """Test scanning a column for its last populated row."""

    def test_last_populated_row(self, string_int_workbook):
        resolver = RangeResolver()

        assert resolver.find_last_row(string_int_workbook["Sheet1"], 0, 0) == 2

    def test_gaps_are_skipped_over(self):
        sheet = Sheet(name="S")
        sheet["A1"] = Cell.from_scalar("a")
        sheet["A5"] = Cell.from_scalar("e")

        assert RangeResolver().find_last_row(sheet, 0, 0) == 4

    def test_empty_cells_do_not_count(self):
        sheet = Sheet(name="S", extent=Extent.from_ref("A1:B10"))
        sheet["A1"] = Cell.from_scalar("a")
        sheet["A9"] = Cell(style={"border": "thin"})

        assert RangeResolver().find_last_row(sheet, 0, 0) == 0

    def test_empty_column_returns_start_row(self):
        sheet = Sheet(name="S")
        sheet["A1"] = Cell.from_scalar("a")

        assert RangeResolver().find_last_row(sheet, 3, 5) == 3

    def test_data_only_above_start_returns_start_row(self):
        sheet = Sheet(name="S")
        sheet["A1"] = Cell.from_scalar("a")
        sheet["A2"] = Cell.from_scalar("b")

        assert RangeResolver().find_last_row(sheet, 6, 0) == 6

    def test_missing_sheet_returns_start_row(self):
        assert RangeResolver().find_last_row(None, 2, 0) == 2


class TestResolve:
    """Test resolving range references against a workbook."""

    def test_open_range(self, string_int_workbook):
        resolved = RangeResolver().resolve(string_int_workbook, _reference("<Sheet1>!B1:"))

        assert resolved == ResolvedRange(
            start_row=0, col=1, end_row=2, is_open_range=True, sheet_found=True
        )
        assert resolved.row_count == 3

    def test_open_range_from_middle(self, string_int_workbook):
        resolved = RangeResolver().resolve(string_int_workbook, _reference("<Sheet1>!A2:"))

        assert resolved.row_count == 2

    def test_closed_range_uses_end_row(self, string_int_workbook):
        resolved = RangeResolver().resolve(string_int_workbook, _reference("<Sheet1>!A1:A10"))

        assert resolved.end_row == 9
        assert resolved.row_count == 10
        assert resolved.covers(9) is True
        assert resolved.covers(10) is False

    def test_open_range_always_covers(self, string_int_workbook):
        resolved = RangeResolver().resolve(string_int_workbook, _reference("<Sheet1>!A1:"))

        assert resolved.covers(100) is True

    def test_missing_sheet_open_range_is_one_row(self):
        workbook = Workbook([Sheet(name="Sheet1")])

        resolved = RangeResolver().resolve(workbook, _reference("<Nope>!A3:"))

        assert resolved.sheet_found is False
        assert resolved.end_row == 2
        assert resolved.row_count == 1

    def test_missing_sheet_closed_range_uses_end_row(self):
        workbook = Workbook([Sheet(name="Sheet1")])

        resolved = RangeResolver().resolve(workbook, _reference("<Nope>!A1:A5"))

        assert resolved.sheet_found is False
        assert resolved.row_count == 5

    def test_inverted_range_has_no_rows(self, string_int_workbook):
        resolved = RangeResolver().resolve(string_int_workbook, _reference("<Sheet1>!A3:A1"))

        assert resolved.row_count == 0
        assert resolved.covers(2) is False
