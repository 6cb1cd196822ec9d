"""Pytest configuration and shared fixtures."""

import pytest

from sheetbind.sheets import Cell, Extent, Sheet, Workbook

BORDER_STYLE = {"border": "thin"}
CURRENCY_STYLE = {"border": "thin", "numFmt": '"$"#,##0.00'}
NUMBER_STYLE = {"border": "thin", "alignment": "right"}
HEADER_STYLE = {"font": {"bold": True}, "fill": "4472C4"}


@pytest.fixture
def styled_template() -> Workbook:
    """Product inventory template: one iterative row and one direct reference."""
    sheet = Sheet(name="Sheet1", extent=Extent.from_ref("A1:E7"), column_widths=[8, 15, 10, 10, 12])
    sheet["A1"] = Cell.from_scalar("Product Inventory", style={"font": {"bold": True, "sz": 14}})
    for address, header in zip(["A2", "B2", "C2", "D2", "E2"], ["ID", "Product Name", "Price", "Stock", "Total Value"]):
        sheet[address] = Cell.from_scalar(header, style=HEADER_STYLE)
    sheet["A3"] = Cell.from_scalar("?products.id", style=NUMBER_STYLE)
    sheet["B3"] = Cell.from_scalar("?products.name", style=BORDER_STYLE)
    sheet["C3"] = Cell.from_scalar("?products.price", style=CURRENCY_STYLE)
    sheet["D3"] = Cell.from_scalar("?products.stock", style=NUMBER_STYLE)
    sheet["E3"] = Cell.from_formula("C2*D2", style=CURRENCY_STYLE)
    sheet["A6"] = Cell.from_scalar("Total Inventory Value:")
    sheet["B6"] = Cell.from_scalar("?summary[0].total_value")
    return Workbook([sheet])


@pytest.fixture
def product_results() -> dict:
    """Query results matching the styled template."""
    return {
        "products": [
            {"id": 1, "name": "Widget", "price": 19.99, "stock": 150},
            {"id": 2, "name": "Gadget", "price": 24.99, "stock": 75},
            {"id": 3, "name": "Doohickey", "price": 14.99, "stock": 200},
        ],
        "summary": [{"total_value": 7246.75}],
    }


@pytest.fixture
def string_int_workbook() -> Workbook:
    """Sheet1 with column A = One/Two/Three and column B = 1/2/3."""
    sheet = Sheet(name="Sheet1")
    for row, (text, number) in enumerate([("One", 1), ("Two", 2), ("Three", 3)]):
        sheet.set_cell(row, 0, Cell.from_scalar(text))
        sheet.set_cell(row, 1, Cell.from_scalar(number))
    return Workbook([sheet])


@pytest.fixture
def multi_sheet_workbook() -> Workbook:
    """Strings in Sheet1 column A, integers in Sheet2 column A."""
    strings = Sheet(name="Sheet1")
    numbers = Sheet(name="Sheet2")
    for row, (text, number) in enumerate([("One", 1), ("Two", 2), ("Three", 3)]):
        strings.set_cell(row, 0, Cell.from_scalar(text))
        numbers.set_cell(row, 0, Cell.from_scalar(number))
    return Workbook([strings, numbers])
