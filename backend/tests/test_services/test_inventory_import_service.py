"""
Tests for spreadsheet import: reading, column mapping and row validation
"""
import io

import pytest
from openpyxl import Workbook

from app.services.inventory_import_service import (
    SpreadsheetReadError,
    UnsupportedFileError,
    category_name,
    map_row,
    parse_file,
    parse_rows,
    read_spreadsheet,
    validate_items,
)


def _xlsx(rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


class TestMapRow:

    def test_aliases_and_conversions(self):
        item = map_row({
            "Product Name": "  Organic Whole Milk ",
            "Category": "470",
            "UPC Code": 123456789012.0,
            "Current Stock": "25",
            "Weekly Sales": "1,200",
            "Unit Cost": "$4.50",
            "Retail Price": "5.99",
            "Gross Margin": "25%",
            "Advertising": "Yes",
        })

        assert item["description"] == "Organic Whole Milk"
        assert item["category"] == "Dairy"
        assert item["item_upc"] == "123456789012"
        assert item["remaining_stock"] == 25
        assert item["sales_weekly"] == 1200
        assert item["unit_cost"] == 4.5
        assert item["unit_retail"] == 5.99
        assert item["gross_margin"] == 0.25
        assert item["advertising_flag"] is True
        assert item["department"] == "General"
        assert item["order_type"] == "Regular"
        assert item["vendor_id"] == 1

    def test_stock_alias_wins_over_qty_shipped(self):
        item = map_row({"Description": "Eggs", "Stock": 12, "Qty_Shipped": 48})

        assert item["remaining_stock"] == 12
        assert item["qty_shipped"] == 48

    def test_pack_and_size_are_joined(self):
        item = map_row({"Description": "Soda", "Pack": 12, "Size": "12 oz"})

        assert item["pack_size"] == "12 12 oz"

    def test_fractional_margin_is_kept(self):
        assert map_row({"Gross Margin": 0.25})["gross_margin"] == 0.25
        assert map_row({"Gross Margin": 30})["gross_margin"] == 0.3

    def test_derived_fields(self):
        item = map_row({
            "Description": "Cheese",
            "Current Stock": 10,
            "Customer Cost": 3.25,
            "Unit Cost": 3,
            "Retail Price": 4,
        })

        assert item["cust_cost_extended"] == 32.5
        assert item["gross_margin"] == 0.25

    def test_category_name(self):
        assert category_name("460") == "Produce"
        assert category_name(530.0) == "Deli"
        assert category_name("Snacks") == "Snacks"
        assert category_name(None) == "General"


class TestParseRows:

    def test_row_errors_use_spreadsheet_row_numbers(self):
        rows = [
            {"Description": "Milk", "UPC": "123456789012"},
            {"Description": "", "UPC": "123456789013"},
            {"Description": "Bread", "UPC": ""},
            {"Description": "Eggs", "UPC": "1234"},
        ]

        parsed = parse_rows(rows)

        assert parsed.total_rows == 4
        assert [item.description for item in parsed.items] == ["Milk"]
        assert [(err.row, err.error) for err in parsed.errors] == [
            (3, "Product Name/Description is required"),
            (4, "UPC Code is required"),
            (5, "UPC Code must be 8-14 digits"),
        ]

    def test_blank_and_section_rows_are_skipped(self):
        rows = [
            {"Description": None, "UPC": None},
            {"Description": "DAIRY", "UPC": "", "Category": "0"},
            {"Description": "Milk", "UPC": "123456789012", "Category": "470"},
        ]

        parsed = parse_rows(rows)

        assert len(parsed.items) == 1
        assert parsed.errors == []

    def test_invalid_date_is_reported(self):
        parsed = parse_rows([
            {"Description": "Milk", "UPC": "123456789012", "Expiration Date": "not-a-date"},
        ])

        assert parsed.items == []
        assert parsed.errors[0].row == 2
        assert parsed.errors[0].error.startswith("Invalid expiration_date")

    def test_to_dict(self):
        parsed = parse_rows([{"Description": "Milk", "UPC": "123456789012"}])

        data = parsed.to_dict()

        assert data["total_rows"] == 1
        assert data["success"] == 1
        assert data["items"][0]["item_upc"] == "123456789012"
        assert data["errors"] == []


class TestReadSpreadsheet:

    def test_unsupported_extension(self):
        with pytest.raises(UnsupportedFileError) as exc_info:
            read_spreadsheet(b"data", "inventory.pdf")

        assert str(exc_info.value) == "Please select a valid Excel or CSV file"

    def test_unreadable_workbook(self):
        with pytest.raises(SpreadsheetReadError):
            read_spreadsheet(b"definitely not a zip file", "inventory.xlsx")

    def test_csv(self):
        content = (
            "Product Name,Category,UPC Code,Current Stock,Unit Cost,Gross Margin\n"
            "Organic Whole Milk,470,123456789012,25,$4.50,25%\n"
            "Sourdough Bread,490,,8,3.10,\n"
        ).encode("utf-8")

        parsed = parse_file(content, "inventory.csv")

        assert parsed.total_rows == 2
        assert len(parsed.items) == 1
        milk = parsed.items[0]
        assert milk.category == "Dairy"
        assert milk.remaining_stock == 25
        assert milk.unit_cost == 4.5
        assert milk.gross_margin == 0.25
        assert [(err.row, err.error) for err in parsed.errors] == [(3, "UPC Code is required")]

    def test_xlsx(self):
        content = _xlsx([
            ["Description", "Category", "UPC", "Stock", "Unit Cost", "Retail Price"],
            ["Gala Apples", 460, 40000000012, 120, 0.8, 1.25],
            [None, None, None, None, None, None],
        ])

        parsed = parse_file(content, "Inventory.XLSX")

        assert parsed.errors == []
        apples = parsed.items[0]
        assert apples.description == "Gala Apples"
        assert apples.category == "Produce"
        assert apples.item_upc == "40000000012"
        assert apples.remaining_stock == 120
        assert apples.gross_margin == 0.36


class TestValidateItems:

    def test_report(self):
        items = [
            {"description": "Milk", "category": "Dairy", "item_upc": "111", "unit_cost": "4.5", "remaining_stock": 3},
            {"description": "", "category": "Dairy", "item_upc": "222"},
            {"description": "Bread", "category": "Bakery", "item_upc": "333", "unit_cost": "abc"},
            {"description": "Eggs", "category": "", "remaining_stock": "ten"},
        ]

        report = validate_items(items, existing_upcs={"333"})

        assert [entry["row"] for entry in report["valid"]] == [1]
        assert [entry["row"] for entry in report["invalid"]] == [2, 3, 4]
        assert report["invalid"][1]["errors"] == [
            "UPC already exists in inventory",
            "Unit cost must be a valid number",
        ]
        assert report["summary"] == {
            "total": 4,
            "valid": 1,
            "invalid": 3,
            "errors": {
                "Description is required": 1,
                "UPC already exists in inventory": 1,
                "Unit cost must be a valid number": 1,
                "Category is required": 1,
                "Stock quantity must be a valid number": 1,
            },
        }

    def test_explicit_null_numbers_are_invalid(self):
        items = [
            {"description": "Milk", "category": "Dairy", "unit_cost": None},
            {"description": "Eggs", "category": "Dairy", "remaining_stock": None},
            {"description": "Bread", "category": "Bakery"},
        ]

        report = validate_items(items, existing_upcs=set())

        assert [entry["row"] for entry in report["valid"]] == [3]
        assert report["invalid"][0]["errors"] == ["Unit cost must be a valid number"]
        assert report["invalid"][1]["errors"] == ["Stock quantity must be a valid number"]
