"""
Tests for report sheets and the xlsx/csv writers
"""
import io
from datetime import date, datetime
from unittest.mock import MagicMock

import pandas as pd
import pytest
from openpyxl import load_workbook

from app.domain.inventory import InventoryItem
from app.services.export_service import (
    EXPORT_SHEETS,
    ExportService,
    UnknownSheetError,
    build_sheet,
    consumption_trends_sheet,
    expiring_soon_sheet,
    generate_import_template,
    low_stock_sheet,
    sales_analysis_sheet,
    vendors_sheet,
    waste_tracker_sheet,
    write_workbook,
)


TODAY = date(2025, 1, 10)


def _item(item_id, description, **fields):
    return InventoryItem(id=item_id, description=description, created_at=datetime(2025, 1, 1), **fields)


@pytest.fixture
def items():
    return [
        _item(1, "Milk", category="Dairy", remaining_stock=4, sales_weekly=14, unit_cost=3.0,
              unit_retail=4.0, expiration_date=date(2025, 1, 12), aisle="A1", bin="B2",
              vendor_id=1, vendor_name="Valley Farms"),
        _item(2, "Bread", category="Bakery", remaining_stock=0, sales_weekly=6, unit_cost=1.5,
              unit_retail=3.0, expiration_date=date(2025, 1, 8), vendor_id=2, vendor_name="Baker Bros"),
        _item(3, "Rice", category="Pantry", remaining_stock=80, sales_weekly=2, unit_cost=2.0,
              unit_retail=2.5, vendor_id=1, vendor_name="Valley Farms"),
    ]


class TestSheets:

    def test_low_stock_excludes_out_of_stock(self, items):
        rows = low_stock_sheet(items, threshold=10)

        assert rows == [{
            "Description": "Milk",
            "Category": "Dairy",
            "Current Stock": 4,
            "Weekly Sales": 14,
            "Location": "A1 B2",
            "Suggested Reorder": 28,
            "Priority": "High",
        }]

    def test_expiring_soon_window(self, items):
        rows = expiring_soon_sheet(items, warning_days=3, today=TODAY)

        assert [row["Description"] for row in rows] == ["Milk"]
        assert rows[0]["Days Until Expiry"] == 2
        assert rows[0]["Value at Risk"] == 12.0

    def test_waste_tracker_only_expired(self, items):
        rows = waste_tracker_sheet(items, today=TODAY)

        assert len(rows) == 1
        assert rows[0]["Description"] == "Bread"
        assert rows[0]["Days Overdue"] == 2

    def test_sales_analysis_ranks_by_weekly_sales(self, items):
        rows = sales_analysis_sheet(items)

        assert [row["Description"] for row in rows] == ["Milk", "Bread", "Rice"]
        assert rows[0]["Rank"] == 1
        assert rows[0]["Revenue"] == 56.0
        assert rows[0]["Profit"] == 14.0
        assert rows[0]["Stock Days"] == 2
        assert rows[2]["Stock Days"] == 280

    def test_vendors_grouped(self, items):
        rows = vendors_sheet(items)

        valley = rows[0]
        assert valley["Vendor Name"] == "Valley Farms"
        assert valley["Items Count"] == 2
        assert valley["Total Stock Value"] == 172.0
        assert valley["Average Cost"] == 2.5
        assert valley["Average Margin"] == "23.1%"

    def test_consumption_trend_labels(self, items):
        rows = consumption_trends_sheet(items)

        assert [row["Trend"] for row in rows] == ["Medium Demand", "Medium Demand", "Low Demand"]
        assert rows[1]["Stock Turnover"] == "0.0 weeks"
        assert rows[2]["Reorder Point"] == 5

    def test_shopping_list_uses_reorder_calculation(self, items):
        rows = build_sheet("shopping_list", items, {}, TODAY)

        assert [row["Item Name"] for row in rows] == ["Milk", "Bread"]
        assert rows[1]["Suggested Quantity"] == 20
        assert rows[1]["Priority"] == "Urgent"
        assert rows[1]["Estimated Cost"] == 30.0

    def test_unknown_sheet(self, items):
        with pytest.raises(UnknownSheetError):
            build_sheet("bogus", items, {}, TODAY)


class TestWriters:

    def test_workbook_has_one_sheet_per_report(self, items):
        content = write_workbook([
            ("All Inventory Items", build_sheet("total_items", items, {}, TODAY)),
            ("Waste Tracker", build_sheet("waste_tracker", items, {}, TODAY)),
        ])

        wb = load_workbook(io.BytesIO(content))
        assert wb.sheetnames == ["All Inventory Items", "Waste Tracker"]
        ws = wb["All Inventory Items"]
        assert ws["A1"].value == "ID"
        assert ws["A1"].font.bold
        assert ws.freeze_panes == "A2"
        assert ws.max_row == 4

    def test_empty_sheets_are_dropped(self, items):
        content = write_workbook([("Waste Tracker", []), ("Sales Analysis", sales_analysis_sheet(items))])

        wb = load_workbook(io.BytesIO(content))
        assert wb.sheetnames == ["Sales Analysis"]

    def test_all_empty_keeps_a_blank_sheet(self):
        content = write_workbook([("Waste Tracker", [])])

        wb = load_workbook(io.BytesIO(content))
        assert wb.sheetnames == ["Waste Tracker"]

    def test_import_template_round_trips_through_pandas(self):
        template = generate_import_template("csv")

        df = pd.read_csv(io.BytesIO(template.content))

        assert template.filename == "inventory_import_template.csv"
        assert list(df.columns)[:3] == ["Product Name", "Category", "Brand"]
        assert df.loc[0, "Product Name"] == "Organic Whole Milk"


class TestExportService:

    def _service(self, items):
        inventory_repo = MagicMock()
        inventory_repo.find_all.return_value = items
        settings_repo = MagicMock()
        settings_repo.get_numbers.return_value = {"low_stock_threshold": 5.0}
        return ExportService(inventory_repo, settings_repo)

    def test_xlsx_export(self, items):
        export = self._service(items).export(["low_stock", "vendors"], "xlsx", today=TODAY)

        assert export.filename == "fresh_choice_export_2025-01-10.xlsx"
        wb = load_workbook(io.BytesIO(export.content))
        assert wb.sheetnames == [EXPORT_SHEETS["low_stock"], EXPORT_SHEETS["vendors"]]

    def test_csv_export_uses_first_sheet(self, items):
        export = self._service(items).export(["sales_analysis", "vendors"], "csv", today=TODAY)

        assert export.filename == "fresh_choice_export_2025-01-10_sales_analysis.csv"
        assert export.media_type.startswith("text/csv")
        assert export.content.decode("utf-8").splitlines()[0].startswith("Rank,Description")

    def test_unknown_sheet_rejected_before_loading(self, items):
        service = self._service(items)

        with pytest.raises(UnknownSheetError):
            service.export(["total_items", "bogus"])

        service.inventory_repo.find_all.assert_not_called()
