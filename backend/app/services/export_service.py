"""
Inventory export and import template generation

Builds report sheets from inventory rows and writes them as a styled
openpyxl workbook (one sheet per report) or as CSV (first report only).
"""
import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Dict, Any, Optional, Tuple

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from app.domain.inventory import InventoryItem
from app.repositories.inventory_repository import InventoryRepository
from app.repositories.settings_repository import SettingsRepository
from app.services.reorder_service import calculate_reorder, REORDER_SETTING_KEYS


logger = logging.getLogger(__name__)


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"

EXPORT_FORMATS = ("xlsx", "csv")

# Sheet id -> sheet title, in display order
EXPORT_SHEETS: Dict[str, str] = {
    "total_items": "All Inventory Items",
    "low_stock": "Low Stock Items",
    "expiring_soon": "Expiring Items",
    "sales_analysis": "Sales Analysis",
    "vendors": "Vendor Information",
    "waste_tracker": "Waste Tracker",
    "consumption_trends": "Consumption Trends",
    "vendor_margins": "Vendor Margins",
    "shopping_list": "Shopping List",
}

DEFAULT_LOW_STOCK_THRESHOLD = 10
DEFAULT_EXPIRATION_WARNING_DAYS = 3
SHOPPING_LIST_STOCK_LIMIT = 10
TOP_SELLERS_LIMIT = 50
MAX_SHEET_TITLE = 31

TEMPLATE_ROW = {
    "Product Name": "Organic Whole Milk",
    "Category": "Dairy",
    "Brand": "Organic Valley",
    "Department": "Refrigerated",
    "SKU": "OV-MILK-001",
    "UPC Code": "123456789012",
    "Pack Size": "1 Gallon",
    "Qty Shipped": 50,
    "Current Stock": 25,
    "Weekly Sales": 10,
    "Location": "Warehouse A",
    "Aisle": "A1",
    "Row": "2",
    "Bin": "B3",
    "Expiration Date": "2025-02-15",
    "Unit Cost": 4.50,
    "Vendor Cost": 3.80,
    "Customer Cost": 5.99,
    "Retail Price": 5.99,
    "Gross Margin": 0.25,
    "Advertising": False,
    "Order Type": "Regular",
    "Vendor ID": 1,
}


class UnknownSheetError(ValueError):
    pass


@dataclass
class ExportFile:
    content: bytes
    media_type: str
    filename: str


def _money(value: float) -> float:
    return round(value, 2)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


# =============================================================================
# Sheet builders
# =============================================================================

def total_items_sheet(items: List[InventoryItem]) -> List[Dict[str, Any]]:
    return [
        {
            "ID": item.id,
            "Description": item.description,
            "Category": item.category,
            "Brand": item.brand,
            "Department": item.department,
            "SKU": item.item_sku,
            "UPC": item.item_upc,
            "Pack Size": item.pack_size,
            "Qty Shipped": item.qty_shipped,
            "Current Stock": item.remaining_stock,
            "Weekly Sales": item.sales_weekly,
            "Location": item.location,
            "Aisle": item.aisle,
            "Row": item.row,
            "Bin": item.bin,
            "Expiration Date": _iso(item.expiration_date),
            "Unit Cost": item.unit_cost,
            "Vendor Cost": item.vendor_cost,
            "Customer Cost": item.cust_cost_each,
            "Retail Price": item.unit_retail,
            "Gross Margin": item.gross_margin,
            "Advertising": item.advertising_flag,
            "Order Type": item.order_type,
            "Vendor ID": item.vendor_id,
            "Created At": _iso(item.created_at),
            "Updated At": _iso(item.updated_at),
        }
        for item in items
    ]


def low_stock_sheet(items: List[InventoryItem], threshold: float) -> List[Dict[str, Any]]:
    return [
        {
            "Description": item.description,
            "Category": item.category,
            "Current Stock": item.remaining_stock,
            "Weekly Sales": item.sales_weekly,
            "Location": " ".join(part for part in (item.aisle, item.row, item.bin) if part),
            "Suggested Reorder": max(item.sales_weekly * 2, 20),
            "Priority": "High" if item.remaining_stock <= 5 else "Medium",
        }
        for item in items
        if item.is_low_stock(threshold)
    ]


def expiring_soon_sheet(items: List[InventoryItem], warning_days: float, today: date) -> List[Dict[str, Any]]:
    rows = []
    for item in items:
        days = item.days_until_expiry(today)
        if days is None or not 0 <= days <= warning_days:
            continue
        rows.append({
            "Description": item.description,
            "Category": item.category,
            "Current Stock": item.remaining_stock,
            "Expiration Date": _iso(item.expiration_date),
            "Days Until Expiry": days,
            "Value at Risk": _money(item.remaining_stock * item.unit_cost),
            "Action Required": "Discount/Donate",
        })
    return rows


def sales_analysis_sheet(items: List[InventoryItem]) -> List[Dict[str, Any]]:
    top = sorted(items, key=lambda item: item.sales_weekly, reverse=True)[:TOP_SELLERS_LIMIT]
    return [
        {
            "Rank": rank,
            "Description": item.description,
            "Category": item.category,
            "Weekly Sales": item.sales_weekly,
            "Current Stock": item.remaining_stock,
            "Revenue": _money(item.sales_weekly * item.unit_retail),
            "Profit": _money(item.sales_weekly * (item.unit_retail - item.unit_cost)),
            "Stock Days": (item.remaining_stock * 7 // item.sales_weekly) if item.sales_weekly > 0 else "N/A",
        }
        for rank, item in enumerate(top, 1)
    ]


def vendors_sheet(items: List[InventoryItem]) -> List[Dict[str, Any]]:
    vendors: Dict[int, Dict[str, Any]] = {}
    for item in items:
        vendor_id = item.vendor_id or 1
        entry = vendors.setdefault(vendor_id, {
            "Vendor ID": vendor_id,
            "Vendor Name": item.vendor_name,
            "Items Count": 0,
            "Total Stock Value": 0.0,
            "Total Costs": 0.0,
            "Total Retail": 0.0,
        })
        entry["Items Count"] += 1
        entry["Total Stock Value"] += item.remaining_stock * item.unit_cost
        entry["Total Costs"] += item.unit_cost
        entry["Total Retail"] += item.unit_retail

    rows = []
    for entry in vendors.values():
        count = entry["Items Count"]
        total_retail = entry["Total Retail"]
        margin = (total_retail - entry["Total Costs"]) / total_retail * 100 if total_retail else 0
        rows.append({
            "Vendor ID": entry["Vendor ID"],
            "Vendor Name": entry["Vendor Name"],
            "Items Count": count,
            "Total Stock Value": _money(entry["Total Stock Value"]),
            "Average Cost": _money(entry["Total Costs"] / count),
            "Average Retail": _money(total_retail / count),
            "Total Costs": _money(entry["Total Costs"]),
            "Total Retail": _money(total_retail),
            "Average Margin": f"{margin:.1f}%",
        })
    return rows


def waste_tracker_sheet(items: List[InventoryItem], today: date) -> List[Dict[str, Any]]:
    rows = []
    for item in items:
        days = item.days_until_expiry(today)
        if days is None or days >= 0:
            continue
        rows.append({
            "Description": item.description,
            "Category": item.category,
            "Expired Date": _iso(item.expiration_date),
            "Quantity Wasted": item.remaining_stock,
            "Value Lost": _money(item.remaining_stock * item.unit_cost),
            "Days Overdue": -days,
        })
    return rows


def demand_label(sales_weekly: int) -> str:
    if sales_weekly > 15:
        return "High Demand"
    if sales_weekly > 5:
        return "Medium Demand"
    return "Low Demand"


def consumption_trends_sheet(items: List[InventoryItem]) -> List[Dict[str, Any]]:
    return [
        {
            "Description": item.description,
            "Category": item.category,
            "Weekly Sales": item.sales_weekly,
            "Current Stock": item.remaining_stock,
            "Stock Turnover": (
                f"{item.remaining_stock / item.sales_weekly:.1f} weeks" if item.sales_weekly > 0 else "No sales"
            ),
            "Reorder Point": max(item.sales_weekly * 1.5, 5),
            "Trend": demand_label(item.sales_weekly),
        }
        for item in items
    ]


def vendor_margins_sheet(items: List[InventoryItem]) -> List[Dict[str, Any]]:
    return [
        {
            "Description": item.description,
            "Vendor ID": item.vendor_id,
            "Unit Cost": item.unit_cost,
            "Retail Price": item.unit_retail,
            "Gross Margin": f"{item.gross_margin * 100:.1f}%" if item.gross_margin else "0%",
            "Profit per Unit": _money(item.unit_retail - item.unit_cost),
            "Weekly Profit": _money(item.sales_weekly * (item.unit_retail - item.unit_cost)),
        }
        for item in items
    ]


def shopping_list_sheet(items: List[InventoryItem], settings: Dict[str, Optional[float]]) -> List[Dict[str, Any]]:
    rows = []
    for item in items:
        if item.remaining_stock > SHOPPING_LIST_STOCK_LIMIT:
            continue
        calc = calculate_reorder(
            item.id, item.description, item.remaining_stock, item.sales_weekly,
            item.unit_cost, item.vendor_lead_time_days, settings,
        )
        rows.append({
            "Item Name": item.description,
            "Category": item.category,
            "Current Stock": item.remaining_stock,
            "Suggested Quantity": calc.reorderQuantity,
            "Priority": calc.priority,
            "Estimated Cost": calc.estimatedCost,
            "Vendor ID": item.vendor_id,
        })
    return rows


def build_sheet(sheet_id: str, items: List[InventoryItem], settings: Dict[str, Optional[float]],
                today: date) -> List[Dict[str, Any]]:
    threshold = settings.get("low_stock_threshold") or DEFAULT_LOW_STOCK_THRESHOLD
    warning_days = settings.get("expiration_warning_days") or DEFAULT_EXPIRATION_WARNING_DAYS

    if sheet_id == "total_items":
        return total_items_sheet(items)
    if sheet_id == "low_stock":
        return low_stock_sheet(items, threshold)
    if sheet_id == "expiring_soon":
        return expiring_soon_sheet(items, warning_days, today)
    if sheet_id == "sales_analysis":
        return sales_analysis_sheet(items)
    if sheet_id == "vendors":
        return vendors_sheet(items)
    if sheet_id == "waste_tracker":
        return waste_tracker_sheet(items, today)
    if sheet_id == "consumption_trends":
        return consumption_trends_sheet(items)
    if sheet_id == "vendor_margins":
        return vendor_margins_sheet(items)
    if sheet_id == "shopping_list":
        return shopping_list_sheet(items, settings)
    raise UnknownSheetError(f"Unknown export sheet: {sheet_id}")


# =============================================================================
# Writers
# =============================================================================

def write_workbook(sheets: List[Tuple[str, List[Dict[str, Any]]]]) -> bytes:
    """
    Styled workbook with one worksheet per (title, rows) pair

    Empty sheets are left out; if every sheet is empty the first title is
    kept as a blank worksheet so the file is still valid.
    """
    wb = Workbook()
    default_ws = wb.active

    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True, size=12)
    border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    written = 0
    for title, rows in sheets:
        if not rows:
            continue

        ws = wb.create_sheet(title=title[:MAX_SHEET_TITLE])
        headers = list(rows[0].keys())

        for col_num, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col_num, value=header)
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = border

        for row_num, row in enumerate(rows, 2):
            for col_num, header in enumerate(headers, 1):
                cell = ws.cell(row=row_num, column=col_num, value=row.get(header))
                cell.border = border
                if isinstance(row.get(header), float):
                    cell.number_format = '#,##0.00'

        for col_num, header in enumerate(headers, 1):
            ws.column_dimensions[get_column_letter(col_num)].width = max(12, len(header) + 4)

        ws.freeze_panes = 'A2'
        written += 1

    if written:
        wb.remove(default_ws)
    else:
        default_ws.title = (sheets[0][0] if sheets else "Export")[:MAX_SHEET_TITLE]

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def write_csv(rows: List[Dict[str, Any]]) -> bytes:
    df = pd.DataFrame(rows)
    return df.to_csv(index=False).encode("utf-8")


def generate_import_template(fmt: str = "xlsx") -> ExportFile:
    """Single example row showing the recognised column headers"""
    if fmt == "csv":
        return ExportFile(write_csv([TEMPLATE_ROW]), CSV_MEDIA_TYPE, "inventory_import_template.csv")
    content = write_workbook([("Inventory Template", [TEMPLATE_ROW])])
    return ExportFile(content, XLSX_MEDIA_TYPE, "inventory_import_template.xlsx")


class ExportService:
    """Loads inventory and settings, then renders the selected sheets"""

    def __init__(self, inventory_repo: Optional[InventoryRepository] = None,
                 settings_repo: Optional[SettingsRepository] = None):
        self.inventory_repo = inventory_repo or InventoryRepository()
        self.settings_repo = settings_repo or SettingsRepository()

    def export(self, sheet_ids: List[str], fmt: str = "xlsx", today: Optional[date] = None) -> ExportFile:
        """
        Render the selected sheets

        Raises:
            UnknownSheetError: a sheet id is not in EXPORT_SHEETS
        """
        today = today or date.today()
        unknown = [sheet_id for sheet_id in sheet_ids if sheet_id not in EXPORT_SHEETS]
        if unknown:
            raise UnknownSheetError(f"Unknown export sheet: {', '.join(unknown)}")

        items = self.inventory_repo.find_all()
        settings = self.settings_repo.get_numbers(
            ["low_stock_threshold", "expiration_warning_days"] + REORDER_SETTING_KEYS
        )

        filename = f"fresh_choice_export_{today.isoformat()}"

        if fmt == "csv":
            first = sheet_ids[0]
            rows = build_sheet(first, items, settings, today)
            logger.info(f"Exported {len(rows)} rows of '{first}' as CSV")
            return ExportFile(write_csv(rows), CSV_MEDIA_TYPE, f"{filename}_{first}.csv")

        sheets = [
            (EXPORT_SHEETS[sheet_id], build_sheet(sheet_id, items, settings, today))
            for sheet_id in sheet_ids
        ]
        logger.info(f"Exported {len(sheets)} sheets from {len(items)} inventory items")
        return ExportFile(write_workbook(sheets), XLSX_MEDIA_TYPE, f"{filename}.xlsx")
