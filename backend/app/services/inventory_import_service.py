"""
Inventory spreadsheet import

Reads .xlsx/.xls/.csv uploads with pandas, maps loosely named columns onto
inventory fields and validates each row. Nothing here touches the database
except validate_items(), which receives the existing UPC set from the caller.
"""
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, date
from typing import List, Dict, Any, Optional, Set

import pandas as pd
from pydantic import ValidationError

from app.domain.inventory import InventoryItemInput, DEFAULT_ORDER_TYPE, DEFAULT_VENDOR_ID


logger = logging.getLogger(__name__)


SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")

DEFAULT_CATEGORY = "General"
DEFAULT_DEPARTMENT = "General"

CATEGORY_CODES = {
    "460": "Produce",
    "470": "Dairy",
    "480": "Meat",
    "490": "Bakery",
    "500": "Beverages",
    "510": "Frozen",
    "520": "Pantry",
    "530": "Deli",
}

# Header aliases per field, first non-blank match wins
FIELD_ALIASES: Dict[str, List[str]] = {
    "invoice_no": ["Invoice_No", "Invoice No", "invoice_no"],
    "invoice_delivery_date": ["Invoice_Delivery_Date", "Invoice Delivery Date", "invoice_delivery_date"],
    "description": ["Description", "Product Name", "description", "DESCRIPTION", "Item Name", "Product"],
    "category": ["Category", "category", "CATEGORY", "Cat"],
    "brand": ["Brand", "brand", "BRAND", "Manufacturer"],
    "department": ["Department", "department", "DEPARTMENT", "Dept"],
    "item_sku": ["Item_SKU", "SKU", "sku", "Item SKU", "ITEM_SKU", "Code"],
    "item_upc": ["Item_UPC", "UPC", "upc", "Barcode", "BARCODE", "UPC Code"],
    "pack_size": ["Pack Size", "pack_size", "PACK_SIZE", "Size"],
    "qty_shipped": ["Qty_Shipped", "Qty Shipped", "qty_shipped"],
    "remaining_stock": ["Stock", "Current Stock", "remaining_stock", "STOCK", "Inventory", "Qty_Shipped"],
    "sales_weekly": ["Weekly Sales", "sales_weekly", "WEEKLY_SALES", "Sales"],
    "location": ["Location", "location", "LOCATION", "Warehouse"],
    "aisle": ["Aisle", "aisle", "AISLE"],
    "row": ["Row", "row", "ROW"],
    "bin": ["Bin", "bin", "BIN"],
    "expiration_date": ["Expiration Date", "expiration_date", "EXPIRATION_DATE", "Expiry", "Exp Date"],
    "unit_cost": ["Unit_Cost", "Unit Cost", "unit_cost", "UNIT_COST", "Cost"],
    "vendor_cost": ["Vendor_Cost", "Vendor Cost", "vendor_cost", "VENDOR_COST"],
    "cust_cost_each": ["Cust_Cost_Each", "Customer Cost", "cust_cost_each", "CUSTOMER_COST", "Price"],
    "cust_cost_extended": ["Cust_Cost_Extended", "Extended Cost", "cust_cost_extended"],
    "unit_retail": ["Unit_Retail", "Retail Price", "unit_retail", "RETAIL_PRICE", "Retail"],
    "gross_margin": ["Gross_Margin", "Gross Margin", "gross_margin"],
    "burd_unit_cost": ["Burd_Unit_Cost", "Burd Unit Cost", "burd_unit_cost"],
    "burd_gross_margin": ["Burd_Gross_Margin", "Burd Gross Margin", "burd_gross_margin"],
    "discount_allowance": ["Discount/Allowance", "Discount Allowance", "discount_allowance"],
    "advertising_flag": ["Advertising_Flag", "Advertising", "advertising_flag", "ADVERTISING", "Featured"],
    "order_type": ["Order_Type", "Order Type", "order_type", "ORDER_TYPE", "Type"],
    "vendor_id": ["Customer_No", "Vendor ID", "vendor_id", "VENDOR_ID", "Vendor"],
}

TEXT_FIELDS = [
    "invoice_no", "invoice_delivery_date", "description", "brand", "item_sku", "item_upc",
    "location", "aisle", "row", "bin",
]
INT_FIELDS = ["qty_shipped", "remaining_stock", "sales_weekly"]
MONEY_FIELDS = [
    "unit_cost", "vendor_cost", "cust_cost_each", "cust_cost_extended", "unit_retail",
    "burd_unit_cost", "discount_allowance",
]
PERCENT_FIELDS = ["gross_margin", "burd_gross_margin"]

TRUE_VALUES = {"true", "yes", "y", "1", "x"}


@dataclass
class ImportRowError:
    row: int
    error: str


@dataclass
class ParsedImport:
    items: List[InventoryItemInput] = field(default_factory=list)
    errors: List[ImportRowError] = field(default_factory=list)
    total_rows: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "success": len(self.items),
            "items": [item.model_dump(mode="json") for item in self.items],
            "errors": [{"row": err.row, "error": err.error} for err in self.errors],
        }


class SpreadsheetReadError(ValueError):
    """Upload could not be read as a spreadsheet"""


class UnsupportedFileError(SpreadsheetReadError):
    pass


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def _text(value: Any) -> str:
    """Cell value as trimmed text; whole floats lose their '.0'"""
    if _is_blank(value):
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, pd.Timestamp)):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def _number(value: Any, strip: str = "$,") -> Optional[float]:
    if _is_blank(value):
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    cleaned = re.sub(f"[{re.escape(strip)}\\s]", "", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return None


def _integer(value: Any) -> int:
    number = _number(value, strip=",")
    return int(number) if number is not None else 0


def _money(value: Any) -> float:
    number = _number(value)
    return number if number is not None else 0.0


def _percent(value: Any) -> float:
    """'25%' and 25 both mean 0.25; fractions up to 1 are taken as-is"""
    text = _text(value)
    number = _number(value, strip="%,")
    if number is None:
        return 0.0
    if "%" in text or number > 1:
        return number / 100
    return number


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return _text(value).lower() in TRUE_VALUES


def _pick(row: Dict[str, Any], aliases: List[str]) -> Any:
    for alias in aliases:
        value = row.get(alias)
        if not _is_blank(value):
            return value
    return None


def category_name(value: Any) -> str:
    """Numeric category codes become names; other text is kept"""
    text = _text(value)
    if not text:
        return DEFAULT_CATEGORY
    return CATEGORY_CODES.get(text, text)


def read_spreadsheet(content: bytes, filename: str) -> List[Dict[str, Any]]:
    """
    First sheet of an uploaded file as a list of row dicts

    Raises:
        UnsupportedFileError: extension is not .xlsx, .xls or .csv
        SpreadsheetReadError: pandas could not parse the content
    """
    name = (filename or "").lower()
    if not name.endswith(SUPPORTED_EXTENSIONS):
        raise UnsupportedFileError("Please select a valid Excel or CSV file")

    try:
        if name.endswith(".csv"):
            df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(io.BytesIO(content), sheet_name=0, header=0, dtype=object)
    except Exception as e:
        logger.warning(f"Could not read {filename}: {e}")
        raise SpreadsheetReadError("Error processing file. Please check the format and try again.") from e

    df.columns = [str(col).strip() for col in df.columns]
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def map_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map one spreadsheet row onto inventory field names"""
    item: Dict[str, Any] = {}

    for name in TEXT_FIELDS:
        item[name] = _text(_pick(row, FIELD_ALIASES[name]))
    for name in INT_FIELDS:
        item[name] = _integer(_pick(row, FIELD_ALIASES[name]))
    for name in MONEY_FIELDS:
        item[name] = _money(_pick(row, FIELD_ALIASES[name]))
    for name in PERCENT_FIELDS:
        item[name] = _percent(_pick(row, FIELD_ALIASES[name]))

    item["category"] = category_name(_pick(row, FIELD_ALIASES["category"]))
    item["department"] = _text(_pick(row, FIELD_ALIASES["department"])) or DEFAULT_DEPARTMENT

    pack, size = row.get("Pack"), row.get("Size")
    if not _is_blank(pack) and not _is_blank(size):
        item["pack_size"] = f"{_text(pack)} {_text(size)}"
    else:
        item["pack_size"] = _text(_pick(row, FIELD_ALIASES["pack_size"]))

    item["expiration_date"] = _text(_pick(row, FIELD_ALIASES["expiration_date"])) or None
    item["advertising_flag"] = _flag(_pick(row, FIELD_ALIASES["advertising_flag"]))
    item["order_type"] = _text(_pick(row, FIELD_ALIASES["order_type"])) or DEFAULT_ORDER_TYPE
    item["vendor_id"] = _integer(_pick(row, FIELD_ALIASES["vendor_id"])) or DEFAULT_VENDOR_ID

    if not item["cust_cost_extended"] and item["cust_cost_each"] and item["remaining_stock"]:
        item["cust_cost_extended"] = round(item["cust_cost_each"] * item["remaining_stock"], 2)

    if item["gross_margin"] == 0 and item["unit_cost"] and item["unit_retail"]:
        item["gross_margin"] = round(
            (item["unit_retail"] - item["unit_cost"]) / item["unit_retail"], 4
        )

    return item


def _skip_row(row: Dict[str, Any]) -> bool:
    # Fully blank rows and section header rows (Category "0")
    if all(_is_blank(value) for value in row.values()):
        return True
    return _text(row.get("Category")) == "0"


def parse_rows(rows: List[Dict[str, Any]]) -> ParsedImport:
    """
    Map and validate spreadsheet rows

    Error row numbers are spreadsheet rows: the header is row 1, so the
    first data row is 2.
    """
    result = ParsedImport(total_rows=len(rows))

    for index, row in enumerate(rows):
        sheet_row = index + 2
        if _skip_row(row):
            continue

        item = map_row(row)

        if not item["description"]:
            result.errors.append(ImportRowError(sheet_row, "Product Name/Description is required"))
            continue
        if not item["item_upc"]:
            result.errors.append(ImportRowError(sheet_row, "UPC Code is required"))
            continue
        digits = re.sub(r"\D", "", item["item_upc"])
        if not 8 <= len(digits) <= 14:
            result.errors.append(ImportRowError(sheet_row, "UPC Code must be 8-14 digits"))
            continue

        try:
            result.items.append(InventoryItemInput.model_validate(item))
        except ValidationError as e:
            first = e.errors()[0]
            field_name = ".".join(str(part) for part in first.get("loc", ()))
            result.errors.append(ImportRowError(sheet_row, f"Invalid {field_name}: {first.get('msg')}"))

    logger.info(f"Parsed import: {len(result.items)} valid rows, {len(result.errors)} errors")
    return result


def parse_file(content: bytes, filename: str) -> ParsedImport:
    return parse_rows(read_spreadsheet(content, filename))


def _not_numeric(value: Any, integer: bool = False) -> bool:
    # Only called for keys the client actually sent, so an explicit null fails
    if value is None or isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return False
    text = str(value).strip()
    pattern = r"[+-]?\d+" if integer else r"[+-]?(\d+\.?\d*|\.\d+)"
    return re.match(pattern, text) is None


def validate_items(items: List[Any], existing_upcs: Set[str]) -> Dict[str, Any]:
    """
    Pre-import check of already-mapped items

    Returns:
        {valid, invalid, summary: {total, valid, invalid, errors: {message: count}}}
        where each entry is the submitted item plus its 1-based row
        (and its error list when invalid).
    """
    report: Dict[str, Any] = {
        "valid": [],
        "invalid": [],
        "summary": {"total": len(items), "valid": 0, "invalid": 0, "errors": {}},
    }

    for index, raw in enumerate(items):
        item = raw if isinstance(raw, dict) else {}
        errors = []

        if not _text(item.get("description")):
            errors.append("Description is required")
        if not _text(item.get("category")):
            errors.append("Category is required")

        upc = _text(item.get("item_upc"))
        if upc and upc in existing_upcs:
            errors.append("UPC already exists in inventory")

        if "unit_cost" in item and _not_numeric(item["unit_cost"]):
            errors.append("Unit cost must be a valid number")
        if "remaining_stock" in item and _not_numeric(item["remaining_stock"], integer=True):
            errors.append("Stock quantity must be a valid number")

        entry = {**item, "row": index + 1}
        if errors:
            entry["errors"] = errors
            report["invalid"].append(entry)
            report["summary"]["invalid"] += 1
            for message in errors:
                report["summary"]["errors"][message] = report["summary"]["errors"].get(message, 0) + 1
        else:
            report["valid"].append(entry)
            report["summary"]["valid"] += 1

    return report
