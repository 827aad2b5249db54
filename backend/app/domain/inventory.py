"""
Inventory Domain Model

Represents one stocked product line. Margins and reorder numbers are
computed on read by the services; nothing here is derived state.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Any
from datetime import datetime, date


DEFAULT_ORDER_TYPE = "Regular"
DEFAULT_VENDOR_ID = 1

# Writable columns, in INSERT/UPDATE order
INVENTORY_FIELDS = [
    "invoice_no", "invoice_delivery_date", "description", "category", "brand",
    "department", "item_sku", "item_upc", "pack_size", "qty_shipped", "remaining_stock",
    "sales_weekly", "location", "aisle", "row", "bin", "expiration_date", "unit_cost",
    "vendor_cost", "cust_cost_each", "cust_cost_extended", "unit_retail", "gross_margin",
    "burd_unit_cost", "burd_gross_margin", "discount_allowance", "advertising_flag",
    "order_type", "vendor_id",
]

INTEGER_FIELDS = ["qty_shipped", "remaining_stock", "sales_weekly"]

MONEY_FIELDS = [
    "unit_cost", "vendor_cost", "cust_cost_each", "cust_cost_extended", "unit_retail",
    "gross_margin", "burd_unit_cost", "burd_gross_margin", "discount_allowance",
]


class InventoryItemInput(BaseModel):
    """
    Body for POST /api/inventory, PUT /api/inventory/{id} and bulk rows

    Everything is optional at the model level; the routes report a missing
    description with the same message the UI expects.
    """
    invoice_no: Optional[str] = None
    invoice_delivery_date: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    department: Optional[str] = None
    item_sku: Optional[str] = None
    item_upc: Optional[str] = None
    pack_size: Optional[str] = None
    qty_shipped: Optional[int] = None
    remaining_stock: Optional[int] = None
    sales_weekly: Optional[int] = None
    location: Optional[str] = None
    aisle: Optional[str] = None
    row: Optional[str] = None
    bin: Optional[str] = None
    expiration_date: Optional[date] = None
    unit_cost: Optional[float] = None
    vendor_cost: Optional[float] = None
    cust_cost_each: Optional[float] = None
    cust_cost_extended: Optional[float] = None
    unit_retail: Optional[float] = None
    gross_margin: Optional[float] = None
    burd_unit_cost: Optional[float] = None
    burd_gross_margin: Optional[float] = None
    discount_allowance: Optional[float] = None
    advertising_flag: Optional[bool] = None
    order_type: Optional[str] = None
    vendor_id: Optional[int] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        # Spreadsheets and HTML forms send "" for empty cells
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("item_upc", "item_sku", "invoice_no", mode="before")
    @classmethod
    def coerce_code_to_str(cls, value: Any) -> Any:
        # Codes read from spreadsheets may arrive as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    def to_db_values(self) -> dict:
        """Column values with the defaults the table expects"""
        data = self.model_dump()
        for field in INTEGER_FIELDS + MONEY_FIELDS:
            data[field] = data[field] or 0
        data["advertising_flag"] = bool(data["advertising_flag"])
        data["order_type"] = data["order_type"] or DEFAULT_ORDER_TYPE
        data["vendor_id"] = data["vendor_id"] or DEFAULT_VENDOR_ID
        return data


class InventoryItem(BaseModel):
    """Inventory row as returned by the API"""

    id: int = Field(..., description="Internal item ID")
    invoice_no: Optional[str] = None
    invoice_delivery_date: Optional[str] = None
    description: str = Field(..., description="Product description")
    category: Optional[str] = None
    brand: Optional[str] = None
    department: Optional[str] = None
    item_sku: Optional[str] = Field(None, description="Stock Keeping Unit")
    item_upc: Optional[str] = Field(None, description="Universal Product Code (unique)")
    pack_size: Optional[str] = None
    qty_shipped: int = 0
    remaining_stock: int = Field(0, description="Units currently on hand")
    sales_weekly: int = Field(0, description="Units sold per week")
    location: Optional[str] = None
    aisle: Optional[str] = None
    row: Optional[str] = None
    bin: Optional[str] = None
    expiration_date: Optional[date] = None
    unit_cost: float = 0
    vendor_cost: float = 0
    cust_cost_each: float = 0
    cust_cost_extended: float = 0
    unit_retail: float = 0
    gross_margin: float = 0
    burd_unit_cost: float = 0
    burd_gross_margin: float = 0
    discount_allowance: float = 0
    advertising_flag: bool = False
    order_type: Optional[str] = DEFAULT_ORDER_TYPE
    vendor_id: Optional[int] = DEFAULT_VENDOR_ID
    vendor_name: Optional[str] = None
    vendor_lead_time_days: Optional[int] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator(*(INTEGER_FIELDS + MONEY_FIELDS), mode="before")
    @classmethod
    def null_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("advertising_flag", mode="before")
    @classmethod
    def null_to_false(cls, value: Any) -> Any:
        return False if value is None else value

    def is_low_stock(self, threshold: float) -> bool:
        """Positive stock at or under the threshold"""
        return 0 < self.remaining_stock <= threshold

    def days_until_expiry(self, today: date) -> Optional[int]:
        if self.expiration_date is None:
            return None
        return (self.expiration_date - today).days


class BulkImportRequest(BaseModel):
    """Body for POST /api/inventory/bulk"""
    items: Optional[List[Any]] = None


class BulkImportError(BaseModel):
    index: int
    error: str


class BulkImportResult(BaseModel):
    success: int = 0
    errors: List[BulkImportError] = []
    total: int = 0
