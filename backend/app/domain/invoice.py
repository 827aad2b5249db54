"""
Invoice Domain Model

An invoice header from a vendor plus its line items.
"""
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List, Any
from datetime import datetime, date


INVOICE_STATUSES = ("pending", "paid", "overdue")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class InvoiceItemInput(BaseModel):
    item_id: Optional[int] = None
    description: Optional[str] = None
    quantity: Optional[int] = None
    unit_cost: Optional[float] = None
    total_cost: Optional[float] = None
    category: Optional[str] = None
    upc: Optional[str] = None
    sku: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def line_total(self) -> float:
        """Explicit total, or quantity x unit cost when the line has none"""
        if self.total_cost is not None:
            return self.total_cost
        return round((self.quantity or 0) * (self.unit_cost or 0), 2)


class InvoiceInput(BaseModel):
    """Body for POST /api/invoices"""
    invoice_number: Optional[str] = None
    vendor_id: Optional[int] = None
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    total_amount: Optional[float] = None
    status: Optional[str] = None
    items: Optional[List[InvoiceItemInput]] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("invoice_number", "vendor_id", "invoice_date", "due_date",
                     "total_amount", "status", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class InvoiceStatusUpdate(BaseModel):
    status: Optional[str] = None


class Invoice(BaseModel):
    id: int
    invoice_number: str
    vendor_id: Optional[int] = None
    vendor_name: str = "Unknown Vendor"
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    total_amount: float = 0
    status: str = "pending"
    item_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("vendor_name", mode="before")
    @classmethod
    def default_vendor_name(cls, value: Any) -> Any:
        return value or "Unknown Vendor"

    @field_validator("total_amount", "item_count", mode="before")
    @classmethod
    def null_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value: Any) -> Any:
        return value or "pending"


class InvoiceItem(BaseModel):
    id: int
    invoice_id: int
    item_id: Optional[int] = None
    description: Optional[str] = None
    quantity: int = 0
    unit_cost: float = 0
    total_cost: float = 0
    category: Optional[str] = None
    upc: Optional[str] = None
    sku: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("quantity", "unit_cost", "total_cost", mode="before")
    @classmethod
    def null_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value
