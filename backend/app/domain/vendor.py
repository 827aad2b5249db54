"""
Vendor Domain Model
"""
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Any
from datetime import datetime, date as Date


class VendorInput(BaseModel):
    """Body for POST/PUT /api/vendors"""
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    payment_terms: Optional[str] = None
    lead_time_days: Optional[int] = None
    active: Optional[bool] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class Vendor(BaseModel):
    id: int
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    payment_terms: Optional[str] = None
    lead_time_days: Optional[int] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("active", mode="before")
    @classmethod
    def null_to_true(cls, value: Any) -> Any:
        return True if value is None else value


class VendorInvoice(BaseModel):
    """Invoice summary as shown on the vendor detail page"""
    id: int
    invoice_no: str
    date: Optional[Date] = None
    due_date: Optional[Date] = None
    amount: float = 0
    status: str = "pending"
    items_count: int = 0
    created_at: Optional[datetime] = None


class VendorProduct(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    unit_cost: float = 0
    last_ordered: Optional[datetime] = None
    total_ordered: int = 0
