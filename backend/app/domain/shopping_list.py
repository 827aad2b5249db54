"""
Shopping List Domain Model
"""
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Any
from datetime import datetime


DEFAULT_PRIORITY = "Medium"


class ShoppingListItemInput(BaseModel):
    item_name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    priority: Optional[str] = None
    vendor_id: Optional[int] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class ShoppingListItem(BaseModel):
    id: int
    item_name: str
    category: Optional[str] = None
    quantity: int = 1
    priority: str = DEFAULT_PRIORITY
    vendor_id: Optional[int] = None
    notes: Optional[str] = None
    purchased: bool = False
    purchase_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("purchased", mode="before")
    @classmethod
    def null_to_false(cls, value: Any) -> Any:
        return False if value is None else value
