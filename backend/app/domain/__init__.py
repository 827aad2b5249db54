"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from app.domain.inventory import InventoryItem, InventoryItemInput
from app.domain.vendor import Vendor, VendorInput
from app.domain.invoice import Invoice, InvoiceInput, InvoiceItem
from app.domain.shopping_list import ShoppingListItem, ShoppingListItemInput
from app.domain.user import UserPublic

__all__ = [
    'InventoryItem',
    'InventoryItemInput',
    'Vendor',
    'VendorInput',
    'Invoice',
    'InvoiceInput',
    'InvoiceItem',
    'ShoppingListItem',
    'ShoppingListItemInput',
    'UserPublic',
]
