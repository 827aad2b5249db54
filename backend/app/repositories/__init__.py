"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from app.repositories.user_repository import UserRepository
from app.repositories.inventory_repository import InventoryRepository
from app.repositories.vendor_repository import VendorRepository
from app.repositories.invoice_repository import InvoiceRepository
from app.repositories.shopping_list_repository import ShoppingListRepository
from app.repositories.settings_repository import SettingsRepository
from app.repositories.activity_repository import ActivityRepository
from app.repositories.report_repository import ReportRepository
from app.repositories.analytics_repository import AnalyticsRepository

__all__ = [
    'UserRepository',
    'InventoryRepository',
    'VendorRepository',
    'InvoiceRepository',
    'ShoppingListRepository',
    'SettingsRepository',
    'ActivityRepository',
    'ReportRepository',
    'AnalyticsRepository',
]
