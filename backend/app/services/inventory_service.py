"""
Service for inventory write operations that span many rows:
bulk JSON import, spreadsheet import and shopping list generation.
"""
import logging
from typing import List, Any, Optional, Dict

import psycopg2
from psycopg2 import errors as pg_errors
from pydantic import ValidationError

from app.domain.inventory import InventoryItemInput, BulkImportError, BulkImportResult
from app.domain.shopping_list import ShoppingListItem, ShoppingListItemInput
from app.repositories.inventory_repository import InventoryRepository
from app.repositories.settings_repository import SettingsRepository
from app.repositories.shopping_list_repository import ShoppingListRepository
from app.services.inventory_import_service import parse_file
from app.services.reorder_service import calculate_reorder, REORDER_SETTING_KEYS


logger = logging.getLogger(__name__)


DUPLICATE_UPC_MESSAGE = "Item with this UPC already exists"
DESCRIPTION_REQUIRED_MESSAGE = "Description is required"
DEFAULT_LOW_STOCK_THRESHOLD = 10


class InventoryService:
    """Service for inventory business logic"""

    def __init__(self, inventory_repo: Optional[InventoryRepository] = None,
                 settings_repo: Optional[SettingsRepository] = None,
                 shopping_repo: Optional[ShoppingListRepository] = None):
        self.inventory_repo = inventory_repo or InventoryRepository()
        self.settings_repo = settings_repo or SettingsRepository()
        self.shopping_repo = shopping_repo or ShoppingListRepository()

    def bulk_create(self, rows: List[Any], user_id: Optional[int] = None) -> BulkImportResult:
        """
        Insert rows one by one, collecting per-row failures

        A failing row never aborts the loop; each insert runs in its own
        transaction.
        """
        result = BulkImportResult(total=len(rows))

        for index, raw in enumerate(rows):
            try:
                item = raw if isinstance(raw, InventoryItemInput) else InventoryItemInput.model_validate(raw)
            except ValidationError as e:
                result.errors.append(BulkImportError(index=index, error=e.errors()[0].get("msg", "Invalid item")))
                continue

            if not item.description:
                result.errors.append(BulkImportError(index=index, error=DESCRIPTION_REQUIRED_MESSAGE))
                continue

            try:
                self.inventory_repo.create(item, user_id)
                result.success += 1
            except pg_errors.UniqueViolation:
                result.errors.append(BulkImportError(index=index, error=DUPLICATE_UPC_MESSAGE))
            except psycopg2.Error as e:
                logger.warning(f"Bulk insert failed for row {index}: {e}")
                result.errors.append(BulkImportError(index=index, error=str(e).strip() or "Database error"))

        logger.info(f"Bulk import: {result.success}/{result.total} inserted, {len(result.errors)} failed")
        return result

    def preview_file(self, content: bytes, filename: str) -> Dict[str, Any]:
        """Parse an upload without writing anything"""
        parsed = parse_file(content, filename)
        return {"filename": filename, **parsed.to_dict()}

    def import_file(self, content: bytes, filename: str, user_id: Optional[int] = None) -> Dict[str, Any]:
        """Parse an upload and insert every row that parsed cleanly"""
        parsed = parse_file(content, filename)
        result = self.bulk_create(parsed.items, user_id)

        return {
            "filename": filename,
            "total_rows": parsed.total_rows,
            "parse_errors": [{"row": err.row, "error": err.error} for err in parsed.errors],
            "result": result.model_dump(),
        }

    def generate_shopping_list(self) -> List[ShoppingListItem]:
        """
        Add low-stock items that are not already waiting on the list

        Quantity and priority come from the reorder calculation.
        """
        settings = self.settings_repo.get_numbers(["low_stock_threshold"] + REORDER_SETTING_KEYS)
        threshold = settings.get("low_stock_threshold") or DEFAULT_LOW_STOCK_THRESHOLD
        pending = self.shopping_repo.find_pending_names()

        to_add = []
        for item in self.inventory_repo.find_all():
            if item.remaining_stock > threshold or item.description.lower() in pending:
                continue
            calc = calculate_reorder(
                item.id, item.description, item.remaining_stock, item.sales_weekly,
                item.unit_cost, item.vendor_lead_time_days, settings,
            )
            to_add.append(ShoppingListItemInput(
                item_name=item.description,
                category=item.category,
                quantity=calc.reorderQuantity,
                priority=calc.priority,
                vendor_id=item.vendor_id,
                notes=f"Current stock: {item.remaining_stock}",
            ))
            pending.add(item.description.lower())

        if not to_add:
            return []

        created = self.shopping_repo.create_many(to_add)
        logger.info(f"Added {len(created)} low-stock items to the shopping list")
        return created
