"""
System Settings API Endpoints
- Read/update tunable settings
- Reorder calculation per item
- Category list and pre-import validation
"""
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.auth import get_current_user
from app.domain.inventory import BulkImportRequest
from app.domain.settings import SettingValue, SettingUpdate
from app.repositories.inventory_repository import InventoryRepository
from app.repositories.settings_repository import SettingsRepository
from app.services.inventory_import_service import validate_items
from app.services.reorder_service import calculate_reorder, REORDER_SETTING_KEYS


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/settings",
    tags=["Settings"],
    dependencies=[Depends(get_current_user)]
)


@router.get("", response_model=Dict[str, SettingValue])
async def get_settings():
    """All settings keyed by name; defaults are created on first read"""
    return SettingsRepository().find_all()


@router.get("/categories", response_model=List[str])
async def get_categories():
    return InventoryRepository().get_categories()


@router.get("/reorder-calculation/{item_id}")
async def get_reorder_calculation(item_id: int):
    item = InventoryRepository().find_by_id(item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")

    settings = SettingsRepository().get_numbers(REORDER_SETTING_KEYS)
    calculation = calculate_reorder(
        item_id=item.id,
        description=item.description,
        remaining_stock=item.remaining_stock,
        sales_weekly=item.sales_weekly,
        unit_cost=item.unit_cost,
        vendor_lead_time_days=item.vendor_lead_time_days,
        settings=settings,
    )
    return calculation.to_dict()


@router.post("/validate-import")
async def validate_import(body: BulkImportRequest):
    """Check mapped import rows before they are submitted to /api/inventory/bulk"""
    if body.items is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Items array is required")

    existing_upcs = InventoryRepository().find_existing_upcs()
    report = validate_items(body.items, existing_upcs)

    logger.info(
        f"Validated {report['summary']['total']} import rows: "
        f"{report['summary']['valid']} valid, {report['summary']['invalid']} invalid"
    )
    return report


@router.put("/{key}")
async def update_setting(key: str, body: SettingUpdate):
    if body.value is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Value is required")

    if not SettingsRepository().update(key, body.value):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")

    logger.info(f"Setting {key} updated")
    return {"message": "Setting updated successfully"}
