"""
Item Analytics API Endpoints
Sales history with forecast, stock movement and summary metrics per item
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.auth import get_current_user
from app.domain.inventory import InventoryItem
from app.repositories.inventory_repository import InventoryRepository
from app.services.analytics_service import AnalyticsService


router = APIRouter(
    prefix="/api/analytics",
    tags=["Analytics"],
    dependencies=[Depends(get_current_user)]
)


def _get_item(item_id: int) -> InventoryItem:
    item = InventoryRepository().find_by_id(item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return item


@router.get("/items/{item_id}/sales-history")
async def get_sales_history(item_id: int):
    """Up to 12 recorded weeks followed by 4 forecast weeks"""
    return AnalyticsService().sales_history(_get_item(item_id))


@router.get("/items/{item_id}/movement-history")
async def get_movement_history(item_id: int):
    return AnalyticsService().movement_history(_get_item(item_id))


@router.get("/items/{item_id}/summary")
async def get_summary(item_id: int):
    return AnalyticsService().summary(_get_item(item_id))
