"""
Shopping List API Endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.auth import get_current_user
from app.domain.shopping_list import ShoppingListItem, ShoppingListItemInput
from app.repositories.shopping_list_repository import ShoppingListRepository
from app.services.inventory_service import InventoryService


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/shopping-list",
    tags=["Shopping List"],
    dependencies=[Depends(get_current_user)]
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")


def _require_name(body: ShoppingListItemInput):
    if not body.item_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Item name is required")


@router.get("", response_model=List[ShoppingListItem])
async def get_shopping_list():
    return ShoppingListRepository().find_all()


@router.post("", response_model=ShoppingListItem, status_code=status.HTTP_201_CREATED)
async def add_item(body: ShoppingListItemInput):
    _require_name(body)
    return ShoppingListRepository().create(body)


@router.post("/generate", response_model=List[ShoppingListItem], status_code=status.HTTP_201_CREATED)
async def generate_shopping_list():
    """Add every low-stock item not already waiting on the list"""
    return InventoryService().generate_shopping_list()


@router.put("/{item_id}/purchase", response_model=ShoppingListItem)
async def mark_purchased(item_id: int):
    item = ShoppingListRepository().mark_purchased(item_id)
    if not item:
        raise _not_found()
    return item


@router.put("/{item_id}", response_model=ShoppingListItem)
async def update_item(item_id: int, body: ShoppingListItemInput):
    _require_name(body)
    item = ShoppingListRepository().update(item_id, body)
    if not item:
        raise _not_found()
    return item


@router.delete("/{item_id}")
async def delete_item(item_id: int):
    if not ShoppingListRepository().delete(item_id):
        raise _not_found()
    return {"message": "Item deleted successfully"}
