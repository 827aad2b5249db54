"""
Inventory API Endpoints
CRUD over inventory items, bulk import and spreadsheet import/export
"""
import io
import logging
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File, status
from fastapi.responses import StreamingResponse
from psycopg2 import errors as pg_errors

from app.core.auth import TokenUser, get_current_user
from app.domain.inventory import InventoryItem, InventoryItemInput, BulkImportRequest, BulkImportResult
from app.repositories.inventory_repository import InventoryRepository, INVENTORY_STATUSES
from app.services.export_service import (
    ExportService,
    ExportFile,
    UnknownSheetError,
    EXPORT_FORMATS,
    generate_import_template,
)
from app.services.inventory_import_service import SpreadsheetReadError
from app.services.inventory_service import InventoryService, DUPLICATE_UPC_MESSAGE, DESCRIPTION_REQUIRED_MESSAGE


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/inventory",
    tags=["Inventory"],
    dependencies=[Depends(get_current_user)]
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _download(export: ExportFile) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(export.content),
        media_type=export.media_type,
        headers={"Content-Disposition": f"attachment; filename={export.filename}"}
    )


async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    if not content:
        raise _bad_request("Uploaded file is empty")
    return content


@router.get("", response_model=List[InventoryItem])
async def get_inventory(
    search: Optional[str] = Query(None, description="Match description, SKU or UPC"),
    category: Optional[str] = Query(None, description="Exact category"),
    status_filter: Optional[str] = Query(None, alias="status", description=f"One of {', '.join(INVENTORY_STATUSES)}")
):
    """All inventory items, newest first"""
    if status_filter and status_filter not in INVENTORY_STATUSES:
        raise _bad_request(f"Invalid status. Must be one of: {', '.join(INVENTORY_STATUSES)}")

    return InventoryRepository().find_all(search=search, category=category, status=status_filter)


# Literal paths are declared before /{item_id}

@router.post("/bulk", response_model=BulkImportResult)
async def bulk_import(body: BulkImportRequest, user: TokenUser = Depends(get_current_user)):
    """Insert many items; failing rows are reported, not fatal"""
    if not body.items:
        raise _bad_request("Items array is required")

    return InventoryService().bulk_create(body.items, user.id)


@router.post("/import/preview")
async def preview_import(file: UploadFile = File(...)):
    """Parse an .xlsx/.xls/.csv upload without saving anything"""
    content = await _read_upload(file)
    try:
        return InventoryService().preview_file(content, file.filename)
    except SpreadsheetReadError as e:
        raise _bad_request(str(e))


@router.post("/import")
async def import_file(file: UploadFile = File(...), user: TokenUser = Depends(get_current_user)):
    """Parse an upload and insert every valid row"""
    content = await _read_upload(file)
    try:
        return InventoryService().import_file(content, file.filename, user.id)
    except SpreadsheetReadError as e:
        raise _bad_request(str(e))


@router.get("/import/template")
async def download_template(format: str = Query("xlsx", description="xlsx or csv")):
    if format not in EXPORT_FORMATS:
        raise _bad_request(f"Invalid format. Must be one of: {', '.join(EXPORT_FORMATS)}")
    return _download(generate_import_template(format))


@router.get("/export")
async def export_inventory(
    sheets: str = Query("total_items", description="Comma-separated sheet ids"),
    format: str = Query("xlsx", description="xlsx or csv")
):
    """
    Download inventory reports

    xlsx gets one worksheet per selected sheet; csv only the first one.
    """
    if format not in EXPORT_FORMATS:
        raise _bad_request(f"Invalid format. Must be one of: {', '.join(EXPORT_FORMATS)}")

    sheet_ids = [sheet.strip() for sheet in sheets.split(",") if sheet.strip()]
    if not sheet_ids:
        raise _bad_request("Please select at least one export option")

    try:
        export = ExportService().export(sheet_ids, format)
    except UnknownSheetError as e:
        raise _bad_request(str(e))

    return _download(export)


@router.get("/{item_id}", response_model=InventoryItem)
async def get_item(item_id: int):
    item = InventoryRepository().find_by_id(item_id)
    if not item:
        raise _not_found()
    return item


@router.post("", response_model=InventoryItem, status_code=status.HTTP_201_CREATED)
async def create_item(body: InventoryItemInput, user: TokenUser = Depends(get_current_user)):
    if not body.description:
        raise _bad_request(DESCRIPTION_REQUIRED_MESSAGE)

    try:
        item = InventoryRepository().create(body, user.id)
    except pg_errors.UniqueViolation:
        raise _bad_request(DUPLICATE_UPC_MESSAGE)

    logger.info(f"Inventory item {item.id} created by user {user.id}")
    return item


@router.put("/{item_id}", response_model=InventoryItem)
async def update_item(item_id: int, body: InventoryItemInput, user: TokenUser = Depends(get_current_user)):
    """Replace an item; omitted fields fall back to their defaults"""
    if not body.description:
        raise _bad_request(DESCRIPTION_REQUIRED_MESSAGE)

    try:
        item = InventoryRepository().update(item_id, body, user.id)
    except pg_errors.UniqueViolation:
        raise _bad_request(DUPLICATE_UPC_MESSAGE)

    if not item:
        raise _not_found()
    return item


@router.delete("/{item_id}")
async def delete_item(item_id: int, user: TokenUser = Depends(get_current_user)):
    if not InventoryRepository().delete(item_id, user.id):
        raise _not_found()

    logger.info(f"Inventory item {item_id} deleted by user {user.id}")
    return {"message": "Item deleted successfully"}
