"""
Vendors API Endpoints
Vendor CRUD plus the vendor detail views (invoices, invoice lines, products)
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.auth import get_current_user
from app.domain.vendor import Vendor, VendorInput, VendorInvoice, VendorProduct
from app.domain.invoice import InvoiceItem
from app.repositories.vendor_repository import VendorRepository


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/vendors",
    tags=["Vendors"],
    dependencies=[Depends(get_current_user)]
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")


def _require_name(body: VendorInput):
    if not body.name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Vendor name is required")


@router.get("", response_model=List[Vendor])
async def get_vendors():
    """All vendors ordered by name"""
    return VendorRepository().find_all()


@router.get("/{vendor_id}", response_model=Vendor)
async def get_vendor(vendor_id: int):
    vendor = VendorRepository().find_by_id(vendor_id)
    if not vendor:
        raise _not_found()
    return vendor


@router.post("", response_model=Vendor, status_code=status.HTTP_201_CREATED)
async def create_vendor(body: VendorInput):
    _require_name(body)
    vendor = VendorRepository().create(body)
    logger.info(f"Vendor {vendor.id} created: {vendor.name}")
    return vendor


@router.put("/{vendor_id}", response_model=Vendor)
async def update_vendor(vendor_id: int, body: VendorInput):
    _require_name(body)
    vendor = VendorRepository().update(vendor_id, body)
    if not vendor:
        raise _not_found()
    return vendor


@router.delete("/{vendor_id}")
async def delete_vendor(vendor_id: int):
    if not VendorRepository().delete(vendor_id):
        raise _not_found()
    return {"message": "Vendor deleted successfully"}


@router.get("/{vendor_id}/invoices", response_model=List[VendorInvoice])
async def get_vendor_invoices(vendor_id: int):
    """Invoices from this vendor, newest first"""
    return VendorRepository().find_invoices(vendor_id)


@router.get("/{vendor_id}/invoices/{invoice_id}/items", response_model=List[InvoiceItem])
async def get_vendor_invoice_items(vendor_id: int, invoice_id: int):
    return VendorRepository().find_invoice_items(vendor_id, invoice_id)


@router.get("/{vendor_id}/products", response_model=List[VendorProduct])
async def get_vendor_products(vendor_id: int):
    """Inventory supplied by this vendor with order counts"""
    return VendorRepository().find_products(vendor_id)
