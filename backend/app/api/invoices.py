"""
Invoices API Endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from psycopg2 import errors as pg_errors

from app.core.auth import get_current_user
from app.domain.invoice import Invoice, InvoiceInput, InvoiceItem, InvoiceStatusUpdate, INVOICE_STATUSES
from app.repositories.invoice_repository import InvoiceRepository


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/invoices",
    tags=["Invoices"],
    dependencies=[Depends(get_current_user)]
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


@router.get("", response_model=List[Invoice])
async def get_invoices():
    """All invoices with vendor names, newest invoice date first"""
    return InvoiceRepository().find_all()


@router.get("/{invoice_id}", response_model=Invoice)
async def get_invoice(invoice_id: int):
    invoice = InvoiceRepository().find_by_id(invoice_id)
    if not invoice:
        raise _not_found()
    return invoice


@router.get("/{invoice_id}/items", response_model=List[InvoiceItem])
async def get_invoice_items(invoice_id: int):
    return InvoiceRepository().find_items(invoice_id)


@router.post("", response_model=Invoice, status_code=status.HTTP_201_CREATED)
async def create_invoice(body: InvoiceInput):
    """
    Create an invoice and its line items

    Header and lines are written in one transaction; item_count is the
    number of lines submitted.
    """
    if not body.invoice_number or not body.vendor_id or not body.invoice_date:
        raise _bad_request("Invoice number, vendor ID, and invoice date are required")

    if body.status and body.status not in INVOICE_STATUSES:
        raise _bad_request("Valid status is required")

    try:
        invoice = InvoiceRepository().create(body)
    except pg_errors.UniqueViolation:
        raise _bad_request("Invoice number already exists")
    except pg_errors.ForeignKeyViolation:
        raise _bad_request("Vendor not found")

    logger.info(f"Invoice {invoice.invoice_number} created with {invoice.item_count} items")
    return invoice


@router.put("/{invoice_id}/status")
async def update_invoice_status(invoice_id: int, body: InvoiceStatusUpdate):
    if not body.status or body.status not in INVOICE_STATUSES:
        raise _bad_request("Valid status is required")

    if not InvoiceRepository().update_status(invoice_id, body.status):
        raise _not_found()

    return {"message": "Invoice status updated successfully"}
