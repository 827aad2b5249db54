"""
Invoice Repository - Data Access Layer for vendor invoices

Handles invoice headers and their line items. Creating an invoice writes
the header and all lines in a single transaction.
"""
from typing import List, Optional

from app.domain.invoice import Invoice, InvoiceInput, InvoiceItem
from app.core.database import get_db_connection_dict


SELECT_INVOICES = """
    SELECT
        i.id, i.invoice_number, i.vendor_id,
        v.name AS vendor_name,
        i.invoice_date, i.due_date, i.total_amount,
        i.status, i.item_count,
        i.created_at, i.updated_at
    FROM invoices i
    LEFT JOIN vendors v ON i.vendor_id = v.id
"""


class InvoiceRepository:
    """
    Repository for invoice data access

    Returns Invoice / InvoiceItem domain models.
    """

    def find_all(self) -> List[Invoice]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"{SELECT_INVOICES} ORDER BY i.invoice_date DESC, i.id DESC")
            return [Invoice.model_validate(dict(row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, invoice_id: int) -> Optional[Invoice]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"{SELECT_INVOICES} WHERE i.id = %s", (invoice_id,))
            row = cursor.fetchone()
            if not row:
                return None
            return Invoice.model_validate(dict(row))
        finally:
            cursor.close()
            conn.close()

    def find_items(self, invoice_id: int) -> List[InvoiceItem]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    ii.id, ii.invoice_id, ii.item_id, ii.description,
                    ii.quantity, ii.unit_cost, ii.total_cost,
                    ii.category, ii.upc, ii.sku, ii.created_at
                FROM invoice_items ii
                WHERE ii.invoice_id = %s
                ORDER BY ii.id
            """, (invoice_id,))
            return [InvoiceItem.model_validate(dict(row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
            conn.close()

    def create(self, invoice: InvoiceInput) -> Invoice:
        """
        Insert an invoice header and its line items atomically

        Raises:
            psycopg2.errors.UniqueViolation: invoice_number already exists
            psycopg2.errors.ForeignKeyViolation: vendor does not exist
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        items = invoice.items or []

        try:
            cursor.execute("""
                INSERT INTO invoices
                    (invoice_number, vendor_id, invoice_date, due_date,
                     total_amount, status, item_count)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING id
            """, (
                invoice.invoice_number,
                invoice.vendor_id,
                invoice.invoice_date,
                invoice.due_date,
                invoice.total_amount or 0,
                invoice.status or "pending",
                len(items),
            ))
            invoice_id = cursor.fetchone()['id']

            for item in items:
                cursor.execute("""
                    INSERT INTO invoice_items
                        (invoice_id, item_id, description, quantity, unit_cost,
                         total_cost, category, upc, sku)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """, (
                    invoice_id,
                    item.item_id,
                    item.description,
                    item.quantity or 0,
                    item.unit_cost or 0,
                    item.line_total(),
                    item.category,
                    item.upc,
                    item.sku,
                ))

            cursor.execute(f"{SELECT_INVOICES} WHERE i.id = %s", (invoice_id,))
            row = cursor.fetchone()

            conn.commit()
            return Invoice.model_validate(dict(row))

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update_status(self, invoice_id: int, status: str) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE invoices
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING id
            """, (status, invoice_id))
            updated = cursor.fetchone() is not None
            conn.commit()
            return updated
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
