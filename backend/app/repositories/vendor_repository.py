"""
Vendor Repository - Data Access Layer for vendors

Also serves the vendor detail views: invoices per vendor, the lines of one
vendor invoice and the products a vendor has supplied.
"""
from typing import List, Optional

from app.domain.vendor import Vendor, VendorInput, VendorInvoice, VendorProduct
from app.domain.invoice import InvoiceItem
from app.core.database import get_db_connection_dict


VENDOR_COLUMNS = ["name", "contact_person", "email", "phone", "address", "payment_terms", "lead_time_days", "active"]


class VendorRepository:
    """Repository for vendor data access"""

    @staticmethod
    def _values(vendor: VendorInput) -> list:
        data = vendor.model_dump()
        data["active"] = True if data["active"] is None else data["active"]
        return [data[column] for column in VENDOR_COLUMNS]

    def find_all(self) -> List[Vendor]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT * FROM vendors ORDER BY name")
            return [Vendor.model_validate(dict(row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, vendor_id: int) -> Optional[Vendor]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT * FROM vendors WHERE id = %s", (vendor_id,))
            row = cursor.fetchone()
            if not row:
                return None
            return Vendor.model_validate(dict(row))
        finally:
            cursor.close()
            conn.close()

    def create(self, vendor: VendorInput) -> Vendor:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO vendors ({", ".join(VENDOR_COLUMNS)})
                VALUES ({", ".join(["%s"] * len(VENDOR_COLUMNS))})
                RETURNING *
            """, self._values(vendor))
            row = cursor.fetchone()
            conn.commit()
            return Vendor.model_validate(dict(row))
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update(self, vendor_id: int, vendor: VendorInput) -> Optional[Vendor]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            assignments = ", ".join(f"{column} = %s" for column in VENDOR_COLUMNS)
            cursor.execute(f"""
                UPDATE vendors
                SET {assignments}, updated_at = NOW()
                WHERE id = %s
                RETURNING *
            """, self._values(vendor) + [vendor_id])
            row = cursor.fetchone()
            conn.commit()
            if not row:
                return None
            return Vendor.model_validate(dict(row))
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete(self, vendor_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM vendors WHERE id = %s RETURNING id", (vendor_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def find_invoices(self, vendor_id: int) -> List[VendorInvoice]:
        """Invoices from one vendor, newest invoice date first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    i.id,
                    i.invoice_number AS invoice_no,
                    i.invoice_date AS date,
                    i.due_date,
                    COALESCE(i.total_amount, 0) AS amount,
                    COALESCE(i.status, 'pending') AS status,
                    COALESCE(i.item_count, 0) AS items_count,
                    i.created_at
                FROM invoices i
                WHERE i.vendor_id = %s
                ORDER BY i.invoice_date DESC, i.id DESC
            """, (vendor_id,))
            return [VendorInvoice.model_validate(dict(row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
            conn.close()

    def find_invoice_items(self, vendor_id: int, invoice_id: int) -> List[InvoiceItem]:
        """Lines of an invoice, only when it belongs to the vendor"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT ii.*
                FROM invoice_items ii
                JOIN invoices i ON ii.invoice_id = i.id
                WHERE i.vendor_id = %s AND ii.invoice_id = %s
                ORDER BY ii.id
            """, (vendor_id, invoice_id))
            return [InvoiceItem.model_validate(dict(row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
            conn.close()

    def find_products(self, vendor_id: int) -> List[VendorProduct]:
        """
        Inventory items supplied by a vendor

        total_ordered counts invoice lines that reference the item;
        last_ordered is the newest of those lines.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    inv.id,
                    inv.description AS name,
                    inv.category,
                    COALESCE(inv.unit_cost, 0) AS unit_cost,
                    MAX(ii.created_at) AS last_ordered,
                    COUNT(ii.id) AS total_ordered
                FROM inventory inv
                LEFT JOIN invoice_items ii ON ii.item_id = inv.id
                WHERE inv.vendor_id = %s
                GROUP BY inv.id, inv.description, inv.category, inv.unit_cost
                ORDER BY inv.description
            """, (vendor_id,))
            return [VendorProduct.model_validate(dict(row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
            conn.close()
