"""
Inventory Repository - Data Access Layer for inventory items

Handles all database queries for the inventory table and returns
InventoryItem domain models.
"""
from typing import List, Optional, Set

from app.domain.inventory import InventoryItem, InventoryItemInput, INVENTORY_FIELDS
from app.core.database import get_db_connection_dict
from app.repositories.activity_repository import ActivityRepository


# Status filters understood by find_all
STATUS_OUT_OF_STOCK = "out_of_stock"
STATUS_LOW_STOCK = "low_stock"
STATUS_IN_STOCK = "in_stock"
STATUS_EXPIRING_SOON = "expiring_soon"

INVENTORY_STATUSES = (STATUS_OUT_OF_STOCK, STATUS_LOW_STOCK, STATUS_IN_STOCK, STATUS_EXPIRING_SOON)

SELECT_ITEMS = """
    SELECT
        i.*,
        v.name AS vendor_name,
        v.lead_time_days AS vendor_lead_time_days
    FROM inventory i
    LEFT JOIN vendors v ON i.vendor_id = v.id
"""

_COLUMNS = ", ".join(f'"{field}"' for field in INVENTORY_FIELDS)
_PLACEHOLDERS = ", ".join(["%s"] * len(INVENTORY_FIELDS))
_ASSIGNMENTS = ", ".join(f'"{field}" = %s' for field in INVENTORY_FIELDS)


class InventoryRepository:
    """
    Repository for inventory data access

    All SQL queries for inventory rows are centralized here.
    Write methods also record an activity_log row in the same transaction.
    """

    @staticmethod
    def _map_row_to_item(row: dict) -> InventoryItem:
        return InventoryItem.model_validate(dict(row))

    @staticmethod
    def _values(item: InventoryItemInput) -> list:
        data = item.to_db_values()
        return [data[field] for field in INVENTORY_FIELDS]

    def find_all(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        low_stock_threshold: float = 10,
        expiring_days: int = 3
    ) -> List[InventoryItem]:
        """
        Find inventory items, newest first

        Args:
            search: Substring of description, SKU or UPC (case-insensitive)
            category: Exact category
            status: One of INVENTORY_STATUSES
            low_stock_threshold: Stock level that counts as low
            expiring_days: Window for the expiring_soon status

        Returns:
            List of InventoryItem
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if search:
                conditions.append("(i.description ILIKE %s OR i.item_sku ILIKE %s OR i.item_upc ILIKE %s)")
                search_term = f"%{search}%"
                params.extend([search_term, search_term, search_term])

            if category:
                conditions.append("i.category = %s")
                params.append(category)

            if status == STATUS_OUT_OF_STOCK:
                conditions.append("i.remaining_stock = 0")
            elif status == STATUS_LOW_STOCK:
                conditions.append("i.remaining_stock > 0 AND i.remaining_stock <= %s")
                params.append(low_stock_threshold)
            elif status == STATUS_IN_STOCK:
                conditions.append("i.remaining_stock > %s")
                params.append(low_stock_threshold)
            elif status == STATUS_EXPIRING_SOON:
                conditions.append("i.expiration_date BETWEEN CURRENT_DATE AND CURRENT_DATE + %s")
                params.append(int(expiring_days))

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                {SELECT_ITEMS}
                WHERE {where_clause}
                ORDER BY i.created_at DESC, i.id DESC
            """, params)

            return [self._map_row_to_item(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, item_id: int) -> Optional[InventoryItem]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"{SELECT_ITEMS} WHERE i.id = %s", (item_id,))
            row = cursor.fetchone()
            if not row:
                return None
            return self._map_row_to_item(row)

        finally:
            cursor.close()
            conn.close()

    def find_existing_upcs(self) -> Set[str]:
        """All non-empty UPCs currently in inventory"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT item_upc FROM inventory
                WHERE item_upc IS NOT NULL AND item_upc <> ''
            """)
            return {row['item_upc'] for row in cursor.fetchall()}

        finally:
            cursor.close()
            conn.close()

    def get_categories(self) -> List[str]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT DISTINCT category
                FROM inventory
                WHERE category IS NOT NULL AND category <> ''
                ORDER BY category
            """)
            return [row['category'] for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def create(self, item: InventoryItemInput, user_id: Optional[int] = None) -> InventoryItem:
        """
        Insert an item and return the persisted row

        Raises:
            psycopg2.errors.UniqueViolation: UPC already in use
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO inventory ({_COLUMNS}, user_id, updated_at)
                VALUES ({_PLACEHOLDERS}, %s, NOW())
                RETURNING id
            """, self._values(item) + [user_id])
            item_id = cursor.fetchone()['id']

            ActivityRepository.record(cursor, user_id, "Added item", item.description, item_id)

            cursor.execute(f"{SELECT_ITEMS} WHERE i.id = %s", (item_id,))
            row = cursor.fetchone()

            conn.commit()
            return self._map_row_to_item(row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update(self, item_id: int, item: InventoryItemInput, user_id: Optional[int] = None) -> Optional[InventoryItem]:
        """
        Replace every writable column of an item

        Returns:
            Updated InventoryItem or None if the id does not exist
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE inventory
                SET {_ASSIGNMENTS}, updated_at = NOW()
                WHERE id = %s
                RETURNING id
            """, self._values(item) + [item_id])

            if not cursor.fetchone():
                conn.rollback()
                return None

            ActivityRepository.record(cursor, user_id, "Updated item", item.description, item_id)

            cursor.execute(f"{SELECT_ITEMS} WHERE i.id = %s", (item_id,))
            row = cursor.fetchone()

            conn.commit()
            return self._map_row_to_item(row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete(self, item_id: int, user_id: Optional[int] = None) -> bool:
        """Delete an item; False when it does not exist"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM inventory
                WHERE id = %s
                RETURNING id, description
            """, (item_id,))
            row = cursor.fetchone()

            if not row:
                conn.rollback()
                return False

            ActivityRepository.record(cursor, user_id, "Deleted item", row['description'], item_id)

            conn.commit()
            return True

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
