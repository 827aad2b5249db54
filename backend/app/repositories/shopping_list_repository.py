"""
Shopping List Repository - Data Access Layer for the shopping list
"""
from typing import List, Optional, Set

from app.domain.shopping_list import ShoppingListItem, ShoppingListItemInput, DEFAULT_PRIORITY
from app.domain.inventory import DEFAULT_VENDOR_ID
from app.core.database import get_db_connection_dict


class ShoppingListRepository:

    @staticmethod
    def _values(item: ShoppingListItemInput) -> tuple:
        return (
            item.item_name,
            item.category,
            item.quantity or 1,
            item.priority or DEFAULT_PRIORITY,
            item.vendor_id or DEFAULT_VENDOR_ID,
            item.notes,
        )

    def find_all(self) -> List[ShoppingListItem]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT * FROM shopping_list ORDER BY created_at DESC, id DESC")
            return [ShoppingListItem.model_validate(dict(row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
            conn.close()

    def find_pending_names(self) -> Set[str]:
        """Lower-cased names of items still waiting to be purchased"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT item_name FROM shopping_list
                WHERE purchased IS NOT TRUE
            """)
            return {row['item_name'].lower() for row in cursor.fetchall()}
        finally:
            cursor.close()
            conn.close()

    def create(self, item: ShoppingListItemInput) -> ShoppingListItem:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO shopping_list
                    (item_name, category, quantity, priority, vendor_id, notes, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, NOW())
                RETURNING *
            """, self._values(item))
            row = cursor.fetchone()
            conn.commit()
            return ShoppingListItem.model_validate(dict(row))
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def create_many(self, items: List[ShoppingListItemInput]) -> List[ShoppingListItem]:
        """Insert several rows in one transaction"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            created = []
            for item in items:
                cursor.execute("""
                    INSERT INTO shopping_list
                        (item_name, category, quantity, priority, vendor_id, notes, updated_at)
                    VALUES (%s, %s, %s, %s, %s, %s, NOW())
                    RETURNING *
                """, self._values(item))
                created.append(ShoppingListItem.model_validate(dict(cursor.fetchone())))
            conn.commit()
            return created
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update(self, item_id: int, item: ShoppingListItemInput) -> Optional[ShoppingListItem]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE shopping_list
                SET item_name = %s, category = %s, quantity = %s, priority = %s,
                    vendor_id = %s, notes = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING *
            """, self._values(item) + (item_id,))
            row = cursor.fetchone()
            conn.commit()
            if not row:
                return None
            return ShoppingListItem.model_validate(dict(row))
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def mark_purchased(self, item_id: int) -> Optional[ShoppingListItem]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE shopping_list
                SET purchased = TRUE, purchase_date = NOW(), updated_at = NOW()
                WHERE id = %s
                RETURNING *
            """, (item_id,))
            row = cursor.fetchone()
            conn.commit()
            if not row:
                return None
            return ShoppingListItem.model_validate(dict(row))
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete(self, item_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM shopping_list WHERE id = %s RETURNING id", (item_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
