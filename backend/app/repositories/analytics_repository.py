"""
Analytics Repository - recorded sales and stock movement per item
"""
from typing import List

from app.core.database import get_db_connection_dict


SALES_HISTORY_WEEKS = 12
MOVEMENT_HISTORY_WEEKS = 8


class AnalyticsRepository:

    def find_sales_history(self, item_id: int, limit: int = SALES_HISTORY_WEEKS) -> List[dict]:
        """Most recent sales rows, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT date, sales_quantity AS sales, revenue, created_at
                FROM sales_history
                WHERE item_id = %s
                ORDER BY date DESC
                LIMIT %s
            """, (item_id, limit))
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()

    def find_movement_history(self, item_id: int, limit: int = MOVEMENT_HISTORY_WEEKS) -> List[dict]:
        """Most recent weekly movement rows, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    week_start,
                    week_end,
                    units_in,
                    units_out,
                    net_movement,
                    created_at
                FROM inventory_movement
                WHERE item_id = %s
                ORDER BY week_start DESC
                LIMIT %s
            """, (item_id, limit))
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()
