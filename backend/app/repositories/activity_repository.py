"""
Activity Repository - Data Access Layer for the activity log

Inventory writes record a row here inside their own transaction, so
record() takes the caller's cursor instead of opening a connection.
"""
from typing import List, Optional

from app.core.database import get_db_connection_dict


class ActivityRepository:

    @staticmethod
    def record(
        cursor,
        user_id: Optional[int],
        action: str,
        item_description: Optional[str] = None,
        item_id: Optional[int] = None,
        details: Optional[str] = None
    ):
        """Insert an activity row using an open cursor (caller commits)"""
        cursor.execute("""
            INSERT INTO activity_log (user_id, action, item_description, item_id, details)
            VALUES (%s, %s, %s, %s, %s)
        """, (user_id, action, item_description, item_id, details))

    def find_recent(self, limit: int = 10) -> List[dict]:
        """
        Most recent activity joined with the acting user's name

        age_seconds is computed against the database clock.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    al.id,
                    al.action,
                    al.item_description AS item,
                    al.details,
                    al.created_at,
                    EXTRACT(EPOCH FROM (NOW() - al.created_at)) AS age_seconds,
                    u.username AS "user"
                FROM activity_log al
                LEFT JOIN users u ON al.user_id = u.id
                ORDER BY al.created_at DESC
                LIMIT %s
            """, (limit,))
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()
