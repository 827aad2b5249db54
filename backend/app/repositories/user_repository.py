"""
User Repository - Data Access Layer for accounts
"""
from typing import Optional

from app.core.database import get_db_connection_dict


class UserRepository:

    def find_by_email(self, email: str) -> Optional[dict]:
        """
        Find a user row including password_hash

        Returns:
            Raw row dict or None
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, email, username, password_hash, created_at
                FROM users
                WHERE email = %s
            """, (email,))
            return cursor.fetchone()
        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, user_id: int) -> Optional[dict]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, email, username, created_at
                FROM users
                WHERE id = %s
            """, (user_id,))
            return cursor.fetchone()
        finally:
            cursor.close()
            conn.close()

    def create(self, email: str, username: str, password_hash: str) -> dict:
        """
        Insert a user

        Raises:
            psycopg2.errors.UniqueViolation: email already registered
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO users (email, username, password_hash)
                VALUES (%s, %s, %s)
                RETURNING id, email, username
            """, (email, username, password_hash))
            row = cursor.fetchone()
            conn.commit()
            return row
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
