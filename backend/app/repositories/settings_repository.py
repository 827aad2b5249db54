"""
Settings Repository - Data Access Layer for system_settings

Values are stored as text; parsing to numbers/booleans happens here so
callers always see typed values.
"""
import logging
from typing import Dict, List, Optional

from app.domain.settings import (
    DEFAULT_SETTINGS,
    SettingValue,
    parse_setting_value,
    serialize_setting_value,
)
from app.core.database import get_db_connection_dict


logger = logging.getLogger(__name__)


class SettingsRepository:

    def find_all(self) -> Dict[str, SettingValue]:
        """
        All settings keyed by setting_key

        Seeds DEFAULT_SETTINGS when the table is empty.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT setting_key, setting_value, description, data_type, created_at, updated_at
                FROM system_settings
                ORDER BY setting_key
            """)
            rows = cursor.fetchall()

            if not rows:
                for setting in DEFAULT_SETTINGS:
                    cursor.execute("""
                        INSERT INTO system_settings (setting_key, setting_value, description, data_type)
                        VALUES (%s, %s, %s, %s)
                        ON CONFLICT (setting_key) DO NOTHING
                    """, (setting.key, setting.value, setting.description, setting.type))
                conn.commit()
                logger.info(f"Seeded {len(DEFAULT_SETTINGS)} default settings")

                return {
                    setting.key: SettingValue(
                        value=parse_setting_value(setting.value, setting.type),
                        description=setting.description,
                        type=setting.type,
                    )
                    for setting in DEFAULT_SETTINGS
                }

            return {
                row['setting_key']: SettingValue(
                    value=parse_setting_value(row['setting_value'], row['data_type']),
                    description=row['description'],
                    type=row['data_type'],
                    updated_at=row['updated_at'],
                )
                for row in rows
            }

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def get_numbers(self, keys: List[str]) -> Dict[str, Optional[float]]:
        """Numeric values for the given keys; missing keys are left out"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT setting_key, setting_value
                FROM system_settings
                WHERE setting_key = ANY(%s)
            """, (list(keys),))
            return {
                row['setting_key']: parse_setting_value(row['setting_value'], "number")
                for row in cursor.fetchall()
            }
        finally:
            cursor.close()
            conn.close()

    def update(self, key: str, value) -> bool:
        """Store a new value; False when the key does not exist"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE system_settings
                SET setting_value = %s, updated_at = NOW()
                WHERE setting_key = %s
                RETURNING id
            """, (serialize_setting_value(value), key))
            updated = cursor.fetchone() is not None
            conn.commit()
            return updated
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
