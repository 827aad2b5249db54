"""
Report Repository - aggregate queries for reports and the dashboard

Returns raw aggregate rows; shaping and rounding happen in
app.services.report_service.
"""
from typing import List

from app.core.database import get_db_connection_dict


# Dashboard thresholds are fixed, independent of system_settings
DASHBOARD_LOW_STOCK = 10
DASHBOARD_EXPIRING_DAYS = 7
DASHBOARD_ALERT_LIMIT = 10


class ReportRepository:

    def waste_by_category(self) -> List[dict]:
        """Expired stock grouped by category, highest value first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    category,
                    COUNT(*) AS item_count,
                    SUM(remaining_stock) AS total_stock,
                    SUM(cust_cost_extended) AS total_value,
                    AVG(CURRENT_DATE - expiration_date) AS avg_days_expired
                FROM inventory
                WHERE expiration_date < CURRENT_DATE
                GROUP BY category
                ORDER BY total_value DESC NULLS LAST
            """)
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()

    def consumption_by_category(self) -> List[dict]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    category,
                    SUM(sales_weekly) AS weekly_sales,
                    SUM(remaining_stock) AS current_stock,
                    AVG(unit_retail) AS avg_price,
                    COUNT(*) AS item_count
                FROM inventory
                GROUP BY category
                ORDER BY weekly_sales DESC NULLS LAST
            """)
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()

    def margin_items(self) -> List[dict]:
        """Items with both a cost and a retail price"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    category, brand, description,
                    unit_cost, unit_retail, gross_margin,
                    cust_cost_extended, remaining_stock, sales_weekly
                FROM inventory
                WHERE unit_cost > 0 AND unit_retail > 0
                ORDER BY gross_margin DESC NULLS LAST
            """)
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()

    def dashboard_stats(self) -> dict:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COUNT(*) AS total_items,
                    COALESCE(SUM(CASE WHEN remaining_stock <= %s THEN 1 ELSE 0 END), 0) AS low_stock_items,
                    COALESCE(SUM(CASE WHEN expiration_date - CURRENT_DATE <= %s THEN 1 ELSE 0 END), 0) AS expiring_items,
                    COALESCE(SUM(sales_weekly), 0) AS weekly_sales
                FROM inventory
            """, (DASHBOARD_LOW_STOCK, DASHBOARD_EXPIRING_DAYS))
            return cursor.fetchone()
        finally:
            cursor.close()
            conn.close()

    def dashboard_alerts(self) -> List[dict]:
        """Out-of-stock, then low-stock, then expiring items"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    i.id,
                    i.description,
                    i.remaining_stock,
                    i.expiration_date,
                    i.category,
                    i.unit_cost,
                    CASE
                        WHEN i.remaining_stock = 0 THEN 'out-of-stock'
                        WHEN i.remaining_stock <= %(low)s THEN 'low-stock'
                        WHEN i.expiration_date - CURRENT_DATE <= %(days)s THEN 'expiring'
                        ELSE 'normal'
                    END AS alert_type
                FROM inventory i
                WHERE i.remaining_stock <= %(low)s
                   OR i.expiration_date - CURRENT_DATE <= %(days)s
                ORDER BY
                    CASE
                        WHEN i.remaining_stock = 0 THEN 1
                        WHEN i.remaining_stock <= %(low)s THEN 2
                        ELSE 3
                    END,
                    i.remaining_stock ASC,
                    i.expiration_date ASC NULLS LAST
                LIMIT %(limit)s
            """, {
                "low": DASHBOARD_LOW_STOCK,
                "days": DASHBOARD_EXPIRING_DAYS,
                "limit": DASHBOARD_ALERT_LIMIT,
            })
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()
