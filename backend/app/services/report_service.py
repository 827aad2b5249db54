"""
Report Service

Turns aggregate rows from ReportRepository / ActivityRepository into the
JSON shapes served by /api/reports and /api/dashboard.
"""
from datetime import date
from typing import List, Dict, Any, Optional

from app.repositories.report_repository import ReportRepository, DASHBOARD_LOW_STOCK
from app.repositories.activity_repository import ActivityRepository
from app.services.reorder_service import round_half_up


UNKNOWN = "Unknown"


def _float(value) -> float:
    return float(value) if value is not None else 0.0


def _int(value) -> int:
    return int(value) if value is not None else 0


def shape_waste_report(rows: List[dict]) -> Dict[str, Any]:
    waste = [
        {
            "category": row['category'] or UNKNOWN,
            "itemCount": _int(row['item_count']),
            "totalStock": _int(row['total_stock']),
            "wasteValue": _float(row['total_value']),
            "avgDaysExpired": int(round_half_up(_float(row['avg_days_expired']))),
        }
        for row in rows
    ]
    return {
        "wasteByCategory": waste,
        "totalWasteValue": round(sum(entry["wasteValue"] for entry in waste), 2),
        "totalWasteItems": sum(entry["itemCount"] for entry in waste),
    }


def shape_consumption_report(rows: List[dict]) -> Dict[str, Any]:
    consumption = []
    for row in rows:
        weekly_sales = _int(row['weekly_sales'])
        current_stock = _int(row['current_stock'])
        turnover = round_half_up(weekly_sales / current_stock * 100, 2) if current_stock > 0 else 0
        consumption.append({
            "category": row['category'] or UNKNOWN,
            "weeklySales": weekly_sales,
            "currentStock": current_stock,
            "averagePrice": round_half_up(_float(row['avg_price']), 2),
            "itemCount": _int(row['item_count']),
            "turnoverRate": turnover,
        })
    return {
        "consumptionByCategory": consumption,
        "totalWeeklySales": sum(entry["weeklySales"] for entry in consumption),
        "totalCurrentStock": sum(entry["currentStock"] for entry in consumption),
    }


def item_gross_margin(unit_cost: float, unit_retail: float, stored_margin: Optional[float]) -> float:
    """Stored margin when set, otherwise (retail - cost) / retail"""
    if stored_margin:
        return float(stored_margin)
    if unit_retail > 0:
        return (unit_retail - unit_cost) / unit_retail
    return 0.0


def shape_margin_report(rows: List[dict]) -> Dict[str, Any]:
    items = []
    for row in rows:
        unit_cost = _float(row['unit_cost'])
        unit_retail = _float(row['unit_retail'])
        items.append({
            "category": row['category'] or UNKNOWN,
            "brand": row['brand'] or UNKNOWN,
            "description": row['description'],
            "unitCost": round_half_up(unit_cost, 2),
            "unitRetail": round_half_up(unit_retail, 2),
            "grossMargin": round_half_up(item_gross_margin(unit_cost, unit_retail, row['gross_margin']), 4),
            "totalValue": round_half_up(_float(row['cust_cost_extended']), 2),
            "stock": _int(row['remaining_stock']),
            "weeklySales": _int(row['sales_weekly']),
        })

    categories: Dict[str, Dict[str, Any]] = {}
    for item in items:
        group = categories.setdefault(item["category"], {
            "category": item["category"],
            "items": [],
            "avgMargin": 0,
            "totalValue": 0,
            "itemCount": 0,
        })
        group["items"].append(item)
        group["totalValue"] = round(group["totalValue"] + item["totalValue"], 2)
        group["itemCount"] += 1

    for group in categories.values():
        margins = [item["grossMargin"] for item in group["items"]]
        group["avgMargin"] = round_half_up(sum(margins) / len(margins), 4)

    overall = round_half_up(sum(item["grossMargin"] for item in items) / len(items), 4) if items else 0

    return {
        "itemMargins": items,
        "categoryMargins": list(categories.values()),
        "overallMargin": overall,
    }


def shape_dashboard_stats(row: dict) -> Dict[str, Any]:
    return {
        "totalItems": _int(row['total_items']),
        "lowStockItems": _int(row['low_stock_items']),
        "expiringItems": _int(row['expiring_items']),
        "weeklySales": round_half_up(_float(row['weekly_sales']), 2),
    }


def shape_dashboard_alerts(rows: List[dict]) -> List[Dict[str, Any]]:
    return [
        {
            "id": row['id'],
            "item": row['description'],
            "stock": _int(row['remaining_stock']),
            "threshold": DASHBOARD_LOW_STOCK,
            "expiry": row['expiration_date'].isoformat() if isinstance(row['expiration_date'], date) else row['expiration_date'],
            "category": row['category'],
            "unit_cost": round_half_up(_float(row['unit_cost']), 2),
            "type": row['alert_type'],
        }
        for row in rows
    ]


def relative_time(age_seconds) -> str:
    """'N hours ago' under a day, 'N days ago' after"""
    hours_ago = max(int(float(age_seconds or 0) // 3600), 0)
    if hours_ago < 24:
        return f"{hours_ago} hours ago"
    return f"{hours_ago // 24} days ago"


def activity_type(action: str) -> str:
    lowered = (action or "").lower()
    if "delete" in lowered:
        return "delete"
    if "add" in lowered:
        return "add"
    return "update"


def shape_activity(rows: List[dict]) -> List[Dict[str, Any]]:
    return [
        {
            "id": row['id'],
            "action": row['action'],
            "item": row['item'],
            "time": relative_time(row['age_seconds']),
            "type": activity_type(row['action']),
            "user": row['user'] or "system",
            "details": row['details'],
            "created_at": row['created_at'],
        }
        for row in rows
    ]


class ReportService:
    """Fetches aggregates and shapes them for the API"""

    def __init__(self, report_repo: Optional[ReportRepository] = None,
                 activity_repo: Optional[ActivityRepository] = None):
        self.report_repo = report_repo or ReportRepository()
        self.activity_repo = activity_repo or ActivityRepository()

    def waste_report(self) -> Dict[str, Any]:
        return shape_waste_report(self.report_repo.waste_by_category())

    def consumption_report(self) -> Dict[str, Any]:
        return shape_consumption_report(self.report_repo.consumption_by_category())

    def margin_report(self) -> Dict[str, Any]:
        return shape_margin_report(self.report_repo.margin_items())

    def dashboard_stats(self) -> Dict[str, Any]:
        return shape_dashboard_stats(self.report_repo.dashboard_stats())

    def dashboard_alerts(self) -> List[Dict[str, Any]]:
        return shape_dashboard_alerts(self.report_repo.dashboard_alerts())

    def recent_activity(self, limit: int = 10) -> List[Dict[str, Any]]:
        return shape_activity(self.activity_repo.find_recent(limit))
