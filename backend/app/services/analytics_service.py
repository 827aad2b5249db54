"""
Analytics Service

Per-item sales history, stock movement and summary metrics built only
from recorded sales_history / inventory_movement rows. The forecast is the
recorded weekly average carried forward; with no history the item's
sales_weekly is used instead.
"""
import math
from datetime import date, timedelta
from typing import List, Dict, Any, Optional

from app.domain.inventory import InventoryItem
from app.repositories.analytics_repository import AnalyticsRepository
from app.services.reorder_service import round_half_up


FORECAST_WEEKS = 4
TREND_WINDOW_WEEKS = 4
FALLBACK_HISTORY_WEEKS = 8


def _chronological(rows: List[dict], key: str) -> List[dict]:
    return sorted(rows, key=lambda row: row[key])


def weekly_average(sales: List[int], fallback: int) -> float:
    if not sales:
        return float(fallback or 0)
    return sum(sales) / len(sales)


def sales_trend(sales: List[int]) -> float:
    """
    Percent change of the last 4 weeks against the 4 weeks before them

    0.0 when there are fewer than 8 weeks or the earlier window sold nothing.
    """
    if len(sales) < TREND_WINDOW_WEEKS * 2:
        return 0.0
    recent = sum(sales[-TREND_WINDOW_WEEKS:])
    previous = sum(sales[-TREND_WINDOW_WEEKS * 2:-TREND_WINDOW_WEEKS])
    if previous == 0:
        return 0.0
    return round_half_up((recent - previous) / previous * 100, 1)


def forecast_accuracy(sales: List[int]) -> Optional[float]:
    """
    Accuracy of a naive "same as last week" forecast, in percent

    Mean absolute percentage error over weeks with non-zero sales,
    reported as 100 - MAPE and floored at 0. None below 2 weeks.
    """
    if len(sales) < 2:
        return None
    errors = [
        abs(actual - previous) / actual
        for previous, actual in zip(sales, sales[1:])
        if actual > 0
    ]
    if not errors:
        return None
    return round_half_up(max(0.0, 100 - sum(errors) / len(errors) * 100), 1)


class AnalyticsService:

    def __init__(self, repo: Optional[AnalyticsRepository] = None):
        self.repo = repo or AnalyticsRepository()

    def sales_history(self, item: InventoryItem, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Recorded weeks (oldest first) followed by FORECAST_WEEKS forecast weeks"""
        today = today or date.today()
        rows = _chronological(self.repo.find_sales_history(item.id), "date")

        history = [
            {
                "date": row['date'].isoformat(),
                "sales": int(row['sales']),
                "revenue": round_half_up(float(row['revenue'] or 0), 2),
                "forecast": False,
            }
            for row in rows
        ]

        average = weekly_average([entry["sales"] for entry in history], item.sales_weekly)
        forecast_sales = int(round_half_up(average))
        start = rows[-1]['date'] if rows else today

        for week in range(1, FORECAST_WEEKS + 1):
            history.append({
                "date": (start + timedelta(days=7 * week)).isoformat(),
                "sales": forecast_sales,
                "revenue": round_half_up(forecast_sales * item.unit_retail, 2),
                "forecast": True,
            })

        return history

    def movement_history(self, item: InventoryItem) -> List[Dict[str, Any]]:
        rows = _chronological(self.repo.find_movement_history(item.id), "week_start")
        return [
            {
                "week": f"{row['week_start'].month}/{row['week_start'].day}",
                "in": row['units_in'],
                "out": row['units_out'],
                "net": row['net_movement'],
                "week_start": row['week_start'].isoformat(),
                "week_end": row['week_end'].isoformat(),
            }
            for row in rows
        ]

    def summary(self, item: InventoryItem) -> Dict[str, Any]:
        rows = _chronological(self.repo.find_sales_history(item.id), "date")
        sales = [int(row['sales']) for row in rows]

        average = weekly_average(sales, item.sales_weekly)
        if sales:
            total_sales = sum(sales)
            total_revenue = round_half_up(sum(float(row['revenue'] or 0) for row in rows), 2)
        else:
            total_sales = math.floor(average * FALLBACK_HISTORY_WEEKS)
            total_revenue = math.floor(average * FALLBACK_HISTORY_WEEKS * item.unit_retail)

        stock_days = math.floor(item.remaining_stock / average * 7) if average > 0 else 0

        return {
            "totalSales": total_sales,
            "trend": sales_trend(sales),
            "forecastAccuracy": forecast_accuracy(sales),
            "avgWeeklySales": round_half_up(average),
            "stockDays": stock_days,
            "totalRevenue": total_revenue,
        }
