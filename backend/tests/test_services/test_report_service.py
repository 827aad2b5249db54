"""
Tests for report and dashboard shaping
"""
from datetime import datetime, date
from decimal import Decimal
from unittest.mock import MagicMock

from app.services.report_service import (
    ReportService,
    activity_type,
    item_gross_margin,
    relative_time,
    shape_activity,
    shape_consumption_report,
    shape_dashboard_alerts,
    shape_dashboard_stats,
    shape_margin_report,
    shape_waste_report,
)


def _margin_row(category, description, unit_cost, unit_retail, gross_margin=None, extended=0):
    return {
        'category': category,
        'brand': 'Acme',
        'description': description,
        'unit_cost': Decimal(str(unit_cost)),
        'unit_retail': Decimal(str(unit_retail)),
        'gross_margin': gross_margin,
        'cust_cost_extended': Decimal(str(extended)),
        'remaining_stock': 10,
        'sales_weekly': 4,
    }


class TestWasteReport:

    def test_totals_and_defaults(self):
        rows = [
            {'category': 'Dairy', 'item_count': 2, 'total_stock': 30,
             'total_value': Decimal('45.50'), 'avg_days_expired': Decimal('2.5')},
            {'category': None, 'item_count': 1, 'total_stock': 5,
             'total_value': Decimal('4.25'), 'avg_days_expired': Decimal('1.0')},
        ]

        report = shape_waste_report(rows)

        assert report["totalWasteValue"] == 49.75
        assert report["totalWasteItems"] == 3
        assert report["wasteByCategory"][0]["avgDaysExpired"] == 3
        assert report["wasteByCategory"][1]["category"] == "Unknown"

    def test_empty(self):
        assert shape_waste_report([]) == {"wasteByCategory": [], "totalWasteValue": 0, "totalWasteItems": 0}


class TestConsumptionReport:

    def test_turnover_rate(self):
        rows = [
            {'category': 'Produce', 'weekly_sales': 30, 'current_stock': 120,
             'avg_price': Decimal('2.345'), 'item_count': 4},
            {'category': 'Bakery', 'weekly_sales': 5, 'current_stock': 0,
             'avg_price': None, 'item_count': 1},
        ]

        report = shape_consumption_report(rows)

        produce, bakery = report["consumptionByCategory"]
        assert produce["turnoverRate"] == 25.0
        assert produce["averagePrice"] == 2.35
        assert bakery["turnoverRate"] == 0
        assert bakery["averagePrice"] == 0.0
        assert report["totalWeeklySales"] == 35
        assert report["totalCurrentStock"] == 120


class TestMarginReport:

    def test_item_gross_margin_prefers_stored_value(self):
        assert item_gross_margin(3, 4, Decimal('0.3')) == 0.3
        assert item_gross_margin(3, 4, None) == 0.25
        assert item_gross_margin(3, 0, None) == 0.0

    def test_groups_by_category(self):
        rows = [
            _margin_row('Dairy', 'Milk', 3, 4, extended=40),
            _margin_row('Dairy', 'Cheese', 6, 10, extended=100.5),
            _margin_row('Bakery', 'Bread', 1, 2, gross_margin=Decimal('0.55')),
        ]

        report = shape_margin_report(rows)

        assert [item["grossMargin"] for item in report["itemMargins"]] == [0.25, 0.4, 0.55]
        dairy = report["categoryMargins"][0]
        assert dairy["category"] == "Dairy"
        assert dairy["itemCount"] == 2
        assert dairy["avgMargin"] == 0.325
        assert dairy["totalValue"] == 140.5
        assert report["overallMargin"] == 0.4

    def test_empty(self):
        assert shape_margin_report([]) == {"itemMargins": [], "categoryMargins": [], "overallMargin": 0}


class TestDashboard:

    def test_stats(self):
        stats = shape_dashboard_stats({
            'total_items': 12, 'low_stock_items': 3, 'expiring_items': None,
            'weekly_sales': Decimal('1234.567'),
        })

        assert stats == {"totalItems": 12, "lowStockItems": 3, "expiringItems": 0, "weeklySales": 1234.57}

    def test_alerts(self):
        alerts = shape_dashboard_alerts([{
            'id': 4, 'description': 'Yogurt', 'remaining_stock': 0,
            'expiration_date': date(2025, 3, 1), 'category': 'Dairy',
            'unit_cost': Decimal('1.199'), 'alert_type': 'out_of_stock',
        }])

        assert alerts == [{
            "id": 4,
            "item": "Yogurt",
            "stock": 0,
            "threshold": 10,
            "expiry": "2025-03-01",
            "category": "Dairy",
            "unit_cost": 1.2,
            "type": "out_of_stock",
        }]


class TestActivity:

    def test_relative_time(self):
        assert relative_time(30 * 60) == "0 hours ago"
        assert relative_time(5 * 3600) == "5 hours ago"
        assert relative_time(50 * 3600) == "2 days ago"

    def test_relative_time_accepts_decimal_age_and_clamps_clock_skew(self):
        # EXTRACT(EPOCH ...) comes back as Decimal
        assert relative_time(Decimal("7260.5")) == "2 hours ago"
        assert relative_time(Decimal("-120")) == "0 hours ago"
        assert relative_time(None) == "0 hours ago"

    def test_activity_type(self):
        assert activity_type("Deleted item") == "delete"
        assert activity_type("Added item") == "add"
        assert activity_type("Updated item") == "update"
        assert activity_type(None) == "update"

    def test_shape_activity_defaults_user_to_system(self):
        created_at = datetime(2025, 1, 10, 10, 0)
        rows = [{
            'id': 1, 'action': 'Added item', 'item': 'Milk', 'details': None,
            'created_at': created_at, 'age_seconds': Decimal("7200"), 'user': None,
        }]

        activity = shape_activity(rows)

        assert activity[0]["time"] == "2 hours ago"
        assert activity[0]["type"] == "add"
        assert activity[0]["user"] == "system"
        assert activity[0]["created_at"] == created_at


class TestReportService:

    def test_delegates_to_repositories(self):
        report_repo = MagicMock()
        report_repo.waste_by_category.return_value = []
        activity_repo = MagicMock()
        activity_repo.find_recent.return_value = []
        service = ReportService(report_repo=report_repo, activity_repo=activity_repo)

        assert service.waste_report()["totalWasteItems"] == 0
        assert service.recent_activity() == []
        activity_repo.find_recent.assert_called_once_with(10)
