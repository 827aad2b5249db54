"""
Pytest fixtures and configuration for the Fresh Choice backend tests

Database access is always mocked; no PostgreSQL server is needed.
"""
import os

# Must be set before the app (and its Settings) is imported
os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ["INIT_DB_ON_STARTUP"] = "false"

import pytest
from datetime import datetime, date
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.core.auth import create_access_token
from app.core.rate_limit import rate_limiter


@pytest.fixture
def client():
    """TestClient without lifespan, so startup never touches a database"""
    return TestClient(app)


@pytest.fixture
def auth_headers():
    token = create_access_token(1, "test@freshchoice.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def sample_item_row():
    """Inventory row as RealDictCursor returns it"""
    return {
        'id': 1,
        'invoice_no': 'INV-1001',
        'invoice_delivery_date': '2025-01-10',
        'description': 'Organic Whole Milk',
        'category': 'Dairy',
        'brand': 'Organic Valley',
        'department': 'Refrigerated',
        'item_sku': 'OV-MILK-001',
        'item_upc': '123456789012',
        'pack_size': '1 Gallon',
        'qty_shipped': 50,
        'remaining_stock': 25,
        'sales_weekly': 14,
        'location': 'Warehouse A',
        'aisle': 'A1',
        'row': '2',
        'bin': 'B3',
        'expiration_date': date(2025, 2, 15),
        'unit_cost': Decimal('4.50'),
        'vendor_cost': Decimal('3.80'),
        'cust_cost_each': Decimal('5.99'),
        'cust_cost_extended': Decimal('149.75'),
        'unit_retail': Decimal('5.99'),
        'gross_margin': Decimal('0.2487'),
        'burd_unit_cost': None,
        'burd_gross_margin': None,
        'discount_allowance': Decimal('0'),
        'advertising_flag': False,
        'order_type': 'Regular',
        'vendor_id': 1,
        'vendor_name': 'Default Vendor',
        'vendor_lead_time_days': None,
        'user_id': 1,
        'created_at': datetime(2025, 1, 10, 9, 30),
        'updated_at': datetime(2025, 1, 10, 9, 30),
    }


@pytest.fixture
def sample_item_payload():
    """Body accepted by POST /api/inventory"""
    return {
        "description": "Organic Whole Milk",
        "category": "Dairy",
        "brand": "Organic Valley",
        "item_upc": "123456789012",
        "remaining_stock": 25,
        "sales_weekly": 14,
        "unit_cost": 4.5,
        "unit_retail": 5.99,
    }
