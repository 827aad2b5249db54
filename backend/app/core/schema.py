"""
Database schema bootstrap

Creates every table the API needs (idempotent) and seeds the default
vendor. Called once at application startup when INIT_DB_ON_STARTUP is set.
"""
import logging

from app.core.database import get_db_connection_with_retry


logger = logging.getLogger(__name__)


DEFAULT_VENDOR_ID = 1

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        email TEXT UNIQUE NOT NULL,
        username TEXT NOT NULL,
        password_hash TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS vendors (
        id SERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        contact_person TEXT,
        email TEXT,
        phone TEXT,
        address TEXT,
        payment_terms TEXT,
        lead_time_days INTEGER,
        active BOOLEAN DEFAULT TRUE,
        created_at TIMESTAMP DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS inventory (
        id SERIAL PRIMARY KEY,
        invoice_no TEXT,
        invoice_delivery_date TEXT,
        description TEXT NOT NULL,
        category TEXT,
        brand TEXT,
        department TEXT,
        item_sku TEXT,
        item_upc TEXT UNIQUE,
        pack_size TEXT,
        qty_shipped INTEGER DEFAULT 0,
        remaining_stock INTEGER DEFAULT 0,
        sales_weekly INTEGER DEFAULT 0,
        location TEXT,
        aisle TEXT,
        "row" TEXT,
        bin TEXT,
        expiration_date DATE,
        unit_cost NUMERIC(12, 2) DEFAULT 0,
        vendor_cost NUMERIC(12, 2) DEFAULT 0,
        cust_cost_each NUMERIC(12, 2) DEFAULT 0,
        cust_cost_extended NUMERIC(12, 2) DEFAULT 0,
        unit_retail NUMERIC(12, 2) DEFAULT 0,
        gross_margin NUMERIC(8, 4) DEFAULT 0,
        burd_unit_cost NUMERIC(12, 2) DEFAULT 0,
        burd_gross_margin NUMERIC(8, 4) DEFAULT 0,
        discount_allowance NUMERIC(12, 2) DEFAULT 0,
        advertising_flag BOOLEAN DEFAULT FALSE,
        order_type TEXT DEFAULT 'Regular',
        vendor_id INTEGER DEFAULT 1 REFERENCES vendors(id),
        user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
        created_at TIMESTAMP DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS shopping_list (
        id SERIAL PRIMARY KEY,
        item_name TEXT NOT NULL,
        category TEXT,
        quantity INTEGER DEFAULT 1,
        priority TEXT DEFAULT 'Medium',
        vendor_id INTEGER REFERENCES vendors(id),
        notes TEXT,
        purchased BOOLEAN DEFAULT FALSE,
        purchase_date TIMESTAMP,
        created_at TIMESTAMP DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS invoices (
        id SERIAL PRIMARY KEY,
        invoice_number TEXT UNIQUE NOT NULL,
        vendor_id INTEGER NOT NULL REFERENCES vendors(id),
        invoice_date DATE NOT NULL,
        due_date DATE,
        total_amount NUMERIC(12, 2) DEFAULT 0,
        status TEXT DEFAULT 'pending',
        item_count INTEGER DEFAULT 0,
        created_at TIMESTAMP DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS invoice_items (
        id SERIAL PRIMARY KEY,
        invoice_id INTEGER NOT NULL REFERENCES invoices(id) ON DELETE CASCADE,
        item_id INTEGER REFERENCES inventory(id) ON DELETE SET NULL,
        description TEXT,
        quantity INTEGER DEFAULT 0,
        unit_cost NUMERIC(12, 2) DEFAULT 0,
        total_cost NUMERIC(12, 2) DEFAULT 0,
        category TEXT,
        upc TEXT,
        sku TEXT,
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS system_settings (
        id SERIAL PRIMARY KEY,
        setting_key TEXT UNIQUE NOT NULL,
        setting_value TEXT NOT NULL,
        description TEXT,
        data_type TEXT DEFAULT 'string',
        created_at TIMESTAMP DEFAULT NOW(),
        updated_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS activity_log (
        id SERIAL PRIMARY KEY,
        user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
        action TEXT NOT NULL,
        item_description TEXT,
        item_id INTEGER,
        details TEXT,
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sales_history (
        id SERIAL PRIMARY KEY,
        item_id INTEGER REFERENCES inventory(id) ON DELETE CASCADE,
        date DATE NOT NULL,
        sales_quantity INTEGER NOT NULL,
        revenue NUMERIC(12, 2) NOT NULL,
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS inventory_movement (
        id SERIAL PRIMARY KEY,
        item_id INTEGER REFERENCES inventory(id) ON DELETE CASCADE,
        week_start DATE NOT NULL,
        week_end DATE NOT NULL,
        units_in INTEGER NOT NULL,
        units_out INTEGER NOT NULL,
        net_movement INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT NOW()
    )
    """,
]

DEFAULT_VENDOR_SQL = """
    INSERT INTO vendors (id, name, contact_person, email, phone)
    VALUES (%s, 'Default Vendor', 'Contact Person', 'contact@vendor.com', '555-0123')
    ON CONFLICT (id) DO NOTHING
"""

# Keep the SERIAL sequence ahead of the explicitly inserted default vendor
SYNC_VENDOR_SEQUENCE_SQL = """
    SELECT setval(pg_get_serial_sequence('vendors', 'id'),
                  GREATEST((SELECT MAX(id) FROM vendors), 1))
"""


def init_database():
    """Create all tables and seed the default vendor"""
    conn = get_db_connection_with_retry()
    cursor = conn.cursor()

    try:
        for statement in SCHEMA_STATEMENTS:
            cursor.execute(statement)

        cursor.execute(DEFAULT_VENDOR_SQL, (DEFAULT_VENDOR_ID,))
        cursor.execute(SYNC_VENDOR_SEQUENCE_SQL)

        conn.commit()
        logger.info(f"Database initialized ({len(SCHEMA_STATEMENTS)} tables checked)")
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()
