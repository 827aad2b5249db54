"""
Fresh Choice Inventory - Backend API
Inventory, vendor, invoice and shopping list management
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from app.core.config import settings
from app.core.database import get_db_connection_with_retry, CONNECTION_TIMEOUT
from app.core.errors import register_exception_handlers
from app.core.schema import init_database

# Import API routers
from app.api import auth, inventory, vendors, invoices, shopping_list, settings as settings_api, reports, dashboard, analytics


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.INIT_DB_ON_STARTUP:
        try:
            init_database()
        except Exception:
            # Keep serving; /api/health reports the database as disconnected
            logger.exception("Database initialization failed")
    yield


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

register_exception_handlers(app)

# Include API routers
app.include_router(auth.router)
app.include_router(inventory.router)
app.include_router(vendors.router)
app.include_router(invoices.router)
app.include_router(shopping_list.router)
app.include_router(settings_api.router)
app.include_router(reports.router)
app.include_router(dashboard.router)
app.include_router(analytics.router)


@app.get("/api/health")
async def health():
    """Health check endpoint - tests database connectivity"""
    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Minimal retry for a fast check
        conn = get_db_connection_with_retry(max_retries=1, retry_delay=0.5)
        cursor = conn.cursor()

        db_start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        db_latency_ms = round((time.time() - db_start) * 1000, 2)

        cursor.close()
        conn.close()
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    return {
        "status": "OK",
        "message": "Fresh Choice Inventory API is running",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
            "connection_timeout_s": CONNECTION_TIMEOUT
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=True)
