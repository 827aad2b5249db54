"""
Dashboard API Endpoints
"""
from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.services.report_service import ReportService


router = APIRouter(
    prefix="/api/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(get_current_user)]
)


@router.get("/stats")
async def get_stats():
    return ReportService().dashboard_stats()


@router.get("/alerts")
async def get_alerts():
    """Up to 10 out-of-stock, low-stock or expiring items, most severe first"""
    return ReportService().dashboard_alerts()


@router.get("/activity")
async def get_activity():
    return ReportService().recent_activity()
