"""
Reports API Endpoints
Waste, consumption and margin reports by category
"""
from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.services.report_service import ReportService


router = APIRouter(
    prefix="/api/reports",
    tags=["Reports"],
    dependencies=[Depends(get_current_user)]
)


@router.get("/waste")
async def get_waste_report():
    """Expired stock grouped by category"""
    return ReportService().waste_report()


@router.get("/consumption")
async def get_consumption_report():
    return ReportService().consumption_report()


@router.get("/margins")
async def get_margin_report():
    """Per-item and per-category gross margins"""
    return ReportService().margin_report()
