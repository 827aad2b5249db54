"""
Reorder Service

Reorder quantity, safety stock, reorder point and priority for a single
inventory item. Pure arithmetic; the caller supplies settings and the
vendor lead time.
"""
import math
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Dict, Any


DEFAULT_REORDER_MULTIPLIER = 2
DEFAULT_MINIMUM_REORDER = 20
DEFAULT_SAFETY_STOCK_DAYS = 7
DEFAULT_LEAD_TIME_DAYS = 3

REORDER_SETTING_KEYS = ["reorder_multiplier", "minimum_reorder_quantity", "safety_stock_days"]

PRIORITY_URGENT = "Urgent"
PRIORITY_HIGH = "High"
PRIORITY_MEDIUM = "Medium"
PRIORITY_LOW = "Low"


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with .5 going away from zero (Python's round() is banker's)"""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _number(value) -> float:
    return float(value) if value else 0.0


def _whole(value):
    """2.0 -> 2; settings are parsed as floats but usually hold counts"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class ReorderCalculation:
    itemId: int
    description: str
    currentStock: int
    weeklySales: int
    reorderQuantity: int
    reorderPoint: int
    safetyStock: int
    leadTimeDays: float
    priority: str
    estimatedCost: float
    parameters: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def reorder_priority(current_stock: float, reorder_point: float) -> str:
    if current_stock == 0:
        return PRIORITY_URGENT
    if current_stock <= reorder_point * 0.5:
        return PRIORITY_HIGH
    if current_stock <= reorder_point:
        return PRIORITY_MEDIUM
    return PRIORITY_LOW


def calculate_reorder(
    item_id: int,
    description: str,
    remaining_stock: Optional[int],
    sales_weekly: Optional[int],
    unit_cost: Optional[float],
    vendor_lead_time_days: Optional[int] = None,
    settings: Optional[Dict[str, Optional[float]]] = None
) -> ReorderCalculation:
    """
    Compute the reorder suggestion for one item

    Args:
        settings: Numeric system settings; missing or zero values fall back
            to the defaults above.

    Returns:
        ReorderCalculation
    """
    settings = settings or {}
    multiplier = _whole(settings.get("reorder_multiplier") or DEFAULT_REORDER_MULTIPLIER)
    minimum = _whole(settings.get("minimum_reorder_quantity") or DEFAULT_MINIMUM_REORDER)
    safety_days = _whole(settings.get("safety_stock_days") or DEFAULT_SAFETY_STOCK_DAYS)
    lead_time = _whole(vendor_lead_time_days or DEFAULT_LEAD_TIME_DAYS)

    stock = remaining_stock or 0
    weekly = sales_weekly or 0

    base_reorder = max(weekly * multiplier, minimum)
    daily_sales = weekly / 7
    safety_stock = math.ceil(daily_sales * safety_days)
    reorder_point = safety_stock + math.ceil(daily_sales * lead_time)

    return ReorderCalculation(
        itemId=item_id,
        description=description,
        currentStock=stock,
        weeklySales=weekly,
        reorderQuantity=int(round_half_up(base_reorder)),
        reorderPoint=reorder_point,
        safetyStock=safety_stock,
        leadTimeDays=lead_time,
        priority=reorder_priority(stock, reorder_point),
        estimatedCost=round_half_up(base_reorder * _number(unit_cost), 2),
        parameters={
            "reorderMultiplier": multiplier,
            "minimumReorder": minimum,
            "safetyStockDays": safety_days,
            "leadTimeDays": lead_time,
        },
    )
