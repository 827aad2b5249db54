"""
System Settings Domain Model

Settings are stored as text with a data_type tag and parsed on read.
"""
from pydantic import BaseModel
from typing import Optional, Any, Union, List
from datetime import datetime


class DefaultSetting(BaseModel):
    key: str
    value: str
    description: str
    type: str = "number"


DEFAULT_SETTINGS: List[DefaultSetting] = [
    DefaultSetting(key="low_stock_threshold", value="10", description="Low stock threshold"),
    DefaultSetting(key="expiration_warning_days", value="3", description="Days before expiration to show warning"),
    DefaultSetting(key="reorder_multiplier", value="2", description="Reorder quantity multiplier based on weekly sales"),
    DefaultSetting(key="minimum_reorder_quantity", value="20", description="Minimum reorder quantity"),
    DefaultSetting(key="safety_stock_days", value="7", description="Safety stock in days"),
    DefaultSetting(key="lead_time_days", value="3", description="Default vendor lead time in days"),
]


class SettingValue(BaseModel):
    value: Union[float, bool, str, None]
    description: Optional[str] = None
    type: str
    updated_at: Optional[datetime] = None


class SettingUpdate(BaseModel):
    value: Any = None


def parse_setting_value(raw: Optional[str], data_type: str) -> Union[float, bool, str, None]:
    """Convert a stored text value to its typed form"""
    if data_type == "number":
        try:
            return float(raw)
        except (TypeError, ValueError):
            return None
    if data_type == "boolean":
        return raw == "true"
    return raw


def serialize_setting_value(value: Any) -> str:
    """Text form stored in system_settings.setting_value"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
