from .frames import (
    campaigns_frame,
    demographic_frame,
    device_frame,
    regional_frame,
    weekly_frame,
)
from .loader import MarketingDataProvider

__all__ = [
    "MarketingDataProvider",
    "campaigns_frame",
    "demographic_frame",
    "device_frame",
    "regional_frame",
    "weekly_frame",
]
