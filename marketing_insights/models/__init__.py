from .dashboard_pack import DashboardPack
from .dataset import (
    Campaign,
    DemographicBreakdown,
    DemographicPerformance,
    DevicePerformance,
    MarketingDataset,
    RegionalPerformance,
    WeeklyPerformance,
)

__all__ = [
    "Campaign",
    "DashboardPack",
    "DemographicBreakdown",
    "DemographicPerformance",
    "DevicePerformance",
    "MarketingDataset",
    "RegionalPerformance",
    "WeeklyPerformance",
]
