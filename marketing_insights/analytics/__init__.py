"""Analytics module for marketing dataset aggregation."""

from .calculator import DashboardEngine
from .demographics import DemographicAggregator
from .geo import GeoLookup
from .models import (
    AgeGroupRow,
    AgeGroupSpend,
    CampaignTotals,
    DemographicView,
    DeviceStats,
    DeviceView,
    GenderTotals,
    RegionPoint,
    RegionView,
    WeeklyPoint,
    WeeklyView,
)
from .stats import percentage, round_money, safe_ratio

__all__ = [
    "AgeGroupRow",
    "AgeGroupSpend",
    "CampaignTotals",
    "DashboardEngine",
    "DemographicAggregator",
    "DemographicView",
    "DeviceStats",
    "DeviceView",
    "GenderTotals",
    "GeoLookup",
    "RegionPoint",
    "RegionView",
    "WeeklyPoint",
    "WeeklyView",
    "percentage",
    "round_money",
    "safe_ratio",
]
