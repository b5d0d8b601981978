"""Pydantic models for the nested marketing dataset."""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class WeeklyPerformance(BaseModel):
    """One week of delivery for a single campaign."""

    model_config = ConfigDict(frozen=True)

    week_start: date
    week_end: date
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)
    spend: float = Field(default=0.0, ge=0)
    revenue: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _check_week_bounds(self) -> "WeeklyPerformance":
        if self.week_start > self.week_end:
            raise ValueError(
                f"week_start {self.week_start} is after week_end {self.week_end}"
            )
        return self


class RegionalPerformance(BaseModel):
    """Campaign performance for one region/country pair.

    The ratio fields are informational; aggregation recomputes them from
    the absolute counts.
    """

    model_config = ConfigDict(frozen=True)

    region: str
    country: str
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    spend: float = 0.0
    revenue: float = 0.0
    ctr: Optional[float] = None
    conversion_rate: Optional[float] = None
    cpc: Optional[float] = None
    cpa: Optional[float] = None
    roas: Optional[float] = None


class DemographicPerformance(BaseModel):
    model_config = ConfigDict(frozen=True)

    impressions: int = 0
    clicks: int = 0
    conversions: int = 0


class DemographicBreakdown(BaseModel):
    """Gender x age cell of a campaign audience.

    percentage_of_audience values are independent weights and are not
    required to sum to 100 within a campaign.
    """

    model_config = ConfigDict(frozen=True)

    gender: str
    age_group: str
    percentage_of_audience: float = Field(default=0.0, ge=0, le=100)
    performance: DemographicPerformance = Field(default_factory=DemographicPerformance)


class DevicePerformance(BaseModel):
    model_config = ConfigDict(frozen=True)

    device: str
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    spend: float = 0.0
    revenue: float = 0.0
    ctr: Optional[float] = None
    conversion_rate: Optional[float] = None
    percentage_of_traffic: Optional[float] = None


class Campaign(BaseModel):
    """Single marketing campaign with its child performance collections."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    status: Optional[str] = None
    objective: Optional[str] = None
    medium: Optional[str] = None
    format: Optional[str] = None
    budget: float = 0.0
    spend: float = 0.0
    revenue: float = 0.0
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0

    weekly_performance: list[WeeklyPerformance] = Field(default_factory=list)
    regional_performance: list[RegionalPerformance] = Field(default_factory=list)
    demographic_breakdown: list[DemographicBreakdown] = Field(default_factory=list)
    device_performance: list[DevicePerformance] = Field(default_factory=list)

    @field_validator(
        "weekly_performance",
        "regional_performance",
        "demographic_breakdown",
        "device_performance",
        mode="before",
    )
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class MarketingDataset(BaseModel):
    """Top-level payload served by the marketing data endpoint.

    Only ``campaigns`` (and the optional pre-aggregated
    ``region_performance``) feed the aggregators; the remaining top-level
    sections are carried through untouched.
    """

    model_config = ConfigDict(frozen=True)

    campaigns: list[Campaign] = Field(default_factory=list)
    region_performance: Optional[list[RegionalPerformance]] = None

    message: Optional[str] = None
    company_info: Optional[dict[str, Any]] = None
    marketing_stats: Optional[dict[str, Any]] = None
    market_insights: Optional[dict[str, Any]] = None
    filters: Optional[dict[str, Any]] = None

    # Set by the provider, never read from the payload
    is_fallback: bool = Field(default=False, exclude=True)

    @field_validator("campaigns", mode="before")
    @classmethod
    def _null_campaigns(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="before")
    @classmethod
    def _drop_fallback_flag(cls, data: Any) -> Any:
        if isinstance(data, dict) and "is_fallback" in data:
            data = {k: v for k, v in data.items() if k != "is_fallback"}
        return data
