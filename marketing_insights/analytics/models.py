"""Output models for dashboard aggregations."""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator


@dataclass(frozen=True)
class CampaignTotals:
    """Portfolio-level totals summed over every campaign."""

    campaign_count: int
    spend: float
    revenue: float
    impressions: int
    clicks: int
    conversions: int
    ctr: float  # percentage
    conversion_rate: float  # percentage
    roas: float  # revenue / spend


# =============================================================================
# REGION VIEW
# =============================================================================


@dataclass(frozen=True)
class RegionPoint:
    """Merged performance for one (region, country) location."""

    region: str
    country: str
    lat: float
    lng: float
    impressions: int
    clicks: int
    conversions: int
    spend: float
    revenue: float
    ctr: float
    conversion_rate: float
    radius: float  # bubble radius, sub-linear in revenue
    color: str  # rgb(r,g,b), interpolated on spend


@dataclass(frozen=True)
class RegionView:
    """Geo bubble-map data plus locations that could not be geocoded."""

    points: list[RegionPoint]
    unmapped: list[tuple[str, str]] = field(default_factory=list)

    @property
    def dropped_count(self) -> int:
        return len(self.unmapped)


# =============================================================================
# DEMOGRAPHIC VIEW
# =============================================================================


@dataclass(frozen=True)
class GenderTotals:
    """Delivery sums for one gender plus allocated spend/revenue."""

    gender: str
    impressions: int
    clicks: int
    conversions: int
    avg_audience_pct: float  # unweighted mean over contributing cells
    cell_count: int
    share: float  # avg_pct / (avg_pct_male + avg_pct_female)
    spend: float
    revenue: float


@dataclass(frozen=True)
class AgeGroupRow:
    """Per-gender table row for one age group."""

    age_group: str
    impressions: int
    clicks: int
    conversions: int
    ctr: float  # percentage
    conversion_rate: float  # percentage


@dataclass(frozen=True)
class AgeGroupSpend:
    """Chart row: spend/revenue allocated to an age group by impression share."""

    age_group: str
    impressions: int
    spend: int
    revenue: int


@dataclass(frozen=True)
class DemographicView:
    male: GenderTotals | None
    female: GenderTotals | None
    male_age_groups: list[AgeGroupRow]
    female_age_groups: list[AgeGroupRow]
    age_group_spend: list[AgeGroupSpend]


# =============================================================================
# WEEKLY VIEW
# =============================================================================


@dataclass(frozen=True)
class WeeklyPoint:
    week_start: date
    revenue: float
    spend: float
    impressions: int
    clicks: int
    conversions: int


@dataclass(frozen=True)
class WeeklyView:
    """Chronological weekly series; iterating it is restartable."""

    points: list[WeeklyPoint]

    def __iter__(self) -> Iterator[WeeklyPoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)


# =============================================================================
# DEVICE VIEW
# =============================================================================


@dataclass(frozen=True)
class DeviceStats:
    device: str
    impressions: int
    clicks: int
    conversions: int
    spend: float
    revenue: float
    ctr: float  # percentage
    conversion_rate: float  # percentage
    percentage_of_traffic: float  # impression share, percentage


@dataclass(frozen=True)
class DeviceView:
    devices: list[DeviceStats]
