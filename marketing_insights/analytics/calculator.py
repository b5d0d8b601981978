"""Dashboard Engine - builds every dashboard view from one dataset."""

from dataclasses import dataclass, field
from datetime import datetime

from ..config import Coordinates, EncodingSettings
from ..ingestion.frames import campaigns_frame
from ..models.dashboard_pack import DashboardPack
from ..models.dataset import MarketingDataset
from .demographics import build_demographic_view
from .devices import build_device_view
from .geo import GeoLookup
from .models import CampaignTotals, DemographicView, DeviceView, RegionView, WeeklyView
from .regions import build_region_view
from .stats import percentage, round_money, safe_ratio
from .weekly import build_weekly_view


@dataclass
class DashboardEngine:
    """Aggregation engine for a marketing dataset.

    Every view is recomputed from the dataset on each call and the dataset
    is never mutated. Views are independent of one another.

    Attributes:
        dataset: Validated dataset from the provider (may be empty)
        coordinates: Static geocoding table for the region view
        encoding: Bubble radius and colour anchors
    """

    dataset: MarketingDataset
    coordinates: dict[str, Coordinates] = field(default_factory=dict)
    encoding: EncodingSettings = field(default_factory=EncodingSettings)

    def __post_init__(self) -> None:
        self.geo = GeoLookup(self.coordinates)

    # =========================================================================
    # CAMPAIGN TOTALS
    # =========================================================================

    def get_campaign_totals(self) -> CampaignTotals:
        """Portfolio totals summed from campaign-level figures.

        Ratios are recomputed from the sums rather than averaged.
        """
        campaigns = campaigns_frame(self.dataset)
        spend = float(campaigns["spend"].sum())
        revenue = float(campaigns["revenue"].sum())
        impressions = int(campaigns["impressions"].sum())
        clicks = int(campaigns["clicks"].sum())
        conversions = int(campaigns["conversions"].sum())

        return CampaignTotals(
            campaign_count=len(campaigns),
            spend=spend,
            revenue=revenue,
            impressions=impressions,
            clicks=clicks,
            conversions=conversions,
            ctr=percentage(clicks, impressions),
            conversion_rate=percentage(conversions, clicks),
            roas=safe_ratio(revenue, spend),
        )

    # =========================================================================
    # VIEWS
    # =========================================================================

    def get_region_view(self) -> RegionView:
        return build_region_view(self.dataset, self.geo, self.encoding)

    def get_demographic_view(self) -> DemographicView:
        return build_demographic_view(self.dataset)

    def get_weekly_view(self) -> WeeklyView:
        return build_weekly_view(self.dataset)

    def get_device_view(self) -> DeviceView:
        return build_device_view(self.dataset)

    # =========================================================================
    # DASHBOARD PACK (CONSOLIDATED OUTPUT)
    # =========================================================================

    def get_dashboard_pack(self) -> DashboardPack:
        """Run every view and package the results for the presentation layer.

        Money is rounded to whole units here; ratios keep full precision
        until DashboardPack.to_dict().
        """
        totals = self.get_campaign_totals()
        regions = self.get_region_view()
        demographics = self.get_demographic_view()
        weekly = self.get_weekly_view()
        devices = self.get_device_view()

        region_points = [
            {
                "region": p.region,
                "country": p.country,
                "lat": p.lat,
                "lng": p.lng,
                "revenue": round_money(p.revenue),
                "spend": round_money(p.spend),
                "impressions": p.impressions,
                "clicks": p.clicks,
                "conversions": p.conversions,
                "ctr": p.ctr,
                "conversion_rate": p.conversion_rate,
                "radius": p.radius,
                "color": p.color,
            }
            for p in regions.points
        ]

        gender_totals = {
            key: (
                {
                    "impressions": g.impressions,
                    "clicks": g.clicks,
                    "conversions": g.conversions,
                    "avg_audience_pct": g.avg_audience_pct,
                    "share": g.share,
                    "spend": round_money(g.spend),
                    "revenue": round_money(g.revenue),
                }
                if g is not None
                else None
            )
            for key, g in (("male", demographics.male), ("female", demographics.female))
        }

        age_tables = {
            key: [
                {
                    "age_group": r.age_group,
                    "impressions": r.impressions,
                    "clicks": r.clicks,
                    "conversions": r.conversions,
                    "ctr": r.ctr,
                    "conversion_rate": r.conversion_rate,
                }
                for r in rows
            ]
            for key, rows in (
                ("male", demographics.male_age_groups),
                ("female", demographics.female_age_groups),
            )
        }

        age_chart = [
            {"age_group": a.age_group, "spend": a.spend, "revenue": a.revenue}
            for a in demographics.age_group_spend
        ]

        weekly_series = [
            {
                "week_start": w.week_start,
                "revenue": round_money(w.revenue),
                "spend": round_money(w.spend),
            }
            for w in weekly
        ]

        device_comparison = [
            {
                "device": d.device,
                "impressions": d.impressions,
                "clicks": d.clicks,
                "conversions": d.conversions,
                "spend": round_money(d.spend),
                "revenue": round_money(d.revenue),
                "ctr": d.ctr,
                "conversion_rate": d.conversion_rate,
                "percentage_of_traffic": d.percentage_of_traffic,
            }
            for d in devices.devices
        ]

        return DashboardPack(
            generated_at=datetime.now(),
            is_fallback=self.dataset.is_fallback,
            campaign_count=totals.campaign_count,
            total_spend=round_money(totals.spend),
            total_revenue=round_money(totals.revenue),
            total_impressions=totals.impressions,
            total_clicks=totals.clicks,
            total_conversions=totals.conversions,
            ctr=totals.ctr,
            conversion_rate=totals.conversion_rate,
            roas=totals.roas,
            region_points=region_points,
            unmapped_regions=[f"{r}|{c}" for r, c in regions.unmapped],
            gender_totals=gender_totals,
            age_group_tables=age_tables,
            age_group_chart=age_chart,
            weekly_series=weekly_series,
            device_comparison=device_comparison,
        )
