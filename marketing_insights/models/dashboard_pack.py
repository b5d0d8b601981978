"""DashboardPack - consolidated dashboard output for the presentation layer."""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

# Display precision for ratio fields (CTR, conversion rate, shares)
RATIO_DECIMALS = 2


def _round_ratios(rows: list[dict[str, Any]], keys: tuple[str, ...]) -> list[dict[str, Any]]:
    return [
        {k: round(v, RATIO_DECIMALS) if k in keys else v for k, v in row.items()}
        for row in rows
    ]


@dataclass
class DashboardPack:
    """Every dashboard view for one dataset, pre-computed.

    Money values are already whole units; ratio fields are rounded to
    RATIO_DECIMALS only when serialised.
    """

    # Metadata
    generated_at: datetime
    is_fallback: bool
    campaign_count: int

    # Top-line totals
    total_spend: int
    total_revenue: int
    total_impressions: int
    total_clicks: int
    total_conversions: int
    ctr: float
    conversion_rate: float
    roas: float

    # Region view
    region_points: list[dict[str, Any]]
    unmapped_regions: list[str]

    # Demographic view
    gender_totals: dict[str, dict[str, Any] | None]
    age_group_tables: dict[str, list[dict[str, Any]]]
    age_group_chart: list[dict[str, Any]]

    # Weekly view
    weekly_series: list[dict[str, Any]]

    # Device view
    device_comparison: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "meta": {
                "generated_at": self.generated_at.isoformat(),
                "is_fallback": self.is_fallback,
                "campaign_count": self.campaign_count,
            },
            "totals": {
                "spend": self.total_spend,
                "revenue": self.total_revenue,
                "impressions": self.total_impressions,
                "clicks": self.total_clicks,
                "conversions": self.total_conversions,
                "ctr": round(self.ctr, RATIO_DECIMALS),
                "conversion_rate": round(self.conversion_rate, RATIO_DECIMALS),
                "roas": round(self.roas, RATIO_DECIMALS),
            },
            "region": {
                "points": _round_ratios(
                    self.region_points, ("ctr", "conversion_rate", "radius")
                ),
                "unmapped": self.unmapped_regions,
                "dropped_count": len(self.unmapped_regions),
            },
            "demographic": {
                "male": self.gender_totals.get("male"),
                "female": self.gender_totals.get("female"),
                "male_age_groups": _round_ratios(
                    self.age_group_tables.get("male", []), ("ctr", "conversion_rate")
                ),
                "female_age_groups": _round_ratios(
                    self.age_group_tables.get("female", []), ("ctr", "conversion_rate")
                ),
                "age_group_chart": self.age_group_chart,
            },
            "weekly": [
                {**w, "week_start": w["week_start"].isoformat()}
                for w in self.weekly_series
            ],
            "device": _round_ratios(
                self.device_comparison,
                ("ctr", "conversion_rate", "percentage_of_traffic"),
            ),
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def get_executive_summary(self) -> dict[str, Any]:
        """Get condensed summary for dashboard headers.

        Returns key metrics only.
        """
        top_region = max(self.region_points, key=lambda p: p["revenue"], default=None)
        top_week = max(self.weekly_series, key=lambda w: w["revenue"], default=None)
        return {
            "campaign_count": self.campaign_count,
            "total_spend": self.total_spend,
            "total_revenue": self.total_revenue,
            "roas": round(self.roas, RATIO_DECIMALS),
            "ctr_pct": round(self.ctr, RATIO_DECIMALS),
            "top_region": top_region["region"] if top_region else None,
            "top_week": top_week["week_start"].isoformat() if top_week else None,
            "unmapped_region_count": len(self.unmapped_regions),
            "is_fallback": self.is_fallback,
        }
