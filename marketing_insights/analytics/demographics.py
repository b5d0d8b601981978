"""Demographic aggregation: gender totals, age-group tables and chart data."""

import polars as pl

from ..ingestion.frames import campaigns_frame, demographic_frame
from ..models.dataset import MarketingDataset
from .expressions import (
    audience_share_expr,
    conversion_rate_expr,
    count_totals_expr,
    ctr_expr,
)
from .models import AgeGroupRow, AgeGroupSpend, DemographicView, GenderTotals
from .stats import locale_sort_key, round_money, safe_ratio

MALE = "Male"
FEMALE = "Female"
GENDERS = (MALE, FEMALE)


class DemographicAggregator:
    """Gender and age-group rollups over every campaign's demographic cells.

    Spend and revenue are not reported per cell, so they are allocated
    from the campaign totals: between genders by average audience share,
    and between age groups by impression share.
    """

    def __init__(self, dataset: MarketingDataset):
        self.cells = demographic_frame(dataset)
        campaigns = campaigns_frame(dataset)
        self.total_spend = float(campaigns["spend"].sum())
        self.total_revenue = float(campaigns["revenue"].sum())
        self.total_impressions = int(campaigns["impressions"].sum())

    # =========================================================================
    # GENDER TOTALS
    # =========================================================================

    def gender_totals(self) -> dict[str, GenderTotals]:
        """Male and Female totals with proportionally allocated money.

        share_g = avg_pct_g / (avg_pct_male + avg_pct_female)
        spend_g = share_g * total campaign spend

        Cells with any other gender label are ignored here. When both
        average percentages are 0, every share and allocation is 0.
        """
        grouped = {
            row["gender"]: row
            for row in (
                self.cells.filter(pl.col("gender").is_in(list(GENDERS)))
                .group_by("gender")
                .agg(count_totals_expr() + audience_share_expr())
                .to_dicts()
            )
        }

        avg_pct = {
            g: grouped.get(g, {}).get("avg_audience_pct") or 0.0 for g in GENDERS
        }
        pct_total = sum(avg_pct.values())

        totals: dict[str, GenderTotals] = {}
        for gender in GENDERS:
            row = grouped.get(gender, {})
            share = safe_ratio(avg_pct[gender], pct_total)
            totals[gender] = GenderTotals(
                gender=gender,
                impressions=row.get("impressions", 0),
                clicks=row.get("clicks", 0),
                conversions=row.get("conversions", 0),
                avg_audience_pct=avg_pct[gender],
                cell_count=row.get("cell_count", 0),
                share=share,
                spend=share * self.total_spend,
                revenue=share * self.total_revenue,
            )
        return totals

    # =========================================================================
    # AGE GROUPS
    # =========================================================================

    def age_group_rows(self, gender: str) -> list[AgeGroupRow]:
        """Per-gender table of age groups with CTR and conversion rate.

        Rows are sorted by age-group label in locale-aware ascending order.
        """
        grouped = (
            self.cells.filter(pl.col("gender") == gender)
            .group_by("age_group")
            .agg(count_totals_expr())
            .with_columns([ctr_expr(), conversion_rate_expr()])
        )

        rows = [
            AgeGroupRow(
                age_group=row["age_group"],
                impressions=row["impressions"],
                clicks=row["clicks"],
                conversions=row["conversions"],
                ctr=row["ctr"],
                conversion_rate=row["conversion_rate"],
            )
            for row in grouped.to_dicts()
        ]
        return sorted(rows, key=lambda r: locale_sort_key(r.age_group))

    def age_group_spend(self) -> list[AgeGroupSpend]:
        """Spend and revenue per age group, allocated by impression share.

        spend_age = total campaign spend * (age impressions / total campaign
        impressions), rounded to whole currency units. Gender is ignored.
        The denominator is the campaign-level impression total, so the
        allocations only sum to total spend when every campaign impression
        is covered by some age group.
        """
        grouped = self.cells.group_by("age_group").agg(
            pl.col("impressions").sum().alias("impressions")
        )

        rows = []
        for row in grouped.to_dicts():
            share = safe_ratio(row["impressions"], self.total_impressions)
            rows.append(
                AgeGroupSpend(
                    age_group=row["age_group"],
                    impressions=row["impressions"],
                    spend=round_money(self.total_spend * share),
                    revenue=round_money(self.total_revenue * share),
                )
            )
        return sorted(rows, key=lambda r: locale_sort_key(r.age_group))

    def build(self) -> DemographicView:
        totals = self.gender_totals()
        return DemographicView(
            male=totals[MALE],
            female=totals[FEMALE],
            male_age_groups=self.age_group_rows(MALE),
            female_age_groups=self.age_group_rows(FEMALE),
            age_group_spend=self.age_group_spend(),
        )


def build_demographic_view(dataset: MarketingDataset) -> DemographicView:
    return DemographicAggregator(dataset).build()
