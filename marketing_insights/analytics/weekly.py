"""Weekly aggregation: one chronological series across all campaigns."""

import polars as pl

from ..ingestion.frames import weekly_frame
from ..models.dataset import MarketingDataset
from .expressions import count_totals_expr, money_totals_expr
from .models import WeeklyPoint, WeeklyView


def weekly_totals_query(dataset: MarketingDataset) -> pl.LazyFrame:
    """Lazy query summing every campaign's weeks by week_start.

    week_start is a Date column, so the sort is chronological.
    """
    return (
        weekly_frame(dataset)
        .lazy()
        .group_by("week_start")
        .agg(money_totals_expr() + count_totals_expr())
        .sort("week_start")
    )


def build_weekly_view(dataset: MarketingDataset) -> WeeklyView:
    weekly = weekly_totals_query(dataset).collect()
    return WeeklyView(
        points=[
            WeeklyPoint(
                week_start=row["week_start"],
                revenue=row["revenue"],
                spend=row["spend"],
                impressions=row["impressions"],
                clicks=row["clicks"],
                conversions=row["conversions"],
            )
            for row in weekly.to_dicts()
        ]
    )
