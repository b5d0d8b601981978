"""Device aggregation: merge device performance across campaigns."""

import polars as pl

from ..ingestion.frames import device_frame
from ..models.dataset import MarketingDataset
from .expressions import (
    conversion_rate_expr,
    ctr_expr,
    performance_totals_expr,
    share_of_total_expr,
)
from .models import DeviceStats, DeviceView


def build_device_view(dataset: MarketingDataset) -> DeviceView:
    """One row per device label, in first-appearance order.

    CTR and conversion rate are recomputed from the summed counts, and
    percentage_of_traffic is the device's share of all device impressions.
    """
    frame = device_frame(dataset)
    total_impressions = frame["impressions"].sum()

    merged = (
        frame.group_by("device", maintain_order=True)
        .agg(performance_totals_expr())
        .with_columns(
            [
                ctr_expr(),
                conversion_rate_expr(),
                share_of_total_expr("impressions", total_impressions, "traffic_share"),
            ]
        )
        .with_columns((pl.col("traffic_share") * 100).alias("percentage_of_traffic"))
    )

    return DeviceView(
        devices=[
            DeviceStats(
                device=row["device"],
                impressions=row["impressions"],
                clicks=row["clicks"],
                conversions=row["conversions"],
                spend=row["spend"],
                revenue=row["revenue"],
                ctr=row["ctr"],
                conversion_rate=row["conversion_rate"],
                percentage_of_traffic=row["percentage_of_traffic"],
            )
            for row in merged.to_dicts()
        ]
    )
