"""Region aggregation: merge regional rows per location and geocode them."""

import logging

import polars as pl

from ..config import EncodingSettings
from ..ingestion.frames import regional_frame
from ..models.dataset import MarketingDataset
from .encoding import bubble_radius, spend_color
from .expressions import conversion_rate_expr, ctr_expr, performance_totals_expr
from .geo import GeoLookup
from .models import RegionPoint, RegionView

logger = logging.getLogger(__name__)

REGION_KEY = ["region", "country"]


def merge_regions(dataset: MarketingDataset) -> pl.DataFrame:
    """One row per (region, country) with summed counts and money.

    Rows keep the order in which each location first appears. Ratios are
    recomputed from the sums rather than taken from the source records.
    """
    return (
        regional_frame(dataset)
        .group_by(REGION_KEY, maintain_order=True)
        .agg(performance_totals_expr())
        .with_columns([ctr_expr(), conversion_rate_expr()])
    )


def build_region_view(
    dataset: MarketingDataset,
    geo: GeoLookup,
    encoding: EncodingSettings | None = None,
) -> RegionView:
    """Geocode merged regions and attach bubble radius and colour.

    Locations missing from the lookup table are left out of the points and
    reported in ``unmapped``. The radius and colour scales use the maxima
    over mapped points only.
    """
    encoding = encoding or EncodingSettings()
    merged = merge_regions(dataset)

    located: list[tuple[dict, float, float]] = []
    unmapped: list[tuple[str, str]] = []
    for row in merged.to_dicts():
        coords = geo.resolve(row["region"], row["country"])
        if coords is None:
            unmapped.append((row["region"], row["country"]))
            continue
        located.append((row, coords.lat, coords.lng))

    if unmapped:
        logger.warning(
            f"Dropped {len(unmapped)} unmapped location(s) from region view: {unmapped}"
        )

    max_revenue = max((row["revenue"] for row, _, _ in located), default=0.0)
    max_spend = max((row["spend"] for row, _, _ in located), default=0.0)

    points = [
        RegionPoint(
            region=row["region"],
            country=row["country"],
            lat=lat,
            lng=lng,
            impressions=row["impressions"],
            clicks=row["clicks"],
            conversions=row["conversions"],
            spend=row["spend"],
            revenue=row["revenue"],
            ctr=row["ctr"],
            conversion_rate=row["conversion_rate"],
            radius=bubble_radius(
                row["revenue"],
                max_revenue,
                encoding.min_radius,
                encoding.max_radius,
            ),
            color=spend_color(
                row["spend"],
                max_spend,
                encoding.low_color,
                encoding.high_color,
                encoding.zero_spend_color,
            ),
        )
        for row, lat, lng in located
    ]

    logger.debug(f"Region view: {len(points)} mapped, {len(unmapped)} dropped")
    return RegionView(points=points, unmapped=unmapped)
