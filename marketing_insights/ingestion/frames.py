"""Flatten the nested marketing dataset into Polars DataFrames."""

import polars as pl

from ..models.dataset import MarketingDataset, RegionalPerformance

CAMPAIGN_SCHEMA: dict[str, pl.DataType] = {
    "campaign_id": pl.Int64,
    "name": pl.Utf8,
    "status": pl.Utf8,
    "medium": pl.Utf8,
    "budget": pl.Float64,
    "spend": pl.Float64,
    "revenue": pl.Float64,
    "impressions": pl.Int64,
    "clicks": pl.Int64,
    "conversions": pl.Int64,
}

WEEKLY_SCHEMA: dict[str, pl.DataType] = {
    "campaign_id": pl.Int64,
    "week_start": pl.Date,
    "week_end": pl.Date,
    "impressions": pl.Int64,
    "clicks": pl.Int64,
    "conversions": pl.Int64,
    "spend": pl.Float64,
    "revenue": pl.Float64,
}

REGIONAL_SCHEMA: dict[str, pl.DataType] = {
    "campaign_id": pl.Int64,
    "region": pl.Utf8,
    "country": pl.Utf8,
    "impressions": pl.Int64,
    "clicks": pl.Int64,
    "conversions": pl.Int64,
    "spend": pl.Float64,
    "revenue": pl.Float64,
}

DEMOGRAPHIC_SCHEMA: dict[str, pl.DataType] = {
    "campaign_id": pl.Int64,
    "gender": pl.Utf8,
    "age_group": pl.Utf8,
    "percentage_of_audience": pl.Float64,
    "impressions": pl.Int64,
    "clicks": pl.Int64,
    "conversions": pl.Int64,
}

DEVICE_SCHEMA: dict[str, pl.DataType] = {
    "campaign_id": pl.Int64,
    "device": pl.Utf8,
    "impressions": pl.Int64,
    "clicks": pl.Int64,
    "conversions": pl.Int64,
    "spend": pl.Float64,
    "revenue": pl.Float64,
}


def _frame(rows: list[dict], schema: dict[str, pl.DataType]) -> pl.DataFrame:
    """Build a frame with a fixed schema, including when rows is empty."""
    return pl.from_dicts(rows, schema=schema)


def campaigns_frame(dataset: MarketingDataset) -> pl.DataFrame:
    rows = [
        {
            "campaign_id": c.id,
            "name": c.name,
            "status": c.status,
            "medium": c.medium,
            "budget": c.budget,
            "spend": c.spend,
            "revenue": c.revenue,
            "impressions": c.impressions,
            "clicks": c.clicks,
            "conversions": c.conversions,
        }
        for c in dataset.campaigns
    ]
    return _frame(rows, CAMPAIGN_SCHEMA)


def weekly_frame(dataset: MarketingDataset) -> pl.DataFrame:
    rows = [
        {"campaign_id": c.id, **w.model_dump()}
        for c in dataset.campaigns
        for w in c.weekly_performance
    ]
    return _frame(rows, WEEKLY_SCHEMA)


def _regional_rows(
    records: list[RegionalPerformance], campaign_id: int | None
) -> list[dict]:
    return [
        {
            "campaign_id": campaign_id,
            "region": r.region,
            "country": r.country,
            "impressions": r.impressions,
            "clicks": r.clicks,
            "conversions": r.conversions,
            "spend": r.spend,
            "revenue": r.revenue,
        }
        for r in records
    ]


def regional_frame(dataset: MarketingDataset) -> pl.DataFrame:
    """Regional rows across all campaigns.

    When the dataset carries a top-level ``region_performance`` list, that
    list is the source and campaign_id is null. Otherwise rows come from
    each campaign's ``regional_performance``.
    """
    if dataset.region_performance is not None:
        rows = _regional_rows(dataset.region_performance, None)
    else:
        rows = [
            row
            for c in dataset.campaigns
            for row in _regional_rows(c.regional_performance, c.id)
        ]
    return _frame(rows, REGIONAL_SCHEMA)


def demographic_frame(dataset: MarketingDataset) -> pl.DataFrame:
    rows = [
        {
            "campaign_id": c.id,
            "gender": d.gender,
            "age_group": d.age_group,
            "percentage_of_audience": d.percentage_of_audience,
            "impressions": d.performance.impressions,
            "clicks": d.performance.clicks,
            "conversions": d.performance.conversions,
        }
        for c in dataset.campaigns
        for d in c.demographic_breakdown
    ]
    return _frame(rows, DEMOGRAPHIC_SCHEMA)


def device_frame(dataset: MarketingDataset) -> pl.DataFrame:
    rows = [
        {
            "campaign_id": c.id,
            "device": d.device,
            "impressions": d.impressions,
            "clicks": d.clicks,
            "conversions": d.conversions,
            "spend": d.spend,
            "revenue": d.revenue,
        }
        for c in dataset.campaigns
        for d in c.device_performance
    ]
    return _frame(rows, DEVICE_SCHEMA)
