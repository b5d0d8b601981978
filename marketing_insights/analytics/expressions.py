"""Reusable Polars expressions for dataset aggregations."""

import polars as pl


# =============================================================================
# SUMS
# =============================================================================


def count_totals_expr() -> list[pl.Expr]:
    """Summed delivery counts: impressions, clicks, conversions."""
    return [
        pl.col("impressions").sum().alias("impressions"),
        pl.col("clicks").sum().alias("clicks"),
        pl.col("conversions").sum().alias("conversions"),
    ]


def money_totals_expr() -> list[pl.Expr]:
    """Summed spend and revenue."""
    return [
        pl.col("spend").sum().alias("spend"),
        pl.col("revenue").sum().alias("revenue"),
    ]


def performance_totals_expr() -> list[pl.Expr]:
    """Counts and money together, for regional and device rollups."""
    return count_totals_expr() + money_totals_expr()


# =============================================================================
# RATIOS
# =============================================================================


def safe_ratio_expr(numerator: str, denominator: str) -> pl.Expr:
    """numerator / denominator, 0 when the denominator is <= 0."""
    return (
        pl.when(pl.col(denominator) > 0)
        .then(pl.col(numerator) / pl.col(denominator))
        .otherwise(pl.lit(0.0))
    )


def ctr_expr() -> pl.Expr:
    """CTR as a percentage: clicks / impressions * 100."""
    return (safe_ratio_expr("clicks", "impressions") * 100).alias("ctr")


def conversion_rate_expr() -> pl.Expr:
    """Conversion rate as a percentage: conversions / clicks * 100."""
    return (safe_ratio_expr("conversions", "clicks") * 100).alias("conversion_rate")


def share_of_total_expr(col: str, total: float, alias: str) -> pl.Expr:
    """Column value as a fraction of a scalar total (0 when total <= 0)."""
    if total <= 0:
        return pl.lit(0.0).alias(alias)
    return (pl.col(col) / total).alias(alias)


# =============================================================================
# AUDIENCE
# =============================================================================


def audience_share_expr() -> list[pl.Expr]:
    """Unweighted mean of percentage_of_audience and the cell count.

    The mean is a simple average over contributing cells, not weighted by
    impressions or by campaign.
    """
    return [
        pl.col("percentage_of_audience").mean().alias("avg_audience_pct"),
        pl.len().alias("cell_count"),
    ]
