"""Bubble map visual encodings: radius from revenue, colour from spend."""

import numpy as np

from ..config import RGB
from .stats import round_half_up

DEFAULT_MIN_RADIUS = 4.0
DEFAULT_MAX_RADIUS = 20.0
DEFAULT_LOW_COLOR: RGB = (59, 130, 246)
DEFAULT_HIGH_COLOR: RGB = (239, 68, 68)
DEFAULT_ZERO_SPEND_COLOR = "#60A5FA"


def bubble_radius(
    revenue: float,
    max_revenue: float,
    min_radius: float = DEFAULT_MIN_RADIUS,
    max_radius: float = DEFAULT_MAX_RADIUS,
) -> float:
    """Radius grows with the square root of the revenue share.

    Formula: min_radius + sqrt(revenue / max_revenue) * (max_radius - min_radius)

    Revenue <= 0 and a non-positive max_revenue both map to min_radius.
    """
    if max_revenue <= 0:
        return min_radius
    t = np.sqrt(max(0.0, revenue) / max_revenue)
    return float(min_radius + t * (max_radius - min_radius))


def spend_color(
    spend: float,
    max_spend: float,
    low: RGB = DEFAULT_LOW_COLOR,
    high: RGB = DEFAULT_HIGH_COLOR,
    zero_color: str = DEFAULT_ZERO_SPEND_COLOR,
) -> str:
    """Linear interpolation between low and high anchors on spend / max_spend.

    The fraction is clamped to [0, 1]. When max_spend <= 0 every bubble
    gets zero_color.
    """
    if max_spend <= 0:
        return zero_color
    t = float(np.clip(spend / max_spend, 0.0, 1.0))
    r, g, b = (
        round_half_up(lo + t * (hi - lo)) for lo, hi in zip(low, high)
    )
    return f"rgb({r},{g},{b})"
