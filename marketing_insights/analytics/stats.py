"""Shared derived-metric helpers for the aggregators."""

import locale
import math


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0 when the denominator is <= 0.

    Used for CTR, conversion rate and share computations so that empty
    groups never produce NaN or infinity.
    """
    if not denominator or denominator <= 0:
        return 0.0
    return numerator / denominator


def percentage(numerator: float, denominator: float) -> float:
    """Ratio expressed as a percentage (0-100 scale), full precision."""
    return safe_ratio(numerator, denominator) * 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up.

    Python's round() uses banker's rounding; dashboard figures are
    rounded the way the display layer does (2.5 -> 3, -2.5 -> -2).
    """
    return int(math.floor(value + 0.5))


def round_money(value: float) -> int:
    """Round a money value to the nearest whole currency unit."""
    return round_half_up(value)


def locale_sort_key(label: str) -> tuple[str, str]:
    """Sort key for locale-aware ascending ordering of labels.

    Letters compare case-insensitively first ("under 18" before "Unknown"),
    and only case differences fall back to lowercase-first. Collation of
    the folded label follows the process LC_COLLATE setting.
    """
    return locale.strxfrm(label.casefold()), locale.strxfrm(label.swapcase())
