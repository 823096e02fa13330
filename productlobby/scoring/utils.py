"""Numeric helpers shared by the calculators."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Sequence


def clamp(value: float, lo: float, hi: float) -> float:
    """Constrain ``value`` to the closed interval ``[lo, hi]``."""
    return max(lo, min(hi, value))


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves towards positive infinity, e.g. 2.5 -> 3 and -2.5 -> -2.

    The built-in :func:`round` rounds halves to even, which makes displayed
    percentages drift (``round(62.5) == 62``).
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))


def calculate_percentile(values: Sequence[float], percentile: float) -> float:
    """Percentile by linear interpolation between closest ranks.

    Args:
        values: Sample values; not modified
        percentile: Percentile in ``[0, 100]``

    Returns:
        Interpolated value, or 0 for an empty sample
    """
    if not values:
        return 0.0
    ordered = sorted(values)
    index = (percentile / 100) * (len(ordered) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(ordered[lower])
    weight = index - lower
    return ordered[lower] * (1 - weight) + ordered[upper] * weight


def percentage_change(previous: float, current: float) -> int:
    """Whole-number percentage change from ``previous`` to ``current``.

    A zero baseline reports 100 when anything happened and 0 otherwise.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return round_int((current - previous) / previous * 100)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime, matching stored timestamps."""
    return datetime.now(timezone.utc)
