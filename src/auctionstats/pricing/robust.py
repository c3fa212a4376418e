"""Robust statistics primitives over plain float sequences."""

from __future__ import annotations

import math
from collections.abc import Sequence

MODIFIED_Z_SCALE = 0.6745
MEAN_AD_SCALE = 1.253314


def median(values: Sequence[float]) -> float | None:
    """Return the middle value, averaging the two central values for even counts."""
    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return ordered[mid - 1] / 2 + ordered[mid] / 2


def mean(values: Sequence[float]) -> float | None:
    """Return the arithmetic mean, or None for an empty input."""
    if not values:
        return None
    return math.fsum(values) / len(values)


def mad(values: Sequence[float], center: float | None = None) -> float | None:
    """Return the median absolute deviation of `values` around `center`.

    The center defaults to the median of `values`.
    """
    if not values:
        return None
    if center is None:
        center = median(values)
    return median([abs(value - center) for value in values])


def modified_z_score(value: float, center: float, spread: float) -> float | None:
    """Return the modified z-score, or None when the spread is zero."""
    if spread == 0:
        return None
    return MODIFIED_Z_SCALE * (value - center) / spread


def mean_absolute_deviation(values: Sequence[float], center: float) -> float | None:
    if not values:
        return None
    count = len(values)
    return math.fsum(abs(value - center) / count for value in values)


def mean_ad_z_score(value: float, center: float, mean_spread: float) -> float | None:
    """Return the mean-absolute-deviation z-score used when MAD collapses to zero."""
    if mean_spread == 0:
        return None
    return (value - center) / (MEAN_AD_SCALE * mean_spread)


def relative_mad(center: float | None, spread: float | None) -> float:
    """Return MAD relative to the median magnitude; infinite for a zero or missing median."""
    if center is None or spread is None or center == 0:
        return float("inf")
    return spread / abs(center)
