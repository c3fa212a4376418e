"""Median/MAD outlier rejection within one window."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from auctionstats.config import StatsConfig
from auctionstats.domain.models import OutlierRecord, ResolvedTrade
from auctionstats.pricing.robust import (
    mad,
    mean_absolute_deviation,
    mean_ad_z_score,
    median,
    modified_z_score,
)


@dataclass(frozen=True)
class WindowPartition:
    """Clean trades and flagged outliers of one window."""

    clean: tuple[ResolvedTrade, ...]
    outliers: tuple[OutlierRecord, ...]


def outlier_scores(
    unit_prices: Sequence[float],
    min_samples: int = 5,
) -> list[float | None]:
    """Return per-price modified z-scores, or None where detection does not apply.

    When more than half of the prices sit exactly on the median the MAD is zero;
    scores then fall back to the mean absolute deviation, which is also zero
    when every price is identical.

    The fallback is deliberate. A plain "no MAD, no outliers" rule would keep a
    lone 50x listing among identical prices, so this rule rejects it instead.
    As a side effect, small spreads over a shared price can be flagged too:
    in [1, 1, 1, 2, 3] the 3 is rejected.
    """
    if len(unit_prices) < min_samples:
        return [None] * len(unit_prices)
    center = median(unit_prices)
    spread = mad(unit_prices, center)
    if center is None or spread is None:
        return [None] * len(unit_prices)
    if spread > 0:
        return [modified_z_score(price, center, spread) for price in unit_prices]
    mean_spread = mean_absolute_deviation(unit_prices, center)
    if not mean_spread:
        return [None] * len(unit_prices)
    return [mean_ad_z_score(price, center, mean_spread) for price in unit_prices]


def detect_outliers(
    unit_prices: Sequence[float],
    threshold: float = 2.5,
    min_samples: int = 5,
) -> list[bool]:
    """Flag prices whose absolute modified z-score exceeds `threshold`."""
    return [
        score is not None and abs(score) > threshold
        for score in outlier_scores(unit_prices, min_samples)
    ]


def filter_window(
    trades: Sequence[ResolvedTrade],
    window_days: int,
    config: StatsConfig | None = None,
) -> WindowPartition:
    """Split a window's trades into clean trades and outlier records."""
    settings = config or StatsConfig()
    scores = outlier_scores([trade.unit_price for trade in trades], settings.min_outlier_samples)
    clean: list[ResolvedTrade] = []
    outliers: list[OutlierRecord] = []
    for trade, score in zip(trades, scores, strict=True):
        if score is None or abs(score) <= settings.outlier_threshold:
            clean.append(trade)
            continue
        outliers.append(
            OutlierRecord(
                timestamp_ms=trade.timestamp_ms,
                price=trade.price,
                amount=trade.amount,
                unit_price=trade.unit_price,
                window_days=window_days,
                reason=f"|z|={abs(score):.2f} > {settings.outlier_threshold:g}",
            )
        )
    return WindowPartition(clean=tuple(clean), outliers=tuple(outliers))
