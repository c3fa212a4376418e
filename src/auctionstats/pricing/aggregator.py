"""Windowed weighted aggregation of resolved unit prices."""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, localcontext

from auctionstats.config import StatsConfig
from auctionstats.domain.models import DAY_MS, ResolvedTrade, WindowStats
from auctionstats.pricing.outliers import filter_window
from auctionstats.pricing.robust import median

# Enough digits to hold the integer part of any finite float.
_ROUNDING_PRECISION = 400


def round_half_away(value: float | None) -> int | None:
    """Round to the nearest integer, sending ties away from zero.

    Non-finite values have no integer form and come back as None.
    """
    if value is None or not math.isfinite(value):
        return None
    with localcontext() as context:
        context.prec = _ROUNDING_PRECISION
        quantized = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(quantized)


def weighted_mean(values: Sequence[float], weights: Sequence[float]) -> float | None:
    """Return the weighted mean, rescaling by the largest value if the plain sum overflows."""
    total_weight = math.fsum(weights)
    if not values or total_weight <= 0:
        return None
    try:
        weighted_sum = math.fsum(value * weight for value, weight in zip(values, weights))
    except OverflowError:
        weighted_sum = math.inf
    if math.isfinite(weighted_sum):
        return weighted_sum / total_weight
    scale = max(abs(value) for value in values)
    scaled_sum = math.fsum((value / scale) * weight for value, weight in zip(values, weights))
    return scale * (scaled_sum / total_weight)


def window_cutoff_ms(now_ms: int, window_days: int) -> int:
    """Return the oldest timestamp that still belongs to the window."""
    return now_ms - window_days * DAY_MS


def trades_in_window(
    trades: Sequence[ResolvedTrade],
    now_ms: int,
    window_days: int,
) -> list[ResolvedTrade]:
    cutoff = window_cutoff_ms(now_ms, window_days)
    return [trade for trade in trades if trade.timestamp_ms >= cutoff]


def compute_window_stats(
    trades: Sequence[ResolvedTrade],
    window_days: int,
    now_ms: int,
    config: StatsConfig | None = None,
) -> WindowStats:
    """Compute outlier-filtered statistics for one trailing window.

    Statistics stay None when the window is empty or every trade in it is an
    outlier; `sample_count` always reports the raw in-window count.
    """
    in_window = trades_in_window(trades, now_ms, window_days)
    if not in_window:
        return WindowStats(window_days=window_days)

    partition = filter_window(in_window, window_days, config)
    if not partition.clean:
        return WindowStats(
            window_days=window_days,
            sample_count=len(in_window),
            outliers=partition.outliers,
        )

    unit_prices = [trade.unit_price for trade in partition.clean]
    amounts = [trade.amount for trade in partition.clean]
    total_units = math.fsum(amounts)
    return WindowStats(
        window_days=window_days,
        average=round_half_away(weighted_mean(unit_prices, amounts)),
        mean=round_half_away(weighted_mean(unit_prices, [1.0] * len(unit_prices))),
        median=round_half_away(median(unit_prices)),
        min=round_half_away(min(unit_prices)),
        max=round_half_away(max(unit_prices)),
        sample_count=len(in_window),
        clean_count=len(partition.clean),
        total_units=total_units,
        outliers=partition.outliers,
    )
