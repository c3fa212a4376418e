"""Normalize, resolve and aggregate one item's trade batch."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from auctionstats.config import StatsConfig
from auctionstats.domain.models import ItemStats, RawTrade, WindowStats
from auctionstats.pricing.aggregator import compute_window_stats
from auctionstats.pricing.normalizer import normalize_trades
from auctionstats.pricing.resolver import resolve_unit_prices


def compute_item_stats(
    item_key: str,
    item_id: str,
    raw_trades: Iterable[RawTrade | Mapping[str, Any]],
    now_ms: int,
    config: StatsConfig | None = None,
) -> ItemStats:
    """Compute every configured window from a single acquisition batch."""
    settings = config or StatsConfig()
    trades = normalize_trades(raw_trades)
    resolution = resolve_unit_prices(trades, settings)
    if resolution is None:
        windows = {days: WindowStats(window_days=days) for days in settings.windows}
        return ItemStats(item_key=item_key, item_id=item_id, interpretation=None, windows=windows)

    windows = {
        days: compute_window_stats(resolution.trades, days, now_ms, settings)
        for days in settings.windows
    }
    return ItemStats(
        item_key=item_key,
        item_id=item_id,
        interpretation=resolution.interpretation,
        windows=windows,
    )
