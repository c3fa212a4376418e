"""Unit-price resolution, outlier rejection and window aggregation."""

from .aggregator import compute_window_stats, round_half_away, trades_in_window, window_cutoff_ms
from .normalizer import normalize_trade, normalize_trades, parse_timestamp_ms
from .outliers import WindowPartition, detect_outliers, filter_window
from .pipeline import compute_item_stats
from .resolver import candidate_stats, choose_interpretation, resolve_unit_prices
from .robust import (
    mad,
    mean,
    mean_ad_z_score,
    mean_absolute_deviation,
    median,
    modified_z_score,
    relative_mad,
)

__all__ = [
    "WindowPartition",
    "candidate_stats",
    "choose_interpretation",
    "compute_item_stats",
    "compute_window_stats",
    "detect_outliers",
    "filter_window",
    "mad",
    "mean",
    "mean_ad_z_score",
    "mean_absolute_deviation",
    "median",
    "modified_z_score",
    "normalize_trade",
    "normalize_trades",
    "parse_timestamp_ms",
    "relative_mad",
    "resolve_unit_prices",
    "round_half_away",
    "trades_in_window",
    "window_cutoff_ms",
]
