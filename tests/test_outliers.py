from __future__ import annotations

from auctionstats.config import StatsConfig
from auctionstats.domain.models import ResolvedTrade, Trade
from auctionstats.pricing.outliers import detect_outliers, filter_window


def _resolved(unit_prices: list[float]) -> list[ResolvedTrade]:
    return [
        ResolvedTrade(
            trade=Trade(timestamp_ms=1_700_000_000_000 + index, price=price, amount=1.0),
            unit_price=price,
        )
        for index, price in enumerate(unit_prices)
    ]


def test_flags_single_extreme_price_among_identical_prices() -> None:
    flags = detect_outliers([100, 100, 100, 100, 5000], threshold=2.5, min_samples=5)

    assert flags == [False, False, False, False, True]


def test_flags_only_extreme_price_in_dispersed_sample() -> None:
    flags = detect_outliers([100, 102, 98, 101, 99, 100, 500])

    assert flags == [False, False, False, False, False, False, True]


def test_small_samples_are_never_flagged() -> None:
    assert detect_outliers([1, 1000, 1_000_000, 5], min_samples=5) == [False] * 4


def test_identical_prices_are_never_flagged() -> None:
    assert detect_outliers([42.0] * 8) == [False] * 8


def test_mean_ad_fallback_also_flags_wide_values_over_a_shared_price() -> None:
    assert detect_outliers([1, 1, 1, 2, 3]) == [False, False, False, False, True]


def test_empty_input_flags_nothing() -> None:
    assert detect_outliers([]) == []


def test_filter_window_builds_outlier_records() -> None:
    trades = _resolved([100, 102, 98, 101, 99, 100, 500])

    partition = filter_window(trades, window_days=7)

    assert len(partition.clean) == 6
    assert len(partition.outliers) == 1
    record = partition.outliers[0]
    assert record.unit_price == 500
    assert record.window_days == 7
    assert record.timestamp_ms == 1_700_000_000_006
    assert record.reason == "|z|=269.80 > 2.5"


def test_filter_window_respects_configured_threshold_and_minimum() -> None:
    trades = _resolved([100, 102, 98, 101, 99, 100, 500])

    lenient = filter_window(trades, 1, StatsConfig(outlier_threshold=500.0))
    too_few = filter_window(trades, 1, StatsConfig(min_outlier_samples=8))

    assert lenient.outliers == ()
    assert too_few.outliers == ()
    assert len(too_few.clean) == 7
