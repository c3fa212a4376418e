from __future__ import annotations

import json

from auctionstats.config import StatsConfig
from auctionstats.domain.models import DAY_MS, UnitInterpretation
from auctionstats.pricing.pipeline import compute_item_stats

NOW_MS = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


def _raw(price: float, age_ms: int, amount: float | None = 1) -> dict:
    record = {"time": NOW_MS - age_ms, "price": price}
    if amount is not None:
        record["amount"] = amount
    return record


def _mixed_history() -> list[dict]:
    recent = [_raw(price, (index + 1) * HOUR_MS) for index, price in enumerate([100, 101, 99, 100, 130])]
    older = [
        _raw(price, 3 * DAY_MS + index * HOUR_MS)
        for index, price in enumerate([130, 135, 128, 132, 125, 131])
    ]
    return recent + older


def test_wider_window_sample_count_is_a_superset() -> None:
    stats = compute_item_stats("kit", "abc12", _mixed_history(), NOW_MS)

    day = stats.window(1)
    week = stats.window(7)
    assert day.sample_count == 5
    assert week.sample_count == 11
    assert week.sample_count >= day.sample_count


def test_outlier_in_one_window_can_be_clean_in_another() -> None:
    stats = compute_item_stats("kit", "abc12", _mixed_history(), NOW_MS)

    day_outliers = [record.unit_price for record in stats.window(1).outliers]
    week_outliers = [record.unit_price for record in stats.window(7).outliers]
    assert day_outliers == [130]
    assert 130 not in week_outliers
    assert stats.window(1).average == 100
    assert {record.window_days for record in stats.all_outliers()} <= {1, 7}


def test_invalid_trades_never_reach_any_window() -> None:
    raws = [
        _raw(100, HOUR_MS),
        _raw(100, 2 * HOUR_MS, amount=0),
        _raw(-5, 3 * HOUR_MS),
        {"time": "whenever", "price": 100, "amount": 1},
        _raw(102, 4 * HOUR_MS, amount=None),
    ]

    stats = compute_item_stats("kit", "abc12", raws, NOW_MS)

    assert stats.window(1).sample_count == 2
    assert stats.window(7).sample_count == 2
    assert stats.window(7).total_units == 2


def test_empty_batch_reports_absent_statistics_for_every_window() -> None:
    stats = compute_item_stats("kit", "abc12", [], NOW_MS, StatsConfig(windows=(1, 7, 30)))

    assert stats.interpretation is None
    assert sorted(stats.windows) == [1, 7, 30]
    assert all(window.average is None for window in stats.windows.values())
    assert all(window.sample_count == 0 for window in stats.windows.values())


def test_stack_total_batch_reports_unit_prices() -> None:
    raws = [
        _raw(1000, HOUR_MS, amount=10),
        _raw(5000, 2 * HOUR_MS, amount=50),
        _raw(300, 3 * HOUR_MS, amount=3),
        _raw(20000, 4 * HOUR_MS, amount=200),
    ]

    stats = compute_item_stats("kit", "abc12", raws, NOW_MS)

    assert stats.interpretation is UnitInterpretation.STACK_TOTAL
    assert stats.window(1).average == 100
    assert stats.to_record()["detection"] == "price/amount"


def test_pipeline_is_idempotent() -> None:
    history = _mixed_history()

    first = compute_item_stats("kit", "abc12", history, NOW_MS)
    second = compute_item_stats("kit", "abc12", history, NOW_MS)

    assert first == second
    assert json.dumps(first.to_record(), sort_keys=True) == json.dumps(
        second.to_record(), sort_keys=True
    )


def test_item_record_uses_report_field_names() -> None:
    record = compute_item_stats("kit", "abc12", _mixed_history(), NOW_MS).to_record()

    assert record["id"] == "abc12"
    assert record["avg24h"] == 100
    assert record["sampleCountLast24h"] == 5
    assert record["cleanSampleCount24h"] == 4
    assert record["outliersRemoved24h"] == 1
    assert record["sampleCountLast7d"] == 11
    assert record["cleanSampleCount7d"] + record["outliersRemoved7d"] == 11
    assert record["detection"] == "price"


def test_single_huge_price_does_not_break_item_stats() -> None:
    stats = compute_item_stats("kit", "abc12", [_raw(1e30, 1000)], NOW_MS)

    record = stats.to_record()
    assert record["avg24h"] == 10**30
    assert record["max7d"] == 10**30
    json.dumps(record)
