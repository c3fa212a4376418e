from __future__ import annotations

from datetime import UTC, datetime

import pytest

from auctionstats.domain.models import RawTrade, Trade
from auctionstats.errors import MalformedTimestamp, MalformedTrade
from auctionstats.pricing.normalizer import normalize_trade, normalize_trades, parse_timestamp_ms

JAN_15_MS = int(datetime(2024, 1, 15, 20, 0, tzinfo=UTC).timestamp() * 1000)


def test_numeric_epochs_distinguish_seconds_from_milliseconds() -> None:
    assert parse_timestamp_ms(1_700_000_000) == 1_700_000_000_000
    assert parse_timestamp_ms(1_700_000_000_123) == 1_700_000_000_123
    assert parse_timestamp_ms(1_700_000_000.5) == 1_700_000_000_500


def test_numeric_strings_are_read_as_epochs() -> None:
    assert parse_timestamp_ms("1700000000") == 1_700_000_000_000
    assert parse_timestamp_ms(" 1700000000123 ") == 1_700_000_000_123


def test_date_time_strings_parse_to_utc_millis() -> None:
    assert parse_timestamp_ms("2024-01-15T20:00:00Z") == JAN_15_MS
    assert parse_timestamp_ms("2024-01-15T20:00:00.000Z") == JAN_15_MS
    assert parse_timestamp_ms("2024-01-15T22:00:00+02:00") == JAN_15_MS
    assert parse_timestamp_ms("2024-01-15T20:00:00") == JAN_15_MS
    assert parse_timestamp_ms("Mon, 15 Jan 2024 20:00:00 GMT") == JAN_15_MS


@pytest.mark.parametrize(
    "raw_time",
    [None, True, "", "garbage", "not a date", float("nan"), float("inf"), [1], 1e20],
)
def test_unparseable_times_raise(raw_time: object) -> None:
    with pytest.raises(MalformedTimestamp):
        parse_timestamp_ms(raw_time)


def test_normalize_trade_defaults_missing_amount_to_one() -> None:
    trade = normalize_trade({"time": 1_700_000_000, "price": "250"})

    assert trade == Trade(timestamp_ms=1_700_000_000_000, price=250.0, amount=1.0)
    assert normalize_trade(RawTrade(time=1_700_000_000, price=10, amount="")).amount == 1.0


@pytest.mark.parametrize(
    "record",
    [
        {"time": 1_700_000_000, "price": 0, "amount": 1},
        {"time": 1_700_000_000, "price": -5, "amount": 1},
        {"time": 1_700_000_000, "price": 10, "amount": 0},
        {"time": 1_700_000_000, "price": 10, "amount": -2},
        {"time": 1_700_000_000, "price": "abc", "amount": 1},
        {"time": 1_700_000_000, "price": float("nan"), "amount": 1},
        {"time": 1_700_000_000, "price": 10, "amount": float("inf")},
        {"time": 1_700_000_000},
    ],
)
def test_normalize_trade_rejects_invalid_price_or_amount(record: dict) -> None:
    with pytest.raises(MalformedTrade):
        normalize_trade(record)


def test_normalize_trades_drops_bad_records_and_preserves_order() -> None:
    raws = [
        {"time": 1_700_000_300, "price": 30, "amount": 1},
        {"time": "soon", "price": 10, "amount": 1},
        {"time": 1_700_000_200, "price": 0, "amount": 1},
        "not-a-record",
        {"time": 1_700_000_100, "price": 10, "amount": 0},
        RawTrade(time=1_700_000_000, price=20, amount=2),
    ]

    trades = normalize_trades(raws)

    assert [trade.price for trade in trades] == [30.0, 20.0]
    assert [trade.timestamp_ms for trade in trades] == [1_700_000_300_000, 1_700_000_000_000]
