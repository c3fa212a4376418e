"""Coerce raw trade records into validated trades."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

from auctionstats.domain.models import RawTrade, Trade
from auctionstats.errors import MalformedRecord, MalformedTimestamp, MalformedTrade

logger = logging.getLogger(__name__)

EPOCH_MS_FLOOR = 1e12
MAX_EPOCH_MS = 8.64e15


def parse_timestamp_ms(raw_time: Any) -> int:
    """Parse an epoch number or date-time string into epoch milliseconds.

    Numeric values below 1e12 are read as seconds, everything else as
    milliseconds. Naive date-times are read as UTC.
    """
    if raw_time is None or isinstance(raw_time, bool):
        raise MalformedTimestamp(f"unsupported time value: {raw_time!r}")
    if isinstance(raw_time, (int, float)):
        return _epoch_to_ms(float(raw_time))
    if not isinstance(raw_time, str):
        raise MalformedTimestamp(f"unsupported time type: {type(raw_time).__name__}")

    text = raw_time.strip()
    if not text:
        raise MalformedTimestamp("empty time string")
    try:
        numeric = float(text)
    except ValueError:
        numeric = None
    if numeric is not None:
        return _epoch_to_ms(numeric)

    moment = _parse_datetime(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return _epoch_to_ms(moment.timestamp() * 1000)


def _epoch_to_ms(value: float) -> int:
    if not math.isfinite(value):
        raise MalformedTimestamp(f"non-finite time value: {value!r}")
    millis = value * 1000 if abs(value) < EPOCH_MS_FLOOR else value
    if abs(millis) > MAX_EPOCH_MS:
        raise MalformedTimestamp(f"time value out of range: {value!r}")
    return int(round(millis))


def _parse_datetime(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError) as exc:
        raise MalformedTimestamp(f"unparseable time string: {text!r}") from exc


def _coerce_positive(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise MalformedTrade(f"{field_name} must be numeric, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedTrade(f"{field_name} is not numeric: {value!r}") from exc
    if not math.isfinite(number) or number <= 0:
        raise MalformedTrade(f"{field_name} must be finite and positive, got {value!r}")
    return number


def normalize_trade(raw: RawTrade | Mapping[str, Any]) -> Trade:
    """Validate one raw record; raises a MalformedRecord subclass on bad data."""
    if isinstance(raw, RawTrade):
        record = raw
    elif isinstance(raw, Mapping):
        record = RawTrade.from_mapping(raw)
    else:
        raise MalformedTrade(f"trade record must be an object, got {type(raw).__name__}")
    timestamp_ms = parse_timestamp_ms(record.time)
    price = _coerce_positive(record.price, "price")
    amount_value = record.amount
    if amount_value is None or (isinstance(amount_value, str) and not amount_value.strip()):
        amount_value = 1
    amount = _coerce_positive(amount_value, "amount")
    return Trade(timestamp_ms=timestamp_ms, price=price, amount=amount)


def normalize_trades(raws: Iterable[RawTrade | Mapping[str, Any]]) -> list[Trade]:
    """Normalize a batch, dropping malformed records and preserving order."""
    trades: list[Trade] = []
    dropped = 0
    for raw in raws:
        try:
            trades.append(normalize_trade(raw))
        except MalformedRecord as exc:
            dropped += 1
            logger.debug("dropping trade record: %s", exc)
    if dropped:
        logger.debug("normalized %d trades, dropped %d", len(trades), dropped)
    return trades
