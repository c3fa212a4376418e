"""Core trade and price-statistics domain models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

DAY_MS = 24 * 60 * 60 * 1000


def iso_from_ms(timestamp_ms: int) -> str:
    """Render an epoch-millisecond value as an ISO-8601 UTC string."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class UnitInterpretation(StrEnum):
    """How the recorded price field of a batch is read."""

    PER_UNIT = "price"
    STACK_TOTAL = "price/amount"


@dataclass(frozen=True)
class RawTrade:
    """Untyped trade record as delivered by a history source."""

    time: Any = None
    price: Any = None
    amount: Any = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> RawTrade:
        return cls(
            time=payload.get("time"),
            price=payload.get("price"),
            amount=payload.get("amount"),
        )


@dataclass(frozen=True)
class Trade:
    """Validated trade with epoch-millisecond time and positive price and amount."""

    timestamp_ms: int
    price: float
    amount: float


@dataclass(frozen=True)
class ResolvedTrade:
    """Trade paired with the unit price chosen for its batch."""

    trade: Trade
    unit_price: float

    @property
    def timestamp_ms(self) -> int:
        return self.trade.timestamp_ms

    @property
    def price(self) -> float:
        return self.trade.price

    @property
    def amount(self) -> float:
        return self.trade.amount


@dataclass(frozen=True)
class CandidateStats:
    """Dispersion summary of one unit-price candidate series."""

    median: float | None
    mad: float | None
    relative_mad: float


@dataclass(frozen=True)
class Resolution:
    """Outcome of unit-price resolution for one acquisition batch."""

    interpretation: UnitInterpretation
    candidate_a: CandidateStats
    candidate_b: CandidateStats
    trades: tuple[ResolvedTrade, ...] = ()


@dataclass(frozen=True)
class OutlierRecord:
    """Trade flagged as anomalous within one window."""

    timestamp_ms: int
    price: float
    amount: float
    unit_price: float
    window_days: int
    reason: str = ""

    def to_record(self, item_key: str) -> dict[str, Any]:
        """Convert to an outlier ledger row."""
        return {
            "itemKey": item_key,
            "windowDays": self.window_days,
            "timestamp": iso_from_ms(self.timestamp_ms),
            "price": self.price,
            "amount": self.amount,
            "unitPrice": self.unit_price,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class WindowStats:
    """Robust statistics for one trailing window."""

    window_days: int
    average: int | None = None
    mean: int | None = None
    median: int | None = None
    min: int | None = None
    max: int | None = None
    sample_count: int = 0
    clean_count: int = 0
    total_units: float = 0.0
    outliers: tuple[OutlierRecord, ...] = ()

    @property
    def has_data(self) -> bool:
        return self.average is not None


@dataclass(frozen=True)
class ItemStats:
    """Per-window statistics for one item from a single acquisition pass."""

    item_key: str
    item_id: str
    interpretation: UnitInterpretation | None
    windows: dict[int, WindowStats] = field(default_factory=dict)

    def window(self, window_days: int) -> WindowStats:
        return self.windows.get(window_days, WindowStats(window_days=window_days))

    def all_outliers(self) -> list[OutlierRecord]:
        records: list[OutlierRecord] = []
        for window_days in sorted(self.windows):
            records.extend(self.windows[window_days].outliers)
        return records

    def to_record(self) -> dict[str, Any]:
        """Convert to the flat per-item record of the price report."""
        day = self.window(1)
        week = self.window(7)
        record: dict[str, Any] = {
            "id": self.item_id,
            "avg24h": day.average,
            "sampleCountLast24h": day.sample_count,
            "cleanSampleCount24h": day.clean_count,
            "outliersRemoved24h": len(day.outliers),
            "min24h": day.min,
            "max24h": day.max,
            "avg7d": week.average,
            "sampleCountLast7d": week.sample_count,
            "cleanSampleCount7d": week.clean_count,
            "outliersRemoved7d": len(week.outliers),
            "min7d": week.min,
            "max7d": week.max,
            "totalUnits7d": week.total_units,
            "detection": self.interpretation.value if self.interpretation else None,
        }
        for window_days in sorted(self.windows):
            if window_days in {1, 7}:
                continue
            stats = self.windows[window_days]
            suffix = f"{window_days}d"
            record[f"avg{suffix}"] = stats.average
            record[f"sampleCountLast{suffix}"] = stats.sample_count
            record[f"cleanSampleCount{suffix}"] = stats.clean_count
            record[f"outliersRemoved{suffix}"] = len(stats.outliers)
            record[f"min{suffix}"] = stats.min
            record[f"max{suffix}"] = stats.max
        return record


@dataclass(frozen=True)
class ItemResult:
    """Either computed statistics or a fetch failure for one item."""

    item_key: str
    item_id: str
    stats: ItemStats | None = None
    error: str | None = None

    @classmethod
    def ok(cls, stats: ItemStats) -> ItemResult:
        return cls(item_key=stats.item_key, item_id=stats.item_id, stats=stats)

    @classmethod
    def failed(cls, item_key: str, item_id: str, reason: str) -> ItemResult:
        return cls(item_key=item_key, item_id=item_id, error=reason)

    @property
    def is_ok(self) -> bool:
        return self.stats is not None

    def to_record(self) -> dict[str, Any]:
        if self.stats is None:
            return {"id": self.item_id, "error": self.error or "unknown error"}
        return self.stats.to_record()


@dataclass(frozen=True)
class PriceReport:
    """All item results of one pipeline run."""

    updated: str
    region: str
    items: dict[str, ItemResult] = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        return {
            "updated": self.updated,
            "region": self.region,
            "prices": {key: result.to_record() for key, result in self.items.items()},
        }

    def outlier_rows(self) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        for key, result in self.items.items():
            if result.stats is None:
                continue
            rows.extend(record.to_record(key) for record in result.stats.all_outliers())
        return rows
