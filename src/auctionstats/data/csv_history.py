"""CSV-backed trade history source for offline runs."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from auctionstats.domain.models import RawTrade
from auctionstats.errors import MalformedPayload, MalformedTimestamp, TransportError
from auctionstats.pricing.normalizer import parse_timestamp_ms


class CsvHistorySource:
    """Serve `time,price,amount` CSV exports as newest-first pages."""

    time_column_candidates = ("time", "timestamp", "date", "datetime")

    def __init__(self, data_dir: str, region: str | None = None, page_size: int = 100) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.data_dir = Path(data_dir)
        self.region = region.strip().lower() if region else None
        self.page_size = page_size
        self._trades_cache: dict[str, list[RawTrade]] = {}

    def fetch_page(self, item_id: str, page: int) -> list[RawTrade]:
        trades = self._load_trades(item_id)
        start = page * self.page_size
        return trades[start : start + self.page_size]

    def _load_trades(self, item_id: str) -> list[RawTrade]:
        cached = self._trades_cache.get(item_id)
        if cached is not None:
            return cached
        path = self._resolve_path(item_id)
        if path is None:
            raise TransportError(f"No CSV found for {item_id} under {self.data_dir}")
        try:
            frame = pd.read_csv(path, dtype=str, keep_default_na=False)
        except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
            raise MalformedPayload(f"{item_id}: unreadable CSV {path}: {exc}") from exc
        except OSError as exc:
            raise TransportError(f"{item_id}: could not read {path}: {exc}") from exc
        trades = self._frame_to_trades(frame, item_id)
        self._trades_cache[item_id] = trades
        return trades

    def _resolve_path(self, item_id: str) -> Path | None:
        candidates: list[Path] = []
        if self.region:
            candidates.extend(
                [
                    self.data_dir / self.region / f"{item_id}.csv",
                    self.data_dir / self.region.upper() / f"{item_id}.csv",
                ]
            )
        candidates.append(self.data_dir / f"{item_id}.csv")
        for candidate in candidates:
            if candidate.exists():
                return candidate
        return None

    def _frame_to_trades(self, frame: pd.DataFrame, item_id: str) -> list[RawTrade]:
        lower_to_original = {column.strip().lower(): column for column in frame.columns}
        time_column = self._pick_time_column(lower_to_original, item_id)
        price_column = lower_to_original.get("price")
        if price_column is None:
            raise MalformedPayload(f"{item_id}: CSV missing required column 'price'")
        amount_column = lower_to_original.get("amount")

        trades = [
            RawTrade(
                time=row[time_column],
                price=row[price_column],
                amount=row[amount_column] if amount_column is not None else None,
            )
            for _, row in frame.iterrows()
        ]
        return sorted(trades, key=self._sort_key)

    def _pick_time_column(self, lower_to_original: dict[str, str], item_id: str) -> str:
        for candidate in self.time_column_candidates:
            if candidate in lower_to_original:
                return lower_to_original[candidate]
        candidates = ", ".join(self.time_column_candidates)
        raise MalformedPayload(f"{item_id}: CSV missing time column. Expected one of: {candidates}")

    @staticmethod
    def _sort_key(trade: RawTrade) -> tuple[int, int]:
        try:
            timestamp_ms = parse_timestamp_ms(trade.time)
        except MalformedTimestamp:
            return (1, 0)
        return (0, -timestamp_ms)
