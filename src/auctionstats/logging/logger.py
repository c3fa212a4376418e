"""Concise human-readable run logger."""

from __future__ import annotations

import logging

from auctionstats.domain.models import ItemStats, WindowStats


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("auctionstats")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def run_started(self, run_id: str, region: str, item_keys: list[str]) -> None:
        self._logger.info(
            "run | %s | region %s | items %s",
            run_id[:10],
            region,
            ", ".join(item_keys),
        )

    def page(self, item_key: str, index: int, count: int, reached_cutoff: bool) -> None:
        suffix = " | cutoff reached" if reached_cutoff else ""
        self._logger.debug("page | %s | #%d | trades %d%s", item_key, index, count, suffix)

    def item_summary(self, stats: ItemStats, raw_count: int) -> None:
        detection = stats.interpretation.value if stats.interpretation else "none"
        self._logger.info(
            "item | %s (%s) | raw %d | detection %s",
            stats.item_key,
            stats.item_id,
            raw_count,
            detection,
        )
        for window_days in sorted(stats.windows):
            self.window(stats.item_key, stats.windows[window_days])

    def window(self, item_key: str, stats: WindowStats) -> None:
        parts = [f"window | {item_key} | {stats.window_days}d"]
        if stats.has_data:
            parts.append(f"avg {self._format_price(stats.average)}")
            parts.append(
                f"range {self._format_price(stats.min)}..{self._format_price(stats.max)}"
            )
        else:
            parts.append("no data")
        parts.append(f"samples {stats.sample_count} (clean {stats.clean_count})")
        if stats.outliers:
            parts.append(f"outliers {len(stats.outliers)}")
        self._logger.info(" | ".join(parts))

    def item_failed(self, item_key: str, item_id: str, reason: str) -> None:
        self._logger.error("failed | %s (%s) | %s", item_key, item_id, reason)

    def run_finished(self, succeeded: int, failed: int, output_path: str) -> None:
        self._logger.info(
            "done | ok %d | failed %d | wrote %s",
            succeeded,
            failed,
            output_path,
        )

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _format_price(value: float | None) -> str:
        if value is None:
            return "-"
        return f"{value:,.0f}"
