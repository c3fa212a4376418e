"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Self

from dotenv import load_dotenv

from auctionstats.errors import ConfigError

DEFAULT_ITEMS = {
    "adv_spare": "y3nmw",
    "std_spare": "l0og1",
    "cheap_spare": "j0w96",
    "adv_tool": "4q7pl",
    "std_tool": "qjqw9",
    "cheap_tool": "wjlrd",
}
DEFAULT_WINDOWS = (1, 7)


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_optional_text(value: str | None) -> str | None:
    """Return stripped text, or None for missing or blank values."""
    if value is None:
        return None
    text = value.strip()
    return text or None


def parse_items(value: str | None, default: dict[str, str] | None = None) -> dict[str, str]:
    """Parse comma-separated `key=id` pairs; a bare id is its own key."""
    fallback = default if default is not None else DEFAULT_ITEMS
    if not value or not value.strip():
        return dict(fallback)
    items: dict[str, str] = {}
    for chunk in value.split(","):
        entry = chunk.strip()
        if not entry:
            continue
        if "=" in entry:
            key, item_id = (part.strip() for part in entry.split("=", 1))
        else:
            key, item_id = entry, entry
        if not key or not item_id:
            raise ConfigError(f"Invalid item entry '{entry}'; expected key=id")
        items[key] = item_id
    return items or dict(fallback)


def parse_windows(value: str | None, default: tuple[int, ...] = DEFAULT_WINDOWS) -> tuple[int, ...]:
    """Parse comma-separated window lengths in days, sorted and de-duplicated."""
    if not value or not value.strip():
        return tuple(default)
    windows = {int(item.strip()) for item in value.split(",") if item.strip()}
    if not windows:
        return tuple(default)
    return tuple(sorted(windows))


@dataclass(frozen=True)
class StatsConfig:
    """Thresholds shared by the resolver, the outlier filter and the aggregator."""

    outlier_threshold: float = 2.5
    min_outlier_samples: int = 5
    large_price_threshold: float = 1_000_000.0
    windows: tuple[int, ...] = DEFAULT_WINDOWS

    @property
    def widest_window(self) -> int:
        return max(self.windows)

    def validate(self) -> Self:
        if self.outlier_threshold <= 0:
            raise ConfigError("outlier_threshold must be positive")
        if self.min_outlier_samples < 1:
            raise ConfigError("min_outlier_samples must be at least 1")
        if self.large_price_threshold <= 0:
            raise ConfigError("large_price_threshold must be positive")
        if not self.windows:
            raise ConfigError("windows must not be empty")
        if any(window <= 0 for window in self.windows):
            raise ConfigError("windows must be positive day counts")
        return self


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    region: str = "na"
    items: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ITEMS))
    base_url: str = "https://stalcraftdb.net"
    data_source: str = "http"
    historical_data_dir: str = "historical_data"
    output_path: str = "prices.json"
    outliers_path: str | None = None
    events_dir: str = "runs"
    report: bool = False
    log_level: str = "INFO"
    max_pages: int = 10
    csv_page_size: int = 100
    page_delay_min_ms: int = 500
    page_delay_max_ms: int = 800
    item_delay_min_ms: int = 5500
    item_delay_max_ms: int = 7000
    error_cooldown_ms: int = 2000
    request_timeout: int = 20
    max_retries: int = 3
    outlier_threshold: float = 2.5
    min_outlier_samples: int = 5
    large_price_threshold: float = 1_000_000.0
    windows: tuple[int, ...] = DEFAULT_WINDOWS

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            region=str(os.getenv("REGION", "na")).strip().lower(),
            items=parse_items(os.getenv("ITEMS")),
            base_url=str(os.getenv("HISTORY_BASE_URL", "https://stalcraftdb.net")).strip(),
            data_source=str(os.getenv("DATA_SOURCE", "http")).strip().lower(),
            historical_data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            output_path=str(os.getenv("OUTPUT_PATH", "prices.json")).strip(),
            outliers_path=parse_optional_text(os.getenv("OUTLIERS_PATH")),
            events_dir=str(os.getenv("EVENTS_DIR", "runs")).strip(),
            report=parse_bool(os.getenv("REPORT"), False),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            max_pages=int(os.getenv("MAX_PAGES", "10")),
            csv_page_size=int(os.getenv("CSV_PAGE_SIZE", "100")),
            page_delay_min_ms=int(os.getenv("PAGE_DELAY_MIN_MS", "500")),
            page_delay_max_ms=int(os.getenv("PAGE_DELAY_MAX_MS", "800")),
            item_delay_min_ms=int(os.getenv("ITEM_DELAY_MIN_MS", "5500")),
            item_delay_max_ms=int(os.getenv("ITEM_DELAY_MAX_MS", "7000")),
            error_cooldown_ms=int(os.getenv("ERROR_COOLDOWN_MS", "2000")),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", "20")),
            max_retries=int(os.getenv("MAX_RETRIES", "3")),
            outlier_threshold=float(os.getenv("OUTLIER_THRESHOLD", "2.5")),
            min_outlier_samples=int(os.getenv("MIN_OUTLIER_SAMPLES", "5")),
            large_price_threshold=float(os.getenv("LARGE_PRICE_THRESHOLD", "1000000")),
            windows=parse_windows(os.getenv("WINDOWS")),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def stats_config(self) -> StatsConfig:
        """Build the immutable statistics configuration."""
        return StatsConfig(
            outlier_threshold=self.outlier_threshold,
            min_outlier_samples=self.min_outlier_samples,
            large_price_threshold=self.large_price_threshold,
            windows=self.windows,
        ).validate()

    def delays_disabled(self) -> Self:
        """Return settings with every politeness delay set to zero."""
        return self.with_overrides(
            page_delay_min_ms=0,
            page_delay_max_ms=0,
            item_delay_min_ms=0,
            item_delay_max_ms=0,
            error_cooldown_ms=0,
        )

    def validate(self) -> Self:
        """Validate settings fields."""
        if not self.region:
            raise ConfigError("region must not be empty")
        if not self.items:
            raise ConfigError("items must not be empty")
        if self.data_source not in {"http", "csv"}:
            raise ConfigError("data_source must be one of http, csv")
        if self.max_pages <= 0:
            raise ConfigError("max_pages must be positive")
        if self.csv_page_size <= 0:
            raise ConfigError("csv_page_size must be positive")
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")
        if self.max_retries <= 0:
            raise ConfigError("max_retries must be positive")
        if self.error_cooldown_ms < 0:
            raise ConfigError("error_cooldown_ms must not be negative")
        for name in ("page", "item"):
            low = getattr(self, f"{name}_delay_min_ms")
            high = getattr(self, f"{name}_delay_max_ms")
            if low < 0 or high < 0:
                raise ConfigError(f"{name} delay bounds must not be negative")
            if low > high:
                raise ConfigError(f"{name}_delay_min_ms must not exceed {name}_delay_max_ms")
        self.stats_config()
        return self
