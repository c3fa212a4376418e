from __future__ import annotations

import pytest

from auctionstats.config import DEFAULT_ITEMS, Settings, StatsConfig, parse_items, parse_windows
from auctionstats.errors import ConfigError

ENV_KEYS = [
    "REGION",
    "ITEMS",
    "DATA_SOURCE",
    "OUTPUT_PATH",
    "OUTLIERS_PATH",
    "MAX_PAGES",
    "OUTLIER_THRESHOLD",
    "MIN_OUTLIER_SAMPLES",
    "WINDOWS",
    "PAGE_DELAY_MIN_MS",
    "PAGE_DELAY_MAX_MS",
    "REPORT",
]


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("auctionstats.config.load_dotenv", lambda *args, **kwargs: None)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_match_original_item_set(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    settings = Settings.from_env()

    assert settings.region == "na"
    assert settings.items == DEFAULT_ITEMS
    assert settings.windows == (1, 7)
    assert settings.max_pages == 10
    assert settings.outliers_path is None
    assert settings.stats_config() == StatsConfig()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("REGION", " EU ")
    monkeypatch.setenv("ITEMS", "kit=abc12, y3nmw")
    monkeypatch.setenv("OUTLIERS_PATH", "out/outliers.csv")
    monkeypatch.setenv("MAX_PAGES", "4")
    monkeypatch.setenv("OUTLIER_THRESHOLD", "3.0")
    monkeypatch.setenv("MIN_OUTLIER_SAMPLES", "8")
    monkeypatch.setenv("WINDOWS", "7,1,30,7")
    monkeypatch.setenv("REPORT", "yes")

    settings = Settings.from_env()
    config = settings.stats_config()

    assert settings.region == "eu"
    assert settings.items == {"kit": "abc12", "y3nmw": "y3nmw"}
    assert settings.outliers_path == "out/outliers.csv"
    assert settings.max_pages == 4
    assert settings.report is True
    assert config.outlier_threshold == 3.0
    assert config.min_outlier_samples == 8
    assert config.windows == (1, 7, 30)
    assert config.widest_window == 30


def test_inverted_delay_bounds_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("PAGE_DELAY_MIN_MS", "900")
    monkeypatch.setenv("PAGE_DELAY_MAX_MS", "100")

    with pytest.raises(ConfigError, match="page_delay_min_ms"):
        Settings.from_env()


def test_invalid_overrides_are_rejected() -> None:
    with pytest.raises(ConfigError):
        Settings().with_overrides(max_pages=0)
    with pytest.raises(ConfigError):
        Settings().with_overrides(outlier_threshold=-1.0)
    with pytest.raises(ConfigError):
        Settings().with_overrides(windows=(0, 7))
    with pytest.raises(ValueError):
        Settings().with_overrides(data_source="ftp")


def test_delays_disabled_zeroes_every_pause() -> None:
    settings = Settings().delays_disabled()

    assert settings.page_delay_max_ms == 0
    assert settings.item_delay_max_ms == 0
    assert settings.error_cooldown_ms == 0


def test_parse_helpers() -> None:
    assert parse_items(None, {"a": "b"}) == {"a": "b"}
    assert parse_items("x=1,,y=2") == {"x": "1", "y": "2"}
    with pytest.raises(ConfigError):
        parse_items("=abc")
    assert parse_windows("") == (1, 7)
    assert parse_windows("14, 3") == (3, 14)
