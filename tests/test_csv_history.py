"""Tests for the offline CSV history source."""

from __future__ import annotations

from pathlib import Path

import pytest

from auctionstats.data.csv_history import CsvHistorySource
from auctionstats.errors import MalformedPayload, TransportError


def test_csv_pages_are_served_newest_first(tmp_path: Path) -> None:
    (tmp_path / "y3nmw.csv").write_text(
        "\n".join(
            [
                "time,price,amount",
                "1700000100,110,1",
                "1700000300,130,2",
                "bogus,999,1",
                "1700000200,120,",
            ]
        ),
        encoding="utf-8",
    )
    source = CsvHistorySource(data_dir=str(tmp_path), page_size=2)

    first = source.fetch_page("y3nmw", 0)
    second = source.fetch_page("y3nmw", 1)
    third = source.fetch_page("y3nmw", 2)

    assert [trade.price for trade in first] == ["130", "120"]
    assert first[1].amount == ""
    assert [trade.time for trade in second] == ["1700000100", "bogus"]
    assert third == []


def test_csv_source_prefers_region_directory(tmp_path: Path) -> None:
    region_dir = tmp_path / "eu"
    region_dir.mkdir()
    (region_dir / "y3nmw.csv").write_text("timestamp,Price\n1700000000,55\n", encoding="utf-8")
    (tmp_path / "y3nmw.csv").write_text("time,price\n1700000000,99\n", encoding="utf-8")

    source = CsvHistorySource(data_dir=str(tmp_path), region="EU")
    trades = source.fetch_page("y3nmw", 0)

    assert len(trades) == 1
    assert trades[0].price == "55"
    assert trades[0].amount is None


def test_missing_csv_is_a_transport_error(tmp_path: Path) -> None:
    source = CsvHistorySource(data_dir=str(tmp_path))

    with pytest.raises(TransportError, match="No CSV found"):
        source.fetch_page("missing", 0)


def test_csv_without_price_column_is_malformed(tmp_path: Path) -> None:
    (tmp_path / "y3nmw.csv").write_text("time,cost\n1700000000,1\n", encoding="utf-8")
    source = CsvHistorySource(data_dir=str(tmp_path))

    with pytest.raises(MalformedPayload, match="price"):
        source.fetch_page("y3nmw", 0)


def test_empty_csv_is_malformed(tmp_path: Path) -> None:
    (tmp_path / "y3nmw.csv").write_text("", encoding="utf-8")
    source = CsvHistorySource(data_dir=str(tmp_path))

    with pytest.raises(MalformedPayload, match="unreadable CSV"):
        source.fetch_page("y3nmw", 0)


def test_undecodable_csv_is_malformed(tmp_path: Path) -> None:
    (tmp_path / "y3nmw.csv").write_bytes(b"time,price\n\xff\xfe\xfa,1\n")
    source = CsvHistorySource(data_dir=str(tmp_path))

    with pytest.raises(MalformedPayload):
        source.fetch_page("y3nmw", 0)
