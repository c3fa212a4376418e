"""Cutoff-bounded paginated history acquisition."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from auctionstats.data.base import HistorySource
from auctionstats.data.pacing import NoDelayPacer, Pacer
from auctionstats.domain.models import RawTrade
from auctionstats.errors import MalformedTimestamp
from auctionstats.pricing.normalizer import parse_timestamp_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryPage:
    """One fetched page and whether it ended the acquisition."""

    index: int
    trades: tuple[RawTrade, ...]
    reached_cutoff: bool = False


def page_reaches_cutoff(trades: tuple[RawTrade, ...] | list[RawTrade], cutoff_ms: int) -> bool:
    """Return True when the oldest (last) trade on a newest-first page predates the cutoff."""
    if not trades:
        return False
    try:
        oldest_ms = parse_timestamp_ms(trades[-1].time)
    except MalformedTimestamp:
        return False
    return oldest_ms < cutoff_ms


def iter_history_pages(
    source: HistorySource,
    item_id: str,
    cutoff_ms: int,
    max_pages: int,
    pacer: Pacer | None = None,
) -> Iterator[HistoryPage]:
    """Yield non-empty pages until exhaustion, the cutoff or the page cap.

    The pacer runs between pages only, never before the first or after the last.
    """
    if max_pages <= 0:
        raise ValueError("max_pages must be positive")
    delay = pacer or NoDelayPacer()
    for index in range(max_pages):
        if index > 0:
            delay.wait()
        trades = tuple(source.fetch_page(item_id, index))
        if not trades:
            logger.debug("%s: page %d empty, source exhausted", item_id, index)
            return
        reached_cutoff = page_reaches_cutoff(trades, cutoff_ms)
        yield HistoryPage(index=index, trades=trades, reached_cutoff=reached_cutoff)
        if reached_cutoff:
            logger.debug("%s: page %d reached cutoff", item_id, index)
            return
    logger.debug("%s: stopped at page cap %d", item_id, max_pages)


def fetch_history(
    source: HistorySource,
    item_id: str,
    cutoff_ms: int,
    max_pages: int,
    pacer: Pacer | None = None,
) -> list[RawTrade]:
    """Collect every page of one item's history into a single batch."""
    trades: list[RawTrade] = []
    for page in iter_history_pages(source, item_id, cutoff_ms, max_pages, pacer):
        trades.extend(page.trades)
    return trades
