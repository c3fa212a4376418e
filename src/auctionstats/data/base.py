"""Trade history source contract."""

from __future__ import annotations

from typing import Protocol

from auctionstats.domain.models import RawTrade


class HistorySource(Protocol):
    """Interface for newest-first paged trade history."""

    def fetch_page(self, item_id: str, page: int) -> list[RawTrade]:
        """Return one page of raw trades, newest first; empty when exhausted."""
