"""Trade history sources and acquisition."""

from .acquirer import HistoryPage, fetch_history, iter_history_pages
from .base import HistorySource
from .csv_history import CsvHistorySource
from .pacing import NoDelayPacer, Pacer, RandomDelayPacer, build_pacer
from .stalcraft_history import StalcraftHistorySource

__all__ = [
    "CsvHistorySource",
    "HistoryPage",
    "HistorySource",
    "NoDelayPacer",
    "Pacer",
    "RandomDelayPacer",
    "StalcraftHistorySource",
    "build_pacer",
    "fetch_history",
    "iter_history_pages",
]
