"""Domain models and event types."""

from .events import PipelineEvent
from .models import (
    DAY_MS,
    CandidateStats,
    ItemResult,
    ItemStats,
    OutlierRecord,
    PriceReport,
    RawTrade,
    Resolution,
    ResolvedTrade,
    Trade,
    UnitInterpretation,
    WindowStats,
)

__all__ = [
    "DAY_MS",
    "CandidateStats",
    "ItemResult",
    "ItemStats",
    "OutlierRecord",
    "PipelineEvent",
    "PriceReport",
    "RawTrade",
    "Resolution",
    "ResolvedTrade",
    "Trade",
    "UnitInterpretation",
    "WindowStats",
]
