"""Decide whether a batch's price field is a unit price or a stack total."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from auctionstats.config import StatsConfig
from auctionstats.domain.models import (
    CandidateStats,
    Resolution,
    ResolvedTrade,
    Trade,
    UnitInterpretation,
)
from auctionstats.pricing.robust import mad, median, relative_mad

logger = logging.getLogger(__name__)


def candidate_stats(values: Sequence[float]) -> CandidateStats:
    """Summarize one candidate unit-price series by median, MAD and relative MAD."""
    center = median(values)
    spread = mad(values, center) if center is not None else None
    return CandidateStats(median=center, mad=spread, relative_mad=relative_mad(center, spread))


def choose_interpretation(
    per_unit: CandidateStats,
    stack_total: CandidateStats,
    large_price_threshold: float = 1_000_000.0,
) -> UnitInterpretation:
    """Pick the interpretation whose unit prices are less dispersed.

    A per-unit median above `large_price_threshold` also selects the stack-total
    reading when dividing by amount lowers the median.
    """
    if stack_total.relative_mad < per_unit.relative_mad:
        return UnitInterpretation.STACK_TOTAL
    if (
        per_unit.median is not None
        and stack_total.median is not None
        and per_unit.median > large_price_threshold
        and stack_total.median < per_unit.median
    ):
        return UnitInterpretation.STACK_TOTAL
    return UnitInterpretation.PER_UNIT


def unit_price(trade: Trade, interpretation: UnitInterpretation) -> float:
    if interpretation is UnitInterpretation.STACK_TOTAL:
        return trade.price / trade.amount
    return trade.price


def resolve_unit_prices(
    trades: Sequence[Trade],
    config: StatsConfig | None = None,
) -> Resolution | None:
    """Resolve one interpretation for the whole batch; None for an empty batch."""
    if not trades:
        return None
    settings = config or StatsConfig()
    per_unit = candidate_stats([trade.price for trade in trades])
    stack_total = candidate_stats([trade.price / trade.amount for trade in trades])
    interpretation = choose_interpretation(
        per_unit,
        stack_total,
        large_price_threshold=settings.large_price_threshold,
    )
    logger.debug(
        "resolved %s (relMAD price=%.4f, price/amount=%.4f)",
        interpretation.value,
        per_unit.relative_mad,
        stack_total.relative_mad,
    )
    resolved = tuple(
        ResolvedTrade(trade=trade, unit_price=unit_price(trade, interpretation))
        for trade in trades
    )
    return Resolution(
        interpretation=interpretation,
        candidate_a=per_unit,
        candidate_b=stack_total,
        trades=resolved,
    )
