"""Acceptable line range and linear win-probability heuristic."""

from __future__ import annotations

from dataclasses import dataclass

from prop_edge.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from prop_edge.consensus import round_half_up
from prop_edge.quotes import OVER, UNDER, Side


@dataclass(frozen=True)
class AcceptableRange:
    max_acceptable: float | None = None
    min_acceptable: float | None = None


def acceptable_range(
    consensus: float, side: Side | None, *, min_edge: float = 0.5
) -> AcceptableRange:
    """Worst soft line that still leaves ``min_edge`` points against the consensus."""
    if side == OVER:
        return AcceptableRange(max_acceptable=round_half_up(consensus - min_edge, 1))
    if side == UNDER:
        return AcceptableRange(min_acceptable=round_half_up(consensus + min_edge, 1))
    return AcceptableRange()


def estimate_win_probability(
    soft_point: float,
    consensus: float,
    side: Side | None,
    *,
    market: str,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> float | None:
    """Heuristic hit rate: 50% plus a per-market boost per point of edge.

    This is a capped linear rule of thumb, not a calibrated probability.
    """
    if side is None:
        return None
    boost = abs(consensus - soft_point) * config.probability_multiplier(market)
    capped = min(config.probability_cap, max(config.probability_floor, 50.0 + boost))
    return round_half_up(capped, 1)
