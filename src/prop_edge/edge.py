"""Edge classification of a soft quote against sharp quotes."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from prop_edge.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from prop_edge.consensus import round_half_up
from prop_edge.quotes import OVER, UNDER, Quote, Side

logger = logging.getLogger(__name__)


class EdgeType(StrEnum):
    DISCREPANCY = "DISCREPANCY"
    JUICE = "JUICE"
    NONE = "NONE"


@dataclass(frozen=True)
class EdgeResult:
    """Raw classification before the agreement boost."""

    edge_type: EdgeType
    score: float
    detail: str
    reference: Quote | None = None


def _fmt(value: float) -> str:
    return f"{value:g}"


def reference_sharp(sharps: Sequence[Quote], *, gold_standard_book: str) -> Quote | None:
    """Prefer the gold-standard book, otherwise the first sharp quote."""
    for quote in sharps:
        if quote.bookmaker_key == gold_standard_book:
            return quote
    return sharps[0] if sharps else None


def classify_edge(
    soft: Quote,
    sharps: Sequence[Quote],
    *,
    market: str,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> EdgeResult:
    """Classify the soft line as a discrepancy, juice edge, or no edge."""
    sharp = reference_sharp(sharps, gold_standard_book=config.gold_standard_book)
    if sharp is None:
        return EdgeResult(EdgeType.NONE, 0.0, "No sharp consensus")

    diff = abs(soft.point - sharp.point)
    tolerance = config.alt_line_tolerance(market)
    # Strictly greater: a gap equal to the tolerance is still scored.
    if diff > tolerance:
        logger.debug(
            "alternate line suspected player=%s market=%s diff=%.1f tolerance=%s",
            soft.player,
            market,
            diff,
            _fmt(tolerance),
        )
        return EdgeResult(
            EdgeType.NONE,
            0.0,
            f"Likely alternate line ({diff:.1f} pts diff > {_fmt(tolerance)} threshold). "
            "Ignoring.",
            sharp,
        )

    if diff >= config.discrepancy_min_diff:
        return EdgeResult(
            EdgeType.DISCREPANCY,
            config.discrepancy_base_score + diff,
            f"Discrepancy: {soft.bookmaker} {_fmt(soft.point)} vs "
            f"{sharp.bookmaker} {_fmt(sharp.point)}",
            sharp,
        )
    if diff > 0:
        return EdgeResult(
            EdgeType.DISCREPANCY,
            config.small_discrepancy_score,
            f"Small discrepancy: {soft.bookmaker} {_fmt(soft.point)} vs "
            f"{sharp.bookmaker} {_fmt(sharp.point)}",
            sharp,
        )

    if abs(sharp.price) >= config.juice_price_threshold:
        return EdgeResult(
            EdgeType.JUICE,
            config.juice_base_score + (abs(sharp.price) - config.juice_price_base) / 2,
            f"Juice edge: {sharp.bookmaker} has {sharp.price:+d}",
            sharp,
        )

    return EdgeResult(EdgeType.NONE, 0.0, "No significant edge", sharp)


def recommend_side(
    edge: EdgeResult, *, consensus: float | None, soft_point: float
) -> Side | None:
    """Pick the side to play, or None when there is no edge."""
    if edge.edge_type == EdgeType.NONE:
        return None
    diff = (consensus if consensus is not None else soft_point) - soft_point
    if diff > 0:
        return OVER
    if diff < 0:
        return UNDER
    # Same line everywhere: the juiced side is the favoured one.
    if edge.reference is not None and edge.reference.price < 0:
        return OVER
    return UNDER


def boost_score(score: float, agreement: int, *, max_score: float = 100.0) -> float:
    """Reward edges the sharp books agree on, capped at ``max_score``."""
    return min(max_score, score + round_half_up(agreement / 10))
