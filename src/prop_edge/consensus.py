"""Sharp consensus line and agreement score."""

from __future__ import annotations

import math
from collections.abc import Sequence

from prop_edge.quotes import Quote


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, independent of float banker's rounding."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def consensus_line(quotes: Sequence[Quote]) -> float | None:
    """Mean quoted point rounded to one decimal, or None without quotes."""
    if not quotes:
        return None
    total = sum(quote.point for quote in quotes)
    return round_half_up(total / len(quotes), 1)


def sharp_agreement(quotes: Sequence[Quote], *, full_disagreement_spread: float = 3.0) -> int:
    """Score 0-100 for how tightly sharp books cluster on the same point.

    Fewer than two quotes leaves nothing to disagree with and scores 100. The
    score falls linearly with the max-min point spread and reaches 0 once the
    spread hits ``full_disagreement_spread``.
    """
    if len(quotes) < 2:
        return 100
    points = [quote.point for quote in quotes]
    spread = max(points) - min(points)
    if spread <= 0:
        return 100
    if spread >= full_disagreement_spread:
        return 0
    return int(round_half_up(100 - (spread / full_disagreement_spread) * 100))
