"""Soft-vs-sharp line matching for one game and market."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from prop_edge.config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from prop_edge.consensus import consensus_line, sharp_agreement
from prop_edge.edge import EdgeType, boost_score, classify_edge, recommend_side
from prop_edge.estimate import acceptable_range, estimate_win_probability
from prop_edge.grouping import PlayerLines, group_quotes
from prop_edge.guidance import format_guidance
from prop_edge.quotes import Quote, Side

logger = logging.getLogger(__name__)

NO_SHARP_LINES_DETAIL = "No sharp lines available for comparison"


@dataclass(frozen=True)
class AnalyzedProp:
    """Matched soft quote with its sharp comparison for one player and market."""

    id: str
    game_id: str
    sport: str
    player_key: str
    player_name: str
    market: str
    soft_quote: Quote
    sharp_quotes: tuple[Quote, ...]
    edge_type: EdgeType
    edge_score: float
    edge_details: str
    recommended_side: Side | None
    fair_value: float | None
    max_acceptable_line: float | None
    min_acceptable_line: float | None
    edge_remaining: float
    sharp_agreement: int
    win_probability: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "game_id": self.game_id,
            "sport": self.sport,
            "player_key": self.player_key,
            "player_name": self.player_name,
            "market": self.market,
            "soft_quote": self.soft_quote.to_dict(),
            "sharp_quotes": [quote.to_dict() for quote in self.sharp_quotes],
            "edge_type": str(self.edge_type),
            "edge_score": self.edge_score,
            "edge_details": self.edge_details,
            "recommended_side": self.recommended_side,
            "fair_value": self.fair_value,
            "max_acceptable_line": self.max_acceptable_line,
            "min_acceptable_line": self.min_acceptable_line,
            "edge_remaining": self.edge_remaining,
            "sharp_agreement": self.sharp_agreement,
            "win_probability": self.win_probability,
        }


def prop_id(game_id: str, player_key: str, market: str) -> str:
    return f"{game_id}_{player_key}_{market}"


def _pick_soft_quote(soft_overs: Sequence[Quote], *, primary_book: str) -> Quote:
    for quote in soft_overs:
        if quote.bookmaker_key == primary_book:
            return quote
    return soft_overs[0]


def analyze_player(
    lines: PlayerLines,
    *,
    game_id: str,
    sport: str,
    market: str,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> AnalyzedProp | None:
    """Score one player's soft line against the sharp books; None without a soft line."""
    soft_overs = lines.soft_overs
    if not soft_overs:
        return None
    soft = _pick_soft_quote(soft_overs, primary_book=config.primary_soft_book)
    sharps = lines.sharp_overs
    consensus = consensus_line(sharps)
    agreement = sharp_agreement(sharps, full_disagreement_spread=config.full_disagreement_spread)

    edge_type = EdgeType.NONE
    edge_score = 0.0
    details = NO_SHARP_LINES_DETAIL
    side: Side | None = None
    if sharps:
        edge = classify_edge(soft, sharps, market=market, config=config)
        edge_type = edge.edge_type
        edge_score = edge.score
        details = edge.detail
        side = recommend_side(edge, consensus=consensus, soft_point=soft.point)
        if side is not None:
            edge_score = boost_score(edge_score, agreement, max_score=config.max_score)

    max_line: float | None = None
    min_line: float | None = None
    edge_remaining = 0.0
    win_probability: float | None = None
    if consensus is not None:
        bounds = acceptable_range(consensus, side, min_edge=config.min_edge_threshold)
        max_line = bounds.max_acceptable
        min_line = bounds.min_acceptable
        edge_remaining = abs(consensus - soft.point)
        win_probability = estimate_win_probability(
            soft.point, consensus, side, market=market, config=config
        )
        if side is not None:
            details = format_guidance(soft.point, consensus, side, max_line, min_line)

    return AnalyzedProp(
        id=prop_id(game_id, lines.player_key, market),
        game_id=game_id,
        sport=sport,
        player_key=lines.player_key,
        player_name=soft.player,
        market=market,
        soft_quote=soft,
        sharp_quotes=sharps,
        edge_type=edge_type,
        edge_score=edge_score,
        edge_details=details,
        recommended_side=side,
        fair_value=consensus,
        max_acceptable_line=max_line,
        min_acceptable_line=min_line,
        edge_remaining=edge_remaining,
        sharp_agreement=agreement,
        win_probability=win_probability,
    )


def rank_props(props: Iterable[AnalyzedProp]) -> list[AnalyzedProp]:
    """Order by edge score descending; ties keep their input order."""
    return sorted(props, key=lambda prop: prop.edge_score, reverse=True)


def match_and_find_edges(
    quotes: Iterable[Quote],
    *,
    game_id: str,
    sport: str,
    market: str,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> list[AnalyzedProp]:
    """Match soft lines to sharp lines for one game/market and rank the edges."""
    groups = group_quotes(quotes, soft_books=config.soft_books)
    results: list[AnalyzedProp] = []
    for lines in groups.values():
        analyzed = analyze_player(
            lines, game_id=game_id, sport=sport, market=market, config=config
        )
        if analyzed is not None:
            results.append(analyzed)
    logger.debug(
        "matched game=%s market=%s players=%d analyzed=%d",
        game_id,
        market,
        len(groups),
        len(results),
    )
    return rank_props(results)


def analyze_game(
    quotes: Iterable[Quote],
    *,
    game_id: str,
    sport: str,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> list[AnalyzedProp]:
    """Run the matcher once per market present in the game's quotes."""
    by_market: dict[str, list[Quote]] = {}
    for quote in quotes:
        by_market.setdefault(quote.market, []).append(quote)
    results: list[AnalyzedProp] = []
    for market, market_quotes in by_market.items():
        results.extend(
            match_and_find_edges(
                market_quotes, game_id=game_id, sport=sport, market=market, config=config
            )
        )
    return rank_props(results)
