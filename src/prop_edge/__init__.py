"""Soft vs sharp prop line matching and edge scoring."""

from prop_edge.config import (
    DEFAULT_MATCHING_CONFIG,
    ConfigError,
    MatchingConfig,
    load_matching_config,
    supported_markets,
)
from prop_edge.edge import EdgeResult, EdgeType, classify_edge
from prop_edge.matching import AnalyzedProp, analyze_game, match_and_find_edges, rank_props
from prop_edge.normalize import normalize_player_name, quotes_from_event_odds
from prop_edge.quotes import OVER, UNDER, Quote, QuoteContractError, parse_quote
from prop_edge.scan import (
    GameRef,
    QuoteFetchError,
    ScanResult,
    scan_games,
    scan_games_from_settings,
)

__all__ = [
    "DEFAULT_MATCHING_CONFIG",
    "OVER",
    "UNDER",
    "AnalyzedProp",
    "ConfigError",
    "EdgeResult",
    "EdgeType",
    "GameRef",
    "MatchingConfig",
    "Quote",
    "QuoteContractError",
    "QuoteFetchError",
    "ScanResult",
    "analyze_game",
    "classify_edge",
    "load_matching_config",
    "match_and_find_edges",
    "normalize_player_name",
    "parse_quote",
    "quotes_from_event_odds",
    "rank_props",
    "scan_games",
    "scan_games_from_settings",
    "supported_markets",
]
