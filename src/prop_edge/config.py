"""Matching configuration: book partition, market thresholds, heuristics."""

from __future__ import annotations

import math
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

DEFAULT_SOFT_BOOKS: tuple[str, ...] = ("prizepicks", "underdog_fantasy")
DEFAULT_PRIMARY_SOFT_BOOK = "prizepicks"
DEFAULT_GOLD_STANDARD_BOOK = "pinnacle"

# Point gap beyond which a soft line is assumed to be an alternate line.
DEFAULT_ALT_LINE_TOLERANCES: dict[str, float] = {
    "player_points": 8.0,
    "player_rebounds": 4.0,
    "player_assists": 3.0,
    "player_threes": 2.0,
    "player_pass_yds": 40.0,
    "player_rush_yds": 25.0,
    "player_reception_yds": 20.0,
    "player_receptions": 3.0,
    "player_pass_tds": 1.5,
}

# Win-probability points gained per point of line edge.
DEFAULT_PROBABILITY_MULTIPLIERS: dict[str, float] = {
    "player_points": 3.5,
    "player_rebounds": 5.0,
    "player_assists": 5.0,
    "player_threes": 8.0,
    "player_pass_yds": 0.15,
    "player_rush_yds": 0.25,
    "player_reception_yds": 0.25,
    "player_receptions": 5.0,
    "player_pass_tds": 15.0,
}

SUPPORTED_MARKETS: dict[str, tuple[str, ...]] = {
    "basketball_nba": ("player_points", "player_rebounds", "player_assists", "player_threes"),
    "americanfootball_nfl": (
        "player_pass_yds",
        "player_rush_yds",
        "player_reception_yds",
        "player_pass_tds",
    ),
}
FALLBACK_MARKETS: tuple[str, ...] = ("player_points",)


class ConfigError(ValueError):
    """Raised when matching configuration is invalid."""


def supported_markets(sport: str) -> tuple[str, ...]:
    """Return the prop markets scanned for a sport key."""
    return SUPPORTED_MARKETS.get(sport.strip(), FALLBACK_MARKETS)


def _frozen(values: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class MatchingConfig:
    """Thresholds and book partition used by the matching engine."""

    soft_books: frozenset[str] = frozenset(DEFAULT_SOFT_BOOKS)
    primary_soft_book: str = DEFAULT_PRIMARY_SOFT_BOOK
    gold_standard_book: str = DEFAULT_GOLD_STANDARD_BOOK
    alt_line_tolerances: Mapping[str, float] = field(
        default_factory=lambda: _frozen(DEFAULT_ALT_LINE_TOLERANCES)
    )
    default_alt_line_tolerance: float = 5.0
    probability_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _frozen(DEFAULT_PROBABILITY_MULTIPLIERS)
    )
    default_probability_multiplier: float = 3.0
    min_edge_threshold: float = 0.5
    discrepancy_min_diff: float = 1.0
    discrepancy_base_score: float = 90.0
    small_discrepancy_score: float = 80.0
    juice_price_threshold: int = 135
    juice_price_base: int = 130
    juice_base_score: float = 75.0
    full_disagreement_spread: float = 3.0
    probability_floor: float = 50.0
    probability_cap: float = 75.0
    max_score: float = 100.0

    def alt_line_tolerance(self, market: str) -> float:
        return float(self.alt_line_tolerances.get(market, self.default_alt_line_tolerance))

    def probability_multiplier(self, market: str) -> float:
        return float(
            self.probability_multipliers.get(market, self.default_probability_multiplier)
        )

    def with_overrides(self, **changes: Any) -> MatchingConfig:
        """Return a copy with the given fields replaced."""
        for key in ("alt_line_tolerances", "probability_multipliers"):
            if key in changes:
                changes[key] = _frozen(changes[key])
        if "soft_books" in changes:
            changes["soft_books"] = frozenset(changes["soft_books"])
        return replace(self, **changes)


DEFAULT_MATCHING_CONFIG = MatchingConfig()


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"failed reading matching config: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid matching config TOML: {path}") from exc
    return payload


def _as_table(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"matching config section [{key}] must be a table")
    return value


def _as_number(value: Any, *, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"matching config value {name} must be a number")
    parsed = float(value)
    if not math.isfinite(parsed) or parsed < 0:
        raise ConfigError(f"matching config value {name} must be a non-negative number")
    return parsed


def _as_int(value: Any, *, name: str) -> int:
    parsed = _as_number(value, name=name)
    if not parsed.is_integer():
        raise ConfigError(f"matching config value {name} must be a whole number")
    return int(parsed)


def _as_str(value: Any, *, default: str) -> str:
    if isinstance(value, str):
        stripped = value.strip().lower()
        if stripped:
            return stripped
    return default


def _as_book_list(value: Any, *, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        raise ConfigError("matching config books.soft must be a list or comma string")
    cleaned = [str(item).strip().lower() for item in value if str(item).strip()]
    return tuple(cleaned) if cleaned else default


def _number_table(table: dict[str, Any], *, section: str) -> dict[str, float]:
    return {
        str(market): _as_number(value, name=f"{section}.{market}")
        for market, value in table.items()
    }


_THRESHOLD_FIELDS: tuple[str, ...] = (
    "default_alt_line_tolerance",
    "default_probability_multiplier",
    "min_edge_threshold",
    "discrepancy_min_diff",
    "discrepancy_base_score",
    "small_discrepancy_score",
    "juice_base_score",
    "full_disagreement_spread",
    "probability_floor",
    "probability_cap",
    "max_score",
)


def load_matching_config(
    path: Path | None = None, *, base: MatchingConfig | None = None
) -> MatchingConfig:
    """Load matching config from TOML, layering per-market tables over the defaults."""
    config = base or DEFAULT_MATCHING_CONFIG
    if path is None:
        return config
    source = path.expanduser().resolve()
    if not source.exists():
        raise ConfigError(f"matching config file not found: {source}")

    payload = _read_toml(source)
    books = _as_table(payload, "books")
    thresholds = _as_table(payload, "thresholds")
    tolerances = _as_table(payload, "alt_line_tolerance")
    multipliers = _as_table(payload, "probability_multiplier")

    changes: dict[str, Any] = {
        "soft_books": _as_book_list(books.get("soft"), default=tuple(sorted(config.soft_books))),
        "primary_soft_book": _as_str(books.get("primary_soft"), default=config.primary_soft_book),
        "gold_standard_book": _as_str(
            books.get("gold_standard"), default=config.gold_standard_book
        ),
        "alt_line_tolerances": {
            **config.alt_line_tolerances,
            **_number_table(tolerances, section="alt_line_tolerance"),
        },
        "probability_multipliers": {
            **config.probability_multipliers,
            **_number_table(multipliers, section="probability_multiplier"),
        },
    }
    for name in _THRESHOLD_FIELDS:
        if name in thresholds:
            changes[name] = _as_number(thresholds[name], name=f"thresholds.{name}")
    for name in ("juice_price_threshold", "juice_price_base"):
        if name in thresholds:
            changes[name] = _as_int(thresholds[name], name=f"thresholds.{name}")

    loaded = config.with_overrides(**changes)
    if loaded.probability_floor > loaded.probability_cap:
        raise ConfigError("thresholds.probability_floor must not exceed probability_cap")
    if loaded.full_disagreement_spread <= 0:
        raise ConfigError("thresholds.full_disagreement_spread must be positive")
    return loaded
