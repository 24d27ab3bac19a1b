"""Partition a flat quote list into per-player soft/sharp buckets."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from prop_edge.normalize import normalize_player_name
from prop_edge.quotes import OVER, Quote


@dataclass(frozen=True)
class PlayerLines:
    """Quotes for one player, split by book type."""

    player_key: str
    display_name: str
    soft: tuple[Quote, ...]
    sharp: tuple[Quote, ...]

    @property
    def soft_overs(self) -> tuple[Quote, ...]:
        return tuple(quote for quote in self.soft if quote.side == OVER)

    @property
    def sharp_overs(self) -> tuple[Quote, ...]:
        return tuple(quote for quote in self.sharp if quote.side == OVER)


def group_quotes(
    quotes: Iterable[Quote], *, soft_books: frozenset[str] | set[str]
) -> Mapping[str, PlayerLines]:
    """Group quotes by normalized player name, preserving first-seen order."""
    soft_by_key: dict[str, list[Quote]] = {}
    sharp_by_key: dict[str, list[Quote]] = {}
    names: dict[str, str] = {}
    for quote in quotes:
        key = normalize_player_name(quote.player)
        if not key:
            continue
        if key not in names:
            names[key] = quote.player
            soft_by_key[key] = []
            sharp_by_key[key] = []
        bucket = soft_by_key if quote.bookmaker_key in soft_books else sharp_by_key
        bucket[key].append(quote)

    return MappingProxyType(
        {
            key: PlayerLines(
                player_key=key,
                display_name=names[key],
                soft=tuple(soft_by_key[key]),
                sharp=tuple(sharp_by_key[key]),
            )
            for key in names
        }
    )
