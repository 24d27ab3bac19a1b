"""Validated quote contract at the boundary between retrieval and matching."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, Literal

Side = Literal["OVER", "UNDER"]

OVER: Side = "OVER"
UNDER: Side = "UNDER"

REQUIRED_COLUMNS: tuple[str, ...] = (
    "bookmaker_key",
    "market",
    "player",
    "side",
    "point",
    "price",
)

_SIDE_ALIASES: dict[str, Side] = {
    "over": OVER,
    "o": OVER,
    "under": UNDER,
    "u": UNDER,
}


class QuoteContractError(ValueError):
    """Raised when a quote record fails boundary validation."""


@dataclass(frozen=True)
class Quote:
    """One bookmaker line for a player prop outcome."""

    bookmaker: str
    bookmaker_key: str
    market: str
    player: str
    side: Side
    point: float
    price: int
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_side(value: Any) -> Side | None:
    """Map an outcome label onto OVER/UNDER, or None for anything else."""
    return _SIDE_ALIASES.get(_text(value).lower())


def _parse_point(value: Any, *, context: str) -> float:
    if isinstance(value, bool) or value is None:
        raise QuoteContractError(f"{context} point must be a number")
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        raw = _text(value)
        try:
            parsed = float(raw)
        except ValueError as exc:
            raise QuoteContractError(f"{context} point is not numeric: {raw!r}") from exc
    if not math.isfinite(parsed):
        raise QuoteContractError(f"{context} point must be finite")
    return parsed


def _parse_price(value: Any, *, context: str) -> int:
    if isinstance(value, bool) or value is None:
        raise QuoteContractError(f"{context} price must be an integer")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise QuoteContractError(f"{context} price must be an integer: {value!r}")
        parsed = int(value)
    else:
        raw = _text(value)
        if raw.startswith("+"):
            raw = raw[1:]
        try:
            parsed = int(raw)
        except ValueError as exc:
            raise QuoteContractError(f"{context} price is not an integer: {raw!r}") from exc
    if parsed == 0:
        raise QuoteContractError(f"{context} price must be non-zero American odds")
    return parsed


def parse_quote(row: Mapping[str, Any], *, row_index: int | None = None) -> Quote:
    """Build a Quote from a loose mapping, rejecting malformed records."""
    context = "quote" if row_index is None else f"quote row index={row_index}"
    if not isinstance(row, Mapping):
        raise QuoteContractError(f"{context} must be an object")
    missing = [column for column in REQUIRED_COLUMNS if column not in row]
    if missing:
        joined = ", ".join(sorted(missing))
        raise QuoteContractError(f"{context} missing required columns: {joined}")

    bookmaker_key = _text(row.get("bookmaker_key")).lower()
    if not bookmaker_key:
        raise QuoteContractError(f"{context} bookmaker_key is empty")
    player = _text(row.get("player"))
    if not player:
        raise QuoteContractError(f"{context} player is empty")
    market = _text(row.get("market"))
    if not market:
        raise QuoteContractError(f"{context} market is empty")
    side = parse_side(row.get("side"))
    if side is None:
        raise QuoteContractError(f"{context} side must be Over or Under: {row.get('side')!r}")

    return Quote(
        bookmaker=_text(row.get("bookmaker")) or bookmaker_key,
        bookmaker_key=bookmaker_key,
        market=market,
        player=player,
        side=side,
        point=_parse_point(row.get("point"), context=context),
        price=_parse_price(row.get("price"), context=context),
        timestamp=_text(row.get("timestamp")),
    )


def parse_quotes(rows: list[Mapping[str, Any]]) -> list[Quote]:
    return [parse_quote(row, row_index=index) for index, row in enumerate(rows)]
