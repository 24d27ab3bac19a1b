"""Normalization helpers for player names and per-event odds payloads."""

from __future__ import annotations

import re
import unicodedata
from typing import Any

from prop_edge.quotes import Quote, QuoteContractError, parse_quote, parse_side

NAME_SUFFIXES = ("jr", "sr", "ii", "iii", "iv")


def normalize_player_name(name: str) -> str:
    """Normalize a player display name into a grouping key."""
    lowered = name.lower().strip()
    decomposed = unicodedata.normalize("NFKD", lowered)
    ascii_only = "".join(ch for ch in decomposed if ord(ch) < 128)
    letters = re.sub(r"[^a-z\s]", "", ascii_only)
    words = letters.split()
    if len(words) > 1 and words[-1] in NAME_SUFFIXES:
        words = words[:-1]
    return " ".join(words)


def _expect_dict(value: Any, context: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise QuoteContractError(f"{context} must be an object")
    return value


def _expect_list(value: Any, context: str) -> list[Any]:
    if not isinstance(value, list):
        raise QuoteContractError(f"{context} must be a list")
    return value


def event_id_from_payload(payload: Any) -> str:
    event = _expect_dict(payload, "event_payload")
    return str(event.get("id", "")).strip()


def quotes_from_event_odds(payload: Any, *, captured_at: str = "") -> list[Quote]:
    """Parse one per-event odds response into validated Over/Under quotes."""
    event = _expect_dict(payload, "event_payload")
    bookmakers = _expect_list(event.get("bookmakers", []), "event_payload.bookmakers")
    quotes: list[Quote] = []
    for bookmaker in bookmakers:
        book_dict = _expect_dict(bookmaker, "event_bookmaker")
        book_key = str(book_dict.get("key", ""))
        book_title = str(book_dict.get("title", "") or book_key)
        markets = _expect_list(book_dict.get("markets", []), "event_bookmaker.markets")
        for market in markets:
            market_dict = _expect_dict(market, "event_market")
            market_key = str(market_dict.get("key", ""))
            last_update = str(
                market_dict.get("last_update") or book_dict.get("last_update") or captured_at
            )
            outcomes = _expect_list(market_dict.get("outcomes", []), "event_market.outcomes")
            for outcome in outcomes:
                outcome_dict = _expect_dict(outcome, "event_outcome")
                # Alternate labels and outcomes without a player are not O/U props.
                if parse_side(outcome_dict.get("name")) is None:
                    continue
                if not str(outcome_dict.get("description", "") or "").strip():
                    continue
                quotes.append(
                    parse_quote(
                        {
                            "bookmaker": book_title,
                            "bookmaker_key": book_key,
                            "market": market_key,
                            "player": outcome_dict.get("description"),
                            "side": outcome_dict.get("name"),
                            "point": outcome_dict.get("point"),
                            "price": outcome_dict.get("price"),
                            "timestamp": last_update,
                        }
                    )
                )
    return quotes
