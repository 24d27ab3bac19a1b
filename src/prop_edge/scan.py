"""Batched multi-game scan around an injected quote collaborator."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from prop_edge.config import DEFAULT_MATCHING_CONFIG, MatchingConfig, supported_markets
from prop_edge.matching import AnalyzedProp, analyze_game, rank_props
from prop_edge.quotes import Quote
from prop_edge.settings import Settings

logger = logging.getLogger(__name__)


class QuoteFetchError(RuntimeError):
    """Raised by a quote collaborator for a retryable retrieval failure."""


@dataclass(frozen=True)
class GameRef:
    """Game identity handed to the quote collaborator."""

    game_id: str
    sport: str
    label: str = ""

    @property
    def markets(self) -> tuple[str, ...]:
        return supported_markets(self.sport)

    def describe(self) -> str:
        if self.label:
            return f"{self.game_id} ({self.label})"
        return self.game_id


@dataclass(frozen=True)
class ScanResult:
    props: list[AnalyzedProp]
    failures: dict[str, str] = field(default_factory=dict)
    games_scanned: int = 0


FetchQuotes = Callable[[GameRef], Sequence[Quote]]


def _batches(games: Sequence[GameRef], size: int) -> list[Sequence[GameRef]]:
    return [games[index : index + size] for index in range(0, len(games), size)]


def _fetch_with_retry(
    game: GameRef,
    fetch_quotes: FetchQuotes,
    *,
    max_attempts: int,
    retry_wait_s: float,
) -> list[Quote]:
    for attempt in Retrying(
        stop=stop_after_attempt(max_attempts),
        retry=retry_if_exception_type(QuoteFetchError),
        wait=wait_fixed(retry_wait_s),
        reraise=True,
    ):
        with attempt:
            return list(fetch_quotes(game))
    return []


def _scan_one(
    game: GameRef,
    fetch_quotes: FetchQuotes,
    *,
    config: MatchingConfig,
    max_attempts: int,
    retry_wait_s: float,
) -> tuple[list[AnalyzedProp], str | None]:
    try:
        quotes = _fetch_with_retry(
            game, fetch_quotes, max_attempts=max_attempts, retry_wait_s=retry_wait_s
        )
    except Exception as exc:  # noqa: BLE001
        logger.warning("quote fetch failed game=%s error=%s", game.describe(), exc)
        return [], f"{type(exc).__name__}: {exc}"
    if not quotes:
        logger.info("no quotes for game=%s", game.describe())
        return [], None
    props = analyze_game(quotes, game_id=game.game_id, sport=game.sport, config=config)
    logger.info(
        "scanned game=%s quotes=%d props=%d", game.describe(), len(quotes), len(props)
    )
    return props, None


def scan_games(
    games: Sequence[GameRef],
    fetch_quotes: FetchQuotes,
    *,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    batch_size: int = 3,
    batch_delay_s: float = 0.6,
    max_attempts: int = 2,
    retry_wait_s: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> ScanResult:
    """Fetch and analyze games in small concurrent batches.

    Each game's quotes come from ``fetch_quotes``; ``QuoteFetchError`` is
    retried, and any failure leaves that game empty without stopping the rest.
    Records sharing an id replace earlier ones, and the merged set is ranked.
    """
    batch_size = max(1, int(batch_size))
    merged: dict[str, AnalyzedProp] = {}
    failures: dict[str, str] = {}
    batches = _batches(list(games), batch_size)
    for index, batch in enumerate(batches):
        if index > 0 and batch_delay_s > 0:
            sleep(batch_delay_s)
        with ThreadPoolExecutor(max_workers=batch_size) as executor:
            futures = [
                executor.submit(
                    _scan_one,
                    game,
                    fetch_quotes,
                    config=config,
                    max_attempts=max_attempts,
                    retry_wait_s=retry_wait_s,
                )
                for game in batch
            ]
            for game, future in zip(batch, futures, strict=True):
                props, error = future.result()
                if error is not None:
                    failures[game.game_id] = error
                for prop in props:
                    merged[prop.id] = prop

    logger.info(
        "scan complete games=%d props=%d failures=%d", len(games), len(merged), len(failures)
    )
    return ScanResult(
        props=rank_props(merged.values()),
        failures=failures,
        games_scanned=len(games),
    )


def scan_games_from_settings(
    games: Sequence[GameRef],
    fetch_quotes: FetchQuotes,
    settings: Settings | None = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> ScanResult:
    """Run ``scan_games`` with batching, retries and matching config from settings."""
    settings = settings or Settings()
    return scan_games(
        games,
        fetch_quotes,
        config=settings.matching_config(),
        batch_size=settings.scan_batch_size,
        batch_delay_s=settings.scan_batch_delay_s,
        max_attempts=settings.scan_max_attempts,
        sleep=sleep,
    )
