from __future__ import annotations

import threading

import pytest

from prop_edge.edge import EdgeType
from prop_edge.quotes import Quote
from prop_edge.scan import GameRef, QuoteFetchError, scan_games, scan_games_from_settings
from prop_edge.settings import Settings


def _quote(book: str, player: str, point: float, market: str = "player_points") -> Quote:
    return Quote(
        bookmaker=book.title(),
        bookmaker_key=book,
        market=market,
        player=player,
        side="OVER",
        point=point,
        price=-110,
    )


def _game_quotes(player: str, soft: float, sharp: float) -> list[Quote]:
    return [_quote("prizepicks", player, soft), _quote("pinnacle", player, sharp)]


def test_scan_games_isolates_failures() -> None:
    games = [
        GameRef("g1", "basketball_nba"),
        GameRef("g2", "basketball_nba"),
        GameRef("g3", "basketball_nba"),
    ]

    def fetch(game: GameRef) -> list[Quote]:
        if game.game_id == "g2":
            raise RuntimeError("upstream 500")
        return _game_quotes(f"Player {game.game_id}", 20.5, 22.5)

    result = scan_games(games, fetch, batch_delay_s=0, retry_wait_s=0)

    assert result.games_scanned == 3
    assert [prop.game_id for prop in result.props] == ["g1", "g3"]
    assert result.failures == {"g2": "RuntimeError: upstream 500"}


def test_scan_games_retries_fetch_errors() -> None:
    calls: dict[str, int] = {}
    lock = threading.Lock()

    def fetch(game: GameRef) -> list[Quote]:
        with lock:
            calls[game.game_id] = calls.get(game.game_id, 0) + 1
            attempt = calls[game.game_id]
        if attempt == 1:
            raise QuoteFetchError("rate limited")
        return _game_quotes("LeBron James", 24.5, 26.5)

    result = scan_games(
        [GameRef("g1", "basketball_nba")], fetch, max_attempts=2, retry_wait_s=0
    )

    assert calls == {"g1": 2}
    assert result.failures == {}
    (prop,) = result.props
    assert prop.edge_type == EdgeType.DISCREPANCY


def test_scan_games_gives_up_after_max_attempts() -> None:
    def fetch(game: GameRef) -> list[Quote]:
        raise QuoteFetchError("still failing")

    result = scan_games(
        [GameRef("g1", "basketball_nba")], fetch, max_attempts=3, retry_wait_s=0
    )

    assert result.props == []
    assert result.failures == {"g1": "QuoteFetchError: still failing"}


def test_scan_games_sleeps_between_batches() -> None:
    delays: list[float] = []
    games = [GameRef(f"g{index}", "basketball_nba") for index in range(7)]

    result = scan_games(
        games,
        lambda game: [],
        batch_size=3,
        batch_delay_s=0.6,
        sleep=delays.append,
    )

    assert delays == [0.6, 0.6]
    assert result.props == []
    assert result.failures == {}


def test_scan_games_later_record_replaces_earlier() -> None:
    soft_lines = iter([24.5, 25.5])

    def fetch(game: GameRef) -> list[Quote]:
        return _game_quotes("LeBron James", next(soft_lines), 26.5)

    result = scan_games(
        [GameRef("g1", "basketball_nba"), GameRef("g1", "basketball_nba")],
        fetch,
        batch_size=1,
        batch_delay_s=0,
    )

    (prop,) = result.props
    assert prop.soft_quote.point == 25.5


def test_scan_games_ranks_across_games() -> None:
    by_game = {
        "g1": _game_quotes("Small Edge", 24.5, 25.0),
        "g2": _game_quotes("Big Edge", 20.5, 23.5),
        "g3": _game_quotes("No Edge", 10.5, 10.5),
    }
    games = [GameRef(game_id, "basketball_nba") for game_id in by_game]

    result = scan_games(games, lambda game: by_game[game.game_id], batch_delay_s=0)

    scores = [prop.edge_score for prop in result.props]
    assert scores == sorted(scores, reverse=True)
    assert result.props[0].player_key == "big edge"


@pytest.mark.parametrize("sport", ["basketball_nba", "americanfootball_nfl"])
def test_game_ref_markets(sport: str) -> None:
    assert GameRef("g1", sport).markets


def test_scan_games_from_settings_uses_env_batching(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PROP_EDGE_MATCHING_CONFIG_PATH", raising=False)
    monkeypatch.setenv("PROP_EDGE_SCAN_BATCH_SIZE", "2")
    monkeypatch.setenv("PROP_EDGE_SCAN_BATCH_DELAY_S", "0.25")
    monkeypatch.setenv("PROP_EDGE_SCAN_MAX_ATTEMPTS", "1")
    calls: list[str] = []
    lock = threading.Lock()
    delays: list[float] = []

    def fetch(game: GameRef) -> list[Quote]:
        with lock:
            calls.append(game.game_id)
        if game.game_id == "g0":
            raise QuoteFetchError("rate limited")
        return []

    games = [GameRef(f"g{index}", "basketball_nba") for index in range(5)]
    result = scan_games_from_settings(games, fetch, Settings(_env_file=None), sleep=delays.append)

    assert delays == [0.25, 0.25]
    assert sorted(calls) == ["g0", "g1", "g2", "g3", "g4"]
    assert result.failures == {"g0": "QuoteFetchError: rate limited"}


def test_scan_games_from_settings_applies_matching_config(
    monkeypatch: pytest.MonkeyPatch, tmp_path
) -> None:
    config_path = tmp_path / "matching.toml"
    config_path.write_text("[alt_line_tolerance]\nplayer_points = 1\n", encoding="utf-8")
    monkeypatch.setenv("PROP_EDGE_MATCHING_CONFIG_PATH", str(config_path))

    result = scan_games_from_settings(
        [GameRef("g1", "basketball_nba")],
        lambda game: _game_quotes("LeBron James", 24.5, 26.5),
        Settings(_env_file=None),
        sleep=lambda _: None,
    )

    (prop,) = result.props
    assert prop.edge_type == EdgeType.NONE


def test_scan_failure_log_names_game_label(caplog: pytest.LogCaptureFixture) -> None:
    def fetch(game: GameRef) -> list[Quote]:
        raise RuntimeError("upstream 500")

    with caplog.at_level("WARNING", logger="prop_edge.scan"):
        scan_games([GameRef("g1", "basketball_nba", label="LAL @ BOS")], fetch)

    assert "g1 (LAL @ BOS)" in caplog.text


def test_game_ref_describe_without_label() -> None:
    assert GameRef("g1", "basketball_nba").describe() == "g1"
