from __future__ import annotations

from pathlib import Path

import pytest

from prop_edge.config import (
    DEFAULT_MATCHING_CONFIG,
    ConfigError,
    MatchingConfig,
    load_matching_config,
    supported_markets,
)


def test_default_config_values() -> None:
    config = MatchingConfig()

    assert config.soft_books == frozenset({"prizepicks", "underdog_fantasy"})
    assert config.primary_soft_book == "prizepicks"
    assert config.gold_standard_book == "pinnacle"
    assert config.alt_line_tolerance("player_points") == 8.0
    assert config.alt_line_tolerance("player_pass_yds") == 40.0
    assert config.alt_line_tolerance("player_blocks") == 5.0
    assert config.probability_multiplier("player_points") == 3.5
    assert config.probability_multiplier("player_blocks") == 3.0
    assert config.min_edge_threshold == 0.5


def test_with_overrides_returns_new_config() -> None:
    config = DEFAULT_MATCHING_CONFIG.with_overrides(
        soft_books=["sleeper"], alt_line_tolerances={"player_points": 6}
    )

    assert config.soft_books == frozenset({"sleeper"})
    assert config.alt_line_tolerance("player_points") == 6
    assert DEFAULT_MATCHING_CONFIG.alt_line_tolerance("player_points") == 8.0
    with pytest.raises(TypeError):
        config.alt_line_tolerances["player_points"] = 1.0  # type: ignore[index]


def test_load_matching_config_without_path_returns_defaults() -> None:
    assert load_matching_config(None) == DEFAULT_MATCHING_CONFIG


def test_load_matching_config_layers_tables(tmp_path: Path) -> None:
    path = tmp_path / "matching.toml"
    path.write_text(
        "\n".join(
            [
                "[books]",
                'soft = ["prizepicks", "Sleeper"]',
                'primary_soft = "sleeper"',
                'gold_standard = "circa"',
                "",
                "[thresholds]",
                "min_edge_threshold = 1.0",
                "juice_price_threshold = 140",
                "probability_cap = 70",
                "",
                "[alt_line_tolerance]",
                "player_points = 6",
                "player_blocks = 1.5",
                "",
                "[probability_multiplier]",
                "player_blocks = 10",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    config = load_matching_config(path)

    assert config.soft_books == frozenset({"prizepicks", "sleeper"})
    assert config.primary_soft_book == "sleeper"
    assert config.gold_standard_book == "circa"
    assert config.min_edge_threshold == 1.0
    assert config.juice_price_threshold == 140
    assert isinstance(config.juice_price_threshold, int)
    assert config.probability_cap == 70.0
    assert config.alt_line_tolerance("player_points") == 6.0
    assert config.alt_line_tolerance("player_rebounds") == 4.0
    assert config.alt_line_tolerance("player_blocks") == 1.5
    assert config.probability_multiplier("player_blocks") == 10.0


@pytest.mark.parametrize(
    "body",
    [
        "books = 3\n",
        "[alt_line_tolerance]\nplayer_points = \"wide\"\n",
        "[alt_line_tolerance]\nplayer_points = -1\n",
        "[thresholds]\nprobability_floor = 80\nprobability_cap = 70\n",
        "[thresholds]\nfull_disagreement_spread = 0\n",
        "[thresholds]\njuice_price_threshold = 135.7\n",
        "[thresholds]\njuice_price_base = true\n",
        "not toml = = \n",
    ],
)
def test_load_matching_config_rejects_invalid(tmp_path: Path, body: str) -> None:
    path = tmp_path / "matching.toml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_matching_config(path)


def test_load_matching_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_matching_config(tmp_path / "missing.toml")


@pytest.mark.parametrize(
    ("sport", "expected"),
    [
        ("basketball_nba", ("player_points", "player_rebounds", "player_assists", "player_threes")),
        (
            "americanfootball_nfl",
            ("player_pass_yds", "player_rush_yds", "player_reception_yds", "player_pass_tds"),
        ),
        ("icehockey_nhl", ("player_points",)),
    ],
)
def test_supported_markets(sport: str, expected: tuple[str, ...]) -> None:
    assert supported_markets(sport) == expected
