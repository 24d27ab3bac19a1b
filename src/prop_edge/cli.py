"""Command line interface for prop-edge."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from prop_edge.config import ConfigError, MatchingConfig, load_matching_config, supported_markets
from prop_edge.matching import AnalyzedProp, analyze_game, rank_props
from prop_edge.normalize import event_id_from_payload, quotes_from_event_odds
from prop_edge.quotes import QuoteContractError
from prop_edge.settings import Settings

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """User-facing CLI error."""


def _parse_csv(raw_values: list[str] | None) -> list[str]:
    values: list[str] = []
    for raw in raw_values or []:
        values.extend(item.strip() for item in raw.split(",") if item.strip())
    return values


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.strip().upper() or "INFO")
    if not isinstance(level, int):
        raise CLIError(f"unknown log level: {level_name}")
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_matching_config(args: argparse.Namespace, settings: Settings) -> MatchingConfig:
    raw = str(getattr(args, "config", "") or "").strip()
    if raw:
        return load_matching_config(Path(raw))
    return settings.matching_config()


def _load_payloads(path: Path) -> list[dict[str, Any]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CLIError(f"invalid JSON in {path}: {exc}") from exc
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        for index, item in enumerate(payload):
            if not isinstance(item, dict):
                raise CLIError(f"{path} entry index={index} must be an event odds object")
        return payload
    raise CLIError(f"{path} must hold an event odds object or a list of them")


def _cmd_scan(args: argparse.Namespace) -> int:
    settings = Settings()
    config = _resolve_matching_config(args, settings)
    markets = set(_parse_csv(args.market))
    path = Path(args.input)

    props: list[AnalyzedProp] = []
    for index, payload in enumerate(_load_payloads(path)):
        game_id = args.game_id or event_id_from_payload(payload) or f"game-{index}"
        sport = args.sport or str(payload.get("sport_key", "") or "basketball_nba")
        quotes = quotes_from_event_odds(payload, captured_at=str(args.captured_at or ""))
        if markets:
            quotes = [quote for quote in quotes if quote.market in markets]
        logger.info("parsed game=%s sport=%s quotes=%d", game_id, sport, len(quotes))
        props.extend(analyze_game(quotes, game_id=game_id, sport=sport, config=config))

    ranked = rank_props(props)
    if args.top_n > 0:
        ranked = ranked[: args.top_n]
    if args.edges_only:
        ranked = [prop for prop in ranked if prop.recommended_side is not None]
    print(json.dumps([prop.to_dict() for prop in ranked], sort_keys=True, indent=2))
    return 0


def _cmd_markets(args: argparse.Namespace) -> int:
    print(json.dumps({"sport": args.sport, "markets": list(supported_markets(args.sport))}))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prop-edge")
    parser.add_argument(
        "--log-level",
        default="",
        help="Logging level (default: PROP_EDGE_LOG_LEVEL or INFO).",
    )
    subparsers = parser.add_subparsers(dest="command")

    scan = subparsers.add_parser("scan", help="Match soft vs sharp lines in saved odds payloads")
    scan.add_argument("--input", required=True, help="Event odds JSON (object or list).")
    scan.add_argument("--game-id", default="", help="Override the payload event id.")
    scan.add_argument("--sport", default="", help="Sport key (default: payload sport_key).")
    scan.add_argument(
        "--market",
        action="append",
        default=[],
        help="Restrict to market keys; repeat or comma-separate.",
    )
    scan.add_argument("--config", default="", help="Matching config TOML.")
    scan.add_argument("--captured-at", default="", help="Fallback quote timestamp.")
    scan.add_argument("--top-n", type=int, default=0)
    scan.add_argument("--edges-only", action="store_true")
    scan.set_defaults(func=_cmd_scan)

    markets = subparsers.add_parser("markets", help="List scanned markets for a sport")
    markets.add_argument("--sport", default="basketball_nba")
    markets.set_defaults(func=_cmd_markets)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0
    try:
        _configure_logging(args.log_level or Settings().log_level)
        return int(func(args))
    except (CLIError, ConfigError, QuoteContractError, FileNotFoundError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
