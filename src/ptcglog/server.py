"""FastMCP server exposing Pokemon TCG Live log analysis.

Deterministic code parses the log and reconstructs decks; the connected
LLM client gets structured match data to reason about.

Run with: python -m ptcglog.server
"""

import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from ptcglog.deck_reconstructor import reconstruct_decks
from ptcglog.models import ParseResult
from ptcglog.parser import parse_log
from ptcglog.settings import SETTINGS_DIR, ParserConfig, get_settings
from ptcglog.summary import calculate_deck_summary, format_card_count, is_significant_event

logger = logging.getLogger(__name__)

# Initialize FastMCP server with STDIO transport
mcp = FastMCP("ptcglog")

_config: Optional[ParserConfig] = None


def _get_config() -> ParserConfig:
    """Get or build the parser config from settings (lazy loading)."""
    global _config
    if _config is None:
        _config = ParserConfig.from_settings(get_settings())
        logger.info(f"Parser config: {_config}")
    return _config


def _parse(log_text: str) -> ParseResult:
    return parse_log(log_text, config=_get_config())


@mcp.tool()
def parse_game_log(log_text: str) -> dict[str, Any]:
    """Parse a Pokemon TCG Live game log into structured match data.

    Args:
        log_text: The full game log as copied from the client.

    Returns:
        Dict with success=True and data (players, turns, events, winner,
        win_condition, statistics, pokemon_in_match), or success=False and
        an error message describing what is wrong with the log.
    """
    try:
        return _parse(log_text).to_dict()
    except Exception as e:
        logger.error(f"Parse error: {e}")
        return {"error": str(e)}


@mcp.tool()
def parse_game_log_file(path: str) -> dict[str, Any]:
    """Parse a game log saved to a text file.

    Args:
        path: Path to a UTF-8 text file containing the log.

    Returns:
        Same structure as parse_game_log, or {"error": message} if the
        file cannot be read.
    """
    log_path = Path(path).expanduser()
    if not log_path.exists():
        return {"error": f"Log file not found: {log_path}"}

    try:
        log_text = log_path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        logger.error(f"Failed to read {log_path}: {e}")
        return {"error": str(e)}

    return parse_game_log(log_text)


@mcp.tool()
def reconstruct_game_decks(log_text: str) -> dict[str, Any]:
    """Reconstruct each player's partial decklist from a game log.

    Only cards seen in the log are listed. Counts are capped at 4 copies
    except basic energy.

    Returns:
        Dict of username -> deck (cards grouped into pokemon, trainers and
        energy, plus total_cards_observed), or {"error": message} if the
        log cannot be parsed.
    """
    try:
        result = _parse(log_text)
        if not result.success:
            return {"error": result.error}
        decks = reconstruct_decks(result.data, _get_config())
        return {name: deck.to_dict() for name, deck in decks.items()}
    except Exception as e:
        logger.error(f"Deck reconstruction error: {e}")
        return {"error": str(e)}


@mcp.tool()
def get_match_summary(log_text: str) -> dict[str, Any]:
    """Get a compact summary of a match for quick analysis.

    Returns:
        Dict with:
        - winner / win_condition / turns
        - players: {username: {went_first, statistics, deck_summary, decklist}}
        - key_events: knockouts and attacks of 100+ damage, in order

        or {"error": message} if the log cannot be parsed.
    """
    try:
        result = _parse(log_text)
        if not result.success:
            return {"error": result.error}

        match = result.data
        decks = reconstruct_decks(match, _get_config())

        players = {}
        for player in match.players:
            deck = decks.get(player.username)
            players[player.username] = {
                "went_first": player.is_first,
                "statistics": match.statistics[player.username].to_dict(),
                "deck_summary": calculate_deck_summary(deck).to_dict() if deck else None,
                "decklist": [format_card_count(c) for c in deck.cards] if deck else [],
            }

        return {
            "winner": match.winner,
            "win_condition": match.win_condition.value,
            "turns": len(match.turns),
            "players": players,
            "key_events": [
                {"turn": e.turn, "player": e.player, "description": e.description}
                for e in match.events if is_significant_event(e)
            ],
        }
    except Exception as e:
        logger.error(f"Summary error: {e}")
        return {"error": str(e)}


@mcp.tool()
def update_parser_setting(key: str, value: int) -> dict[str, Any]:
    """Change a parser tuning value and save it to the settings file.

    Args:
        key: One of prize_win_threshold, card_lookahead_lines,
            max_card_copies, damage_per_counter.
        value: New integer value.

    Returns:
        Dict with the key, value and the parser config now in effect, or
        {"error": message} for an unknown key.
    """
    global _config
    valid_keys = [f.name for f in fields(ParserConfig)]
    if key not in valid_keys:
        return {"error": f"Unknown setting: {key}. Valid settings: {', '.join(valid_keys)}"}

    get_settings().set(key, int(value))
    _config = None
    logger.info(f"Parser setting {key} set to {value}")
    return {"key": key, "value": int(value), "config": asdict(_get_config())}


def configure_logging() -> None:
    """Log to ~/.ptcglog/debug.log and, at the configured level, to stderr."""
    SETTINGS_DIR.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(SETTINGS_DIR / "debug.log", mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(get_settings().get("log_level"))
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)


def main() -> None:
    configure_logging()
    logger.info("Starting ptcglog MCP server")
    mcp.run()


# Entry point for running as module
if __name__ == "__main__":
    main()
