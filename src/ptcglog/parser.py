"""Main parser for Pokemon TCG Live game logs.

parse_log() is the single entry point: setup phase, then turns, then
statistics, packaged as MatchData. Input problems come back as a failed
ParseResult rather than an exception.
"""

import logging
from typing import Optional, Sequence

from ptcglog import patterns
from ptcglog.event_parser import parse_turns
from ptcglog.models import (
    UNKNOWN_WINNER,
    MatchData,
    ParseResult,
    PlayerStatistics,
    WinCondition,
)
from ptcglog.settings import DEFAULT_CONFIG, ParserConfig
from ptcglog.setup_parser import SetupError, parse_setup
from ptcglog.statistics import apply_turns_played, calculate_statistics
from ptcglog.utils import (
    EventIdSequence,
    get_default_sequence,
    is_setup_header,
    split_log_into_lines,
)

logger = logging.getLogger(__name__)

ERROR_EMPTY = "Please paste a game log to analyze"
ERROR_NO_SETUP = "Invalid log format: missing setup phase"
ERROR_NO_TURNS = "Invalid log format: no game turns found"


def find_concession(lines: Sequence[str], players: Sequence[str]) -> Optional[str]:
    """Find the winner implied by a concession line.

    Recognises "You conceded. X wins.", "Opponent conceded. X wins." and
    "X conceded" (the other player wins).

    Returns:
        The winner's username, or None if nobody conceded.
    """
    for line in lines:
        match = patterns.YOU_CONCEDED.match(line) or patterns.OPPONENT_CONCEDED.match(line)
        if match:
            return match.group(1)

        match = patterns.PLAYER_CONCEDED.match(line)
        if match and match.group(1) in players:
            loser = match.group(1)
            return next(p for p in players if p != loser)
    return None


def infer_winner_from_prizes(
    statistics: dict[str, PlayerStatistics],
    players: Sequence[str],
    threshold: int,
) -> Optional[str]:
    """The first player who took at least `threshold` prize cards."""
    for player in players:
        stats = statistics.get(player)
        if stats and stats.prize_cards_taken >= threshold:
            return player
    return None


def parse_log(
    log_text: str,
    ids: Optional[EventIdSequence] = None,
    config: Optional[ParserConfig] = None,
) -> ParseResult:
    """Parse a Pokemon TCG Live game log into structured match data.

    Args:
        log_text: Raw log text as exported by the game client.
        ids: Event ID sequence. When omitted the process-wide sequence is
            reset and used, so repeated parses yield identical IDs.
        config: Parser tuning; defaults to DEFAULT_CONFIG.

    Returns:
        ParseResult with MatchData on success, or an error message.
    """
    if ids is None:
        ids = get_default_sequence()
        ids.reset()
    config = config or DEFAULT_CONFIG

    if not log_text or not log_text.strip():
        return ParseResult.fail(ERROR_EMPTY)

    lines = split_log_into_lines(log_text)

    if not any(is_setup_header(line) for line in lines):
        return ParseResult.fail(ERROR_NO_SETUP)

    setup = parse_setup(lines, ids=ids)
    if isinstance(setup, SetupError):
        return ParseResult.fail(setup.error)

    turn_result = parse_turns(lines, setup.setup_end_index, setup.players, ids=ids, config=config)
    if not turn_result.turns:
        return ParseResult.fail(ERROR_NO_TURNS)

    player_names = [p.username for p in setup.players]

    # Setup names first, de-duplicated, insertion ordered
    pokemon_in_match = list(dict.fromkeys(setup.pokemon_in_match + turn_result.pokemon_in_match))
    all_events = setup.events + turn_result.events

    statistics = calculate_statistics(all_events, player_names)

    winner = turn_result.winner
    win_condition = turn_result.win_condition or WinCondition.PRIZES

    if winner is None:
        winner = find_concession(lines[setup.setup_end_index:], player_names)
        if winner is not None:
            win_condition = WinCondition.CONCEDE

    if winner is None:
        winner = infer_winner_from_prizes(statistics, player_names, config.prize_win_threshold)
        win_condition = WinCondition.PRIZES

    if winner is None:
        winner = UNKNOWN_WINNER

    apply_turns_played(statistics, turn_result.turns)

    logger.info(
        f"Parsed match: {len(turn_result.turns)} turns, {len(all_events)} events, "
        f"winner={winner} ({win_condition.value})"
    )

    return ParseResult.ok(MatchData(
        players=setup.players,
        coin_flip_winner=setup.coin_flip_winner,
        coin_flip_choice=setup.coin_flip_choice,
        turns=turn_result.turns,
        events=all_events,
        winner=winner,
        win_condition=win_condition,
        statistics=statistics,
        pokemon_in_match=pokemon_in_match,
    ))
