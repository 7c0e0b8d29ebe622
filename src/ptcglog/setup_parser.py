"""Parser for the setup phase of a Pokemon TCG Live game log.

The setup phase runs from the "Setup" header to the first turn marker and
holds the coin flip, the go-first decision, opening hands, mulligans and
the Pokemon placed before turn 1.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from ptcglog import events, patterns
from ptcglog.models import GameEvent, Player
from ptcglog.utils import (
    EventIdSequence,
    PlayerSlots,
    find_first_turn_index,
    get_default_sequence,
    is_setup_header,
    parse_location,
)

logger = logging.getLogger(__name__)

SETUP_TURN = 0

ERROR_NO_PLAYERS = "Could not identify players in the log"
ERROR_NO_COIN_FLIP = "Invalid log format: missing coin flip information"


@dataclass
class SetupResult:
    players: tuple[Player, Player]
    coin_flip_winner: str
    coin_flip_choice: str
    events: list[GameEvent] = field(default_factory=list)
    pokemon_in_match: list[str] = field(default_factory=list)
    setup_end_index: int = 0


@dataclass
class SetupError:
    error: str


SetupParseResult = Union[SetupResult, SetupError]


def is_setup_error(result: SetupParseResult) -> bool:
    return isinstance(result, SetupError)


def parse_setup(
    lines: list[str],
    end_index: Optional[int] = None,
    ids: Optional[EventIdSequence] = None,
) -> SetupParseResult:
    """Parse the setup phase of a game log.

    Args:
        lines: All log lines.
        end_index: Index of the first turn marker (exclusive bound of the
            setup region). Located automatically when omitted.
        ids: Event ID sequence. Defaults to the process-wide sequence.

    Returns:
        SetupResult, or SetupError when the players or coin flip winner
        cannot be found.
    """
    ids = ids or get_default_sequence()
    if end_index is None:
        end_index = find_first_turn_index(lines)

    slots = PlayerSlots()
    coin_flip_winner: Optional[str] = None
    coin_flip_choice: Optional[str] = None
    who_goes_first: Optional[str] = None

    setup_events: list[GameEvent] = []
    pokemon_in_match: list[str] = []
    timestamp = 0
    in_setup = False

    for line in lines[:end_index]:
        if is_setup_header(line):
            in_setup = True
            continue

        if not in_setup:
            continue

        match = patterns.COIN_FLIP_CHOICE.match(line)
        if match:
            slots.see(match.group(1))
            continue

        match = patterns.COIN_FLIP_WINNER.match(line)
        if match:
            coin_flip_winner = match.group(1)
            slots.see(coin_flip_winner)
            continue

        match = patterns.GO_FIRST.match(line)
        if match:
            who_goes_first = match.group(1)
            coin_flip_choice = match.group(2)
            slots.see(who_goes_first)
            continue

        match = patterns.OPENING_HAND.match(line)
        if match:
            player = match.group(1)
            slots.see(player)
            setup_events.append(
                events.draw_event(ids, player, int(match.group(2)), SETUP_TURN, timestamp)
            )
            timestamp += 1
            continue

        match = patterns.MULLIGAN.match(line)
        if match:
            setup_events.append(
                events.mulligan_event(ids, match.group(1), SETUP_TURN, timestamp)
            )
            timestamp += 1
            continue

        match = patterns.MULLIGAN_DRAW.match(line)
        if match:
            setup_events.append(
                events.draw_event(ids, match.group(1), int(match.group(2)), SETUP_TURN, timestamp)
            )
            timestamp += 1
            continue

        match = patterns.PLAYED_POKEMON.match(line)
        if match:
            pokemon_name = match.group(2)
            if pokemon_name not in pokemon_in_match:
                pokemon_in_match.append(pokemon_name)
            setup_events.append(
                events.play_pokemon_event(
                    ids, match.group(1), pokemon_name,
                    parse_location(match.group(3)), SETUP_TURN, timestamp,
                )
            )
            timestamp += 1
            continue

    if not slots.complete:
        logger.info("Setup phase ended before two players were identified")
        return SetupError(ERROR_NO_PLAYERS)

    if not coin_flip_winner:
        logger.info("Setup phase has no coin toss winner")
        return SetupError(ERROR_NO_COIN_FLIP)

    if not coin_flip_choice:
        coin_flip_choice = "first"

    # Explicit decision wins; otherwise the coin flip winner goes first
    if who_goes_first is None:
        first_player = coin_flip_winner
    elif coin_flip_choice == "second":
        first_player = slots.player2 if who_goes_first == slots.player1 else slots.player1
    else:
        first_player = who_goes_first
    player1_first = first_player == slots.player1

    players = (
        Player(username=slots.player1, is_first=player1_first),
        Player(username=slots.player2, is_first=not player1_first),
    )
    logger.debug(
        f"Setup parsed: players={slots.player1},{slots.player2} "
        f"first={first_player} events={len(setup_events)}"
    )

    return SetupResult(
        players=players,
        coin_flip_winner=coin_flip_winner,
        coin_flip_choice=coin_flip_choice,
        events=setup_events,
        pokemon_in_match=pokemon_in_match,
        setup_end_index=end_index,
    )
