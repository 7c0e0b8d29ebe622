"""Turn-by-turn event parser for Pokemon TCG Live game logs.

TurnParser walks the lines after the setup phase as a small state machine:
no current turn, then one turn per "[playerName]'s Turn" marker. The marker
text never names the player, so the acting player alternates between the
two known players starting with whoever went first.

Each line is tried against an ordered rule list and the first rule that
produces an event wins, so one line yields at most one event. Lines that
match no rule are dropped silently; real logs contain many flavour lines
that carry no countable action.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ptcglog import events, patterns
from ptcglog.models import (
    GameEvent,
    Player,
    TrainerCategory,
    Turn,
    WinCondition,
)
from ptcglog.settings import DEFAULT_CONFIG, ParserConfig
from ptcglog.trainer_categories import get_trainer_category
from ptcglog.utils import (
    EventIdSequence,
    get_default_sequence,
    is_turn_start,
    parse_card_count,
    parse_location,
    should_skip_line,
)

logger = logging.getLogger(__name__)

# Handler receives the regex match and the line index
RuleHandler = Callable[[re.Match, int], Optional[GameEvent]]


@dataclass
class TurnParseResult:
    turns: list[Turn] = field(default_factory=list)
    events: list[GameEvent] = field(default_factory=list)
    pokemon_in_match: list[str] = field(default_factory=list)
    winner: Optional[str] = None
    win_condition: Optional[WinCondition] = None


def order_players(players: Sequence[Player]) -> list[str]:
    """Usernames with the first player first."""
    first = next((p for p in players if p.is_first), players[0])
    second = next((p for p in players if not p.is_first), players[1])
    return [first.username, second.username]


class TurnParser:
    """Parses all turns and events after the setup phase.

    Example:
        parser = TurnParser(setup.players)
        result = parser.parse(lines, setup.setup_end_index)
    """

    def __init__(
        self,
        players: Sequence[Player],
        ids: Optional[EventIdSequence] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        self._ids = ids or get_default_sequence()
        self._config = config or DEFAULT_CONFIG
        self._ordered_players = order_players(players)

        self._lines: list[str] = []
        self._result = TurnParseResult()
        self._current_turn: Optional[Turn] = None
        self._current_player = self._ordered_players[0]
        self._turn_number = 0
        self._timestamp = 0
        self._last_damage_breakdown: Optional[str] = None
        # player -> (pokemon, move name) of the last ability/attack this turn
        self._last_move: dict[str, tuple[str, str]] = {}

        # Precedence is significant: only the first event-producing rule
        # applies to a line.
        self._rules: list[tuple[re.Pattern, RuleHandler]] = [
            (patterns.DECK_OUT, self._on_deck_out),
            (patterns.PRIZE_WIN, self._on_prize_win),
            (patterns.NO_POKEMON, self._on_no_pokemon),
            (patterns.ATTACK, self._on_attack),
            (patterns.DAMAGE_COUNTERS, self._on_damage_counters),
            (patterns.KNOCKOUT, self._on_knockout),
            (patterns.PRIZE_TAKEN, self._on_prize_taken),
            (patterns.SWITCHED_IN, self._on_switch),
            (patterns.USED_ABILITY, self._on_ability),
            (patterns.EVOLVED, self._on_evolve),
            (patterns.PLAYED_STADIUM, self._on_stadium),
            (patterns.PLAYED_POKEMON, self._on_play_pokemon),
            (patterns.PLAYED_TRAINER, self._on_trainer),
            (patterns.ATTACHED_ENERGY, self._on_attach),
            (patterns.DREW_CARD, self._on_draw_named),
            (patterns.DREW_CARDS, self._on_draw_counted),
            (patterns.COIN_FLIP, self._on_coin_flip),
            (patterns.SINGLE_COIN_FLIP, self._on_single_coin_flip),
        ]

    def parse(self, lines: list[str], start_index: int = 0) -> TurnParseResult:
        """Parse lines from start_index to the end of the log.

        Never raises for malformed lines.
        """
        self._lines = lines

        for i in range(start_index, len(lines)):
            line = lines[i]

            if is_turn_start(line):
                self._start_turn()
                continue

            if should_skip_line(line):
                self._capture_damage_breakdown(line)
                continue

            if self._current_turn is None:
                continue

            event = self._classify(line, i)
            if event is None:
                logger.debug(f"Ignored line {i}: {line!r}")
                continue

            self._current_turn.events.append(event)
            self._result.events.append(event)

        self._close_turn()
        logger.debug(
            f"Parsed {len(self._result.turns)} turns, {len(self._result.events)} events"
        )
        return self._result

    def _classify(self, line: str, index: int) -> Optional[GameEvent]:
        for pattern, handler in self._rules:
            match = pattern.search(line)
            if not match:
                continue
            event = handler(match, index)
            if event is not None:
                return event
        return None

    # -- State transitions -------------------------------------------------

    def _start_turn(self) -> None:
        self._close_turn()
        self._turn_number += 1
        self._current_player = self._ordered_players[(self._turn_number - 1) % 2]
        self._current_turn = Turn(number=self._turn_number, player=self._current_player)
        self._timestamp = 0
        self._last_move = {}

    def _close_turn(self) -> None:
        # Turns with no events are never emitted
        if self._current_turn and self._current_turn.events:
            self._result.turns.append(self._current_turn)
        self._current_turn = None

    def _next_timestamp(self) -> int:
        timestamp = self._timestamp
        self._timestamp += 1
        return timestamp

    def _capture_damage_breakdown(self, line: str) -> None:
        if patterns.DAMAGE_BREAKDOWN.match(line) or line.startswith(patterns.CARD_LIST_PREFIX):
            if "damage" in line:
                self._last_damage_breakdown = line.replace("   • ", "").strip()

    def _add_pokemon(self, name: str) -> None:
        if name and name not in self._result.pokemon_in_match:
            self._result.pokemon_in_match.append(name)

    def _other_player(self, name: str) -> str:
        return next((p for p in self._ordered_players if p != name), self._current_player)

    def _look_ahead_for_card_names(self, index: int) -> list[str]:
        """Collect card names from bullet lines following a draw.

        Stops at the first line that is not a bullet, skip line or blank.
        """
        card_names: list[str] = []
        end = min(index + 1 + self._config.card_lookahead_lines, len(self._lines))
        for j in range(index + 1, end):
            next_line = self._lines[j]
            match = patterns.CARD_LIST.match(next_line)
            if match:
                card_names.extend(name.strip() for name in match.group(1).split(","))
            elif not should_skip_line(next_line) and next_line.strip():
                break
        return card_names

    # -- Win conditions ----------------------------------------------------

    def _set_winner(self, winner: str, condition: WinCondition) -> GameEvent:
        self._result.winner = winner
        self._result.win_condition = condition
        logger.info(f"Winner detected on turn {self._turn_number}: {winner} ({condition.value})")
        return events.win_event(self._ids, winner, condition, self._turn_number, self._next_timestamp())

    def _on_deck_out(self, match: re.Match, index: int) -> GameEvent:
        return self._set_winner(match.group(1), WinCondition.DECK_OUT)

    def _on_prize_win(self, match: re.Match, index: int) -> GameEvent:
        return self._set_winner(match.group(1), WinCondition.PRIZES)

    def _on_no_pokemon(self, match: re.Match, index: int) -> GameEvent:
        return self._set_winner(match.group(2), WinCondition.NO_POKEMON)

    # -- Combat ------------------------------------------------------------

    def _on_attack(self, match: re.Match, index: int) -> GameEvent:
        attacker, attacking_pokemon, attack_name, _target_player, target_pokemon, damage = match.groups()
        self._add_pokemon(attacking_pokemon)
        self._add_pokemon(target_pokemon)
        self._last_move[attacker] = (attacking_pokemon, attack_name)

        event = events.attack_event(
            self._ids, attacker, attacking_pokemon, attack_name, target_pokemon,
            int(damage), self._turn_number, self._next_timestamp(),
            damage_breakdown=self._last_damage_breakdown,
        )
        self._last_damage_breakdown = None
        return event

    def _on_damage_counters(self, match: re.Match, index: int) -> GameEvent:
        player, counters, _target_player, target_pokemon = match.groups()
        self._add_pokemon(target_pokemon)
        source_pokemon, move_name = self._last_move.get(player, (None, None))
        damage = int(counters) * self._config.damage_per_counter
        return events.attack_event(
            self._ids, player, source_pokemon, move_name, target_pokemon,
            damage, self._turn_number, self._next_timestamp(),
        )

    def _on_knockout(self, match: re.Match, index: int) -> GameEvent:
        knocked_out_player, knocked_out_pokemon = match.groups()
        # Credit goes to the other player
        causing_player = self._other_player(knocked_out_player)
        return events.knockout_event(
            self._ids, causing_player, knocked_out_pokemon, self._turn_number, self._next_timestamp()
        )

    def _on_prize_taken(self, match: re.Match, index: int) -> GameEvent:
        return events.prize_taken_event(
            self._ids, match.group(1), parse_card_count(match.group(2)),
            self._turn_number, self._next_timestamp(),
        )

    def _on_switch(self, match: re.Match, index: int) -> GameEvent:
        player, pokemon = match.groups()
        self._add_pokemon(pokemon)
        return events.switch_event(self._ids, player, pokemon, self._turn_number, self._next_timestamp())

    def _on_ability(self, match: re.Match, index: int) -> GameEvent:
        player, pokemon, ability = match.groups()
        self._add_pokemon(pokemon)
        self._last_move[player] = (pokemon, ability)
        return events.ability_event(
            self._ids, player, pokemon, ability, self._turn_number, self._next_timestamp()
        )

    # -- Pokemon and trainers ----------------------------------------------

    def _on_evolve(self, match: re.Match, index: int) -> GameEvent:
        player, from_pokemon, to_pokemon, location_text = match.groups()
        self._add_pokemon(from_pokemon)
        self._add_pokemon(to_pokemon)
        location = parse_location(location_text) if location_text else None
        return events.evolve_event(
            self._ids, player, from_pokemon, to_pokemon,
            self._turn_number, self._next_timestamp(), location=location,
        )

    def _on_stadium(self, match: re.Match, index: int) -> GameEvent:
        return events.trainer_event(
            self._ids, match.group(1), match.group(2), TrainerCategory.STADIUM,
            self._turn_number, self._next_timestamp(),
        )

    def _on_play_pokemon(self, match: re.Match, index: int) -> GameEvent:
        player, pokemon, location_text = match.groups()
        self._add_pokemon(pokemon)
        return events.play_pokemon_event(
            self._ids, player, pokemon, parse_location(location_text),
            self._turn_number, self._next_timestamp(),
        )

    def _on_trainer(self, match: re.Match, index: int) -> GameEvent:
        trainer_name = match.group(2).strip()
        return events.trainer_event(
            self._ids, match.group(1), trainer_name, get_trainer_category(trainer_name),
            self._turn_number, self._next_timestamp(),
        )

    def _on_attach(self, match: re.Match, index: int) -> GameEvent:
        player, card_name, target_pokemon = match.groups()

        # Tools are attached with the same wording as energy
        if get_trainer_category(card_name) == TrainerCategory.TOOL:
            return events.trainer_event(
                self._ids, player, card_name, TrainerCategory.TOOL,
                self._turn_number, self._next_timestamp(),
            )

        self._add_pokemon(target_pokemon)
        return events.energy_event(
            self._ids, player, card_name, target_pokemon, self._turn_number, self._next_timestamp()
        )

    # -- Draws and coin flips ----------------------------------------------

    def _on_draw_named(self, match: re.Match, index: int) -> Optional[GameEvent]:
        player, card_name = match.groups()
        # "drew X and played it to the Bench" belongs to the trainer effect
        if " and played" in card_name:
            return None
        return events.draw_event(
            self._ids, player, 1, self._turn_number, self._next_timestamp(), card_names=[card_name]
        )

    def _on_draw_counted(self, match: re.Match, index: int) -> GameEvent:
        player, count_text = match.groups()
        card_names = self._look_ahead_for_card_names(index)
        return events.draw_event(
            self._ids, player, parse_card_count(count_text),
            self._turn_number, self._next_timestamp(), card_names=card_names or None,
        )

    def _on_coin_flip(self, match: re.Match, index: int) -> GameEvent:
        total, heads = int(match.group(1)), int(match.group(2))
        return events.coin_flip_event(
            self._ids, self._current_player, heads, total - heads,
            self._turn_number, self._next_timestamp(),
        )

    def _on_single_coin_flip(self, match: re.Match, index: int) -> GameEvent:
        player, result = match.groups()
        heads = 1 if result == "heads" else 0
        return events.coin_flip_event(
            self._ids, player, heads, 1 - heads,
            self._turn_number, self._next_timestamp(), result=result,
        )


def parse_turns(
    lines: list[str],
    start_index: int,
    players: Sequence[Player],
    ids: Optional[EventIdSequence] = None,
    config: Optional[ParserConfig] = None,
) -> TurnParseResult:
    """Parse all turns and events from the log starting after setup."""
    return TurnParser(players, ids=ids, config=config).parse(lines, start_index)
