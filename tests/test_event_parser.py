"""Tests for the turn-by-turn event parser."""

import pytest

from ptcglog.event_parser import TurnParser, order_players, parse_turns
from ptcglog.models import EventType, Location, Player, TrainerCategory, WinCondition
from ptcglog.settings import ParserConfig
from ptcglog.utils import EventIdSequence, split_log_into_lines

PLAYERS = (Player("Player1", is_first=True), Player("Player2", is_first=False))


def _parse(text, players=PLAYERS, **kwargs):
    lines = split_log_into_lines(text)
    return parse_turns(lines, 0, players, **kwargs)


def _events(*lines):
    """Parse lines as the body of a single turn by Player1."""
    text = "[playerName]'s Turn\n" + "\n".join(lines)
    return _parse(text).events


def _single(line):
    events = _events(line)
    assert len(events) == 1, events
    return events[0]


class TestTurnStructure:
    """Tests for turn boundaries and player alternation."""

    def test_players_alternate(self):
        result = _parse(
            "[playerName]'s Turn\nPlayer1 drew a card.\n"
            "[playerName]'s Turn\nPlayer2 drew a card.\n"
            "[playerName]'s Turn\nPlayer1 drew a card."
        )
        assert [(t.number, t.player) for t in result.turns] == [
            (1, "Player1"), (2, "Player2"), (3, "Player1")
        ]

    def test_second_player_listed_first_still_alternates_from_first(self):
        players = (Player("Player2", is_first=False), Player("Player1", is_first=True))
        result = _parse("[playerName]'s Turn\nPlayer1 drew a card.", players=players)
        assert result.turns[0].player == "Player1"

    def test_empty_turn_dropped_but_numbered(self):
        result = _parse(
            "[playerName]'s Turn\nPlayer1 ended their turn.\n"
            "[playerName]'s Turn\nPlayer2 drew a card."
        )
        assert len(result.turns) == 1
        assert result.turns[0].number == 2
        assert result.turns[0].player == "Player2"

    def test_lines_before_first_turn_ignored(self):
        result = _parse("Player1 drew a card.\n[playerName]'s Turn\nPlayer1 drew 2 cards.")
        assert len(result.events) == 1
        assert result.events[0].details.card_count == 2

    def test_timestamps_reset_per_turn(self):
        result = _parse(
            "[playerName]'s Turn\nPlayer1 drew a card.\nPlayer1 played Nest Ball.\n"
            "[playerName]'s Turn\nPlayer2 drew a card."
        )
        assert [e.timestamp for e in result.turns[0].events] == [0, 1]
        assert [e.timestamp for e in result.turns[1].events] == [0]

    def test_turn_events_are_in_flat_list(self):
        result = _parse(
            "[playerName]'s Turn\nPlayer1 drew a card.\n"
            "[playerName]'s Turn\nPlayer2 drew a card."
        )
        assert [e for t in result.turns for e in t.events] == result.events

    def test_order_players(self):
        players = (Player("B", is_first=False), Player("A", is_first=True))
        assert order_players(players) == ["A", "B"]

    def test_start_index(self):
        lines = split_log_into_lines(
            "[playerName]'s Turn\nPlayer1 drew a card.\n[playerName]'s Turn\nPlayer2 drew a card."
        )
        result = TurnParser(PLAYERS).parse(lines, start_index=2)
        assert len(result.turns) == 1
        assert result.turns[0].player == "Player1"


class TestDraws:
    """Tests for draw lines."""

    def test_drew_a_card(self):
        event = _single("Player1 drew a card.")
        assert event.type == EventType.DRAW
        assert event.details.card_count == 1
        assert event.description == "Player1 drew 1 card"

    def test_drew_named_card(self):
        event = _single("Player1 drew Dreepy.")
        assert event.details.card_count == 1
        assert event.details.card_names == ("Dreepy",)

    def test_drew_named_card_with_period_in_name(self):
        event = _single("Player1 drew Pokégear 3.0.")
        assert event.type == EventType.DRAW
        assert event.details.card_names == ("Pokégear 3.0",)

    def test_drew_counted_with_card_list(self):
        events = _events("Player1 drew 3 cards.", "   • Nest Ball, Iono, Dreepy", "- 3 drawn cards.")
        assert len(events) == 1
        assert events[0].details.card_count == 3
        assert events[0].details.card_names == ("Nest Ball", "Iono", "Dreepy")

    def test_card_list_stops_at_next_action(self):
        events = _events("Player1 drew 2 cards.", "Player1 played Iono.", "   • Nest Ball")
        assert events[0].details.card_names is None

    def test_card_list_lookahead_is_bounded(self):
        config = ParserConfig(card_lookahead_lines=1)
        text = "[playerName]'s Turn\nPlayer1 drew 2 cards.\n- 2 drawn cards.\n   • Nest Ball, Iono"
        result = _parse(text, config=config)
        assert result.events[0].details.card_names is None

    def test_draw_attributed_to_named_player(self):
        event = _single("Player2 drew 6 cards.")
        assert event.player == "Player2"

    def test_drew_and_played_is_not_a_draw(self):
        assert _events("Player1 drew Dreepy and played it to the Bench.") == []


class TestPokemon:
    """Tests for Pokemon placement, evolution, switching and abilities."""

    def test_play_to_bench(self):
        event = _single("Player1 played Dreepy to the Bench.")
        assert event.type == EventType.PLAY_POKEMON
        assert event.details.pokemon_name == "Dreepy"
        assert event.details.location == Location.BENCH

    def test_play_pokemon_with_period_in_name(self):
        event = _single("Player1 played Mr. Mime to the Bench.")
        assert event.type == EventType.PLAY_POKEMON
        assert event.details.pokemon_name == "Mr. Mime"
        assert event.details.location == Location.BENCH

    def test_evolve(self):
        event = _single("Player1 evolved Drakloak to Dragapult ex in the Active Spot.")
        assert event.type == EventType.EVOLVE
        assert event.details.pokemon_name == "Dragapult ex"
        assert event.details.evolved_from == "Drakloak"
        assert event.details.location == Location.ACTIVE

    def test_switch(self):
        event = _single("Player2's Pidgey is now in the Active Spot.")
        assert event.type == EventType.SWITCH
        assert event.player == "Player2"
        assert event.details.pokemon_name == "Pidgey"
        assert event.details.location == Location.ACTIVE

    def test_ability(self):
        event = _single("Player1's Drakloak used Recon Directive.")
        assert event.type == EventType.USE_ABILITY
        assert event.details.pokemon_name == "Drakloak"
        assert event.details.attack_name == "Recon Directive"

    def test_pokemon_in_match_deduplicated(self):
        result = _parse(
            "[playerName]'s Turn\n"
            "Player1 played Dreepy to the Bench.\n"
            "Player1 played Dreepy to the Bench.\n"
            "Player1 evolved Dreepy to Drakloak on the Bench."
        )
        assert result.pokemon_in_match == ["Dreepy", "Drakloak"]


class TestTrainersAndEnergy:
    """Tests for trainer plays and attachments."""

    def test_trainer(self):
        event = _single("Player1 played Iono.")
        assert event.type == EventType.PLAY_TRAINER
        assert event.details.trainer_name == "Iono"
        assert event.details.trainer_category == TrainerCategory.SUPPORTER

    def test_trainer_name_with_period(self):
        event = _single("Player1 played Pokégear 3.0.")
        assert event.details.trainer_name == "Pokégear 3.0"
        assert event.details.trainer_category == TrainerCategory.ITEM

    def test_stadium(self):
        event = _single("Player1 played Artazon to the Stadium spot.")
        assert event.details.trainer_name == "Artazon"
        assert event.details.trainer_category == TrainerCategory.STADIUM

    def test_card_named_switch_is_a_trainer(self):
        event = _single("Player1 played Switch.")
        assert event.type == EventType.PLAY_TRAINER
        assert event.details.trainer_category == TrainerCategory.ITEM

    def test_attach_energy(self):
        event = _single("Player1 attached Basic Psychic Energy to Dreepy in the Active Spot.")
        assert event.type == EventType.ATTACH_ENERGY
        assert event.details.pokemon_name == "Dreepy"
        assert event.description == "Player1 attached Basic Psychic Energy to Dreepy"

    def test_attach_tool_is_trainer_play(self):
        event = _single("Player1 attached Air Balloon to Dreepy on the Bench.")
        assert event.type == EventType.PLAY_TRAINER
        assert event.details.trainer_name == "Air Balloon"
        assert event.details.trainer_category == TrainerCategory.TOOL


class TestCombat:
    """Tests for attacks, damage counters, knockouts and prizes."""

    def test_attack(self):
        event = _single("Player1's Dreepy used Petty Grudge on Player2's Pidgey for 10 damage.")
        assert event.type == EventType.ATTACK
        assert event.details.attacking_pokemon == "Dreepy"
        assert event.details.attack_name == "Petty Grudge"
        assert event.details.target_pokemon == "Pidgey"
        assert event.details.damage == 10
        assert event.description == "Player1's Dreepy used Petty Grudge for 10 damage"

    def test_attack_picks_up_damage_breakdown(self):
        events = _events(
            "- Damage breakdown:",
            "   • Base damage: 200 damage",
            "Player1's Dragapult ex used Phantom Dive on Player2's Pidgey for 200 damage.",
            "Player1's Dreepy used Petty Grudge on Player2's Pidgey for 10 damage.",
        )
        assert events[0].details.damage_breakdown == "Base damage: 200 damage"
        assert events[1].details.damage_breakdown is None

    def test_damage_counters_credit_last_move(self):
        events = _events(
            "Player1's Dragapult ex used Phantom Dive on Player2's Pidgeot ex for 200 damage.",
            "- Player1 put 6 damage counters on Player2's Pidgey.",
        )
        counters = events[1]
        assert counters.type == EventType.ATTACK
        assert counters.details.damage == 60
        assert counters.details.attacking_pokemon == "Dragapult ex"
        assert counters.details.attack_name == "Phantom Dive"
        assert counters.details.target_pokemon == "Pidgey"

    def test_damage_counters_without_prior_move(self):
        event = _single("Player1 put 1 damage counter on Player2's Pidgey.")
        assert event.details.damage == 10
        assert event.details.attacking_pokemon is None
        assert event.description == "Player1 dealt 10 damage to Pidgey"

    def test_damage_per_counter_configurable(self):
        config = ParserConfig(damage_per_counter=20)
        result = _parse(
            "[playerName]'s Turn\nPlayer1 put 2 damage counters on Player2's Pidgey.",
            config=config,
        )
        assert result.events[0].details.damage == 40

    def test_knockout_credited_to_other_player(self):
        event = _single("Player2's Pidgey was Knocked Out!")
        assert event.type == EventType.KNOCKOUT
        assert event.player == "Player1"
        assert event.details.knocked_out_pokemon == "Pidgey"

    def test_prize_taken(self):
        event = _single("Player1 took a Prize card.")
        assert event.type == EventType.PRIZE_TAKEN
        assert event.details.prizes_taken == 1

    def test_multiple_prizes(self):
        event = _single("Player1 took 2 Prize cards.")
        assert event.details.prizes_taken == 2
        assert event.description == "Player1 took 2 Prize cards"


class TestCoinFlips:
    """Tests for coin flip lines."""

    def test_multi_coin_flip(self):
        event = _single("Player1's Wugtrio flipped 3 coins, and 2 landed on heads.")
        assert event.type == EventType.COIN_FLIP
        assert event.player == "Player1"
        assert event.details.heads_count == 2
        assert event.details.tails_count == 1

    def test_single_coin_flip(self):
        event = _single("Player2 flipped a coin and it landed on tails.")
        assert event.player == "Player2"
        assert event.details.result == "tails"
        assert event.details.heads_count == 0
        assert event.details.tails_count == 1


class TestWinConditions:
    """Tests for lines that end the match."""

    @pytest.mark.parametrize("line,winner,condition", [
        ("Opponent's deck ran out of cards. Player1 wins.", "Player1", WinCondition.DECK_OUT),
        ("Player2 took all Prize cards.", "Player2", WinCondition.PRIZES),
        ("Player1 has no Pokémon in play. Player2 wins.", "Player2", WinCondition.NO_POKEMON),
    ])
    def test_win_lines(self, line, winner, condition):
        result = _parse("[playerName]'s Turn\n" + line)
        assert result.winner == winner
        assert result.win_condition == condition
        event = result.events[-1]
        assert event.type == EventType.WIN
        assert event.player == winner
        assert event.details.win_condition == condition

    def test_no_winner_by_default(self):
        result = _parse("[playerName]'s Turn\nPlayer1 drew a card.")
        assert result.winner is None
        assert result.win_condition is None


class TestRobustness:
    """Tests for noise and malformed input."""

    def test_unrecognised_lines_dropped(self):
        assert _events("Player1 ended their turn.", "Something odd happened.") == []

    def test_skip_lines_produce_no_events(self):
        assert _events(
            "- Player1 shuffled their deck.",
            "A card was added to Player1's hand.",
            "- 2 drawn cards.",
        ) == []

    def test_one_event_per_line(self):
        # Matches both the attack and the generic ability pattern
        events = _events("Player1's Dreepy used Petty Grudge on Player2's Pidgey for 10 damage.")
        assert len(events) == 1
        assert events[0].type == EventType.ATTACK

    def test_uses_given_id_sequence(self):
        ids = EventIdSequence()
        result = _parse("[playerName]'s Turn\nPlayer1 drew a card.\nPlayer1 drew a card.", ids=ids)
        assert [e.id for e in result.events] == ["event-1", "event-2"]
