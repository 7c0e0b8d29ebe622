"""Tests for line helpers, patterns and the event ID sequence."""

from ptcglog import patterns
from ptcglog.models import Location
from ptcglog.utils import (
    EventIdSequence,
    PlayerSlots,
    extract_player_names,
    find_first_turn_index,
    generate_event_id,
    is_setup_header,
    is_turn_start,
    parse_card_count,
    parse_location,
    reset_event_counter,
    should_skip_line,
    split_log_into_lines,
)


class TestEventIdSequence:
    """Tests for event ID generation."""

    def test_ids_are_sequential(self):
        ids = EventIdSequence()
        assert [ids.next_id() for _ in range(3)] == ["event-1", "event-2", "event-3"]

    def test_reset_restarts_numbering(self):
        ids = EventIdSequence()
        ids.next_id()
        ids.next_id()
        ids.reset()
        assert ids.next_id() == "event-1"

    def test_start_offset(self):
        ids = EventIdSequence(start=10)
        assert ids.next_id() == "event-11"
        assert ids.current == 11

    def test_separate_sequences_are_independent(self):
        a, b = EventIdSequence(), EventIdSequence()
        a.next_id()
        assert b.next_id() == "event-1"

    def test_default_sequence_reset(self):
        generate_event_id()
        generate_event_id()
        reset_event_counter()
        assert generate_event_id() == "event-1"


class TestLineClassification:
    """Tests for skip lines and section markers."""

    def test_skip_lines(self):
        for line in [
            "- 7 drawn cards.",
            "- Cards revealed from Mulligan.",
            "- Player1 drew a card.",
            "- Player1 drew Dreepy and played it to the Bench.",
            "A card was added to Player1's hand.",
            "- Player1 shuffled their deck.",
            "   • Nest Ball, Iono",
            "- Damage breakdown:",
            "",
            "   ",
        ]:
            assert should_skip_line(line), line

    def test_action_lines_not_skipped(self):
        for line in [
            "Player1 drew a card.",
            "Player1 played Nest Ball.",
            "Player1's Dreepy was Knocked Out!",
        ]:
            assert not should_skip_line(line), line

    def test_turn_start_accepts_both_apostrophes(self):
        assert is_turn_start("[playerName]'s Turn")
        assert is_turn_start("[playerName]’s Turn")

    def test_turn_start_is_exact(self):
        assert not is_turn_start("[playerName]'s Turn ended")
        assert not is_turn_start("Player1's Turn")

    def test_setup_header_is_exact(self):
        assert is_setup_header("Setup")
        assert not is_setup_header("Setup phase")
        assert not is_setup_header(" Setup")


class TestSplitLines:
    """Tests for split_log_into_lines."""

    def test_trailing_whitespace_trimmed(self):
        assert split_log_into_lines("Setup  \nPlayer1 won the coin toss.\t") == [
            "Setup",
            "Player1 won the coin toss.",
        ]

    def test_leading_whitespace_kept(self):
        lines = split_log_into_lines("drew 2 cards.\n   • Nest Ball, Iono")
        assert lines[1] == "   • Nest Ball, Iono"

    def test_windows_line_endings(self):
        assert split_log_into_lines("Setup\r\n[playerName]'s Turn\r\n") == [
            "Setup",
            "[playerName]'s Turn",
            "",
        ]


class TestParsingHelpers:
    """Tests for small value parsers."""

    def test_parse_location(self):
        assert parse_location("Active Spot") == Location.ACTIVE
        assert parse_location("in the Active Spot") == Location.ACTIVE
        assert parse_location("Bench") == Location.BENCH

    def test_parse_card_count(self):
        assert parse_card_count("a") == 1
        assert parse_card_count("a card") == 1
        assert parse_card_count("3") == 3
        assert parse_card_count("several") == 1

    def test_find_first_turn_index(self):
        lines = ["Setup", "x", "[playerName]'s Turn", "y"]
        assert find_first_turn_index(lines) == 2

    def test_find_first_turn_index_without_turns(self):
        assert find_first_turn_index(["Setup", "x"]) == 2

    def test_extract_player_names(self):
        lines = [
            "Setup",
            "Alice chose heads for the opening coin flip.",
            "Bob won the coin toss.",
        ]
        assert extract_player_names(lines) == ("Alice", "Bob")

    def test_extract_player_names_needs_two(self):
        lines = ["Alice chose heads for the opening coin flip.", "Alice won the coin toss."]
        assert extract_player_names(lines) is None


class TestPlayerSlots:
    """Tests for first-seen-wins player slot assignment."""

    def test_first_two_distinct_names(self):
        slots = PlayerSlots()
        slots.see("Alice")
        assert not slots.complete
        slots.see("Bob")
        assert (slots.player1, slots.player2) == ("Alice", "Bob")
        assert slots.complete

    def test_repeated_name_does_not_fill_second_slot(self):
        slots = PlayerSlots()
        slots.see("Alice")
        slots.see("Alice")
        assert slots.player2 is None
        assert not slots.complete

    def test_third_name_ignored(self):
        slots = PlayerSlots()
        for name in ("Alice", "Bob", "Carol"):
            slots.see(name)
        assert (slots.player1, slots.player2) == ("Alice", "Bob")


class TestPatterns:
    """Spot checks for the trickier line patterns."""

    def test_named_draw_requires_capital(self):
        assert patterns.DREW_CARD.match("Player1 drew Dreepy.")
        assert not patterns.DREW_CARD.match("Player1 drew a card.")
        assert not patterns.DREW_CARD.match("Player1 drew 3 cards.")

    def test_names_with_periods(self):
        assert patterns.DREW_CARD.match("Player1 drew Pokégear 3.0.").group(2) == "Pokégear 3.0"
        match = patterns.PLAYED_POKEMON.match("Player1 played Mr. Mime to the Bench.")
        assert match.groups() == ("Player1", "Mr. Mime", "Bench")

    def test_counted_draw(self):
        assert patterns.DREW_CARDS.match("Player1 drew a card.").groups() == ("Player1", "a")
        assert patterns.DREW_CARDS.match("Player1 drew 6 cards.").groups() == ("Player1", "6")

    def test_attack_with_unicode_apostrophe(self):
        match = patterns.ATTACK.match(
            "Player1’s Dragapult ex used Phantom Dive on Player2’s Pidgeot ex for 200 damage."
        )
        assert match.groups() == (
            "Player1", "Dragapult ex", "Phantom Dive", "Player2", "Pidgeot ex", "200"
        )

    def test_evolve_captures_location(self):
        match = patterns.EVOLVED.match("Player1 evolved Dreepy to Drakloak on the Bench.")
        assert match.groups() == ("Player1", "Dreepy", "Drakloak", "on the Bench")

    def test_evolve_without_location(self):
        match = patterns.EVOLVED.match("Player1 evolved Dreepy to Drakloak.")
        assert match.groups() == ("Player1", "Dreepy", "Drakloak", None)

    def test_prize_counts(self):
        assert patterns.PRIZE_TAKEN.match("Player1 took a Prize card.").group(2) == "a"
        assert patterns.PRIZE_TAKEN.match("Player1 took 2 Prize cards.").group(2) == "2"

    def test_damage_counters_with_dash_prefix(self):
        match = patterns.DAMAGE_COUNTERS.match("- Player1 put 6 damage counters on Player2's Pidgey.")
        assert match.groups() == ("Player1", "6", "Player2", "Pidgey")
