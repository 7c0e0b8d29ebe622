"""Helpers shared by the setup and turn parsers."""

from typing import Optional

from ptcglog import patterns
from ptcglog.models import Location


class EventIdSequence:
    """Monotonic generator of event IDs ("event-1", "event-2", ...).

    Pass one into parse_log() to keep IDs caller-scoped; otherwise the
    process-wide default sequence is used.
    """

    def __init__(self, start: int = 0) -> None:
        self._counter = start

    def next_id(self) -> str:
        self._counter += 1
        return f"event-{self._counter}"

    def reset(self, start: int = 0) -> None:
        """Reset so the next ID is event-(start + 1)."""
        self._counter = start

    @property
    def current(self) -> int:
        return self._counter


# Process-wide sequence
_default_sequence = EventIdSequence()


def get_default_sequence() -> EventIdSequence:
    return _default_sequence


def generate_event_id() -> str:
    """Generate a unique ID from the process-wide sequence."""
    return _default_sequence.next_id()


def reset_event_counter() -> None:
    """Reset the process-wide event counter (for deterministic IDs)."""
    _default_sequence.reset()


def should_skip_line(line: str) -> bool:
    """Check if a line is known noise (card lists, shuffles, blanks...)."""
    return any(pattern.search(line) for pattern in patterns.SKIP_PATTERNS)


def split_log_into_lines(log_text: str) -> list[str]:
    """Split log text into lines, trimming trailing whitespace.

    Leading whitespace is kept since indented bullet lines are significant.
    """
    return [line.rstrip() for line in log_text.split("\n")]


def parse_location(location_text: str) -> Location:
    if "active" in location_text.lower():
        return Location.ACTIVE
    return Location.BENCH


def parse_card_count(text: str) -> int:
    """Parse a card count from "2", "a" or "a card"; defaults to 1."""
    if text in ("a", "a card"):
        return 1
    try:
        return int(text)
    except ValueError:
        return 1


def is_turn_start(line: str) -> bool:
    return patterns.TURN_START.match(line) is not None


def is_setup_header(line: str) -> bool:
    return line == patterns.SETUP_HEADER


def find_first_turn_index(lines: list[str]) -> int:
    """Index of the first turn marker, or len(lines) if there is none."""
    for i, line in enumerate(lines):
        if is_turn_start(line):
            return i
    return len(lines)


class PlayerSlots:
    """First-seen-wins assignment of usernames to player1/player2.

    The first name seen fills the first slot; the first different name
    fills the second. Later names are ignored.
    """

    def __init__(self) -> None:
        self.player1: Optional[str] = None
        self.player2: Optional[str] = None

    def see(self, name: str) -> None:
        if self.player1 is None:
            self.player1 = name
        elif name != self.player1 and self.player2 is None:
            self.player2 = name

    @property
    def complete(self) -> bool:
        return bool(self.player1 and self.player2)


def extract_player_names(lines: list[str]) -> Optional[tuple[str, str]]:
    """Find both usernames from coin flip, go-first and opening hand lines.

    Returns:
        (player1, player2), or None if fewer than two names were found.
    """
    slots = PlayerSlots()

    for line in lines:
        for pattern in (patterns.COIN_FLIP_CHOICE, patterns.COIN_FLIP_WINNER,
                        patterns.GO_FIRST, patterns.OPENING_HAND):
            match = pattern.match(line)
            if match:
                slots.see(match.group(1))
                break

        if slots.complete:
            return (slots.player1, slots.player2)

    return None
