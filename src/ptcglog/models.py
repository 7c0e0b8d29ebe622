"""Structured match data produced by the log parser.

These dataclasses describe the parse result: the ordered event stream,
the turns that group it, both players, and the per-player statistics
folded from the events.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class EventType(Enum):
    """Kinds of game action recognised in a log line."""
    DRAW = "draw"
    PLAY_POKEMON = "play_pokemon"
    EVOLVE = "evolve"
    ATTACH_ENERGY = "attach_energy"
    PLAY_TRAINER = "play_trainer"
    USE_ABILITY = "use_ability"
    ATTACK = "attack"
    KNOCKOUT = "knockout"
    PRIZE_TAKEN = "prize_taken"
    SWITCH = "switch"
    COIN_FLIP = "coin_flip"
    MULLIGAN = "mulligan"
    WIN = "win"


class TrainerCategory(Enum):
    """Trainer card categories."""
    SUPPORTER = "supporter"
    ITEM = "item"
    TOOL = "tool"
    STADIUM = "stadium"


class WinCondition(Enum):
    """How a match was decided."""
    PRIZES = "prizes"
    DECK_OUT = "deck_out"
    NO_POKEMON = "no_pokemon"
    CONCEDE = "concede"


class Location(Enum):
    """Where a Pokemon was placed."""
    ACTIVE = "active"
    BENCH = "bench"


UNKNOWN_WINNER = "Unknown"


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class EventDetails:
    """Type-specific optional fields of an event.

    Only the fields relevant to the event's type are set; everything else
    stays None.
    """
    # Attacks
    attack_name: Optional[str] = None
    attacking_pokemon: Optional[str] = None
    target_pokemon: Optional[str] = None
    damage: Optional[int] = None
    damage_breakdown: Optional[str] = None
    # Trainer cards
    trainer_name: Optional[str] = None
    trainer_category: Optional[TrainerCategory] = None
    # Pokemon plays / evolutions / switches
    pokemon_name: Optional[str] = None
    location: Optional[Location] = None
    evolved_from: Optional[str] = None
    # Draws
    card_count: Optional[int] = None
    card_names: Optional[tuple[str, ...]] = None
    # Knockouts and prizes
    knocked_out_pokemon: Optional[str] = None
    prizes_taken: Optional[int] = None
    # Coin flips
    result: Optional[str] = None  # "heads" / "tails" for single flips
    heads_count: Optional[int] = None
    tails_count: Optional[int] = None
    # Win
    win_condition: Optional[WinCondition] = None

    def to_dict(self) -> dict:
        """Convert to a sparse dict, omitting unset fields."""
        result = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, tuple):
                value = list(value)
            result[name] = _enum_value(value)
        return result


@dataclass(frozen=True)
class GameEvent:
    """One recognised action, parsed from a single log line."""
    id: str
    turn: int  # 0 for setup-phase events
    player: str
    type: EventType
    description: str
    details: EventDetails = field(default_factory=EventDetails)
    timestamp: int = 0  # ordering within a turn

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "turn": self.turn,
            "player": self.player,
            "type": self.type.value,
            "description": self.description,
            "details": self.details.to_dict(),
            "timestamp": self.timestamp,
        }


@dataclass
class Turn:
    """One player's contiguous block of actions between turn markers."""
    number: int
    player: str
    events: list[GameEvent] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "player": self.player,
            "events": [e.to_dict() for e in self.events],
        }


@dataclass(frozen=True)
class Player:
    """A player identified in the setup phase."""
    username: str
    is_first: bool

    def to_dict(self) -> dict:
        return {"username": self.username, "is_first": self.is_first}


@dataclass
class TrainerPlayCount:
    """How many times a trainer card was played."""
    name: str
    count: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}


@dataclass
class TrainersPlayed:
    """Trainer play counts grouped by category (plural keys)."""
    supporters: list[TrainerPlayCount] = field(default_factory=list)
    items: list[TrainerPlayCount] = field(default_factory=list)
    tools: list[TrainerPlayCount] = field(default_factory=list)
    stadiums: list[TrainerPlayCount] = field(default_factory=list)

    def for_category(self, category: TrainerCategory) -> list[TrainerPlayCount]:
        """Return the list for a category (category name pluralised)."""
        return getattr(self, f"{category.value}s")

    def to_dict(self) -> dict:
        return {
            "supporters": [t.to_dict() for t in self.supporters],
            "items": [t.to_dict() for t in self.items],
            "tools": [t.to_dict() for t in self.tools],
            "stadiums": [t.to_dict() for t in self.stadiums],
        }


@dataclass
class CoinFlipTally:
    heads: int = 0
    tails: int = 0

    def to_dict(self) -> dict:
        return {"heads": self.heads, "tails": self.tails}


@dataclass
class PlayerStatistics:
    """Per-player aggregate counters. All start at zero and only increase."""
    total_damage_dealt: int = 0
    total_cards_drawn: int = 0
    trainers_played: TrainersPlayed = field(default_factory=TrainersPlayed)
    pokemon_knocked_out: int = 0
    prize_cards_taken: int = 0
    coin_flips: CoinFlipTally = field(default_factory=CoinFlipTally)
    turns_played: int = 0

    def to_dict(self) -> dict:
        return {
            "total_damage_dealt": self.total_damage_dealt,
            "total_cards_drawn": self.total_cards_drawn,
            "trainers_played": self.trainers_played.to_dict(),
            "pokemon_knocked_out": self.pokemon_knocked_out,
            "prize_cards_taken": self.prize_cards_taken,
            "coin_flips": self.coin_flips.to_dict(),
            "turns_played": self.turns_played,
        }


@dataclass(frozen=True)
class MatchData:
    """Complete result of a successful parse.

    Created once by the parser; nothing downstream mutates it.
    """
    players: tuple[Player, Player]
    coin_flip_winner: str
    coin_flip_choice: str  # "first" or "second"
    turns: list[Turn]
    events: list[GameEvent]
    winner: str
    win_condition: WinCondition
    statistics: dict[str, PlayerStatistics]
    pokemon_in_match: list[str]

    @property
    def usernames(self) -> tuple[str, str]:
        return (self.players[0].username, self.players[1].username)

    def to_dict(self) -> dict:
        """Convert to a JSON-serialisable dict."""
        return {
            "players": [p.to_dict() for p in self.players],
            "coin_flip_winner": self.coin_flip_winner,
            "coin_flip_choice": self.coin_flip_choice,
            "turns": [t.to_dict() for t in self.turns],
            "events": [e.to_dict() for e in self.events],
            "winner": self.winner,
            "win_condition": self.win_condition.value,
            "statistics": {name: s.to_dict() for name, s in self.statistics.items()},
            "pokemon_in_match": list(self.pokemon_in_match),
        }


@dataclass(frozen=True)
class ParseResult:
    """Either a successful parse with data, or a failure with a message."""
    success: bool
    data: Optional[MatchData] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: MatchData) -> "ParseResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ParseResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        if self.success and self.data is not None:
            return {"success": True, "data": self.data.to_dict()}
        return {"success": False, "error": self.error}
