"""Types for deck reconstruction."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ConfidenceLevel(Enum):
    """How a card's presence in the deck is known.

    CONFIRMED: played or revealed in the log.
    INFERRED: deduced from game mechanics.
    """
    CONFIRMED = "confirmed"
    INFERRED = "inferred"


class CardCategory(Enum):
    POKEMON = "pokemon"
    TRAINER = "trainer"
    ENERGY = "energy"


class EnergySubcategory(Enum):
    BASIC = "basic"
    SPECIAL = "special"


@dataclass
class DeckCard:
    """A card entry in a reconstructed deck."""
    name: str
    category: CardCategory
    # TrainerCategory for trainers, EnergySubcategory for energy
    subcategory: Optional[Enum] = None
    count: int = 1
    min_count: int = 1  # min_count <= count when the count is uncertain
    confidence: ConfidenceLevel = ConfidenceLevel.CONFIRMED
    evolution_stage: Optional[int] = None  # 0 = basic
    evolves_from: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "name": self.name,
            "category": self.category.value,
            "count": self.count,
            "min_count": self.min_count,
            "confidence": self.confidence.value,
        }
        if self.subcategory is not None:
            result["subcategory"] = self.subcategory.value
        if self.evolution_stage is not None:
            result["evolution_stage"] = self.evolution_stage
        if self.evolves_from:
            result["evolves_from"] = self.evolves_from
        return result


@dataclass
class TrainerCards:
    supporters: list[DeckCard] = field(default_factory=list)
    items: list[DeckCard] = field(default_factory=list)
    tools: list[DeckCard] = field(default_factory=list)
    stadiums: list[DeckCard] = field(default_factory=list)

    def all(self) -> list[DeckCard]:
        return self.supporters + self.items + self.tools + self.stadiums


@dataclass
class EnergyCards:
    basic: list[DeckCard] = field(default_factory=list)
    special: list[DeckCard] = field(default_factory=list)

    def all(self) -> list[DeckCard]:
        return self.basic + self.special


@dataclass
class ReconstructedDeck:
    """Partial deck for one player, built from observed cards."""
    player_name: str
    cards: list[DeckCard] = field(default_factory=list)
    total_cards_observed: int = 0
    pokemon: list[DeckCard] = field(default_factory=list)
    trainers: TrainerCards = field(default_factory=TrainerCards)
    energy: EnergyCards = field(default_factory=EnergyCards)

    def to_dict(self) -> dict:
        def cards(items: list[DeckCard]) -> list[dict]:
            return [c.to_dict() for c in items]

        return {
            "player_name": self.player_name,
            "cards": cards(self.cards),
            "total_cards_observed": self.total_cards_observed,
            "pokemon": cards(self.pokemon),
            "trainers": {
                "supporters": cards(self.trainers.supporters),
                "items": cards(self.trainers.items),
                "tools": cards(self.trainers.tools),
                "stadiums": cards(self.trainers.stadiums),
            },
            "energy": {
                "basic": cards(self.energy.basic),
                "special": cards(self.energy.special),
            },
        }


# username -> deck
PlayerDecks = dict[str, ReconstructedDeck]
