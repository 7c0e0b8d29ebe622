"""Derived views over parsed matches and reconstructed decks."""

from dataclasses import dataclass

from ptcglog.deck import DeckCard, ReconstructedDeck
from ptcglog.models import EventType, GameEvent

SIGNIFICANT_DAMAGE = 100


def is_significant_event(event: GameEvent) -> bool:
    """Knockouts and attacks of at least 100 damage."""
    if event.type == EventType.KNOCKOUT:
        return True
    if event.type == EventType.ATTACK and event.details.damage is not None:
        return event.details.damage >= SIGNIFICANT_DAMAGE
    return False


def format_card_count(card: DeckCard) -> str:
    """Format as 'Name x N', or 'Name (at least N)' when the count is uncertain."""
    if card.min_count < card.count:
        return f"{card.name} (at least {card.min_count})"
    return f"{card.name} x {card.count}"


@dataclass
class CategorySummary:
    pokemon: int
    trainers: int
    energy: int
    total: int

    def to_dict(self) -> dict:
        return {
            "pokemon": self.pokemon,
            "trainers": self.trainers,
            "energy": self.energy,
            "total": self.total,
        }


def calculate_deck_summary(deck: ReconstructedDeck) -> CategorySummary:
    """Card totals per category and overall."""
    pokemon = sum(c.count for c in deck.pokemon)
    trainers = sum(c.count for c in deck.trainers.all())
    energy = sum(c.count for c in deck.energy.all())
    return CategorySummary(
        pokemon=pokemon,
        trainers=trainers,
        energy=energy,
        total=pokemon + trainers + energy,
    )
