"""Deck reconstruction from parsed game events.

Walks a finished event stream per player, collects every card the player
was seen using or revealing, and organises the result into a categorised,
evolution-sorted partial decklist. Only observed cards are listed, so
every card is marked confirmed.
"""

import logging
import re
from enum import Enum
from typing import Iterable, Optional

from ptcglog import patterns
from ptcglog.deck import (
    CardCategory,
    ConfidenceLevel,
    DeckCard,
    EnergyCards,
    EnergySubcategory,
    PlayerDecks,
    ReconstructedDeck,
    TrainerCards,
)
from ptcglog.models import EventType, GameEvent, MatchData, TrainerCategory
from ptcglog.settings import DEFAULT_CONFIG, ParserConfig
from ptcglog.trainer_categories import get_trainer_category, is_known_trainer

logger = logging.getLogger(__name__)

BASIC_ENERGY_PATTERN = re.compile(r"^Basic \w+ Energy$")
SPECIAL_ENERGY_PATTERN = re.compile(r"Energy$", re.IGNORECASE)


def is_basic_energy(energy_name: str) -> bool:
    """Basic energy follows the fixed "Basic <Type> Energy" naming."""
    return BASIC_ENERGY_PATTERN.match(energy_name) is not None


def categorize_card(
    card_name: str,
    event_type: EventType,
    trainer_category: Optional[TrainerCategory] = None,
) -> tuple[CardCategory, Optional[Enum]]:
    """Categorise a card from its name and the event it appeared in.

    Cards revealed by draws carry no type, so they are guessed: energy by
    name, then the known-trainer table, and anything else is assumed to be
    a Pokemon.

    Returns:
        (category, subcategory); subcategory is None for Pokemon.
    """
    if event_type in (EventType.PLAY_POKEMON, EventType.EVOLVE):
        return CardCategory.POKEMON, None

    if event_type == EventType.PLAY_TRAINER:
        return CardCategory.TRAINER, trainer_category or get_trainer_category(card_name)

    if event_type == EventType.ATTACH_ENERGY:
        subcategory = EnergySubcategory.BASIC if is_basic_energy(card_name) else EnergySubcategory.SPECIAL
        return CardCategory.ENERGY, subcategory

    if is_basic_energy(card_name):
        return CardCategory.ENERGY, EnergySubcategory.BASIC
    if SPECIAL_ENERGY_PATTERN.search(card_name):
        return CardCategory.ENERGY, EnergySubcategory.SPECIAL
    if is_known_trainer(card_name):
        return CardCategory.TRAINER, get_trainer_category(card_name)
    # TODO: an explicit "unknown" category would avoid mislabelling new trainer cards as Pokemon
    return CardCategory.POKEMON, None


def _add_or_update_card(
    card_map: dict[str, DeckCard],
    name: str,
    category: CardCategory,
    subcategory: Optional[Enum],
    max_copies: int,
    evolves_from: Optional[str] = None,
) -> None:
    """Count one more sighting of a card.

    Counts are capped at max_copies except for basic energy, which a deck
    may hold any number of. The first subcategory and pre-evolution seen
    are kept.
    """
    existing = card_map.get(name)
    if existing is None:
        card_map[name] = DeckCard(
            name=name,
            category=category,
            subcategory=subcategory,
            count=1,
            confidence=ConfidenceLevel.CONFIRMED,
            evolves_from=evolves_from,
        )
        return

    unlimited = category == CardCategory.ENERGY and subcategory == EnergySubcategory.BASIC
    if unlimited or existing.count < max_copies:
        existing.count += 1
    if subcategory is not None and existing.subcategory is None:
        existing.subcategory = subcategory
    if evolves_from and not existing.evolves_from:
        existing.evolves_from = evolves_from


def _extract_from_event(
    card_map: dict[str, DeckCard], event: GameEvent, max_copies: int
) -> None:
    details = event.details

    if event.type == EventType.PLAY_POKEMON:
        if details.pokemon_name:
            _add_or_update_card(card_map, details.pokemon_name, CardCategory.POKEMON, None, max_copies)

    elif event.type == EventType.EVOLVE:
        evolved, base = details.pokemon_name, details.evolved_from
        if evolved:
            _add_or_update_card(
                card_map, evolved, CardCategory.POKEMON, None, max_copies, evolves_from=base
            )
        # The base Pokemon is in the deck even if it was never played directly
        if base:
            _add_or_update_card(card_map, base, CardCategory.POKEMON, None, max_copies)

    elif event.type == EventType.PLAY_TRAINER:
        if details.trainer_name:
            category, subcategory = categorize_card(
                details.trainer_name, event.type, details.trainer_category
            )
            _add_or_update_card(card_map, details.trainer_name, category, subcategory, max_copies)

    elif event.type == EventType.ATTACH_ENERGY:
        # Energy name is only recorded in the description
        match = patterns.ATTACHED_NAME.search(event.description)
        if match:
            energy_name = match.group(1)
            category, subcategory = categorize_card(energy_name, event.type)
            _add_or_update_card(card_map, energy_name, category, subcategory, max_copies)

    elif event.type == EventType.DRAW:
        for card_name in details.card_names or ():
            category, subcategory = categorize_card(card_name, event.type)
            _add_or_update_card(card_map, card_name, category, subcategory, max_copies)


def extract_cards_from_events(
    events: Iterable[GameEvent],
    player_name: str,
    config: Optional[ParserConfig] = None,
) -> dict[str, DeckCard]:
    """Extract every observed card for one player.

    An event that fails to process is logged and skipped.

    Returns:
        Dict of card name -> DeckCard, in first-seen order.
    """
    config = config or DEFAULT_CONFIG
    card_map: dict[str, DeckCard] = {}

    for event in events:
        try:
            if event.player != player_name:
                continue
            _extract_from_event(card_map, event, config.max_card_copies)
        except Exception as e:
            logger.warning(f"Skipping event {getattr(event, 'id', '?')} for deck reconstruction: {e}")

    return card_map


def build_evolution_relationships(
    events: Iterable[GameEvent], card_map: dict[str, DeckCard]
) -> None:
    """Assign evolution stages and pre-evolutions from evolve events.

    A Pokemon's stage is the number of evolve hops back to the root of its
    line; Pokemon never evolved into are stage 0. A pre-evolution the
    player was seen using is kept; the chain from all evolve events (both
    players) only fills in what is missing.
    """
    chains: dict[str, str] = {}  # evolved -> base
    for event in events:
        if event.type != EventType.EVOLVE:
            continue
        evolved, base = event.details.pokemon_name, event.details.evolved_from
        if evolved and base:
            chains[evolved] = base

    def pre_evolution(name: str) -> Optional[str]:
        own = card_map.get(name)
        if own is not None and own.evolves_from:
            return own.evolves_from
        return chains.get(name)

    for card_name, card in card_map.items():
        if card.category != CardCategory.POKEMON:
            continue

        if card_name in chains and not card.evolves_from:
            card.evolves_from = chains[card_name]

        stage = 0
        seen = {card_name}
        parent = card.evolves_from
        while parent and parent not in seen:
            seen.add(parent)
            stage += 1
            parent = pre_evolution(parent)
        card.evolution_stage = stage


def _stage(card: DeckCard) -> int:
    return card.evolution_stage or 0


def sort_by_evolution_line(pokemon_cards: list[DeckCard]) -> list[DeckCard]:
    """Sort Pokemon so each evolution line is grouped, lowest stage first.

    Basics (stage 0 or no known pre-evolution) each start a group, in
    input order. Evolutions join the group holding their pre-evolution,
    lower stages first so a stage 2 finds its stage 1 already placed; an
    evolution whose line cannot be found starts its own group.
    """
    groups: dict[str, list[DeckCard]] = {}
    evolutions: list[DeckCard] = []

    for card in pokemon_cards:
        if card.evolution_stage == 0 or not card.evolves_from:
            groups[card.name] = [card]
        else:
            evolutions.append(card)

    for card in sorted(evolutions, key=_stage):
        group = groups.get(card.evolves_from)
        if group is None:
            group = next(
                (g for g in groups.values() if any(c.name == card.evolves_from for c in g)),
                None,
            )

        if group is None:
            groups[card.name] = [card]
            continue

        insert_at = next(
            (i for i, c in enumerate(group) if _stage(c) > _stage(card)), len(group)
        )
        group.insert(insert_at, card)

    result: list[DeckCard] = []
    for group in groups.values():
        result.extend(sorted(group, key=_stage))
    return result


def build_reconstructed_deck(player_name: str, card_map: dict[str, DeckCard]) -> ReconstructedDeck:
    """Partition extracted cards into the categorised deck view."""
    cards = list(card_map.values())
    for card in cards:
        card.min_count = card.count

    def having(category: CardCategory, subcategory: Optional[Enum] = None) -> list[DeckCard]:
        return [
            c for c in cards
            if c.category == category and (subcategory is None or c.subcategory == subcategory)
        ]

    return ReconstructedDeck(
        player_name=player_name,
        cards=cards,
        total_cards_observed=sum(c.count for c in cards),
        pokemon=sort_by_evolution_line(having(CardCategory.POKEMON)),
        trainers=TrainerCards(
            supporters=having(CardCategory.TRAINER, TrainerCategory.SUPPORTER),
            items=having(CardCategory.TRAINER, TrainerCategory.ITEM),
            tools=having(CardCategory.TRAINER, TrainerCategory.TOOL),
            stadiums=having(CardCategory.TRAINER, TrainerCategory.STADIUM),
        ),
        energy=EnergyCards(
            basic=having(CardCategory.ENERGY, EnergySubcategory.BASIC),
            special=having(CardCategory.ENERGY, EnergySubcategory.SPECIAL),
        ),
    )


def reconstruct_decks(match_data: MatchData, config: Optional[ParserConfig] = None) -> PlayerDecks:
    """Reconstruct both players' decks from match data.

    A failure for one player is logged and does not stop the other.
    """
    player_decks: PlayerDecks = {}

    for player in match_data.players:
        try:
            player_name = player.username
            card_map = extract_cards_from_events(match_data.events, player_name, config)
            build_evolution_relationships(match_data.events, card_map)
            player_decks[player_name] = build_reconstructed_deck(player_name, card_map)
            logger.debug(
                f"Reconstructed deck for {player_name}: "
                f"{player_decks[player_name].total_cards_observed} cards observed"
            )
        except Exception as e:
            logger.warning(f"Error reconstructing deck for {getattr(player, 'username', player)}: {e}")

    return player_decks
