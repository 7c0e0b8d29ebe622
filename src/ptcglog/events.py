"""GameEvent constructors.

Each builder takes the ID sequence, turn number and timestamp from the
calling parser and renders a human-readable description. Descriptions are
for display only; nothing re-parses them except the deck reconstructor's
energy-name lookup on attach_energy events.
"""

from typing import Optional, Sequence

from ptcglog.models import (
    EventDetails,
    EventType,
    GameEvent,
    Location,
    TrainerCategory,
    WinCondition,
)
from ptcglog.utils import EventIdSequence

WIN_CONDITION_TEXT = {
    WinCondition.PRIZES: "took all Prize cards",
    WinCondition.DECK_OUT: "opponent's deck ran out",
    WinCondition.NO_POKEMON: "opponent has no Pokemon",
    WinCondition.CONCEDE: "opponent conceded",
}


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def draw_event(
    ids: EventIdSequence,
    player: str,
    card_count: int,
    turn: int,
    timestamp: int,
    card_names: Optional[Sequence[str]] = None,
) -> GameEvent:
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.DRAW,
        description=f"{player} drew {_plural(card_count, 'card')}",
        details=EventDetails(
            card_count=card_count,
            card_names=tuple(card_names) if card_names else None,
        ),
        timestamp=timestamp,
    )


def mulligan_event(ids: EventIdSequence, player: str, turn: int, timestamp: int) -> GameEvent:
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.MULLIGAN,
        description=f"{player} took a mulligan",
        timestamp=timestamp,
    )


def play_pokemon_event(
    ids: EventIdSequence,
    player: str,
    pokemon_name: str,
    location: Location,
    turn: int,
    timestamp: int,
) -> GameEvent:
    location_text = "Active Spot" if location == Location.ACTIVE else "Bench"
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.PLAY_POKEMON,
        description=f"{player} played {pokemon_name} to the {location_text}",
        details=EventDetails(pokemon_name=pokemon_name, location=location),
        timestamp=timestamp,
    )


def evolve_event(
    ids: EventIdSequence,
    player: str,
    from_pokemon: str,
    to_pokemon: str,
    turn: int,
    timestamp: int,
    location: Optional[Location] = None,
) -> GameEvent:
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.EVOLVE,
        description=f"{player} evolved {from_pokemon} to {to_pokemon}",
        details=EventDetails(
            pokemon_name=to_pokemon, evolved_from=from_pokemon, location=location
        ),
        timestamp=timestamp,
    )


def energy_event(
    ids: EventIdSequence,
    player: str,
    energy_name: str,
    target_pokemon: str,
    turn: int,
    timestamp: int,
) -> GameEvent:
    # The energy name lives only in the description
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.ATTACH_ENERGY,
        description=f"{player} attached {energy_name} to {target_pokemon}",
        details=EventDetails(pokemon_name=target_pokemon),
        timestamp=timestamp,
    )


def trainer_event(
    ids: EventIdSequence,
    player: str,
    trainer_name: str,
    category: TrainerCategory,
    turn: int,
    timestamp: int,
) -> GameEvent:
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.PLAY_TRAINER,
        description=f"{player} played {trainer_name}",
        details=EventDetails(trainer_name=trainer_name, trainer_category=category),
        timestamp=timestamp,
    )


def ability_event(
    ids: EventIdSequence,
    player: str,
    pokemon_name: str,
    ability_name: str,
    turn: int,
    timestamp: int,
) -> GameEvent:
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.USE_ABILITY,
        description=f"{player}'s {pokemon_name} used {ability_name}",
        details=EventDetails(pokemon_name=pokemon_name, attack_name=ability_name),
        timestamp=timestamp,
    )


def attack_event(
    ids: EventIdSequence,
    player: str,
    attacking_pokemon: Optional[str],
    attack_name: Optional[str],
    target_pokemon: str,
    damage: int,
    turn: int,
    timestamp: int,
    damage_breakdown: Optional[str] = None,
) -> GameEvent:
    if attacking_pokemon and attack_name:
        description = f"{player}'s {attacking_pokemon} used {attack_name} for {damage} damage"
    else:
        description = f"{player} dealt {damage} damage to {target_pokemon}"
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.ATTACK,
        description=description,
        details=EventDetails(
            attacking_pokemon=attacking_pokemon,
            attack_name=attack_name,
            target_pokemon=target_pokemon,
            damage=damage,
            damage_breakdown=damage_breakdown,
        ),
        timestamp=timestamp,
    )


def knockout_event(
    ids: EventIdSequence,
    causing_player: str,
    knocked_out_pokemon: str,
    turn: int,
    timestamp: int,
) -> GameEvent:
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=causing_player,
        type=EventType.KNOCKOUT,
        description=f"{knocked_out_pokemon} was Knocked Out",
        details=EventDetails(knocked_out_pokemon=knocked_out_pokemon),
        timestamp=timestamp,
    )


def prize_taken_event(
    ids: EventIdSequence, player: str, prizes: int, turn: int, timestamp: int
) -> GameEvent:
    text = "a Prize card" if prizes == 1 else f"{prizes} Prize cards"
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.PRIZE_TAKEN,
        description=f"{player} took {text}",
        details=EventDetails(prizes_taken=prizes),
        timestamp=timestamp,
    )


def switch_event(
    ids: EventIdSequence, player: str, pokemon_name: str, turn: int, timestamp: int
) -> GameEvent:
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.SWITCH,
        description=f"{player}'s {pokemon_name} is now in the Active Spot",
        details=EventDetails(pokemon_name=pokemon_name, location=Location.ACTIVE),
        timestamp=timestamp,
    )


def coin_flip_event(
    ids: EventIdSequence,
    player: str,
    heads_count: int,
    tails_count: int,
    turn: int,
    timestamp: int,
    result: Optional[str] = None,
) -> GameEvent:
    total = heads_count + tails_count
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=player,
        type=EventType.COIN_FLIP,
        description=f"Flipped {_plural(total, 'coin')}, {heads_count} heads",
        details=EventDetails(heads_count=heads_count, tails_count=tails_count, result=result),
        timestamp=timestamp,
    )


def win_event(
    ids: EventIdSequence,
    winner: str,
    win_condition: WinCondition,
    turn: int,
    timestamp: int,
) -> GameEvent:
    return GameEvent(
        id=ids.next_id(),
        turn=turn,
        player=winner,
        type=EventType.WIN,
        description=f"{winner} wins - {WIN_CONDITION_TEXT[win_condition]}",
        details=EventDetails(win_condition=win_condition),
        timestamp=timestamp,
    )
