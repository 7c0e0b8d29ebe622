"""Statistics calculator for parsed match data.

Folds the ordered event stream into per-player counters. Aggregation
cannot fail: missing detail fields simply contribute nothing.
"""

from typing import Iterable, Optional, Sequence

from ptcglog.models import (
    EventDetails,
    EventType,
    GameEvent,
    PlayerStatistics,
    TrainerPlayCount,
    TrainersPlayed,
    Turn,
)

TRAINER_LIST_KEYS = ("supporters", "items", "tools", "stadiums")


def create_empty_player_stats() -> PlayerStatistics:
    return PlayerStatistics()


def categorize_and_count_trainer(stats: PlayerStatistics, details: EventDetails) -> None:
    """Increment (or insert) the trainer's entry in its category list."""
    if not details.trainer_name or details.trainer_category is None:
        return

    category_list = stats.trainers_played.for_category(details.trainer_category)
    for entry in category_list:
        if entry.name == details.trainer_name:
            entry.count += 1
            return
    category_list.append(TrainerPlayCount(name=details.trainer_name, count=1))


def calculate_statistics(
    events: Iterable[GameEvent], player_names: Sequence[str]
) -> dict[str, PlayerStatistics]:
    """Calculate statistics for both players from the full event list.

    Events attributed to anyone other than the given players are ignored.
    turns_played is not set here; see apply_turns_played().
    """
    stats = {name: create_empty_player_stats() for name in player_names}

    for event in events:
        player_stats = stats.get(event.player)
        if player_stats is None:
            continue

        details = event.details
        if event.type == EventType.DRAW:
            player_stats.total_cards_drawn += _or_default(details.card_count, 1)
        elif event.type == EventType.ATTACK:
            player_stats.total_damage_dealt += _or_default(details.damage, 0)
        elif event.type == EventType.KNOCKOUT:
            player_stats.pokemon_knocked_out += 1
        elif event.type == EventType.PRIZE_TAKEN:
            player_stats.prize_cards_taken += _or_default(details.prizes_taken, 1)
        elif event.type == EventType.PLAY_TRAINER:
            categorize_and_count_trainer(player_stats, details)
        elif event.type == EventType.COIN_FLIP:
            player_stats.coin_flips.heads += _or_default(details.heads_count, 0)
            player_stats.coin_flips.tails += _or_default(details.tails_count, 0)

    return stats


def apply_turns_played(stats: dict[str, PlayerStatistics], turns: Iterable[Turn]) -> None:
    """Credit each turn to its player."""
    for turn in turns:
        if turn.player in stats:
            stats[turn.player].turns_played += 1


def get_total_trainers_played(stats: PlayerStatistics) -> int:
    return sum(
        get_trainer_count_by_category(stats, key) for key in TRAINER_LIST_KEYS
    )


def get_trainer_count_by_category(stats: PlayerStatistics, category: str) -> int:
    """Total plays in one category list ("supporters", "items", ...)."""
    return sum(t.count for t in getattr(stats.trainers_played, category))


def merge_statistics(
    base: dict[str, PlayerStatistics], additional: dict[str, PlayerStatistics]
) -> dict[str, PlayerStatistics]:
    """Merge statistics from two sources, summing every counter.

    Players present in only one source keep their numbers. Inputs are not
    modified.
    """
    merged: dict[str, PlayerStatistics] = {}
    players = list(base) + [p for p in additional if p not in base]

    for player in players:
        a = base.get(player) or create_empty_player_stats()
        b = additional.get(player) or create_empty_player_stats()

        result = PlayerStatistics(
            total_damage_dealt=a.total_damage_dealt + b.total_damage_dealt,
            total_cards_drawn=a.total_cards_drawn + b.total_cards_drawn,
            pokemon_knocked_out=a.pokemon_knocked_out + b.pokemon_knocked_out,
            prize_cards_taken=a.prize_cards_taken + b.prize_cards_taken,
            turns_played=a.turns_played + b.turns_played,
        )
        result.coin_flips.heads = a.coin_flips.heads + b.coin_flips.heads
        result.coin_flips.tails = a.coin_flips.tails + b.coin_flips.tails
        result.trainers_played = _merge_trainers_played(a.trainers_played, b.trainers_played)
        merged[player] = result

    return merged


def _merge_trainers_played(base: TrainersPlayed, additional: TrainersPlayed) -> TrainersPlayed:
    merged = TrainersPlayed()
    for key in TRAINER_LIST_KEYS:
        counts: dict[str, int] = {}
        for trainer in getattr(base, key) + getattr(additional, key):
            counts[trainer.name] = counts.get(trainer.name, 0) + trainer.count
        setattr(merged, key, [TrainerPlayCount(name=n, count=c) for n, c in counts.items()])
    return merged


def _or_default(value: Optional[int], default: int) -> int:
    return default if value is None else value
