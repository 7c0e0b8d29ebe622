"""ptcglog: Pokemon TCG Live game log parser and deck reconstructor."""

from ptcglog.models import (
    EventDetails,
    EventType,
    GameEvent,
    Location,
    MatchData,
    ParseResult,
    Player,
    PlayerStatistics,
    TrainerCategory,
    Turn,
    WinCondition,
)
from ptcglog.deck import (
    CardCategory,
    ConfidenceLevel,
    DeckCard,
    EnergySubcategory,
    PlayerDecks,
    ReconstructedDeck,
)
from ptcglog.parser import parse_log
from ptcglog.deck_reconstructor import reconstruct_decks, sort_by_evolution_line
from ptcglog.statistics import calculate_statistics, create_empty_player_stats
from ptcglog.trainer_categories import get_trainer_category, is_known_trainer
from ptcglog.settings import DEFAULT_CONFIG, ParserConfig, Settings, get_settings
from ptcglog.utils import EventIdSequence, reset_event_counter

__version__ = "0.1.0"


def analyze_log(
    log_text: str, config: ParserConfig = DEFAULT_CONFIG
) -> tuple[ParseResult, PlayerDecks]:
    """Parse a log and reconstruct both decks in one call.

    Convenience wrapper around parse_log() and reconstruct_decks().

    Returns:
        Tuple of (parse result, decks). Decks are empty when parsing failed.

    Example:
        result, decks = analyze_log(text)
        if result.success:
            print(result.data.winner, decks[result.data.winner].total_cards_observed)
    """
    result = parse_log(log_text, config=config)
    if not result.success:
        return result, {}
    return result, reconstruct_decks(result.data, config)


__all__ = [
    "__version__",
    "analyze_log",
    "parse_log",
    "reconstruct_decks",
    "sort_by_evolution_line",
    "reset_event_counter",
    "EventIdSequence",
    "calculate_statistics",
    "create_empty_player_stats",
    "get_trainer_category",
    "is_known_trainer",
    "ParserConfig",
    "DEFAULT_CONFIG",
    "Settings",
    "get_settings",
    "EventDetails",
    "EventType",
    "GameEvent",
    "Location",
    "MatchData",
    "ParseResult",
    "Player",
    "PlayerStatistics",
    "TrainerCategory",
    "Turn",
    "WinCondition",
    "CardCategory",
    "ConfidenceLevel",
    "DeckCard",
    "EnergySubcategory",
    "PlayerDecks",
    "ReconstructedDeck",
]
