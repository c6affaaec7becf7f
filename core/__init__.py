"""Core data models for the Wingsim game engine."""

from .constants import (
    FoodType,
    DieFace,
    Habitat,
    NestType,
    PowerTrigger,
    FoodCostMode,
    TurnActionKind,
    FoodSource,
    FoodDestination,
    Resource,
    SkipReason,
    SelectCardsMode,
    CardSource,
    BonusScoringType,
    Phase,
    MIN_PLAYERS,
    MAX_PLAYERS,
    HABITAT_SIZE,
    FEEDER_CAPACITY,
    TRAY_SIZE,
    TOTAL_ROUNDS,
    TURNS_BY_ROUND,
    INITIAL_BIRDS_DEALT,
    INITIAL_BONUS_CARDS_DEALT,
    MAX_CHOICE_ATTEMPTS,
    MAX_CHAIN_DEPTH,
    MAX_REROLLS_PER_SELECTION,
    FOOD_TYPES,
    HABITATS,
    DIE_FACES,
    HABITAT_FOR_ACTION,
    DIE_FACE_FOODS,
)

from .errors import (
    WingsimError,
    ProtocolViolationError,
    AgentForfeitError,
    ConfigurationError,
    DeckExhaustedError,
    RandomSourceExhaustedError,
    UnknownHandlerError,
    EffectApplicationError,
)

from .rng import RandomSource, SeededRandom, PresetRandom

from .deck import Deck

from .birdfeeder import Birdfeeder, die_provides

from .cards import (
    PowerSpec,
    BirdCard,
    BonusScoringTier,
    BonusCard,
    BonusTrade,
    HabitatRewards,
    PlayerBoardConfig,
)

from .board import BirdInstance, PlayerBoard, make_bird_instance_id

from .card_supply import BirdCardSupply

from .player import PlayerState, payment_error, empty_food_supply

from .game_state import GameState

from .logging_config import setup_logging, get_logger

__all__ = [
    # Constants
    "FoodType",
    "DieFace",
    "Habitat",
    "NestType",
    "PowerTrigger",
    "FoodCostMode",
    "TurnActionKind",
    "FoodSource",
    "FoodDestination",
    "Resource",
    "SkipReason",
    "SelectCardsMode",
    "CardSource",
    "BonusScoringType",
    "Phase",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "HABITAT_SIZE",
    "FEEDER_CAPACITY",
    "TRAY_SIZE",
    "TOTAL_ROUNDS",
    "TURNS_BY_ROUND",
    "INITIAL_BIRDS_DEALT",
    "INITIAL_BONUS_CARDS_DEALT",
    "MAX_CHOICE_ATTEMPTS",
    "MAX_CHAIN_DEPTH",
    "MAX_REROLLS_PER_SELECTION",
    "FOOD_TYPES",
    "HABITATS",
    "DIE_FACES",
    "HABITAT_FOR_ACTION",
    "DIE_FACE_FOODS",
    # Errors
    "WingsimError",
    "ProtocolViolationError",
    "AgentForfeitError",
    "ConfigurationError",
    "DeckExhaustedError",
    "RandomSourceExhaustedError",
    "UnknownHandlerError",
    "EffectApplicationError",
    # Randomness and pools
    "RandomSource",
    "SeededRandom",
    "PresetRandom",
    "Deck",
    "Birdfeeder",
    "die_provides",
    "BirdCardSupply",
    # Cards and boards
    "PowerSpec",
    "BirdCard",
    "BonusScoringTier",
    "BonusCard",
    "BonusTrade",
    "HabitatRewards",
    "PlayerBoardConfig",
    "BirdInstance",
    "PlayerBoard",
    "make_bird_instance_id",
    # Players and state
    "PlayerState",
    "payment_error",
    "empty_food_supply",
    "GameState",
    # Logging
    "setup_logging",
    "get_logger",
]
