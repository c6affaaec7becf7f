"""Constants and enums for the Wingsim game engine."""

from enum import Enum


class FoodType(Enum):
    """Food tokens held by players and cached on birds.

    WILD only appears in costs ("any food"); it is never held.
    """

    INVERTEBRATE = "invertebrate"
    SEED = "seed"
    FISH = "fish"
    FRUIT = "fruit"
    RODENT = "rodent"
    WILD = "wild"


class DieFace(Enum):
    """Faces of the birdfeeder dice."""

    INVERTEBRATE = "invertebrate"
    SEED = "seed"
    FISH = "fish"
    FRUIT = "fruit"
    RODENT = "rodent"
    SEED_INVERTEBRATE = "seed_invertebrate"  # Taker chooses seed or invertebrate


class Habitat(Enum):
    """Rows of a player board."""

    FOREST = "forest"
    GRASSLAND = "grassland"
    WETLAND = "wetland"


class NestType(Enum):
    """Nest shapes used by nest-type powers and bonus cards."""

    BOWL = "bowl"
    CAVITY = "cavity"
    GROUND = "ground"
    PLATFORM = "platform"
    WILD = "wild"  # Counts as every nest type


class PowerTrigger(Enum):
    """When a bird power may be activated."""

    WHEN_PLAYED = "when_played"  # White
    WHEN_ACTIVATED = "when_activated"  # Brown
    ONCE_BETWEEN_TURNS = "once_between_turns"  # Pink


class FoodCostMode(Enum):
    """How the food cost list of a bird is interpreted."""

    AND = "and"
    OR = "or"
    NONE = "none"


class TurnActionKind(Enum):
    """The four actions a player may take on their turn."""

    PLAY_BIRD = "play_bird"
    GAIN_FOOD = "gain_food"
    LAY_EGGS = "lay_eggs"
    DRAW_CARDS = "draw_cards"


class FoodSource(Enum):
    """Where gained food comes from."""

    BIRDFEEDER = "birdfeeder"
    SUPPLY = "supply"


class FoodDestination(Enum):
    """Where a gained food token goes."""

    PLAYER_SUPPLY = "player_supply"
    CACHE_ON_SOURCE_BIRD = "cache_on_source_bird"


class Resource(Enum):
    """Resources paid for habitat bonus trades."""

    CARD = "card"
    FOOD = "food"
    EGG = "egg"


class SkipReason(Enum):
    """Why a power did not do anything."""

    AGENT_DECLINED = "agent_declined"
    CONDITION_NOT_MET = "condition_not_met"
    RESOURCE_UNAVAILABLE = "resource_unavailable"
    CHAIN_DEPTH_EXCEEDED = "chain_depth_exceeded"


class SelectCardsMode(Enum):
    """What happens to cards picked in a card selection."""

    TUCK = "tuck"
    DISCARD = "discard"
    KEEP = "keep"


class CardSource(Enum):
    """Where the cards of a card selection come from."""

    HAND = "hand"
    REVEALED_SET = "revealed_set"


class BonusScoringType(Enum):
    """How a bonus card converts its count into points."""

    TIERED = "tiered"
    PER_BIRD = "per_bird"


class Phase(Enum):
    """Game phases tracked by the phase machine."""

    AWAITING_STARTING_HAND = "awaiting_starting_hand"
    TURN_IN_PROGRESS = "turn_in_progress"
    TURN_ENDED = "turn_ended"
    ROUND_ENDED = "round_ended"
    GAME_ENDED = "game_ended"


# Player limits
MIN_PLAYERS = 1
MAX_PLAYERS = 5

# Board and shared components
HABITAT_SIZE = 5
FEEDER_CAPACITY = 5
TRAY_SIZE = 3

# Game length
TOTAL_ROUNDS = 4
TURNS_BY_ROUND = (8, 7, 6, 5)

# Starting resources
INITIAL_BIRDS_DEALT = 5
INITIAL_BONUS_CARDS_DEALT = 2

# Engine limits
MAX_CHOICE_ATTEMPTS = 3  # Invalid answers allowed per prompt before forfeit
MAX_CHAIN_DEPTH = 3  # Nested power executions (repeat / play-additional-bird)
MAX_REROLLS_PER_SELECTION = 3

# Ordered collections
FOOD_TYPES = [
    FoodType.INVERTEBRATE,
    FoodType.SEED,
    FoodType.FISH,
    FoodType.FRUIT,
    FoodType.RODENT,
]

HABITATS = [Habitat.FOREST, Habitat.GRASSLAND, Habitat.WETLAND]

DIE_FACES = [
    DieFace.INVERTEBRATE,
    DieFace.SEED,
    DieFace.FISH,
    DieFace.FRUIT,
    DieFace.RODENT,
    DieFace.SEED_INVERTEBRATE,
]

# Habitat activated by each non-play turn action
HABITAT_FOR_ACTION = {
    TurnActionKind.GAIN_FOOD: Habitat.FOREST,
    TurnActionKind.LAY_EGGS: Habitat.GRASSLAND,
    TurnActionKind.DRAW_CARDS: Habitat.WETLAND,
}

# Food each die face can provide
DIE_FACE_FOODS = {
    DieFace.INVERTEBRATE: (FoodType.INVERTEBRATE,),
    DieFace.SEED: (FoodType.SEED,),
    DieFace.FISH: (FoodType.FISH,),
    DieFace.FRUIT: (FoodType.FRUIT,),
    DieFace.RODENT: (FoodType.RODENT,),
    DieFace.SEED_INVERTEBRATE: (FoodType.SEED, FoodType.INVERTEBRATE),
}
