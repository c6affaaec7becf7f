"""Prompt/choice protocol between the engine and player agents.

A Prompt is a decision point offered to exactly one player. The agent
answers with the Choice type of the same kind, echoing the prompt id.
Handlers build prompts with only the kind-specific payload; the decision
broker stamps the id, the player's view and the context before the prompt
reaches an agent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from core.cards import BirdCard, BonusCard, BonusTrade
from core.constants import (
    CardSource,
    DieFace,
    FoodDestination,
    FoodType,
    Habitat,
    SelectCardsMode,
    TurnActionKind,
)


class PromptKind(Enum):
    """Every kind of decision an agent can be asked to make."""

    STARTING_HAND = "startingHand"
    TURN_ACTION = "turnAction"
    ACTIVATE_POWER = "activatePower"
    SELECT_FOOD_FROM_FEEDER = "selectFoodFromFeeder"
    SELECT_FOOD_FROM_SUPPLY = "selectFoodFromSupply"
    SELECT_FOOD_DESTINATION = "selectFoodDestination"
    DISCARD_EGGS = "discardEggs"
    PLACE_EGGS = "placeEggs"
    SELECT_CARDS = "selectCards"
    DRAW_CARDS = "drawCards"
    SELECT_BONUS_CARDS = "selectBonusCards"
    SELECT_PLAYER = "selectPlayer"
    REPEAT_POWER = "repeatPower"
    PLAY_BIRD = "playBird"
    DISCARD_FOOD = "discardFood"
    SELECT_HABITAT = "selectHabitat"


# =============================================================================
# Views and context
# =============================================================================


@dataclass(frozen=True)
class ValidationError:
    """Why a choice was rejected. Returned by validators, never raised."""

    code: str
    message: str


@dataclass(frozen=True)
class BirdInstanceView:
    instance_id: str
    card: BirdCard
    eggs: int
    cached_food: dict[FoodType, int]
    tucked_cards: int


@dataclass(frozen=True)
class OpponentView:
    """Public information about another player."""

    player_id: str
    hand_size: int
    bonus_card_count: int
    food: dict[FoodType, int]
    board: dict[Habitat, tuple[BirdInstanceView, ...]]
    turns_remaining: int
    forfeited: bool


@dataclass(frozen=True)
class PlayerView:
    """Everything a player may see when answering a prompt.

    Attributes:
        player_id: The viewing player.
        hand: Bird cards in hand.
        bonus_cards: Kept bonus cards.
        food: Food supply.
        board: Birds per habitat, left to right.
        turns_remaining: Turns left this round.
        birdfeeder: Dice in the feeder per face.
        bird_tray: Face-up bird cards.
        deck_size: Cards left in the bird draw pile.
        round: Current round.
        opponents: Public view of the other players, clockwise.
    """

    player_id: str
    hand: tuple[BirdCard, ...]
    bonus_cards: tuple[BonusCard, ...]
    food: dict[FoodType, int]
    board: dict[Habitat, tuple[BirdInstanceView, ...]]
    turns_remaining: int
    birdfeeder: dict[DieFace, int]
    bird_tray: tuple[BirdCard, ...]
    deck_size: int
    round: int
    opponents: tuple[OpponentView, ...] = ()

    def find_bird(self, instance_id: str) -> Optional[BirdInstanceView]:
        for row in self.board.values():
            for bird in row:
                if bird.instance_id == instance_id:
                    return bird
        return None


@dataclass(frozen=True)
class PromptContext:
    """Where in the game the prompt was raised.

    Attributes:
        round: Current round.
        turn: Global turn counter.
        active_player_id: Player whose turn it is (None during setup).
        trigger: What raised the prompt (a handler id, or the turn action).
        bird_instance_id: Bird whose power raised the prompt, if any.
    """

    round: int
    turn: int
    active_player_id: Optional[str]
    trigger: str = ""
    bird_instance_id: Optional[str] = None


# =============================================================================
# Base classes
# =============================================================================


@dataclass(frozen=True)
class Prompt:
    """Base class for prompts."""

    kind: ClassVar[PromptKind]

    player_id: str
    prompt_id: str = field(default="", kw_only=True)
    view: Optional[PlayerView] = field(default=None, kw_only=True)
    context: Optional[PromptContext] = field(default=None, kw_only=True)
    previous_error: Optional[ValidationError] = field(default=None, kw_only=True)


@dataclass(frozen=True)
class Choice:
    """Base class for choices."""

    kind: ClassVar[PromptKind]

    prompt_id: str


# =============================================================================
# Prompt / choice pairs
# =============================================================================


@dataclass(frozen=True)
class StartingHandPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.STARTING_HAND

    eligible_birds: tuple[BirdCard, ...] = ()
    eligible_bonus_cards: tuple[BonusCard, ...] = ()


@dataclass(frozen=True)
class StartingHandChoice(Choice):
    """Birds to keep, one bonus card, and one food discarded per bird kept."""

    kind: ClassVar[PromptKind] = PromptKind.STARTING_HAND

    birds: tuple[str, ...] = ()
    bonus_card: str = ""
    food_to_discard: dict[FoodType, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ActionReward:
    """What a turn action would yield right now.

    Attributes:
        reward: Base amount (food, eggs or cards); 0 for playing a bird.
        bonus: The bonus trade of the current column, if any.
        bonus_available: Whether the player can pay for the bonus trade.
    """

    reward: int
    bonus: Optional[BonusTrade] = None
    bonus_available: bool = False


@dataclass(frozen=True)
class TurnActionPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.TURN_ACTION

    eligible_actions: tuple[TurnActionKind, ...] = ()
    rewards_by_action: dict[TurnActionKind, ActionReward] = field(default_factory=dict)


@dataclass(frozen=True)
class TurnActionChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.TURN_ACTION

    action: TurnActionKind = TurnActionKind.GAIN_FOOD
    take_bonus: bool = False


@dataclass(frozen=True)
class ActivatePowerPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.ACTIVATE_POWER

    bird_instance_id: str = ""
    handler_id: str = ""
    power_text: str = ""


@dataclass(frozen=True)
class ActivatePowerChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.ACTIVATE_POWER

    activate: bool = True


@dataclass(frozen=True)
class DieSelection:
    """One die taken from the feeder.

    as_food picks seed or invertebrate for the dual face; it may be left
    None for single-food faces.
    """

    die: DieFace
    as_food: Optional[FoodType] = None


@dataclass(frozen=True)
class SelectFoodFromFeederPrompt(Prompt):
    """Take dice from the feeder, or reroll it when can_reroll is set.

    available_dice only lists dice that may be taken (filtered by
    allowed_foods when given).
    """

    kind: ClassVar[PromptKind] = PromptKind.SELECT_FOOD_FROM_FEEDER

    available_dice: dict[DieFace, int] = field(default_factory=dict)
    count: int = 1
    can_reroll: bool = False
    allowed_foods: Optional[tuple[FoodType, ...]] = None


@dataclass(frozen=True)
class SelectFoodFromFeederChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_FOOD_FROM_FEEDER

    dice: tuple[DieSelection, ...] = ()
    reroll: bool = False


@dataclass(frozen=True)
class SelectFoodFromSupplyPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_FOOD_FROM_SUPPLY

    count: int = 1
    allowed_foods: tuple[FoodType, ...] = ()


@dataclass(frozen=True)
class SelectFoodFromSupplyChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_FOOD_FROM_SUPPLY

    food: dict[FoodType, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectFoodDestinationPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_FOOD_DESTINATION

    source_bird_id: str = ""
    food: FoodType = FoodType.SEED
    destination_options: tuple[FoodDestination, ...] = ()


@dataclass(frozen=True)
class SelectFoodDestinationChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_FOOD_DESTINATION

    destination: FoodDestination = FoodDestination.PLAYER_SUPPLY


@dataclass(frozen=True)
class DiscardEggsPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.DISCARD_EGGS

    count: int = 1
    eggs_by_eligible_bird: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class DiscardEggsChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.DISCARD_EGGS

    sources: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class PlaceEggsPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.PLACE_EGGS

    count: int = 1
    remaining_capacity_by_bird: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class PlaceEggsChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.PLACE_EGGS

    placements: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectCardsPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_CARDS

    mode: SelectCardsMode = SelectCardsMode.KEEP
    source: CardSource = CardSource.HAND
    count: int = 1
    eligible_cards: tuple[BirdCard, ...] = ()


@dataclass(frozen=True)
class SelectCardsChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_CARDS

    cards: tuple[str, ...] = ()


@dataclass(frozen=True)
class DrawCardsPrompt(Prompt):
    """Draw up to remaining cards from the tray and/or the deck."""

    kind: ClassVar[PromptKind] = PromptKind.DRAW_CARDS

    remaining: int = 1
    tray_cards: tuple[BirdCard, ...] = ()
    deck_available: int = 0


@dataclass(frozen=True)
class DrawCardsChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.DRAW_CARDS

    tray_cards: tuple[str, ...] = ()
    deck_count: int = 0


@dataclass(frozen=True)
class SelectBonusCardsPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_BONUS_CARDS

    count: int = 1
    eligible_cards: tuple[BonusCard, ...] = ()


@dataclass(frozen=True)
class SelectBonusCardsChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_BONUS_CARDS

    cards: tuple[str, ...] = ()


@dataclass(frozen=True)
class SelectPlayerPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_PLAYER

    eligible_players: tuple[str, ...] = ()


@dataclass(frozen=True)
class SelectPlayerChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_PLAYER

    player: str = ""


@dataclass(frozen=True)
class RepeatPowerPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.REPEAT_POWER

    eligible_birds: tuple[str, ...] = ()


@dataclass(frozen=True)
class RepeatPowerChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.REPEAT_POWER

    bird: str = ""


@dataclass(frozen=True)
class PlayBirdPrompt(Prompt):
    """Play a bird from hand.

    egg_cost_by_habitat lists only habitats that have a free slot.
    """

    kind: ClassVar[PromptKind] = PromptKind.PLAY_BIRD

    eligible_birds: tuple[BirdCard, ...] = ()
    egg_cost_by_habitat: dict[Habitat, int] = field(default_factory=dict)


@dataclass(frozen=True)
class PlayBirdChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.PLAY_BIRD

    bird: str = ""
    habitat: Habitat = Habitat.FOREST
    food_to_spend: dict[FoodType, int] = field(default_factory=dict)
    eggs_to_spend: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class DiscardFoodPrompt(Prompt):
    """Discard food matching food_cost (WILD entries accept any food)."""

    kind: ClassVar[PromptKind] = PromptKind.DISCARD_FOOD

    food_cost: dict[FoodType, int] = field(default_factory=dict)
    reward_text: str = ""


@dataclass(frozen=True)
class DiscardFoodChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.DISCARD_FOOD

    food: dict[FoodType, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectHabitatPrompt(Prompt):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_HABITAT

    eligible_habitats: tuple[Habitat, ...] = ()


@dataclass(frozen=True)
class SelectHabitatChoice(Choice):
    kind: ClassVar[PromptKind] = PromptKind.SELECT_HABITAT

    habitat: Habitat = Habitat.FOREST


CHOICE_TYPES: dict[PromptKind, type[Choice]] = {
    choice_type.kind: choice_type
    for choice_type in (
        StartingHandChoice,
        TurnActionChoice,
        ActivatePowerChoice,
        SelectFoodFromFeederChoice,
        SelectFoodFromSupplyChoice,
        SelectFoodDestinationChoice,
        DiscardEggsChoice,
        PlaceEggsChoice,
        SelectCardsChoice,
        DrawCardsChoice,
        SelectBonusCardsChoice,
        SelectPlayerChoice,
        RepeatPowerChoice,
        PlayBirdChoice,
        DiscardFoodChoice,
        SelectHabitatChoice,
    )
}
