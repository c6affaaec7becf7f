"""Effects: the only way game state changes.

Handlers yield effects; the engine applies each one immediately and sends
the same object back to the handler with its result fields filled in
(for example the cards actually drawn, or the dice rolled).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from core.constants import CardSource, DieFace, FoodDestination, FoodSource, FoodType, Habitat, SkipReason


class EffectType(Enum):
    """All effect kinds the engine knows how to apply."""

    ACTIVATE_POWER = "activate_power"
    REPEAT_BROWN_POWER = "repeat_brown_power"
    GAIN_FOOD = "gain_food"
    LAY_EGGS = "lay_eggs"
    DRAW_CARDS = "draw_cards"
    DRAW_BONUS_CARDS = "draw_bonus_cards"
    DISCARD_FOOD = "discard_food"
    DISCARD_EGGS = "discard_eggs"
    DISCARD_CARDS = "discard_cards"
    TUCK_CARDS = "tuck_cards"
    REVEAL_CARDS = "reveal_cards"
    REVEAL_BONUS_CARDS = "reveal_bonus_cards"
    CACHE_FOOD = "cache_food"
    PLAY_BIRD = "play_bird"
    MOVE_BIRD = "move_bird"
    ALL_PLAYERS_GAIN_FOOD = "all_players_gain_food"
    ALL_PLAYERS_DRAW_CARDS = "all_players_draw_cards"
    ALL_PLAYERS_LAY_EGGS = "all_players_lay_eggs"
    ROLL_DICE = "roll_dice"
    REROLL_BIRDFEEDER = "reroll_birdfeeder"
    REFILL_BIRDFEEDER = "refill_birdfeeder"
    REFILL_BIRD_TRAY = "refill_bird_tray"
    # Game loop bookkeeping
    KEEP_STARTING_HAND = "keep_starting_hand"
    BEGIN_ROUND = "begin_round"
    BEGIN_TURN = "begin_turn"
    END_TURN = "end_turn"
    FORFEIT_PLAYER = "forfeit_player"


@dataclass
class Effect:
    """Base class for effects."""

    effect_type: ClassVar[EffectType]


# =============================================================================
# Power bookkeeping
# =============================================================================


@dataclass
class ActivatePowerEffect(Effect):
    """Records whether a bird power ran, and if not, why."""

    effect_type: ClassVar[EffectType] = EffectType.ACTIVATE_POWER

    player_id: str
    bird_instance_id: str
    handler_id: str
    activated: bool
    skip_reason: Optional[SkipReason] = None


@dataclass
class RepeatBrownPowerEffect(Effect):
    """Run another bird's brown power as if it were activated."""

    effect_type: ClassVar[EffectType] = EffectType.REPEAT_BROWN_POWER

    player_id: str
    source_bird_id: str
    target_bird_id: str


# =============================================================================
# Food
# =============================================================================


@dataclass
class GainFoodEffect(Effect):
    """Food moves to a player's supply or is cached on a bird.

    For BIRDFEEDER sources, dice_taken lists the dice removed from the feeder
    (one per food token gained).
    """

    effect_type: ClassVar[EffectType] = EffectType.GAIN_FOOD

    player_id: str
    food: dict[FoodType, int]
    source: FoodSource
    dice_taken: list[DieFace] = field(default_factory=list)
    destination: FoodDestination = FoodDestination.PLAYER_SUPPLY
    bird_instance_id: Optional[str] = None


@dataclass
class DiscardFoodEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.DISCARD_FOOD

    player_id: str
    food: dict[FoodType, int]


@dataclass
class CacheFoodEffect(Effect):
    """Cache food from the general supply on a bird."""

    effect_type: ClassVar[EffectType] = EffectType.CACHE_FOOD

    player_id: str
    bird_instance_id: str
    food: FoodType
    count: int = 1


@dataclass
class AllPlayersGainFoodEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.ALL_PLAYERS_GAIN_FOOD

    gains: dict[str, dict[FoodType, int]]


@dataclass
class RollDiceEffect(Effect):
    """Roll the dice outside the birdfeeder. Result: rolled."""

    effect_type: ClassVar[EffectType] = EffectType.ROLL_DICE

    player_id: str
    rolled: list[DieFace] = field(default_factory=list)


@dataclass
class RerollBirdfeederEffect(Effect):
    """Reroll a feeder whose dice all show one face. Result: dice."""

    effect_type: ClassVar[EffectType] = EffectType.REROLL_BIRDFEEDER

    player_id: str
    dice: list[DieFace] = field(default_factory=list)


@dataclass
class RefillBirdfeederEffect(Effect):
    """Roll a full feeder after it was emptied. Result: dice."""

    effect_type: ClassVar[EffectType] = EffectType.REFILL_BIRDFEEDER

    dice: list[DieFace] = field(default_factory=list)


# =============================================================================
# Eggs
# =============================================================================


@dataclass
class LayEggsEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.LAY_EGGS

    player_id: str
    placements: dict[str, int]


@dataclass
class DiscardEggsEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.DISCARD_EGGS

    player_id: str
    sources: dict[str, int]


@dataclass
class AllPlayersLayEggsEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.ALL_PLAYERS_LAY_EGGS

    placements: dict[str, dict[str, int]]


# =============================================================================
# Cards
# =============================================================================


@dataclass
class DrawCardsEffect(Effect):
    """Bird cards move into a player's hand.

    Sources are the tray (by id), the top of the deck (by count) and the
    revealed set (by id). Result: drawn_from_deck.
    """

    effect_type: ClassVar[EffectType] = EffectType.DRAW_CARDS

    player_id: str
    from_tray: list[str] = field(default_factory=list)
    from_deck: int = 0
    from_revealed: list[str] = field(default_factory=list)
    drawn_from_deck: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.from_tray) + self.from_deck + len(self.from_revealed)


@dataclass
class DiscardCardsEffect(Effect):
    """Bird cards from a hand or the revealed set go to the discard pile."""

    effect_type: ClassVar[EffectType] = EffectType.DISCARD_CARDS

    player_id: str
    card_ids: list[str]
    source: CardSource = CardSource.HAND


@dataclass
class TuckCardsEffect(Effect):
    """Bird cards are tucked under a bird. Result: tucked_from_deck."""

    effect_type: ClassVar[EffectType] = EffectType.TUCK_CARDS

    player_id: str
    bird_instance_id: str
    from_hand: list[str] = field(default_factory=list)
    from_deck: int = 0
    from_revealed: list[str] = field(default_factory=list)
    tucked_from_deck: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.from_hand) + self.from_deck + len(self.from_revealed)


@dataclass
class RevealCardsEffect(Effect):
    """Draw bird cards face up into the revealed set. Result: revealed."""

    effect_type: ClassVar[EffectType] = EffectType.REVEAL_CARDS

    player_id: str
    count: int
    revealed: list[str] = field(default_factory=list)


@dataclass
class RevealBonusCardsEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.REVEAL_BONUS_CARDS

    player_id: str
    count: int
    revealed: list[str] = field(default_factory=list)


@dataclass
class DrawBonusCardsEffect(Effect):
    """Keep revealed bonus cards and discard the rest."""

    effect_type: ClassVar[EffectType] = EffectType.DRAW_BONUS_CARDS

    player_id: str
    kept: list[str]
    discarded: list[str] = field(default_factory=list)


@dataclass
class AllPlayersDrawCardsEffect(Effect):
    """Several players draw from the deck. Result: drawn."""

    effect_type: ClassVar[EffectType] = EffectType.ALL_PLAYERS_DRAW_CARDS

    draws: dict[str, int]
    drawn: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class RefillBirdTrayEffect(Effect):
    """Fill empty tray slots. Result: added."""

    effect_type: ClassVar[EffectType] = EffectType.REFILL_BIRD_TRAY

    added: list[str] = field(default_factory=list)


# =============================================================================
# Birds
# =============================================================================


@dataclass
class PlayBirdEffect(Effect):
    """Pay for a bird from hand and place it. Result: bird_instance_id, column."""

    effect_type: ClassVar[EffectType] = EffectType.PLAY_BIRD

    player_id: str
    card_id: str
    habitat: Habitat
    food_paid: dict[FoodType, int] = field(default_factory=dict)
    eggs_paid: dict[str, int] = field(default_factory=dict)
    bird_instance_id: Optional[str] = None
    column: Optional[int] = None


@dataclass
class MoveBirdEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.MOVE_BIRD

    player_id: str
    bird_instance_id: str
    from_habitat: Habitat
    to_habitat: Habitat


# =============================================================================
# Game loop
# =============================================================================


@dataclass
class KeepStartingHandEffect(Effect):
    """Apply a starting hand choice: unkept cards and food are discarded."""

    effect_type: ClassVar[EffectType] = EffectType.KEEP_STARTING_HAND

    player_id: str
    birds: list[str]
    bonus_card: str
    food_discarded: dict[FoodType, int]


@dataclass
class BeginRoundEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.BEGIN_ROUND

    round: int
    turns: int


@dataclass
class BeginTurnEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.BEGIN_TURN

    player_id: str


@dataclass
class EndTurnEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.END_TURN

    player_id: str


@dataclass
class ForfeitPlayerEffect(Effect):
    effect_type: ClassVar[EffectType] = EffectType.FORFEIT_PLAYER

    player_id: str
    reason: str = ""
