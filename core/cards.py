"""Immutable card and board definitions.

These are loaded once from content (see data.loader) and shared by every
game. Mutable per-game state (eggs, cached food, tucked cards) lives on
BirdInstance in core.board.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .constants import (
    BonusScoringType,
    FoodCostMode,
    FoodType,
    Habitat,
    NestType,
    PowerTrigger,
    Resource,
    HABITAT_SIZE,
)


@dataclass(frozen=True)
class PowerSpec:
    """A bird power: which handler runs it, when, and with what parameters.

    Attributes:
        handler_id: Key into the handler registry.
        trigger: White (when played), brown (when activated) or pink.
        params: Handler-specific parameters from content.
        text: Card text shown to agents.
    """

    handler_id: str
    trigger: PowerTrigger
    params: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    text: str = ""

    def param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)


@dataclass(frozen=True)
class BirdCard:
    """A bird card definition.

    Attributes:
        id: Stable content id.
        name: Display name.
        habitats: Habitats the bird may be played in.
        power: The bird's power, or None for vanilla birds.
        victory_points: Points scored at game end.
        nest_type: Nest shape.
        egg_capacity: Maximum eggs the bird can hold.
        food_cost: Food tokens in the cost (may contain WILD and repeats).
        food_cost_mode: AND (pay all), OR (pay any one) or NONE (free).
        wingspan_cm: Wingspan, used by predator powers.
        bonus_cards: Ids of bonus cards this bird counts toward.
    """

    id: str
    name: str
    habitats: tuple[Habitat, ...]
    power: Optional[PowerSpec]
    victory_points: int
    nest_type: NestType
    egg_capacity: int
    food_cost: tuple[FoodType, ...]
    food_cost_mode: FoodCostMode
    wingspan_cm: int
    bonus_cards: tuple[str, ...] = ()

    @property
    def trigger(self) -> Optional[PowerTrigger]:
        return self.power.trigger if self.power else None

    def has_nest(self, nest_type: NestType) -> bool:
        """Check the nest, counting a WILD nest as any nest type."""
        return self.nest_type == nest_type or self.nest_type == NestType.WILD

    def can_live_in(self, habitat: Habitat) -> bool:
        return habitat in self.habitats


@dataclass(frozen=True)
class BonusScoringTier:
    """Points awarded when at least min_count matches are reached."""

    min_count: int
    points: int


@dataclass(frozen=True)
class BonusCard:
    """A bonus card definition.

    TIERED cards score the highest tier reached; PER_BIRD cards score
    points_per_bird for each match.
    """

    id: str
    name: str
    condition: str
    scoring_type: BonusScoringType
    tiers: tuple[BonusScoringTier, ...] = ()
    points_per_bird: int = 0

    def score(self, count: int) -> int:
        """Points for a given number of matches."""
        if self.scoring_type == BonusScoringType.PER_BIRD:
            return count * self.points_per_bird
        reached = [tier.points for tier in self.tiers if count >= tier.min_count]
        return max(reached, default=0)


# =============================================================================
# Player board
# =============================================================================


@dataclass(frozen=True)
class BonusTrade:
    """Optional trade on a habitat column: pay one resource for extra reward."""

    pay: Resource
    gain: int = 1


@dataclass(frozen=True)
class HabitatRewards:
    """Rewards of one habitat row, indexed by leftmost empty column (0-5).

    Attributes:
        base: Reward amount per column; index 5 applies when the row is full.
        bonus: Optional trade per column (None where the column has none).
    """

    base: tuple[int, ...]
    bonus: tuple[Optional[BonusTrade], ...]

    def __post_init__(self) -> None:
        if len(self.base) != HABITAT_SIZE + 1 or len(self.bonus) != HABITAT_SIZE + 1:
            raise ValueError(f"Habitat rewards need {HABITAT_SIZE + 1} columns")

    def reward_at(self, column: int) -> int:
        return self.base[column]

    def bonus_at(self, column: int) -> Optional[BonusTrade]:
        return self.bonus[column]


@dataclass(frozen=True)
class PlayerBoardConfig:
    """Habitat rewards and bird egg costs of the player board.

    Attributes:
        forest: Food rewards (gain food action).
        grassland: Egg rewards (lay eggs action).
        wetland: Card rewards (draw cards action).
        play_bird_costs: Eggs paid to play a bird into each column.
    """

    forest: HabitatRewards
    grassland: HabitatRewards
    wetland: HabitatRewards
    play_bird_costs: tuple[int, ...]

    def rewards_for(self, habitat: Habitat) -> HabitatRewards:
        return {
            Habitat.FOREST: self.forest,
            Habitat.GRASSLAND: self.grassland,
            Habitat.WETLAND: self.wetland,
        }[habitat]

    def egg_cost(self, column: int) -> int:
        """Eggs required to play a bird into column (0-indexed)."""
        return self.play_bird_costs[column]

    @classmethod
    def standard(cls) -> PlayerBoardConfig:
        """The printed base-game player board."""

        def row(base: tuple[int, ...], pay: Resource) -> HabitatRewards:
            trade = BonusTrade(pay=pay)
            return HabitatRewards(
                base=base,
                bonus=(None, trade, None, trade, None, trade),
            )

        return cls(
            forest=row((1, 1, 2, 2, 3, 3), Resource.CARD),
            grassland=row((2, 2, 3, 3, 4, 4), Resource.FOOD),
            wetland=row((1, 1, 2, 2, 3, 3), Resource.EGG),
            play_bird_costs=(0, 1, 1, 2, 2),
        )
