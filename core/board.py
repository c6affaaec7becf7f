"""Player board: three habitat rows of bird slots.

Birds always occupy the leftmost contiguous slots of a row, so the
leftmost empty column of a row is simply the number of birds in it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .cards import BirdCard
from .constants import FoodType, Habitat, NestType, PowerTrigger, HABITATS, HABITAT_SIZE


def make_bird_instance_id(player_id: str, card_id: str) -> str:
    """Bird instance ids are unique per player because bird cards are unique."""
    return f"{player_id}_{card_id}"


@dataclass
class BirdInstance:
    """A bird card placed on a player board.

    Attributes:
        instance_id: Unique id, see make_bird_instance_id.
        card: The card definition.
        eggs: Eggs on the bird (0 <= eggs <= card.egg_capacity).
        cached_food: Food tokens cached on the bird.
        tucked_cards: Number of cards tucked under the bird.
    """

    instance_id: str
    card: BirdCard
    eggs: int = 0
    cached_food: dict[FoodType, int] = field(default_factory=dict)
    tucked_cards: int = 0

    @property
    def remaining_egg_capacity(self) -> int:
        return self.card.egg_capacity - self.eggs

    @property
    def total_cached_food(self) -> int:
        return sum(self.cached_food.values())

    def lay_eggs(self, count: int) -> None:
        """Add eggs.

        Raises:
            ValueError: If the eggs would exceed the bird's capacity.
        """
        if count < 0:
            raise ValueError(f"Cannot lay a negative number of eggs ({count})")
        if self.eggs + count > self.card.egg_capacity:
            raise ValueError(
                f"{self.instance_id} holds {self.eggs}/{self.card.egg_capacity} eggs, cannot lay {count}"
            )
        self.eggs += count

    def remove_eggs(self, count: int) -> None:
        """Remove eggs.

        Raises:
            ValueError: If the bird does not hold that many eggs.
        """
        if count < 0 or count > self.eggs:
            raise ValueError(f"{self.instance_id} holds {self.eggs} eggs, cannot remove {count}")
        self.eggs -= count

    def cache_food(self, food: FoodType, count: int = 1) -> None:
        if food == FoodType.WILD:
            raise ValueError("Cannot cache wild food")
        self.cached_food[food] = self.cached_food.get(food, 0) + count

    def tuck(self, count: int) -> None:
        self.tucked_cards += count


class PlayerBoard:
    """Three habitat rows of HABITAT_SIZE slots each."""

    def __init__(self) -> None:
        self._rows: dict[Habitat, list[BirdInstance]] = {habitat: [] for habitat in HABITATS}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def birds_in_habitat(self, habitat: Habitat) -> list[BirdInstance]:
        """Birds of a row, left to right."""
        return list(self._rows[habitat])

    def all_birds(self) -> list[BirdInstance]:
        """Every bird on the board, forest then grassland then wetland."""
        return [bird for habitat in HABITATS for bird in self._rows[habitat]]

    def __iter__(self) -> Iterator[BirdInstance]:
        return iter(self.all_birds())

    def count_birds(self, habitat: Optional[Habitat] = None) -> int:
        if habitat is None:
            return sum(len(row) for row in self._rows.values())
        return len(self._rows[habitat])

    def leftmost_empty_column(self, habitat: Habitat) -> int:
        """Index of the first free slot; HABITAT_SIZE when the row is full."""
        return len(self._rows[habitat])

    def has_space(self, habitat: Habitat) -> bool:
        return len(self._rows[habitat]) < HABITAT_SIZE

    def find_bird(self, instance_id: str) -> Optional[BirdInstance]:
        for bird in self.all_birds():
            if bird.instance_id == instance_id:
                return bird
        return None

    def habitat_of(self, instance_id: str) -> Optional[Habitat]:
        for habitat, row in self._rows.items():
            if any(bird.instance_id == instance_id for bird in row):
                return habitat
        return None

    def column_of(self, instance_id: str) -> Optional[int]:
        for row in self._rows.values():
            for column, bird in enumerate(row):
                if bird.instance_id == instance_id:
                    return column
        return None

    def is_rightmost(self, instance_id: str) -> bool:
        """Check whether a bird is the last bird of its row."""
        habitat = self.habitat_of(instance_id)
        if habitat is None:
            return False
        return self._rows[habitat][-1].instance_id == instance_id

    def brown_power_birds(self, habitat: Habitat) -> list[BirdInstance]:
        """Birds with a when-activated power, in activation order (right to left)."""
        return [
            bird
            for bird in reversed(self._rows[habitat])
            if bird.card.trigger == PowerTrigger.WHEN_ACTIVATED
        ]

    def birds_with_nest_type(self, nest_type: NestType) -> list[BirdInstance]:
        return [bird for bird in self.all_birds() if bird.card.has_nest(nest_type)]

    def remaining_egg_capacities(self) -> dict[str, int]:
        """Free egg space per bird, for birds with any space left."""
        return {
            bird.instance_id: bird.remaining_egg_capacity
            for bird in self.all_birds()
            if bird.remaining_egg_capacity > 0
        }

    def eggs_on_birds(self) -> dict[str, int]:
        """Eggs per bird, for birds holding at least one egg."""
        return {bird.instance_id: bird.eggs for bird in self.all_birds() if bird.eggs > 0}

    def total_eggs(self) -> int:
        return sum(bird.eggs for bird in self.all_birds())

    def total_remaining_egg_capacity(self) -> int:
        return sum(bird.remaining_egg_capacity for bird in self.all_birds())

    # -------------------------------------------------------------------------
    # Mutation (called by the engine while applying effects)
    # -------------------------------------------------------------------------

    def place_bird(self, bird: BirdInstance, habitat: Habitat) -> int:
        """Place a bird in the leftmost empty slot of a row.

        Returns:
            The column the bird was placed in.

        Raises:
            ValueError: If the row is full or the bird is already on the board.
        """
        if not self.has_space(habitat):
            raise ValueError(f"{habitat.value} is full")
        if self.find_bird(bird.instance_id) is not None:
            raise ValueError(f"{bird.instance_id} is already on the board")
        self._rows[habitat].append(bird)
        return len(self._rows[habitat]) - 1

    def remove_bird(self, instance_id: str) -> BirdInstance:
        """Remove a bird; birds to its right shift left to stay contiguous.

        Raises:
            ValueError: If the bird is not on the board.
        """
        for row in self._rows.values():
            for column, bird in enumerate(row):
                if bird.instance_id == instance_id:
                    del row[column]
                    return bird
        raise ValueError(f"{instance_id} is not on the board")

    def __repr__(self) -> str:
        rows = ", ".join(
            f"{habitat.value}={[bird.card.id for bird in row]}" for habitat, row in self._rows.items()
        )
        return f"PlayerBoard({rows})"
