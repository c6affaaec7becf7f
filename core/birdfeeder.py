"""Birdfeeder dice pool.

The feeder holds at most FEEDER_CAPACITY dice. Taking a die never rerolls
anything; the feeder is only rolled again when it is empty (refill) or when
every remaining die shows the same face and the player opts to reroll.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from .constants import DieFace, FoodType, DIE_FACES, DIE_FACE_FOODS, FEEDER_CAPACITY
from .rng import RandomSource


def die_provides(face: DieFace, food: FoodType) -> bool:
    """Check whether a die face can be taken as the given food."""
    return food in DIE_FACE_FOODS[face]


class Birdfeeder:
    """Dice pool with deterministic rolls.

    Args:
        rng: Random source used for every roll.
        dice: Explicit starting faces (for tests). Rolled when omitted.
    """

    def __init__(self, rng: RandomSource, dice: Iterable[DieFace] | None = None):
        self._rng = rng
        if dice is None:
            self._dice = self._roll(FEEDER_CAPACITY)
        else:
            self._dice = list(dice)
            if len(self._dice) > FEEDER_CAPACITY:
                raise ValueError(
                    f"Birdfeeder holds at most {FEEDER_CAPACITY} dice, got {len(self._dice)}"
                )

    def _roll(self, count: int) -> list[DieFace]:
        return [DIE_FACES[self._rng.randint(0, len(DIE_FACES))] for _ in range(count)]

    @property
    def dice(self) -> list[DieFace]:
        """Faces currently in the feeder, in roll order."""
        return list(self._dice)

    def __len__(self) -> int:
        return len(self._dice)

    def is_empty(self) -> bool:
        return not self._dice

    def available_dice(self) -> dict[DieFace, int]:
        """Count of dice in the feeder per face (faces with no dice omitted)."""
        counts = Counter(self._dice)
        return {face: counts[face] for face in DIE_FACES if counts[face]}

    def count_face(self, face: DieFace) -> int:
        return self._dice.count(face)

    def count_providing(self, food: FoodType) -> int:
        """Count dice that can be taken as the given food."""
        return sum(1 for face in self._dice if die_provides(face, food))

    def take_die(self, face: DieFace) -> None:
        """Remove one die showing face.

        Raises:
            ValueError: If no die in the feeder shows that face.
        """
        if face not in self._dice:
            raise ValueError(f"No {face.value} die in the birdfeeder")
        self._dice.remove(face)

    def can_reroll(self) -> bool:
        """True when at least one die remains and all show the same face."""
        return bool(self._dice) and len(set(self._dice)) == 1

    def reroll_all(self) -> list[DieFace]:
        """Reroll a feeder whose dice all show one face, back up to capacity.

        Raises:
            ValueError: If the feeder does not qualify for a reroll.
        """
        if not self.can_reroll():
            raise ValueError("Birdfeeder can only be rerolled when all dice show the same face")
        self._dice = self._roll(FEEDER_CAPACITY)
        return self.dice

    def refill(self) -> list[DieFace]:
        """Roll a full set of dice into an empty feeder.

        Raises:
            ValueError: If the feeder still holds dice.
        """
        if self._dice:
            raise ValueError(f"Birdfeeder still holds {len(self._dice)} dice")
        self._dice = self._roll(FEEDER_CAPACITY)
        return self.dice

    def roll_outside(self) -> list[DieFace]:
        """Roll the dice that are not in the feeder without adding them."""
        return self._roll(FEEDER_CAPACITY - len(self._dice))

    def __repr__(self) -> str:
        return f"Birdfeeder({[face.value for face in self._dice]})"
