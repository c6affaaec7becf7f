"""Deterministic random sources.

Every random draw in a game (dice rolls, deck shuffles) goes through one
RandomSource owned by the engine, so a seed fully determines the game.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TypeVar

from .errors import RandomSourceExhaustedError

T = TypeVar("T")


class RandomSource(ABC):
    """Abstract source of randomness used by the engine."""

    @abstractmethod
    def randint(self, low: int, high: int) -> int:
        """Return an integer in [low, high)."""

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy of items (Fisher-Yates driven by randint)."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.randint(0, i + 1)
            result[i], result[j] = result[j], result[i]
        return result

    def choice(self, seq: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence")
        return seq[self.randint(0, len(seq))]

    def sample(self, seq: Sequence[T], k: int) -> list[T]:
        """Pick k distinct positions of seq, in draw order."""
        if k > len(seq):
            raise ValueError(f"Sample size {k} larger than population {len(seq)}")
        return self.shuffle(seq)[:k]


class SeededRandom(RandomSource):
    """Random source backed by a private ``random.Random`` instance."""

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = random.Random(seed)

    def randint(self, low: int, high: int) -> int:
        if high <= low:
            raise ValueError(f"Empty range [{low}, {high})")
        return self._rng.randrange(low, high)

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed})"


class PresetRandom(RandomSource):
    """Fixed-sequence random source for tests.

    ``randint`` returns the preset values in order; shuffling is the identity
    so deck and tray order is exactly the order the test built.

    Args:
        values: Values returned by successive randint calls.
        cycle: Start over at the first value instead of raising when exhausted.
    """

    def __init__(self, values: Sequence[int] = (), cycle: bool = False):
        self._values = list(values)
        self._index = 0
        self._cycle = cycle

    def randint(self, low: int, high: int) -> int:
        if self._index >= len(self._values):
            if not self._cycle or not self._values:
                raise RandomSourceExhaustedError(
                    f"PresetRandom exhausted after {self._index} values"
                )
            self._index = 0
        value = self._values[self._index]
        self._index += 1
        if not low <= value < high:
            raise ValueError(f"Preset value {value} outside range [{low}, {high})")
        return value

    def shuffle(self, items: Sequence[T]) -> list[T]:
        return list(items)

    @property
    def remaining(self) -> int:
        """Number of preset values not yet consumed (ignores cycling)."""
        return len(self._values) - self._index
