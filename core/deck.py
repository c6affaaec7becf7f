"""Generic draw pile with a discard pile.

Cards are never created or destroyed: a card is in the draw pile, in the
discard pile, or held somewhere else in the game.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, TypeVar

from .errors import DeckExhaustedError
from .rng import RandomSource

T = TypeVar("T")


class Deck(Generic[T]):
    """A shuffled draw pile plus a discard pile.

    The top of the draw pile is the front of the internal list.
    """

    def __init__(self, items: Iterable[T], rng: RandomSource, shuffle: bool = True):
        self._rng = rng
        self._cards: list[T] = rng.shuffle(list(items)) if shuffle else list(items)
        self._discards: list[T] = []

    @property
    def deck_size(self) -> int:
        return len(self._cards)

    @property
    def discard_size(self) -> int:
        return len(self._discards)

    @property
    def available(self) -> int:
        """Cards that can still be drawn, counting the discard pile."""
        return len(self._cards) + len(self._discards)

    def draw(self, n: int) -> list[T]:
        """Draw n cards from the top.

        When the draw pile holds fewer than n cards, the whole discard pile
        is shuffled back in first.

        Raises:
            ValueError: If n is negative.
            DeckExhaustedError: If draw pile and discard pile together hold
                fewer than n cards. Nothing is moved in that case.
        """
        if n < 0:
            raise ValueError(f"Cannot draw a negative number of cards ({n})")
        if self.available < n:
            raise DeckExhaustedError(n, self.available)
        if len(self._cards) < n:
            self._cards.extend(self._rng.shuffle(self._discards))
            self._discards = []
        drawn = self._cards[:n]
        del self._cards[:n]
        return drawn

    def discard(self, items: Iterable[T]) -> None:
        """Put cards on the discard pile."""
        self._discards.extend(items)

    def peek(self, n: int) -> list[T]:
        """Look at the top n cards of the draw pile without drawing them."""
        return list(self._cards[:n])

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck(deck_size={self.deck_size}, discard_size={self.discard_size})"
