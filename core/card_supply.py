"""Bird card supply: the bird deck plus the face-up tray."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from .cards import BirdCard
from .constants import TRAY_SIZE
from .deck import Deck


class BirdCardSupply:
    """Bird deck with a face-up tray of up to TRAY_SIZE cards.

    Tray refills only happen when the engine applies a refill effect, so
    between a draw and the refill the tray may hold fewer cards.
    """

    def __init__(self, deck: Deck[BirdCard], tray: Iterable[BirdCard] = ()):
        self.deck = deck
        self._tray: list[BirdCard] = list(tray)
        if len(self._tray) > TRAY_SIZE:
            raise ValueError(f"Tray holds at most {TRAY_SIZE} cards")

    @property
    def available(self) -> int:
        """Cards that can still be drawn from the deck (including discards)."""
        return self.deck.available

    def tray_cards(self) -> list[BirdCard]:
        return list(self._tray)

    def tray_ids(self) -> list[str]:
        return [card.id for card in self._tray]

    def find_in_tray(self, card_id: str) -> Optional[BirdCard]:
        for card in self._tray:
            if card.id == card_id:
                return card
        return None

    def take_from_tray(self, card_id: str) -> BirdCard:
        """Take a face-up card.

        Raises:
            ValueError: If the card is not in the tray.
        """
        card = self.find_in_tray(card_id)
        if card is None:
            raise ValueError(f"{card_id} is not in the bird tray")
        self._tray.remove(card)
        return card

    def draw_from_deck(self, n: int) -> list[BirdCard]:
        return self.deck.draw(n)

    def refill_tray(self) -> list[BirdCard]:
        """Fill empty tray slots from the deck, as far as cards allow.

        Returns:
            The cards added to the tray.
        """
        missing = min(TRAY_SIZE - len(self._tray), self.deck.available)
        added = self.deck.draw(missing) if missing > 0 else []
        self._tray.extend(added)
        return added

    def discard(self, cards: Iterable[BirdCard]) -> None:
        self.deck.discard(cards)

    def __repr__(self) -> str:
        return f"BirdCardSupply(tray={self.tray_ids()}, deck={self.deck!r})"
