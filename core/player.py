"""Player model for the Wingsim game engine.

A player owns a board, a hand of bird cards, bonus cards and a food supply.
Only the engine mutates players, while applying effects.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from .board import PlayerBoard
from .cards import BirdCard, BonusCard, PlayerBoardConfig
from .constants import FoodCostMode, FoodType, Habitat, FOOD_TYPES, HABITAT_SIZE


def empty_food_supply() -> dict[FoodType, int]:
    return {food: 0 for food in FOOD_TYPES}


def payment_error(card: BirdCard, payment: dict[FoodType, int]) -> Optional[str]:
    """Check that a food payment matches a bird's cost exactly.

    Does not check that the payer holds the food.

    Returns:
        None when the payment is valid, otherwise a reason.
    """
    paid = {food: count for food, count in payment.items() if count}
    if any(count < 0 for count in paid.values()):
        return "Food amounts cannot be negative"
    if FoodType.WILD in paid:
        return "Cannot pay with wild food"
    total = sum(paid.values())

    if card.food_cost_mode == FoodCostMode.NONE or not card.food_cost:
        return None if total == 0 else f"{card.name} costs no food"

    if card.food_cost_mode == FoodCostMode.OR:
        if total != 1:
            return f"{card.name} costs exactly one food"
        (food,) = paid
        if food in card.food_cost or FoodType.WILD in card.food_cost:
            return None
        return f"{food.value} is not part of the cost of {card.name}"

    needed = Counter(card.food_cost)
    wild = needed.pop(FoodType.WILD, 0)
    if total != sum(needed.values()) + wild:
        return f"{card.name} costs {len(card.food_cost)} food, got {total}"
    for food, count in needed.items():
        if paid.get(food, 0) < count:
            return f"{card.name} needs {count} {food.value}"
    return None


@dataclass
class PlayerState:
    """Represents a player in the game.

    Attributes:
        player_id: Unique identifier for this player.
        board: The player's habitat board.
        hand: Bird cards in hand, in the order they were gained.
        bonus_cards: Bonus cards kept by the player.
        food: Food tokens in the player's supply.
        turns_remaining: Turns left in the current round.
        forfeited: Whether the player has been removed from the game.
    """

    player_id: str
    board: PlayerBoard = field(default_factory=PlayerBoard)
    hand: list[BirdCard] = field(default_factory=list)
    bonus_cards: list[BonusCard] = field(default_factory=list)
    food: dict[FoodType, int] = field(default_factory=empty_food_supply)
    turns_remaining: int = 0
    forfeited: bool = False

    # -------------------------------------------------------------------------
    # Hand
    # -------------------------------------------------------------------------

    @property
    def hand_ids(self) -> list[str]:
        return [card.id for card in self.hand]

    def find_in_hand(self, card_id: str) -> Optional[BirdCard]:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def remove_from_hand(self, card_ids: list[str]) -> list[BirdCard]:
        """Remove cards from the hand and return them.

        Raises:
            ValueError: If a card is not in the hand. The hand is left untouched.
        """
        hand = list(self.hand)
        removed = []
        for card_id in card_ids:
            card = next((c for c in hand if c.id == card_id), None)
            if card is None:
                raise ValueError(f"{card_id} is not in {self.player_id}'s hand")
            hand.remove(card)
            removed.append(card)
        self.hand = hand
        return removed

    # -------------------------------------------------------------------------
    # Food
    # -------------------------------------------------------------------------

    def total_food(self) -> int:
        return sum(self.food.values())

    def has_food(self, payment: dict[FoodType, int]) -> bool:
        """Check the player holds at least the given amounts."""
        return all(self.food.get(food, 0) >= count for food, count in payment.items() if count)

    def gain_food(self, food: FoodType, count: int = 1) -> None:
        if food == FoodType.WILD:
            raise ValueError("Cannot gain wild food")
        self.food[food] = self.food.get(food, 0) + count

    def spend_food(self, payment: dict[FoodType, int]) -> None:
        """Remove food from the supply.

        Raises:
            ValueError: If the player does not hold the food.
        """
        if not self.has_food(payment):
            raise ValueError(f"{self.player_id} cannot pay {payment}")
        for food, count in payment.items():
            if count:
                self.food[food] -= count

    def can_afford(self, card: BirdCard) -> bool:
        """Check whether the player's food covers a bird's food cost."""
        if card.food_cost_mode == FoodCostMode.NONE or not card.food_cost:
            return True
        if card.food_cost_mode == FoodCostMode.OR:
            if FoodType.WILD in card.food_cost:
                return self.total_food() > 0
            return any(self.food.get(food, 0) > 0 for food in card.food_cost)
        needed = Counter(card.food_cost)
        wild = needed.pop(FoodType.WILD, 0)
        if any(self.food.get(food, 0) < count for food, count in needed.items()):
            return False
        return self.total_food() - sum(needed.values()) >= wild

    # -------------------------------------------------------------------------
    # Playing birds
    # -------------------------------------------------------------------------

    def total_eggs(self) -> int:
        return self.board.total_eggs()

    def playable_habitats(self, card: BirdCard, board_config: PlayerBoardConfig) -> list[Habitat]:
        """Habitats the card could be played into, given space and egg cost."""
        eggs = self.board.total_eggs()
        habitats = []
        for habitat in card.habitats:
            column = self.board.leftmost_empty_column(habitat)
            if column < HABITAT_SIZE and eggs >= board_config.egg_cost(column):
                habitats.append(habitat)
        return habitats

    def eligible_birds_to_play(
        self,
        board_config: PlayerBoardConfig,
        habitat: Optional[Habitat] = None,
    ) -> list[BirdCard]:
        """Birds in hand the player can afford and place.

        Args:
            board_config: Board used for egg costs.
            habitat: Restrict to birds playable into this habitat.
        """
        eligible = []
        for card in self.hand:
            if not self.can_afford(card):
                continue
            habitats = self.playable_habitats(card, board_config)
            if habitat is not None:
                habitats = [h for h in habitats if h == habitat]
            if habitats:
                eligible.append(card)
        return eligible

    def can_play_any_bird(self, board_config: PlayerBoardConfig) -> bool:
        return bool(self.eligible_birds_to_play(board_config))
