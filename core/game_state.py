"""Game state for the Wingsim game engine.

GameState is the single source of truth for a game. Handlers and agents
read it (agents only through views); the engine is the only writer, and it
writes only while applying effects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .birdfeeder import Birdfeeder
from .board import BirdInstance
from .card_supply import BirdCardSupply
from .cards import BirdCard, BonusCard, PlayerBoardConfig
from .constants import DieFace, FoodType, FOOD_TYPES, MIN_PLAYERS, MAX_PLAYERS
from .deck import Deck
from .player import PlayerState
from .rng import RandomSource


@dataclass
class GameState:
    """The complete game state.

    Attributes:
        players: Players in seat order (clockwise).
        birdfeeder: Shared dice pool.
        bird_supply: Bird deck and face-up tray.
        bonus_deck: Bonus card deck.
        board_config: Habitat rewards and egg costs.
        round: Current round (0 before the first round starts).
        turn: Global turn counter, starting at 1.
        active_player_index: Seat of the player taking the current turn.
        end_of_turn_continuations: Deferred handler work for the current turn.
        revealed_cards: Bird cards revealed by a power and not yet resolved.
        revealed_bonus_cards: Bonus cards revealed by a power and not yet resolved.
        pink_activations: Bird instance ids whose pink power fired since
            their owner's last turn.
        game_over: Whether the game has ended.
    """

    players: list[PlayerState]
    birdfeeder: Birdfeeder
    bird_supply: BirdCardSupply
    bonus_deck: Deck[BonusCard]
    board_config: PlayerBoardConfig = field(default_factory=PlayerBoardConfig.standard)
    round: int = 0
    turn: int = 1
    active_player_index: int = 0
    end_of_turn_continuations: list[Any] = field(default_factory=list)
    revealed_cards: list[BirdCard] = field(default_factory=list)
    revealed_bonus_cards: list[BonusCard] = field(default_factory=list)
    pink_activations: set[str] = field(default_factory=set)
    game_over: bool = False

    @classmethod
    def create(
        cls,
        player_ids: list[str],
        birds: Iterable[BirdCard],
        bonus_cards: Iterable[BonusCard],
        rng: RandomSource,
        board_config: Optional[PlayerBoardConfig] = None,
        feeder_dice: Optional[list[DieFace]] = None,
    ) -> GameState:
        """Build a fresh state: decks shuffled, feeder rolled, tray filled.

        Nothing is dealt; the engine deals starting hands.

        Raises:
            ValueError: On a bad player count or duplicate player ids.
        """
        if not MIN_PLAYERS <= len(player_ids) <= MAX_PLAYERS:
            raise ValueError(
                f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {len(player_ids)}"
            )
        if len(set(player_ids)) != len(player_ids):
            raise ValueError(f"Duplicate player ids: {player_ids}")

        bird_supply = BirdCardSupply(Deck(birds, rng))
        bonus_deck: Deck[BonusCard] = Deck(bonus_cards, rng)
        birdfeeder = Birdfeeder(rng, feeder_dice)
        bird_supply.refill_tray()
        return cls(
            players=[PlayerState(player_id=pid) for pid in player_ids],
            birdfeeder=birdfeeder,
            bird_supply=bird_supply,
            bonus_deck=bonus_deck,
            board_config=board_config or PlayerBoardConfig.standard(),
        )

    # -------------------------------------------------------------------------
    # Players
    # -------------------------------------------------------------------------

    @property
    def player_ids(self) -> list[str]:
        return [player.player_id for player in self.players]

    def get_player(self, player_id: str) -> PlayerState:
        """Get a player by id.

        Raises:
            ValueError: If no such player exists.
        """
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise ValueError(f"Unknown player: {player_id}")

    @property
    def active_player(self) -> PlayerState:
        return self.players[self.active_player_index]

    def active_player_ids(self) -> list[str]:
        """Players still in the game (not forfeited), in seat order."""
        return [player.player_id for player in self.players if not player.forfeited]

    def seat_of(self, player_id: str) -> int:
        return self.player_ids.index(player_id)

    def clockwise_from(self, player_id: str, include_self: bool = True) -> list[PlayerState]:
        """Players in seat order starting at player_id (or just after it)."""
        start = self.seat_of(player_id)
        count = len(self.players)
        ordered = [self.players[(start + offset) % count] for offset in range(count)]
        return ordered if include_self else ordered[1:]

    def clockwise_order(self, player_id: str) -> list[PlayerState]:
        """Other players, clockwise, starting after player_id."""
        return self.clockwise_from(player_id, include_self=False)

    # -------------------------------------------------------------------------
    # Birds
    # -------------------------------------------------------------------------

    def find_bird(self, instance_id: str) -> Optional[BirdInstance]:
        for player in self.players:
            bird = player.board.find_bird(instance_id)
            if bird is not None:
                return bird
        return None

    def find_bird_owner(self, instance_id: str) -> Optional[PlayerState]:
        for player in self.players:
            if player.board.find_bird(instance_id) is not None:
                return player
        return None

    # -------------------------------------------------------------------------
    # Revealed cards
    # -------------------------------------------------------------------------

    def revealed_card(self, card_id: str) -> BirdCard:
        for card in self.revealed_cards:
            if card.id == card_id:
                return card
        raise ValueError(f"{card_id} is not among the revealed cards")

    def revealed_bonus_card(self, card_id: str) -> BonusCard:
        for card in self.revealed_bonus_cards:
            if card.id == card_id:
                return card
        raise ValueError(f"{card_id} is not among the revealed bonus cards")

    # -------------------------------------------------------------------------
    # Conservation helpers
    # -------------------------------------------------------------------------

    def total_bird_cards(self) -> int:
        """Untucked bird cards: piles, tray, revealed set, hands and boards."""
        in_play = sum(len(p.hand) + p.board.count_birds() for p in self.players)
        return (
            in_play
            + self.bird_supply.available
            + len(self.bird_supply.tray_cards())
            + len(self.revealed_cards)
        )

    def food_summary(self) -> dict[str, dict[FoodType, int]]:
        return {p.player_id: {food: p.food.get(food, 0) for food in FOOD_TYPES} for p in self.players}
