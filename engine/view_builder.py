"""Builds the read-only view of the game handed to agents with each prompt."""

from __future__ import annotations

from core.board import BirdInstance, PlayerBoard
from core.constants import Habitat, HABITATS
from core.game_state import GameState

from .prompts import BirdInstanceView, OpponentView, PlayerView


def _bird_view(bird: BirdInstance) -> BirdInstanceView:
    return BirdInstanceView(
        instance_id=bird.instance_id,
        card=bird.card,
        eggs=bird.eggs,
        cached_food=dict(bird.cached_food),
        tucked_cards=bird.tucked_cards,
    )


def _board_view(board: PlayerBoard) -> dict[Habitat, tuple[BirdInstanceView, ...]]:
    return {
        habitat: tuple(_bird_view(bird) for bird in board.birds_in_habitat(habitat))
        for habitat in HABITATS
    }


def build_player_view(state: GameState, player_id: str) -> PlayerView:
    """Snapshot of what player_id can see.

    Opponents' hands and unkept bonus cards are hidden; everything on the
    table is visible.
    """
    player = state.get_player(player_id)
    opponents = tuple(
        OpponentView(
            player_id=other.player_id,
            hand_size=len(other.hand),
            bonus_card_count=len(other.bonus_cards),
            food=dict(other.food),
            board=_board_view(other.board),
            turns_remaining=other.turns_remaining,
            forfeited=other.forfeited,
        )
        for other in state.clockwise_order(player_id)
    )
    return PlayerView(
        player_id=player_id,
        hand=tuple(player.hand),
        bonus_cards=tuple(player.bonus_cards),
        food=dict(player.food),
        board=_board_view(player.board),
        turns_remaining=player.turns_remaining,
        birdfeeder=state.birdfeeder.available_dice(),
        bird_tray=tuple(state.bird_supply.tray_cards()),
        deck_size=state.bird_supply.deck.deck_size,
        round=state.round,
        opponents=opponents,
    )
