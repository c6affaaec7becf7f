"""End-of-game scoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from core.cards import BonusCard
from core.constants import HABITATS
from core.game_state import GameState
from core.player import PlayerState


def _birds_with_min_eggs(minimum: int) -> Callable[[PlayerState], int]:
    def count(player: PlayerState) -> int:
        return sum(1 for bird in player.board if bird.eggs >= minimum)

    return count


def _smallest_habitat(player: PlayerState) -> int:
    return min(player.board.count_birds(habitat) for habitat in HABITATS)


# Bonus cards whose matches depend on the end-of-game position rather than
# on the bonus ids printed on bird cards.
RUNTIME_BONUS_CONDITIONS: dict[str, Callable[[PlayerState], int]] = {
    "breeding_manager": _birds_with_min_eggs(4),
    "oologist": _birds_with_min_eggs(1),
    "visionary_leader": lambda player: len(player.hand),
    "ecologist": _smallest_habitat,
}


@dataclass
class ScoreBreakdown:
    """A player's final score by category."""

    bird_points: int = 0
    eggs: int = 0
    cached_food: int = 0
    tucked_cards: int = 0
    bonus_cards: int = 0

    @property
    def total(self) -> int:
        return self.bird_points + self.eggs + self.cached_food + self.tucked_cards + self.bonus_cards


def bonus_matches(player: PlayerState, bonus: BonusCard) -> int:
    """Number of matches a player has for a bonus card."""
    condition = RUNTIME_BONUS_CONDITIONS.get(bonus.id)
    if condition is not None:
        return condition(player)
    return sum(1 for bird in player.board if bonus.id in bird.card.bonus_cards)


def score_player(player: PlayerState) -> ScoreBreakdown:
    breakdown = ScoreBreakdown()
    for bird in player.board:
        breakdown.bird_points += bird.card.victory_points
        breakdown.eggs += bird.eggs
        breakdown.cached_food += bird.total_cached_food
        breakdown.tucked_cards += bird.tucked_cards
    breakdown.bonus_cards = sum(bonus.score(bonus_matches(player, bonus)) for bonus in player.bonus_cards)
    return breakdown


def score_game(state: GameState) -> dict[str, ScoreBreakdown]:
    return {player.player_id: score_player(player) for player in state.players}


def determine_winner(state: GameState, scores: dict[str, int]) -> Optional[str]:
    """Highest score among players still in the game; the earlier seat wins ties.

    Returns None when every player forfeited.
    """
    winner = None
    for player in state.players:
        if player.forfeited:
            continue
        if winner is None or scores[player.player_id] > scores[winner]:
            winner = player.player_id
    return winner
