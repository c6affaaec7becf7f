"""Engine configuration.

Defaults come from core.constants; tests and the simulator override single
fields with dataclasses.replace or keyword arguments.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import (
    INITIAL_BIRDS_DEALT,
    INITIAL_BONUS_CARDS_DEALT,
    MAX_CHAIN_DEPTH,
    MAX_CHOICE_ATTEMPTS,
    MAX_REROLLS_PER_SELECTION,
    TURNS_BY_ROUND,
)


@dataclass(frozen=True)
class EngineConfig:
    """Rule and limit settings for one engine instance.

    Attributes:
        max_choice_attempts: Invalid answers allowed per prompt before forfeit.
        max_chain_depth: Deepest nested power execution before powers skip.
        max_rerolls_per_selection: Rerolls allowed per food selection step.
        turns_by_round: Turns each player gets in each round.
        initial_birds_dealt: Bird cards dealt to each player at setup.
        initial_bonus_cards_dealt: Bonus cards dealt to each player at setup.
    """

    max_choice_attempts: int = MAX_CHOICE_ATTEMPTS
    max_chain_depth: int = MAX_CHAIN_DEPTH
    max_rerolls_per_selection: int = MAX_REROLLS_PER_SELECTION
    turns_by_round: tuple[int, ...] = TURNS_BY_ROUND
    initial_birds_dealt: int = INITIAL_BIRDS_DEALT
    initial_bonus_cards_dealt: int = INITIAL_BONUS_CARDS_DEALT

    def __post_init__(self) -> None:
        if self.max_choice_attempts < 1:
            raise ValueError("max_choice_attempts must be at least 1")
        if self.max_chain_depth < 0:
            raise ValueError("max_chain_depth cannot be negative")
        if not self.turns_by_round or any(t < 1 for t in self.turns_by_round):
            raise ValueError("turns_by_round needs at least one round of at least one turn")

    @property
    def total_rounds(self) -> int:
        return len(self.turns_by_round)

    @classmethod
    def default(cls) -> EngineConfig:
        return cls()
