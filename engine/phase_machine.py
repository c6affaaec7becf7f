"""Phase state machine for the Wingsim game engine.

Tracks where the game loop is:
- AWAITING_STARTING_HAND: players pick their starting hands
- TURN_IN_PROGRESS: a player is taking a turn
- TURN_ENDED: a turn finished; the next turn or the end of round follows
- ROUND_ENDED: every player used their turns; the next round or the end
  of the game follows
- GAME_ENDED: terminal

The machine only enforces legal transitions and computes the next phase;
the engine changes the game state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from core.constants import Phase

if TYPE_CHECKING:
    from core.game_state import GameState
    from .config import EngineConfig


PHASE_TRANSITIONS: dict[Phase, list[Phase]] = {
    Phase.AWAITING_STARTING_HAND: [Phase.TURN_IN_PROGRESS, Phase.GAME_ENDED],
    Phase.TURN_IN_PROGRESS: [Phase.TURN_ENDED, Phase.GAME_ENDED],
    Phase.TURN_ENDED: [Phase.TURN_IN_PROGRESS, Phase.ROUND_ENDED, Phase.GAME_ENDED],
    Phase.ROUND_ENDED: [Phase.TURN_IN_PROGRESS, Phase.GAME_ENDED],
    # Terminal
    Phase.GAME_ENDED: [],
}


@dataclass
class PhaseTransitionResult:
    """Outcome of moving (or proposing to move) the machine.

    Attributes:
        success: False when the move is not allowed.
        new_phase: Phase entered or recommended; None on failure.
        reason: Why the transition failed, or why the game ended.
    """

    success: bool
    new_phase: Optional[Phase]
    reason: Optional[str] = None


class PhaseMachine:
    """State machine for the game loop phases."""

    def __init__(self, initial_phase: Phase = Phase.AWAITING_STARTING_HAND):
        self._phase = initial_phase

    @property
    def phase(self) -> Phase:
        return self._phase

    def get_valid_transitions(self) -> list[Phase]:
        return list(PHASE_TRANSITIONS[self._phase])

    def can_transition_to(self, target: Phase) -> bool:
        return target in PHASE_TRANSITIONS[self._phase]

    def transition_to(self, target: Phase) -> PhaseTransitionResult:
        """Move to target if the transition table allows it; otherwise stay put."""
        if target not in PHASE_TRANSITIONS[self._phase]:
            allowed = ", ".join(p.value for p in PHASE_TRANSITIONS[self._phase]) or "none"
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason=f"Cannot transition from {self._phase.value} to {target.value} (allowed: {allowed})",
            )
        self._phase = target
        return PhaseTransitionResult(success=True, new_phase=target)

    def is_game_over(self) -> bool:
        return self._phase == Phase.GAME_ENDED

    def is_turn_in_progress(self) -> bool:
        return self._phase == Phase.TURN_IN_PROGRESS

    # -------------------------------------------------------------------------
    # Queries on the game state
    # -------------------------------------------------------------------------

    def should_game_end_early(self, state: GameState) -> tuple[bool, Optional[str]]:
        """Check whether forfeits ended the game.

        A game with several players ends when at most one of them is left;
        a solo game ends when its only player forfeits.
        """
        remaining = len(state.active_player_ids())
        if remaining == 0:
            return True, "Every player has forfeited"
        if len(state.players) > 1 and remaining <= 1:
            return True, "Only one player remains"
        return False, None

    def round_finished(self, state: GameState) -> bool:
        """True when no player still in the game has turns left."""
        return not any(p.turns_remaining > 0 for p in state.players if not p.forfeited)

    def compute_next_phase(self, state: GameState, config: EngineConfig) -> PhaseTransitionResult:
        """Recommend the phase that follows the current one.

        Forfeits that leave too few players end the game from any phase;
        otherwise turns continue until the round is used up and rounds
        continue until config.total_rounds have been played.
        """
        current = self._phase
        if current == Phase.GAME_ENDED:
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason="The game is over",
            )

        should_end, reason = self.should_game_end_early(state)
        if should_end:
            return PhaseTransitionResult(success=True, new_phase=Phase.GAME_ENDED, reason=reason)

        if current in (Phase.AWAITING_STARTING_HAND, Phase.ROUND_ENDED):
            if current == Phase.ROUND_ENDED and state.round >= config.total_rounds:
                return PhaseTransitionResult(
                    success=True, new_phase=Phase.GAME_ENDED, reason="All rounds played"
                )
            return PhaseTransitionResult(success=True, new_phase=Phase.TURN_IN_PROGRESS)

        if current == Phase.TURN_IN_PROGRESS:
            return PhaseTransitionResult(success=True, new_phase=Phase.TURN_ENDED)

        if self.round_finished(state):
            return PhaseTransitionResult(success=True, new_phase=Phase.ROUND_ENDED)
        return PhaseTransitionResult(success=True, new_phase=Phase.TURN_IN_PROGRESS)

    def __str__(self) -> str:
        return f"PhaseMachine(phase={self._phase.value})"

    def __repr__(self) -> str:
        return f"PhaseMachine({self._phase!r})"
