"""Player agent interface.

Agents receive prompts from the engine and return decisions. The engine
only ever awaits one prompt at a time, so agents need no locking.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from engine.prompts import (
    Choice,
    Prompt,
    StartingHandChoice,
    StartingHandPrompt,
    TurnActionChoice,
    TurnActionPrompt,
)


class PlayerAgent(ABC):
    """Abstract base class for anything that plays a seat.

    Implementations answer with the Choice type matching the prompt's kind
    and echo the prompt's id.

    Attributes:
        player_id: The seat this agent plays.
    """

    def __init__(self, player_id: str):
        self.player_id = player_id

    @abstractmethod
    async def choose_starting_hand(self, prompt: StartingHandPrompt) -> StartingHandChoice:
        """Choose which dealt birds and bonus card to keep."""
        pass

    @abstractmethod
    async def choose_turn_action(self, prompt: TurnActionPrompt) -> TurnActionChoice:
        """Choose one of the four turn actions."""
        pass

    @abstractmethod
    async def choose_option(self, prompt: Prompt) -> Choice:
        """Answer any other prompt (food, eggs, cards, birds, players, habitats)."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.player_id!r})"
