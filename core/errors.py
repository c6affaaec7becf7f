"""Exception classes for the Wingsim engine.

Choice validation failures are not exceptions: validators return a
ValidationError value and the decision broker re-prompts. Everything here
aborts the current game (or, for AgentForfeitError, removes one player).
"""

from __future__ import annotations

from typing import Any


class WingsimError(Exception):
    """Base exception for all Wingsim engine errors."""


class ProtocolViolationError(WingsimError):
    """Raised when an agent or handler breaks the prompt/choice protocol."""

    def __init__(self, message: str, prompt_id: str | None = None) -> None:
        self.prompt_id = prompt_id
        super().__init__(message)


class AgentForfeitError(WingsimError):
    """Raised when an agent keeps answering a prompt with invalid choices."""

    def __init__(self, player_id: str, prompt_id: str, attempts: int, last_error: Any = None) -> None:
        self.player_id = player_id
        self.prompt_id = prompt_id
        self.attempts = attempts
        self.last_error = last_error
        detail = f": {last_error.code}" if last_error is not None else ""
        super().__init__(
            f"Player {player_id} forfeited after {attempts} invalid answers to {prompt_id}{detail}"
        )


class ConfigurationError(WingsimError):
    """Raised when content or configuration is inconsistent."""


class DeckExhaustedError(ConfigurationError):
    """Raised when a deck cannot supply the requested number of cards."""

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot draw {requested} cards: only {available} left in deck and discard pile"
        )


class RandomSourceExhaustedError(ConfigurationError):
    """Raised when a fixed-sequence random source runs out of values."""


class UnknownHandlerError(ConfigurationError):
    """Raised when a card refers to a handler id that is not registered."""

    def __init__(self, handler_id: str) -> None:
        self.handler_id = handler_id
        super().__init__(f"Unknown power handler: {handler_id}")


class EffectApplicationError(WingsimError):
    """Raised when applying an effect would break a state invariant."""

    def __init__(self, effect_type: str, message: str) -> None:
        self.effect_type = effect_type
        super().__init__(f"Cannot apply {effect_type}: {message}")


__all__ = [
    "AgentForfeitError",
    "ConfigurationError",
    "DeckExhaustedError",
    "EffectApplicationError",
    "ProtocolViolationError",
    "RandomSourceExhaustedError",
    "UnknownHandlerError",
    "WingsimError",
]
