"""Game engine for the Wingsim card game.

This package provides the game logic including:
- Effects and events, the vocabulary handlers speak
- Prompts, choices and their validators
- Bird power and turn action handlers
- Phase state machine for the game loop
- Game engine coordinating agents, handlers and scoring
"""

from core.errors import (
    AgentForfeitError,
    ConfigurationError,
    EffectApplicationError,
    ProtocolViolationError,
    UnknownHandlerError,
    WingsimError,
)

from .config import EngineConfig

from .phase_machine import (
    PhaseMachine,
    PhaseTransitionResult,
    PHASE_TRANSITIONS,
)

from .registry import (
    HandlerRegistry,
    PinkTrigger,
    build_default_registry,
)

from .observer import EventLog, GameObserver

from .scoring import ScoreBreakdown, determine_winner, score_game, score_player

from .game_engine import (
    GameEngine,
    GameResult,
)

__all__ = [
    # Errors
    "AgentForfeitError",
    "ConfigurationError",
    "EffectApplicationError",
    "ProtocolViolationError",
    "UnknownHandlerError",
    "WingsimError",
    # Configuration
    "EngineConfig",
    # Phase machine
    "PhaseMachine",
    "PhaseTransitionResult",
    "PHASE_TRANSITIONS",
    # Handlers
    "HandlerRegistry",
    "PinkTrigger",
    "build_default_registry",
    # Observers
    "EventLog",
    "GameObserver",
    # Scoring
    "ScoreBreakdown",
    "determine_winner",
    "score_game",
    "score_player",
    # Game engine
    "GameEngine",
    "GameResult",
]
