"""Batch simulation of complete games."""

from .coverage import HandlerCoverage, HandlerCoverageTracker
from .simulator import (
    AGENT_SEED_MULTIPLIER,
    GameRecord,
    SimulationSummary,
    Simulator,
    SimulatorConfig,
    agent_seed,
    player_id_for,
)

__all__ = [
    "AGENT_SEED_MULTIPLIER",
    "GameRecord",
    "HandlerCoverage",
    "HandlerCoverageTracker",
    "SimulationSummary",
    "Simulator",
    "SimulatorConfig",
    "agent_seed",
    "player_id_for",
]
