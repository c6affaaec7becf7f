"""Player agents for the Wingsim engine.

This package provides:
- PlayerAgent: the interface the engine talks to
- RandomAgent: valid random choices, for simulations
- ScriptedAgent: prepared choices, for scenario tests
- AgentRegistry: agent types by name, for the simulator
"""

from .base import PlayerAgent
from .random_agent import RandomAgent
from .scripted_agent import ScriptedAgent, ScriptExhaustedError, ScriptMismatchError, ScriptStep
from .registry import AgentFactory, AgentRegistration, AgentRegistry, build_default_agent_registry

__all__ = [
    "PlayerAgent",
    "RandomAgent",
    "ScriptedAgent",
    "ScriptExhaustedError",
    "ScriptMismatchError",
    "ScriptStep",
    "AgentFactory",
    "AgentRegistration",
    "AgentRegistry",
    "build_default_agent_registry",
]
