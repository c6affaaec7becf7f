"""Agent registry.

Maps agent type names (used by the simulator and its CLI) to factories.
The registry is an explicit value; build_default_agent_registry() returns
one with the built-in agents.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from core.errors import ConfigurationError

from .base import PlayerAgent
from .random_agent import RandomAgent

AgentFactory = Callable[[str, int], PlayerAgent]


@dataclass(frozen=True)
class AgentRegistration:
    """A registered agent type.

    Attributes:
        name: Type name, as given on the command line.
        description: One-line description for listings.
        factory: Builds an agent from a player id and a seed.
    """

    name: str
    description: str
    factory: AgentFactory


class AgentRegistry:
    """Name -> factory lookup for agent types."""

    def __init__(self) -> None:
        self._agents: dict[str, AgentRegistration] = {}

    def register(self, name: str, description: str, factory: AgentFactory) -> None:
        """Register an agent type.

        Raises:
            ConfigurationError: If the name is already registered.
        """
        if name in self._agents:
            raise ConfigurationError(f"Agent type already registered: {name}")
        self._agents[name] = AgentRegistration(name=name, description=description, factory=factory)

    def create(self, name: str, player_id: str, seed: int) -> PlayerAgent:
        """Build an agent of the named type.

        Raises:
            ConfigurationError: If the type is not registered.
        """
        registration = self._agents.get(name)
        if registration is None:
            raise ConfigurationError(
                f"Unknown agent type {name!r}. Available: {', '.join(self.names()) or 'none'}"
            )
        return registration.factory(player_id, seed)

    def list(self) -> list[AgentRegistration]:
        return list(self._agents.values())

    def names(self) -> list[str]:
        return list(self._agents)

    def has(self, name: str) -> bool:
        return name in self._agents

    def __len__(self) -> int:
        return len(self._agents)


def build_default_agent_registry() -> AgentRegistry:
    registry = AgentRegistry()
    registry.register(
        "random",
        "Constraint-aware random agent with its own seeded random source",
        lambda player_id, seed: RandomAgent(player_id, seed),
    )
    return registry
