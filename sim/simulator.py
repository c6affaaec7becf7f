"""Batch game simulator.

Plays many complete games with registered agent types and summarizes the
results. Every game is reproducible from its seed: the engine is seeded
with the game seed and each agent with a seed derived from the game seed
and its seat.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from agents.registry import AgentRegistry, build_default_agent_registry
from core.constants import MAX_PLAYERS, MIN_PLAYERS
from core.errors import ConfigurationError
from core.logging_config import get_logger
from data.loader import CardRegistry, load_default_content
from engine.config import EngineConfig
from engine.game_engine import GameEngine, GameResult
from engine.registry import HandlerRegistry, build_default_registry

from .coverage import HandlerCoverageTracker

logger = get_logger(__name__)

AGENT_SEED_MULTIPLIER = 0x9E3779B9
SEED_MODULUS = 2**32


def agent_seed(game_seed: int, seat: int) -> int:
    """Seed for the agent in a seat, derived from the game seed."""
    return (game_seed * AGENT_SEED_MULTIPLIER + seat) % SEED_MODULUS


def player_id_for(seat: int) -> str:
    return f"p{seat}"


@dataclass
class SimulatorConfig:
    """Settings for a batch of games.

    Attributes:
        num_games: Games to play.
        num_players: Players per game.
        agent_types: Agent type name per seat. A single name is used for
            every seat.
        seeds: Explicit game seeds. When given, its length must equal
            num_games and base_seed is ignored.
        base_seed: Game i is seeded with base_seed + i.
        track_coverage: Record which power handlers ran.
    """

    num_games: int = 10
    num_players: int = 2
    agent_types: list[str] = field(default_factory=lambda: ["random"])
    seeds: Optional[list[int]] = None
    base_seed: int = 0
    track_coverage: bool = False

    def validate(self, agent_registry: Optional[AgentRegistry] = None) -> None:
        """Check the settings.

        Raises:
            ConfigurationError: If any setting is out of range or names an
                unknown agent type.
        """
        if self.num_games < 1:
            raise ConfigurationError(f"num_games must be at least 1, got {self.num_games}")
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ConfigurationError(
                f"num_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {self.num_players}"
            )
        if not self.agent_types:
            raise ConfigurationError("agent_types cannot be empty")
        if len(self.agent_types) not in (1, self.num_players):
            raise ConfigurationError(
                f"Give one agent type or one per player ({self.num_players}), got {len(self.agent_types)}"
            )
        if self.seeds is not None and len(self.seeds) != self.num_games:
            raise ConfigurationError(f"Expected {self.num_games} seeds, got {len(self.seeds)}")
        if agent_registry is not None:
            for name in self.agent_types:
                if not agent_registry.has(name):
                    raise ConfigurationError(
                        f"Unknown agent type {name!r}. Available: {', '.join(agent_registry.names())}"
                    )

    def seat_agent_types(self) -> list[str]:
        if len(self.agent_types) == 1:
            return self.agent_types * self.num_players
        return list(self.agent_types)

    def game_seed(self, game_index: int) -> int:
        if self.seeds is not None:
            return self.seeds[game_index]
        return self.base_seed + game_index


@dataclass
class GameRecord:
    """One simulated game."""

    game_index: int
    seed: int
    result: GameResult
    duration_s: float


@dataclass
class SimulationSummary:
    """Results of a batch with summary statistics.

    Attributes:
        config: The settings the batch ran with.
        games: One record per game, in order.
        coverage: Handler coverage, when tracking was on.
    """

    config: SimulatorConfig
    games: list[GameRecord] = field(default_factory=list)
    coverage: Optional[HandlerCoverageTracker] = None

    @property
    def player_ids(self) -> list[str]:
        return [player_id_for(seat) for seat in range(self.config.num_players)]

    def score_matrix(self) -> np.ndarray:
        """Final scores as a (games, seats) array."""
        if not self.games:
            return np.zeros((0, self.config.num_players), dtype=np.int64)
        return np.array(
            [[record.result.scores.get(pid, 0) for pid in self.player_ids] for record in self.games],
            dtype=np.int64,
        )

    def win_counts(self) -> np.ndarray:
        counts = np.zeros(self.config.num_players, dtype=np.int64)
        for record in self.games:
            winner = record.result.winner_id
            if winner is not None:
                counts[self.player_ids.index(winner)] += 1
        return counts

    def statistics(self) -> dict[str, Any]:
        """Per-seat score statistics, win rates, turn counts and score spread."""
        scores = self.score_matrix()
        if scores.shape[0] == 0:
            return {"games": 0}

        turns = np.array([record.result.total_turns for record in self.games], dtype=np.int64)
        spread = scores.max(axis=1) - scores.min(axis=1)
        win_rates = self.win_counts() / len(self.games)
        forfeits = sum(len(record.result.forfeited_players) for record in self.games)

        per_seat = {}
        for seat, pid in enumerate(self.player_ids):
            column = scores[:, seat]
            per_seat[pid] = {
                "agent": self.config.seat_agent_types()[seat],
                "mean_score": float(np.mean(column)),
                "std_score": float(np.std(column)),
                "min_score": int(np.min(column)),
                "max_score": int(np.max(column)),
                "win_rate": float(win_rates[seat]),
            }

        return {
            "games": len(self.games),
            "players": per_seat,
            "mean_turns": float(np.mean(turns)),
            "mean_score_spread": float(np.mean(spread)),
            "max_score_spread": int(np.max(spread)),
            "forfeits": forfeits,
            "mean_game_seconds": float(np.mean([record.duration_s for record in self.games])),
        }

    def format(self) -> str:
        stats = self.statistics()
        if stats["games"] == 0:
            return "No games played."
        lines = [
            f"Games: {stats['games']}  Players: {self.config.num_players}",
            f"Mean turns: {stats['mean_turns']:.1f}  "
            f"Mean score spread: {stats['mean_score_spread']:.1f}  Forfeits: {stats['forfeits']}",
            "",
            f"{'Seat':<6}{'Agent':<10}{'Mean':>8}{'Std':>8}{'Min':>6}{'Max':>6}{'Win%':>8}",
        ]
        for pid, seat in stats["players"].items():
            lines.append(
                f"{pid:<6}{seat['agent']:<10}{seat['mean_score']:>8.1f}{seat['std_score']:>8.1f}"
                f"{seat['min_score']:>6}{seat['max_score']:>6}{seat['win_rate'] * 100:>7.1f}%"
            )
        if self.coverage is not None:
            lines.append("")
            lines.append(self.coverage.format_report())
        return "\n".join(lines)


class Simulator:
    """Runs batches of games."""

    def __init__(
        self,
        config: SimulatorConfig,
        content: Optional[CardRegistry] = None,
        agent_registry: Optional[AgentRegistry] = None,
        handler_registry: Optional[HandlerRegistry] = None,
        engine_config: Optional[EngineConfig] = None,
    ):
        self.agent_registry = agent_registry or build_default_agent_registry()
        config.validate(self.agent_registry)
        self.config = config
        self.handler_registry = handler_registry or build_default_registry()
        self.content = content or load_default_content(self.handler_registry)
        self.engine_config = engine_config or EngineConfig.default()

    def build_engine(self, game_seed: int, observers=()) -> GameEngine:
        """Create an engine with freshly seeded agents for one game."""
        agents = [
            self.agent_registry.create(agent_type, player_id_for(seat), agent_seed(game_seed, seat))
            for seat, agent_type in enumerate(self.config.seat_agent_types())
        ]
        return GameEngine(
            self.content,
            agents,
            seed=game_seed,
            registry=self.handler_registry,
            config=self.engine_config,
            observers=observers,
        )

    def play(self, game_seed: int, observers=()) -> GameResult:
        """Play one complete game."""
        engine = self.build_engine(game_seed, observers)
        engine.setup_game()
        return asyncio.run(engine.play_game())

    def run(self) -> SimulationSummary:
        """Play every configured game and summarize."""
        coverage = None
        observers = []
        if self.config.track_coverage:
            coverage = HandlerCoverageTracker(self.handler_registry.power_ids())
            observers.append(coverage)

        summary = SimulationSummary(config=self.config, coverage=coverage)
        logger.info(
            "Simulating %d game(s) with %d player(s): %s",
            self.config.num_games,
            self.config.num_players,
            ", ".join(self.config.seat_agent_types()),
        )

        for game_index in range(self.config.num_games):
            seed = self.config.game_seed(game_index)
            start = time.perf_counter()
            result = self.play(seed, observers)
            duration = time.perf_counter() - start
            if coverage is not None:
                coverage.game_finished()

            summary.games.append(GameRecord(game_index, seed, result, duration))
            logger.info(
                "Game %d/%d (seed %d): winner %s, scores %s, %d turns",
                game_index + 1,
                self.config.num_games,
                seed,
                result.winner_id,
                result.scores,
                result.total_turns,
            )

        return summary


__all__ = [
    "AGENT_SEED_MULTIPLIER",
    "GameRecord",
    "SimulationSummary",
    "Simulator",
    "SimulatorConfig",
    "agent_seed",
    "player_id_for",
]
