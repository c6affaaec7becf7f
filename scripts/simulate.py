"""Run batches of simulated games.

Usage:
    # Ten two-player games between random agents
    python scripts/simulate.py --games 10 --players 2

    # Fixed seed, per-seat agent types and a handler coverage report
    python scripts/simulate.py --games 50 --players 3 \
        --agents random random random --seed 7 --coverage
"""

import os
import sys
import argparse
import json

# Add project root to sys.path to allow importing the engine packages
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.errors import WingsimError
from core.logging_config import get_logger, setup_logging
from sim.simulator import Simulator, SimulatorConfig

logger = get_logger("simulate")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate complete games between agents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("--games", type=int, default=10, help="Number of games to play")
    parser.add_argument("--players", type=int, default=2, help="Number of players per game")
    parser.add_argument("--agents", nargs="+", default=["random"],
                        help="Agent type for every seat, or one per seat")
    parser.add_argument("--seed", type=int, default=0, help="Base seed; game i uses seed + i")

    parser.add_argument("--coverage", action="store_true",
                        help="Report which power handlers activated or were skipped")
    parser.add_argument("--json", action="store_true", help="Print the statistics as JSON")

    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level")
    parser.add_argument("--log-json", action="store_true", help="Emit log lines as JSON")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, format_json=args.log_json)

    config = SimulatorConfig(
        num_games=args.games,
        num_players=args.players,
        agent_types=args.agents,
        base_seed=args.seed,
        track_coverage=args.coverage,
    )

    try:
        summary = Simulator(config).run()
    except WingsimError as e:
        logger.error("Simulation failed: %s", e)
        return 1

    if args.json:
        stats = summary.statistics()
        if summary.coverage is not None:
            stats["coverage"] = summary.coverage.report()
        print(json.dumps(stats, indent=2))
    else:
        print(summary.format())
    return 0


if __name__ == "__main__":
    sys.exit(main())
