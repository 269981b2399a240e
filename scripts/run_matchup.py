"""Simulate a matchup between two archetypes (or custom StatBlock JSON files).

Usage:
    uv run python scripts/run_matchup.py juggernaut berserker [--budget 50] [--iterations 5000]
    uv run python scripts/run_matchup.py a.json b.json --settings settings.json --parallel
"""

from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path

from rpg_balance.archetypes import build_stat_block, get_archetype
from rpg_balance.balance.report import generate_matchup_report
from rpg_balance.config import DEFAULT_SETTINGS, load_settings
from rpg_balance.sim.runner import MonteCarloRunner
from rpg_balance.solver import recalculate
from rpg_balance.stats.models import StatBlock


def load_side(source: str, budget: float) -> StatBlock:
    """An archetype name, or a path to a camelCase StatBlock JSON file."""
    path = Path(source)
    if path.suffix == ".json":
        return recalculate(StatBlock.model_validate(json.loads(path.read_text())))
    return build_stat_block(get_archetype(source), budget)


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate a matchup")
    parser.add_argument("side_a", help="Archetype name or StatBlock JSON file")
    parser.add_argument("side_b", help="Archetype name or StatBlock JSON file")
    parser.add_argument("--budget", type=float, default=50.0, help="Archetype budget")
    parser.add_argument("--iterations", type=int, default=None, help="Number of battles")
    parser.add_argument("--seed", type=int, default=42, help="Master seed")
    parser.add_argument("--settings", type=str, default=None, help="SimulationSettings JSON")
    parser.add_argument("--parallel", action="store_true", help="Use a process pool")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    settings = load_settings(Path(args.settings)) if args.settings else DEFAULT_SETTINGS
    side_a = load_side(args.side_a, args.budget)
    side_b = load_side(args.side_b, args.budget)

    runner = MonteCarloRunner(settings=settings, parallel=args.parallel)
    t0 = time.perf_counter()
    result = runner.run(side_a, side_b, iterations=args.iterations, seed=args.seed)
    elapsed = time.perf_counter() - t0
    print(f"Done in {elapsed:.1f}s")

    print()
    print(generate_matchup_report(result))


if __name__ == "__main__":
    main()
