"""Dynamic stat weights and suggestions for an archetype build.

Usage:
    uv run python scripts/stat_weights.py regenerator [--budget 50] [--iterations 2000]
    uv run python scripts/stat_weights.py marksman --calibrate damage txc
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rpg_balance.archetypes import build_stat_block, get_archetype
from rpg_balance.balance.calibration import StatValueAnalyzer
from rpg_balance.balance.dynamic_weights import DynamicWeightCalculator
from rpg_balance.balance.report import generate_calibration_report, generate_weight_report
from rpg_balance.balance.suggestions import SuggestionEngine
from rpg_balance.config import DEFAULT_SETTINGS, load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyse stat weights for a build")
    parser.add_argument("archetype", help="Built-in archetype name")
    parser.add_argument("--budget", type=float, default=50.0)
    parser.add_argument("--iterations", type=int, default=2000, help="Battles per probe")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--count", type=int, default=3, help="Number of suggestions")
    parser.add_argument("--calibrate", nargs="*", default=[], help="Stats to calibrate by equilibrium HP")
    parser.add_argument("--settings", type=str, default=None, help="SimulationSettings JSON")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    settings = load_settings(Path(args.settings)) if args.settings else DEFAULT_SETTINGS
    stats = build_stat_block(get_archetype(args.archetype), args.budget)

    calculator = DynamicWeightCalculator(iterations=args.iterations, seed=args.seed, settings=settings)
    weights = calculator.calculate_weights(stats)
    suggestions = SuggestionEngine(calculator).get_suggestions(stats, count=args.count)
    print(generate_weight_report(stats, weights, suggestions))

    if args.calibrate:
        analyzer = StatValueAnalyzer(baseline=stats, settings=settings, seed=args.seed)
        results = [
            analyzer.calibrate_stat(stat, iterations=args.iterations, passes=3)
            for stat in args.calibrate
        ]
        print(generate_calibration_report(results))


if __name__ == "__main__":
    main()
