"""Run one seeded battle and print its combat log.

Usage:
    uv run python scripts/demo_combat.py [juggernaut] [berserker] [--budget 50] [--seed 42]
"""

from __future__ import annotations

import argparse

from rpg_balance.archetypes import build_stat_block, get_archetype
from rpg_balance.sim.core.rng import CombatRNG
from rpg_balance.sim.runner import build_team, run_battle


def separator(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Print one combat log")
    parser.add_argument("side_a", nargs="?", default="juggernaut")
    parser.add_argument("side_b", nargs="?", default="berserker")
    parser.add_argument("--budget", type=float, default=50.0)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    a = build_stat_block(get_archetype(args.side_a), args.budget)
    b = build_stat_block(get_archetype(args.side_b), args.budget)

    separator(f"{args.side_a} vs {args.side_b} (seed {args.seed})")
    state = run_battle(build_team(a, "A"), build_team(b, "B"), rng=CombatRNG(args.seed))
    for line in state.messages():
        print(line)

    separator(f"Winner: {state.winner.value} after {state.turn} turns")


if __name__ == "__main__":
    main()
