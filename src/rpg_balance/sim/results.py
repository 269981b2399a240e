"""Aggregate result of a Monte Carlo run.

A plain frozen ``dataclass`` rather than a Pydantic model: it is built once
per run from a handful of counters and never validated or serialized on the
hot path.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

Z_95 = 1.96


@dataclass(frozen=True)
class SimulationResult:
    """Win/draw counters for a batch of battles.

    Attributes
    ----------
    wins_a, wins_b, draws:
        Battle outcomes.  ``wins_a + wins_b + draws == total_battles``.
    total_battles:
        Number of battles simulated.
    average_turns:
        Mean battle length in turns.
    capped_battles:
        Battles that hit the turn cap (resolved by the cap policy).
    """

    wins_a: int
    wins_b: int
    draws: int
    total_battles: int
    average_turns: float
    capped_battles: int = 0

    @property
    def win_rate_a(self) -> float:
        return self.wins_a / self.total_battles if self.total_battles else 0.0

    @property
    def win_rate_b(self) -> float:
        return self.wins_b / self.total_battles if self.total_battles else 0.0

    @property
    def draw_rate(self) -> float:
        return self.draws / self.total_battles if self.total_battles else 0.0

    def confidence_interval(self, side: str = "A") -> tuple[float, float]:
        """Normal-approximation 95% interval for side *side*'s win rate."""
        p = self.win_rate_a if side == "A" else self.win_rate_b
        n = self.total_battles
        if n == 0:
            return 0.0, 0.0
        margin = Z_95 * math.sqrt(p * (1 - p) / n)
        return max(0.0, p - margin), min(1.0, p + margin)

    @classmethod
    def merge(cls, parts: list[SimulationResult]) -> SimulationResult:
        """Combine results of disjoint batches (e.g. parallel chunks)."""
        total = sum(p.total_battles for p in parts)
        turns = sum(p.average_turns * p.total_battles for p in parts)
        return cls(
            wins_a=sum(p.wins_a for p in parts),
            wins_b=sum(p.wins_b for p in parts),
            draws=sum(p.draws for p in parts),
            total_battles=total,
            average_turns=turns / total if total else 0.0,
            capped_battles=sum(p.capped_battles for p in parts),
        )
