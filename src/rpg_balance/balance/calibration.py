"""Equilibrium-HP calibration of stat weights by simulation.

For a stat and an increment, a *challenger* gets ``+increment`` of the stat
and a *defender* gets extra HP.  Binary search finds the defender HP at which
the matchup is even (48-52% win rate); the HP gained per point of the stat is
the stat's weight.  Several passes with different seeds give a confidence
value, and repeating at twice the increment gives a linearity score.
"""

from __future__ import annotations

import logging
import statistics

from rpg_balance.balance.models import CalibrationResult
from rpg_balance.config import DEFAULT_SETTINGS, SimulationSettings
from rpg_balance.sim.runner import run_simulation
from rpg_balance.solver import make_stat_block, recalculate
from rpg_balance.stats.models import StatBlock, resolve_field_name

logger = logging.getLogger(__name__)

EVEN_LOW = 0.48
EVEN_HIGH = 0.52
_SEARCH_SPAN = 20
"""Upper search bound is ``hp + increment x _SEARCH_SPAN``."""


class StatValueAnalyzer:
    """Calibrates stat weights against a baseline build."""

    def __init__(
        self,
        baseline: StatBlock | None = None,
        settings: SimulationSettings | None = None,
        seed: int = 0,
    ) -> None:
        self.baseline = baseline if baseline is not None else make_stat_block()
        self.settings = settings or DEFAULT_SETTINGS
        self.seed = seed

    def calibrate_stat(
        self,
        stat: str,
        increment: float = 10.0,
        iterations: int = 1000,
        passes: int = 5,
    ) -> CalibrationResult:
        field = resolve_field_name(stat)
        logger.info("Calibrating %s (+%s)", field, increment)

        weights = [
            self.equilibrium_weight(field, increment, iterations, seed=self.seed + i)
            for i in range(passes)
        ]
        avg = statistics.mean(weights)
        spread = statistics.pstdev(weights) if len(weights) > 1 else 0.0
        relative = spread / (abs(avg) or 1.0)
        confidence = max(0.0, 1.0 - relative * 10)

        at_double = self.equilibrium_weight(field, increment * 2, iterations, seed=self.seed + passes)
        linearity = 1.0 - min(1.0, abs(avg - at_double) / (abs(avg) or 1.0))

        return CalibrationResult(
            stat=field,
            weight=round(avg, 2),
            confidence=round(confidence, 2),
            linearity=round(linearity, 2),
            sample_size=iterations * passes,
        )

    def equilibrium_weight(self, stat: str, increment: float, iterations: int, seed: int = 0) -> float:
        """HP per point of *stat* at which the matchup is even."""
        field = resolve_field_name(stat)
        challenger = recalculate(
            self.baseline.model_copy(update={field: getattr(self.baseline, field) + increment}),
        )

        low = int(self.baseline.hp)
        high = int(self.baseline.hp + increment * _SEARCH_SPAN)
        while high - low > 1:
            mid = (low + high) // 2
            defender = recalculate(self.baseline.model_copy(update={"hp": float(mid)}))
            win_rate = run_simulation(
                defender, challenger, iterations, seed=seed, settings=self.settings,
            ).win_rate_a
            if win_rate < EVEN_LOW:
                low = mid
            elif win_rate > EVEN_HIGH:
                high = mid
            else:
                low = high = mid
                break

        equilibrium = (low + high) // 2
        return (equilibrium - self.baseline.hp) / increment
