"""Dynamic stat weights and synergy bonuses.

A stat's *dynamic* weight is its measured HP-equivalent value for one
specific build, as opposed to the static table in
``rpg_balance.stats.weights``:

- Defensive stats (hp, armor, resistance, evasion, ward, block) use the
  closed-form marginal EHP.
- Every other stat is perturbed and simulated against an opponent (a mirror
  of the build by default).  The win-rate shift is converted to HP through an
  HP probe run with the same seed, so all runs share random numbers and the
  differences are not swamped by noise.

The synergy bonus is the signed percentage by which the dynamic weight beats
the static one.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from rpg_balance.balance.ehp import EHPCalculator
from rpg_balance.balance.models import StatWeightResult
from rpg_balance.config import DEFAULT_SETTINGS, SimulationSettings
from rpg_balance.sim.runner import run_simulation
from rpg_balance.solver import recalculate
from rpg_balance.stats.models import StatBlock, resolve_field_name
from rpg_balance.stats.weights import STAT_WEIGHTS

logger = logging.getLogger(__name__)

DEFENSIVE_STATS = frozenset({"hp", "armor", "resistance", "evasion", "ward", "block"})

# Perturbation per stat; anything not listed uses _DEFAULT_DELTA.
STAT_DELTAS: dict[str, float] = {
    "damage": 5.0,
    "txc": 10.0,
    "crit_chance": 10.0,
    "crit_mult": 0.5,
    "crit_txc_bonus": 10.0,
    "fail_chance": 5.0,
    "lifesteal": 10.0,
    "regen": 5.0,
    "armor_pen": 10.0,
    "pen_percent": 10.0,
    "thorns": 5.0,
    "energy_shield": 20.0,
}
_DEFAULT_DELTA = 5.0
_HP_PROBE_FRACTION = 0.2


def calculate_synergy_bonus(dynamic_weight: float, base_weight: float) -> float:
    safe_base = base_weight if base_weight != 0 else 1.0
    return (dynamic_weight - base_weight) / safe_base * 100


class DynamicWeightCalculator:
    """Measures per-point stat values for a concrete build.

    Parameters
    ----------
    opponent:
        StatBlock the build is simulated against.  ``None`` uses a mirror of
        the build being analysed.
    iterations:
        Battles per simulated probe.  Defaults to
        ``settings.default_iterations``.
    seed:
        Seed shared by every probe (common random numbers).
    settings:
        Simulation policy passed through to the runner.
    """

    def __init__(
        self,
        opponent: StatBlock | None = None,
        iterations: int | None = None,
        seed: int = 0,
        settings: SimulationSettings | None = None,
        ehp_calculator: EHPCalculator | None = None,
    ) -> None:
        self.opponent = opponent
        self.settings = settings or DEFAULT_SETTINGS
        self.iterations = iterations if iterations is not None else self.settings.default_iterations
        self.seed = seed
        self.ehp = ehp_calculator or EHPCalculator()

    # -- public --------------------------------------------------------------

    def calculate_weights(
        self,
        current: StatBlock,
        base_weights: Mapping[str, float] | None = None,
    ) -> list[StatWeightResult]:
        """Dynamic weight and synergy bonus for every stat in *base_weights*.

        Sorted by dynamic weight, highest first.
        """
        if base_weights is None:
            base_weights = STAT_WEIGHTS

        opponent = self.opponent if self.opponent is not None else current
        probe = _WinRateProbe(self, current, opponent)

        results: list[StatWeightResult] = []
        for name, base_weight in base_weights.items():
            stat = resolve_field_name(name)
            if stat in DEFENSIVE_STATS:
                dynamic = self.ehp.calculate_marginal_ehp_value(current, stat)
            else:
                dynamic = probe.hp_per_point(stat)
            results.append(StatWeightResult(
                stat=stat,
                base_weight=base_weight,
                dynamic_weight=dynamic,
                synergy_bonus=calculate_synergy_bonus(dynamic, base_weight),
            ))

        return sorted(results, key=lambda r: r.dynamic_weight, reverse=True)

    def calculate_dynamic_weight(self, current: StatBlock, stat: str) -> float:
        """Dynamic weight of a single stat."""
        field = resolve_field_name(stat)
        if field in DEFENSIVE_STATS:
            return self.ehp.calculate_marginal_ehp_value(current, field)
        opponent = self.opponent if self.opponent is not None else current
        return _WinRateProbe(self, current, opponent).hp_per_point(field)

    # -- simulation ----------------------------------------------------------

    def win_rate(self, build: StatBlock, opponent: StatBlock) -> float:
        result = run_simulation(
            build, opponent, self.iterations, seed=self.seed, settings=self.settings,
        )
        return result.win_rate_a


class _WinRateProbe:
    """Baseline and HP-slope measurements shared across the stats of one call."""

    def __init__(self, calc: DynamicWeightCalculator, build: StatBlock, opponent: StatBlock) -> None:
        self._calc = calc
        self._build = build
        self._opponent = opponent
        self._baseline: float | None = None
        self._slope: float | None = None

    @property
    def baseline(self) -> float:
        if self._baseline is None:
            self._baseline = self._calc.win_rate(self._build, self._opponent)
        return self._baseline

    @property
    def slope(self) -> float:
        """Win rate gained per point of HP."""
        if self._slope is None:
            hp_delta = max(10.0, self._build.hp * _HP_PROBE_FRACTION)
            tougher = _perturb(self._build, "hp", hp_delta)
            self._slope = (self._calc.win_rate(tougher, self._opponent) - self.baseline) / hp_delta
        return self._slope

    def hp_per_point(self, stat: str) -> float:
        if self.slope <= 0:
            logger.warning(
                "Win rate does not respond to HP (baseline %.3f); weight of %s set to 0",
                self.baseline, stat,
            )
            return 0.0
        delta = STAT_DELTAS.get(stat, _DEFAULT_DELTA)
        shifted = self._calc.win_rate(_perturb(self._build, stat, delta), self._opponent)
        return (shifted - self.baseline) / self.slope / delta


def _perturb(stats: StatBlock, stat: str, delta: float) -> StatBlock:
    return recalculate(stats.model_copy(update={stat: getattr(stats, stat) + delta}))
