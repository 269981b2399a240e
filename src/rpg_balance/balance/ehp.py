"""Effective health pool (EHP) -- closed form, no simulation.

EHP scales HP up by every layer of defensive mitigation to express how much
raw damage a StatBlock can absorb::

    physical = pool / (1 - armor_reduction) / (1 - evasion) / (1 - block)
    magical  = pool / (1 - resistance)      / (1 - evasion) / (1 - block)
    mixed    = (physical + magical) / 2

where ``pool`` is HP plus ward and energy shield.  Armor reduction depends
on the incoming hit size (``A / (A + 10 x hit)``, capped at 90%), resistance
is capped at 75%, evasion at 95% and block at 75%.

The marginal value of one more point of a defensive stat is its empirical
HP-equivalent weight.
"""

from __future__ import annotations

from rpg_balance.balance.models import EHPResult, IncomingHitProfile
from rpg_balance.formulas.mitigation import armor_reduction
from rpg_balance.stats.models import StatBlock, resolve_field_name

MAX_RESISTANCE_REDUCTION = 0.75
MAX_EVASION_CHANCE = 0.95
MAX_BLOCK_REDUCTION = 0.75

DEFAULT_PROFILE = IncomingHitProfile()


def calculate_resistance_reduction(resistance: float) -> float:
    if resistance <= 0:
        return 0.0
    return min(resistance / 100, MAX_RESISTANCE_REDUCTION)


def calculate_evasion_chance(evasion: float, accuracy: float) -> float:
    if evasion <= 0:
        return 0.0
    if accuracy <= 0:
        return min(MAX_EVASION_CHANCE, evasion / 100)
    return min(evasion / (evasion + accuracy), MAX_EVASION_CHANCE)


def calculate_block_reduction(block: float) -> float:
    if block <= 0:
        return 0.0
    return min(block / 100, MAX_BLOCK_REDUCTION)


class EHPCalculator:
    """Computes EHP and the marginal EHP value of a stat."""

    def __init__(self, profile: IncomingHitProfile | None = None) -> None:
        self.profile = profile or DEFAULT_PROFILE

    def calculate_ehp(self, stats: StatBlock, profile: IncomingHitProfile | None = None) -> EHPResult:
        profile = profile or self.profile

        armor_red = armor_reduction(stats.armor, profile.physical)
        res_red = calculate_resistance_reduction(stats.resistance)
        evasion = calculate_evasion_chance(stats.evasion, profile.accuracy)
        block_red = calculate_block_reduction(stats.block)

        flat_pool = max(0.0, stats.ward) + max(0.0, stats.energy_shield)
        pool = stats.hp + flat_pool
        avoidance = 1 / (1 - evasion) / (1 - block_red)

        physical = pool / (1 - armor_red) * avoidance
        magical = pool / (1 - res_red) * avoidance

        return EHPResult(
            base_hp=stats.hp,
            physical_ehp=physical,
            magical_ehp=magical,
            mixed_ehp=(physical + magical) / 2,
            effective_armor_reduction=armor_red,
            effective_resistance_reduction=res_red,
            effective_evasion_chance=evasion,
            block_reduction=block_red,
            flat_pool=flat_pool,
        )

    def calculate_marginal_ehp_value(
        self,
        stats: StatBlock,
        stat: str,
        profile: IncomingHitProfile | None = None,
    ) -> float:
        """Mixed-EHP gained from one more point of *stat*."""
        field = resolve_field_name(stat)
        baseline = self.calculate_ehp(stats, profile).mixed_ehp
        modified = stats.model_copy(update={field: getattr(stats, field) + 1})
        return self.calculate_ehp(modified, profile).mixed_ehp - baseline

    def calculate_hp_equivalent(self, stats: StatBlock, stat: str, amount: float = 1.0) -> float:
        return self.calculate_marginal_ehp_value(stats, stat) * amount
