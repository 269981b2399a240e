"""Critical hits and failures.

Each attack is one of three outcomes: a *crit* (``crit_chance``%), a
*fail* (``fail_chance``%) or a normal attack.  Crits gain ``crit_txc_bonus``
accuracy and multiply damage by ``crit_mult``; fails lose ``fail_txc_malus``
accuracy and multiply by ``fail_mult``.
"""

from __future__ import annotations

import math

from rpg_balance.formulas.core import INFINITE, clamp
from rpg_balance.formulas.hit_chance import BASE_HIT_CHANCE


def outcome_probabilities(crit_chance: float, fail_chance: float) -> tuple[float, float, float]:
    """Return ``(p_crit, p_fail, p_normal)`` as fractions."""
    p_crit = crit_chance / 100
    p_fail = fail_chance / 100
    p_normal = max(0.0, 1 - p_crit - p_fail)
    return p_crit, p_fail, p_normal


def calculate_effective_hit_chance(
    txc: float,
    evasion: float,
    crit_chance: float,
    crit_txc_bonus: float,
    fail_chance: float,
    fail_txc_malus: float,
) -> float:
    """Percent of attacks that land, weighted over the three outcomes.

    Unlike the plain hit chance, the per-outcome chances are clamped to
    [0, 100] rather than [1, 100].
    """
    normal = clamp(txc + BASE_HIT_CHANCE - evasion, 0, 100)
    crit = clamp(txc + crit_txc_bonus + BASE_HIT_CHANCE - evasion, 0, 100)
    fail = clamp(txc - fail_txc_malus + BASE_HIT_CHANCE - evasion, 0, 100)

    p_crit, p_fail, p_normal = outcome_probabilities(crit_chance, fail_chance)
    return p_crit * crit + p_fail * fail + p_normal * normal


def calculate_average_damage_multiplier(
    crit_chance: float,
    crit_mult: float,
    fail_chance: float,
    fail_mult: float,
) -> float:
    p_crit, p_fail, p_normal = outcome_probabilities(crit_chance, fail_chance)
    return p_crit * crit_mult + p_fail * fail_mult + p_normal * 1.0


def calculate_attacks_per_ko(htk: float, effective_hit_chance: float, avg_damage_mult: float) -> float:
    """``htk / (chance% x multiplier)``; 999 when the denominator is not positive."""
    denominator = effective_hit_chance / 100 * avg_damage_mult
    if denominator <= 0:
        return INFINITE
    return htk / denominator


def calculate_critical_damage(base_damage: float, multiplier: float) -> int:
    return math.floor(base_damage * multiplier)
