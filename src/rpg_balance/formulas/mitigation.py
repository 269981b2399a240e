"""Armor and resistance mitigation.

Armor is damage-dependent: ``reduction = A / (A + 10 x hit)``, capped at 90%,
so a fixed armor value blunts small hits far more than big ones.  Resistance
is a flat percentage.  Both are reduced by the attacker's penetration before
they apply.

With ``flat_first`` the armor reduction is computed on the raw hit and
resistance applies afterwards; otherwise resistance applies first and armor
sees the already-reduced hit.
"""

from __future__ import annotations

import math

from rpg_balance.formulas.core import clamp
from rpg_balance.formulas.critical import outcome_probabilities

MAX_ARMOR_REDUCTION = 0.90
ARMOR_HIT_FACTOR = 10.0
MIN_EFFECTIVE_DAMAGE = 1.0
_MIN_DIVISOR = 0.001


def effective_armor(armor: float, armor_pen: float) -> float:
    return max(0.0, armor - armor_pen)


def effective_resistance(resistance: float, pen_percent: float) -> float:
    """Net resistance as a fraction in [0, 1]."""
    return clamp(resistance - pen_percent, 0, 100) / 100


def armor_reduction(armor: float, hit: float) -> float:
    if armor <= 0 or hit <= 0:
        return 0.0
    return min(MAX_ARMOR_REDUCTION, armor / (armor + ARMOR_HIT_FACTOR * hit))


def _mitigate(
    raw: float,
    armor: float,
    resistance: float,
    armor_pen: float,
    pen_percent: float,
    flat_first: bool,
) -> float:
    eff_armor = effective_armor(armor, armor_pen)
    eff_res = effective_resistance(resistance, pen_percent)

    if flat_first:
        damage = raw * (1 - armor_reduction(eff_armor, raw))
        return damage * (1 - eff_res)

    damage = raw * (1 - eff_res)
    return damage * (1 - armor_reduction(eff_armor, damage))


def calculate_effective_damage(
    raw: float,
    armor: float,
    resistance: float,
    armor_pen: float = 0.0,
    pen_percent: float = 0.0,
    flat_first: bool = True,
) -> float:
    """Damage left after mitigation, never below 1."""
    return max(MIN_EFFECTIVE_DAMAGE, _mitigate(raw, armor, resistance, armor_pen, pen_percent, flat_first))


def mitigate_hit(
    raw: float,
    armor: float,
    resistance: float,
    armor_pen: float = 0.0,
    pen_percent: float = 0.0,
    flat_first: bool = True,
) -> float:
    """Like ``calculate_effective_damage`` but a hit with no damage stays at 0."""
    if raw <= 0:
        return 0.0
    return calculate_effective_damage(raw, armor, resistance, armor_pen, pen_percent, flat_first)


def calculate_average_effective_damage(
    base_damage: float,
    crit_chance: float,
    crit_mult: float,
    fail_chance: float,
    fail_mult: float,
    armor: float,
    resistance: float,
    armor_pen: float,
    pen_percent: float,
    flat_first: bool,
    apply_before_crit: bool,
) -> float:
    """Expected per-landed-hit damage over the crit/normal/fail outcomes.

    With *apply_before_crit* the base hit is mitigated once and the
    multipliers scale the result.  Otherwise each outcome's multiplied hit is
    mitigated separately, which matters because armor depends on hit size.
    """
    p_crit, p_fail, p_normal = outcome_probabilities(crit_chance, fail_chance)

    if apply_before_crit:
        mitigated = calculate_effective_damage(
            base_damage, armor, resistance, armor_pen, pen_percent, flat_first,
        )
        return mitigated * (p_crit * crit_mult + p_fail * fail_mult + p_normal)

    def eff(raw: float) -> float:
        return calculate_effective_damage(raw, armor, resistance, armor_pen, pen_percent, flat_first)

    return (
        p_crit * eff(base_damage * crit_mult)
        + p_fail * eff(base_damage * fail_mult)
        + p_normal * eff(base_damage)
    )


def _invert_armor(target: float, armor: float) -> float:
    """Solve ``x * (1 - armor_reduction(armor, x)) == target`` for *x*."""
    if armor <= 0:
        return target
    if target < armor / (ARMOR_HIT_FACTOR * 90):
        # Reduction cap is active: target = x * (1 - 0.9)
        return target / (1 - MAX_ARMOR_REDUCTION)
    # 10x^2 - 10tx - tA = 0
    disc = 100 * target * target + 40 * target * armor
    return (10 * target + math.sqrt(disc)) / 20


def calculate_raw_damage_for_effective(
    target: float,
    armor: float,
    resistance: float,
    armor_pen: float = 0.0,
    pen_percent: float = 0.0,
    flat_first: bool = True,
) -> float:
    """Closed-form inverse of the mitigation pipeline (ignoring the floor at 1).

    Returns 0 for a non-positive *target*.
    """
    if target <= 0:
        return 0.0

    eff_armor = effective_armor(armor, armor_pen)
    res_divisor = max(_MIN_DIVISOR, 1 - effective_resistance(resistance, pen_percent))

    if flat_first:
        return _invert_armor(target / res_divisor, eff_armor)
    return _invert_armor(target, eff_armor) / res_divisor
