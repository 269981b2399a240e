"""Hit chance: ``50 + txc - evasion``, clamped to [1, 100].

Also provides the inverses the solver uses when ``hit_chance`` is edited
directly, and the "consistency" view (chance to land every one of *htk*
consecutive attacks).
"""

from __future__ import annotations

from rpg_balance.formulas.core import INFINITE, clamp

BASE_HIT_CHANCE = 50.0
MIN_HIT_CHANCE = 1.0
MAX_HIT_CHANCE = 100.0


def calculate_hit_chance(txc: float, evasion: float) -> float:
    return clamp(txc + BASE_HIT_CHANCE - evasion, MIN_HIT_CHANCE, MAX_HIT_CHANCE)


def calculate_attacks_per_ko(htk: float, hit_chance: float) -> float:
    """Attacks needed for a KO once misses are accounted for."""
    if hit_chance <= 0:
        return INFINITE
    return htk / (hit_chance / 100)


def calculate_txc_for_chance(evasion: float, target_chance: float) -> float:
    return target_chance - BASE_HIT_CHANCE + evasion


def calculate_evasion_for_chance(txc: float, target_chance: float) -> float:
    return txc + BASE_HIT_CHANCE - target_chance


def calculate_consistency(txc: float, htk: float, evasion: float) -> float:
    """Percent chance that *htk* attacks in a row all land."""
    chance = calculate_hit_chance(txc, evasion)
    return (chance / 100) ** htk * 100


def calculate_txc_from_consistency(consistency: float, htk: float, evasion: float) -> float:
    """Inverse of ``calculate_consistency``; ``-999`` when unreachable."""
    if consistency <= 0 or htk <= 0:
        return -INFINITE
    target_chance = 100 * (consistency / 100) ** (1 / htk)
    return calculate_txc_for_chance(evasion, target_chance)
