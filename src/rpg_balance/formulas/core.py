"""Hits-to-kill and its inverses."""

from __future__ import annotations

INFINITE = 999.0
"""Sentinel for "effectively never" (HTK, attacks per KO, TTK)."""


def calculate_htk(hp: float, damage: float) -> float:
    if damage <= 0:
        return INFINITE
    return hp / damage


def calculate_damage_for_htk(hp: float, htk: float) -> float:
    """Damage that makes *hp* fall in exactly *htk* hits."""
    if htk <= 0:
        return hp
    return hp / htk


def calculate_hp_for_htk(damage: float, htk: float) -> float:
    return damage * htk


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
