"""Lifesteal and regeneration.

Lifesteal heals a percentage of the damage actually dealt; regen is a flat
heal once per turn.  Healing never pushes HP above its maximum.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_COMBAT_TURNS = 10


@dataclass
class SustainValue:
    lifesteal_value: float
    regen_value: float

    @property
    def total_value(self) -> float:
        return self.lifesteal_value + self.regen_value


def calculate_lifesteal_heal(damage_dealt: float, lifesteal: float) -> float:
    if damage_dealt <= 0 or lifesteal <= 0:
        return 0.0
    return damage_dealt * lifesteal / 100


def calculate_regen_heal(regen: float) -> float:
    return max(0.0, regen)


def calculate_sustain_value(
    avg_damage_per_turn: float,
    lifesteal: float,
    regen: float,
    combat_turns: int = DEFAULT_COMBAT_TURNS,
) -> SustainValue:
    """HP recovered over a fight of *combat_turns* turns."""
    return SustainValue(
        lifesteal_value=calculate_lifesteal_heal(avg_damage_per_turn, lifesteal) * combat_turns,
        regen_value=calculate_regen_heal(regen) * combat_turns,
    )


def apply_healing_cap(current_hp: float, heal: float, max_hp: float) -> float:
    """Portion of *heal* that fits below *max_hp*."""
    if current_hp >= max_hp:
        return 0.0
    return max(0.0, min(heal, max_hp - current_hp))
