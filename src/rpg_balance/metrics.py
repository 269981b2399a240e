"""Closed-form 1v1 combat metrics.

These are quick linear approximations of a duel, cheap enough to recompute
on every solver edit:

- **EDPT**: effective damage per turn that *attacker* lands on *defender*.
- **TTK**: turns for that damage to empty the defender's HP.
- **Early impact**: damage dealt over the opening turns.
- **SWI** (stat weight impact): how much one stat moves the TTK per point.

The solver evaluates them on a block against itself (mirror match).
All functions are pure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rpg_balance.formulas.core import INFINITE, clamp

if TYPE_CHECKING:
    from rpg_balance.stats.models import StatBlock

BASE_HIT = 0.9
HIT_PER_POINT = 0.01
ARMOR_SCALE = 50.0
EARLY_IMPACT_TURNS = 3
SWI_DELTA = 5.0

SWI_STATS: tuple[str, ...] = (
    "damage", "hp", "armor", "crit_chance", "crit_mult",
    "txc", "evasion", "regen", "lifesteal", "ward",
)
_SWI_DEFENSIVE = frozenset({"hp", "armor", "evasion", "regen", "ward"})


def hit_factor(txc: float, evasion: float) -> float:
    """Linear hit probability used by the metrics (not the combat roll)."""
    return clamp(BASE_HIT + (txc - evasion) * HIT_PER_POINT, 0, 1)


def crit_factor(crit_chance: float, crit_mult: float) -> float:
    return 1 + crit_chance / 100 * (crit_mult - 1)


def armor_factor(armor: float) -> float:
    if armor <= 0:
        return 1.0
    return 1 - armor / (armor + ARMOR_SCALE)


def defender_sustain(attacker: StatBlock, defender: StatBlock) -> float:
    """Regen plus lifesteal, assuming the defender hits as hard as the attacker."""
    return defender.regen + attacker.damage * defender.lifesteal / 100


def calculate_edpt(attacker: StatBlock, defender: StatBlock) -> float:
    raw = (
        attacker.damage
        * hit_factor(attacker.txc, defender.evasion)
        * crit_factor(attacker.crit_chance, attacker.crit_mult)
    )
    after_armor = raw * armor_factor(defender.armor)
    after_ward = max(0.0, after_armor - defender.ward)
    return max(0.0, after_ward - defender_sustain(attacker, defender))


def calculate_ttk(hp: float, edpt: float) -> float:
    if edpt <= 0:
        return INFINITE
    return hp / edpt


def calculate_early_impact(
    attacker: StatBlock,
    defender: StatBlock,
    turns: int = EARLY_IMPACT_TURNS,
) -> float:
    return calculate_edpt(attacker, defender) * turns


def calculate_swi(
    base: StatBlock,
    opponent: StatBlock,
    delta: float = SWI_DELTA,
) -> dict[str, float]:
    """TTK change per point for each stat in ``SWI_STATS``.

    Defensive stats are measured as change in *our* survival time (positive is
    good); offensive stats as change in the time we need to kill the opponent
    (negative is good).
    """
    swi: dict[str, float] = {}
    kill_time = calculate_ttk(opponent.hp, calculate_edpt(base, opponent))
    survival_time = calculate_ttk(base.hp, calculate_edpt(opponent, base))

    for stat in SWI_STATS:
        modified = base.model_copy(update={stat: getattr(base, stat) + delta})
        if stat in _SWI_DEFENSIVE:
            new_survival = calculate_ttk(modified.hp, calculate_edpt(opponent, modified))
            swi[stat] = (new_survival - survival_time) / delta
        else:
            new_kill = calculate_ttk(opponent.hp, calculate_edpt(modified, opponent))
            swi[stat] = (new_kill - kill_time) / delta

    return swi
