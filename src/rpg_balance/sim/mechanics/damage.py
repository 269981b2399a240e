"""Single-attack resolution.

Implements the attack pipeline for one attacker against one target:

    outcome roll (crit / fail / normal)
      -> hit roll (accuracy shifted by the outcome)
      -> block roll (target's block %)
      -> mitigation (target's flags decide the order)
      -> shields -> HP -> lifesteal -> thorns

Random numbers are drawn in a fixed order: crit roll, fail roll, hit roll,
then a block roll only when the target has block.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING

from rpg_balance.config import CritFailPrecedence
from rpg_balance.formulas.hit_chance import calculate_hit_chance
from rpg_balance.formulas.mitigation import mitigate_hit
from rpg_balance.formulas.sustain import calculate_lifesteal_heal
from rpg_balance.sim.core.combat_state import LogType, format_amount

from .buffs import absorb_with_shields, effective_stats

if TYPE_CHECKING:
    from rpg_balance.sim.core.combat_state import CombatState
    from rpg_balance.sim.core.entities import Entity
    from rpg_balance.sim.core.rng import RandomSource
    from rpg_balance.stats.models import StatBlock


class AttackOutcome(str, Enum):
    NORMAL = "normal"
    CRIT = "crit"
    FAIL = "fail"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def roll_outcome(
    rng: RandomSource,
    stats: StatBlock,
    precedence: CritFailPrecedence = CritFailPrecedence.CRIT_FIRST,
) -> AttackOutcome:
    """Roll crit and fail independently; *precedence* settles a double trigger."""
    crit = rng.random_float() * 100 < stats.crit_chance
    fail = rng.random_float() * 100 < stats.fail_chance

    if crit and fail:
        if precedence is CritFailPrecedence.FAIL_FIRST:
            return AttackOutcome.FAIL
        return AttackOutcome.CRIT
    if crit:
        return AttackOutcome.CRIT
    if fail:
        return AttackOutcome.FAIL
    return AttackOutcome.NORMAL


def attack_hit_chance(attacker: StatBlock, defender: StatBlock, outcome: AttackOutcome) -> float:
    txc = attacker.txc
    if outcome is AttackOutcome.CRIT:
        txc += attacker.crit_txc_bonus
    elif outcome is AttackOutcome.FAIL:
        txc -= attacker.fail_txc_malus
    return calculate_hit_chance(txc, defender.evasion)


def calculate_attack_damage(attacker: StatBlock, defender: StatBlock, outcome: AttackOutcome) -> int:
    """Final integer damage of a landed hit, before shields.

    Armor and resistance come from *defender*, penetration from *attacker*.
    The defender's ``config_apply_before_crit`` decides whether the
    crit/fail multiplier scales the raw or the mitigated hit.
    """
    if outcome is AttackOutcome.CRIT:
        mult = attacker.crit_mult
    elif outcome is AttackOutcome.FAIL:
        mult = attacker.fail_mult
    else:
        mult = 1.0

    def mitigate(raw: float) -> float:
        return mitigate_hit(
            raw, defender.armor, defender.resistance,
            attacker.armor_pen, attacker.pen_percent, defender.config_flat_first,
        )

    if defender.config_apply_before_crit:
        damage = mitigate(attacker.damage) * mult
    else:
        damage = mitigate(attacker.damage * mult)
    return max(0, round_half_up(damage))


def resolve_attack(state: CombatState, attacker: Entity, target: Entity) -> float:
    """Resolve one attack and log every sub-step.

    Returns the HP the target actually lost.
    """
    rng = state.rng
    attacker_effects = state.effects_for(attacker)
    target_effects = state.effects_for(target)
    atk = effective_stats(attacker.stats, attacker_effects.buffs)
    dfn = effective_stats(target.stats, target_effects.buffs)

    outcome = roll_outcome(rng, atk, state.settings.crit_fail_precedence)
    chance = attack_hit_chance(atk, dfn, outcome)
    if not rng.random_float() * 100 < chance:
        state.add_log(
            LogType.MISS,
            f"{attacker.name} misses {target.name} (Chance: {chance:.0f}%)",
            actor=attacker, target=target,
        )
        return 0.0

    if dfn.block > 0 and rng.random_float() * 100 < dfn.block:
        state.add_log(
            LogType.BLOCK, f"{target.name} blocks the attack from {attacker.name}!",
            actor=target, target=attacker,
        )
        return 0.0

    if outcome is AttackOutcome.CRIT:
        state.add_log(LogType.CRIT, f"{attacker.name} CRITS!", actor=attacker, target=target)
    elif outcome is AttackOutcome.FAIL:
        state.add_log(LogType.FAIL, f"{attacker.name} fumbles the attack!", actor=attacker, target=target)

    damage = calculate_attack_damage(atk, dfn, outcome)

    absorbed, overflow = absorb_with_shields(target_effects.buffs, damage)
    if absorbed > 0:
        state.add_log(
            LogType.SHIELD,
            f"{target.name}'s shield absorbs {format_amount(absorbed)} damage",
            actor=target, target=attacker, amount=absorbed,
        )

    hp_lost = target.take_damage(overflow)
    state.add_log(
        LogType.ATTACK,
        f"{attacker.name} attacks {target.name} for {format_amount(hp_lost)} damage. "
        f"({format_amount(target.current_hp)}/{format_amount(target.max_hp)} HP left)",
        actor=attacker, target=target, amount=hp_lost,
    )

    healed = attacker.heal(calculate_lifesteal_heal(absorbed + hp_lost, atk.lifesteal))
    if healed > 0:
        state.add_log(
            LogType.HEAL, f"{attacker.name} heals {format_amount(healed)} HP (lifesteal)",
            actor=attacker, amount=healed,
        )

    if target.is_dead:
        state.add_log(LogType.DEATH, f"{target.name} dies!", target=target)

    if dfn.thorns > 0 and not attacker.is_dead:
        reflected = attacker.take_damage(round_half_up(dfn.thorns))
        state.add_log(
            LogType.ATTACK,
            f"{attacker.name} takes {format_amount(reflected)} thorns damage from {target.name}",
            actor=target, target=attacker, amount=reflected,
        )
        if attacker.is_dead:
            state.add_log(LogType.DEATH, f"{attacker.name} dies!", target=attacker)

    return hp_lost
