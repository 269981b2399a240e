"""Bidirectional stat constraint solver.

Keeps every derived StatBlock field consistent with the base fields while
allowing *any* field (base or derived) to be edited:

1. The new value is written to the changed field.
2. **Reverse derivation** -- if the changed field is derived, the base field
   that produces it is solved for, honouring the locked field.
3. **Forward propagation** -- if a base field changed while a different field
   is locked, a compensating base field moves so the locked quantity keeps
   its meaning.
4. **Recalculation** -- every derived field is recomputed from the base
   fields.

Steps 2 and 3 are driven by explicit rule tables keyed by
``(changed_field, locked_field)`` so each rule can be read and tested in
isolation.  Inputs are never mutated.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from rpg_balance.formulas.core import INFINITE, calculate_htk, clamp
from rpg_balance.formulas.critical import calculate_effective_hit_chance
from rpg_balance.formulas.hit_chance import (
    MAX_HIT_CHANCE,
    MIN_HIT_CHANCE,
    calculate_evasion_for_chance,
    calculate_hit_chance,
    calculate_txc_for_chance,
)
from rpg_balance.formulas.mitigation import (
    calculate_average_effective_damage,
    calculate_effective_damage,
    calculate_raw_damage_for_effective,
)
from rpg_balance.metrics import (
    BASE_HIT,
    EARLY_IMPACT_TURNS,
    HIT_PER_POINT,
    armor_factor,
    calculate_edpt,
    calculate_ttk,
    crit_factor,
    hit_factor,
)
from rpg_balance.stats.models import (
    CONFIG_FIELDS,
    DERIVED_FIELDS,
    LockedField,
    StatBlock,
    resolve_field_name,
)

logger = logging.getLogger(__name__)

_BISECT_STEPS = 80
_BISECT_TOLERANCE = 1e-9
_MAX_DAMAGE_SEARCH = 1e9

ReverseRule = Callable[[StatBlock, float], None]
ForwardRule = Callable[[StatBlock, StatBlock], None]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def make_stat_block(**overrides: Any) -> StatBlock:
    """Build a StatBlock from defaults plus *overrides*, fully recalculated."""
    return recalculate(StatBlock(**overrides))


def recalculate(stats: StatBlock) -> StatBlock:
    """Return a copy of *stats* with every derived field recomputed.

    Idempotent: recalculating an already recalculated block changes nothing.
    """
    return stats.model_copy(update=_derived_values(stats))


def solve(
    current: StatBlock,
    changed_field: str,
    new_value: Any,
    locked_field: str | LockedField | None = None,
) -> StatBlock:
    """Apply one edit and return a new, consistent StatBlock.

    Parameters
    ----------
    current:
        The block before the edit.  Not modified.
    changed_field:
        Field being edited, snake_case or camelCase.
    new_value:
        The requested value.  Coerced with ``bool()`` for the config flags.
    locked_field:
        Field that must keep its value (or meaning), or ``None``.

    Raises
    ------
    ValueError
        If *changed_field* or *locked_field* is not a StatBlock field.
    """
    field = resolve_field_name(changed_field)
    lock = _resolve_lock(locked_field)
    stats = current.model_copy()

    if field in CONFIG_FIELDS:
        setattr(stats, field, bool(new_value))
        return recalculate(stats)

    value = float(new_value)
    setattr(stats, field, value)

    if field in DERIVED_FIELDS:
        rule = _REVERSE_RULES.get((field, lock)) or _REVERSE_RULES[(field, None)]
        rule(stats, value)
    elif lock is not None and lock != field:
        forward = _FORWARD_RULES.get((field, lock))
        if forward is not None:
            forward(stats, current)

    logger.debug("solve %s=%s lock=%s", field, value, lock)
    return recalculate(stats)


# ---------------------------------------------------------------------------
# Recalculation
# ---------------------------------------------------------------------------

def _effective_hit_chance(s: StatBlock) -> float:
    return calculate_effective_hit_chance(
        s.txc, s.evasion, s.crit_chance, s.crit_txc_bonus, s.fail_chance, s.fail_txc_malus,
    )


def _average_effective_damage(s: StatBlock, damage: float | None = None) -> float:
    return calculate_average_effective_damage(
        s.damage if damage is None else damage,
        s.crit_chance, s.crit_mult, s.fail_chance, s.fail_mult,
        s.armor, s.resistance, s.armor_pen, s.pen_percent,
        s.config_flat_first, s.config_apply_before_crit,
    )


def _attacks_per_ko(s: StatBlock) -> float:
    denominator = _effective_hit_chance(s) / 100 * _average_effective_damage(s)
    if denominator <= 0:
        return INFINITE
    return s.hp / denominator


def _derived_values(s: StatBlock) -> dict[str, float]:
    edpt = calculate_edpt(s, s)
    return {
        "htk": calculate_htk(s.hp, s.damage),
        "hit_chance": calculate_hit_chance(s.txc, s.evasion),
        "effective_damage": calculate_effective_damage(
            s.damage, s.armor, s.resistance, s.armor_pen, s.pen_percent, s.config_flat_first,
        ),
        "attacks_per_ko": _attacks_per_ko(s),
        "edpt": edpt,
        "ttk": calculate_ttk(s.hp, edpt),
        "early_impact": edpt * EARLY_IMPACT_TURNS,
    }


def _resolve_lock(locked_field: str | LockedField | None) -> str | None:
    if locked_field is None or locked_field == LockedField.NONE or locked_field == "none":
        return None
    return resolve_field_name(locked_field)


# ---------------------------------------------------------------------------
# Reverse rules: derived field edited -> solve a base field
# ---------------------------------------------------------------------------

def _htk_to_damage(s: StatBlock, target: float) -> None:
    if target > 0:
        s.damage = s.hp / target


def _htk_to_hp(s: StatBlock, target: float) -> None:
    if target > 0:
        s.hp = s.damage * target


def _hit_chance_to_txc(s: StatBlock, target: float) -> None:
    s.txc = calculate_txc_for_chance(s.evasion, clamp(target, MIN_HIT_CHANCE, MAX_HIT_CHANCE))


def _hit_chance_to_evasion(s: StatBlock, target: float) -> None:
    s.evasion = calculate_evasion_for_chance(s.txc, clamp(target, MIN_HIT_CHANCE, MAX_HIT_CHANCE))


def _apk_to_hp(s: StatBlock, target: float) -> None:
    per_attack = _effective_hit_chance(s) / 100 * _average_effective_damage(s)
    if target > 0 and per_attack > 0:
        s.hp = target * per_attack


def _apk_to_damage(s: StatBlock, target: float) -> None:
    chance = _effective_hit_chance(s) / 100
    if target <= 0 or chance <= 0:
        logger.debug("attacks_per_ko=%s cannot be reached by damage; unchanged", target)
        return
    s.damage = _bisect_damage(s, s.hp / (chance * target))


def _bisect_damage(s: StatBlock, goal: float) -> float:
    """Smallest damage whose average effective damage reaches *goal*.

    Average effective damage is non-decreasing in damage, so plain bisection
    converges.  The result is clamped to ``[0, _MAX_DAMAGE_SEARCH]``.
    """
    low, high = 0.0, max(1.0, s.damage)
    while _average_effective_damage(s, high) < goal and high < _MAX_DAMAGE_SEARCH:
        high *= 2
    high = min(high, _MAX_DAMAGE_SEARCH)

    for _ in range(_BISECT_STEPS):
        mid = (low + high) / 2
        if _average_effective_damage(s, mid) < goal:
            low = mid
        else:
            high = mid
        if high - low < _BISECT_TOLERANCE:
            break
    return high


def _effective_damage_to_damage(s: StatBlock, target: float) -> None:
    if target > 0:
        s.damage = calculate_raw_damage_for_effective(
            target, s.armor, s.resistance, s.armor_pen, s.pen_percent, s.config_flat_first,
        )


def _reject(s: StatBlock, target: float) -> None:
    logger.debug("edit rejected by lock; derived value restored from base fields")


def _edpt_to_damage(s: StatBlock, target: float) -> None:
    # In a mirror match EDPT is linear in damage:
    #   edpt = damage * (hit * crit * armor - lifesteal%) - ward - regen
    slope = (
        hit_factor(s.txc, s.evasion)
        * crit_factor(s.crit_chance, s.crit_mult)
        * armor_factor(s.armor)
        - s.lifesteal / 100
    )
    if target <= 0 or slope <= 0:
        logger.debug("edpt=%s cannot be reached by damage; unchanged", target)
        return
    s.damage = (target + s.ward + s.regen) / slope


def _edpt_to_txc(s: StatBlock, target: float) -> None:
    per_hit = s.damage * crit_factor(s.crit_chance, s.crit_mult) * armor_factor(s.armor)
    if target <= 0 or per_hit <= 0:
        logger.debug("edpt=%s cannot be reached by txc; unchanged", target)
        return
    needed = (target + s.ward + s.regen + s.damage * s.lifesteal / 100) / per_hit
    s.txc = s.evasion + (clamp(needed, 0, 1) - BASE_HIT) / HIT_PER_POINT


def _ttk_to_damage(s: StatBlock, target: float) -> None:
    if target > 0:
        _edpt_to_damage(s, s.hp / target)


def _ttk_to_hp(s: StatBlock, target: float) -> None:
    edpt = calculate_edpt(s, s)
    if target > 0 and edpt > 0:
        s.hp = target * edpt


def _early_impact_to_damage(s: StatBlock, target: float) -> None:
    _edpt_to_damage(s, target / EARLY_IMPACT_TURNS)


def _early_impact_to_txc(s: StatBlock, target: float) -> None:
    _edpt_to_txc(s, target / EARLY_IMPACT_TURNS)


_REVERSE_RULES: dict[tuple[str, str | None], ReverseRule] = {
    ("htk", None): _htk_to_damage,
    ("htk", "hp"): _htk_to_damage,
    ("htk", "damage"): _htk_to_hp,
    ("hit_chance", None): _hit_chance_to_txc,
    ("hit_chance", "evasion"): _hit_chance_to_txc,
    ("hit_chance", "txc"): _hit_chance_to_evasion,
    ("attacks_per_ko", None): _apk_to_damage,
    ("attacks_per_ko", "damage"): _apk_to_hp,
    ("effective_damage", None): _effective_damage_to_damage,
    ("effective_damage", "damage"): _reject,
    ("edpt", None): _edpt_to_damage,
    ("edpt", "damage"): _edpt_to_txc,
    ("ttk", None): _ttk_to_damage,
    ("ttk", "damage"): _ttk_to_hp,
    ("early_impact", None): _early_impact_to_damage,
    ("early_impact", "damage"): _early_impact_to_txc,
}


# ---------------------------------------------------------------------------
# Forward rules: base field edited under a lock -> compensate
# ---------------------------------------------------------------------------

def _delta(s: StatBlock, before: StatBlock, field: str) -> float:
    return getattr(s, field) - getattr(before, field)


def _scale_damage_with_hp(s: StatBlock, before: StatBlock) -> None:
    if before.hp > 0:
        s.damage = before.damage * s.hp / before.hp


def _scale_hp_with_damage(s: StatBlock, before: StatBlock) -> None:
    if before.damage > 0:
        s.hp = before.hp * s.damage / before.damage


def _offset_armor_pen(s: StatBlock, before: StatBlock) -> None:
    s.armor_pen = max(0.0, before.armor_pen + _delta(s, before, "armor"))


def _offset_pen_percent(s: StatBlock, before: StatBlock) -> None:
    s.pen_percent = clamp(before.pen_percent + _delta(s, before, "resistance"), 0, 100)


def _offset_evasion(s: StatBlock, before: StatBlock) -> None:
    s.evasion = before.evasion + _delta(s, before, "txc")


def _offset_txc(s: StatBlock, before: StatBlock) -> None:
    s.txc = before.txc + _delta(s, before, "evasion")


def _keep_apk_with_damage(s: StatBlock, before: StatBlock) -> None:
    _apk_to_damage(s, _attacks_per_ko(before))


def _keep_apk_with_hp(s: StatBlock, before: StatBlock) -> None:
    _apk_to_hp(s, _attacks_per_ko(before))


_FORWARD_RULES: dict[tuple[str, str], ForwardRule] = {
    # hits-to-kill held: hp and damage move together
    ("hp", "htk"): _scale_damage_with_hp,
    ("damage", "htk"): _scale_hp_with_damage,
    # attacks per KO held
    ("hp", "attacks_per_ko"): _keep_apk_with_damage,
    ("damage", "attacks_per_ko"): _keep_apk_with_hp,
    ("armor", "attacks_per_ko"): _offset_armor_pen,
    ("resistance", "attacks_per_ko"): _offset_pen_percent,
    ("txc", "attacks_per_ko"): _offset_evasion,
    ("evasion", "attacks_per_ko"): _offset_txc,
    # hit chance held
    ("txc", "hit_chance"): _offset_evasion,
    ("evasion", "hit_chance"): _offset_txc,
    # effective damage held
    ("armor", "effective_damage"): _offset_armor_pen,
    ("resistance", "effective_damage"): _offset_pen_percent,
}
