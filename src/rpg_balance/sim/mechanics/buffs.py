"""Buff lifecycle -- add, resolve, tick, absorb, expire.

Operates in place on the ``buffs`` list of an ``EffectSet``.  Stat
modifiers resolve as::

    (base + sum(additive)) * prod(1 + percent / 100)

with every term scaled by its stack count.  Shields absorb damage in the order
they were added and are removed once depleted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from rpg_balance.sim.core.effects import ModifierMode, Shield, StatModifier
from rpg_balance.stats.models import resolve_field_name
from rpg_balance.stats.weights import get_stat_weight

if TYPE_CHECKING:
    from rpg_balance.sim.core.effects import Buff
    from rpg_balance.stats.models import StatBlock

logger = logging.getLogger(__name__)

# A temporary buff is worth this fraction of the same permanent stat.
_TEMPORARY_FACTOR = 0.6


def apply_stat_modifiers(base: float, buffs: list[Buff], stat: str) -> float:
    """Resolve *stat* through every matching stat modifier."""
    additive = 0.0
    multiplier = 1.0
    for buff in buffs:
        if not isinstance(buff, StatModifier) or _canonical(buff.stat) != stat:
            continue
        value = buff.value * buff.stacks
        if buff.mode is ModifierMode.MULTIPLICATIVE:
            multiplier *= 1 + value / 100
        else:
            additive += value
    return (base + additive) * multiplier


def effective_stats(stats: StatBlock, buffs: list[Buff]) -> StatBlock:
    """Return *stats* with all stat modifiers applied (or *stats* itself)."""
    touched: set[str] = set()
    for buff in buffs:
        if not isinstance(buff, StatModifier):
            continue
        try:
            touched.add(resolve_field_name(buff.stat))
        except ValueError:
            logger.warning("Buff %r modifies unknown stat %r; ignored", buff.id, buff.stat)
    if not touched:
        return stats
    return stats.model_copy(update={
        stat: apply_stat_modifiers(getattr(stats, stat), buffs, stat)
        for stat in touched
    })


def add_buff(buffs: list[Buff], new_buff: Buff) -> None:
    """Add *new_buff*, refreshing or stacking an existing buff with the same id.

    Non-stackable buffs (and shields) refresh their duration.  Stackable
    modifiers gain a stack and keep the longer of the two durations.
    """
    for i, existing in enumerate(buffs):
        if existing.id != new_buff.id or existing.kind != new_buff.kind:
            continue
        if isinstance(existing, StatModifier) and isinstance(new_buff, StatModifier) and new_buff.stackable:
            buffs[i] = existing.model_copy(update={
                "stacks": existing.stacks + 1,
                "duration": max(existing.duration, new_buff.duration),
            })
        elif isinstance(existing, Shield) and isinstance(new_buff, Shield):
            buffs[i] = existing.model_copy(update={
                "duration": new_buff.duration,
                "remaining": max(existing.remaining or 0.0, new_buff.remaining or 0.0),
            })
        else:
            buffs[i] = existing.model_copy(update={"duration": new_buff.duration})
        return
    buffs.append(new_buff)


def tick_buffs(buffs: list[Buff]) -> None:
    """Decrement every timed buff's duration by one turn."""
    for buff in buffs:
        if buff.duration is not None:
            buff.duration -= 1


def remove_expired_buffs(buffs: list[Buff]) -> None:
    """Drop buffs whose duration ran out and shields with nothing left."""
    buffs[:] = [b for b in buffs if not _is_expired(b)]


def total_shield(buffs: list[Buff]) -> float:
    return sum(b.remaining or 0.0 for b in buffs if isinstance(b, Shield))


def absorb_with_shields(buffs: list[Buff], damage: float) -> tuple[float, float]:
    """Soak *damage* with shields, in order.

    Returns ``(absorbed, overflow)``.  Depleted shields are removed.
    """
    remaining = damage
    absorbed = 0.0
    for buff in buffs:
        if remaining <= 0:
            break
        if not isinstance(buff, Shield):
            continue
        soaked = min(buff.remaining or 0.0, remaining)
        buff.remaining = (buff.remaining or 0.0) - soaked
        remaining -= soaked
        absorbed += soaked
    buffs[:] = [b for b in buffs if not (isinstance(b, Shield) and (b.remaining or 0.0) <= 0)]
    return absorbed, remaining


def calculate_buff_power(buff: Buff, weights: Mapping[str, float] | None = None) -> float:
    """HP-equivalent value of a buff.

    Shields are worth their capacity once per turn of duration; stat
    modifiers are worth ``value x weight x duration x 0.6``.
    """
    if isinstance(buff, Shield):
        return buff.capacity * (buff.duration if buff.duration is not None else 1)

    if weights is None:
        weight = get_stat_weight(buff.stat)
    else:
        weight = weights.get(_canonical(buff.stat), 1.0)
    return buff.value * buff.stacks * weight * buff.duration * _TEMPORARY_FACTOR


def _canonical(stat: str) -> str:
    try:
        return resolve_field_name(stat)
    except ValueError:
        return stat


def _is_expired(buff: Buff) -> bool:
    if buff.duration is not None and buff.duration <= 0:
        return True
    return isinstance(buff, Shield) and (buff.remaining or 0.0) <= 0
