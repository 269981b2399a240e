"""Periodic effects (DoT / HoT) -- add, tick, expire.

Operates in place on the ``dots`` list of an ``EffectSet``.  Effects tick at
the start of the turn, before anyone acts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rpg_balance.sim.core.effects import EffectKind, PeriodicEffect, StackMode

if TYPE_CHECKING:
    from rpg_balance.sim.core.entities import Entity


def add_effect(dots: list[PeriodicEffect], new_effect: PeriodicEffect) -> None:
    """Add *new_effect* according to its ``stack_mode``.

    Parameters
    ----------
    dots:
        The entity's active periodic effects.
    new_effect:
        Effect being applied.  An existing effect matches when both ``id``
        and ``source`` are equal.
    """
    mode = new_effect.stack_mode

    if mode is StackMode.SEPARATE:
        dots.append(new_effect.model_copy(update={"stacks": 1}))
        return

    for i, existing in enumerate(dots):
        if existing.id != new_effect.id or existing.source != new_effect.source:
            continue

        if mode is StackMode.NONE:
            dots[i] = existing.model_copy(update={"duration": new_effect.duration})
            return

        stacks = existing.stacks + 1
        if new_effect.max_stacks is not None:
            stacks = min(stacks, new_effect.max_stacks)
        duration = existing.duration
        if mode in (StackMode.INCREMENT_REFRESH, StackMode.INCREMENT_CAPPED):
            duration = max(existing.duration, new_effect.duration)
        dots[i] = existing.model_copy(update={"stacks": stacks, "duration": duration})
        return

    dots.append(new_effect.model_copy(update={"stacks": 1}))


def apply_tick(entity: Entity, effect: PeriodicEffect) -> float:
    """Apply one tick of *effect* to *entity*.

    Damage is floored at 0 HP and healing capped at max HP.  Returns the
    amount actually applied (always >= 0).
    """
    if effect.kind is EffectKind.HEAL:
        return entity.heal(effect.amount)
    return entity.take_damage(effect.amount)


def tick_durations(dots: list[PeriodicEffect]) -> None:
    """Decrement every effect by one turn and drop the expired ones."""
    for effect in dots:
        effect.duration -= 1
    dots[:] = [e for e in dots if e.duration > 0]


def total_per_turn(dots: list[PeriodicEffect]) -> tuple[float, float]:
    """Return ``(damage, heal)`` per turn across all active effects."""
    damage = sum(e.amount for e in dots if e.kind is EffectKind.DAMAGE)
    heal = sum(e.amount for e in dots if e.kind is EffectKind.HEAL)
    return damage, heal


def calculate_total_value(amount_per_turn: float, duration: int, stacks: int = 1) -> float:
    """Total damage (or healing) over an effect's lifetime."""
    return abs(amount_per_turn) * duration * stacks
