"""Core simulation primitives for the combat simulator."""

from rpg_balance.sim.core.combat_state import (
    CombatLogEntry,
    CombatState,
    LogType,
    Winner,
    create_combat_state,
    format_amount,
)
from rpg_balance.sim.core.effects import (
    Buff,
    EffectKind,
    EffectSet,
    ModifierMode,
    PeriodicEffect,
    Shield,
    StackMode,
    StatModifier,
)
from rpg_balance.sim.core.entities import Entity
from rpg_balance.sim.core.rng import CombatRNG, RandomSource

__all__ = [
    # rng
    "CombatRNG",
    "RandomSource",
    # entities
    "Entity",
    # effects
    "Buff",
    "EffectKind",
    "EffectSet",
    "ModifierMode",
    "PeriodicEffect",
    "Shield",
    "StackMode",
    "StatModifier",
    # combat_state
    "CombatLogEntry",
    "CombatState",
    "LogType",
    "Winner",
    "create_combat_state",
    "format_amount",
]
