"""Combat mechanics for the simulator.

Re-exports the primary functions from each mechanics module for convenience.

Usage::

    from rpg_balance.sim.mechanics import (
        resolve_attack, calculate_attack_damage, roll_outcome,
        add_buff, effective_stats, tick_buffs, remove_expired_buffs, absorb_with_shields,
        add_effect, apply_tick, tick_durations,
    )
"""

# -- damage ------------------------------------------------------------------
from .damage import (
    AttackOutcome,
    attack_hit_chance,
    calculate_attack_damage,
    resolve_attack,
    roll_outcome,
    round_half_up,
)

# -- buffs -------------------------------------------------------------------
from .buffs import (
    absorb_with_shields,
    add_buff,
    apply_stat_modifiers,
    calculate_buff_power,
    effective_stats,
    remove_expired_buffs,
    tick_buffs,
    total_shield,
)

# -- periodic effects --------------------------------------------------------
from .dots import (
    add_effect,
    apply_tick,
    calculate_total_value,
    tick_durations,
    total_per_turn,
)

__all__ = [
    # damage
    "AttackOutcome",
    "attack_hit_chance",
    "calculate_attack_damage",
    "resolve_attack",
    "roll_outcome",
    "round_half_up",
    # buffs
    "absorb_with_shields",
    "add_buff",
    "apply_stat_modifiers",
    "calculate_buff_power",
    "effective_stats",
    "remove_expired_buffs",
    "tick_buffs",
    "total_shield",
    # periodic effects
    "add_effect",
    "apply_tick",
    "calculate_total_value",
    "tick_durations",
    "total_per_turn",
]
