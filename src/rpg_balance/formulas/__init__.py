"""Pure combat formulas.

Re-exports the primary functions from each formula module for convenience.

Usage::

    from rpg_balance.formulas import (
        calculate_htk, calculate_hit_chance,
        calculate_effective_hit_chance, calculate_average_damage_multiplier,
        calculate_effective_damage, calculate_average_effective_damage,
        calculate_lifesteal_heal, calculate_regen_heal,
    )
"""

# -- core --------------------------------------------------------------------
from .core import (
    INFINITE,
    calculate_damage_for_htk,
    calculate_hp_for_htk,
    calculate_htk,
    clamp,
)

# -- hit chance --------------------------------------------------------------
from .hit_chance import (
    BASE_HIT_CHANCE,
    calculate_attacks_per_ko,
    calculate_consistency,
    calculate_evasion_for_chance,
    calculate_hit_chance,
    calculate_txc_for_chance,
    calculate_txc_from_consistency,
)

# -- critical ----------------------------------------------------------------
from .critical import (
    calculate_average_damage_multiplier,
    calculate_critical_damage,
    calculate_effective_hit_chance,
    outcome_probabilities,
)

# -- mitigation --------------------------------------------------------------
from .mitigation import (
    armor_reduction,
    calculate_average_effective_damage,
    calculate_effective_damage,
    calculate_raw_damage_for_effective,
    effective_armor,
    effective_resistance,
    mitigate_hit,
)

# -- sustain -----------------------------------------------------------------
from .sustain import (
    SustainValue,
    apply_healing_cap,
    calculate_lifesteal_heal,
    calculate_regen_heal,
    calculate_sustain_value,
)

__all__ = [
    # core
    "INFINITE",
    "calculate_damage_for_htk",
    "calculate_hp_for_htk",
    "calculate_htk",
    "clamp",
    # hit chance
    "BASE_HIT_CHANCE",
    "calculate_attacks_per_ko",
    "calculate_consistency",
    "calculate_evasion_for_chance",
    "calculate_hit_chance",
    "calculate_txc_for_chance",
    "calculate_txc_from_consistency",
    # critical
    "calculate_average_damage_multiplier",
    "calculate_critical_damage",
    "calculate_effective_hit_chance",
    "outcome_probabilities",
    # mitigation
    "armor_reduction",
    "calculate_average_effective_damage",
    "calculate_effective_damage",
    "calculate_raw_damage_for_effective",
    "effective_armor",
    "effective_resistance",
    "mitigate_hit",
    # sustain
    "SustainValue",
    "apply_healing_cap",
    "calculate_lifesteal_heal",
    "calculate_regen_heal",
    "calculate_sustain_value",
]
