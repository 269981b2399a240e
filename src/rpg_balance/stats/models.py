"""The StatBlock record and its field catalogue.

A StatBlock holds every numeric attribute of one combatant: the base fields a
designer edits directly, the derived fields the solver keeps in sync, and the
two ordering flags that decide how mitigation is applied.

Field names are snake_case in Python.  The camelCase form (``hitChance``,
``attacksPerKo``, ...) is the JSON alias and is accepted everywhere a field is
named by string.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# StatBlock
# ---------------------------------------------------------------------------

class StatBlock(BaseModel):
    """Numeric attribute record for one combat participant.

    Derived fields are only meaningful after ``rpg_balance.solver.recalculate``
    (or ``make_stat_block``) has run on the block.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # -- core ----------------------------------------------------------------
    hp: float = 150.0
    damage: float = 25.0

    # -- hit / derived -------------------------------------------------------
    txc: float = 25.0
    """Accuracy ("to-hit chance" bonus)."""
    evasion: float = 0.0
    htk: float = 0.0
    """Derived: hp / damage."""
    hit_chance: float = 0.0
    """Derived: 50 + txc - evasion, clamped to [1, 100]."""
    attacks_per_ko: float = 0.0
    """Derived: hp / (effective hit chance x average effective damage)."""
    effective_damage: float = 0.0
    """Derived: damage after the block's own armor/resistance mitigation."""

    # -- critical / fail -----------------------------------------------------
    crit_chance: float = 5.0
    crit_mult: float = 2.0
    crit_txc_bonus: float = Field(default=20.0, alias="critTxCBonus")
    fail_chance: float = 5.0
    fail_mult: float = 0.0
    fail_txc_malus: float = Field(default=20.0, alias="failTxCMalus")

    # -- mitigation / sustain ------------------------------------------------
    armor: float = 0.0
    resistance: float = 0.0
    """Percentage damage reduction against incoming hits."""
    armor_pen: float = 0.0
    pen_percent: float = 0.0
    lifesteal: float = 0.0
    """Percent of dealt damage healed back."""
    regen: float = 0.0
    ward: float = 0.0
    block: float = 0.0
    """Percent chance to negate a landed hit entirely."""
    energy_shield: float = 0.0
    thorns: float = 0.0

    # -- combat metrics (derived) --------------------------------------------
    edpt: float = 0.0
    ttk: float = 0.0
    early_impact: float = 0.0

    # -- ordering flags ------------------------------------------------------
    config_flat_first: bool = True
    """Apply flat armor before percentage resistance."""
    config_apply_before_crit: bool = False
    """Mitigate the base hit before the critical multiplier is applied."""


class LockedField(str, Enum):
    """Fields the solver may be asked to hold fixed while another one moves."""

    NONE = "none"
    HP = "hp"
    DAMAGE = "damage"
    HTK = "htk"
    TXC = "txc"
    EVASION = "evasion"
    HIT_CHANCE = "hit_chance"
    ATTACKS_PER_KO = "attacks_per_ko"
    EFFECTIVE_DAMAGE = "effective_damage"


# ---------------------------------------------------------------------------
# Field catalogue
# ---------------------------------------------------------------------------

STAT_FIELDS: tuple[str, ...] = tuple(StatBlock.model_fields)

DERIVED_FIELDS: frozenset[str] = frozenset({
    "htk",
    "hit_chance",
    "attacks_per_ko",
    "effective_damage",
    "edpt",
    "ttk",
    "early_impact",
})

CONFIG_FIELDS: frozenset[str] = frozenset({
    "config_flat_first",
    "config_apply_before_crit",
})

BASE_FIELDS: tuple[str, ...] = tuple(
    name for name in STAT_FIELDS
    if name not in DERIVED_FIELDS and name not in CONFIG_FIELDS
)

_ALIASES: dict[str, str] = {
    field.alias or to_camel(name): name for name, field in StatBlock.model_fields.items()
}


def resolve_field_name(name: str | LockedField) -> str:
    """Map a snake_case or camelCase field name onto the StatBlock attribute.

    Raises ``ValueError`` for names that are not StatBlock fields.
    """
    if isinstance(name, LockedField):
        name = name.value
    if name in StatBlock.model_fields:
        return name
    if name in _ALIASES:
        return _ALIASES[name]
    raise ValueError(f"Unknown stat field: {name!r}")
