"""Stat model: the StatBlock record, its field catalogue and static weights."""

from rpg_balance.stats.models import (
    BASE_FIELDS,
    CONFIG_FIELDS,
    DERIVED_FIELDS,
    STAT_FIELDS,
    LockedField,
    StatBlock,
    resolve_field_name,
)
from rpg_balance.stats.weights import (
    CORE_STAT_WEIGHTS,
    STAT_WEIGHTS,
    StatWeight,
    calculate_item_power,
    get_stat_weight,
    is_stat_calibrated,
)

__all__ = [
    "BASE_FIELDS",
    "CONFIG_FIELDS",
    "CORE_STAT_WEIGHTS",
    "DERIVED_FIELDS",
    "LockedField",
    "STAT_FIELDS",
    "STAT_WEIGHTS",
    "StatBlock",
    "StatWeight",
    "calculate_item_power",
    "get_stat_weight",
    "is_stat_calibrated",
    "resolve_field_name",
]
