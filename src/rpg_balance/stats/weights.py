"""Static HP-equivalent stat weights.

Each weight is the number of HP points that one point of the stat is worth
against the default baseline.  The table is the static reference the dynamic
weight analysis measures its synergy bonus against.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel

from rpg_balance.stats.models import resolve_field_name


class StatWeight(BaseModel):
    """A calibrated weight together with how trustworthy it is."""

    stat: str
    avg_ratio: float
    """HP per one point of the stat."""
    confidence: float
    """0..1, derived from the spread across calibration passes."""
    data_points: int
    linearity_score: float | None = None


CORE_STAT_WEIGHTS: dict[str, StatWeight] = {
    w.stat: w
    for w in (
        StatWeight(stat="damage", avg_ratio=3.5, confidence=0.95, data_points=7, linearity_score=0.98),
        StatWeight(stat="txc", avg_ratio=2.0, confidence=0.92, data_points=7, linearity_score=0.95),
        StatWeight(stat="crit_chance", avg_ratio=5.0, confidence=0.90, data_points=7, linearity_score=0.93),
        StatWeight(stat="evasion", avg_ratio=2.0, confidence=0.92, data_points=7, linearity_score=0.95),
        StatWeight(stat="armor", avg_ratio=1.8, confidence=0.88, data_points=7, linearity_score=0.85),
        StatWeight(stat="resistance", avg_ratio=100.0, confidence=0.90, data_points=7, linearity_score=0.90),
        StatWeight(stat="armor_pen", avg_ratio=1.5, confidence=0.85, data_points=5),
        StatWeight(stat="pen_percent", avg_ratio=80.0, confidence=0.85, data_points=5),
        StatWeight(stat="lifesteal", avg_ratio=40.0, confidence=0.80, data_points=5),
        StatWeight(stat="regen", avg_ratio=15.0, confidence=0.80, data_points=5),
        StatWeight(stat="ward", avg_ratio=1.5, confidence=0.85, data_points=5),
        StatWeight(stat="block", avg_ratio=80.0, confidence=0.80, data_points=5),
    )
}

# HP = 1.0 reference.  Percentage-based stats carry the large weights.
STAT_WEIGHTS: dict[str, float] = {
    "hp": 1.0,
    "damage": 3.5,
    "txc": 2.0,
    "evasion": 2.0,
    "armor": 1.8,
    "resistance": 100.0,
    "crit_chance": 5.0,
    "lifesteal": 40.0,
    "regen": 15.0,
    "ward": 1.5,
    "block": 80.0,
}

_DEFAULT_WEIGHT = 1.0


def _canonical(stat: str) -> str:
    try:
        return resolve_field_name(stat)
    except ValueError:
        return stat


def get_stat_weight(stat: str) -> float:
    """Return the HP-equivalent weight of *stat*.

    Calibrated entries win over the normalized table; stats with no entry in
    either fall back to a neutral weight of 1.0.
    """
    key = _canonical(stat)
    entry = CORE_STAT_WEIGHTS.get(key)
    if entry is not None:
        return entry.avg_ratio
    return STAT_WEIGHTS.get(key, _DEFAULT_WEIGHT)


def is_stat_calibrated(stat: str) -> bool:
    entry = CORE_STAT_WEIGHTS.get(_canonical(stat))
    return entry is not None and entry.data_points > 0


def calculate_item_power(stats: Mapping[str, float]) -> float:
    """Sum ``value * weight`` over a partial stat mapping.

    ``{"hp": 10, "damage": 5, "armor": 3}`` -> 10 + 17.5 + 5.4 = 32.9
    """
    return sum(value * get_stat_weight(stat) for stat, value in stats.items())
