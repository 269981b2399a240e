"""Archetype templates: percentage stat allocations turned into StatBlocks.

A template spreads an HP-equivalent *budget* over stats.  Each stat receives
``pct / 100 x budget`` points, converted to stat units through the static
weight table::

    value = pct / 100 x budget / STAT_WEIGHTS[stat]

Stats without an allocation keep their ``StatBlock`` default.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from rpg_balance.solver import make_stat_block
from rpg_balance.stats.models import StatBlock, resolve_field_name
from rpg_balance.stats.weights import STAT_WEIGHTS

logger = logging.getLogger(__name__)

ALLOCATION_TOLERANCE = 0.1

PERCENT_STATS = frozenset({"resistance", "crit_chance", "fail_chance", "lifesteal", "block", "pen_percent"})
MULTIPLIER_STATS = frozenset({"crit_mult", "fail_mult"})


class ArchetypeTemplate(BaseModel):
    """A named percentage allocation with a valid budget range."""

    name: str
    allocation: dict[str, float]
    """Stat name -> percent of the budget.  Must sum to 100."""
    min_budget: float = Field(default=20.0, ge=0)
    max_budget: float = Field(default=100.0, ge=0)
    tags: list[str] = Field(default_factory=list)


def validate_allocation(allocation: dict[str, float]) -> None:
    """Raise ``ValueError`` listing every problem with *allocation*."""
    errors: list[str] = []
    for stat, pct in allocation.items():
        if pct < 0:
            errors.append(f"{stat} has negative allocation: {pct}%")
        if pct > 100:
            errors.append(f"{stat} allocation exceeds 100%: {pct}%")

    total = sum(allocation.values())
    if abs(total - 100) > ALLOCATION_TOLERANCE:
        errors.append(f"Allocation sum is {total}%, expected 100% (+/-{ALLOCATION_TOLERANCE}%)")

    if errors:
        raise ValueError("Invalid stat allocation: " + ", ".join(errors))


def round_stat(stat: str, value: float) -> float:
    if stat in PERCENT_STATS:
        return round(value, 1)
    if stat in MULTIPLIER_STATS:
        return round(value, 2)
    return float(round(value))


def build_stat_block(template: ArchetypeTemplate, budget: float) -> StatBlock:
    """Concrete, recalculated StatBlock for *template* at *budget*."""
    if not template.min_budget <= budget <= template.max_budget:
        raise ValueError(
            f"Budget {budget} outside template bounds "
            f"[{template.min_budget}, {template.max_budget}]"
        )
    validate_allocation(template.allocation)

    values: dict[str, float] = {}
    for name, pct in template.allocation.items():
        stat = resolve_field_name(name)
        weight = STAT_WEIGHTS.get(stat)
        if weight is None:
            logger.warning("No weight defined for stat %s, skipping", stat)
            continue
        values[stat] = round_stat(stat, pct / 100 * budget / weight)

    logger.debug("Built %s at budget %s: %s", template.name, budget, values)
    return make_stat_block(**values)


# ---------------------------------------------------------------------------
# Built-in templates
# ---------------------------------------------------------------------------

JUGGERNAUT = ArchetypeTemplate(
    name="Juggernaut",
    allocation={"hp": 40, "armor": 30, "resistance": 10, "damage": 10, "txc": 5, "lifesteal": 3, "regen": 2},
    tags=["tank", "physical"],
)
FORTRESS = ArchetypeTemplate(
    name="Fortress",
    allocation={"hp": 30, "armor": 25, "resistance": 10, "damage": 10, "txc": 5, "block": 20},
    tags=["tank"],
)
REGENERATOR = ArchetypeTemplate(
    name="Regenerator",
    allocation={"hp": 35, "armor": 15, "resistance": 5, "damage": 15, "txc": 5, "lifesteal": 10, "regen": 15},
    tags=["tank", "sustain"],
)
SHIELDBEARER = ArchetypeTemplate(
    name="Shieldbearer",
    allocation={"hp": 30, "armor": 15, "resistance": 5, "damage": 10, "txc": 5, "regen": 5, "ward": 30},
    tags=["tank"],
)
BERSERKER = ArchetypeTemplate(
    name="Berserker",
    allocation={"hp": 20, "damage": 50, "txc": 20, "crit_chance": 10},
    tags=["dps"],
)
MARKSMAN = ArchetypeTemplate(
    name="Marksman",
    allocation={"hp": 25, "damage": 40, "txc": 30, "crit_chance": 5},
    tags=["dps"],
)
DUELIST = ArchetypeTemplate(
    name="Duelist",
    allocation={"hp": 30, "armor": 10, "damage": 30, "txc": 10, "evasion": 20},
    tags=["dps", "evasive"],
)

BUILTIN_ARCHETYPES: dict[str, ArchetypeTemplate] = {
    t.name.lower(): t
    for t in (JUGGERNAUT, FORTRESS, REGENERATOR, SHIELDBEARER, BERSERKER, MARKSMAN, DUELIST)
}


def get_archetype(name: str) -> ArchetypeTemplate:
    try:
        return BUILTIN_ARCHETYPES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown archetype: {name!r}") from None
