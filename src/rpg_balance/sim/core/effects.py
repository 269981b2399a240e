"""Effect data models: buffs and periodic effects.

Buffs are a closed tagged union discriminated by ``kind``:

- ``StatModifier`` temporarily changes one StatBlock field.
- ``Shield`` absorbs incoming damage before HP.

Periodic effects (DoT / HoT) tick at the start of every turn.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class ModifierMode(str, Enum):
    ADDITIVE = "additive"
    """Flat bonus added to the base value."""
    MULTIPLICATIVE = "multiplicative"
    """Percent bonus: a value of 20 multiplies by 1.20."""


class StackMode(str, Enum):
    """How a re-applied periodic effect interacts with an existing one."""

    NONE = "none"
    """Refresh duration only."""
    SEPARATE = "separate"
    """Every application is an independent instance."""
    INCREMENT = "increment"
    """One more stack, duration untouched."""
    INCREMENT_REFRESH = "increment_refresh"
    """One more stack and the longer of the two durations."""
    INCREMENT_CAPPED = "increment_capped"
    """Like ``INCREMENT_REFRESH`` but never above ``max_stacks``."""


class EffectKind(str, Enum):
    DAMAGE = "damage"
    HEAL = "heal"


# ---------------------------------------------------------------------------
# Buffs
# ---------------------------------------------------------------------------

class StatModifier(BaseModel):
    kind: Literal["stat_modifier"] = "stat_modifier"
    id: str
    source: str = ""
    stat: str
    """StatBlock field name (snake_case or camelCase)."""
    value: float
    mode: ModifierMode = ModifierMode.ADDITIVE
    duration: int
    stackable: bool = False
    stacks: int = 1


class Shield(BaseModel):
    kind: Literal["shield"] = "shield"
    id: str
    source: str = ""
    capacity: float
    remaining: float | None = None
    """Capacity left; starts equal to ``capacity``."""
    duration: int | None = None
    """Turns left, or ``None`` for a shield that lasts the whole battle."""

    def model_post_init(self, __context: object) -> None:
        if self.remaining is None:
            self.remaining = self.capacity


Buff = Annotated[Union[StatModifier, Shield], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Periodic effects
# ---------------------------------------------------------------------------

class PeriodicEffect(BaseModel):
    """Damage or healing applied once per turn at turn start."""

    id: str
    kind: EffectKind = EffectKind.DAMAGE
    source: str = ""
    """Display name used in log messages, e.g. ``"Poison"``."""
    amount_per_turn: float
    duration: int
    stacks: int = 1
    stack_mode: StackMode = StackMode.INCREMENT_REFRESH
    max_stacks: int | None = None

    @property
    def amount(self) -> float:
        """Per-turn magnitude including stacks."""
        return abs(self.amount_per_turn) * self.stacks


# ---------------------------------------------------------------------------
# Per-entity effect set
# ---------------------------------------------------------------------------

class EffectSet(BaseModel):
    buffs: list[Buff] = Field(default_factory=list)
    dots: list[PeriodicEffect] = Field(default_factory=list)
