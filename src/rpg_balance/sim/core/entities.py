"""Combat entities.

An Entity is a StatBlock snapshot plus the live battle state that changes
turn by turn.  Entities are built fresh for every battle; the StatBlock they
were built from is never touched.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from rpg_balance.stats.models import StatBlock


class Entity(BaseModel):
    """One combat participant."""

    id: str
    name: str
    stats: StatBlock = Field(default_factory=StatBlock)
    current_hp: float = 0.0
    team: str = "A"
    """``"A"`` or ``"B"``; assigned when the combat state is created."""
    order: int = 0
    """Turn-order key within a team, lower acts first."""

    @classmethod
    def from_stats(cls, id: str, name: str, stats: StatBlock, order: int = 0) -> Entity:
        """Create an entity at full HP."""
        return cls(id=id, name=name, stats=stats, current_hp=stats.hp, order=order)

    # -- HP queries ----------------------------------------------------------

    @property
    def max_hp(self) -> float:
        return self.stats.hp

    @property
    def is_dead(self) -> bool:
        return self.current_hp <= 0

    # -- damage / heal -------------------------------------------------------

    def take_damage(self, amount: float) -> float:
        """Reduce HP by *amount*, floored at 0.  Returns the HP actually lost."""
        if amount <= 0:
            return 0.0
        hp_lost = min(self.current_hp, amount)
        self.current_hp -= hp_lost
        return hp_lost

    def heal(self, amount: float) -> float:
        """Heal *amount* HP, capped at ``max_hp``.  Returns the HP restored."""
        if amount <= 0 or self.is_dead:
            return 0.0
        healed = min(amount, self.max_hp - self.current_hp)
        if healed <= 0:
            return 0.0
        self.current_hp += healed
        return healed

    def reset(self) -> None:
        """Restore HP to maximum for a new battle."""
        self.current_hp = self.max_hp
