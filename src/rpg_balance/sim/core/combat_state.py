"""Battle state for the turn-based combat state machine.

``CombatState`` owns both rosters, the turn counter, the winner and the
append-only combat log.  It is created once per battle by
``create_combat_state``, advanced by ``rpg_balance.sim.combat`` and discarded
once the winner has been read.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from rpg_balance.config import DEFAULT_SETTINGS, SimulationSettings
from rpg_balance.sim.core.effects import EffectSet, Shield
from rpg_balance.sim.core.entities import Entity
from rpg_balance.sim.core.rng import CombatRNG

WARD_SHIELD_ID = "ward"


class Winner(str, Enum):
    TEAM_A = "teamA"
    TEAM_B = "teamB"
    DRAW = "draw"


class LogType(str, Enum):
    TURN = "turn"
    ATTACK = "attack"
    MISS = "miss"
    CRIT = "crit"
    FAIL = "fail"
    BLOCK = "block"
    SHIELD = "shield"
    DOT = "dot"
    HEAL = "heal"
    DEATH = "death"
    END = "end"


class CombatLogEntry(BaseModel):
    """One structured combat event."""

    turn: int
    type: LogType
    message: str
    actor: str | None = None
    target: str | None = None
    amount: float | None = None


# ---------------------------------------------------------------------------
# CombatState
# ---------------------------------------------------------------------------

class CombatState(BaseModel):
    """Full mutable state of a single battle."""

    model_config = {"arbitrary_types_allowed": True}

    team_a: list[Entity]
    team_b: list[Entity]
    turn: int = 0
    is_finished: bool = False
    winner: Winner | None = None
    capped: bool = False
    """True when the battle was ended by the turn cap rather than a KO."""
    log: list[CombatLogEntry] = Field(default_factory=list)
    effects: dict[str, EffectSet] = Field(default_factory=dict)
    """Active buffs and periodic effects, keyed by entity id."""
    settings: SimulationSettings = Field(default_factory=lambda: DEFAULT_SETTINGS)
    rng: Any = Field(default=None, exclude=True)
    """Any ``RandomSource``.  Excluded from serialization."""

    # -- queries -------------------------------------------------------------

    @property
    def entities(self) -> list[Entity]:
        return [*self.team_a, *self.team_b]

    def get_entity(self, entity_id: str) -> Entity:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        raise KeyError(entity_id)

    def effects_for(self, entity: Entity) -> EffectSet:
        return self.effects.setdefault(entity.id, EffectSet())

    def living(self, team: str) -> list[Entity]:
        roster = self.team_a if team == "A" else self.team_b
        return [e for e in roster if not e.is_dead]

    def opponents_of(self, entity: Entity) -> list[Entity]:
        return self.living("B" if entity.team == "A" else "A")

    def turn_order(self, first: str = "A") -> list[Entity]:
        """Side *first* before the other side, each by ``order`` then roster position."""
        ordered_a = [e for _, e in sorted(enumerate(self.team_a), key=lambda p: (p[1].order, p[0]))]
        ordered_b = [e for _, e in sorted(enumerate(self.team_b), key=lambda p: (p[1].order, p[0]))]
        if first == "B":
            return ordered_b + ordered_a
        return ordered_a + ordered_b

    # -- log -----------------------------------------------------------------

    def add_log(
        self,
        type: LogType,
        message: str,
        actor: Entity | None = None,
        target: Entity | None = None,
        amount: float | None = None,
    ) -> None:
        self.log.append(CombatLogEntry(
            turn=self.turn,
            type=type,
            message=message,
            actor=actor.id if actor is not None else None,
            target=target.id if target is not None else None,
            amount=amount,
        ))

    def messages(self) -> list[str]:
        return [entry.message for entry in self.log]


def format_amount(value: float) -> str:
    """Render HP and damage for log messages: ``20`` rather than ``20.0``."""
    rounded = round(value, 1)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def create_combat_state(
    team_a: list[Entity],
    team_b: list[Entity],
    rng: Any = None,
    settings: SimulationSettings | None = None,
) -> CombatState:
    """Assemble a fresh battle.

    Assigns team membership, gives every entity an empty effect set and
    grants a battle-long "Ward" shield to entities with ward or energy
    shield.  Uses a freshly seeded ``CombatRNG`` when *rng* is omitted.

    Raises ``ValueError`` if two entities share an id, since effects are
    keyed by id.
    """
    ids = [entity.id for entity in [*team_a, *team_b]]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"Duplicate entity ids in battle: {duplicates}")

    for entity in team_a:
        entity.team = "A"
    for entity in team_b:
        entity.team = "B"

    state = CombatState(
        team_a=team_a,
        team_b=team_b,
        settings=settings or DEFAULT_SETTINGS,
        rng=rng if rng is not None else CombatRNG(),
    )

    for entity in state.entities:
        effects = state.effects_for(entity)
        pool = entity.stats.ward + entity.stats.energy_shield
        if pool > 0:
            effects.buffs.append(Shield(id=WARD_SHIELD_ID, source="Ward", capacity=pool))

    return state
