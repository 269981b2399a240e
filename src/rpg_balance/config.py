"""Simulation settings.

Balance-sensitive policy knobs live here instead of as constants inside the
combat loop.  The core never loads settings on its own; callers pass a
``SimulationSettings`` (or rely on ``DEFAULT_SETTINGS``) and the scripts load
one from JSON when asked to.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class CapPolicy(str, Enum):
    """What happens when a battle reaches the turn cap."""

    DRAW = "draw"
    """The battle is recorded as a draw."""
    HP_TIEBREAK = "hp_tiebreak"
    """The side with more remaining HP wins; equal HP is still a draw."""


class CritFailPrecedence(str, Enum):
    """Which outcome wins when crit and fail both trigger on one attack."""

    CRIT_FIRST = "crit_first"
    FAIL_FIRST = "fail_first"


class InitiativePolicy(str, Enum):
    """Which side acts first in a round's action phase."""

    RANDOM = "random"
    """A coin flip from the battle RNG every round."""
    TEAM_A_FIRST = "team_a_first"
    """Side A always acts first; no random number is consumed."""


class SimulationSettings(BaseModel):
    """Policy for resolving battles."""

    turn_cap: int = Field(default=100, ge=1)
    """Hard per-battle turn limit."""
    cap_policy: CapPolicy = CapPolicy.DRAW
    crit_fail_precedence: CritFailPrecedence = CritFailPrecedence.CRIT_FIRST
    initiative: InitiativePolicy = InitiativePolicy.RANDOM
    default_iterations: int = Field(default=1000, ge=1)
    """Iterations used by analyzers when the caller does not pass a count."""


DEFAULT_SETTINGS = SimulationSettings()


def save_settings(settings: SimulationSettings, path: Path) -> None:
    """Save settings to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.model_dump(mode="json"), indent=2))


def load_settings(path: Path) -> SimulationSettings:
    """Load settings from a JSON file."""
    data = json.loads(path.read_text())
    return SimulationSettings.model_validate(data)
