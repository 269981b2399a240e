"""Pydantic v2 models for balance analysis output.

These models are the structured results of the EHP calculator, the
dynamic weight analysis, the equilibrium calibration and the suggestion
engine.  All are serializable to/from JSON.
"""

from __future__ import annotations

from pydantic import BaseModel


class IncomingHitProfile(BaseModel):
    """Assumed enemy attack used by the closed-form EHP calculation."""

    physical: float = 20.0
    """Average physical hit; armor is weaker against bigger hits."""
    magical: float = 20.0
    accuracy: float = 50.0
    """Enemy accuracy rating opposing our evasion."""


class EHPResult(BaseModel):
    """Effective health pool of one StatBlock against an incoming-hit profile."""

    base_hp: float
    physical_ehp: float
    magical_ehp: float
    mixed_ehp: float
    """Mean of physical and magical EHP."""
    effective_armor_reduction: float
    effective_resistance_reduction: float
    effective_evasion_chance: float
    block_reduction: float = 0.0
    flat_pool: float = 0.0
    """Ward plus energy shield, added to HP before mitigation scaling."""


class StatWeightResult(BaseModel):
    """Static versus measured HP-equivalent value of one stat."""

    stat: str
    base_weight: float
    dynamic_weight: float
    synergy_bonus: float
    """Percent difference of the dynamic weight against the base weight."""


class Suggestion(BaseModel):
    stat: str
    reason: str
    score: float
    """The dynamic weight (HP value per point)."""
    synergy_bonus: float


class CalibrationResult(BaseModel):
    """Equilibrium-HP weight of one stat measured by simulation."""

    stat: str
    weight: float
    """HP per point of the stat."""
    confidence: float
    """0..1, from the spread across passes."""
    linearity: float
    """0..1, agreement between the weight at 1x and 2x the increment."""
    sample_size: int
    """Battles per binary-search probe times passes."""
