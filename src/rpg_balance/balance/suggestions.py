"""Stat suggestions ranked by dynamic value.

The engine asks a ``DynamicWeightCalculator`` for the dynamic weight of
every stat, keeps the top *count* and labels each with a reason derived from
its synergy bonus.
"""

from __future__ import annotations

from rpg_balance.balance.dynamic_weights import DynamicWeightCalculator
from rpg_balance.balance.models import Suggestion
from rpg_balance.stats.models import StatBlock


def describe_synergy(synergy_bonus: float) -> str:
    """Human-readable reason for a synergy bonus (percent)."""
    if synergy_bonus > 50:
        return f"Incredible Synergy! (+{synergy_bonus:.0f}% value)"
    if synergy_bonus > 20:
        return f"Great Synergy (+{synergy_bonus:.0f}% value)"
    if synergy_bonus > 0:
        return f"Good value (+{synergy_bonus:.0f}% synergy)"
    if synergy_bonus < -20:
        return f"Diminishing Returns ({synergy_bonus:.0f}% value)"
    return "Solid base stats"


class SuggestionEngine:
    def __init__(self, calculator: DynamicWeightCalculator | None = None) -> None:
        self.calculator = calculator or DynamicWeightCalculator()

    def get_suggestions(self, current: StatBlock, count: int = 3) -> list[Suggestion]:
        """The *count* stats with the highest dynamic weight for *current*."""
        if count <= 0:
            return []
        weights = self.calculator.calculate_weights(current)
        return [
            Suggestion(
                stat=w.stat,
                reason=describe_synergy(w.synergy_bonus),
                score=w.dynamic_weight,
                synergy_bonus=w.synergy_bonus,
            )
            for w in weights[:count]
        ]
