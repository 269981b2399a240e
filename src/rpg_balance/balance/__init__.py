"""Balance analysis: EHP, dynamic weights, calibration, and suggestions."""

from rpg_balance.balance.calibration import StatValueAnalyzer
from rpg_balance.balance.dynamic_weights import (
    DEFENSIVE_STATS,
    DynamicWeightCalculator,
    calculate_synergy_bonus,
)
from rpg_balance.balance.ehp import (
    EHPCalculator,
    calculate_block_reduction,
    calculate_evasion_chance,
    calculate_resistance_reduction,
)
from rpg_balance.balance.models import (
    CalibrationResult,
    EHPResult,
    IncomingHitProfile,
    StatWeightResult,
    Suggestion,
)
from rpg_balance.balance.report import (
    generate_calibration_report,
    generate_matchup_report,
    generate_weight_report,
)
from rpg_balance.balance.suggestions import SuggestionEngine, describe_synergy

__all__ = [
    "DEFENSIVE_STATS",
    "CalibrationResult",
    "DynamicWeightCalculator",
    "EHPCalculator",
    "EHPResult",
    "IncomingHitProfile",
    "StatValueAnalyzer",
    "StatWeightResult",
    "Suggestion",
    "SuggestionEngine",
    "calculate_block_reduction",
    "calculate_evasion_chance",
    "calculate_resistance_reduction",
    "calculate_synergy_bonus",
    "describe_synergy",
    "generate_calibration_report",
    "generate_matchup_report",
    "generate_weight_report",
]
