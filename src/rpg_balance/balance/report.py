"""Plain-text reports for the balance scripts."""

from __future__ import annotations

from rpg_balance.balance.ehp import EHPCalculator
from rpg_balance.balance.models import CalibrationResult, StatWeightResult, Suggestion
from rpg_balance.sim.results import SimulationResult
from rpg_balance.stats.models import StatBlock


def generate_weight_report(
    stats: StatBlock,
    weights: list[StatWeightResult],
    suggestions: list[Suggestion] | None = None,
) -> str:
    """Summary of a build's EHP, dynamic weights and top suggestions."""
    ehp = EHPCalculator().calculate_ehp(stats)
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append("Stat Weight Report")
    lines.append(
        f"HP: {stats.hp:.0f} | Damage: {stats.damage:.0f}"
        f" | TxC: {stats.txc:.0f} | Evasion: {stats.evasion:.0f}"
    )
    lines.append("=" * 60)

    lines.append("")
    lines.append("## Effective HP")
    lines.append(f"  Physical: {ehp.physical_ehp:.1f}")
    lines.append(f"  Magical:  {ehp.magical_ehp:.1f}")
    lines.append(f"  Mixed:    {ehp.mixed_ehp:.1f}")

    lines.append("")
    lines.append("## Dynamic Weights (HP per point)")
    for w in weights:
        lines.append(
            f"  {w.stat:16s}  base={w.base_weight:7.2f}"
            f"  dynamic={w.dynamic_weight:7.2f}"
            f"  synergy={w.synergy_bonus:+.0f}%"
        )

    if suggestions:
        lines.append("")
        lines.append("## Suggestions")
        for i, s in enumerate(suggestions, 1):
            lines.append(f"  {i}. {s.stat}: {s.reason}")

    lines.append("")
    return "\n".join(lines)


def generate_matchup_report(result: SimulationResult) -> str:
    low, high = result.confidence_interval("A")
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append(f"Matchup Report -- {result.total_battles:,} battles")
    lines.append("=" * 60)
    lines.append(f"  Team A wins: {result.wins_a:6d}  ({result.win_rate_a:.1%})")
    lines.append(f"  Team B wins: {result.wins_b:6d}  ({result.win_rate_b:.1%})")
    lines.append(f"  Draws:       {result.draws:6d}  ({result.draw_rate:.1%})")
    lines.append(f"  95% CI (A):  {low:.1%} - {high:.1%}")
    lines.append(f"  Avg turns:   {result.average_turns:.1f}")
    if result.capped_battles:
        lines.append(f"  Turn-capped: {result.capped_battles}")

    lines.append("")
    return "\n".join(lines)


def generate_calibration_report(results: list[CalibrationResult]) -> str:
    lines: list[str] = ["## Calibrated Weights"]
    for r in results:
        lines.append(
            f"  {r.stat:16s}  weight={r.weight:7.2f}"
            f"  confidence={r.confidence:.2f}  linearity={r.linearity:.2f}"
            f"  n={r.sample_size}"
        )
    lines.append("")
    return "\n".join(lines)
