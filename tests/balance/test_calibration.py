"""Tests for equilibrium-HP calibration."""

import pytest

from rpg_balance.balance.calibration import StatValueAnalyzer
from rpg_balance.config import SimulationSettings
from rpg_balance.solver import make_stat_block


@pytest.fixture(scope="module")
def damage_result():
    analyzer = StatValueAnalyzer(seed=3)
    return analyzer.calibrate_stat("damage", increment=5, iterations=60, passes=2)


class TestCalibrateStat:
    def test_result_fields(self, damage_result):
        assert damage_result.stat == "damage"
        assert damage_result.sample_size == 120

    def test_scores_bounded(self, damage_result):
        assert 0 <= damage_result.confidence <= 1
        assert 0 <= damage_result.linearity <= 1

    def test_weight_within_search_range(self, damage_result):
        # search spans hp .. hp + 20 x increment
        assert 0 <= damage_result.weight <= 20


class TestEquilibriumWeight:
    def test_unwinnable_search_saturates(self):
        # With no damage on either side every battle is a draw, the defender
        # never reaches an even win rate and the search runs to its upper bound.
        analyzer = StatValueAnalyzer(
            baseline=make_stat_block(damage=0),
            settings=SimulationSettings(turn_cap=3),
        )
        assert analyzer.equilibrium_weight("txc", 10, iterations=5) == pytest.approx(19.9)

    def test_camel_case(self):
        analyzer = StatValueAnalyzer(settings=SimulationSettings(turn_cap=20))
        weight = analyzer.equilibrium_weight("critChance", 10, iterations=20)
        assert 0 <= weight <= 20
