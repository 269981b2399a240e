"""Tests for the closed-form EHP calculator."""

import pytest

from rpg_balance.balance.ehp import (
    MAX_EVASION_CHANCE,
    EHPCalculator,
    calculate_block_reduction,
    calculate_evasion_chance,
    calculate_resistance_reduction,
)
from rpg_balance.balance.models import IncomingHitProfile
from rpg_balance.stats.models import StatBlock


def _make_stats(**kwargs) -> StatBlock:
    defaults = dict(hp=150)
    defaults.update(kwargs)
    return StatBlock(**defaults)


class TestReductions:
    def test_resistance_capped(self):
        assert calculate_resistance_reduction(30) == pytest.approx(0.3)
        assert calculate_resistance_reduction(200) == 0.75

    def test_evasion_capped(self):
        assert calculate_evasion_chance(10_000, 50) <= MAX_EVASION_CHANCE

    def test_evasion_ratio(self):
        assert calculate_evasion_chance(50, 50) == pytest.approx(0.5)

    def test_zero_accuracy_uses_percentage(self):
        assert calculate_evasion_chance(30, 0) == pytest.approx(0.3)

    def test_block_capped(self):
        assert calculate_block_reduction(90) == 0.75


class TestCalculateEhp:
    def test_no_defenses_equals_hp(self):
        result = EHPCalculator().calculate_ehp(_make_stats())
        assert result.physical_ehp == 150
        assert result.magical_ehp == 150
        assert result.mixed_ehp == 150

    def test_armor_only_affects_physical(self):
        # 200 armor vs a 20 hit halves physical damage
        result = EHPCalculator().calculate_ehp(_make_stats(armor=200))
        assert result.physical_ehp == pytest.approx(300)
        assert result.magical_ehp == 150
        assert result.mixed_ehp == pytest.approx(225)

    def test_ward_and_energy_shield_add_to_pool(self):
        result = EHPCalculator().calculate_ehp(_make_stats(ward=30, energy_shield=20))
        assert result.flat_pool == 50
        assert result.mixed_ehp == 200

    def test_block_scales_everything(self):
        result = EHPCalculator().calculate_ehp(_make_stats(block=20))
        assert result.mixed_ehp == pytest.approx(150 / 0.8)

    def test_profile_override(self):
        profile = IncomingHitProfile(physical=100)
        small = EHPCalculator().calculate_ehp(_make_stats(armor=200))
        big = EHPCalculator(profile).calculate_ehp(_make_stats(armor=200))
        assert big.physical_ehp < small.physical_ehp


class TestMarginalValue:
    def test_hp_is_one(self):
        assert EHPCalculator().calculate_marginal_ehp_value(_make_stats(), "hp") == pytest.approx(1.0)

    def test_armor_non_increasing(self):
        calc = EHPCalculator()
        values = [
            calc.calculate_marginal_ehp_value(_make_stats(armor=armor), "armor")
            for armor in (0, 200, 800, 1500, 1799, 1800, 2500)
        ]
        for earlier, later in zip(values, values[1:]):
            assert later <= earlier + 1e-9

    def test_armor_worthless_past_cap(self):
        calc = EHPCalculator()
        assert calc.calculate_marginal_ehp_value(_make_stats(armor=1800), "armor") == pytest.approx(0)
        assert calc.calculate_marginal_ehp_value(_make_stats(armor=2500), "armor") == 0

    def test_camel_case_stat(self):
        calc = EHPCalculator()
        assert calc.calculate_marginal_ehp_value(_make_stats(), "energyShield") == pytest.approx(1.0)

    def test_hp_equivalent(self):
        calc = EHPCalculator()
        assert calc.calculate_hp_equivalent(_make_stats(), "ward", amount=10) == pytest.approx(10)
