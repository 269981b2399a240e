"""Tests for the bidirectional stat constraint solver."""

import pytest

from rpg_balance.solver import make_stat_block, recalculate, solve
from rpg_balance.stats.models import LockedField, StatBlock


def _make_stats(**kwargs) -> StatBlock:
    return make_stat_block(**kwargs)


# ---------------------------------------------------------------------------
# Recalculation
# ---------------------------------------------------------------------------

class TestRecalculate:
    def test_defaults(self):
        stats = _make_stats()
        assert stats.htk == 6
        assert stats.hit_chance == 75
        assert stats.effective_damage == 25
        assert stats.ttk == pytest.approx(150 / 26.25)

    def test_idempotent(self):
        stats = _make_stats(armor=40, resistance=15, lifesteal=5)
        assert recalculate(stats) == stats

    def test_zero_damage_is_infinite(self):
        stats = _make_stats(damage=0)
        assert stats.htk == 999
        assert stats.attacks_per_ko > 0


# ---------------------------------------------------------------------------
# Base field edits
# ---------------------------------------------------------------------------

class TestBaseEdits:
    def test_hp_edit_updates_htk(self):
        result = solve(_make_stats(), "hp", 200)
        assert result.hp == 200
        assert result.htk == 8

    def test_input_not_mutated(self):
        stats = _make_stats()
        solve(stats, "damage", 50)
        assert stats.damage == 25

    def test_camel_case_field(self):
        result = solve(_make_stats(), "critChance", 20)
        assert result.crit_chance == 20

    def test_crit_txc_bonus_by_json_name(self):
        base = _make_stats()
        result = solve(base, "critTxCBonus", 30)
        assert result.crit_txc_bonus == 30
        assert result.attacks_per_ko < base.attacks_per_ko

    def test_fail_txc_malus_by_json_name(self):
        result = solve(_make_stats(), "failTxCMalus", 0)
        assert result.fail_txc_malus == 0

    def test_config_flag_coerced(self):
        result = solve(_make_stats(), "configFlatFirst", 0)
        assert result.config_flat_first is False

    def test_unknown_field_raises(self):
        with pytest.raises(ValueError):
            solve(_make_stats(), "mana", 10)

    def test_unknown_lock_raises(self):
        with pytest.raises(ValueError):
            solve(_make_stats(), "hp", 10, locked_field="mana")


# ---------------------------------------------------------------------------
# Reverse derivation
# ---------------------------------------------------------------------------

class TestReverseHtk:
    def test_htk_moves_damage(self):
        result = solve(_make_stats(), "htk", 5)
        assert result.damage == pytest.approx(30)
        assert result.hp == 150
        assert result.htk == pytest.approx(5)

    def test_htk_with_hp_locked(self):
        result = solve(_make_stats(), "htk", 10, locked_field=LockedField.HP)
        assert result.hp == 150
        assert result.damage == pytest.approx(15)

    def test_htk_with_damage_locked_moves_hp(self):
        result = solve(_make_stats(), "htk", 5, locked_field="damage")
        assert result.damage == 25
        assert result.hp == pytest.approx(125)


class TestReverseHitChance:
    def test_moves_txc(self):
        result = solve(_make_stats(), "hitChance", 90)
        assert result.txc == pytest.approx(40)
        assert result.hit_chance == pytest.approx(90)

    def test_txc_locked_moves_evasion(self):
        result = solve(_make_stats(), "hit_chance", 60, locked_field="txc")
        assert result.txc == 25
        assert result.evasion == pytest.approx(15)
        assert result.hit_chance == pytest.approx(60)

    def test_target_clamped(self):
        result = solve(_make_stats(), "hit_chance", 150)
        assert result.hit_chance == 100


class TestReverseAttacksPerKo:
    def test_moves_damage(self):
        result = solve(_make_stats(), "attacks_per_ko", 10)
        assert result.hp == 150
        assert result.attacks_per_ko == pytest.approx(10, rel=1e-6)

    def test_damage_locked_moves_hp(self):
        result = solve(_make_stats(), "attacksPerKo", 4, locked_field="damage")
        assert result.damage == 25
        assert result.attacks_per_ko == pytest.approx(4)


class TestReverseEffectiveDamage:
    def test_moves_damage_through_armor(self):
        stats = _make_stats(armor=200)
        result = solve(stats, "effective_damage", 10)
        assert result.damage == pytest.approx(20)
        assert result.effective_damage == pytest.approx(10)

    def test_damage_locked_rejects(self):
        stats = _make_stats(armor=200)
        result = solve(stats, "effective_damage", 50, locked_field="damage")
        assert result.damage == stats.damage
        assert result.effective_damage == pytest.approx(stats.effective_damage)


class TestReverseCombatMetrics:
    def test_edpt(self):
        result = solve(_make_stats(), "edpt", 50)
        assert result.edpt == pytest.approx(50)

    def test_edpt_damage_locked_moves_txc(self):
        result = solve(_make_stats(), "edpt", 20, locked_field="damage")
        assert result.damage == 25
        assert result.edpt == pytest.approx(20)

    def test_ttk(self):
        result = solve(_make_stats(), "ttk", 3)
        assert result.ttk == pytest.approx(3)

    def test_ttk_damage_locked_moves_hp(self):
        result = solve(_make_stats(), "ttk", 3, locked_field="damage")
        assert result.damage == 25
        assert result.hp == pytest.approx(78.75)

    def test_early_impact(self):
        result = solve(_make_stats(), "earlyImpact", 150)
        assert result.edpt == pytest.approx(50)
        assert result.early_impact == pytest.approx(150)


# ---------------------------------------------------------------------------
# Forward propagation under a lock
# ---------------------------------------------------------------------------

class TestForwardPropagation:
    def test_hp_with_htk_locked_scales_damage(self):
        result = solve(_make_stats(), "hp", 300, locked_field="htk")
        assert result.damage == pytest.approx(50)
        assert result.htk == pytest.approx(6)

    def test_damage_with_htk_locked_scales_hp(self):
        result = solve(_make_stats(), "damage", 50, locked_field="htk")
        assert result.hp == pytest.approx(300)

    def test_hp_with_apk_locked(self):
        stats = _make_stats()
        result = solve(stats, "hp", 300, locked_field="attacks_per_ko")
        assert result.attacks_per_ko == pytest.approx(stats.attacks_per_ko, rel=1e-6)

    def test_damage_with_apk_locked(self):
        stats = _make_stats()
        result = solve(stats, "damage", 40, locked_field="attacks_per_ko")
        assert result.attacks_per_ko == pytest.approx(stats.attacks_per_ko)

    def test_txc_with_hit_chance_locked(self):
        result = solve(_make_stats(), "txc", 35, locked_field="hit_chance")
        assert result.evasion == pytest.approx(10)
        assert result.hit_chance == pytest.approx(75)

    def test_armor_with_effective_damage_locked(self):
        stats = _make_stats(armor=50)
        result = solve(stats, "armor", 80, locked_field="effective_damage")
        assert result.armor_pen == pytest.approx(30)
        assert result.effective_damage == pytest.approx(stats.effective_damage)

    def test_lock_none_is_no_lock(self):
        result = solve(_make_stats(), "hp", 300, locked_field=LockedField.NONE)
        assert result.damage == 25
