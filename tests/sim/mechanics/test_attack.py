"""Tests for single-attack resolution."""

import pytest

from rpg_balance.config import CritFailPrecedence
from rpg_balance.sim.core.combat_state import create_combat_state
from rpg_balance.sim.core.effects import Shield
from rpg_balance.sim.core.entities import Entity
from rpg_balance.sim.mechanics.damage import (
    AttackOutcome,
    calculate_attack_damage,
    resolve_attack,
    roll_outcome,
    round_half_up,
)
from rpg_balance.solver import make_stat_block


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_attacker(**kwargs) -> Entity:
    defaults = dict(hp=100, damage=20, txc=100, crit_chance=0, fail_chance=0)
    defaults.update(kwargs)
    return Entity.from_stats("a", "A", make_stat_block(**defaults))


def _make_target(**kwargs) -> Entity:
    defaults = dict(hp=100, damage=0, crit_chance=0, fail_chance=0)
    defaults.update(kwargs)
    return Entity.from_stats("b", "B", make_stat_block(**defaults))


def _setup(rng, attacker=None, target=None):
    attacker = attacker or _make_attacker()
    target = target or _make_target()
    state = create_combat_state([attacker], [target], rng=rng)
    return state, attacker, target


# ---------------------------------------------------------------------------
# Outcome roll
# ---------------------------------------------------------------------------

class TestRollOutcome:
    def test_normal(self, scripted_rng):
        stats = make_stat_block()
        assert roll_outcome(scripted_rng(0.5), stats) is AttackOutcome.NORMAL

    def test_crit(self, scripted_rng):
        stats = make_stat_block(crit_chance=5)
        assert roll_outcome(scripted_rng(0.01, 0.5), stats) is AttackOutcome.CRIT

    def test_fail(self, scripted_rng):
        stats = make_stat_block(fail_chance=5)
        assert roll_outcome(scripted_rng(0.5, 0.01), stats) is AttackOutcome.FAIL

    def test_double_trigger_crit_first(self, scripted_rng):
        stats = make_stat_block(crit_chance=5, fail_chance=5)
        assert roll_outcome(scripted_rng(0.01), stats) is AttackOutcome.CRIT

    def test_double_trigger_fail_first(self, scripted_rng):
        stats = make_stat_block(crit_chance=5, fail_chance=5)
        outcome = roll_outcome(scripted_rng(0.01), stats, CritFailPrecedence.FAIL_FIRST)
        assert outcome is AttackOutcome.FAIL


# ---------------------------------------------------------------------------
# Damage
# ---------------------------------------------------------------------------

class TestAttackDamage:
    def test_armor_halves(self):
        attacker = make_stat_block(damage=20)
        defender = make_stat_block(armor=200)
        assert calculate_attack_damage(attacker, defender, AttackOutcome.NORMAL) == 10

    def test_crit_mitigated_after_multiplier(self):
        attacker = make_stat_block(damage=20, crit_mult=2)
        defender = make_stat_block(armor=200)
        # 40 raw vs 200 armor -> 1/3 reduction -> 26.67 -> 27
        assert calculate_attack_damage(attacker, defender, AttackOutcome.CRIT) == 27

    def test_crit_applied_after_mitigation(self):
        attacker = make_stat_block(damage=20, crit_mult=2)
        defender = make_stat_block(armor=200, config_apply_before_crit=True)
        assert calculate_attack_damage(attacker, defender, AttackOutcome.CRIT) == 20

    def test_fail_with_zero_multiplier_deals_nothing(self):
        attacker = make_stat_block(damage=20, fail_mult=0)
        assert calculate_attack_damage(attacker, make_stat_block(), AttackOutcome.FAIL) == 0

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2


# ---------------------------------------------------------------------------
# resolve_attack
# ---------------------------------------------------------------------------

class TestResolveAttack:
    def test_hit(self, scripted_rng):
        state, attacker, target = _setup(scripted_rng(0.5))
        assert resolve_attack(state, attacker, target) == 20
        assert target.current_hp == 80
        assert "A attacks B for 20 damage. (80/100 HP left)" in state.messages()

    def test_miss(self, scripted_rng):
        state, attacker, target = _setup(scripted_rng(0.5), attacker=_make_attacker(txc=-100))
        assert resolve_attack(state, attacker, target) == 0
        assert target.current_hp == 100
        assert state.messages() == ["A misses B (Chance: 1%)"]

    def test_crit(self, scripted_rng):
        state, attacker, target = _setup(scripted_rng(0.5), attacker=_make_attacker(crit_chance=100))
        resolve_attack(state, attacker, target)
        assert "A CRITS!" in state.messages()
        assert target.current_hp == 60

    def test_fumble(self, scripted_rng):
        state, attacker, target = _setup(scripted_rng(0.5), attacker=_make_attacker(fail_chance=100))
        resolve_attack(state, attacker, target)
        assert "A fumbles the attack!" in state.messages()
        assert target.current_hp == 100

    def test_block(self, scripted_rng):
        state, attacker, target = _setup(scripted_rng(0.5), target=_make_target(block=100))
        assert resolve_attack(state, attacker, target) == 0
        assert "B blocks the attack from A!" in state.messages()

    def test_shield_absorbs_then_breaks(self, scripted_rng):
        state, attacker, target = _setup(
            scripted_rng(0.5), attacker=_make_attacker(damage=100), target=_make_target(hp=200),
        )
        state.effects_for(target).buffs.append(Shield(id="barrier", source="Barrier", capacity=20))

        assert resolve_attack(state, attacker, target) == 80
        assert target.current_hp == 120
        assert state.effects_for(target).buffs == []
        assert any("shield absorbs 20 damage" in m for m in state.messages())

    def test_lifesteal(self, scripted_rng):
        attacker = _make_attacker(lifesteal=50)
        attacker.current_hp = 50
        state, attacker, target = _setup(scripted_rng(0.5), attacker=attacker)
        resolve_attack(state, attacker, target)
        assert attacker.current_hp == 60
        assert "A heals 10 HP (lifesteal)" in state.messages()

    def test_lifesteal_ignores_overkill(self, scripted_rng):
        attacker = _make_attacker(damage=100, lifesteal=50)
        attacker.current_hp = 10
        state, attacker, target = _setup(scripted_rng(0.5), attacker=attacker, target=_make_target(hp=5))
        assert resolve_attack(state, attacker, target) == 5
        assert attacker.current_hp == pytest.approx(12.5)

    def test_lifesteal_counts_shield_absorbed_damage(self, scripted_rng):
        attacker = _make_attacker(damage=100, lifesteal=50)
        attacker.current_hp = 10
        state, attacker, target = _setup(scripted_rng(0.5), attacker=attacker, target=_make_target(hp=200))
        state.effects_for(target).buffs.append(Shield(id="barrier", source="Barrier", capacity=20))
        resolve_attack(state, attacker, target)
        assert attacker.current_hp == pytest.approx(60)

    def test_thorns(self, scripted_rng):
        state, attacker, target = _setup(scripted_rng(0.5), target=_make_target(thorns=5))
        resolve_attack(state, attacker, target)
        assert attacker.current_hp == 95
        assert "A takes 5 thorns damage from B" in state.messages()

    def test_kill_logged(self, scripted_rng):
        state, attacker, target = _setup(scripted_rng(0.5), target=_make_target(hp=10))
        resolve_attack(state, attacker, target)
        assert target.is_dead
        assert state.messages()[-1] == "B dies!"

    def test_fixed_roll_order(self, scripted_rng):
        rng = scripted_rng(0.5)
        state, attacker, target = _setup(rng, target=_make_target(block=10))
        resolve_attack(state, attacker, target)
        # crit, fail, hit, block
        assert rng.calls == 4

    def test_no_block_roll_without_block(self, scripted_rng):
        rng = scripted_rng(0.5)
        state, attacker, target = _setup(rng)
        resolve_attack(state, attacker, target)
        assert rng.calls == 3


def test_effective_stats_used_for_damage(scripted_rng):
    from rpg_balance.sim.core.effects import StatModifier

    state, attacker, target = _setup(scripted_rng(0.5))
    state.effects_for(attacker).buffs.append(StatModifier(id="rage", stat="damage", value=10, duration=2))
    assert resolve_attack(state, attacker, target) == pytest.approx(30)
