"""Tests for combat entities and combat state construction."""

import pytest

from rpg_balance.sim.core.combat_state import WARD_SHIELD_ID, create_combat_state, format_amount
from rpg_balance.sim.core.effects import PeriodicEffect, Shield
from rpg_balance.sim.core.entities import Entity
from rpg_balance.sim.core.rng import CombatRNG
from rpg_balance.solver import make_stat_block


def _make_entity(id: str = "e1", **stats) -> Entity:
    return Entity.from_stats(id, id.upper(), make_stat_block(**stats))


class TestEntityHp:
    def test_starts_at_full_hp(self):
        entity = _make_entity(hp=80)
        assert entity.current_hp == 80
        assert entity.max_hp == 80

    def test_take_damage_floored(self):
        entity = _make_entity(hp=30)
        assert entity.take_damage(50) == 30
        assert entity.current_hp == 0
        assert entity.is_dead

    def test_negative_damage_ignored(self):
        entity = _make_entity(hp=30)
        assert entity.take_damage(-5) == 0
        assert entity.current_hp == 30

    def test_heal_capped(self):
        entity = _make_entity(hp=100)
        entity.current_hp = 95
        assert entity.heal(20) == 5
        assert entity.current_hp == 100

    def test_dead_cannot_heal(self):
        entity = _make_entity(hp=100)
        entity.current_hp = 0
        assert entity.heal(20) == 0
        assert entity.is_dead

    def test_reset(self):
        entity = _make_entity(hp=100)
        entity.take_damage(60)
        entity.reset()
        assert entity.current_hp == 100


class TestCombatState:
    def test_assigns_teams(self):
        a, b = _make_entity("a"), _make_entity("b")
        state = create_combat_state([a], [b], rng=CombatRNG(0))
        assert a.team == "A"
        assert b.team == "B"
        assert state.opponents_of(a) == [b]

    def test_ward_becomes_shield(self):
        a = _make_entity("a", ward=30, energy_shield=10)
        state = create_combat_state([a], [_make_entity("b")], rng=CombatRNG(0))
        shields = [buff for buff in state.effects_for(a).buffs if isinstance(buff, Shield)]
        assert len(shields) == 1
        assert shields[0].id == WARD_SHIELD_ID
        assert shields[0].remaining == 40
        assert shields[0].duration is None

    def test_no_shield_without_ward(self):
        a = _make_entity("a")
        state = create_combat_state([a], [_make_entity("b")], rng=CombatRNG(0))
        assert state.effects_for(a).buffs == []

    def test_turn_order_respects_order_then_position(self):
        a1 = Entity.from_stats("a1", "A1", make_stat_block(), order=2)
        a2 = Entity.from_stats("a2", "A2", make_stat_block(), order=1)
        b1 = _make_entity("b1")
        state = create_combat_state([a1, a2], [b1], rng=CombatRNG(0))
        assert [e.id for e in state.turn_order()] == ["a2", "a1", "b1"]
        assert [e.id for e in state.turn_order("B")] == ["b1", "a2", "a1"]

    def test_get_entity(self):
        a = _make_entity("a")
        state = create_combat_state([a], [_make_entity("b")], rng=CombatRNG(0))
        assert state.get_entity("a") is a
        with pytest.raises(KeyError):
            state.get_entity("zzz")

    def test_rng_excluded_from_dump(self):
        state = create_combat_state([_make_entity("a")], [_make_entity("b")], rng=CombatRNG(0))
        state.effects_for(state.team_a[0]).dots.append(
            PeriodicEffect(id="poison", source="Poison", amount_per_turn=5, duration=3),
        )
        assert "rng" not in state.model_dump()

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate entity ids"):
            create_combat_state([_make_entity("hero")], [_make_entity("hero")], rng=CombatRNG(0))


class TestFormatAmount:
    def test_integral(self):
        assert format_amount(20.0) == "20"

    def test_fractional(self):
        assert format_amount(12.345) == "12.3"
