"""Tests for periodic effects (DoT / HoT)."""

from rpg_balance.sim.core.effects import EffectKind, PeriodicEffect, StackMode
from rpg_balance.sim.core.entities import Entity
from rpg_balance.sim.mechanics.dots import (
    add_effect,
    apply_tick,
    calculate_total_value,
    tick_durations,
    total_per_turn,
)
from rpg_balance.stats.models import StatBlock


def _make_effect(**kwargs) -> PeriodicEffect:
    defaults = dict(id="poison", source="Poison", amount_per_turn=5, duration=3)
    defaults.update(kwargs)
    return PeriodicEffect(**defaults)


def _make_entity(hp: float = 100) -> Entity:
    return Entity.from_stats("e", "E", StatBlock(hp=hp))


class TestAddEffect:
    def test_increment_refresh(self):
        dots = []
        add_effect(dots, _make_effect(duration=2))
        add_effect(dots, _make_effect(duration=4))
        assert len(dots) == 1
        assert dots[0].stacks == 2
        assert dots[0].duration == 4

    def test_increment_keeps_duration(self):
        dots = []
        add_effect(dots, _make_effect(stack_mode=StackMode.INCREMENT, duration=2))
        add_effect(dots, _make_effect(stack_mode=StackMode.INCREMENT, duration=6))
        assert dots[0].stacks == 2
        assert dots[0].duration == 2

    def test_capped(self):
        dots = []
        for _ in range(5):
            add_effect(dots, _make_effect(stack_mode=StackMode.INCREMENT_CAPPED, max_stacks=3))
        assert dots[0].stacks == 3

    def test_separate(self):
        dots = []
        add_effect(dots, _make_effect(stack_mode=StackMode.SEPARATE))
        add_effect(dots, _make_effect(stack_mode=StackMode.SEPARATE))
        assert len(dots) == 2

    def test_none_refreshes_duration(self):
        dots = []
        add_effect(dots, _make_effect(stack_mode=StackMode.NONE, duration=1))
        add_effect(dots, _make_effect(stack_mode=StackMode.NONE, duration=5))
        assert dots[0].stacks == 1
        assert dots[0].duration == 5

    def test_different_source_is_separate(self):
        dots = []
        add_effect(dots, _make_effect(source="Poison"))
        add_effect(dots, _make_effect(source="Venom"))
        assert len(dots) == 2


class TestTick:
    def test_damage_tick(self):
        entity = _make_entity()
        assert apply_tick(entity, _make_effect(stacks=2)) == 10
        assert entity.current_hp == 90

    def test_damage_floored_at_zero(self):
        entity = _make_entity(hp=3)
        assert apply_tick(entity, _make_effect()) == 3
        assert entity.current_hp == 0

    def test_heal_capped(self):
        entity = _make_entity()
        entity.current_hp = 98
        assert apply_tick(entity, _make_effect(kind=EffectKind.HEAL)) == 2
        assert entity.current_hp == 100

    def test_durations_expire(self):
        dots = [_make_effect(duration=1), _make_effect(id="bleed", duration=2)]
        tick_durations(dots)
        assert [d.id for d in dots] == ["bleed"]


class TestTotals:
    def test_total_per_turn(self):
        dots = [_make_effect(stacks=2), _make_effect(id="mend", kind=EffectKind.HEAL, amount_per_turn=3)]
        assert total_per_turn(dots) == (10, 3)

    def test_total_value(self):
        assert calculate_total_value(5, 3, stacks=2) == 30
