"""Turn-based combat state machine.

``resolve_combat_round`` advances a ``CombatState`` by exactly one turn:

1. Periodic effects (DoT / HoT) tick for every living entity.
2. Buff durations tick down.  Buffs that just expired still apply during
   this turn's action phase and are removed afterwards.
3. Action phase: initiative decides which side acts first (a coin flip from
   the battle RNG, or always side A with ``InitiativePolicy.TEAM_A_FIRST``);
   within a side entities act by ``order`` then roster position.  Every
   living entity attacks one living opponent.
4. Regen heals every living entity once.
5. Expired buffs are removed.
6. Termination: one side eliminated -> the other side wins; both
   eliminated -> draw.

The round never raises; the runner enforces the turn cap.
"""

from __future__ import annotations

from rpg_balance.config import InitiativePolicy
from rpg_balance.formulas.sustain import calculate_regen_heal
from rpg_balance.sim.core.combat_state import CombatState, LogType, Winner, format_amount
from rpg_balance.sim.core.effects import EffectKind
from rpg_balance.sim.mechanics.buffs import effective_stats, remove_expired_buffs, tick_buffs
from rpg_balance.sim.mechanics.damage import resolve_attack
from rpg_balance.sim.mechanics.dots import apply_tick, tick_durations

_END_MESSAGES = {
    Winner.TEAM_A: "Team A wins!",
    Winner.TEAM_B: "Team B wins!",
    Winner.DRAW: "Draw!",
}


def resolve_combat_round(state: CombatState) -> CombatState:
    """Advance *state* by one turn.  A finished state is returned unchanged."""
    if state.is_finished:
        return state

    state.turn += 1
    state.add_log(LogType.TURN, f"--- Turn {state.turn} ---")

    _periodic_phase(state)

    for entity in state.entities:
        tick_buffs(state.effects_for(entity).buffs)

    _action_phase(state)
    _regen_phase(state)

    for entity in state.entities:
        remove_expired_buffs(state.effects_for(entity).buffs)

    check_termination(state)
    return state


def check_termination(state: CombatState) -> bool:
    """Finish the battle if a side has been eliminated.  Returns ``is_finished``."""
    if state.is_finished:
        return True

    a_alive = bool(state.living("A"))
    b_alive = bool(state.living("B"))
    if not a_alive and not b_alive:
        end_combat(state, Winner.DRAW)
    elif not b_alive:
        end_combat(state, Winner.TEAM_A)
    elif not a_alive:
        end_combat(state, Winner.TEAM_B)
    return state.is_finished


def end_combat(state: CombatState, winner: Winner) -> None:
    state.is_finished = True
    state.winner = winner
    state.add_log(LogType.END, _END_MESSAGES[winner])


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------

def _periodic_phase(state: CombatState) -> None:
    for entity in state.turn_order():
        if entity.is_dead:
            continue
        effects = state.effects_for(entity)
        for effect in effects.dots:
            source = effect.source or effect.id
            amount = apply_tick(entity, effect)
            if effect.kind is EffectKind.HEAL:
                state.add_log(
                    LogType.HEAL, f"{entity.name} recovers {format_amount(amount)} HP from {source}",
                    target=entity, amount=amount,
                )
            else:
                state.add_log(
                    LogType.DOT, f"{entity.name} takes {format_amount(amount)} damage from {source}",
                    target=entity, amount=amount,
                )
            if entity.is_dead:
                state.add_log(LogType.DEATH, f"{entity.name} dies!", target=entity)
                break
        tick_durations(effects.dots)


def _action_phase(state: CombatState) -> None:
    first = "A"
    if state.settings.initiative is InitiativePolicy.RANDOM and state.rng.random_float() >= 0.5:
        first = "B"

    for attacker in state.turn_order(first):
        if attacker.is_dead:
            continue
        targets = state.opponents_of(attacker)
        if not targets:
            continue
        target = targets[0] if len(targets) == 1 else state.rng.random_choice(targets)
        resolve_attack(state, attacker, target)


def _regen_phase(state: CombatState) -> None:
    for entity in state.turn_order():
        if entity.is_dead:
            continue
        stats = effective_stats(entity.stats, state.effects_for(entity).buffs)
        healed = entity.heal(calculate_regen_heal(stats.regen))
        if healed > 0:
            state.add_log(
                LogType.HEAL, f"{entity.name} regenerates {format_amount(healed)} HP",
                target=entity, amount=healed,
            )
