"""Monte Carlo battle runner.

Provides:

- **run_battle**: one battle from fresh entities to a winner, with the turn
  cap enforced.
- **run_simulation**: many independent battles, aggregated into a
  ``SimulationResult``.
- **MonteCarloRunner**: the same, optionally fanned out over a process pool.

Every battle gets its own RNG forked from the master seed by battle index,
so a run is reproducible from its seed and the sequential and parallel paths
produce identical results.
"""

from __future__ import annotations

import logging
import multiprocessing
from typing import Any, Sequence, Union

from rpg_balance.config import DEFAULT_SETTINGS, CapPolicy, SimulationSettings
from rpg_balance.sim.combat import end_combat, resolve_combat_round
from rpg_balance.sim.core.combat_state import CombatState, LogType, Winner, create_combat_state
from rpg_balance.sim.core.entities import Entity
from rpg_balance.sim.core.rng import CombatRNG
from rpg_balance.sim.results import SimulationResult
from rpg_balance.stats.models import StatBlock

logger = logging.getLogger(__name__)

Combatant = Union[StatBlock, Entity]
Side = Union[Combatant, Sequence[Combatant]]


# =====================================================================
# Single battle
# =====================================================================

def build_team(side: Side, team: str) -> list[Entity]:
    """Build fresh, full-HP entities for one side.

    StatBlocks become new entities; Entity blueprints are deep-copied so the
    caller's objects are never mutated.  Every entity gets the id
    ``"<team><index>"`` so one blueprint can fill both sides.
    """
    members = [side] if isinstance(side, (StatBlock, Entity)) else list(side)
    roster: list[Entity] = []
    for i, member in enumerate(members):
        entity_id = f"{team.lower()}{i}"
        if isinstance(member, Entity):
            entity = member.model_copy(update={"id": entity_id}, deep=True)
            entity.reset()
        else:
            name = team if len(members) == 1 else f"{team}{i + 1}"
            entity = Entity.from_stats(entity_id, name, member, order=i)
        roster.append(entity)
    return roster


def run_battle(
    team_a: list[Entity],
    team_b: list[Entity],
    *,
    rng: Any = None,
    settings: SimulationSettings | None = None,
) -> CombatState:
    """Resolve rounds until a winner emerges or the turn cap is reached."""
    settings = settings or DEFAULT_SETTINGS
    state = create_combat_state(team_a, team_b, rng=rng, settings=settings)

    while not state.is_finished and state.turn < settings.turn_cap:
        resolve_combat_round(state)

    if not state.is_finished:
        _apply_cap_policy(state, settings.cap_policy)
    return state


def _apply_cap_policy(state: CombatState, policy: CapPolicy) -> None:
    state.capped = True
    state.add_log(LogType.END, f"Turn cap reached after {state.turn} turns")

    winner = Winner.DRAW
    if policy is CapPolicy.HP_TIEBREAK:
        hp_a = sum(e.current_hp for e in state.team_a)
        hp_b = sum(e.current_hp for e in state.team_b)
        if hp_a > hp_b:
            winner = Winner.TEAM_A
        elif hp_b > hp_a:
            winner = Winner.TEAM_B
    end_combat(state, winner)


# =====================================================================
# Batches
# =====================================================================

def _run_range(
    side_a: Side,
    side_b: Side,
    master: Any,
    start: int,
    stop: int,
    settings: SimulationSettings,
) -> SimulationResult:
    wins_a = wins_b = draws = capped = 0
    total_turns = 0

    for i in range(start, stop):
        state = run_battle(
            build_team(side_a, "A"),
            build_team(side_b, "B"),
            rng=master.fork(f"battle:{i}"),
            settings=settings,
        )
        total_turns += state.turn
        if state.capped:
            capped += 1
            logger.debug(
                "battle %d hit the turn cap (%d turns); resolved as %s",
                i, state.turn, state.winner.value,
            )
        if state.winner is Winner.TEAM_A:
            wins_a += 1
        elif state.winner is Winner.TEAM_B:
            wins_b += 1
        else:
            draws += 1

    count = stop - start
    return SimulationResult(
        wins_a=wins_a,
        wins_b=wins_b,
        draws=draws,
        total_battles=count,
        average_turns=total_turns / count if count else 0.0,
        capped_battles=capped,
    )


def run_simulation(
    side_a: Side,
    side_b: Side,
    iterations: int,
    *,
    seed: int | None = None,
    rng: Any = None,
    settings: SimulationSettings | None = None,
) -> SimulationResult:
    """Simulate *iterations* independent battles between two sides.

    Parameters
    ----------
    side_a, side_b:
        A StatBlock, an Entity blueprint, or a sequence of them (a team).
    iterations:
        Number of battles; must be at least 1.
    seed:
        Master seed.  ``None`` picks a random one.
    rng:
        Any ``RandomSource`` to use as the master stream instead of a
        ``CombatRNG`` built from *seed*.
    settings:
        Turn cap, cap policy and crit/fail precedence.
    """
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")

    master = rng if rng is not None else CombatRNG(seed)
    result = _run_range(side_a, side_b, master, 0, iterations, settings or DEFAULT_SETTINGS)

    if result.capped_battles:
        logger.debug(
            "%d of %d battles hit the turn cap", result.capped_battles, result.total_battles,
        )
    return result


def _worker_run_chunk(args: tuple) -> SimulationResult:
    """Top-level worker function for multiprocessing (must be picklable)."""
    side_a, side_b, seed, start, stop, settings = args
    return _run_range(side_a, side_b, CombatRNG(seed), start, stop, settings)


class MonteCarloRunner:
    """Runs simulation batches, optionally in parallel."""

    def __init__(
        self,
        settings: SimulationSettings | None = None,
        parallel: bool = False,
        processes: int | None = None,
    ) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self.parallel = parallel
        self.processes = processes

    def run(
        self,
        side_a: Side,
        side_b: Side,
        iterations: int | None = None,
        seed: int | None = None,
    ) -> SimulationResult:
        """Run a batch; falls back to ``settings.default_iterations``."""
        n = iterations if iterations is not None else self.settings.default_iterations
        if n < 1:
            raise ValueError(f"iterations must be >= 1, got {n}")

        if self.parallel and n > 1:
            if seed is None:
                seed = CombatRNG().seed
            return self._run_parallel(side_a, side_b, n, seed)
        return run_simulation(side_a, side_b, n, seed=seed, settings=self.settings)

    def _run_parallel(
        self,
        side_a: Side,
        side_b: Side,
        iterations: int,
        seed: int,
    ) -> SimulationResult:
        """Split the battle indices into contiguous chunks, one per worker."""
        n_workers = min(iterations, self.processes or multiprocessing.cpu_count() or 1)
        chunk = -(-iterations // n_workers)

        work_items = [
            (side_a, side_b, seed, start, min(start + chunk, iterations), self.settings)
            for start in range(0, iterations, chunk)
        ]

        with multiprocessing.Pool(processes=n_workers) as pool:
            parts = pool.map(_worker_run_chunk, work_items)

        return SimulationResult.merge(parts)
