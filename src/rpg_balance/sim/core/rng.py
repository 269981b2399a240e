"""Randomness for combat resolution.

Every probabilistic check in a battle (crit, fail, hit, block, initiative)
draws from one ``RandomSource``.  ``CombatRNG`` is the seeded implementation;
the Monte Carlo runner derives one child per battle index, so battle *n* of a
run replays identically whatever the batch size or process layout.

Tests swap in a scripted source that returns a fixed sequence of rolls.
"""

from __future__ import annotations

import hashlib
import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """What the combat loop needs from a random generator."""

    def random_float(self) -> float: ...

    def random_choice(self, seq: Sequence[T]) -> T: ...

    def fork(self, name: str) -> RandomSource: ...


class CombatRNG:
    """Seeded roll generator for one battle or one whole run.

    Parameters
    ----------
    seed:
        Seed for ``random.Random``.  ``None`` picks one from system entropy,
        which makes the run non-reproducible.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = random.SystemRandom().getrandbits(64)
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def random_float(self) -> float:
        """A roll in ``[0.0, 1.0)``; a check with chance *p* % passes when the roll is below ``p / 100``."""
        return self._rng.random()

    def random_choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)

    def fork(self, name: str) -> CombatRNG:
        """Child generator keyed by *name* (the runner uses the battle index).

        The child seed is a hash of this seed and *name* only, so it does not
        depend on how many rolls this generator has already made.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        return CombatRNG(int.from_bytes(digest[:8], "big"))

    def __repr__(self) -> str:
        return f"CombatRNG(seed={self._seed})"
