"""Shared fixtures for the rpg_balance tests."""

from __future__ import annotations

from typing import Sequence, TypeVar

import pytest

T = TypeVar("T")


class ScriptedRNG:
    """A RandomSource that replays a fixed list of floats, cycling forever.

    ``random_choice`` always picks the first element and ``fork`` returns the
    same scripted stream.
    """

    def __init__(self, values: Sequence[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def random_float(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value

    def random_choice(self, seq: Sequence[T]) -> T:
        return seq[0]

    def fork(self, name: str) -> ScriptedRNG:
        return self


@pytest.fixture
def scripted_rng():
    """Factory: ``scripted_rng(0.5, 0.1, ...)``."""
    def _make(*values: float) -> ScriptedRNG:
        return ScriptedRNG(values or (0.5,))
    return _make
