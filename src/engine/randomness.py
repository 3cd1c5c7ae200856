"""
Lolos - Randomness Source

The engine never touches the global ``random`` module. Dice rolls and
shuffles are drawn from an injected source so that a sequence of actions
plus a seed replays the same game.
"""

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can produce a uniform integer in ``[low, high]``."""

    def randint(self, low: int, high: int) -> int:
        ...


class SeededRandom:
    """RandomSource backed by a private ``random.Random`` instance."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def randint(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed!r})"


def roll_die(rng: RandomSource, faces: int = 6) -> int:
    """Roll a single die."""
    return rng.randint(1, faces)
