"""
Pluggable sources of uniform random numbers.

The engine draws every random number through a RandomSource so callers
can swap in a seeded or scripted source.
"""

from typing import Optional, Protocol
import numpy as np


class RandomSource(Protocol):
    """Anything that yields floats uniformly distributed on [0, 1)."""

    def next_uniform(self) -> float:
        ...


class NumpyRandomSource:
    """
    RandomSource backed by a numpy Generator.

    Unseeded by default, so every process (and every call) sees a
    different random walk.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def next_uniform(self) -> float:
        return float(self._rng.random())

    def __repr__(self) -> str:
        return f"NumpyRandomSource(seed={self.seed})"
