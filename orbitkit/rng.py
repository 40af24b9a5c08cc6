"""Seeded random numbers: uniform integers and floats and Gaussian deviates."""

from __future__ import annotations

import math

from orbitkit.mtrand import MersenneTwister


class Random:
    """Random number source driven by one Mersenne Twister stream.

    A ``pivot`` discards that many pairs of draws (one integer, one float)
    after seeding, so that runs with the same seed can be offset.
    """

    def __init__(self, seed: int = 0, pivot: int = 0):
        self._mt = MersenneTwister(seed)
        self.seed = seed
        self.pivot = pivot
        self.set_pivot(pivot)

    def set_seed(self, seed: int) -> None:
        """Restart the stream from ``seed``."""
        self.seed = seed
        self._mt.seed(seed)

    def set_pivot(self, pivot: int) -> None:
        """Discard ``pivot`` pairs of draws."""
        for _ in range(pivot):
            self.uniform_int(1, 7)
            self.uniform(0.0, 10.0)

    def uniform_int(self, low: int, high: int) -> int:
        """Return an integer in ``[low, high)``."""
        if high <= low:
            raise ValueError(f"empty integer range [{low}, {high})")
        return self._mt.rand_int32() % (high - low) + low

    def uniform(self, low: float, high: float) -> float:
        """Return a float in ``[low, high)``."""
        return self._mt.random() * (high - low) + low

    def random(self) -> float:
        """Return a float in [0, 1)."""
        return self._mt.random()

    def gaussian(self, mu: float = 0.0, sigma: float = 1.0) -> float:
        """Return a normal deviate by rejection sampling on [-10, 10)."""
        norm = math.sqrt(2.0 * math.pi)
        while True:
            x = self._mt.random() * 20.0 - 10.0
            density = math.exp(-0.5 * x * x) / norm
            if self._mt.random() * 0.4 < density:
                return x * sigma + mu