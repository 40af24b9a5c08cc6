"""Mersenne Twister (MT19937) pseudo-random number generator.

Gives the raw 32-bit integer stream and four ways of turning it into
floating point numbers: [0, 1), [0, 1], (0, 1) and 53-bit [0, 1).
"""

from __future__ import annotations

from typing import Iterable, List

_N = 624
_M = 397
_MASK = 0xFFFFFFFF
_DEFAULT_SEED = 5489


def _twiddle(u: int, v: int) -> int:
    mixed = ((u & 0x80000000) | (v & 0x7FFFFFFF)) >> 1
    return mixed ^ (0x9908B0DF if v & 1 else 0)


class MersenneTwister:
    """MT19937 generator with the 2002 initialisation by integer or by array."""

    def __init__(self, seed: int = _DEFAULT_SEED):
        self._state: List[int] = [0] * _N
        self._p = _N
        self.seed(seed)

    def seed(self, s: int) -> None:
        """Initialise the state from a 32-bit integer (higher bits are dropped)."""
        state = self._state
        state[0] = s & _MASK
        for i in range(1, _N):
            prev = state[i - 1]
            state[i] = (1812433253 * (prev ^ (prev >> 30)) + i) & _MASK
        self._p = _N

    def seed_array(self, array: Iterable[int]) -> None:
        """Initialise the state from a non-empty sequence of 32-bit integers."""
        key = [int(value) & _MASK for value in array]
        if not key:
            raise ValueError("seed array must not be empty")
        self.seed(19650218)
        state = self._state
        i, j = 1, 0
        for _ in range(max(_N, len(key))):
            prev = state[i - 1]
            state[i] = ((state[i] ^ ((prev ^ (prev >> 30)) * 1664525)) + key[j] + j) & _MASK
            j = (j + 1) % len(key)
            i += 1
            if i == _N:
                state[0] = state[_N - 1]
                i = 1
        for _ in range(_N - 1):
            prev = state[i - 1]
            state[i] = ((state[i] ^ ((prev ^ (prev >> 30)) * 1566083941)) - i) & _MASK
            i += 1
            if i == _N:
                state[0] = state[_N - 1]
                i = 1
        state[0] = 0x80000000
        self._p = _N

    def _generate(self) -> None:
        state = self._state
        for i in range(_N - _M):
            state[i] = state[i + _M] ^ _twiddle(state[i], state[i + 1])
        for i in range(_N - _M, _N - 1):
            state[i] = state[i + _M - _N] ^ _twiddle(state[i], state[i + 1])
        state[_N - 1] = state[_M - 1] ^ _twiddle(state[_N - 1], state[0])
        self._p = 0

    def rand_int32(self) -> int:
        """Return the next 32-bit unsigned integer."""
        if self._p == _N:
            self._generate()
        x = self._state[self._p]
        self._p += 1
        x ^= x >> 11
        x ^= (x << 7) & 0x9D2C5680
        x ^= (x << 15) & 0xEFC60000
        return x ^ (x >> 18)

    def random(self) -> float:
        """Return a float in the half-open interval [0, 1)."""
        return self.rand_int32() * (1.0 / 4294967296.0)

    def random_closed(self) -> float:
        """Return a float in the closed interval [0, 1]."""
        return self.rand_int32() * (1.0 / 4294967295.0)

    def random_open(self) -> float:
        """Return a float in the open interval (0, 1)."""
        return (self.rand_int32() + 0.5) * (1.0 / 4294967296.0)

    def random53(self) -> float:
        """Return a float in [0, 1) with 53-bit resolution."""
        a = self.rand_int32() >> 5
        b = self.rand_int32() >> 6
        return (a * 67108864.0 + b) * (1.0 / 9007199254740992.0)