"""Phase-space distances between two N-body snapshots in multiple precision.

Distances are returned as ``0.5 * log10`` of the summed squared differences,
or exactly 0 when the snapshots agree. Snapshots are flat sequences of seven
numbers per particle: mass, x, y, z, vx, vy, vz. Only as many particles as
the shorter snapshot holds are compared.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union

from mpmath import mp, mpf

Number = Union[int, float, str, mpf]

_HALF = mpf("0.5")


def _differences(data1: Sequence[Number], data2: Sequence[Number]) -> List[Tuple[mpf, mpf]]:
    count = min(len(data1) // 7, len(data2) // 7)
    result = []
    for k in range(0, 7 * count, 7):
        d = [mpf(data2[k + c]) - mpf(data1[k + c]) for c in range(1, 7)]
        pos2 = d[0] * d[0] + d[1] * d[1] + d[2] * d[2]
        vel2 = d[3] * d[3] + d[4] * d[4] + d[5] * d[5]
        result.append((pos2, vel2))
    return result


def _half_log(value: mpf) -> mpf:
    if value == 0:
        return value
    return _HALF * mp.log10(value)


def _require_particles(count: int) -> None:
    if count == 0:
        raise ValueError("no particles to compare")


class Delta:
    """Distances between snapshots and a convergence test against a tolerance.

    The tolerance is kept as a base-10 logarithm: a negative value is taken
    as already logarithmic, any other value is converted with log10.
    """

    def __init__(self, tolerance: Number = "1e-6"):
        self._tolerance = mpf(0)
        self.tolerance = tolerance

    @property
    def tolerance(self) -> mpf:
        """The tolerance as log10."""
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: Number) -> None:
        value = mpf(value)
        self._tolerance = value if value < 0 else mp.log10(value)

    def phase_space_distance(self, data1: Sequence[Number], data2: Sequence[Number]) -> mpf:
        """Distance in positions and velocities together."""
        return _half_log(sum((p + v for p, v in _differences(data1, data2)), mpf(0)))

    def phase_space_distance_normalized(
        self, data1: Sequence[Number], data2: Sequence[Number]
    ) -> mpf:
        """Phase-space distance per coordinate (divided by 6N)."""
        diffs = _differences(data1, data2)
        _require_particles(len(diffs))
        total = sum((p + v for p, v in diffs), mpf(0))
        return _half_log(total / (6 * len(diffs)))

    def position_space_distance(self, data1: Sequence[Number], data2: Sequence[Number]) -> mpf:
        """Distance in positions."""
        return _half_log(sum((p for p, _ in _differences(data1, data2)), mpf(0)))

    def position_space_distance_normalized(
        self, data1: Sequence[Number], data2: Sequence[Number]
    ) -> mpf:
        """Position distance per coordinate (divided by 3N)."""
        diffs = _differences(data1, data2)
        _require_particles(len(diffs))
        return _half_log(sum((p for p, _ in diffs), mpf(0)) / (3 * len(diffs)))

    def velocity_space_distance(self, data1: Sequence[Number], data2: Sequence[Number]) -> mpf:
        """Distance in velocities."""
        return _half_log(sum((v for _, v in _differences(data1, data2)), mpf(0)))

    def velocity_space_distance_normalized(
        self, data1: Sequence[Number], data2: Sequence[Number]
    ) -> mpf:
        """Velocity distance per coordinate (divided by 3N)."""
        diffs = _differences(data1, data2)
        _require_particles(len(diffs))
        return _half_log(sum((v for _, v in diffs), mpf(0)) / (3 * len(diffs)))

    @staticmethod
    def _six(pos2: mpf, vel2: mpf, count: int) -> List[mpf]:
        phase2 = pos2 + vel2
        raw = [phase2, pos2, vel2, phase2 / (6 * count), pos2 / (3 * count), vel2 / (3 * count)]
        return [_half_log(value) for value in raw]

    def all(self, data1: Sequence[Number], data2: Sequence[Number]) -> List[mpf]:
        """Phase, position, velocity distances, then the three normalized ones."""
        diffs = _differences(data1, data2)
        _require_particles(len(diffs))
        pos2 = sum((p for p, _ in diffs), mpf(0))
        vel2 = sum((v for _, v in diffs), mpf(0))
        return self._six(pos2, vel2, len(diffs))

    def all_individual(
        self, data1: Sequence[Number], data2: Sequence[Number]
    ) -> List[List[mpf]]:
        """The six distances of :meth:`all` for each particle separately.

        Normalization uses the number of particles compared in total.
        """
        diffs = _differences(data1, data2)
        return [self._six(pos2, vel2, len(diffs)) for pos2, vel2 in diffs]

    def is_converged(self, data1: Sequence[Number], data2: Sequence[Number]) -> bool:
        """True if the normalized phase-space distance is below the tolerance."""
        return self.phase_space_distance_normalized(data1, data2) < self._tolerance

    def estimate_new_tolerance(
        self,
        t_begin: Number,
        t_end: Number,
        t_div: Number,
        tolerance_begin: Number,
        tolerance_end: Number,
    ) -> mpf:
        """Extrapolate the log tolerance needed to stay converged until ``t_end``.

        The divergence rate is taken from the growth from ``tolerance_begin``
        to ``tolerance_end`` between ``t_begin`` and ``t_div``; positive
        tolerances are converted to log10 first.
        """
        tol_begin = mpf(tolerance_begin)
        tol_end = mpf(tolerance_end)
        if tol_begin > 0:
            tol_begin = mp.log10(tol_begin)
        if tol_end > 0:
            tol_end = mp.log10(tol_end)
        slope = (tol_end - tol_begin) / (mpf(t_div) - mpf(t_begin))
        return (self._tolerance - 3) - slope * (mpf(t_end) - mpf(t_begin))