"""External galactic potentials and their accelerations by extrapolated differences."""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Sequence, Tuple, Union

Vector = Tuple[float, float, float]


class PotentialType(str, Enum):
    """Kinds of external potential."""

    NONE = "none"
    POINT_MASS = "point_mass"
    HOMO_SPHERE = "homo_sphere"
    ISOCHRONE = "isochrone"


def extrapolate(x: Sequence[float], y: Sequence[float], x0: float) -> float:
    """Evaluate at ``x0`` the polynomial through the points (x, y) (Neville's scheme)."""
    values = list(y)
    n = len(x)
    if n == 0:
        raise ValueError("extrapolation needs at least one point")
    for i in range(1, n):
        for j in range(n - i):
            values[j] = ((x0 - x[j + i]) * values[j] + (x[j] - x0) * values[j + 1]) / (
                x[j] - x[j + i]
            )
    return values[0]


class Potentials:
    """An external potential of total mass ``mgal`` acting on a particle of mass m."""

    _DQ0 = 0.125

    def __init__(
        self,
        potential_type: Union[PotentialType, str] = PotentialType.NONE,
        parameters: Sequence[float] = (),
        tolerance: float = 1e-14,
    ):
        self.potential_type = PotentialType(potential_type)
        self.parameters: List[float] = list(parameters)
        self.tolerance = tolerance
        self.mgal = 1.0
        needs_scale = (PotentialType.HOMO_SPHERE, PotentialType.ISOCHRONE)
        if self.potential_type in needs_scale and not self.parameters:
            raise ValueError(f"{self.potential_type.value} potential needs a scale radius")

    def point_mass_potential_at(self, m: float, x: float, y: float, z: float) -> float:
        """Potential energy of mass ``m`` in the field of a point mass."""
        r = math.sqrt(x * x + y * y + z * z)
        return -self.mgal * m / r

    def homo_sphere_potential_at(self, m: float, x: float, y: float, z: float) -> float:
        """Potential energy of mass ``m`` in a homogeneous sphere."""
        radius = self.parameters[0]
        r2 = x * x + y * y + z * z
        r = math.sqrt(r2)
        rho = self.mgal / (4.0 / 3 * math.pi * radius**3)
        if r < radius:
            return -2.0 * math.pi * rho * (radius * radius - r2 / 3) * m
        return -4.0 * math.pi * rho * radius**3 / (3.0 * r) * m

    def isochrone_potential_at(self, m: float, x: float, y: float, z: float) -> float:
        """Potential energy of mass ``m`` in an isochrone potential."""
        b = self.parameters[0]
        r2 = x * x + y * y + z * z
        return -self.mgal * m / (b + math.sqrt(r2 + b * b))

    def potential_at(self, m: float, x: float, y: float, z: float) -> float:
        """Potential energy of mass ``m`` for the configured potential type."""
        if self.potential_type is PotentialType.POINT_MASS:
            return self.point_mass_potential_at(m, x, y, z)
        if self.potential_type is PotentialType.HOMO_SPHERE:
            return self.homo_sphere_potential_at(m, x, y, z)
        if self.potential_type is PotentialType.ISOCHRONE:
            return self.isochrone_potential_at(m, x, y, z)
        return 0.0

    def acceleration_at(self, m: float, x: float, y: float, z: float) -> Vector:
        """Acceleration from forward differences extrapolated to zero step size."""
        phi0 = self.potential_at(m, x, y, z)
        steps: List[float] = []
        samples: List[Vector] = []

        def refine(n: int) -> Vector:
            dq = self._DQ0 / n
            steps.append(dq)
            samples.append(self._difference(phi0, dq, m, x, y, z))
            return self._extrapolated(steps, samples)

        previous = refine(1)
        current = refine(2)
        if not self._converged(previous, current):
            current = refine(4)
        return current

    def _difference(
        self, phi0: float, dq: float, m: float, x: float, y: float, z: float
    ) -> Vector:
        phix = self.potential_at(m, x + dq, y, z)
        phiy = self.potential_at(m, x, y + dq, z)
        phiz = self.potential_at(m, x, y, z + dq)
        return (
            -(phix - phi0) / dq / m,
            -(phiy - phi0) / dq / m,
            -(phiz - phi0) / dq / m,
        )

    @staticmethod
    def _extrapolated(steps: Sequence[float], samples: Sequence[Vector]) -> Vector:
        return tuple(  # type: ignore[return-value]
            extrapolate(steps, [a[k] for a in samples], 0.0) for k in range(3)
        )

    def _converged(self, a1: Sequence[float], a2: Sequence[float]) -> bool:
        return all(abs(p - q) <= self.tolerance for p, q in zip(a1, a2))