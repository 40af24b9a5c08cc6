"""Two-body propagation with universal variables and f and g functions.

The universal Kepler equation can be solved with Laguerre, Newton, Halley or
Chebyshev iteration; :meth:`Twobody.solve` uses Laguerre and subdivides the
step when the iteration fails.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

from orbitkit.kepcart import c_prussing, s_prussing

Vector = Tuple[float, float, float]

_ALPHA_FACTOR = 0.0
_N_LAG = 5.0
_MAX_ITERATIONS = 100
_MAX_ALX2 = 1e3


class ConvergenceError(ArithmeticError):
    """Raised when an iteration for the universal anomaly does not converge."""


def calc_c(z: float) -> float:
    """Stumpff-type function C(z)."""
    return c_prussing(z)


def calc_s(z: float) -> float:
    """Stumpff-type function S(z)."""
    return s_prussing(z)


def is_valid_number(x: float) -> bool:
    """Return False for infinities and NaN."""
    return math.isfinite(x)


def _norm2(v: Sequence[float]) -> float:
    return v[0] * v[0] + v[1] * v[1] + v[2] * v[2]


def _equation(
    sig0: float, foo: float, r0: float, smu: float, alpha: float, dt: float, x: float
) -> Tuple[float, float, float]:
    """Return F, dF/dx and d2F/dx2 of the universal Kepler equation at ``x``."""
    x2 = x * x
    x3 = x2 * x
    alx2 = alpha * x2
    try:
        cp = calc_c(alx2)
        sp = calc_s(alx2)
    except (OverflowError, ValueError) as exc:
        raise ConvergenceError(f"Stumpff functions failed at alpha*x^2={alx2}") from exc
    f = sig0 * x2 * cp + foo * x3 * sp + r0 * x - smu * dt
    df = sig0 * x * (1.0 - alx2 * sp) + foo * x2 * cp + r0
    ddf = sig0 * (1.0 - alx2 * cp) + foo * x * (1.0 - alx2 * sp)
    return f, df, ddf


class Twobody:
    """Kepler propagator for a relative two-body orbit with gravitational parameter mu."""

    max_subdivisions = 1000

    def __init__(self, tolerance: float = 1e-12):
        self.tolerance = tolerance

    def solve(
        self, mu: float, position: Sequence[float], velocity: Sequence[float], dt: float
    ) -> Tuple[Vector, Vector]:
        """Advance the orbit by ``dt``; return the new position and velocity.

        Whole periods of bound orbits are removed first. If the universal
        anomaly cannot be found for the full step, the step is split into
        2, 4, 6, ... equal parts until every part converges.
        """
        if _norm2(position) == 0.0:
            raise ValueError("cannot propagate a body located at the origin")
        dt = self.normalize(mu, position, velocity, dt)
        try:
            return self.try_solve(mu, position, velocity, dt)
        except ConvergenceError:
            pass

        for parts in range(2, self.max_subdivisions + 1, 2):
            step = dt / parts
            pos: Vector = tuple(position)  # type: ignore[assignment]
            vel: Vector = tuple(velocity)  # type: ignore[assignment]
            try:
                for _ in range(parts):
                    pos, vel = self.try_solve(mu, pos, vel, step)
            except ConvergenceError:
                continue
            return pos, vel
        raise ConvergenceError(
            f"no convergence with up to {self.max_subdivisions} sub-steps"
        )

    def solve_by_leapfrog(
        self, mu: float, position: Sequence[float], velocity: Sequence[float], dt: float
    ) -> Tuple[Vector, Vector]:
        """Advance the orbit by one kick-drift-kick leapfrog step."""
        x, y, z = position
        vx, vy, vz = velocity

        dr2 = x * x + y * y + z * z
        dr3 = dr2 * math.sqrt(dr2)
        ax, ay, az = -mu / dr3 * x, -mu / dr3 * y, -mu / dr3 * z

        x += vx * dt + ax * dt * dt / 2
        y += vy * dt + ay * dt * dt / 2
        z += vz * dt + az * dt * dt / 2
        vx += ax * dt / 2
        vy += ay * dt / 2
        vz += az * dt / 2

        dr2 = x * x + y * y + z * z
        dr3 = dr2 * math.sqrt(dr2)
        ax, ay, az = -mu / dr3 * x, -mu / dr3 * y, -mu / dr3 * z
        vx += ax * dt / 2
        vy += ay * dt / 2
        vz += az * dt / 2
        return (x, y, z), (vx, vy, vz)

    def try_solve(
        self, mu: float, position: Sequence[float], velocity: Sequence[float], dt: float
    ) -> Tuple[Vector, Vector]:
        """Advance the orbit by ``dt`` in one step; raise ConvergenceError on failure."""
        x, y, z = position
        vx, vy, vz = velocity
        r0 = math.sqrt(x * x + y * y + z * z)
        if not r0 > 0.0:
            raise ConvergenceError("body at the origin")
        v2 = vx * vx + vy * vy + vz * vz
        r0dotv0 = x * vx + y * vy + z * vz
        alpha = 2.0 / r0 - v2 / mu
        v0r = r0dotv0 / r0
        smu = math.sqrt(mu)

        x_p = self.universal_anomaly_laguerre(smu, r0, v0r, alpha, dt)

        foo = 1.0 - r0 * alpha
        sig0 = r0dotv0 / smu
        x2 = x_p * x_p
        x3 = x2 * x_p
        alx2 = alpha * x2
        cp = calc_c(alx2)
        sp = calc_s(alx2)
        r = sig0 * x_p * (1.0 - alx2 * sp) + foo * x2 * cp + r0
        if r == 0.0:
            raise ConvergenceError("propagated radius is zero")

        f_p = 1.0 - (x2 / r0) * cp
        g_p = dt - (x3 / smu) * sp
        dfdt = x_p * smu / (r * r0) * (alx2 * sp - 1.0)
        dgdt = 1.0 - (x2 / r) * cp

        new_position = (x * f_p + g_p * vx, y * f_p + g_p * vy, z * f_p + g_p * vz)
        new_velocity = (dfdt * x + dgdt * vx, dfdt * y + dgdt * vy, dfdt * z + dgdt * vz)
        return new_position, new_velocity

    def universal_anomaly_laguerre(
        self, smu: float, r0: float, v0r: float, alpha: float, dt: float
    ) -> float:
        """Solve the universal Kepler equation with Laguerre's method."""
        sig0 = v0r * r0 / smu
        foo = 1.0 - r0 * alpha
        x = smu * smu * dt * dt / r0
        for _ in range(_MAX_ITERATIONS):
            if abs(alpha * x * x) > _MAX_ALX2:
                raise ConvergenceError("universal anomaly left the trusted range")
            f, df, ddf = _equation(sig0, foo, r0, smu, alpha, dt, x)
            root = math.sqrt(
                abs((_N_LAG - 1.0) * ((_N_LAG - 1.0) * df * df - _N_LAG * f * ddf))
            )
            denominator = (df - root if df < 0 else df + root) + self.tolerance
            if denominator == 0:
                raise ConvergenceError("Laguerre step has a zero denominator")
            u = _N_LAG * f / denominator
            if not is_valid_number(u):
                raise ConvergenceError("Laguerre step is not a finite number")
            x -= u
            if abs(u) <= self.tolerance:
                return x
        raise ConvergenceError("Laguerre iteration did not converge")

    def universal_anomaly_newton(
        self, smu: float, r0: float, v0r: float, alpha: float, dt: float
    ) -> float:
        """Solve the universal Kepler equation with Newton's method."""
        sig0 = v0r * r0 / smu
        foo = 1.0 - r0 * alpha
        x = smu * smu * dt * dt / r0
        for _ in range(_MAX_ITERATIONS):
            f, df, _ = _equation(sig0, foo, r0, smu, alpha, dt, x)
            factor = _ALPHA_FACTOR if f * df >= 0 else -_ALPHA_FACTOR
            denominator = df + factor * f
            if denominator == 0:
                raise ConvergenceError("Newton step has a zero denominator")
            u = f / denominator
            if not is_valid_number(u):
                raise ConvergenceError("Newton step is not a finite number")
            x -= u
            if abs(u) <= self.tolerance:
                return x
        raise ConvergenceError("Newton iteration did not converge")

    def universal_anomaly_halley(
        self, smu: float, r0: float, v0r: float, alpha: float, dt: float
    ) -> float:
        """Solve the universal Kepler equation with Halley's method."""
        sig0 = v0r * r0 / smu
        foo = 1.0 - r0 * alpha
        x = smu * smu * dt * dt / r0
        for _ in range(_MAX_ITERATIONS):
            f, df, ddf = _equation(sig0, foo, r0, smu, alpha, dt, x)
            factor1 = _ALPHA_FACTOR
            factor2 = -_ALPHA_FACTOR
            df1 = df + factor1 * f
            df2 = df + factor2 * f
            z2a = 2.0 * df1 * df1 - f * (ddf + 2.0 * factor1 * df1)
            z2b = 2.0 * df2 * df2 - f * (ddf + 2.0 * factor2 * df2)
            if abs(z2a) > abs(z2b):
                if z2a == 0:
                    raise ConvergenceError("Halley step has a zero denominator")
                u = 2.0 * f * df1 / z2a
            else:
                if z2b == 0:
                    raise ConvergenceError("Halley step has a zero denominator")
                u = 2.0 * f * df2 / z2b
            if not is_valid_number(u):
                raise ConvergenceError("Halley step is not a finite number")
            x -= u
            if abs(u) <= self.tolerance:
                return x
        raise ConvergenceError("Halley iteration did not converge")

    def universal_anomaly_chebyshev(
        self, smu: float, r0: float, v0r: float, alpha: float, dt: float
    ) -> float:
        """Solve the universal Kepler equation with Chebyshev's method.

        A step of exactly zero is treated as a failure.
        """
        sig0 = v0r * r0 / smu
        foo = 1.0 - r0 * alpha
        x = smu * smu * dt * dt / r0
        for _ in range(_MAX_ITERATIONS):
            f, df, ddf = _equation(sig0, foo, r0, smu, alpha, dt, x)
            z1 = df + _ALPHA_FACTOR * f
            z2 = df - _ALPHA_FACTOR * f
            z = z1 if abs(z1) > abs(z2) else z2
            if z == 0:
                raise ConvergenceError("Chebyshev step has a zero denominator")
            u = f / z + 0.5 * f * f * (ddf + 2.0 * _ALPHA_FACTOR * df) / z**3
            x -= u
            if abs(u) > self.tolerance:
                continue
            if u == 0:
                raise ConvergenceError("Chebyshev step vanished")
            if not is_valid_number(u):
                raise ConvergenceError("Chebyshev step is not a finite number")
            return x
        raise ConvergenceError("Chebyshev iteration did not converge")

    def normalize(
        self, mu: float, position: Sequence[float], velocity: Sequence[float], dt: float
    ) -> float:
        """Return ``dt`` with whole orbital periods of a bound orbit removed."""
        cr = 1.0 / math.sqrt(_norm2(position))
        energy = _norm2(velocity) / 2 - mu * cr
        if energy < -self.tolerance:
            a = -mu / (2.0 * energy)
            period = 2.0 * math.pi * a * math.sqrt(a / mu)
            whole = int(dt / period)
            dt = dt - whole * period
        return dt