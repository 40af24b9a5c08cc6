"""Cartesian/Keplerian conversions, Kepler-equation solvers and an f and g propagator.

Also holds two sampling helpers for the Rayleigh and power-law distributions.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

GG = 6.6732e-8  # gravitational constant, cgs
CC = 2.997924562e10  # speed of light, cm/s
MSOL = 1.989e33  # solar mass, g
AU = 1.49597892e13  # astronomical unit, cm

_PREC_ECC_ANO = 1e-14
_THRESH = 1e-8
_N_LAG = 5.0
_LAGUERRE_STEPS = 7

Vector = Tuple[float, float, float]


class UniformSource(Protocol):
    """Anything with a ``random()`` method returning a float in [0, 1)."""

    def random(self) -> float: ...


@dataclass
class PhaseState:
    """Position and velocity of a body relative to the central mass."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    xd: float = 0.0
    yd: float = 0.0
    zd: float = 0.0


@dataclass
class OrbitalElements:
    """Keplerian elements; ``a`` is negative for hyperbolic orbits."""

    a: float = 0.0
    e: float = 0.0
    i: float = 0.0
    longnode: float = 0.0
    argperi: float = 0.0
    meananom: float = 0.0


def _angle(sin_part: float, cos_part: float) -> float:
    if sin_part != 0.0 or cos_part != 0.0:
        return math.atan2(sin_part, cos_part)
    return 0.0


def _wrap(angle: float) -> float:
    if angle > math.pi:
        angle -= 2.0 * math.pi
    if angle < -math.pi:
        angle += 2.0 * math.pi
    return angle


def keplerian(gm: float, state: PhaseState) -> OrbitalElements:
    """Return the orbital elements of ``state`` about a central mass ``gm``."""
    x, y, z = state.x, state.y, state.z
    xd, yd, zd = state.xd, state.yd, state.zd

    hx = y * zd - z * yd
    hy = z * xd - x * zd
    hz = x * yd - y * xd
    hs = hx * hx + hy * hy + hz * hz
    h = math.sqrt(hs)

    r = math.sqrt(x * x + y * y + z * z)
    vs = xd * xd + yd * yd + zd * zd
    rdot = (x * xd + y * yd + z * zd) / r

    inc = math.acos(max(-1.0, min(1.0, hz / h)))
    longnode = math.atan2(hx, -hy) if (hx != 0.0 or hy != 0.0) else 0.0

    a = 1.0 / (2.0 / r - vs / gm)

    ecos = hs / (gm * r) - 1.0
    esin = rdot * h / gm
    e = math.sqrt(ecos * ecos + esin * esin)
    trueanom = _angle(esin, ecos)

    cosnode = math.cos(longnode)
    sinnode = math.sin(longnode)
    rcosu = x * cosnode + y * sinnode
    rsinu = (y * cosnode - x * sinnode) / math.cos(inc)
    argperi = _angle(rsinu, rcosu) - trueanom

    foo = math.sqrt(abs(1.0 - e) / (1.0 + e))
    if e < 1.0:
        eccanom = 2.0 * math.atan(foo * math.tan(trueanom / 2.0))
        meananom = _wrap(eccanom - e * math.sin(eccanom))
    else:
        eccanom = 2.0 * math.atanh(foo * math.tan(trueanom / 2.0))
        meananom = e * math.sinh(eccanom) - eccanom

    return OrbitalElements(
        a=a, e=e, i=inc, longnode=longnode, argperi=_wrap(argperi), meananom=meananom
    )


def cartesian(gm: float, orbel: OrbitalElements) -> PhaseState:
    """Return the phase-space state for the given orbital elements."""
    e = orbel.e
    if e < 1.0:
        anomaly = ecc_ano(e, orbel.meananom)
        cos_e, sin_e = math.cos(anomaly), math.sin(anomaly)
    else:
        anomaly = ecc_anohyp(e, orbel.meananom)
        cos_e, sin_e = math.cosh(anomaly), math.sinh(anomaly)

    a = abs(orbel.a)
    meanmotion = math.sqrt(gm / (a * a * a))
    foo = math.sqrt(abs(1.0 - e * e))

    rovera = 1.0 - e * cos_e
    if e > 1.0:
        rovera = -rovera
    x = a * (cos_e - e)
    y = foo * a * sin_e
    z = 0.0
    xd = -a * meanmotion * sin_e / rovera
    yd = foo * a * meanmotion * cos_e / rovera
    zd = 0.0
    if e > 1.0:
        x = -x

    cosw, sinw = math.cos(orbel.argperi), math.sin(orbel.argperi)
    xp, yp, zp = x * cosw - y * sinw, x * sinw + y * cosw, z
    xdp, ydp, zdp = xd * cosw - yd * sinw, xd * sinw + yd * cosw, zd

    cosi, sini = math.cos(orbel.i), math.sin(orbel.i)
    x, y, z = xp, yp * cosi - zp * sini, yp * sini + zp * cosi
    xd, yd, zd = xdp, ydp * cosi - zdp * sini, ydp * sini + zdp * cosi

    cosn, sinn = math.cos(orbel.longnode), math.sin(orbel.longnode)
    return PhaseState(
        x=x * cosn - y * sinn,
        y=x * sinn + y * cosn,
        z=z,
        xd=xd * cosn - yd * sinn,
        yd=xd * sinn + yd * cosn,
        zd=zd,
    )


def ecc_ano(e: float, l: float) -> float:
    """Solve Kepler's equation for an elliptic orbit by Newton iteration."""
    u0 = l + e * math.sin(l) + 0.5 * e * e * math.sin(2.0 * l)
    du = 1.0
    while abs(du) > _PREC_ECC_ANO:
        l0 = u0 - e * math.sin(u0)
        du = (l - l0) / (1.0 - e * math.cos(u0))
        u0 += du
    return u0


def ecc_anohyp(e: float, l: float) -> float:
    """Solve the hyperbolic Kepler equation ``e sinh H - H = l``."""
    start = 2.0 * l / e + 1.8
    if start <= 0.0:
        raise ValueError(f"no starting guess for hyperbolic anomaly with e={e}, l={l}")
    u0 = math.log(start)
    du = 1.0
    while abs(du) > _PREC_ECC_ANO:
        fh = e * math.sinh(u0) - u0 - l
        dfh = e * math.cosh(u0) - 1.0
        du = -fh / dfh
        u0 += du
    return u0


def kepler(ecc: float, mean_anom: float) -> float:
    """Solve Kepler's equation for elliptic or hyperbolic orbits."""
    if not mean_anom:
        return 0.0

    if ecc < 0.3:
        curr = math.atan2(math.sin(mean_anom), math.cos(mean_anom) - ecc)
        err = curr - ecc * math.sin(curr) - mean_anom
        return curr - err / (1.0 - ecc * math.cos(curr))

    is_negative = mean_anom < 0.0
    if is_negative:
        mean_anom = -mean_anom

    curr = mean_anom
    thresh = _THRESH * abs(1.0 - ecc)
    if (ecc > 0.8 and mean_anom < math.pi / 3.0) or ecc > 1.0:
        trial = mean_anom / abs(1.0 - ecc)
        if trial * trial > 6.0 * abs(1.0 - ecc):
            if mean_anom < math.pi:
                trial = math.exp(math.log(6.0 * mean_anom) / 3.0)
            else:
                trial = math.asinh(mean_anom / ecc)
        curr = trial

    if ecc < 1.0:
        err = curr - ecc * math.sin(curr) - mean_anom
        while abs(err) > thresh:
            curr -= err / (1.0 - ecc * math.cos(curr))
            err = curr - ecc * math.sin(curr) - mean_anom
    else:
        err = ecc * math.sinh(curr) - curr - mean_anom
        while abs(err) > thresh:
            curr -= err / (ecc * math.cosh(curr) - 1.0)
            err = ecc * math.sinh(curr) - curr - mean_anom

    return -curr if is_negative else curr


def kepstep(
    dt: float, m1: float, position: Sequence[float], velocity: Sequence[float]
) -> Tuple[Vector, Vector]:
    """Advance a Keplerian orbit by ``dt`` with f and g functions.

    ``m1`` is G times the total mass. Works for elliptic, parabolic and
    hyperbolic orbits. A body at the origin is returned unchanged.
    """
    x, y, z = position
    vx, vy, vz = velocity
    r0 = math.sqrt(x * x + y * y + z * z)
    if not r0 > 0.0:
        return (x, y, z), (vx, vy, vz)

    v2 = vx * vx + vy * vy + vz * vz
    r0dotv0 = x * vx + y * vy + z * vz
    alpha = 2.0 / r0 - v2 / m1

    x_p = solvex(r0dotv0, alpha, m1, r0, dt)
    smu = math.sqrt(m1)
    foo = 1.0 - r0 * alpha
    sig0 = r0dotv0 / smu

    x2 = x_p * x_p
    x3 = x2 * x_p
    alx2 = alpha * x2
    cp = c_prussing(alx2)
    sp = s_prussing(alx2)
    r = sig0 * x_p * (1.0 - alx2 * sp) + foo * x2 * cp + r0

    f_p = 1.0 - (x2 / r0) * cp
    g_p = dt - (x3 / smu) * sp
    dfdt = x_p * smu / (r * r0) * (alx2 * sp - 1.0)
    dgdt = 1.0 - (x2 / r) * cp

    new_position = (x * f_p + g_p * vx, y * f_p + g_p * vy, z * f_p + g_p * vz)
    new_velocity = (dfdt * x + dgdt * vx, dfdt * y + dgdt * vy, dfdt * z + dgdt * vz)
    return new_position, new_velocity


def solvex(r0dotv0: float, alpha: float, m1: float, r0: float, dt: float) -> float:
    """Solve the universal Kepler equation for the universal variable (Laguerre)."""
    smu = math.sqrt(m1)
    foo = 1.0 - r0 * alpha
    sig0 = r0dotv0 / smu
    x = m1 * dt * dt / r0

    for _ in range(_LAGUERRE_STEPS):
        x2 = x * x
        x3 = x2 * x
        alx2 = alpha * x2
        cp = c_prussing(alx2)
        sp = s_prussing(alx2)
        f = sig0 * x2 * cp + foo * x3 * sp + r0 * x - smu * dt
        df = sig0 * x * (1.0 - alx2 * sp) + foo * x2 * cp + r0
        ddf = sig0 * (1.0 - alx2 * cp) + foo * x * (1.0 - alx2 * sp)
        root = math.sqrt(abs((_N_LAG - 1.0) * ((_N_LAG - 1.0) * df * df - _N_LAG * f * ddf)))
        denominator = df - root if df < 0 else df + root
        x -= _N_LAG * f / denominator
    return x


def c_prussing(y: float) -> float:
    """Stumpff-type function C(y)."""
    if abs(y) < 1e-4:
        return 1.0 / 2.0 * (1.0 - y / 12.0 * (1.0 - y / 30.0 * (1.0 - y / 56.0)))
    u = math.sqrt(abs(y))
    if y > 0.0:
        return (1.0 - math.cos(u)) / y
    return (math.cosh(u) - 1.0) / -y


def s_prussing(y: float) -> float:
    """Stumpff-type function S(y)."""
    if abs(y) < 1e-4:
        return 1.0 / 6.0 * (1.0 - y / 20.0 * (1.0 - y / 42.0 * (1.0 - y / 72.0)))
    u = math.sqrt(abs(y))
    u3 = u * u * u
    if y > 0.0:
        return (u - math.sin(u)) / u3
    return (math.sinh(u) - u) / u3


def rayleigh(sigma: float, rng: Optional[UniformSource] = None) -> float:
    """Draw from the Rayleigh distribution with scale ``sigma``.

    The uniform deviate is taken as ``1 - rng.random()`` so it lies in (0, 1].
    """
    source = rng if rng is not None else random
    y = 1.0 - source.random()
    return sigma * math.sqrt(-2.0 * math.log(y))


def powerlaw(
    xmin: float, xmax: float, gamma: float, rng: Optional[UniformSource] = None
) -> float:
    """Draw from p(x) proportional to x**gamma between ``xmin`` and ``xmax``."""
    source = rng if rng is not None else random
    u = source.random()
    if gamma == -1.0:
        return xmin * (xmax / xmin) ** u
    g1 = gamma + 1.0
    diff = xmax**g1 - xmin**g1
    return (u * diff + xmin**g1) ** (1.0 / g1)