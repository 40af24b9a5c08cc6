import math
import random
from dataclasses import astuple

import pytest

from orbitkit.kepcart import (
    OrbitalElements,
    PhaseState,
    c_prussing,
    cartesian,
    ecc_ano,
    ecc_anohyp,
    kepler,
    keplerian,
    kepstep,
    powerlaw,
    rayleigh,
    s_prussing,
    solvex,
)

ELLIPTIC = OrbitalElements(a=1.3, e=0.4, i=0.5, longnode=1.0, argperi=0.7, meananom=2.0)
HYPERBOLIC = OrbitalElements(a=-2.0, e=1.5, i=0.3, longnode=-0.5, argperi=1.1, meananom=0.8)


class _Fixed:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def _position(state):
    return (state.x, state.y, state.z)


def _velocity(state):
    return (state.xd, state.yd, state.zd)


@pytest.mark.parametrize("elements", [ELLIPTIC, HYPERBOLIC])
def test_round_trip_elements(elements):
    back = keplerian(1.0, cartesian(1.0, elements))
    assert astuple(back) == pytest.approx(astuple(elements), abs=1e-9)


@pytest.mark.parametrize("elements", [ELLIPTIC, HYPERBOLIC])
def test_cartesian_satisfies_vis_viva(elements):
    state = cartesian(1.0, elements)
    r = math.hypot(*_position(state))
    v2 = sum(c * c for c in _velocity(state))
    assert v2 == pytest.approx(2.0 / r - 1.0 / elements.a, rel=1e-10)


def test_planar_orbit_has_zero_node():
    elements = keplerian(1.0, PhaseState(1.0, 0.0, 0.0, 0.0, 1.0, 0.0))
    assert elements.longnode == 0.0
    assert elements.i == pytest.approx(0.0, abs=1e-12)
    assert elements.e == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("e,m", [(0.2, 1.0), (0.6, -2.5), (0.95, 0.1)])
def test_ecc_ano_solves_kepler_equation(e, m):
    u = ecc_ano(e, m)
    assert u - e * math.sin(u) == pytest.approx(m, abs=1e-12)


@pytest.mark.parametrize("e,m", [(1.2, 0.5), (3.0, 10.0)])
def test_ecc_anohyp_solves_hyperbolic_equation(e, m):
    h = ecc_anohyp(e, m)
    assert e * math.sinh(h) - h == pytest.approx(m, abs=1e-10)


def test_ecc_anohyp_rejects_impossible_guess():
    with pytest.raises(ValueError):
        ecc_anohyp(1.5, -5.0)


def test_kepler_zero_mean_anomaly():
    assert kepler(0.7, 0.0) == 0.0


def test_kepler_low_eccentricity_residual():
    u = kepler(0.1, 1.3)
    assert abs(u - 0.1 * math.sin(u) - 1.3) < 1e-6


@pytest.mark.parametrize("e,m", [(0.5, 1.0), (0.9, 0.4), (0.85, 2.0)])
def test_kepler_matches_ecc_ano(e, m):
    assert kepler(e, m) == pytest.approx(ecc_ano(e, m), abs=1e-8)


def test_kepler_hyperbolic_matches_ecc_anohyp():
    assert kepler(1.5, 2.0) == pytest.approx(ecc_anohyp(1.5, 2.0), abs=1e-8)


def test_kepler_is_odd():
    assert kepler(0.9, -0.5) == -kepler(0.9, 0.5)


@pytest.mark.parametrize("elements,dt", [(ELLIPTIC, 0.5), (HYPERBOLIC, 0.4)])
def test_kepstep_matches_mean_anomaly_advance(elements, dt):
    start = cartesian(1.0, elements)
    position, velocity = kepstep(dt, 1.0, _position(start), _velocity(start))
    n = math.sqrt(1.0 / abs(elements.a) ** 3)
    later = OrbitalElements(
        a=elements.a,
        e=elements.e,
        i=elements.i,
        longnode=elements.longnode,
        argperi=elements.argperi,
        meananom=elements.meananom + n * dt,
    )
    expected = cartesian(1.0, later)
    assert position == pytest.approx(_position(expected), abs=1e-9)
    assert velocity == pytest.approx(_velocity(expected), abs=1e-9)


def test_kepstep_circular_orbit():
    position, velocity = kepstep(0.3, 1.0, (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    assert position == pytest.approx((math.cos(0.3), math.sin(0.3), 0.0), abs=1e-10)
    assert velocity == pytest.approx((-math.sin(0.3), math.cos(0.3), 0.0), abs=1e-10)


def test_kepstep_conserves_energy():
    start = cartesian(1.0, ELLIPTIC)
    position, velocity = kepstep(1.1, 1.0, _position(start), _velocity(start))

    def energy(p, v):
        return 0.5 * sum(c * c for c in v) - 1.0 / math.hypot(*p)

    assert energy(position, velocity) == pytest.approx(
        energy(_position(start), _velocity(start)), rel=1e-10
    )


def test_kepstep_zero_time_is_identity():
    position, velocity = kepstep(0.0, 1.0, (0.3, 0.8, -0.2), (0.1, 0.9, 0.4))
    assert position == pytest.approx((0.3, 0.8, -0.2))
    assert velocity == pytest.approx((0.1, 0.9, 0.4))


def test_kepstep_body_at_origin_unchanged():
    position, velocity = kepstep(1.0, 1.0, (0.0, 0.0, 0.0), (0.5, 0.1, 0.2))
    assert position == (0.0, 0.0, 0.0)
    assert velocity == (0.5, 0.1, 0.2)


def test_solvex_zero_step():
    assert solvex(0.0, 1.0, 1.0, 1.0, 0.0) == pytest.approx(0.0, abs=1e-14)


def test_stumpff_series_values_at_zero():
    assert c_prussing(0.0) == 0.5
    assert s_prussing(0.0) == pytest.approx(1.0 / 6.0)


@pytest.mark.parametrize("y", [1e-4, -1e-4])
def test_stumpff_continuous_across_series_switch(y):
    inside = y * 0.9999
    outside = y * 1.0001
    assert c_prussing(inside) == pytest.approx(c_prussing(outside), rel=1e-6)
    assert s_prussing(inside) == pytest.approx(s_prussing(outside), rel=1e-6)


def test_stumpff_decreasing_in_argument():
    assert c_prussing(-2.0) > c_prussing(0.0) > c_prussing(2.0)
    assert s_prussing(-2.0) > s_prussing(0.0) > s_prussing(2.0)


def test_rayleigh_zero_deviate():
    assert rayleigh(3.0, _Fixed(0.0)) == 0.0


def test_rayleigh_scales_with_sigma():
    assert rayleigh(2.0, random.Random(5)) == pytest.approx(2.0 * rayleigh(1.0, random.Random(5)))


def test_rayleigh_is_non_negative():
    rng = random.Random(11)
    assert all(rayleigh(1.5, rng) >= 0.0 for _ in range(200))


@pytest.mark.parametrize("gamma", [-1.0, 2.0, -2.5])
def test_powerlaw_lower_edge(gamma):
    assert powerlaw(2.0, 9.0, gamma, _Fixed(0.0)) == pytest.approx(2.0)


@pytest.mark.parametrize("gamma", [-1.0, 0.5])
def test_powerlaw_within_bounds(gamma):
    rng = random.Random(3)
    values = [powerlaw(1.0, 10.0, gamma, rng) for _ in range(300)]
    assert all(1.0 <= v <= 10.0 for v in values)