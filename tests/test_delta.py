import pytest
from mpmath import mpf

from orbitkit.delta import Delta

BASE = [
    1.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6,
    2.0, -1.0, 0.5, 0.0, 0.1, -0.2, 0.3,
]
SHIFTED = [
    1.0, 0.15, 0.1, 0.3, 0.45, 0.5, 0.7,
    2.0, -1.2, 0.5, 0.05, 0.1, -0.1, 0.3,
]


def test_single_offset_position():
    delta = Delta()
    a = [1, 0, 0, 0, 0, 0, 0]
    b = [1, 10, 0, 0, 0, 0, 0]
    assert float(delta.position_space_distance(a, b)) == pytest.approx(1.0)
    assert float(delta.phase_space_distance(a, b)) == pytest.approx(1.0)
    assert delta.velocity_space_distance(a, b) == 0


def test_identical_snapshots_give_zero():
    assert Delta().all(BASE, list(BASE)) == [0] * 6


def test_symmetric():
    delta = Delta()
    assert delta.phase_space_distance(BASE, SHIFTED) == delta.phase_space_distance(SHIFTED, BASE)


def test_phase_combines_position_and_velocity():
    delta = Delta()
    phase = delta.phase_space_distance(BASE, SHIFTED)
    pos = delta.position_space_distance(BASE, SHIFTED)
    vel = delta.velocity_space_distance(BASE, SHIFTED)
    assert float(mpf(10) ** (2 * phase)) == pytest.approx(
        float(mpf(10) ** (2 * pos) + mpf(10) ** (2 * vel))
    )


def test_normalized_phase_below_raw():
    delta = Delta()
    raw = delta.phase_space_distance(BASE, SHIFTED)
    norm = delta.phase_space_distance_normalized(BASE, SHIFTED)
    assert float(mpf(10) ** (2 * raw) / 12) == pytest.approx(float(mpf(10) ** (2 * norm)))


def test_all_matches_individual_methods():
    delta = Delta()
    expected = [
        delta.phase_space_distance(BASE, SHIFTED),
        delta.position_space_distance(BASE, SHIFTED),
        delta.velocity_space_distance(BASE, SHIFTED),
        delta.phase_space_distance_normalized(BASE, SHIFTED),
        delta.position_space_distance_normalized(BASE, SHIFTED),
        delta.velocity_space_distance_normalized(BASE, SHIFTED),
    ]
    got = delta.all(BASE, SHIFTED)
    assert [float(v) for v in got] == pytest.approx([float(v) for v in expected])


def test_all_individual_single_particle_equals_all():
    delta = Delta()
    a, b = BASE[:7], SHIFTED[:7]
    individual = delta.all_individual(a, b)
    assert len(individual) == 1
    assert [float(v) for v in individual[0]] == pytest.approx([float(v) for v in delta.all(a, b)])


def test_extra_particles_ignored():
    delta = Delta()
    longer = SHIFTED + [3.0, 9.0, 9.0, 9.0, 9.0, 9.0, 9.0]
    assert delta.phase_space_distance(BASE, longer) == delta.phase_space_distance(BASE, SHIFTED)


def test_tolerance_conversion():
    assert float(Delta().tolerance) == pytest.approx(-6.0)
    assert float(Delta("1e-10").tolerance) == pytest.approx(-10.0)
    assert Delta(-8).tolerance == -8


def test_tolerance_setter_converts():
    delta = Delta()
    delta.tolerance = "1e-20"
    assert float(delta.tolerance) == pytest.approx(-20.0)


def test_is_converged():
    delta = Delta("1e-6")
    tiny = list(BASE)
    tiny[1] += 1e-9
    assert delta.is_converged(BASE, tiny) is True
    assert delta.is_converged(BASE, SHIFTED) is False


def test_estimate_new_tolerance():
    delta = Delta("1e-6")
    estimate = delta.estimate_new_tolerance(0, 8, 4, "1e-10", "1e-6")
    assert float(estimate) == pytest.approx(-17.0)


def test_estimate_accepts_logarithmic_tolerances():
    delta = Delta("1e-6")
    raw = delta.estimate_new_tolerance(0, 8, 4, "1e-10", "1e-6")
    logged = delta.estimate_new_tolerance(0, 8, 4, -10, -6)
    assert float(raw) == pytest.approx(float(logged))


def test_normalized_needs_particles():
    with pytest.raises(ValueError):
        Delta().phase_space_distance_normalized([], [])