import math

import pytest

from orbitkit.potentials import PotentialType, Potentials, extrapolate


def test_extrapolate_single_point_returns_value():
    assert extrapolate([0.3], [4.2], 0.0) == 4.2


def test_extrapolate_quadratic_is_exact():
    def f(t):
        return 2.0 * t * t + 3.0 * t + 7.0

    xs = [0.5, 1.0, 2.0]
    assert extrapolate(xs, [f(t) for t in xs], 0.0) == pytest.approx(7.0)


def test_extrapolate_does_not_modify_input():
    ys = [1.0, 2.0, 4.0]
    extrapolate([1.0, 2.0, 3.0], ys, 0.0)
    assert ys == [1.0, 2.0, 4.0]


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        Potentials("plummer_blob")


@pytest.mark.parametrize("kind", ["homo_sphere", "isochrone"])
def test_scale_radius_required(kind):
    with pytest.raises(ValueError):
        Potentials(kind)


def test_string_type_is_converted():
    assert Potentials("point_mass").potential_type is PotentialType.POINT_MASS


def test_none_potential_has_no_acceleration():
    pot = Potentials()
    assert pot.potential_at(1.0, 1.0, 2.0, 3.0) == 0.0
    assert pot.acceleration_at(1.0, 1.0, 2.0, 3.0) == (0.0, 0.0, 0.0)


def test_homo_sphere_matches_point_mass_outside():
    sphere = Potentials(PotentialType.HOMO_SPHERE, [1.5])
    point = Potentials(PotentialType.POINT_MASS)
    for pos in [(2.0, 0.0, 0.0), (1.0, 2.0, 3.0)]:
        assert sphere.homo_sphere_potential_at(2.0, *pos) == pytest.approx(
            point.point_mass_potential_at(2.0, *pos)
        )


def test_homo_sphere_continuous_at_surface():
    sphere = Potentials(PotentialType.HOMO_SPHERE, [2.0])
    inside = sphere.homo_sphere_potential_at(1.0, 2.0 - 1e-9, 0.0, 0.0)
    outside = sphere.homo_sphere_potential_at(1.0, 2.0 + 1e-9, 0.0, 0.0)
    assert inside == pytest.approx(outside, rel=1e-7)


def test_isochrone_centre_equals_point_mass_at_two_b():
    b = 0.7
    iso = Potentials(PotentialType.ISOCHRONE, [b])
    point = Potentials(PotentialType.POINT_MASS)
    assert iso.isochrone_potential_at(3.0, 0.0, 0.0, 0.0) == pytest.approx(
        point.point_mass_potential_at(3.0, 2 * b, 0.0, 0.0)
    )


def test_potential_at_dispatches():
    iso = Potentials(PotentialType.ISOCHRONE, [0.5])
    assert iso.potential_at(1.0, 1.0, 1.0, 0.0) == iso.isochrone_potential_at(
        1.0, 1.0, 1.0, 0.0
    )


def test_point_mass_acceleration_follows_inverse_square():
    pot = Potentials(PotentialType.POINT_MASS)
    x = 3.0
    ax, ay, az = pot.acceleration_at(1.0, x, 0.0, 0.0)
    assert ax == pytest.approx(-pot.mgal / x**2, rel=1e-2)
    assert ay == pytest.approx(0.0, abs=1e-4)
    assert az == pytest.approx(0.0, abs=1e-4)


def test_homo_sphere_acceleration_is_linear_inside():
    radius = 4.0
    pot = Potentials(PotentialType.HOMO_SPHERE, [radius])
    pos = (0.5, -1.0, 1.5)
    acc = pot.acceleration_at(2.0, *pos)
    expected = tuple(-pot.mgal * c / radius**3 for c in pos)
    assert acc == pytest.approx(expected, abs=1e-9)


def test_acceleration_independent_of_test_mass():
    pot = Potentials(PotentialType.ISOCHRONE, [1.0])
    assert pot.acceleration_at(1.0, 1.0, 2.0, 0.5) == pytest.approx(
        pot.acceleration_at(5.0, 1.0, 2.0, 0.5), rel=1e-9
    )


def test_isochrone_acceleration_points_inward():
    pot = Potentials(PotentialType.ISOCHRONE, [1.0])
    pos = (1.0, 2.0, 0.5)
    acc = pot.acceleration_at(1.0, *pos)
    radial = sum(a * p for a, p in zip(acc, pos))
    tangential = math.sqrt(
        sum(a * a for a in acc) - radial**2 / sum(p * p for p in pos)
    )
    assert radial < 0
    assert tangential == pytest.approx(0.0, abs=1e-3)