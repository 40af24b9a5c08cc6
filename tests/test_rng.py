import statistics

import pytest

from orbitkit.mtrand import MersenneTwister
from orbitkit.rng import Random


def test_random_follows_twister_stream():
    rng = Random(11)
    mt = MersenneTwister(11)
    assert [rng.random() for _ in range(50)] == [mt.random() for _ in range(50)]


def test_default_seed_is_zero():
    assert [Random().random() for _ in range(1)] == [MersenneTwister(0).random()]


def test_same_seed_same_sequence():
    a = Random(5)
    b = Random(5)
    assert [a.uniform(-1.0, 1.0) for _ in range(30)] == [b.uniform(-1.0, 1.0) for _ in range(30)]


def test_pivot_in_constructor_matches_set_pivot():
    a = Random(7, 3)
    b = Random(7)
    b.set_pivot(3)
    assert [a.random() for _ in range(10)] == [b.random() for _ in range(10)]


def test_pivot_discards_two_draws_per_step():
    rng = Random(9, 4)
    mt = MersenneTwister(9)
    for _ in range(8):
        mt.rand_int32()
    assert rng.random() == mt.random()


def test_set_seed_restarts():
    rng = Random(1)
    first = [rng.random() for _ in range(5)]
    rng.set_seed(1)
    assert [rng.random() for _ in range(5)] == first


def test_uniform_int_range():
    rng = Random(2)
    values = {rng.uniform_int(3, 8) for _ in range(2000)}
    assert values == {3, 4, 5, 6, 7}


def test_uniform_int_empty_range():
    with pytest.raises(ValueError):
        Random().uniform_int(4, 4)


def test_uniform_bounds():
    rng = Random(4)
    for _ in range(1000):
        assert 2.0 <= rng.uniform(2.0, 4.0) < 4.0


def test_gaussian_zero_sigma_returns_mean():
    assert Random(6).gaussian(3.5, 0.0) == 3.5


def test_gaussian_moments():
    rng = Random(8)
    samples = [rng.gaussian() for _ in range(3000)]
    assert abs(statistics.fmean(samples)) < 0.1
    assert abs(statistics.pstdev(samples) - 1.0) < 0.1