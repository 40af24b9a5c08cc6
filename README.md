# orbitkit

A library for studying small gravitating systems: two-body orbits and
their propagation, the energies and orbits of particles, pairs and
triples in an N-body snapshot, external potentials, and distances
between two snapshots.

Particle data throughout the package is a flat sequence of seven numbers
per particle: mass, x, y, z, vx, vy, vz. Units are N-body units with
G = 1 unless stated otherwise.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## What is in the package

- `orbitkit.kepcart` – conversion between Cartesian phase-space states
  (`PhaseState`) and orbital elements (`OrbitalElements`) with
  `keplerian` and `cartesian`; solvers for Kepler's equation
  (`ecc_ano` for elliptic, `ecc_anohyp` for hyperbolic, `kepler` for
  both); a universal-variable Kepler step with f and g functions
  (`kepstep`, `solvex`, `c_prussing`, `s_prussing`); and draws from the
  Rayleigh (`rayleigh`) and power-law (`powerlaw`) distributions, taking
  any object with a `random()` method as the uniform source.
- `orbitkit.twobody` – `Twobody`, which advances a relative orbit by a
  time step. `solve` removes whole periods of a bound orbit, solves for
  the universal anomaly with Laguerre's method, and splits the step into
  2, 4, 6, ... sub-steps when that fails, raising `ConvergenceError` if
  no split works. Newton, Halley and Chebyshev solvers and a single
  leapfrog step (`solve_by_leapfrog`) are also available.
- `orbitkit.multiples` – `Multiples` builds nearest and second-nearest
  neighbour lists (`make_nn_list`) and collects isolated mutual
  nearest-neighbour pairs into `two_body_binaries` (bound) and
  `two_body_flybys` (unbound and approaching); `process` does both.
- `orbitkit.potentials` – `Potentials` for point-mass, homogeneous-sphere
  and isochrone potentials (`PotentialType`), with `acceleration_at`
  obtained from forward differences extrapolated to zero step size
  (`extrapolate`, Neville's scheme).
- `orbitkit.measures` – centre of mass, kinetic, potential, internal and
  external energies, angular momenta, isolation tests, nearest-neighbour
  lists and distances, and the properties of escapers, binaries and
  triples (`EscaperProperties`, `BinaryProperties`, `TripleProperties`,
  `BinaryInternalProperties`).
- `orbitkit.mtrand` – `MersenneTwister`, an MT19937 generator seeded by
  an integer or an array, with `rand_int32`, `random`, `random_closed`,
  `random_open` and `random53`.
- `orbitkit.rng` – `Random`, a seedable source of uniform integers,
  uniform floats and Gaussian deviates built on `MersenneTwister`; a
  `pivot` discards pairs of draws after seeding.
- `orbitkit.timer` – `Timer`, a wall-clock stopwatch with `start`,
  `stop`, `read` and `get`, also usable as a context manager.
- `orbitkit.delta` – `Delta`, logarithmic (`0.5 * log10`) phase-space,
  position and velocity distances between two snapshots in mpmath
  precision, a convergence test against a tolerance, and an estimate of
  the tolerance needed to stay converged longer.

## Examples

```python
from orbitkit.kepcart import OrbitalElements, cartesian, keplerian

elements = OrbitalElements(a=1.0, e=0.3, i=0.2, longnode=0.5, argperi=1.0, meananom=0.7)
state = cartesian(1.0, elements)
recovered = keplerian(1.0, state)
print(recovered.a, recovered.e)
```

```python
from orbitkit.twobody import Twobody

position, velocity = Twobody().solve(1.0, (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), 0.5)
```

```python
from orbitkit import measures

data = [
    1.0, -0.5, 0.0, 0.0, 0.0, -0.5, 0.0,
    1.0,  0.5, 0.0, 0.0, 0.0,  0.5, 0.0,
]
print(measures.internal_energy_multiple(data, [0, 1]))
print(measures.binary_properties(data, 0, 1).a)
```

```python
from orbitkit.delta import Delta

delta = Delta("1e-10")
print(delta.phase_space_distance(data_a, data_b), delta.is_converged(data_a, data_b))
```

## What the package does not do

orbitkit is a library only: it installs no command-line program. It does
not read or write snapshot files, does not classify the overall outcome
of an encounter (beyond the two-body detection in `Multiples`), and has
no whole-system diagnostics such as virial or half-mass radii, densities
or velocity dispersions. It does not integrate an N-body system; it
supplies the pieces around such an integration.