"""Few-body gravitational dynamics: Kepler orbits, two-body propagation, encounter measures, potentials and snapshot distances."""

__version__ = "0.1.0"

__all__ = [
    "delta",
    "kepcart",
    "measures",
    "mtrand",
    "multiples",
    "potentials",
    "rng",
    "timer",
    "twobody",
]