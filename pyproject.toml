[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "orbitkit"
version = "0.1.0"
description = "Few-body gravitational dynamics toolkit: Kepler orbits, two-body propagation, encounter measures, external potentials and snapshot distances"
requires-python = ">=3.10"
dependencies = [
    "mpmath",
]
keywords = [
    "astronomy",
    "n-body",
    "kepler",
    "orbital elements",
    "celestial mechanics",
    "gravitational dynamics",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Astronomy",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["orbitkit"]

[tool.pytest.ini_options]
addopts = "-ra"
