"""Energies, angular momenta, neighbour searches and orbit properties of
particles and multiples in an N-body snapshot.

A snapshot is a flat sequence of seven numbers per particle:
mass, x, y, z, vx, vy, vz. A multiple is given as a sequence of particle
indices into that snapshot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

_FAR = 1e100

Row = Tuple[float, float, float, float, float, float, float]


@dataclass(frozen=True)
class EscaperProperties:
    """Properties of a single escaping particle."""

    energy: float
    l2: float
    m: float
    r: float
    v: float
    rdotv: float
    theta: float
    phi: float


@dataclass(frozen=True)
class BinaryProperties:
    """Relative orbit and centre-of-mass properties of a pair.

    ``a`` and ``e`` are -1 unless the pair is bound with a real periapsis.
    """

    a: float
    e: float
    eb: float
    energy: float
    l2: float
    mu: float
    rcm: float
    vcm: float
    rcmdotvcm: float
    e_ext: float
    rp: float
    theta: float
    rdotv: float
    r: float


@dataclass(frozen=True)
class TripleProperties:
    """Inner and outer orbits and bulk properties of a hierarchical triple."""

    a1: float
    e1: float
    eb1: float
    a2: float
    e2: float
    eb2: float
    f_stab: float
    theta_int: float
    energy: float
    l2: float
    mu: float
    rcm: float
    vcm: float
    rcmdotvcm: float
    e_ext: float


@dataclass(frozen=True)
class BinaryInternalProperties:
    """Internal orbit of a pair; ``a`` and ``e`` are -1 if it is not bound."""

    a: float
    e: float
    eb: float
    energy: float
    l2: float
    mu: float


def _rows(data: Sequence[float]) -> List[Row]:
    if len(data) % 7:
        raise ValueError(f"snapshot length {len(data)} is not a multiple of 7")
    return [tuple(data[k : k + 7]) for k in range(0, len(data), 7)]  # type: ignore[misc]


def _dist2(p: Sequence[float], q: Sequence[float]) -> float:
    return (q[0] - p[0]) ** 2 + (q[1] - p[1]) ** 2 + (q[2] - p[2]) ** 2


def _cross(a: Sequence[float], b: Sequence[float]) -> Tuple[float, float, float]:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _others(rows: Sequence[Row], index: Iterable[int]) -> List[Row]:
    members = set(index)
    return [p for i, p in enumerate(rows) if i not in members]


def _cm_of(rows: Sequence[Row], index: Sequence[int]) -> List[float]:
    cm = [0.0] * 7
    for i in index:
        p = rows[i]
        cm[0] += p[0]
        for k in range(1, 7):
            cm[k] += p[0] * p[k]
    for k in range(1, 7):
        cm[k] /= cm[0]
    return cm


def cm_multiple(data: Sequence[float], index: Sequence[int]) -> List[float]:
    """Return total mass, centre-of-mass position and velocity of a multiple."""
    return _cm_of(_rows(data), index)


def coordinates_multiple(data: Sequence[float], index: Sequence[int]) -> List[float]:
    """Return the flat snapshot of the members of a multiple, in index order."""
    rows = _rows(data)
    return [value for i in index for value in rows[i]]


def coordinates_multiple_in_cm_frame(
    data: Sequence[float], index: Sequence[int]
) -> List[float]:
    """Return the members of a multiple relative to its centre of mass."""
    rows = _rows(data)
    cm = _cm_of(rows, index)
    out: List[float] = []
    for i in index:
        p = rows[i]
        out.append(p[0])
        out.extend(p[k] - cm[k] for k in range(1, 7))
    return out


def kinetic_energy_particle(data: Sequence[float], index: int) -> float:
    """Kinetic energy of one particle."""
    p = _rows(data)[index]
    return 0.5 * p[0] * (p[4] ** 2 + p[5] ** 2 + p[6] ** 2)


def potential_energy_particle(data: Sequence[float], index: int) -> float:
    """Potential energy of one particle with all the others."""
    rows = _rows(data)
    p = rows[index]
    return -sum(
        p[0] * q[0] / math.sqrt(_dist2(p[1:4], q[1:4]))
        for i, q in enumerate(rows)
        if i != index
    )


def energy_particle(data: Sequence[float], index: int) -> float:
    """Kinetic plus potential energy of one particle."""
    return kinetic_energy_particle(data, index) + potential_energy_particle(data, index)


def external_kinetic_energy_multiple(data: Sequence[float], index: Sequence[int]) -> float:
    """Kinetic energy of the centre of mass of a multiple."""
    cm = cm_multiple(data, index)
    return 0.5 * cm[0] * (cm[4] ** 2 + cm[5] ** 2 + cm[6] ** 2)


def external_potential_energy_multiple(
    data: Sequence[float], index: Sequence[int]
) -> float:
    """Potential energy of the multiple's centre of mass with the other particles."""
    rows = _rows(data)
    cm = _cm_of(rows, index)
    return -sum(
        cm[0] * q[0] / math.sqrt(_dist2(cm[1:4], q[1:4])) for q in _others(rows, index)
    )


def external_energy_multiple(data: Sequence[float], index: Sequence[int]) -> float:
    """External kinetic plus potential energy of a multiple."""
    return external_kinetic_energy_multiple(data, index) + external_potential_energy_multiple(
        data, index
    )


def internal_kinetic_energy_multiple(data: Sequence[float], index: Sequence[int]) -> float:
    """Kinetic energy of the members relative to their centre of mass."""
    rows = _rows(data)
    cm = _cm_of(rows, index)
    total = 0.0
    for i in index:
        p = rows[i]
        total += 0.5 * p[0] * sum((p[k] - cm[k]) ** 2 for k in (4, 5, 6))
    return total


def internal_potential_energy_multiple(
    data: Sequence[float], index: Sequence[int]
) -> float:
    """Mutual potential energy of the members of a multiple."""
    rows = _rows(data)
    members = [rows[i] for i in index]
    total = 0.0
    for a, p in enumerate(members):
        for q in members[a + 1 :]:
            total -= p[0] * q[0] / math.sqrt(_dist2(p[1:4], q[1:4]))
    return total


def internal_energy_multiple(data: Sequence[float], index: Sequence[int]) -> float:
    """Internal kinetic plus potential energy of a multiple."""
    return internal_kinetic_energy_multiple(data, index) + internal_potential_energy_multiple(
        data, index
    )


def angular_momentum_particle(data: Sequence[float], index: int) -> float:
    """Magnitude of one particle's angular momentum about the origin."""
    p = _rows(data)[index]
    lx, ly, lz = _cross(p[1:4], p[4:7])
    return p[0] * math.sqrt(lx * lx + ly * ly + lz * lz)


def external_angular_momentum_multiple(
    data: Sequence[float], index: Sequence[int]
) -> float:
    """Magnitude of the angular momentum of a multiple's centre of mass."""
    cm = cm_multiple(data, index)
    lx, ly, lz = _cross(cm[1:4], cm[4:7])
    return cm[0] * math.sqrt(lx * lx + ly * ly + lz * lz)


def internal_angular_momentum_multiple(
    data: Sequence[float], index: Sequence[int]
) -> float:
    """Magnitude of the angular momentum of the members about their centre of mass."""
    rows = _rows(data)
    cm = _cm_of(rows, index)
    total = [0.0, 0.0, 0.0]
    for i in index:
        p = rows[i]
        pos = [p[k] - cm[k] for k in (1, 2, 3)]
        vel = [p[k] - cm[k] for k in (4, 5, 6)]
        for k, component in enumerate(_cross(pos, vel)):
            total[k] += p[0] * component
    return math.sqrt(sum(c * c for c in total))


def is_isolated_abs_particle(data: Sequence[float], index: int, r: float) -> bool:
    """True if no other particle lies within distance ``r`` of the particle."""
    rows = _rows(data)
    centre = rows[index][1:4]
    limit = r * r
    return all(
        _dist2(centre, q[1:4]) >= limit for i, q in enumerate(rows) if i != index
    )


def is_isolated_abs_multiple(data: Sequence[float], index: Sequence[int], r: float) -> bool:
    """True if no outside particle lies within ``r`` of the multiple's centre of mass."""
    rows = _rows(data)
    centre = _cm_of(rows, index)[1:4]
    limit = r * r
    return all(_dist2(centre, q[1:4]) >= limit for q in _others(rows, index))


def is_isolated_rel_multiple(data: Sequence[float], index: Sequence[int], f: float) -> bool:
    """True if no outside particle lies within ``f`` times the multiple's size.

    The size is the largest distance of a member from the centre of mass.
    """
    rows = _rows(data)
    centre = _cm_of(rows, index)[1:4]
    size2 = max((_dist2(centre, rows[i][1:4]) for i in index), default=0.0)
    size2 = max(size2, 0.0)
    limit = f * f * size2
    return all(_dist2(centre, q[1:4]) >= limit for q in _others(rows, index))


def is_nn_multiple(data: Sequence[float], index: Sequence[int]) -> bool:
    """True if no outside particle is closer to a member than the members' largest separation."""
    rows = _rows(data)
    members = [rows[i][1:4] for i in index]
    spread = 0.0
    for a, p in enumerate(members):
        for q in members[a + 1 :]:
            spread = max(spread, _dist2(p, q))
    for q in _others(rows, index):
        closest = min((_dist2(q[1:4], p) for p in members), default=_FAR)
        if closest < spread:
            return False
    return True


def _nearest(centre: Sequence[float], candidates: Iterable[Tuple[int, Row]], num_nn: int) -> List[int]:
    nn_index = [0] * num_nn
    nn_dr2 = [_FAR] * num_nn
    for i, q in candidates:
        dr2 = _dist2(centre, q[1:4])
        for slot in range(num_nn):
            if dr2 < nn_dr2[slot]:
                nn_dr2.insert(slot, dr2)
                nn_index.insert(slot, i)
                del nn_dr2[num_nn:]
                del nn_index[num_nn:]
                break
    return nn_index


def nn_list_particle(data: Sequence[float], index: int, num_nn: int) -> List[int]:
    """Indices of the ``num_nn`` nearest neighbours, closest first.

    Slots beyond the available neighbours hold index 0.
    """
    rows = _rows(data)
    centre = rows[index][1:4]
    return _nearest(centre, ((i, q) for i, q in enumerate(rows) if i != index), num_nn)


def nn_list_multiple(data: Sequence[float], index: Sequence[int], num_nn: int) -> List[int]:
    """Indices of the ``num_nn`` outside particles nearest the multiple's centre of mass."""
    rows = _rows(data)
    centre = _cm_of(rows, index)[1:4]
    members = set(index)
    return _nearest(
        centre, ((i, q) for i, q in enumerate(rows) if i not in members), num_nn
    )


def distance_nn_particle(data: Sequence[float], index: int) -> float:
    """Distance to the nearest other particle (``sqrt(1e100)`` if there is none)."""
    rows = _rows(data)
    centre = rows[index][1:4]
    best = min(
        (_dist2(centre, q[1:4]) for i, q in enumerate(rows) if i != index), default=_FAR
    )
    return math.sqrt(min(best, _FAR))


def distance_nn_multiple(data: Sequence[float], index: Sequence[int]) -> float:
    """Distance from the multiple's centre of mass to the nearest outside particle."""
    rows = _rows(data)
    centre = _cm_of(rows, index)[1:4]
    best = min((_dist2(centre, q[1:4]) for q in _others(rows, index)), default=_FAR)
    return math.sqrt(min(best, _FAR))


def escaper_properties(data: Sequence[float], index: int) -> EscaperProperties:
    """Energy, angular momentum and position and velocity summary of a particle."""
    m, x, y, z, vx, vy, vz = _rows(data)[index]
    r = math.sqrt(x * x + y * y + z * z)
    l = angular_momentum_particle(data, index)
    return EscaperProperties(
        energy=energy_particle(data, index),
        l2=l * l,
        m=m,
        r=r,
        v=math.sqrt(vx * vx + vy * vy + vz * vz),
        rdotv=x * vx + y * vy + z * vz,
        theta=math.acos(z / r),
        phi=math.atan2(y, x),
    )


def _eccentricity(rp: float, ra: float) -> float:
    if rp == 0.0:
        return 1.0
    return 1.0 - 2.0 / (ra / rp + 1.0)


def _relative(p: Row, q: Row) -> Tuple[List[float], List[float]]:
    return [q[k] - p[k] for k in (1, 2, 3)], [q[k] - p[k] for k in (4, 5, 6)]


def binary_properties(data: Sequence[float], index1: int, index2: int) -> BinaryProperties:
    """Relative orbit and centre-of-mass properties of the pair (index1, index2)."""
    rows = _rows(data)
    p1, p2 = rows[index1], rows[index2]
    m1, m2 = p1[0], p2[0]
    mu = m1 + m2
    cm = _cm_of(rows, (index1, index2))
    rcm = math.sqrt(cm[1] ** 2 + cm[2] ** 2 + cm[3] ** 2)
    vcm = math.sqrt(cm[4] ** 2 + cm[5] ** 2 + cm[6] ** 2)
    rcmdotvcm = cm[1] * cm[4] + cm[2] * cm[5] + cm[3] * cm[6]
    e_ext = external_energy_multiple(data, (index1, index2))

    pos, vel = _relative(p1, p2)
    r = math.sqrt(sum(c * c for c in pos))
    v2 = sum(c * c for c in vel)
    rdotv = sum(a * b for a, b in zip(pos, vel))
    energy = 0.5 * v2 - mu / r
    l2 = sum(c * c for c in _cross(pos, vel))

    a = -1.0
    e = -1.0
    eb = 0.0
    rp = 0.0
    if energy < 0:
        disc = mu * mu + 2.0 * energy * l2
        if disc >= 0:
            rp = (-mu + math.sqrt(disc)) / (2.0 * energy)
            ra = (-mu - math.sqrt(disc)) / (2.0 * energy)
            a = 0.5 * (rp + ra)
            e = _eccentricity(rp, ra)
            eb = 0.5 * m1 * m2 / a
    elif energy == 0:
        rp = l2 / (2.0 * mu)
    else:
        disc = mu * mu + 2.0 * energy * l2
        if disc >= 0:
            rp = (-mu + math.sqrt(disc)) / (2.0 * energy)

    return BinaryProperties(
        a=a,
        e=e,
        eb=eb,
        energy=energy,
        l2=l2,
        mu=mu,
        rcm=rcm,
        vcm=vcm,
        rcmdotvcm=rcmdotvcm,
        e_ext=e_ext,
        rp=rp,
        theta=0.0,
        rdotv=rdotv,
        r=r,
    )


def triple_properties(
    data: Sequence[float], index1: int, index2: int, index3: int
) -> TripleProperties:
    """Inner and outer orbit of a triple; the closest pair is taken as inner binary."""
    rows = _rows(data)
    index = (index1, index2, index3)
    cm = _cm_of(rows, index)
    mu = cm[0]
    rcm = math.sqrt(cm[1] ** 2 + cm[2] ** 2 + cm[3] ** 2)
    vcm = math.sqrt(cm[4] ** 2 + cm[5] ** 2 + cm[6] ** 2)
    rcmdotvcm = cm[1] * cm[4] + cm[2] * cm[5] + cm[3] * cm[6]
    e_ext = external_energy_multiple(data, index)
    energy = internal_energy_multiple(data, index)
    l = internal_angular_momentum_multiple(data, index)

    p1, p2, p3 = rows[index1][1:4], rows[index2][1:4], rows[index3][1:4]
    d12, d13, d23 = _dist2(p1, p2), _dist2(p1, p3), _dist2(p2, p3)
    ia, ib, ic = index1, index2, index3
    if d13 < d12 and d13 < d23:
        ia, ib, ic = index1, index3, index2
    if d23 < d12 and d23 < d13:
        ia, ib, ic = index2, index3, index1

    inner = binary_properties(data, ia, ib)
    inner_cm = _cm_of(rows, (ia, ib))
    outer = binary_properties(list(inner_cm) + list(rows[ic]), 0, 1)

    rp = outer.a * (1.0 - outer.e)
    f_stab = rp / inner.a

    pos_i, vel_i = _relative(rows[ia], rows[ib])
    pos_o = [rows[ic][k] - inner_cm[k] for k in (1, 2, 3)]
    vel_o = [rows[ic][k] - inner_cm[k] for k in (4, 5, 6)]
    l_in = _cross(pos_i, vel_i)
    l_out = _cross(pos_o, vel_o)
    norm = math.sqrt(sum(c * c for c in l_in)) * math.sqrt(sum(c * c for c in l_out))
    if norm == 0.0:
        theta_int = math.nan
    else:
        cos_theta = sum(a * b for a, b in zip(l_in, l_out)) / norm
        theta_int = math.acos(max(-1.0, min(1.0, cos_theta)))

    return TripleProperties(
        a1=inner.a,
        e1=inner.e,
        eb1=inner.eb,
        a2=outer.a,
        e2=outer.e,
        eb2=outer.eb,
        f_stab=f_stab,
        theta_int=theta_int,
        energy=energy,
        l2=l * l,
        mu=mu,
        rcm=rcm,
        vcm=vcm,
        rcmdotvcm=rcmdotvcm,
        e_ext=e_ext,
    )


def binary_internal_properties(
    data: Sequence[float], index1: int, index2: int
) -> BinaryInternalProperties:
    """Internal orbit of the pair (index1, index2)."""
    rows = _rows(data)
    p1, p2 = rows[index1], rows[index2]
    m1, m2 = p1[0], p2[0]
    mu = m1 + m2
    pos, vel = _relative(p1, p2)
    r = math.sqrt(sum(c * c for c in pos))
    energy = 0.5 * sum(c * c for c in vel) - mu / r
    l2 = sum(c * c for c in _cross(pos, vel))

    a = -1.0
    e = -1.0
    eb = 1e-100
    disc = mu * mu + 2.0 * energy * l2
    if disc >= 0 and energy < 0:
        rp = (-mu + math.sqrt(disc)) / (2.0 * energy)
        ra = (-mu - math.sqrt(disc)) / (2.0 * energy)
        a = 0.5 * (rp + ra)
        e = _eccentricity(rp, ra)
        eb = 0.5 * m1 * m2 / a

    return BinaryInternalProperties(a=a, e=e, eb=eb, energy=energy, l2=l2, mu=mu)