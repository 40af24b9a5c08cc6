"""Detection of isolated two-body encounters in an N-body snapshot.

Snapshots are flat sequences of seven numbers per particle:
mass, x, y, z, vx, vy, vz.
"""

from __future__ import annotations

import math
from typing import List, NamedTuple, Sequence, Tuple

_FAR = 1e100


class _BinaryOrbit(NamedTuple):
    a: float
    e: float
    rp: float
    ra: float
    eb: float
    energy: float
    l2: float
    rcm: float
    vcm: float
    ekcm: float
    epcm: float
    ecm: float
    rcmdotvcm: float


def _rows(data: Sequence[float]) -> List[Sequence[float]]:
    return [data[k : k + 7] for k in range(0, len(data) - 6, 7)]


def _squared_distance(p: Sequence[float], q: Sequence[float]) -> float:
    return (q[1] - p[1]) ** 2 + (q[2] - p[2]) ** 2 + (q[3] - p[3]) ** 2


class Multiples:
    """Nearest-neighbour based finder of isolated binaries and fly-bys."""

    def __init__(self, r_encounter: float = 1e100, f_isolated: float = 10.0):
        self.r_encounter = r_encounter
        self.f_isolated = f_isolated
        self.nn_index: List[int] = []
        self.nn2_index: List[int] = []
        self.nn_distance: List[float] = []
        self.nn2_distance: List[float] = []
        self.two_body_binaries: List[Tuple[int, int]] = []
        self.two_body_flybys: List[Tuple[int, int]] = []

    def make_nn_list(self, data: Sequence[float]) -> None:
        """Find each particle's nearest and second-nearest neighbour.

        Only particles within ``r_encounter`` of the origin take part; the
        others keep index 0 and distance ``sqrt(1e100)``.
        """
        rows = _rows(data)
        limit2 = self.r_encounter * self.r_encounter
        inside = [p[1] * p[1] + p[2] * p[2] + p[3] * p[3] < limit2 for p in rows]

        nn_index = [0] * len(rows)
        nn2_index = [0] * len(rows)
        nn_d2 = [_FAR] * len(rows)
        nn2_d2 = [_FAR] * len(rows)

        for i, pi in enumerate(rows):
            if not inside[i]:
                continue
            for j, pj in enumerate(rows):
                if j == i or not inside[j]:
                    continue
                dr2 = _squared_distance(pi, pj)
                if dr2 < nn_d2[i]:
                    nn2_index[i], nn2_d2[i] = nn_index[i], nn_d2[i]
                    nn_index[i], nn_d2[i] = j, dr2
                elif dr2 < nn2_d2[i]:
                    nn2_index[i], nn2_d2[i] = j, dr2

        self.nn_index = nn_index
        self.nn2_index = nn2_index
        self.nn_distance = [math.sqrt(d) for d in nn_d2]
        self.nn2_distance = [math.sqrt(d) for d in nn2_d2]

    def get_binary_properties(
        self, data: Sequence[float], index1: int, index2: int
    ) -> _BinaryOrbit:
        """Return the relative orbit and centre-of-mass quantities of a pair."""
        rows = _rows(data)
        m1, x1, y1, z1, vx1, vy1, vz1 = rows[index1]
        m2, x2, y2, z2, vx2, vy2, vz2 = rows[index2]

        mu = m1 + m2
        xcm = (m1 * x1 + m2 * x2) / mu
        ycm = (m1 * y1 + m2 * y2) / mu
        zcm = (m1 * z1 + m2 * z2) / mu
        vxcm = (m1 * vx1 + m2 * vx2) / mu
        vycm = (m1 * vy1 + m2 * vy2) / mu
        vzcm = (m1 * vz1 + m2 * vz2) / mu
        rcm = math.sqrt(xcm * xcm + ycm * ycm + zcm * zcm)
        v2cm = vxcm * vxcm + vycm * vycm + vzcm * vzcm
        vcm = math.sqrt(v2cm)
        rcmdotvcm = xcm * vxcm + ycm * vycm + zcm * vzcm

        x, y, z = x2 - x1, y2 - y1, z2 - z1
        vx, vy, vz = vx2 - vx1, vy2 - vy1, vz2 - vz1
        r2 = x * x + y * y + z * z
        v2 = vx * vx + vy * vy + vz * vz
        energy = 0.5 * v2 - mu / math.sqrt(r2)
        lx = y * vz - z * vy
        ly = z * vx - x * vz
        lz = x * vy - y * vx
        l2 = lx * lx + ly * ly + lz * lz

        root = math.sqrt(max(mu * mu + 2.0 * energy * l2, 0.0))
        rp = (-mu + root) / (2.0 * energy)
        ra = (-mu - root) / (2.0 * energy)

        a = -mu / (2.0 * energy)
        e = 1.0 - 2.0 / (ra / rp + 1.0)
        eb = 0.5 * m1 * m2 / a

        ekcm = 0.5 * mu * v2cm
        epcm = 0.0
        for i, p in enumerate(rows):
            if i in (index1, index2):
                continue
            dr2 = (p[1] - xcm) ** 2 + (p[2] - ycm) ** 2 + (p[3] - zcm) ** 2
            epcm -= p[0] * mu / math.sqrt(dr2)

        return _BinaryOrbit(
            a=a,
            e=e,
            rp=rp,
            ra=ra,
            eb=eb,
            energy=energy,
            l2=l2,
            rcm=rcm,
            vcm=vcm,
            ekcm=ekcm,
            epcm=epcm,
            ecm=ekcm + epcm,
            rcmdotvcm=rcmdotvcm,
        )

    def detect_two_body_encounters(self, data: Sequence[float]) -> None:
        """Classify isolated mutual nearest-neighbour pairs.

        Bound pairs go to ``two_body_binaries``; unbound pairs that are
        approaching each other go to ``two_body_flybys``. Uses the lists
        built by :meth:`make_nn_list`.
        """
        rows = _rows(data)
        self.two_body_binaries = []
        self.two_body_flybys = []
        for i, j in enumerate(self.nn_index):
            if j <= i:
                continue
            if self.nn_index[j] != i:
                continue
            if not (self._isolated(i) and self._isolated(j)):
                continue
            orbit = self.get_binary_properties(data, i, j)
            if orbit.energy < 0:
                self.two_body_binaries.append((i, j))
            elif self._radial_motion(rows[i], rows[j]) < 0:
                self.two_body_flybys.append((i, j))

    def process(self, data: Sequence[float]) -> None:
        """Build the neighbour lists and detect two-body encounters."""
        self.make_nn_list(data)
        self.detect_two_body_encounters(data)

    def _isolated(self, i: int) -> bool:
        nearest = self.nn_distance[i]
        if nearest == 0.0:
            return False
        return self.nn2_distance[i] / nearest > self.f_isolated

    @staticmethod
    def _radial_motion(p: Sequence[float], q: Sequence[float]) -> float:
        return sum((q[k] - p[k]) * (q[k + 3] - p[k + 3]) for k in (1, 2, 3))