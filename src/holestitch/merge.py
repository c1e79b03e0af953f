import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

import numpy as np

from .constants import NORMAL_TOLERANCE
from .geometry import almost_equal
from .ledger import EdgeLedger


@dataclass(frozen=True, eq=False)
class Face3:
    p1: int
    p2: int
    p3: int
    normal: np.ndarray
    index: int

    @property
    def corners(self) -> Tuple[int, int, int]:
        return (self.p1, self.p2, self.p3)

    def opposite(self, a: int, b: int) -> int:
        """The corner that is neither ``a`` nor ``b``."""
        for corner in self.corners:
            if corner != a and corner != b:
                return corner
        raise ValueError(f"Face {self.index} has no corner opposite to ({a}, {b})")


@dataclass(frozen=True)
class Face4:
    p1: int
    p2: int
    p3: int
    p4: int

    @property
    def corners(self) -> Tuple[int, int, int, int]:
        return (self.p1, self.p2, self.p3, self.p4)


def _find_pair(face: Face3, triangles: Sequence[Face3], ledger: EdgeLedger,
               used: Set[int], tolerance: float) -> Optional[Tuple[Face3, Face4]]:
    corners = face.corners
    for i in range(3):
        j = (i + 1) % 3
        k = (i + 2) % 3
        # The neighbour across edge (i, j) owns the reversed edge (j, i)
        entry = ledger.lookup(corners[j], corners[i])
        if entry is None or not entry.generated:
            continue
        if entry.face_index in used:
            continue
        partner = triangles[entry.face_index]
        if not almost_equal(partner.normal, face.normal, tolerance):
            continue
        opposite = partner.opposite(corners[j], corners[i])
        return partner, Face4(corners[i], opposite, corners[j], corners[k])
    return None


def merge_coplanar_pairs(triangles: Sequence[Face3], ledger: EdgeLedger,
                         tolerance: float = NORMAL_TOLERANCE) -> Tuple[List[Face3], List[Face4]]:
    """
    Merge pairs of adjacent, coplanar triangles into quads.

    Triangles are visited in order; each one is merged with the first
    unused neighbour whose normal matches within ``tolerance`` per
    component. A triangle takes part in at most one merge, so strips of
    coplanar triangles are merged pairwise and never grown further.

    Args:
        triangles: Triangles whose ``index`` is their position in the sequence
        ledger: Ledger holding the triangles' directed edges
        tolerance: Per-component normal tolerance

    Returns:
        unmerged: Triangles without a partner, in input order
        quads: Merged quads, winding preserved from the first triangle
    """
    used: Set[int] = set()
    unmerged: List[Face3] = []
    quads: List[Face4] = []
    for face in triangles:
        if face.index in used:
            continue
        used.add(face.index)
        pair = _find_pair(face, triangles, ledger, used, tolerance)
        if pair is None:
            unmerged.append(face)
            continue
        partner, quad = pair
        used.add(partner.index)
        quads.append(quad)

    logging.debug(f"Merged {2 * len(quads)} of {len(triangles)} triangles into {len(quads)} quads")
    return unmerged, quads
