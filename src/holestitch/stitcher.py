import logging
from typing import List, Optional, Sequence

import numpy as np

from .constants import EPSILON, NORMAL_TOLERANCE
from .errors import EdgeLoopError
from .geometry import newell_vector, triangle_normals
from .ledger import EdgeLedger
from .merge import Face3, merge_coplanar_pairs
from .wrapper import EdgeLoop, HoleWrapper


def check_edge_loops(edge_loops: Sequence[EdgeLoop], positions: np.ndarray):
    """
    Check the preconditions of a stitch request.

    The stitchers themselves trust their input; call this first when the
    loops come from an untrusted source.

    Raises:
        EdgeLoopError: If positions are not (N, 3), a loop has fewer than
            three vertices, a tag is out of range, or a normal is not a
            finite non-zero 3-vector
    """
    positions = np.asarray(positions)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise EdgeLoopError(f"Positions must have shape (N, 3), got {positions.shape}")
    num_vertices = len(positions)

    for i, (tags, plane_normal) in enumerate(edge_loops):
        tags = np.asarray(tags)
        if len(tags) < 3:
            raise EdgeLoopError(f"Edge loop {i} has {len(tags)} vertices, at least 3 are required")
        if not np.issubdtype(tags.dtype, np.integer):
            raise EdgeLoopError(f"Edge loop {i} has non-integer vertex indices")
        if tags.min() < 0 or tags.max() >= num_vertices:
            raise EdgeLoopError(f"Edge loop {i} references vertices outside [0, {num_vertices})")
        plane_normal = np.asarray(plane_normal, dtype=np.float64)
        if plane_normal.shape != (3,) or not np.all(np.isfinite(plane_normal)):
            raise EdgeLoopError(f"Edge loop {i} normal must be a finite 3-vector")
        if not np.any(plane_normal):
            raise EdgeLoopError(f"Edge loop {i} normal is zero")


def _facing(points_a: np.ndarray, normal_a: np.ndarray,
            points_b: np.ndarray, normal_b: np.ndarray) -> bool:
    if float(np.dot(normal_a, normal_b)) >= 0.0:
        return False
    offset = points_b.mean(axis=0) - points_a.mean(axis=0)
    return float(np.dot(offset, normal_a)) > EPSILON and float(np.dot(-offset, normal_b)) > EPSILON


class HoleStitcher:
    """
    Fill holes bounded by one or more edge loops.

    A single loop is fan-filled so its faces point along the loop normal.
    Several loops are wrapped by ``HoleWrapper``; when that leaves loops
    open and the request is two loops of equal length facing each other,
    they are bridged quad by quad instead.
    """

    def __init__(self, normal_tolerance: float = NORMAL_TOLERANCE):
        self.normal_tolerance = normal_tolerance
        self.strategy: Optional[str] = None
        self._faces: List[List[int]] = []
        self._failed: List[int] = []
        self._finished = False

    def stitch(self, edge_loops: Sequence[EdgeLoop], positions: np.ndarray) -> bool:
        """
        Stitch ``edge_loops`` together.

        Args:
            edge_loops: (tags, plane_normal) per loop
            positions: (N, 3) vertex positions, read during this call only

        Returns:
            True if every loop was closed
        """
        self.strategy = None
        self._faces = []
        self._failed = []
        self._finished = False

        if len(edge_loops) == 1:
            self._faces = self.stitch_by_fan(edge_loops[0][0], positions, edge_loops[0][1])
            self.strategy = "fan"
            self._finished = True
            return True

        wrapper = HoleWrapper(self.normal_tolerance)
        wrapper.wrap(edge_loops, positions)
        if wrapper.finished():
            self._faces = wrapper.newly_generated_faces()
            self.strategy = "wrap"
            self._finished = True
            logging.info(f"Wrapped {len(edge_loops)} edge loops with {len(self._faces)} faces")
            return True

        failed = wrapper.failed_edge_loops()
        logging.info(f"Wrapping left edge loops {failed} open, trying to bridge by quads")
        quads = self.stitch_by_quads(edge_loops, positions)
        if quads is not None:
            self._faces = quads
            self.strategy = "quads"
            self._finished = True
            return True

        logging.warning(f"Failed to stitch edge loops {failed}")
        self._faces = wrapper.newly_generated_faces()
        self._failed = failed
        self.strategy = "wrap"
        return False

    def stitch_by_fan(self, tags: Sequence[int], positions: np.ndarray,
                      plane_normal=None) -> List[List[int]]:
        """
        Fan-fill one loop from its first vertex, merging coplanar pairs.

        When ``plane_normal`` points against the loop's own winding the loop
        is walked backwards, so the faces point along ``plane_normal``.
        """
        tags = [int(tag) for tag in tags]
        positions = np.asarray(positions, dtype=np.float64)
        if plane_normal is not None:
            winding = newell_vector(positions[tags])
            if float(np.dot(winding, np.asarray(plane_normal, dtype=np.float64))) < 0.0:
                tags = tags[::-1]
        if len(tags) == 3:
            return [tags]

        ledger = EdgeLedger()
        triangles: List[Face3] = []
        for i in range(1, len(tags) - 1):
            p1, p2, p3 = tags[0], tags[i], tags[i + 1]
            normal = triangle_normals(positions[p1], positions[p2], positions[p3])
            face_index = len(triangles)
            triangles.append(Face3(p1, p2, p3, normal, face_index))
            ledger.insert(p1, p2, face_index)
            ledger.insert(p2, p3, face_index)
            ledger.insert(p3, p1, face_index)
            ledger.link(p1, p2, p3)

        unmerged, quads = merge_coplanar_pairs(triangles, ledger, self.normal_tolerance)
        return [list(f.corners) for f in unmerged] + [list(q.corners) for q in quads]

    def stitch_by_quads(self, edge_loops: Sequence[EdgeLoop],
                        positions: np.ndarray) -> Optional[List[List[int]]]:
        """
        Bridge two loops of equal length with one quad per edge.

        Only loops that face each other are bridged: their normals must be
        opposed and each loop's centroid must lie in front of the other
        loop's plane. The second loop is matched to the first in whichever
        direction and rotation minimizes the summed squared distance between
        paired vertices.

        Returns:
            The quads, or None if the loops cannot be paired
        """
        if len(edge_loops) != 2:
            return None
        first = [int(tag) for tag in edge_loops[0][0]]
        second = [int(tag) for tag in edge_loops[1][0]]
        if len(first) != len(second) or len(first) < 3:
            return None

        positions = np.asarray(positions, dtype=np.float64)
        first_points = positions[first]
        first_normal = np.asarray(edge_loops[0][1], dtype=np.float64)
        second_normal = np.asarray(edge_loops[1][1], dtype=np.float64)
        if not _facing(first_points, first_normal, positions[second], second_normal):
            logging.debug("Edge loops do not face each other, not bridging")
            return None

        best_cost = None
        partner = None
        for candidate in (second, second[::-1]):
            candidate_points = positions[candidate]
            for offset in range(len(candidate)):
                cost = float(np.sum((first_points - np.roll(candidate_points, -offset, axis=0)) ** 2))
                if best_cost is None or cost < best_cost:
                    best_cost = cost
                    partner = candidate[offset:] + candidate[:offset]

        count = len(first)
        faces = []
        for i in range(count):
            j = (i + 1) % count
            faces.append([first[j], first[i], partner[i], partner[j]])
        logging.info(f"Bridged two edge loops of {count} vertices with {count} quads")
        return faces

    def newly_generated_faces(self) -> List[List[int]]:
        return [list(face) for face in self._faces]

    def finished(self) -> bool:
        return self._finished

    def failed_edge_loops(self) -> List[int]:
        return list(self._failed)
