import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import NORMAL_TOLERANCE
from .front import FrontItem, FrontQueue
from .geometry import angles_between, face_vector, triangle_normals
from .ledger import EdgeLedger
from .merge import Face3, merge_coplanar_pairs
from .registry import VertexRegistry

EdgeLoop = Tuple[Sequence[int], Sequence[float]]


class HoleWrapper:
    """
    Close the gap between boundary loops with an advancing front.

    Every loop edge is recorded as already owned by the surrounding mesh.
    Starting from the first edge of the first loop, each pending front edge
    is completed to a triangle with the candidate vertex that opens the
    widest angle against the edge's base face, and the two new edges of
    that triangle join the front. Afterwards adjacent coplanar triangles
    are merged into quads.

    Only one seed edge exists per request, so all loops handed to a single
    ``wrap`` call must form one connected region. Loops the front never
    reaches are reported by ``failed_edge_loops``; stitch unrelated holes
    with separate calls.

    Two loops that run the same way round a tube, each vertex of the second
    loop above its partner in the first, are bridged completely, yet the
    second loop's boundary edges point the same way as generated edges.
    Those placeholders keep their entries, the edges never close and the
    second loop is reported as failed. ``HoleStitcher`` bridges such a pair
    by quads instead.

    Example:
        >>> wrapper = HoleWrapper()
        >>> wrapper.wrap([([0, 1, 2], (0, 0, 1)), ([3, 4, 5], (0, 0, -1))], positions)
        >>> if wrapper.finished():
        ...     faces = wrapper.newly_generated_faces()
    """

    def __init__(self, normal_tolerance: float = NORMAL_TOLERANCE):
        self.normal_tolerance = normal_tolerance
        self._reset()

    def _reset(self):
        self._registry = VertexRegistry()
        self._ledger = EdgeLedger()
        self._front = FrontQueue()
        self._candidates: List[int] = []
        self._triangles: List[Face3] = []
        self._faces: List[List[int]] = []
        self._points = np.zeros((0, 3))
        self._loops = np.zeros(0, dtype=np.int64)
        self._finalized = False

    @property
    def registry(self) -> VertexRegistry:
        return self._registry

    @property
    def ledger(self) -> EdgeLedger:
        return self._ledger

    @property
    def triangles(self) -> Tuple[Face3, ...]:
        return tuple(self._triangles)

    def wrap(self, edge_loops: Sequence[EdgeLoop], positions: np.ndarray):
        """
        Stitch the given boundary loops together.

        Args:
            edge_loops: (tags, plane_normal) per loop; tags index ``positions``
            positions: (N, 3) vertex positions, read during this call only
        """
        self._reset()
        positions = np.asarray(positions, dtype=np.float64)

        next_loop_id = 1
        for tags, plane_normal in edge_loops:
            self._add_candidate_vertices(tags, plane_normal, next_loop_id, positions)
            next_loop_id += 1

        self._candidates = list(range(len(self._registry)))
        self._points = self._registry.positions()
        self._loops = self._registry.source_loops()
        logging.debug(f"Wrapping {len(edge_loops)} edge loops with {len(self._candidates)} vertices")

        self._generate()
        self._finalize()

    def _add_candidate_vertices(self, tags: Sequence[int], plane_normal, loop_id: int,
                                positions: np.ndarray):
        local = self._registry.register_loop(tags, positions, loop_id)
        for i, vertex in enumerate(local):
            next_vertex = local[(i + 1) % len(local)]
            self._add_startup(next_vertex, vertex, plane_normal)

    def _add_startup(self, p1: int, p2: int, base_normal):
        if not len(self._front):
            self._add_item(p1, p2, base_normal)
        self._ledger.insert(p2, p1, face_index=0, generated=False)

    def _add_item(self, p1: int, p2: int, base_normal):
        # Edges along a single loop are never fronts, except for the seed
        if len(self._front) and self._registry[p1].source_loop == self._registry[p2].source_loop:
            return
        if self._front.find(p1, p2) is not None or self._front.find(p2, p1) is not None:
            return
        if self._ledger.contains(p1, p2) or self._ledger.contains(p2, p1):
            return
        self._front.push(p1, p2, base_normal)

    def _candidate_angles(self, item: FrontItem, candidates: np.ndarray) -> np.ndarray:
        v1 = self._points[item.p1]
        v2 = self._points[item.p2]
        segment = v2 - v1
        base = face_vector(segment, item.base_normal)
        normals = triangle_normals(v2, v1, self._points[candidates])
        angles = angles_between(face_vector(segment, normals), base)

        flat = (candidates == item.p1) | (candidates == item.p2)
        if self._loops[item.p1] == self._loops[item.p2]:
            flat |= self._loops[candidates] == self._loops[item.p1]
        angles[flat] = 0.0
        return angles

    def _find_best_vertex(self, item: FrontItem) -> Optional[int]:
        remaining = []
        eligible = []
        for candidate in self._candidates:
            if self._ledger.is_vertex_closed(candidate):
                continue
            remaining.append(candidate)
            if (self._ledger.is_edge_closed(item.p1, candidate)
                    or self._ledger.is_edge_closed(item.p2, candidate)):
                continue
            eligible.append(candidate)
        self._candidates = remaining

        if not eligible:
            return None
        angles = self._candidate_angles(item, np.array(eligible, dtype=np.int64))
        best = int(np.argmax(angles))
        if angles[best] <= 0.0:
            return None
        return eligible[best]

    def _generate(self):
        while True:
            item_index = self._front.pop()
            if item_index is None:
                break
            item = self._front[item_index]
            p1, p2 = item.p1, item.p2
            if self._ledger.is_edge_closed(p1, p2):
                continue

            p3 = self._find_best_vertex(item)
            if p3 is None:
                logging.debug(f"No candidate vertex for front edge ({p1}, {p2}), dropping it")
                continue
            item.p3 = p3

            normal = triangle_normals(self._points[p1], self._points[p2], self._points[p3])
            face_index = len(self._triangles)
            self._triangles.append(Face3(p1, p2, p3, normal, face_index))
            self._add_item(p3, p2, normal)
            self._add_item(p1, p3, normal)
            self._ledger.insert(p1, p2, face_index)
            self._ledger.insert(p2, p3, face_index)
            self._ledger.insert(p3, p1, face_index)
            self._ledger.link(p1, p2, p3)

        logging.debug(f"Front exhausted after {len(self._front)} items, "
                      f"{len(self._triangles)} triangles generated")

    def _finalize(self):
        unmerged, quads = merge_coplanar_pairs(self._triangles, self._ledger,
                                               self.normal_tolerance)
        self._finalized = True
        for face in unmerged:
            self._faces.append(self._registry.tags(face.corners))
        for quad in quads:
            self._faces.append(self._registry.tags(quad.corners))

    def newly_generated_faces(self) -> List[List[int]]:
        """Generated faces as lists of 3 or 4 caller vertex tags."""
        return [list(face) for face in self._faces]

    def finished(self) -> bool:
        """Whether every loop vertex ended up fully surrounded by faces."""
        if not self._finalized or not self._front.exhausted:
            return False
        return all(self._ledger.is_vertex_closed(v) for v in self._candidates)

    def failed_edge_loops(self) -> List[int]:
        """Ascending positions of input loops that still have open vertices."""
        failed = set()
        for vertex in self._candidates:
            if self._ledger.is_vertex_closed(vertex):
                continue
            failed.add(self._registry[vertex].source_loop - 1)
        return sorted(failed)
