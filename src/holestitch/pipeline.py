import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import igl
import numpy as np

from .constants import DEFAULT_MAX_HOLE_SIZE, MIN_TRIANGLE_AREA, VALIDATION_CHUNK_SIZE
from .geometry import loop_normal, loop_perimeter, newell_vector
from .stitcher import HoleStitcher


@dataclass
class HoleInfo:
    """A boundary loop of a triangle mesh."""
    boundary_indices: List[int]  # ordered along the mesh's own half-edges
    normal: np.ndarray
    perimeter: float
    area: float


@dataclass
class MeshValidationResult:
    """Results from mesh validation checks."""
    is_watertight: bool
    has_degenerate_triangles: bool
    num_holes: int
    num_vertices: int
    num_faces: int
    bounding_box_volume: float
    issues: List[str]


def _boundary_loops(faces: np.ndarray) -> List[List[int]]:
    return [[int(v) for v in loop] for loop in igl.boundary_loop_all(faces)]


def detect_holes(vertices: np.ndarray, faces: np.ndarray) -> List[HoleInfo]:
    """
    Find the boundary loops of a triangle mesh.

    Each loop is ordered so that consecutive vertices follow a half-edge of
    an existing face, i.e. opposite to the winding a face filling the hole
    would need.

    Args:
        vertices: (N, 3) array of vertex positions
        faces: (M, 3) array of triangle face indices

    Returns:
        One HoleInfo per boundary loop
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    faces = np.asarray(faces, dtype=np.int64)
    if len(faces) == 0:
        return []

    half_edges = set(zip(faces[:, 0].tolist(), faces[:, 1].tolist()))
    half_edges.update(zip(faces[:, 1].tolist(), faces[:, 2].tolist()))
    half_edges.update(zip(faces[:, 2].tolist(), faces[:, 0].tolist()))

    holes = []
    for loop in _boundary_loops(faces):
        if len(loop) >= 2 and (loop[0], loop[1]) not in half_edges:
            loop = loop[::-1]
        points = vertices[loop]
        holes.append(HoleInfo(
            boundary_indices=loop,
            normal=loop_normal(points),
            perimeter=loop_perimeter(points),
            area=0.5 * float(np.linalg.norm(newell_vector(points))),
        ))
    logging.info(f"Detected {len(holes)} boundary loops (holes)")
    return holes


def _count_degenerate(vertices: np.ndarray, faces: np.ndarray, chunk_size: int) -> int:
    """Number of faces with area below MIN_TRIANGLE_AREA, checked chunk_size faces at a time."""
    count = 0
    for start in range(0, len(faces), chunk_size):
        corners = vertices[faces[start:start + chunk_size]]
        doubled = np.linalg.norm(np.cross(corners[:, 1] - corners[:, 0],
                                          corners[:, 2] - corners[:, 0]), axis=1)
        count += int(np.count_nonzero(0.5 * doubled < MIN_TRIANGLE_AREA))
    return count


def validate_mesh(vertices: np.ndarray, faces: np.ndarray,
                  chunk_size: int = VALIDATION_CHUNK_SIZE) -> MeshValidationResult:
    """
    Validate mesh quality and detect issues.

    Args:
        vertices: (N, 3) array of vertex positions
        faces: (M, 3) array of triangle face indices
        chunk_size: Number of faces checked per vectorized chunk

    Returns:
        MeshValidationResult with detailed validation information
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    faces = np.asarray(faces, dtype=np.int64)
    issues = []

    try:
        num_holes = len(_boundary_loops(faces)) if len(faces) else 0
    except Exception as e:
        logging.warning(f"Could not count boundary loops: {e}")
        num_holes = -1
        issues.append("Could not determine watertight status")
    is_watertight = num_holes == 0 and len(faces) > 0
    if num_holes > 0:
        issues.append(f"Mesh is not watertight ({num_holes} holes)")

    degenerate_count = _count_degenerate(vertices, faces, chunk_size)
    if degenerate_count:
        issues.append(f"Found {degenerate_count} degenerate triangle(s)")

    if len(vertices):
        bb_volume = float(np.prod(np.max(vertices, axis=0) - np.min(vertices, axis=0)))
    else:
        bb_volume = 0.0

    return MeshValidationResult(
        is_watertight=is_watertight,
        has_degenerate_triangles=degenerate_count > 0,
        num_holes=num_holes,
        num_vertices=len(vertices),
        num_faces=len(faces),
        bounding_box_volume=bb_volume,
        issues=issues,
    )


def triangulate_faces(polygons: Sequence[Sequence[int]]) -> np.ndarray:
    """Split quads along their first diagonal; triangles pass through."""
    triangles = []
    for polygon in polygons:
        if len(polygon) == 3:
            triangles.append(list(polygon))
        elif len(polygon) == 4:
            a, b, c, d = polygon
            triangles.append([a, b, c])
            triangles.append([a, c, d])
        else:
            raise ValueError(f"Expected a triangle or quad, got {len(polygon)} vertices")
    if not triangles:
        return np.zeros((0, 3), dtype=np.int64)
    return np.array(triangles, dtype=np.int64)


def fill_holes(vertices: np.ndarray, faces: np.ndarray,
               max_hole_size: int = DEFAULT_MAX_HOLE_SIZE,
               validate: bool = True) -> Tuple[np.ndarray, List[List[int]], Optional[MeshValidationResult]]:
    """
    Close every hole of a triangle mesh with stitched faces.

    Each hole is a separate stitch request. Generated quads are split back
    into triangles for the returned face array.

    Args:
        vertices: (N, 3) array of vertex positions
        faces: (M, 3) array of triangle face indices
        max_hole_size: Holes with more boundary vertices are left open
        validate: Whether to validate the mesh after filling

    Returns:
        faces: (K, 3) input plus new triangle face indices
        new_faces: Generated faces as lists of 3 or 4 vertex indices
        validation: MeshValidationResult if validate=True, else None

    Example:
        >>> faces, new_faces, validation = fill_holes(vertices, faces)
        >>> print(f"Added {len(new_faces)} faces, watertight={validation.is_watertight}")
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)

    holes = detect_holes(vertices, faces)
    new_faces: List[List[int]] = []
    filled_holes = 0
    for i, hole in enumerate(holes):
        loop = hole.boundary_indices
        if len(loop) < 3:
            logging.info(f"Skipping degenerate hole {i} with {len(loop)} vertices")
            continue
        if len(loop) > max_hole_size:
            logging.warning(f"Skipping hole {i} (size {len(loop)} > max {max_hole_size})")
            continue

        # Fill faces wind against the mesh half-edges around the hole
        stitcher = HoleStitcher()
        stitcher.stitch([(loop[::-1], -hole.normal)], vertices)
        hole_faces = stitcher.newly_generated_faces()
        logging.info(f"Filled hole {i} ({len(loop)} boundary vertices) with {len(hole_faces)} faces")
        new_faces.extend(hole_faces)
        filled_holes += 1

    filled = np.vstack([faces, triangulate_faces(new_faces)])
    logging.info(f"Filled {filled_holes} of {len(holes)} holes: {len(filled) - len(faces)} new triangles")

    validation_result = None
    if validate:
        validation_result = validate_mesh(vertices, filled)
        logging.info(f"Validation: watertight={validation_result.is_watertight}, "
                     f"holes={validation_result.num_holes}")
        if validation_result.issues:
            logging.warning("Validation issues found:")
            for issue in validation_result.issues:
                logging.warning(f"  - {issue}")

    return filled, new_faces, validation_result
