import numpy as np

from .constants import EPSILON, NORMAL_TOLERANCE


def triangle_normals(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> np.ndarray:
    """
    Unit normals of the triangles (a, b, c), wound counter-clockwise.

    Args:
        a, b, c: (3,) points or (K, 3) arrays of points; shapes broadcast

    Returns:
        Array of unit normals; rows for degenerate triangles are zero
    """
    normals = np.cross(b - a, c - a)
    lengths = np.linalg.norm(normals, axis=-1, keepdims=True)
    return np.divide(normals, lengths,
                     out=np.zeros_like(normals, dtype=np.float64),
                     where=lengths > EPSILON)


def face_vector(segment: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """In-plane direction perpendicular to ``segment`` for a face with ``normal``."""
    return np.cross(segment, normal)


def angles_between(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Angles in degrees between the rows of ``a`` and the vector(s) ``b``.

    A zero-length vector on either side gives an angle of 0.
    """
    a = np.atleast_2d(a)
    denom = np.linalg.norm(a, axis=-1) * np.linalg.norm(b, axis=-1)
    valid = denom > EPSILON
    cosines = np.divide(np.sum(a * b, axis=-1), denom,
                        out=np.zeros_like(denom, dtype=np.float64),
                        where=valid)
    angles = np.degrees(np.arccos(np.clip(cosines, -1.0, 1.0)))
    return np.where(valid, angles, 0.0)


def almost_equal(v1, v2, tolerance: float = NORMAL_TOLERANCE) -> bool:
    return bool(np.all(np.abs(np.asarray(v1) - np.asarray(v2)) <= tolerance))


def newell_vector(points: np.ndarray) -> np.ndarray:
    """
    Newell's vector of a closed polygon.

    Its direction is the polygon normal (right-hand rule over the point
    order) and its length is twice the polygon area, also for non-planar
    loops.
    """
    points = np.asarray(points, dtype=np.float64)
    return np.sum(np.cross(points, np.roll(points, -1, axis=0)), axis=0)


def loop_normal(points: np.ndarray) -> np.ndarray:
    vector = newell_vector(points)
    length = np.linalg.norm(vector)
    if length <= EPSILON:
        return np.zeros(3)
    return vector / length


def loop_perimeter(points: np.ndarray) -> float:
    points = np.asarray(points, dtype=np.float64)
    return float(np.sum(np.linalg.norm(np.roll(points, -1, axis=0) - points, axis=1)))
