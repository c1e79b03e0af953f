import numpy as np
import pytest

S = np.sqrt(3.0) / 2.0


@pytest.fixture
def prism_positions():
    """Two parallel equilateral triangles, vertex 3 above 0, 4 above 2, 5 above 1."""
    return np.array([
        [1.0, 0.0, 0.0],
        [-0.5, S, 0.0],
        [-0.5, -S, 0.0],
        [1.0, 0.0, 1.0],
        [-0.5, -S, 1.0],
        [-0.5, S, 1.0],
    ])


@pytest.fixture
def prism_loops():
    """Bottom loop faces up, top loop faces down."""
    return [([0, 1, 2], (0.0, 0.0, 1.0)), ([3, 4, 5], (0.0, 0.0, -1.0))]


@pytest.fixture
def parallel_tube_positions():
    """Two parallel equilateral triangles, vertex 3 above 0, 4 above 1, 5 above 2."""
    return np.array([
        [1.0, 0.0, 0.0],
        [-0.5, S, 0.0],
        [-0.5, -S, 0.0],
        [1.0, 0.0, 1.0],
        [-0.5, S, 1.0],
        [-0.5, -S, 1.0],
    ])


@pytest.fixture
def unit_square():
    """Counter-clockwise unit square in the z=0 plane."""
    return np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [1.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
    ])


@pytest.fixture
def flat_pair_positions():
    """Two right triangles in the z=0 plane, far apart along y."""
    return np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 10.0, 0.0],
        [1.0, 10.0, 0.0],
        [0.0, 11.0, 0.0],
        [0.0, 20.0, 0.0],
        [1.0, 20.0, 0.0],
        [0.0, 21.0, 0.0],
    ])


@pytest.fixture
def regular_polygon():
    """Factory for convex regular polygons in a plane of constant z."""
    def make(count, z=0.0):
        angles = np.linspace(0.0, 2.0 * np.pi, count, endpoint=False)
        return np.column_stack([np.cos(angles), np.sin(angles), np.full(count, z)])
    return make
