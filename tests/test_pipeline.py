import numpy as np
import pytest

from holestitch.pipeline import detect_holes, fill_holes, triangulate_faces, validate_mesh

CUBE_VERTICES = np.array([
    [0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0],
    [0.0, 0.0, 1.0], [1.0, 0.0, 1.0], [1.0, 1.0, 1.0], [0.0, 1.0, 1.0],
])

# Outward-facing cube without its top (z=1) face
OPEN_BOX_FACES = np.array([
    [0, 2, 1], [0, 3, 2],
    [0, 1, 5], [0, 5, 4],
    [1, 2, 6], [1, 6, 5],
    [2, 3, 7], [2, 7, 6],
    [3, 0, 4], [3, 4, 7],
])

TETRA_VERTICES = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
TETRA_FACES = np.array([[0, 2, 1], [0, 1, 3], [0, 3, 2], [1, 2, 3]])


def face_normal(vertices, face):
    a, b, c = vertices[face]
    normal = np.cross(b - a, c - a)
    return normal / np.linalg.norm(normal)


class TestDetectHoles:
    """Test boundary loop detection on triangle meshes."""

    def test_open_box_has_one_hole(self):
        holes = detect_holes(CUBE_VERTICES, OPEN_BOX_FACES)
        assert len(holes) == 1
        hole = holes[0]
        assert sorted(hole.boundary_indices) == [4, 5, 6, 7]
        assert hole.area == pytest.approx(1.0)
        assert hole.perimeter == pytest.approx(4.0)

    def test_loop_follows_mesh_half_edges(self):
        hole = detect_holes(CUBE_VERTICES, OPEN_BOX_FACES)[0]
        loop = hole.boundary_indices
        half_edges = {(f[i], f[(i + 1) % 3]) for f in OPEN_BOX_FACES.tolist() for i in range(3)}
        for i in range(len(loop)):
            assert (loop[i], loop[(i + 1) % len(loop)]) in half_edges
        np.testing.assert_allclose(hole.normal, [0.0, 0.0, -1.0], atol=1e-12)

    def test_closed_mesh_has_no_holes(self):
        assert detect_holes(TETRA_VERTICES, TETRA_FACES) == []


class TestValidateMesh:
    """Test mesh validation results."""

    def test_closed_tetrahedron(self):
        result = validate_mesh(TETRA_VERTICES, TETRA_FACES)
        assert result.is_watertight
        assert not result.has_degenerate_triangles
        assert result.num_holes == 0
        assert result.num_vertices == 4
        assert result.num_faces == 4
        assert result.bounding_box_volume == pytest.approx(1.0)
        assert result.issues == []

    def test_open_box(self):
        result = validate_mesh(CUBE_VERTICES, OPEN_BOX_FACES)
        assert not result.is_watertight
        assert result.num_holes == 1
        assert any("not watertight" in issue for issue in result.issues)

    def test_degenerate_triangle_in_small_chunks(self):
        collinear = [[2.0, 0.0, 0.0], [3.0, 0.0, 0.0], [4.0, 0.0, 0.0]]
        vertices = np.vstack([TETRA_VERTICES, collinear])
        faces = np.vstack([TETRA_FACES, [[4, 5, 6]]])
        result = validate_mesh(vertices, faces, chunk_size=2)
        assert result.has_degenerate_triangles
        assert any("1 degenerate" in issue for issue in result.issues)


class TestTriangulateFaces:

    def test_quads_are_split(self):
        triangles = triangulate_faces([[0, 1, 2], [3, 4, 5, 6]])
        np.testing.assert_array_equal(triangles, [[0, 1, 2], [3, 4, 5], [3, 5, 6]])

    def test_empty(self):
        assert triangulate_faces([]).shape == (0, 3)

    def test_rejects_other_polygons(self):
        with pytest.raises(ValueError):
            triangulate_faces([[0, 1, 2, 3, 4]])


class TestFillHoles:
    """Test closing every hole of a mesh."""

    def test_open_box_is_closed(self):
        filled, new_faces, validation = fill_holes(CUBE_VERTICES, OPEN_BOX_FACES)
        assert len(new_faces) == 1
        assert sorted(new_faces[0]) == [4, 5, 6, 7]
        assert filled.shape == (12, 3)
        assert validation.is_watertight
        assert not validation.has_degenerate_triangles

    def test_new_faces_point_outward(self):
        filled, _, _ = fill_holes(CUBE_VERTICES, OPEN_BOX_FACES, validate=False)
        for face in filled[len(OPEN_BOX_FACES):]:
            np.testing.assert_allclose(face_normal(CUBE_VERTICES, face), [0.0, 0.0, 1.0], atol=1e-12)

    def test_oversized_holes_are_skipped(self):
        filled, new_faces, validation = fill_holes(CUBE_VERTICES, OPEN_BOX_FACES, max_hole_size=3)
        assert new_faces == []
        assert len(filled) == len(OPEN_BOX_FACES)
        assert not validation.is_watertight

    def test_closed_mesh_unchanged(self):
        filled, new_faces, validation = fill_holes(TETRA_VERTICES, TETRA_FACES, validate=False)
        assert new_faces == []
        np.testing.assert_array_equal(filled, TETRA_FACES)
        assert validation is None
