"""Tolerances and defaults shared across the stitching modules."""

# Per-component tolerance when comparing two face normals for coplanarity
NORMAL_TOLERANCE = 0.01

# Lengths at or below this are treated as zero (degenerate vectors)
EPSILON = 1e-12

# Triangles with a smaller area are reported as degenerate by validation
MIN_TRIANGLE_AREA = 1e-10

DEFAULT_MAX_HOLE_SIZE = 1_000_000
VALIDATION_CHUNK_SIZE = 100_000
