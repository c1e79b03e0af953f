"""Exception classes for boundary loop validation."""


class EdgeLoopError(ValueError):
    """Raised when an edge loop violates the stitching preconditions."""

    pass
