"""Boundary loop stitching for triangle meshes."""

from .errors import EdgeLoopError
from .front import FrontItem, FrontQueue
from .ledger import EdgeLedger, LedgerEntry
from .merge import Face3, Face4, merge_coplanar_pairs
from .pipeline import (
    detect_holes,
    fill_holes,
    triangulate_faces,
    validate_mesh,
    HoleInfo,
    MeshValidationResult,
)
from .registry import SourceVertex, VertexRegistry
from .stitcher import HoleStitcher, check_edge_loops
from .wrapper import HoleWrapper

__all__ = [
    "EdgeLoopError",
    "FrontItem",
    "FrontQueue",
    "EdgeLedger",
    "LedgerEntry",
    "Face3",
    "Face4",
    "merge_coplanar_pairs",
    "detect_holes",
    "fill_holes",
    "triangulate_faces",
    "validate_mesh",
    "HoleInfo",
    "MeshValidationResult",
    "SourceVertex",
    "VertexRegistry",
    "HoleStitcher",
    "check_edge_loops",
    "HoleWrapper",
]
