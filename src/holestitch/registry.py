from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np


@dataclass(frozen=True, eq=False)
class SourceVertex:
    """A loop vertex as seen by one stitch request."""
    position: np.ndarray
    source_loop: int  # 1-based loop id, 0 for none
    tag: int          # index into the caller's vertex buffer
    index: int        # index into the registry


class VertexRegistry:
    """
    Per-request store of boundary loop vertices.

    Positions are copied out of the caller's buffer when a loop is
    registered, so the buffer is only borrowed for the duration of
    ``register_loop``.
    """

    def __init__(self):
        self._vertices: List[SourceVertex] = []
        self._positions = None
        self._loops = None

    def __len__(self) -> int:
        return len(self._vertices)

    def __getitem__(self, index: int) -> SourceVertex:
        return self._vertices[index]

    def __iter__(self):
        return iter(self._vertices)

    def add_vertex(self, position, source_loop: int, tag: int) -> int:
        index = len(self._vertices)
        self._vertices.append(SourceVertex(
            position=np.array(position, dtype=np.float64),
            source_loop=source_loop,
            tag=tag,
            index=index,
        ))
        self._positions = None
        self._loops = None
        return index

    def register_loop(self, tags: Sequence[int], positions: np.ndarray,
                      loop_id: int) -> List[int]:
        """
        Register the vertices of one boundary loop.

        Tags repeated within the loop map to a single vertex. Tags shared
        with other loops are registered again under this loop's id.

        Args:
            tags: Ordered vertex indices into ``positions``
            positions: (N, 3) caller-owned vertex positions
            loop_id: Id of the loop, starting at 1 within a request

        Returns:
            Local indices of the loop vertices, in loop order
        """
        local_by_tag: Dict[int, int] = {}
        for tag in tags:
            tag = int(tag)
            if tag not in local_by_tag:
                local_by_tag[tag] = self.add_vertex(positions[tag], loop_id, tag)
        return [local_by_tag[int(tag)] for tag in tags]

    def positions(self) -> np.ndarray:
        """(K, 3) positions of all registered vertices."""
        if self._positions is None:
            if self._vertices:
                self._positions = np.vstack([v.position for v in self])
            else:
                self._positions = np.zeros((0, 3))
        return self._positions

    def source_loops(self) -> np.ndarray:
        """(K,) loop ids of all registered vertices."""
        if self._loops is None:
            self._loops = np.array([v.source_loop for v in self], dtype=np.int64)
        return self._loops

    def tags(self, indices: Sequence[int]) -> List[int]:
        return [self._vertices[i].tag for i in indices]
