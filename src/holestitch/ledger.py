from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

EdgeKey = Tuple[int, int]


@dataclass(frozen=True)
class LedgerEntry:
    face_index: int
    generated: bool


class EdgeLedger:
    """
    Directed edges consumed by faces, plus per-vertex adjacency.

    Boundary edges of the input loops are stored with ``generated=False``
    so no face is built across them a second time. Edges of synthesized
    triangles are stored with ``generated=True`` and their face index.
    An undirected edge is closed once both of its directions are stored.
    """

    def __init__(self):
        self._entries: Dict[EdgeKey, LedgerEntry] = {}
        self._neighbors: Dict[int, List[int]] = defaultdict(list)

    def __len__(self) -> int:
        return len(self._entries)

    def insert(self, p1: int, p2: int, face_index: int = 0,
               generated: bool = True) -> bool:
        """Store the directed edge (p1, p2); an existing entry is kept."""
        key = (p1, p2)
        if key in self._entries:
            return False
        self._entries[key] = LedgerEntry(face_index, generated)
        return True

    def lookup(self, p1: int, p2: int) -> Optional[LedgerEntry]:
        return self._entries.get((p1, p2))

    def contains(self, p1: int, p2: int) -> bool:
        return (p1, p2) in self._entries

    def is_edge_closed(self, p1: int, p2: int) -> bool:
        return (p1, p2) in self._entries and (p2, p1) in self._entries

    def link(self, p1: int, p2: int, p3: int):
        """Record the undirected adjacencies of triangle (p1, p2, p3)."""
        self._neighbors[p1].extend((p2, p3))
        self._neighbors[p2].extend((p3, p1))
        self._neighbors[p3].extend((p1, p2))

    def neighbors(self, vertex: int) -> List[int]:
        return list(self._neighbors.get(vertex, ()))

    def is_vertex_closed(self, vertex: int) -> bool:
        # A vertex no face touches yet is open
        neighbors = self.neighbors(vertex)
        if not neighbors:
            return False
        return all(self.is_edge_closed(vertex, other) for other in neighbors)

    def items(self) -> List[Tuple[EdgeKey, LedgerEntry]]:
        """Entries in lexicographic (from, to) order."""
        return sorted(self._entries.items())
