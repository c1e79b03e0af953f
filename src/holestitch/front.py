from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Tuple

import numpy as np


@dataclass
class FrontItem:
    """A pending directed edge waiting for a third vertex."""
    p1: int
    p2: int
    base_normal: np.ndarray
    p3: Optional[int] = None
    processed: bool = False


class FrontQueue:
    """
    Worklist of front items.

    Items live in an append-only arena and are referenced by index from
    the pending queue and the per-edge lookup. Consumed items stay in the
    arena with ``processed`` set.
    """

    def __init__(self):
        self._items: List[FrontItem] = []
        self._pending: Deque[int] = deque()
        self._by_edge: Dict[Tuple[int, int], int] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> FrontItem:
        return self._items[index]

    def push(self, p1: int, p2: int, base_normal) -> int:
        index = len(self._items)
        self._items.append(FrontItem(p1, p2, np.asarray(base_normal, dtype=np.float64)))
        self._by_edge[(p1, p2)] = index
        self._pending.append(index)
        return index

    def find(self, p1: int, p2: int) -> Optional[int]:
        return self._by_edge.get((p1, p2))

    def pop(self) -> Optional[int]:
        """Take the oldest unprocessed item, mark it processed, return its index."""
        while self._pending:
            index = self._pending.popleft()
            item = self._items[index]
            if item.processed:
                continue
            item.processed = True
            return index
        return None

    @property
    def exhausted(self) -> bool:
        return all(self._items[i].processed for i in self._pending)
