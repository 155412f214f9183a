"""
Bounded Recent-Purchase Window.

Holds at most T purchases and always keeps the T most recent ones, where
"recent" is the composite order key (timestamp, sequence):

    - timestamp: the event's timestamp string (lexical order)
    - sequence:  a run-wide insertion counter that breaks timestamp ties
                 (later insertion = more recent) and keeps keys unique

Storage is a binary min-heap, so the entry to evict is always heap[0].

Invariant:
    len(window) <= T, and once full every retained key is greater than
    the key of anything evicted or discarded.

Time Complexity: O(log T) per add, O(N log T) per merge of N entries
Memory: O(T)
"""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass(frozen=True, order=True)
class PurchaseEntry:
    timestamp: str
    sequence: int
    amount_pennies: int = field(compare=False)


class PurchaseWindow:
    """
    Top-T-by-recency collection of purchase amounts.

    Usage:
        window = PurchaseWindow(threshold=50)
        window.add("2017-06-13 11:33:01", 1683)
        network_window.merge_from(window)
        window.values()  # -> [1683]
    """

    def __init__(self, threshold: int, sequence: Optional[Iterator[int]] = None):
        """
        Args:
            threshold: capacity T (>= 1)
            sequence: shared insertion counter; windows whose entries will
                be merged together must draw from the same one. Without
                it the window gets a private counter
        """
        if threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {threshold}")

        self.threshold = threshold
        self._sequence = sequence if sequence is not None else itertools.count()
        self._heap: List[PurchaseEntry] = []

    def add(self, timestamp: str, amount_pennies: int) -> bool:
        """
        Record a purchase.

        Returns:
            True if the purchase is now in the window, False if it was
            discarded for being older than everything in a full window.
        """
        entry = PurchaseEntry(timestamp, next(self._sequence), amount_pennies)

        if len(self._heap) < self.threshold:
            heapq.heappush(self._heap, entry)
            return True

        if entry > self._heap[0]:
            heapq.heapreplace(self._heap, entry)  # pop earliest, push new
            return True

        return False

    def merge_from(self, other: "PurchaseWindow") -> None:
        """
        Fold every entry of `other` into this window.

        The minimum is evicted whenever the size goes over T, so the result
        is the T largest keys of the union no matter the merge order.
        """
        if other is self:
            return

        for entry in other._heap:
            heapq.heappush(self._heap, entry)
            if len(self._heap) > self.threshold:
                heapq.heappop(self._heap)

    def entries(self) -> List[PurchaseEntry]:
        """Entries in ascending (timestamp, sequence) order."""
        return sorted(self._heap)

    def values(self) -> List[int]:
        return [e.amount_pennies for e in self.entries()]

    def earliest(self) -> Optional[PurchaseEntry]:
        return self._heap[0] if self._heap else None

    def count(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __iter__(self) -> Iterator[PurchaseEntry]:
        return iter(self.entries())

    def __repr__(self) -> str:
        return f"PurchaseWindow(threshold={self.threshold}, size={len(self._heap)})"
