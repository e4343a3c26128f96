"""
Chain - doubly linked list of surviving points, stored as an arena.

One record per input index: prev/next are plain integer positions into
the input, cost is the cached edge cost of the link ending at that index.
Points are pruned logically (unlinked), never physically removed.

Invariants:
    - following next from the head (index 0) visits strictly increasing
      indices and ends at n - 1, whose next is the sentinel end == n
    - the head has cost 0.0 and prev 0
    - cost[j] == edge_cost(x[j] - x[prev[j]], p) for every linked j
"""

from typing import Iterator, List, Sequence


class Chain:
    """Working set of surviving indices with cached edge costs."""

    __slots__ = ('x', 'p', 'n', 'prev', 'next', 'cost')

    head = 0

    def __init__(self, x: Sequence[float], p: float):
        n = len(x)
        self.x = x
        self.p = p
        self.n = n
        self.prev: List[int] = [0] * n
        self.next: List[int] = [n] * n
        self.cost: List[float] = [0.0] * n

    @property
    def end(self) -> int:
        """Sentinel index that terminates the chain."""
        return self.n

    def splice(self, left: int, right: int, cost: float) -> None:
        """Link left directly to right, dropping every point in between."""
        self.next[left] = right
        self.prev[right] = left
        self.cost[right] = cost

    def indices(self) -> Iterator[int]:
        """Iterate surviving indices from the head."""
        i = self.head
        nxt = self.next
        while i < self.n:
            yield i
            i = nxt[i]

    def total(self) -> float:
        """Sum of edge costs along the chain."""
        total = 0.0
        cost = self.cost
        for i in self.indices():
            total += cost[i]
        return total

    def __len__(self) -> int:
        return sum(1 for _ in self.indices())

    def __repr__(self) -> str:
        return f"Chain(n={self.n}, surviving={len(self)}, p={self.p})"
