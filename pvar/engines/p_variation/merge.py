"""
Recursive merge of optimal intervals.

Main principle:
    1. Put every checkpoint_stride-th surviving point into a checkpoint
       list. Consecutive checkpoints bound intervals that are already
       optimal after the window pass.
    2. Merge adjacent pairs of intervals [a, v] and [v, b] until only
       one interval is left. Every round halves the checkpoint list.

Merging two optimal intervals only needs the running extrema seen when
walking away from the pivot v: any other point is dominated by an
extremum reached at no greater cost with at least as large a
displacement. If the best direct joint between a left and a right
candidate beats the routed path through v, every point in between is
dropped.
"""

import logging
from typing import List, NamedTuple, Optional, Tuple

from pvar.engines.p_variation.chain import Chain
from pvar.engines.p_variation.cost import edge_cost

logger = logging.getLogger(__name__)

DEFAULT_CHECKPOINT_STRIDE = 4


class CandidatePoint(NamedTuple):
    """Running extremum seen from a pivot, with the cost spent reaching it."""
    index: int
    ev: float


class IntervalMerger:
    """
    Tournament merge of locally optimal intervals over a chain.

    Candidate buffers are owned by the merger and reused by every merge,
    so one merger must not be shared between concurrent calls.

    Usage:
        merger = IntervalMerger(chain, checkpoint_stride=4)
        rounds = merger.run()
    """

    def __init__(self, chain: Chain, checkpoint_stride: int = DEFAULT_CHECKPOINT_STRIDE):
        if checkpoint_stride < 1:
            raise ValueError(f"checkpoint_stride must be >= 1, got {checkpoint_stride}")
        self.chain = chain
        self.checkpoint_stride = checkpoint_stride

        self._left_mins: List[CandidatePoint] = []
        self._left_maxs: List[CandidatePoint] = []
        self._right_mins: List[CandidatePoint] = []
        self._right_maxs: List[CandidatePoint] = []

    def checkpoints(self) -> List[int]:
        """
        Every checkpoint_stride-th surviving index, plus the last index.

        The last index may appear twice; the resulting empty interval is
        skipped by merge().
        """
        chain = self.chain
        points = []
        for count, i in enumerate(chain.indices()):
            if count % self.checkpoint_stride == 0:
                points.append(i)
        points.append(chain.n - 1)
        return points

    def run(self) -> int:
        """
        Merge intervals until the whole chain is one optimal interval.

        Returns:
            Number of merge rounds performed
        """
        points = self.checkpoints()
        rounds = 0

        while len(points) > 2:
            for k in range(1, len(points) - 1, 2):
                self.merge(points[k - 1], points[k], points[k + 1])
            survivors = points[0::2]
            if len(points) % 2 == 0:
                survivors.append(points[-1])
            points = survivors
            rounds += 1

        logger.debug(f"Interval merge: {rounds} rounds")
        return rounds

    def merge(self, a: int, v: int, b: int) -> bool:
        """
        Merge the optimal intervals [a, v] and [v, b].

        Args:
            a: Left checkpoint
            v: Shared pivot checkpoint
            b: Right checkpoint

        Returns:
            True if the chain was spliced
        """
        if a == v or v == b:
            return False

        self._collect_left(a, v)
        self._collect_right(v, b)

        best: Optional[Tuple[int, int, float]] = None
        best_balance = 0.0

        for lefts, rights in (
            (self._left_mins, self._right_maxs),
            (self._left_maxs, self._right_mins),
        ):
            best, best_balance = self._best_joint(lefts, rights, best, best_balance)

        if best is None:
            return False

        left, right, join = best
        self.chain.splice(left, right, join)
        return True

    def _best_joint(
        self,
        lefts: List[CandidatePoint],
        rights: List[CandidatePoint],
        best: Optional[Tuple[int, int, float]],
        best_balance: float,
    ) -> Tuple[Optional[Tuple[int, int, float]], float]:
        """Scan one orientation, never revisiting right candidates already beaten."""
        x, p = self.chain.x, self.chain.p
        start = 0
        for left in lefts:
            for k in range(start, len(rights)):
                right = rights[k]
                join = edge_cost(x[left.index] - x[right.index], p)
                balance = join - right.ev - left.ev
                if balance > best_balance:
                    best_balance = balance
                    best = (left.index, right.index, join)
                    start = k
        return best, best_balance

    def _collect_left(self, a: int, v: int) -> None:
        """Running extrema of [a, v), walking back from v."""
        x, prv, cost = self.chain.x, self.chain.prev, self.chain.cost
        mins, maxs = self._left_mins, self._left_maxs
        mins.clear()
        maxs.clear()

        ev = 0.0
        i = v
        lo = hi = x[v]
        while i != a:
            ev += cost[i]
            i = prv[i]
            if x[i] > hi:
                hi = x[i]
                maxs.append(CandidatePoint(i, ev))
            if x[i] < lo:
                lo = x[i]
                mins.append(CandidatePoint(i, ev))

    def _collect_right(self, v: int, b: int) -> None:
        """Running extrema of (v, b], walking forward from v."""
        x, nxt, cost = self.chain.x, self.chain.next, self.chain.cost
        mins, maxs = self._right_mins, self._right_maxs
        mins.clear()
        maxs.clear()

        ev = 0.0
        i = v
        lo = hi = x[v]
        while i != b:
            i = nxt[i]
            ev += cost[i]
            if x[i] > hi:
                hi = x[i]
                maxs.append(CandidatePoint(i, ev))
            if x[i] < lo:
                lo = x[i]
                mins.append(CandidatePoint(i, ev))


def merge_intervals(chain: Chain, checkpoint_stride: int = DEFAULT_CHECKPOINT_STRIDE) -> int:
    """Run the tournament merge on chain. Returns the number of rounds."""
    return IntervalMerger(chain, checkpoint_stride).run()
