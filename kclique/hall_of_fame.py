"""
Hall of fame for the hybrid genetic algorithm.

Bounded, duplicate-free collection of the best solutions seen over all
generations.
"""

import heapq
import itertools
from typing import List

from .data_models import Solution


class HallOfFame:
    """
    Bounded set of the best distinct solutions ever offered.

    Backed by a max-heap on score so the current worst member can be evicted
    when the capacity is exceeded. Membership uses exact equality of score
    and genes.

    Args:
        capacity: Maximum number of members
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"Hall of fame capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._heap = []
        self._keys = set()
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, solution: Solution) -> bool:
        return solution.key() in self._keys

    def offer(self, solution: Solution) -> bool:
        """
        Add a copy of `solution` unless already present, then evict the worst
        member if over capacity.

        Returns:
            True if the solution is a member after the call
        """
        key = solution.key()
        if key not in self._keys:
            self._keys.add(key)
            heapq.heappush(self._heap, (-solution.score, next(self._counter), solution.copy()))

        if len(self._heap) > self.capacity:
            _, _, evicted = heapq.heappop(self._heap)
            self._keys.discard(evicted.key())

        return key in self._keys

    def members(self) -> List[Solution]:
        """Copies of all members sorted by ascending score."""
        return sorted((entry[2].copy() for entry in self._heap), key=lambda s: s.score)

    def drain_sorted(self) -> List[Solution]:
        """Remove and return all members sorted by ascending score."""
        members = self.members()
        self._heap.clear()
        self._keys.clear()
        return members
