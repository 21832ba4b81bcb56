# Copyright (C) 2018 DataStorm
#
# This file is part of SpatialKNN.
#
# SpatialKNN is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# SpatialKNN is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# A copy of the GNU General Public License is available in the LICENSE
# file or at <http://www.gnu.org/licenses/>.
"""
Queue entries of the best-first traversal.
"""
import heapq

EPSILON = 1e-12


class Candidate:
    """
    A pending unit of work: either an item or an internal node to expand.

    Candidates compare on `distance` only, so that a heap of candidates
    always yields the cheapest one first. Ordering is exact, only equality
    tolerates floating point noise up to `EPSILON`.

    Attributes:
        distance (float): ranking key. A lower bound on the distance to
            anything inside the node for internal nodes, the caller's score
            for items.
        is_item (bool): whether the candidate wraps an item.
        envelope (AAMBR): envelope of the item or node.
        node (int): index in the traversal's pending items table (items) or
            pending nodes table (internal nodes).
    """
    __slots__ = ("distance", "is_item", "envelope", "node")

    def __init__(self, distance, is_item, envelope, node):
        object.__setattr__(self, "distance", distance)
        object.__setattr__(self, "is_item", is_item)
        object.__setattr__(self, "envelope", envelope)
        object.__setattr__(self, "node", node)

    def __setattr__(self, name, value):
        raise AttributeError("Candidate is immutable")

    def _replace(self, **kwargs):
        fields = {name: getattr(self, name) for name in self.__slots__}
        fields.update(kwargs)
        return self.__class__(**fields)

    def __eq__(self, other):
        if not isinstance(other, Candidate):
            return NotImplemented
        return abs(self.distance - other.distance) < EPSILON

    __hash__ = None

    def __lt__(self, other):
        return self.distance < other.distance

    def __le__(self, other):
        return self.distance <= other.distance

    def __gt__(self, other):
        return self.distance > other.distance

    def __ge__(self, other):
        return self.distance >= other.distance

    def __repr__(self):
        return "Candidate(distance={!r}, is_item={!r}, node={!r})".format(
            self.distance, self.is_item, self.node)


class CandidateQueue:
    """Min-priority queue of candidates on top of `heapq`."""
    __slots__ = ("_heap",)

    def __init__(self):
        self._heap = []

    def push(self, candidate):
        heapq.heappush(self._heap, candidate)

    def pop(self):
        """Removes and returns the cheapest candidate, None if empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap)

    def peek(self):
        if not self._heap:
            return None
        return self._heap[0]

    def __len__(self):
        return len(self._heap)

    def __bool__(self):
        return bool(self._heap)
